"""Top-level package for the Scoundrel game engine."""

from . import actions, cards, rules, snapshot, state

__all__ = [
    "actions",
    "cards",
    "rules",
    "snapshot",
    "state",
]
