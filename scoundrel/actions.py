"""Player action objects and the dispatcher used by front-ends."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Union

from . import rules, state
from .state import GameSession, SessionConfig, TurnPhase

logger = logging.getLogger(__name__)

__all__ = [
    "SelectCard",
    "ChooseFightStyle",
    "AvoidRoom",
    "RedealRoom",
    "Restart",
    "Action",
    "Outcome",
    "legal_actions",
    "dispatch",
    "describe_action",
]


@dataclass(frozen=True)
class SelectCard:
    """Pick the room card in slot ``index`` (0-based)."""

    index: int


@dataclass(frozen=True)
class ChooseFightStyle:
    """Settle the pending fight barehanded or with the equipped weapon."""

    barehanded: bool


@dataclass(frozen=True)
class AvoidRoom:
    """Skip the current room."""


@dataclass(frozen=True)
class RedealRoom:
    """Top up a short room from the dungeon."""


@dataclass(frozen=True)
class Restart:
    """Abandon the current game and start a fresh one."""


Action = Union[SelectCard, ChooseFightStyle, AvoidRoom, RedealRoom, Restart]


@dataclass(frozen=True)
class Outcome:
    """Result of dispatching an action.

    ``session`` is the session to keep using: the same object for in-place
    actions, a new one after ``Restart``.
    """

    session: GameSession
    accepted: bool
    message: str
    result: rules.SelectResult | rules.FightResult | None = None


def legal_actions(session: GameSession) -> list[Action]:
    """Return the distinct actions ``dispatch`` would currently accept.

    A weapon request that would degrade to a barehanded fight is not listed.
    """

    options: list[Action] = []
    if session.phase == TurnPhase.GAME_OVER:
        return [Restart()]
    if session.phase == TurnPhase.AWAITING_FIGHT_CHOICE:
        options.append(ChooseFightStyle(barehanded=True))
        if session.weapon is not None and session.pending_fight is not None:
            monster = session.room[session.pending_fight]
            if rules.can_use_weapon(session, monster):
                options.append(ChooseFightStyle(barehanded=False))
        options.append(Restart())
        return options

    if session.cards_resolved_this_room < state.RESOLUTIONS_PER_ROOM:
        options.extend(SelectCard(index) for index in range(len(session.room)))
    if session.room and not session.avoided_this_turn:
        options.append(AvoidRoom())
    if len(session.room) < state.ROOM_SIZE and session.dungeon:
        options.append(RedealRoom())
    options.append(Restart())
    return options


def _restart(session: GameSession, rng: Any | None) -> GameSession:
    seed_source = rng if rng is not None else random.SystemRandom()
    config = SessionConfig(debug=session.config.debug, seed=seed_source.randrange(0, 2**63))
    return state.new_session(config)


def _apply(session: GameSession, action: Action) -> tuple[str, rules.SelectResult | rules.FightResult | None]:
    if isinstance(action, SelectCard):
        selected = rules.select_card(session, action.index)
        return _describe_select(selected), selected
    if isinstance(action, ChooseFightStyle):
        fight = rules.choose_fight_style(session, action.barehanded)
        return _describe_fight(fight), fight
    if isinstance(action, AvoidRoom):
        rules.avoid_room(session)
        return "Avoided the room", None
    if isinstance(action, RedealRoom):
        dealt = rules.redeal_room(session)
        return f"Dealt {len(dealt)} card(s)", None
    raise TypeError(f"unsupported action {action!r}")


def dispatch(session: GameSession, action: Action, rng: Any | None = None) -> Outcome:
    """Apply ``action`` to ``session``.

    Rule violations are reported through a rejected :class:`Outcome` and leave
    the session unchanged.
    """

    if isinstance(action, Restart):
        fresh = _restart(session, rng)
        return Outcome(session=fresh, accepted=True, message="New dungeon shuffled")

    try:
        message, result = _apply(session, action)
    except rules.RuleViolation as exc:
        logger.debug("rejected %r: %s", action, exc)
        return Outcome(session=session, accepted=False, message=str(exc))
    return Outcome(session=session, accepted=True, message=message, result=result)


def _describe_select(result: rules.SelectResult) -> str:
    card = result.card
    if result.fight_pending:
        return f"Facing {card.code}: fight with weapon or barehanded?"
    if card.is_weapon:
        if result.replaced_weapon is not None:
            return f"Equipped {card.code}, discarded {result.replaced_weapon.code}"
        return f"Equipped {card.code}"
    if result.wasted:
        return f"{card.code} wasted: already drank a potion this room"
    return f"Drank {card.code}, healed {result.healed}"


def _describe_fight(result: rules.FightResult) -> str:
    style = "with weapon" if result.used_weapon else "barehanded"
    text = f"Fought {result.monster.code} {style}, took {result.damage} damage"
    if result.weapon_requested and not result.used_weapon:
        text += " (no usable weapon)"
    if result.fatal:
        text += " and fell"
    return text


def describe_action(action: Action) -> str:
    """Return a short human readable label for ``action``."""

    if isinstance(action, SelectCard):
        return f"Select slot {action.index + 1}"
    if isinstance(action, ChooseFightStyle):
        return "Fight barehanded" if action.barehanded else "Fight with weapon"
    if isinstance(action, AvoidRoom):
        return "Avoid room"
    if isinstance(action, RedealRoom):
        return "Redeal room"
    if isinstance(action, Restart):
        return "Restart"
    raise TypeError(f"unsupported action {action!r}")
