"""Core game state data structures for Scoundrel."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final, List

from . import cards
from .cards import Card

logger = logging.getLogger(__name__)

MAX_HEALTH: Final[int] = 20
ROOM_SIZE: Final[int] = 4
RESOLUTIONS_PER_ROOM: Final[int] = 3
UNRESTRICTED_CEILING: Final[int] = cards.MAX_MONSTER_RANK


class TurnPhase(str, Enum):
    """Phases of the turn state machine."""

    IDLE = "idle"
    AWAITING_FIGHT_CHOICE = "awaiting_fight_choice"
    GAME_OVER = "game_over"


@dataclass(slots=True)
class SessionConfig:
    """Per-session settings supplied by the caller."""

    debug: bool = False
    seed: int | None = None


@dataclass(slots=True)
class EquippedWeapon:
    """The weapon currently held and the last monster it slew."""

    card: Card
    last_slain: int = 0

    @property
    def rank(self) -> int:
        return self.card.rank


@dataclass(slots=True)
class GameSession:
    """Mutable state of a single running game."""

    health: int = MAX_HEALTH
    dungeon: List[Card] = field(default_factory=list)
    room: List[Card] = field(default_factory=list)
    discard_pile: List[Card] = field(default_factory=list)
    weapon: EquippedWeapon | None = None
    weapon_ceiling: int = UNRESTRICTED_CEILING
    pending_fight: int | None = None
    potion_used_this_turn: bool = False
    avoided_this_turn: bool = False
    cards_resolved_this_room: int = 0
    phase: TurnPhase = TurnPhase.IDLE
    config: SessionConfig = field(default_factory=SessionConfig)
    room_number: int = 0
    rooms_avoided: int = 0

    @property
    def is_over(self) -> bool:
        return self.phase == TurnPhase.GAME_OVER

    @property
    def last_discard(self) -> Card | None:
        return self.discard_pile[-1] if self.discard_pile else None

    def discard(self, card: Card) -> None:
        """Append ``card`` to the discard pile."""

        self.discard_pile.append(card)


def new_session(config: SessionConfig | None = None, rng: Any | None = None) -> GameSession:
    """Build and shuffle a deck and deal the opening room.

    When ``rng`` is omitted a :class:`random.Random` is seeded from
    ``config.seed``, or from system entropy when no seed is configured. The
    seed actually used is recorded on the returned session's config.
    """

    config = config if config is not None else SessionConfig()
    if rng is None:
        seed = config.seed
        if seed is None:
            seed = random.SystemRandom().randrange(0, 2**63)
        config = SessionConfig(debug=config.debug, seed=seed)
        rng = random.Random(seed)

    deck = cards.shuffle_deck(cards.build_deck(), rng)
    session = GameSession(dungeon=deck, config=config)

    from .rules import deal_room  # Local import to avoid cycles

    deal_room(session)
    logger.info("new session seed=%s room=%s", config.seed, cards.format_cards(session.room))
    return session
