"""Read-only views of a session for presentation layers."""

from __future__ import annotations

from dataclasses import dataclass

from . import rules
from .cards import Card, CardKind, Suit
from .state import GameSession, TurnPhase


@dataclass(frozen=True, slots=True)
class RoomCardView:
    """A room card as seen by the player."""

    slot: int
    suit: Suit
    rank: int
    kind: CardKind
    code: str
    pending: bool


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Immutable summary of everything a front-end needs to draw."""

    health: int
    dungeon_size: int
    room: tuple[RoomCardView, ...]
    pending_index: int | None
    weapon: Card | None
    weapon_ceiling: int
    weapon_last_slain: int
    discard_size: int
    score: int
    game_over: bool
    dungeon_cleared: bool
    fight_pending: bool
    avoid_available: bool
    potion_available: bool
    cards_resolved: int
    room_number: int
    rooms_avoided: int
    dungeon_preview: tuple[Card, ...] = ()


def take_snapshot(session: GameSession) -> SessionSnapshot:
    """Return a :class:`SessionSnapshot` of ``session``.

    The dungeon order is only exposed when the session runs in debug mode.
    """

    room = tuple(
        RoomCardView(
            slot=idx,
            suit=card.suit,
            rank=card.rank,
            kind=card.kind,
            code=card.code,
            pending=idx == session.pending_fight,
        )
        for idx, card in enumerate(session.room)
    )
    weapon = session.weapon
    idle = session.phase == TurnPhase.IDLE
    return SessionSnapshot(
        health=session.health,
        dungeon_size=len(session.dungeon),
        room=room,
        pending_index=session.pending_fight,
        weapon=weapon.card if weapon is not None else None,
        weapon_ceiling=session.weapon_ceiling,
        weapon_last_slain=weapon.last_slain if weapon is not None else 0,
        discard_size=len(session.discard_pile),
        score=rules.score(session),
        game_over=session.is_over,
        dungeon_cleared=rules.is_dungeon_cleared(session),
        fight_pending=session.phase == TurnPhase.AWAITING_FIGHT_CHOICE,
        avoid_available=idle and bool(session.room) and not session.avoided_this_turn,
        potion_available=not session.potion_used_this_turn,
        cards_resolved=session.cards_resolved_this_room,
        room_number=session.room_number,
        rooms_avoided=session.rooms_avoided,
        dungeon_preview=tuple(session.dungeon) if session.config.debug else (),
    )
