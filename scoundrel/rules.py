"""Rule engine for Scoundrel: rooms, combat, turn flow and scoring."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from . import cards
from .cards import Card, CardKind
from .state import (
    MAX_HEALTH,
    RESOLUTIONS_PER_ROOM,
    ROOM_SIZE,
    EquippedWeapon,
    GameSession,
    TurnPhase,
)

logger = logging.getLogger(__name__)

__all__ = [
    "RuleViolation",
    "InvalidSelection",
    "InvalidAction",
    "SelectResult",
    "FightResult",
    "deal_room",
    "avoid_room",
    "redeal_room",
    "resolve_card",
    "equip_weapon",
    "drink_potion",
    "begin_fight",
    "can_use_weapon",
    "resolve_fight",
    "select_card",
    "choose_fight_style",
    "is_dungeon_cleared",
    "score",
]


class RuleViolation(RuntimeError):
    """Base class for rejected player actions; state is left untouched."""


class InvalidSelection(RuleViolation):
    """Raised when a room index cannot be selected."""


class InvalidAction(RuleViolation):
    """Raised when an action is not allowed in the current phase."""


@dataclass(frozen=True, slots=True)
class SelectResult:
    """Outcome of selecting a room card."""

    card: Card
    healed: int = 0
    wasted: bool = False
    replaced_weapon: Card | None = None
    fight_pending: bool = False


@dataclass(frozen=True, slots=True)
class FightResult:
    """Outcome of a resolved fight."""

    monster: Card
    damage: int
    used_weapon: bool
    weapon_requested: bool
    fatal: bool


def _require_active(session: GameSession) -> None:
    if session.phase == TurnPhase.GAME_OVER:
        raise InvalidAction("game is over; restart to play again")


def _require_idle(session: GameSession) -> None:
    _require_active(session)
    if session.phase != TurnPhase.IDLE:
        raise InvalidAction("choose how to fight the selected monster first")


def _check_resolvable(session: GameSession, index: int) -> None:
    if index < 0 or index >= len(session.room):
        raise InvalidSelection(f"no card in room slot {index + 1}")
    if session.cards_resolved_this_room >= RESOLUTIONS_PER_ROOM:
        raise InvalidSelection("three cards already resolved in this room")


def _fill_room(session: GameSession) -> list[Card]:
    dealt: list[Card] = []
    while len(session.room) < ROOM_SIZE and session.dungeon:
        card = session.dungeon.pop(0)
        session.room.append(card)
        dealt.append(card)
    return dealt


def deal_room(session: GameSession) -> list[Card]:
    """Top the room up to four cards and start a new turn.

    Dealing stops silently when the dungeon runs out, leaving a short room.
    The room counter only advances when at least one card was dealt.
    """

    dealt = _fill_room(session)
    session.cards_resolved_this_room = 0
    session.potion_used_this_turn = False
    session.avoided_this_turn = False
    if dealt:
        session.room_number += 1
    logger.debug(
        "room %d dealt %s (dungeon %d left)",
        session.room_number,
        cards.format_cards(dealt),
        len(session.dungeon),
    )
    return dealt


def avoid_room(session: GameSession) -> None:
    """Send the whole room to the bottom of the dungeon and deal a new one."""

    _require_idle(session)
    if session.avoided_this_turn:
        raise InvalidAction("cannot avoid two rooms in a row")
    if not session.room:
        raise InvalidAction("there is no room to avoid")

    session.dungeon.extend(session.room)
    session.room.clear()
    deal_room(session)
    session.avoided_this_turn = True
    session.rooms_avoided += 1
    logger.info("room avoided (%d so far)", session.rooms_avoided)


def redeal_room(session: GameSession) -> list[Card]:
    """Manually top up a short room from the dungeon.

    The turn continues: potion, avoid and resolution limits are not reset.
    """

    _require_idle(session)
    if len(session.room) >= ROOM_SIZE:
        raise InvalidAction("room is already full")
    if not session.dungeon:
        raise InvalidAction("dungeon is empty")
    dealt = _fill_room(session)
    logger.debug("room topped up with %s", cards.format_cards(dealt))
    return dealt


def resolve_card(session: GameSession, index: int) -> Card:
    """Remove the card at ``index`` from the room and count the resolution."""

    _check_resolvable(session, index)
    card = session.room.pop(index)
    session.cards_resolved_this_room += 1
    if session.cards_resolved_this_room >= RESOLUTIONS_PER_ROOM:
        deal_room(session)
    return card


def equip_weapon(session: GameSession, card: Card) -> Card | None:
    """Equip ``card``, discarding the previous weapon if any.

    The weapon ceiling is deliberately left as it is.
    """

    if not card.is_weapon:
        raise InvalidSelection(f"{card.code} is not a weapon")
    replaced = session.weapon.card if session.weapon is not None else None
    if replaced is not None:
        session.discard(replaced)
    session.weapon = EquippedWeapon(card=card)
    logger.debug("equipped %s (ceiling %d)", card.code, session.weapon_ceiling)
    return replaced


def drink_potion(session: GameSession, card: Card) -> int:
    """Drink ``card`` and return the health actually restored."""

    if not card.is_potion:
        raise InvalidSelection(f"{card.code} is not a potion")
    healed = 0
    if not session.potion_used_this_turn:
        healed = min(MAX_HEALTH, session.health + card.rank) - session.health
        session.health += healed
        session.potion_used_this_turn = True
    session.discard(card)
    return healed


def begin_fight(session: GameSession, index: int) -> None:
    """Mark the monster at ``index`` as awaiting a fight-style decision."""

    _require_idle(session)
    _check_resolvable(session, index)
    if not session.room[index].is_monster:
        raise InvalidSelection(f"{session.room[index].code} is not a monster")
    session.pending_fight = index
    session.phase = TurnPhase.AWAITING_FIGHT_CHOICE


def can_use_weapon(session: GameSession, monster: Card) -> bool:
    """Return ``True`` when the equipped weapon may be used on ``monster``."""

    return session.weapon is not None and monster.rank <= session.weapon_ceiling


def resolve_fight(session: GameSession, use_weapon: bool) -> FightResult:
    """Apply the pending fight and return the damage dealt to the player.

    A weapon request against a monster above the ceiling quietly becomes a
    barehanded fight.
    """

    _require_active(session)
    index = session.pending_fight
    if session.phase != TurnPhase.AWAITING_FIGHT_CHOICE or index is None:
        raise InvalidAction("no monster is waiting to be fought")

    monster = session.room[index]
    weapon = session.weapon
    with_weapon = use_weapon and weapon is not None and can_use_weapon(session, monster)
    if with_weapon and weapon is not None:
        damage = max(0, monster.rank - weapon.rank)
        session.weapon_ceiling = monster.rank
        weapon.last_slain = monster.rank
    else:
        damage = monster.rank

    session.health -= damage
    session.discard(monster)
    session.pending_fight = None
    fatal = session.health <= 0
    if fatal:
        # Terminal: vacate the slot but leave the dungeon as it is for scoring.
        session.room.pop(index)
        session.cards_resolved_this_room += 1
        session.phase = TurnPhase.GAME_OVER
        logger.info("slain by %s at health %d", monster.code, session.health)
    else:
        session.phase = TurnPhase.IDLE
        resolve_card(session, index)

    logger.debug(
        "fought %s %s for %d damage (health %d, ceiling %d)",
        monster.code,
        "armed" if with_weapon else "barehanded",
        damage,
        session.health,
        session.weapon_ceiling,
    )
    return FightResult(
        monster=monster,
        damage=damage,
        used_weapon=with_weapon,
        weapon_requested=use_weapon,
        fatal=fatal,
    )


def select_card(session: GameSession, index: int) -> SelectResult:
    """Act on the room card at ``index`` according to its kind."""

    _require_idle(session)
    _check_resolvable(session, index)
    card = session.room[index]

    if card.kind is CardKind.MONSTER:
        begin_fight(session, index)
        return SelectResult(card=card, fight_pending=True)

    if card.kind is CardKind.WEAPON:
        replaced = equip_weapon(session, card)
        resolve_card(session, index)
        return SelectResult(card=card, replaced_weapon=replaced)

    already_used = session.potion_used_this_turn
    healed = drink_potion(session, card)
    resolve_card(session, index)
    return SelectResult(card=card, healed=healed, wasted=already_used)


def choose_fight_style(session: GameSession, barehanded: bool) -> FightResult:
    """Resolve the pending fight barehanded or with the equipped weapon."""

    _require_active(session)
    if session.phase != TurnPhase.AWAITING_FIGHT_CHOICE:
        raise InvalidAction("select a monster before choosing how to fight")
    return resolve_fight(session, use_weapon=not barehanded)


def is_dungeon_cleared(session: GameSession) -> bool:
    """Return ``True`` once the player has survived every card."""

    return session.health > 0 and not session.room and not session.dungeon


def score(session: GameSession) -> int:
    """Return the score of ``session`` as it stands right now."""

    if session.health <= 0:
        return session.health - cards.monster_total(session.dungeon)
    last = session.last_discard
    if session.health == MAX_HEALTH and last is not None and last.is_potion:
        return session.health + last.rank
    return session.health
