"""Tests covering the Scoundrel rule engine."""

from __future__ import annotations

import logging
from typing import Sequence

import pytest

from scoundrel import rules
from scoundrel.cards import Card
from scoundrel.state import EquippedWeapon, GameSession, TurnPhase


def _cards(codes: Sequence[str]) -> list[Card]:
    return [Card.from_code(code) for code in codes]


def _session(room: Sequence[str], dungeon: Sequence[str] = (), *, health: int = 20) -> GameSession:
    return GameSession(health=health, room=_cards(room), dungeon=_cards(dungeon))


def _fight(session: GameSession, index: int, *, barehanded: bool) -> rules.FightResult:
    rules.select_card(session, index)
    return rules.choose_fight_style(session, barehanded=barehanded)


def test_deal_room_fills_to_four_and_resets_turn() -> None:
    session = _session(["3C"], ["4C", "5H", "6D", "7S", "8S"])
    session.cards_resolved_this_room = 3
    session.potion_used_this_turn = True
    session.avoided_this_turn = True

    dealt = rules.deal_room(session)

    assert dealt == _cards(["4C", "5H", "6D"])
    assert session.room == _cards(["3C", "4C", "5H", "6D"])
    assert session.dungeon == _cards(["7S", "8S"])
    assert session.cards_resolved_this_room == 0
    assert not session.potion_used_this_turn
    assert not session.avoided_this_turn


def test_deal_room_stops_when_dungeon_runs_out() -> None:
    session = _session(["3C"], ["4C"])

    rules.deal_room(session)

    assert session.room == _cards(["3C", "4C"])
    assert session.dungeon == []


def test_three_resolutions_refill_and_carry_last_card() -> None:
    session = _session(["2D", "3H", "4D", "9C"], ["5C", "6C", "7C", "8C"], health=15)

    rules.select_card(session, 0)
    rules.select_card(session, 0)
    assert session.cards_resolved_this_room == 2
    rules.select_card(session, 0)

    assert session.room == _cards(["9C", "5C", "6C", "7C"])
    assert Card.from_code("9C") not in session.discard_pile
    assert session.dungeon == _cards(["8C"])
    assert session.cards_resolved_this_room == 0


@pytest.mark.parametrize("index", [-1, 4, 10])
def test_select_out_of_range_is_rejected(index: int) -> None:
    session = _session(["2C", "3C", "4C", "5C"], ["6C"])

    with pytest.raises(rules.InvalidSelection):
        rules.select_card(session, index)

    assert session.room == _cards(["2C", "3C", "4C", "5C"])
    assert session.health == 20
    assert session.discard_pile == []


def test_select_after_three_resolutions_is_rejected() -> None:
    session = _session(["2H", "3C"])
    session.cards_resolved_this_room = 3

    with pytest.raises(rules.InvalidSelection):
        rules.select_card(session, 0)
    with pytest.raises(rules.InvalidSelection):
        rules.resolve_card(session, 0)
    assert len(session.room) == 2


def test_equip_discards_previous_weapon_and_keeps_ceiling() -> None:
    session = _session(["8D", "2C", "3C", "4C"])
    session.weapon = EquippedWeapon(card=Card.from_code("5D"), last_slain=7)
    session.weapon_ceiling = 7

    result = rules.select_card(session, 0)

    assert result.replaced_weapon == Card.from_code("5D")
    assert session.weapon is not None
    assert session.weapon.card == Card.from_code("8D")
    assert session.weapon.last_slain == 0
    assert session.weapon_ceiling == 7
    assert session.discard_pile == _cards(["5D"])


def test_potion_heals_and_clamps_at_twenty() -> None:
    session = _session(["9H", "2C", "3C", "4C"], health=15)

    result = rules.select_card(session, 0)

    assert result.healed == 5
    assert session.health == 20
    assert session.potion_used_this_turn
    assert session.discard_pile == _cards(["9H"])


@pytest.mark.parametrize(
    ("health", "ranks"),
    [
        (1, [10]),
        (12, [10]),
        (20, [2]),
        (18, [5, 9, 7]),
        (3, [10, 10, 10, 10]),
    ],
)
def test_health_never_exceeds_cap(health: int, ranks: list[int]) -> None:
    session = _session([], health=health)
    for rank in ranks:
        session.room = _cards([f"{rank}H", "2C"])
        session.cards_resolved_this_room = 0
        session.potion_used_this_turn = False
        rules.select_card(session, 0)
        assert session.health <= 20
    assert session.health == min(20, health + sum(ranks))


def test_second_potion_in_same_room_is_wasted() -> None:
    session = _session(["5H", "7H", "3C", "4C"], health=10)

    first = rules.select_card(session, 0)
    second = rules.select_card(session, 0)

    assert first.healed == 5 and not first.wasted
    assert second.healed == 0 and second.wasted
    assert session.health == 15
    assert session.discard_pile == _cards(["5H", "7H"])


def test_potion_flag_resets_with_new_room() -> None:
    session = _session(["5H", "2D", "3D", "7H"], ["8C", "9C", "10C"], health=5)

    rules.select_card(session, 0)
    rules.select_card(session, 0)
    rules.select_card(session, 0)
    assert session.room[0] == Card.from_code("7H")
    assert not session.potion_used_this_turn

    rules.select_card(session, 0)
    assert session.health == 17


def test_monster_selection_waits_for_fight_choice() -> None:
    session = _session(["9S", "2C", "3C", "4C"])

    result = rules.select_card(session, 0)

    assert result.fight_pending
    assert session.phase == TurnPhase.AWAITING_FIGHT_CHOICE
    assert session.pending_fight == 0
    assert session.room[0] == Card.from_code("9S")
    assert session.health == 20
    assert session.cards_resolved_this_room == 0


def test_pending_fight_blocks_other_actions() -> None:
    session = _session(["9S", "2H", "3C", "4C"], ["5C"])
    rules.select_card(session, 0)

    with pytest.raises(rules.InvalidAction):
        rules.select_card(session, 1)
    with pytest.raises(rules.InvalidAction):
        rules.avoid_room(session)
    assert session.pending_fight == 0
    assert session.room == _cards(["9S", "2H", "3C", "4C"])


def test_fight_style_requires_pending_monster() -> None:
    session = _session(["9S", "2C", "3C", "4C"])

    with pytest.raises(rules.InvalidAction):
        rules.choose_fight_style(session, barehanded=True)
    with pytest.raises(rules.InvalidAction):
        rules.resolve_fight(session, use_weapon=True)


def test_barehanded_fight_takes_full_damage() -> None:
    session = _session(["9S", "2C", "3C", "4C"])
    session.weapon = EquippedWeapon(card=Card.from_code("7D"))

    result = _fight(session, 0, barehanded=True)

    assert result.damage == 9
    assert not result.used_weapon
    assert session.health == 11
    assert session.weapon_ceiling == 14
    assert session.weapon.last_slain == 0
    assert session.phase == TurnPhase.IDLE
    assert session.pending_fight is None
    assert session.discard_pile == _cards(["9S"])
    assert session.room == _cards(["2C", "3C", "4C"])


def test_weapon_fight_without_weapon_degrades_to_barehanded() -> None:
    session = _session(["6C", "2C", "3C", "4C"])

    result = _fight(session, 0, barehanded=False)

    assert result.weapon_requested
    assert not result.used_weapon
    assert session.health == 14


def test_weapon_over_ceiling_degrades_to_barehanded() -> None:
    session = _session(["12C", "2C", "3C", "4C"])
    session.weapon = EquippedWeapon(card=Card.from_code("9D"), last_slain=10)
    session.weapon_ceiling = 10

    result = _fight(session, 0, barehanded=False)

    assert not result.used_weapon
    assert result.damage == 12
    assert session.health == 8
    assert session.weapon_ceiling == 10
    assert session.weapon.last_slain == 10


def test_weapon_damage_never_negative() -> None:
    session = _session(["3S", "2C", "3C", "4C"])
    session.weapon = EquippedWeapon(card=Card.from_code("8D"))

    result = _fight(session, 0, barehanded=False)

    assert result.damage == 0
    assert session.health == 20
    assert session.weapon_ceiling == 3


def test_weapon_ceiling_is_non_increasing() -> None:
    session = _session([])
    session.weapon = EquippedWeapon(card=Card.from_code("9D"))
    ceilings = [session.weapon_ceiling]

    for code in ["QS", "10C", "JS", "6C", "6S", "2C"]:
        session.room = _cards([code, "2H"])
        session.cards_resolved_this_room = 0
        _fight(session, 0, barehanded=False)
        ceilings.append(session.weapon_ceiling)

    assert ceilings == [14, 12, 10, 10, 6, 6, 2]
    assert all(later <= earlier for earlier, later in zip(ceilings, ceilings[1:]))
    assert session.health == 20 - 3 - 1 - 11


def test_ceiling_allows_equal_rank() -> None:
    session = _session(["10C", "2C", "3C", "4C"])
    session.weapon = EquippedWeapon(card=Card.from_code("5D"), last_slain=10)
    session.weapon_ceiling = 10

    result = _fight(session, 0, barehanded=False)

    assert result.used_weapon
    assert result.damage == 5


def test_fatal_fight_ends_game_and_rejects_actions() -> None:
    session = _session(["AS", "2C", "3H", "4C"], ["5C", "6C"], health=5)

    result = _fight(session, 0, barehanded=True)

    assert result.fatal
    assert session.health == -9
    assert session.phase == TurnPhase.GAME_OVER
    assert session.room == _cards(["2C", "3H", "4C"])
    assert session.dungeon == _cards(["5C", "6C"])
    for attempt in (
        lambda: rules.select_card(session, 0),
        lambda: rules.avoid_room(session),
        lambda: rules.redeal_room(session),
        lambda: rules.choose_fight_style(session, barehanded=True),
    ):
        with pytest.raises(rules.InvalidAction):
            attempt()
    assert session.health == -9


def test_avoid_moves_room_to_dungeon_bottom() -> None:
    session = _session(["2C", "3H", "4D", "5S"], ["6C", "7C", "8C", "9C", "10C"])

    rules.avoid_room(session)

    assert session.room == _cards(["6C", "7C", "8C", "9C"])
    assert session.dungeon == _cards(["10C", "2C", "3H", "4D", "5S"])
    assert session.avoided_this_turn
    assert session.rooms_avoided == 1
    assert session.discard_pile == []


def test_avoid_twice_in_a_row_is_rejected() -> None:
    session = _session(["2C", "3H", "4D", "5S"], ["6C", "7C", "8C", "9C", "10C"])
    rules.avoid_room(session)
    room_before = list(session.room)
    dungeon_before = list(session.dungeon)

    with pytest.raises(rules.InvalidAction):
        rules.avoid_room(session)

    assert session.room == room_before
    assert session.dungeon == dungeon_before
    assert session.rooms_avoided == 1


def test_avoid_allowed_again_after_playing_a_room() -> None:
    session = _session(["2H", "3D", "4D", "5S"], ["6H", "7D", "8D", "9S", "10C", "JC", "QC"])
    rules.avoid_room(session)
    for _ in range(3):
        rules.select_card(session, 0)

    assert not session.avoided_this_turn
    rules.avoid_room(session)
    assert session.rooms_avoided == 2


def test_redeal_tops_up_short_room_only() -> None:
    session = _session(["2C", "3C", "4C", "5C"], ["6C", "7C"])
    with pytest.raises(rules.InvalidAction):
        rules.redeal_room(session)

    session.room.pop()
    dealt = rules.redeal_room(session)
    assert dealt == _cards(["6C"])
    assert len(session.room) == 4

    empty = _session(["2C"])
    with pytest.raises(rules.InvalidAction):
        rules.redeal_room(empty)


def test_redeal_keeps_potion_limit_for_the_turn() -> None:
    session = _session(["2H", "3H", "4H", "5H"], ["6C", "7C"], health=5)

    first = rules.select_card(session, 0)
    assert first.healed == 2
    rules.redeal_room(session)
    assert session.potion_used_this_turn
    assert session.cards_resolved_this_room == 1

    second = rules.select_card(session, 0)
    assert second.wasted
    assert session.health == 7
    assert session.cards_resolved_this_room == 2


def test_redeal_does_not_allow_avoiding_twice_in_a_row() -> None:
    session = _session(["2C", "3C", "4C", "5C"], ["6D", "7D", "8D", "9D", "10D"])
    rules.avoid_room(session)
    rules.select_card(session, 0)
    rules.redeal_room(session)
    room_before = list(session.room)

    with pytest.raises(rules.InvalidAction):
        rules.avoid_room(session)

    assert session.room == room_before
    assert session.rooms_avoided == 1


def test_redeal_does_not_count_a_new_room() -> None:
    session = _session(["2H", "3D", "4D", "5S"], ["6H", "7D"])
    session.room_number = 1
    rules.select_card(session, 0)

    rules.redeal_room(session)

    assert session.room_number == 1


def test_empty_refill_does_not_count_a_room() -> None:
    session = _session(["2H", "3D", "4D"])
    session.room_number = 1

    for _ in range(3):
        rules.select_card(session, 0)

    assert session.room == []
    assert session.room_number == 1
    assert rules.is_dungeon_cleared(session)


def test_main_transitions_are_logged_at_info(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="scoundrel")
    session = _session(["2C", "3H", "4D", "5S"], ["AS", "7C", "8C", "9C", "10C"], health=5)

    rules.avoid_room(session)
    _fight(session, 0, barehanded=True)

    messages = [record.getMessage() for record in caplog.records if record.levelno == logging.INFO]
    assert any("room avoided" in message for message in messages)
    assert any("slain by AS" in message for message in messages)


def test_dungeon_cleared_after_last_card() -> None:
    session = _session(["3H"], health=12)
    assert not rules.is_dungeon_cleared(session)

    rules.select_card(session, 0)

    assert rules.is_dungeon_cleared(session)
    with pytest.raises(rules.InvalidSelection):
        rules.select_card(session, 0)
    with pytest.raises(rules.InvalidAction):
        rules.avoid_room(session)


def test_score_while_alive_is_health() -> None:
    session = _session([], ["9C"], health=14)
    session.discard_pile = _cards(["5H"])
    assert rules.score(session) == 14


def test_score_bonus_for_full_health_potion() -> None:
    session = _session([], health=20)
    session.discard_pile = _cards(["3C", "6H"])
    assert rules.score(session) == 26

    session.discard_pile.append(Card.from_code("2C"))
    assert rules.score(session) == 20


def test_score_penalises_monsters_left_in_dungeon() -> None:
    session = _session(["KS"], ["9C", "5H", "4S", "8D"], health=-3)

    assert rules.score(session) == -16
