"""Simulation harness that plays Scoundrel with a heuristic autoplayer."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

import numpy as np

from . import actions, rules, scoreboard, state
from .cards import Card
from .state import GameSession, SessionConfig, TurnPhase

logger = logging.getLogger(__name__)

__all__ = ["SimulationReport", "choose_action", "play_game", "run_simulation"]

TURN_LIMIT = 400


@dataclass(frozen=True, slots=True)
class SimulationReport:
    """Summary of a batch of autoplayed games."""

    history: scoreboard.RunHistory
    mean_score: float
    std_score: float
    median_score: float
    clear_rate: float


def _expected_damage(session: GameSession, monster: Card) -> int:
    weapon = session.weapon
    if weapon is not None and rules.can_use_weapon(session, monster):
        return max(0, monster.rank - weapon.rank)
    return monster.rank


def _prefer_weapon(session: GameSession, monster: Card) -> bool:
    if not rules.can_use_weapon(session, monster):
        return False
    # Keep the ceiling high for small monsters.
    return not (monster.rank <= 3 and session.health > monster.rank + 5)


def _card_cost(session: GameSession, card: Card) -> float:
    if card.is_potion:
        if session.potion_used_this_turn or session.health >= state.MAX_HEALTH:
            return 30.0
        return -2.0 * min(card.rank, state.MAX_HEALTH - session.health)
    if card.is_weapon:
        current = session.weapon
        if current is None or card.rank > current.rank or session.weapon_ceiling < 6:
            return -float(card.rank)
        return 25.0 - card.rank
    return float(_expected_damage(session, card))


def choose_action(session: GameSession) -> actions.Action | None:
    """Return the autoplayer's next action, or ``None`` when nothing is left to do."""

    if session.phase == TurnPhase.GAME_OVER:
        return None
    if session.phase == TurnPhase.AWAITING_FIGHT_CHOICE and session.pending_fight is not None:
        monster = session.room[session.pending_fight]
        return actions.ChooseFightStyle(barehanded=not _prefer_weapon(session, monster))
    if not session.room:
        return None

    threat = sum(_expected_damage(session, card) for card in session.room if card.is_monster)
    if not session.avoided_this_turn and session.dungeon and threat >= session.health:
        return actions.AvoidRoom()

    best = min(range(len(session.room)), key=lambda idx: _card_cost(session, session.room[idx]))
    return actions.SelectCard(best)


def play_game(session: GameSession) -> GameSession:
    """Autoplay ``session`` until it ends and return it."""

    for _ in range(TURN_LIMIT):
        action = choose_action(session)
        if action is None:
            break
        outcome = actions.dispatch(session, action)
        if not outcome.accepted:
            raise RuntimeError(f"autoplayer chose a rejected action: {outcome.message}")
    return session


def run_simulation(games: int, seed: int) -> SimulationReport:
    """Play ``games`` seeded games and collect score statistics."""

    if games <= 0:
        raise ValueError("games must be positive")

    rng = random.Random(seed)
    history = scoreboard.RunHistory()
    for _ in range(games):
        config = SessionConfig(seed=rng.randrange(0, 2**63))
        session = play_game(state.new_session(config))
        summary = scoreboard.summarise(session, history.next_run_number())
        history.record(summary)
        logger.debug("run %d seed=%s score=%d", summary.run_number, config.seed, summary.score)

    scores = np.array([run.score for run in history.runs], dtype=np.int64)
    clears = np.array([run.cleared for run in history.runs], dtype=bool)
    return SimulationReport(
        history=history,
        mean_score=float(np.mean(scores)),
        std_score=float(np.std(scores)),
        median_score=float(np.median(scores)),
        clear_rate=float(np.mean(clears)),
    )
