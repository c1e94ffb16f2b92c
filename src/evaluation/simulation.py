"""
Self-play simulation.

Runs many seeded games with a ``DeductionPlayer`` in every seat, optionally
across a process pool, and summarizes the outcomes.
"""

import logging
import multiprocessing as mp
import random
from dataclasses import dataclass, field

import numpy as np
from tqdm import tqdm

from src.agent.player import DeductionPlayer
from src.evaluation.statistics import (
    compute_confidence_interval,
    compute_percentiles,
    compute_rate_confidence_interval,
    score_histogram,
)
from src.game.cards import Variant
from src.game.rules import HanabiGame
from src.game.state import GamePhase
from src.shared.config import Config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameResult:
    """
    Outcome of one simulated game.

    Attributes:
        seed: Deck shuffle seed
        score: Final score
        max_score: Best score that was still reachable at the end
        strikes: Failed plays
        turns: Moves made
        phase: Final phase
    """

    seed: int
    score: int
    max_score: int
    strikes: int
    turns: int
    phase: GamePhase


@dataclass
class SimulationSummary:
    """Aggregated results of a batch of games."""

    num_games: int
    num_players: int
    perfect_score: int
    mean_score: float
    score_ci: tuple[float, float]
    perfect_rate: float
    perfect_ci: tuple[float, float]
    strikeout_rate: float
    invalid_games: int
    quartiles: list[float]
    histogram: list[int]
    results: list[GameResult] = field(repr=False, default_factory=list)

    @classmethod
    def from_results(
        cls,
        results: list[GameResult],
        num_players: int,
        perfect_score: int,
        confidence_level: float = 0.95,
    ) -> "SimulationSummary":
        scores = [r.score for r in results]
        mean, lower, upper = compute_confidence_interval(scores, confidence_level)
        perfect = sum(1 for r in results if r.score == perfect_score)
        rate, rate_lower, rate_upper = compute_rate_confidence_interval(
            perfect, len(results), confidence_level
        )
        lost = sum(1 for r in results if r.phase == GamePhase.LOST)
        invalid = sum(1 for r in results if r.phase == GamePhase.INVALID)
        return cls(
            num_games=len(results),
            num_players=num_players,
            perfect_score=perfect_score,
            mean_score=mean,
            score_ci=(lower, upper),
            perfect_rate=rate,
            perfect_ci=(rate_lower, rate_upper),
            strikeout_rate=lost / len(results) if results else 0.0,
            invalid_games=invalid,
            quartiles=compute_percentiles(scores),
            histogram=score_histogram(scores, perfect_score) if results else [],
            results=results,
        )

    def __str__(self) -> str:
        return (
            f"SimulationSummary(\n"
            f"  Games: {self.num_games} ({self.num_players} players)\n"
            f"  Mean score: {self.mean_score:.2f} / {self.perfect_score} "
            f"[{self.score_ci[0]:.2f}, {self.score_ci[1]:.2f}]\n"
            f"  Perfect games: {self.perfect_rate * 100:.1f}% "
            f"[{self.perfect_ci[0] * 100:.1f}%, {self.perfect_ci[1] * 100:.1f}%]\n"
            f"  Strikeouts: {self.strikeout_rate * 100:.1f}%\n"
            f"  Invalid games: {self.invalid_games}\n"
            f"  Quartiles: {self.quartiles}\n"
            f")"
        )


def play_game(seed: int, config: Config) -> GameResult:
    """Play one self-play game with the deck shuffled by ``seed``."""
    num_players = config.simulation.num_players
    variant = Variant.from_config(config.rules)
    players = [DeductionPlayer.from_config(config) for _ in range(num_players)]
    game = HanabiGame(players, variant=variant, seed=seed)
    game.run()
    logger.debug(f"Game {seed} ended {game.phase} with score {game.score}")
    return GameResult(
        seed=seed,
        score=game.score,
        max_score=game.max_score,
        strikes=game.strikes,
        turns=game.turn,
        phase=game.phase,
    )


def _play_game_worker(args: tuple[int, Config]) -> GameResult:
    seed, config = args
    return play_game(seed, config)


def game_seeds(config: Config) -> list[int]:
    """Per-game seeds derived from the system seed."""
    base_seed = config.system.seed
    if base_seed is None:
        base_seed = random.randint(0, 2**31 - 1)
    rng = np.random.default_rng(base_seed)
    return [int(s) for s in rng.integers(0, 2**31 - 1, size=config.simulation.num_games)]


def run_simulations(config: Config) -> SimulationSummary:
    """Play ``config.simulation.num_games`` games and summarize them."""
    sim = config.simulation
    seeds = game_seeds(config)
    variant = Variant.from_config(config.rules)
    logger.info(f"Simulating {sim.num_games} games with {sim.num_workers} workers...")

    if sim.num_workers == 1:
        results = [
            play_game(seed, config)
            for seed in tqdm(seeds, desc="Games", unit="game", disable=not sim.show_progress)
        ]
    else:
        work_args = [(seed, config) for seed in seeds]
        with mp.Pool(processes=sim.num_workers) as pool:
            results = list(
                tqdm(
                    pool.imap(_play_game_worker, work_args),
                    total=len(work_args),
                    desc="Games (parallel)",
                    unit="game",
                    disable=not sim.show_progress,
                )
            )

    invalid = [r.seed for r in results if r.phase == GamePhase.INVALID]
    if invalid:
        logger.warning(f"{len(invalid)} games ended with an invalid move (seeds {invalid})")

    return SimulationSummary.from_results(results, sim.num_players, variant.max_score)
