"""
Deduction-based player.

Plays whatever its line knows to be playable, discards when out of clue
tokens, and otherwise compares every legal clue against discarding by scoring
the position each clue would produce.
"""

import logging
from typing import Optional

from src.core.position_set import PositionSet
from src.engine.line import Line
from src.engine.line_score import LineScore
from src.game.actions import Clue, Move, color_clue, give_clue, rank_clue
from src.game.cards import DEFAULT_VARIANT, NUM_RANKS, Card, Variant
from src.game.state import GameStatus
from src.game.strategy import PlayerStrategy
from src.shared.config import Config, HeuristicsConfig

logger = logging.getLogger(__name__)


class DeductionPlayer(PlayerStrategy):
    """Strategy that keeps one ``Line`` and forwards every event to it."""

    def __init__(
        self,
        variant: Variant = DEFAULT_VARIANT,
        heuristics: Optional[HeuristicsConfig] = None,
    ):
        self.variant = variant
        self.heuristics = heuristics or HeuristicsConfig()
        self.line: Optional[Line] = None

    @classmethod
    def from_config(cls, config: Config) -> "DeductionPlayer":
        return cls(Variant.from_config(config.rules), config.heuristics)

    def init(self, num_players: int, own_player: int) -> None:
        self.line = Line(num_players, own_player, self.variant, self.heuristics)

    def drawn(self, seat: int, card: Card) -> None:
        self.line.drawn(seat, card)

    def own_drawn(self) -> None:
        self.line.own_drawn()

    def played(self, seat: int, pos: int, card: Card, successful: bool) -> None:
        self.line.played(seat, pos, card, successful)

    def discarded(self, seat: int, pos: int, card: Card) -> None:
        self.line.discarded(seat, pos, card)

    def clued(self, who: int, whom: int, clue: Clue, touched: PositionSet) -> None:
        self.line.clued(who, whom, clue, touched)

    def candidate_clues(self) -> list[Clue]:
        clues = [color_clue(suit) for suit in self.variant.suits]
        clues.extend(rank_clue(rank) for rank in range(1, NUM_RANKS + 1))
        return clues

    def act(self, status: GameStatus) -> Move:
        play_move = self.line.play()
        if play_move is not None:
            return play_move
        if status.clues == 0:
            return self.line.discard()

        # Discarding at full tokens wastes a clue.
        if status.clues == self.variant.max_clues:
            best_score = LineScore.bad()
        else:
            best_score = self.line.score(0)
        best_move = self.line.discard()
        logger.debug(f"discarding score: {best_score}")

        for target in range(1, self.line.num_players):
            for clue in self.candidate_clues():
                score = self.line.copy().clue(target, clue)
                if score is None:
                    continue
                logger.debug(f"considered cluing {clue} to {target}: {score}")
                if score > best_score:
                    best_move = give_clue(target, clue)
                    best_score = score
        return best_move

    def __repr__(self) -> str:
        return repr(self.line) if self.line is not None else "DeductionPlayer()"
