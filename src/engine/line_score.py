"""Heuristic value of a belief state, used to compare candidate clues."""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering

BAD_ERRORS = 20


@total_ordering
@dataclass(frozen=True, eq=False)
class LineScore:
    """
    Components of a position's heuristic value.

    Scores order by game score first, then by the weighted sum of the other
    components, then by the number of queued plays.

    Attributes:
        score: Cards successfully played so far
        clued: Clued cards in the other hands
        play: Clued cards in the other hands flagged to play
        finesses: Cards in the other hands owing a blind play
        discard_risks: Sum of (negative) penalties for endangered chop cards
        errors: Accumulated error weight
        bonus: Slots pinned to exactly one identity
        error_multiplier: Weight of one error point
        clued_weight: Weight of one clued card
    """

    score: int = 0
    clued: int = 0
    play: int = 0
    finesses: int = 0
    discard_risks: int = 0
    errors: int = 0
    bonus: int = 0
    error_multiplier: int = 10
    clued_weight: int = 2

    @classmethod
    def zero(cls) -> "LineScore":
        return cls()

    @classmethod
    def bad(cls) -> "LineScore":
        """Baseline that any error-free clue beats."""
        return cls(errors=BAD_ERRORS)

    def has_errors(self) -> bool:
        return self.errors > 0

    @property
    def value(self) -> int:
        return (
            self.discard_risks
            + self.play
            + self.finesses
            + self.clued * self.clued_weight
            + self.bonus
            - self.errors * self.error_multiplier
        )

    def _key(self) -> tuple[int, int, int]:
        return (self.score, self.value, self.play)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LineScore):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "LineScore") -> bool:
        if not isinstance(other, LineScore):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return (
            f"LineScore(score={self.score}, value={self.value}, clued={self.clued}, "
            f"play={self.play}, finesses={self.finesses}, risks={self.discard_risks}, "
            f"errors={self.errors}, bonus={self.bonus})"
        )
