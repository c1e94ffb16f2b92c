"""
Game phases and the public status snapshot handed to strategies.
"""

from dataclasses import dataclass
from enum import Enum, auto


class GamePhase(Enum):
    """Lifecycle of one game."""

    EARLY = auto()  # nothing discarded yet
    MID = auto()
    FINAL = auto()  # deck empty, last round running
    LOST = auto()
    WON = auto()
    FINISHED = auto()
    INVALID = auto()  # a strategy made an illegal move

    def __str__(self) -> str:
        return self.name.lower()

    def is_running(self) -> bool:
        return self in (GamePhase.EARLY, GamePhase.MID, GamePhase.FINAL)

    def is_over(self) -> bool:
        return not self.is_running()


@dataclass(frozen=True)
class GameStatus:
    """
    Public information available to the acting seat.

    Attributes:
        clues: Remaining clue tokens
        score: Cards successfully played
        max_score: Best score still reachable given lost cards
        strikes: Failed plays so far
        turn: Moves made so far
        deck_size: Cards left to draw
        phase: Current game phase
    """

    clues: int
    score: int
    max_score: int
    strikes: int = 0
    turn: int = 0
    deck_size: int = 0
    phase: GamePhase = GamePhase.EARLY

    def __post_init__(self):
        if self.clues < 0:
            raise ValueError(f"Clue tokens cannot be negative: {self.clues}")
        if self.score > self.max_score:
            raise ValueError(f"Score {self.score} exceeds max score {self.max_score}")

    def __str__(self) -> str:
        return (
            f"turn={self.turn} score={self.score}/{self.max_score} clues={self.clues} "
            f"strikes={self.strikes} deck={self.deck_size} phase={self.phase}"
        )
