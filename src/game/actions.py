"""
Clue and move representations.

A clue names either a rank or a suit; a move is what a seat does on its turn:
discard a position, play a position, or give a clue to another seat
(addressed by its offset from the acting seat).
"""

from dataclasses import dataclass
from enum import Enum, auto

from src.game.cards import NUM_RANKS, Card, Suit


class ClueType(Enum):
    """The two kinds of information a clue can carry."""

    RANK = auto()
    COLOR = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Clue:
    """
    Immutable clue value.

    Attributes:
        type: Rank or color clue
        value: The rank (1-5) for rank clues, the Suit for color clues
    """

    type: ClueType
    value: int

    def __post_init__(self):
        if self.type == ClueType.RANK:
            if not 1 <= self.value <= NUM_RANKS:
                raise ValueError(f"Rank clue must be in 1..{NUM_RANKS}, got {self.value}")
        elif not isinstance(self.value, Suit):
            raise ValueError(f"Color clue needs a Suit, got {self.value!r}")

    @property
    def is_rank(self) -> bool:
        return self.type == ClueType.RANK

    @property
    def is_color(self) -> bool:
        return self.type == ClueType.COLOR

    def touches(self, card: Card) -> bool:
        """Whether a card of this identity is touched by the clue."""
        if self.type == ClueType.RANK:
            return card.rank == self.value
        return card.suit == self.value

    def __str__(self) -> str:
        if self.type == ClueType.RANK:
            return f"Rank({self.value})"
        return f"Color({self.value})"

    __repr__ = __str__


class MoveType(Enum):
    """Types of moves a seat can make."""

    DISCARD = auto()
    PLAY = auto()
    CLUE = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Move:
    """
    Immutable representation of a move.

    Attributes:
        type: Discard, play or clue
        position: Hand position for discard/play (0 = newest card)
        target: Seat offset from the acting seat for clues (1 = next seat)
        clue: The clue given (clue moves only)
    """

    type: MoveType
    position: int = 0
    target: int = 0
    clue: Clue | None = None

    def __post_init__(self):
        """Validate move consistency."""
        if self.position < 0:
            raise ValueError(f"Move position cannot be negative: {self.position}")

        if self.type == MoveType.CLUE:
            if self.clue is None:
                raise ValueError("Clue move requires a clue")
            if self.target <= 0:
                raise ValueError(f"Clue target offset must be positive, got {self.target}")
        elif self.clue is not None or self.target != 0:
            raise ValueError(f"{self.type} cannot carry a clue or target")

    def __str__(self) -> str:
        if self.type == MoveType.CLUE:
            return f"CLUE(+{self.target}, {self.clue})"
        return f"{self.type.name}({self.position})"

    def __repr__(self) -> str:
        if self.type == MoveType.CLUE:
            return f"Move(type=MoveType.CLUE, target={self.target}, clue={self.clue})"
        return f"Move(type=MoveType.{self.type.name}, position={self.position})"


# Commonly used constructors for convenience
def rank_clue(rank: int) -> Clue:
    """Create a rank clue."""
    return Clue(ClueType.RANK, rank)


def color_clue(suit: Suit) -> Clue:
    """Create a color clue."""
    return Clue(ClueType.COLOR, suit)


def discard(position: int) -> Move:
    """Create a discard move."""
    return Move(MoveType.DISCARD, position)


def play(position: int) -> Move:
    """Create a play move."""
    return Move(MoveType.PLAY, position)


def give_clue(target: int, clue: Clue) -> Move:
    """Create a clue move aimed at the seat ``target`` places after the giver."""
    return Move(MoveType.CLUE, target=target, clue=clue)
