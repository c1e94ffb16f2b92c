"""
Card identities and the fixed ruleset they live in.

A card is a (suit, rank) pair. Cards are value objects: equal cards compare
equal, hash equal and sort by suit first, then rank. The ``Variant`` bundles
the immutable rules every engine component is built against (which suits are
in play, how many copies of each rank exist, hand sizes per seat count).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from src.shared.config import RulesConfig

NUM_RANKS = 5


class Suit(IntEnum):
    """The five suits, in display order."""

    RED = 0
    YELLOW = 1
    GREEN = 2
    BLUE = 3
    PURPLE = 4

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def char(self) -> str:
        return self.name[0].lower()

    @classmethod
    def from_char(cls, char: str) -> "Suit":
        for suit in cls:
            if suit.char == char.lower():
                return suit
        raise ValueError(f"Unknown suit character: {char!r}")


# Cards are created in hot loops (quantum iteration, clue evaluation), so
# instances are interned.
_CARD_CACHE: dict[tuple[Suit, int], "Card"] = {}


@dataclass(frozen=True, order=True)
class Card:
    """
    Immutable card identity.

    Attributes:
        suit: Card suit
        rank: Card rank (1-5)
    """

    suit: Suit
    rank: int

    def __post_init__(self):
        if not 1 <= self.rank <= NUM_RANKS:
            raise ValueError(f"Card rank must be in 1..{NUM_RANKS}, got {self.rank}")

    @classmethod
    def new(cls, suit: Suit, rank: int) -> "Card":
        """Return the interned card for (suit, rank)."""
        key = (suit, rank)
        card = _CARD_CACHE.get(key)
        if card is None:
            card = cls(Suit(suit), rank)
            _CARD_CACHE[key] = card
        return card

    @classmethod
    def parse(cls, text: str) -> "Card":
        """
        Parse the compact notation used in logs and tests (e.g. 'r3', 'b5').
        """
        if len(text) != 2 or not text[1].isdigit():
            raise ValueError(f"Cannot parse card {text!r}")
        return cls.new(Suit.from_char(text[0]), int(text[1]))

    def next(self) -> "Card | None":
        """The card that can be played on top of this one (None for a 5)."""
        if self.rank == NUM_RANKS:
            return None
        return Card.new(self.suit, self.rank + 1)

    def predecessors(self) -> list["Card"]:
        """All lower ranks of the same suit, ascending."""
        return [Card.new(self.suit, rank) for rank in range(1, self.rank)]

    def __repr__(self) -> str:
        return f"{self.suit.char}{self.rank}"

    __str__ = __repr__


def _standard_hand_sizes() -> dict[int, int]:
    return {2: 5, 3: 5, 4: 4, 5: 4, 6: 3}


@dataclass(frozen=True)
class Variant:
    """
    Immutable ruleset passed to every engine component.

    Attributes:
        suits: Suits in play, in display order
        copies: Copies of each rank (index 0 = rank 1)
        max_clues: Number of clue tokens
        max_strikes: Strikes that end the game
        hand_sizes: Cards per hand, keyed by seat count
    """

    suits: tuple[Suit, ...] = tuple(Suit)
    copies: tuple[int, ...] = (3, 2, 2, 2, 1)
    max_clues: int = 8
    max_strikes: int = 3
    hand_sizes: dict[int, int] = field(default_factory=_standard_hand_sizes, compare=False)

    def __post_init__(self):
        if len(self.copies) != NUM_RANKS:
            raise ValueError(f"copies must list {NUM_RANKS} ranks, got {self.copies}")
        # Dense table for O(1) identity lookups.
        object.__setattr__(
            self, "_suit_index", {suit: index for index, suit in enumerate(self.suits)}
        )
        object.__setattr__(
            self,
            "_cards",
            tuple(Card.new(suit, rank) for suit in self.suits for rank in range(1, NUM_RANKS + 1)),
        )

    @classmethod
    def from_config(cls, rules: "RulesConfig") -> "Variant":
        return cls(
            suits=tuple(Suit[name.upper()] for name in rules.suits),
            copies=tuple(rules.copies),
            max_clues=rules.max_clues,
            max_strikes=rules.max_strikes,
            hand_sizes=dict(rules.hand_sizes),
        )

    @property
    def num_suits(self) -> int:
        return len(self.suits)

    @property
    def num_ranks(self) -> int:
        return NUM_RANKS

    @property
    def num_cards(self) -> int:
        return self.num_suits * NUM_RANKS

    @property
    def max_score(self) -> int:
        return self.num_suits * NUM_RANKS

    def suit_index(self, suit: Suit) -> int:
        try:
            return self._suit_index[suit]
        except KeyError:
            raise ValueError(f"Suit {suit} is not part of this variant") from None

    def card_index(self, card: Card) -> int:
        """Dense index of a card identity (0 .. num_cards-1)."""
        return self.suit_index(card.suit) * NUM_RANKS + card.rank - 1

    def card_at(self, index: int) -> Card:
        return self._cards[index]

    def card_count(self, rank: int) -> int:
        """Number of copies of each card of this rank."""
        return self.copies[rank - 1]

    def cards(self) -> Iterator[Card]:
        """Every card identity, suit by suit, ascending rank."""
        return iter(self._cards)

    def deck(self) -> list[Card]:
        """One entry per physical card, unshuffled."""
        return [card for card in self._cards for _ in range(self.card_count(card.rank))]

    def hand_size(self, num_players: int) -> int:
        try:
            return self.hand_sizes[num_players]
        except KeyError:
            raise ValueError(f"Unsupported number of players: {num_players}") from None


DEFAULT_VARIANT = Variant()
