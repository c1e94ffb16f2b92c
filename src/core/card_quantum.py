"""
Per-slot belief: the set of card identities still possible.

The set is stored as one rank bitmask per suit (bit ``r-1`` set means rank
``r`` is possible). Two masks are kept side by side:

* the *hard* mask holds facts that stay true for the rest of the game
  (clue information, all copies of a card visible elsewhere);
* the *current* mask is the hard mask minus provisional, revertible
  assumptions (soft constraints).

Every hard operation is applied to both masks; soft operations only touch the
current mask. ``reset_soft`` drops all assumptions by copying the hard mask
back. The current mask is always a subset of the hard mask.
"""

from __future__ import annotations

from typing import Iterator

from src.game.cards import NUM_RANKS, Card, Suit, Variant

_RANK_MASK = (1 << NUM_RANKS) - 1


class CardQuantum:
    """
    Set of possible identities for one hand slot.

    Examples:
        >>> q = CardQuantum(DEFAULT_VARIANT)
        >>> q.size()
        25
        >>> q.limit_by_rank(5, True)
        >>> q.size()
        5
    """

    __slots__ = ("variant", "_hard", "_cards")

    def __init__(self, variant: Variant):
        self.variant = variant
        self._hard = [_RANK_MASK] * variant.num_suits
        self._cards = [_RANK_MASK] * variant.num_suits

    @classmethod
    def empty(cls, variant: Variant) -> "CardQuantum":
        quantum = cls(variant)
        quantum.clear()
        return quantum

    @classmethod
    def of(cls, variant: Variant, cards) -> "CardQuantum":
        """Quantum holding exactly ``cards`` as hard possibilities."""
        quantum = cls.empty(variant)
        for card in cards:
            quantum.add_card(card)
        return quantum

    def copy(self) -> "CardQuantum":
        clone = CardQuantum.__new__(CardQuantum)
        clone.variant = self.variant
        clone._hard = self._hard[:]
        clone._cards = self._cards[:]
        return clone

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Remove every identity, hard facts included."""
        for index in range(len(self._cards)):
            self._hard[index] = 0
            self._cards[index] = 0

    def soft_clear(self) -> None:
        """Remove every identity from the current belief only."""
        for index in range(len(self._cards)):
            self._cards[index] = 0

    def reset_soft(self) -> None:
        """Drop all soft constraints: the current belief becomes the hard one."""
        self._cards = self._hard[:]

    def add_card(self, card: Card, soft: bool = False) -> None:
        """
        Make ``card`` possible again.

        A soft add can only revive an identity the hard facts still allow.
        """
        index = self.variant.suit_index(card.suit)
        bit = 1 << (card.rank - 1)
        if soft:
            self._cards[index] |= bit & self._hard[index]
        else:
            self._hard[index] |= bit
            self._cards[index] |= bit

    def remove_card(self, card: Card, soft: bool = False) -> None:
        index = self.variant.suit_index(card.suit)
        bit = ~(1 << (card.rank - 1))
        self._cards[index] &= bit
        if not soft:
            self._hard[index] &= bit

    def limit_by_suit(self, suit: Suit, touched: bool) -> None:
        """Keep only ``suit`` (touched) or drop it (not touched)."""
        target = self.variant.suit_index(suit)
        for index in range(len(self._cards)):
            if (index != target) == touched:
                self._hard[index] = 0
                self._cards[index] = 0

    def limit_by_rank(self, rank: int, touched: bool) -> None:
        """Keep only ``rank`` (touched) or drop it (not touched)."""
        modifier = 1 << (rank - 1)
        if not touched:
            modifier = ~modifier & _RANK_MASK
        for index in range(len(self._cards)):
            self._hard[index] &= modifier
            self._cards[index] &= modifier

    def limit_to(self, other: "CardQuantum", soft: bool = False) -> None:
        """Intersect with the current belief of ``other``."""
        for index in range(len(self._cards)):
            self._cards[index] &= other._cards[index]
            if not soft:
                self._hard[index] &= other._cards[index]

    def remove_all(self, other: "CardQuantum", soft: bool = False) -> None:
        """Subtract the current belief of ``other``."""
        for index in range(len(self._cards)):
            self._cards[index] &= ~other._cards[index]
            if not soft:
                self._hard[index] &= ~other._cards[index]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def contains(self, card: Card) -> bool:
        index = self.variant.suit_index(card.suit)
        return bool(self._cards[index] & (1 << (card.rank - 1)))

    __contains__ = contains

    def hard_contains(self, card: Card) -> bool:
        index = self.variant.suit_index(card.suit)
        return bool(self._hard[index] & (1 << (card.rank - 1)))

    def size(self) -> int:
        return sum(bin(mask).count("1") for mask in self._cards)

    def hard_size(self) -> int:
        return sum(bin(mask).count("1") for mask in self._hard)

    def __len__(self) -> int:
        return self.size()

    def is_empty(self) -> bool:
        return not any(self._cards)

    def is_rank(self, rank: int) -> bool:
        """Whether every possible identity has ``rank`` (vacuously true when empty)."""
        others = ~(1 << (rank - 1)) & _RANK_MASK
        return not any(mask & others for mask in self._cards)

    def intersects(self, other: "CardQuantum") -> bool:
        return any(a & b for a, b in zip(self._cards, other._cards))

    def issuperset(self, other: "CardQuantum") -> bool:
        """Whether every identity possible in ``other`` is possible here."""
        return not any(b & ~a for a, b in zip(self._cards, other._cards))

    def single(self) -> Card | None:
        """The only possible identity, or None unless the size is exactly one."""
        if self.size() != 1:
            return None
        return next(iter(self))

    def hard_single(self) -> Card | None:
        if self.hard_size() != 1:
            return None
        return next(self._iter_mask(self._hard))

    def __iter__(self) -> Iterator[Card]:
        """Fresh pass over the possible identities, suit by suit, ascending rank."""
        return self._iter_mask(self._cards)

    def iter_hard(self) -> Iterator[Card]:
        return self._iter_mask(self._hard)

    def _iter_mask(self, masks: list[int]) -> Iterator[Card]:
        for index, suit in enumerate(self.variant.suits):
            remaining = masks[index]
            while remaining:
                low = remaining & -remaining
                yield Card.new(suit, low.bit_length())
                remaining ^= low

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CardQuantum):
            return NotImplemented
        return self._cards == other._cards and self._hard == other._hard

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        parts = []
        for index, suit in enumerate(self.variant.suits):
            ranks = "".join(
                str(rank) if self._cards[index] & (1 << (rank - 1)) else
                ("." if self._hard[index] & (1 << (rank - 1)) else "")
                for rank in range(1, NUM_RANKS + 1)
            )
            if ranks:
                parts.append(f"{suit.char}{ranks}")
        return f"CardQuantum({' '.join(parts) or '-'})"
