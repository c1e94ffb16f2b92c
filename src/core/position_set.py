"""
Small bitset over hand positions.

Positions always start at 0 and run up to a capacity of at most eight. The set
is used to describe which positions of a hand a clue touched. Operators work
element-wise; the complement is relative to the capacity, so no bit at or
above the capacity is ever set.
"""

from __future__ import annotations

from typing import Iterator

MAX_CAPACITY = 8


class PositionSet:
    """
    Mutable set of positions in ``range(capacity)``.

    Examples:
        >>> touched = PositionSet.create(4, 0b0101)
        >>> list(touched)
        [0, 2]
        >>> list(touched.iter_first(2))
        [2, 0]
    """

    __slots__ = ("capacity", "bits")

    def __init__(self, capacity: int):
        if not 0 <= capacity <= MAX_CAPACITY:
            raise ValueError(
                f"At most {MAX_CAPACITY} positions are supported ({capacity} requested)"
            )
        self.capacity = capacity
        self.bits = 0

    @classmethod
    def create(cls, capacity: int, bits: int) -> "PositionSet":
        """Build a set from a raw mask; bits at or above capacity are dropped."""
        result = cls(capacity)
        result.bits = bits & result._full_mask()
        return result

    @classmethod
    def of(cls, capacity: int, positions) -> "PositionSet":
        result = cls(capacity)
        for position in positions:
            result.add(position)
        return result

    def _full_mask(self) -> int:
        return (1 << self.capacity) - 1

    def _check(self, position: int) -> None:
        if not 0 <= position < self.capacity:
            raise ValueError(f"Position {position} out-of-bounds (0..{self.capacity})")

    def add(self, position: int) -> None:
        self._check(position)
        self.bits |= 1 << position

    def remove(self, position: int) -> None:
        """Ensure a position is unset. Removing an absent position is a no-op."""
        self._check(position)
        self.bits &= ~(1 << position)

    def contains(self, position: int) -> bool:
        self._check(position)
        return bool(self.bits & (1 << position))

    def __contains__(self, position: int) -> bool:
        return 0 <= position < self.capacity and bool(self.bits & (1 << position))

    def first(self) -> int | None:
        """Lowest set position, or None."""
        if self.bits == 0:
            return None
        return (self.bits & -self.bits).bit_length() - 1

    def last(self) -> int | None:
        """Highest set position, or None."""
        if self.bits == 0:
            return None
        return self.bits.bit_length() - 1

    def __len__(self) -> int:
        return bin(self.bits).count("1")

    def is_empty(self) -> bool:
        return self.bits == 0

    def is_full(self) -> bool:
        return self.bits == self._full_mask()

    def __bool__(self) -> bool:
        return self.bits != 0

    def __iter__(self) -> Iterator[int]:
        remaining = self.bits
        while remaining:
            low = remaining & -remaining
            yield low.bit_length() - 1
            remaining ^= low

    def iter_first(self, first: int) -> Iterator[int]:
        """
        Iterate with ``first`` yielded before everything else.

        ``first`` is yielded even when it is not in the set; the remaining
        positions follow in ascending order without repeating it.
        """
        yield first
        remaining = self.bits & ~(1 << first)
        while remaining:
            low = remaining & -remaining
            yield low.bit_length() - 1
            remaining ^= low

    def _coerce(self, other: "PositionSet") -> int:
        if not isinstance(other, PositionSet):
            raise TypeError(f"Expected PositionSet, got {type(other).__name__}")
        if other.capacity != self.capacity:
            raise ValueError(
                f"Cannot combine position sets of capacity {self.capacity} and {other.capacity}"
            )
        return other.bits

    def __or__(self, other: "PositionSet") -> "PositionSet":
        return PositionSet.create(self.capacity, self.bits | self._coerce(other))

    def __and__(self, other: "PositionSet") -> "PositionSet":
        return PositionSet.create(self.capacity, self.bits & self._coerce(other))

    def __sub__(self, other: "PositionSet") -> "PositionSet":
        return PositionSet.create(self.capacity, self.bits & ~self._coerce(other))

    def __invert__(self) -> "PositionSet":
        return PositionSet.create(self.capacity, ~self.bits)

    def copy(self) -> "PositionSet":
        return PositionSet.create(self.capacity, self.bits)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PositionSet):
            return NotImplemented
        return self.capacity == other.capacity and self.bits == other.bits

    def __hash__(self) -> int:
        return hash((self.capacity, self.bits))

    def __repr__(self) -> str:
        marks = "".join("1" if self.bits & (1 << pos) else "0" for pos in range(self.capacity))
        return f"PositionSet({marks})"
