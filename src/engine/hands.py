"""
Stable-index storage for the slots of every hand.

All slots live in one arena; each seat keeps the arena indices of its cards in
front-to-back order (position 0 is the newest card). Pending inferences hold
arena indices, so they keep pointing at the same physical card while the
card's hand position shifts.
"""

from __future__ import annotations

from typing import Iterator

from src.engine.errors import InvariantError
from src.engine.slot import Slot


class Hands:
    """Slot arena plus per-seat position order."""

    def __init__(self, num_players: int, hand_size: int):
        if num_players < 2:
            raise ValueError(f"At least two seats are required, got {num_players}")
        self.num_players = num_players
        self.max_hand_size = hand_size
        self.capacity = num_players * (hand_size + 1)
        self.slots: list[Slot | None] = [None] * self.capacity
        self._owner: list[int | None] = [None] * self.capacity
        self._order: list[list[int]] = [[] for _ in range(num_players)]
        self._next_free: int | None = None
        self._used = 0

    def copy(self) -> "Hands":
        clone = Hands.__new__(Hands)
        clone.num_players = self.num_players
        clone.max_hand_size = self.max_hand_size
        clone.capacity = self.capacity
        clone.slots = [slot.copy() if slot is not None else None for slot in self.slots]
        clone._owner = self._owner[:]
        clone._order = [order[:] for order in self._order]
        clone._next_free = self._next_free
        clone._used = self._used
        return clone

    def _check_seat(self, seat: int) -> None:
        if not 0 <= seat < self.num_players:
            raise ValueError(f"Seat {seat} out of range (0..{self.num_players})")

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, seat: int, slot: Slot) -> int:
        """Put ``slot`` at position 0 of ``seat`` and return its arena index."""
        self._check_seat(seat)
        if len(self._order[seat]) >= self.max_hand_size:
            raise InvariantError(f"Hand of seat {seat} is already full")
        if self._next_free is not None:
            index = self._next_free
            self._next_free = None
        else:
            index = self._find_unused()
        self.slots[index] = slot
        self._owner[index] = seat
        self._order[seat].insert(0, index)
        return index

    def _find_unused(self) -> int:
        if self._used < self.capacity:
            self._used += 1
            return self._used - 1
        # The one-deep free list lost track of an index (several removals in
        # a row); fall back to a scan.
        for index, owner in enumerate(self._owner):
            if owner is None:
                return index
        raise InvariantError("Slot arena exhausted")

    def remove(self, seat: int, pos: int) -> tuple[int, Slot]:
        """
        Take position ``pos`` out of ``seat``'s hand, closing the gap.

        Returns the freed arena index and the slot that lived there.
        """
        index = self.slot_index(seat, pos)
        del self._order[seat][pos]
        slot = self.slots[index]
        self._owner[index] = None
        self._next_free = index
        return index, slot

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def hand_size(self, seat: int) -> int:
        self._check_seat(seat)
        return len(self._order[seat])

    def slot_index(self, seat: int, pos: int) -> int:
        self._check_seat(seat)
        order = self._order[seat]
        if not 0 <= pos < len(order):
            raise ValueError(f"Position {pos} not in hand of seat {seat} (size {len(order)})")
        return order[pos]

    def slot(self, seat: int, pos: int) -> Slot:
        return self.slots[self.slot_index(seat, pos)]

    def slot_at(self, index: int) -> Slot:
        """Resolve a live arena index."""
        if not 0 <= index < self.capacity or self._owner[index] is None:
            raise InvariantError(f"Arena index {index} is not held by any hand")
        return self.slots[index]

    def is_live(self, index: int) -> bool:
        return 0 <= index < self.capacity and self._owner[index] is not None

    def seat_of(self, index: int) -> int:
        owner = self._owner[index] if 0 <= index < self.capacity else None
        if owner is None:
            raise InvariantError(f"Arena index {index} is not held by any hand")
        return owner

    def position_of(self, index: int) -> int:
        return self._order[self.seat_of(index)].index(index)

    def indices(self, seat: int) -> list[int]:
        """Arena indices of ``seat``'s hand, front to back (a copy)."""
        self._check_seat(seat)
        return self._order[seat][:]

    def iter_hand(self, seat: int) -> Iterator[tuple[int, Slot]]:
        """(position, slot) pairs from the newest card to the oldest."""
        self._check_seat(seat)
        for pos, index in enumerate(self._order[seat]):
            yield pos, self.slots[index]

    def iter_hand_reversed(self, seat: int) -> Iterator[tuple[int, Slot]]:
        """(position, slot) pairs from the oldest card to the newest."""
        self._check_seat(seat)
        order = self._order[seat]
        for pos in range(len(order) - 1, -1, -1):
            yield pos, self.slots[order[pos]]

    def iter_all(self) -> Iterator[tuple[int, int, Slot]]:
        """(seat, position, slot) for every live slot."""
        for seat in range(self.num_players):
            for pos, slot in self.iter_hand(seat):
                yield seat, pos, slot

    def chop(self, seat: int) -> int | None:
        """Rearmost position holding neither a clued card nor a finesse promise."""
        for pos, slot in self.iter_hand_reversed(seat):
            if not slot.clued and slot.promised is None:
                return pos
        return None

    def __len__(self) -> int:
        return self.num_players

    def __repr__(self) -> str:
        lines = []
        for seat in range(self.num_players):
            cards = ", ".join(repr(slot) for _pos, slot in self.iter_hand(seat))
            lines.append(f"P{seat} [{cards}]")
        return "\n".join(lines)
