"""Tests for the Hands slot arena."""

import pytest

from src.core.card_quantum import CardQuantum
from src.engine.errors import InvariantError
from src.engine.hands import Hands
from src.engine.slot import Slot
from src.game.cards import DEFAULT_VARIANT
from tests.test_helpers import card


def make_slot(turn, text=None):
    return Slot(card(text) if text else None, CardQuantum(DEFAULT_VARIANT), turn)


class TestInsertRemove:
    def test_insert_goes_to_front(self):
        hands = Hands(3, 4)
        hands.insert(1, make_slot(1, "r1"))
        hands.insert(1, make_slot(2, "r2"))

        assert hands.hand_size(1) == 2
        assert hands.slot(1, 0).card == card("r2")
        assert hands.slot(1, 1).card == card("r1")

    def test_index_survives_shift(self):
        hands = Hands(3, 4)
        oldest = hands.insert(1, make_slot(1, "r1"))
        hands.insert(1, make_slot(2, "r2"))
        hands.insert(1, make_slot(3, "r3"))

        assert hands.position_of(oldest) == 2
        hands.remove(1, 0)
        assert hands.position_of(oldest) == 1
        assert hands.slot_at(oldest).card == card("r1")

    def test_remove_returns_index_and_slot(self):
        hands = Hands(2, 5)
        index = hands.insert(0, make_slot(1))
        freed, slot = hands.remove(0, 0)

        assert freed == index
        assert slot.turn == 1
        assert not hands.is_live(index)
        with pytest.raises(InvariantError):
            hands.slot_at(index)

    def test_freed_index_reused(self):
        hands = Hands(2, 5)
        hands.insert(0, make_slot(1))
        index, _slot = hands.remove(0, 0)

        assert hands.insert(1, make_slot(2)) == index
        assert hands.seat_of(index) == 1

    def test_full_hand_rejected(self):
        hands = Hands(2, 2)
        hands.insert(0, make_slot(1))
        hands.insert(0, make_slot(2))

        with pytest.raises(InvariantError):
            hands.insert(0, make_slot(3))

    def test_arena_scan_after_several_removals(self):
        hands = Hands(2, 2)
        for turn in range(1, 5):
            hands.insert(turn % 2, make_slot(turn))
        hands.remove(0, 0)
        hands.remove(1, 0)
        hands.insert(0, make_slot(5))
        hands.insert(1, make_slot(6))

        assert hands.hand_size(0) == 2
        assert hands.hand_size(1) == 2
        live = [slot.turn for _seat, _pos, slot in hands.iter_all()]
        assert sorted(live) == [1, 2, 5, 6]

    def test_bad_seat_and_position(self):
        hands = Hands(2, 4)

        with pytest.raises(ValueError):
            hands.hand_size(2)
        with pytest.raises(ValueError):
            hands.slot(0, 0)


class TestIteration:
    def setup_method(self):
        self.hands = Hands(2, 4)
        for turn, text in enumerate(["b5", "r4", "r4", "r3"], start=1):
            self.hands.insert(1, make_slot(turn, text))

    def test_front_to_back(self):
        assert [slot.card for _pos, slot in self.hands.iter_hand(1)] == [
            card("r3"),
            card("r4"),
            card("r4"),
            card("b5"),
        ]

    def test_back_to_front(self):
        positions = [pos for pos, _slot in self.hands.iter_hand_reversed(1)]

        assert positions == [3, 2, 1, 0]

    def test_chop_skips_clued_and_promised(self):
        assert self.hands.chop(1) == 3

        self.hands.slot(1, 3).clued = True
        self.hands.slot(1, 2).promised = 7

        assert self.hands.chop(1) == 1

    def test_no_chop_when_everything_clued(self):
        for _pos, slot in self.hands.iter_hand(1):
            slot.clued = True

        assert self.hands.chop(1) is None
        assert self.hands.chop(0) is None

    def test_copy_is_independent(self):
        clone = self.hands.copy()
        clone.slot(1, 0).clued = True
        clone.remove(1, 3)

        assert not self.hands.slot(1, 0).clued
        assert self.hands.hand_size(1) == 4
