"""Tests for CardQuantum."""

from src.core.card_quantum import CardQuantum
from src.game.cards import DEFAULT_VARIANT, Suit, Variant
from tests.test_helpers import card, cards


def full():
    return CardQuantum(DEFAULT_VARIANT)


class TestConstruction:
    def test_full_quantum(self):
        quantum = full()

        assert quantum.size() == 25
        assert quantum.hard_size() == 25
        assert not quantum.is_empty()

    def test_empty_and_of(self):
        assert CardQuantum.empty(DEFAULT_VARIANT).is_empty()

        quantum = CardQuantum.of(DEFAULT_VARIANT, cards("r2 b4"))
        assert list(quantum) == cards("r2 b4")
        assert quantum.hard_size() == 2

    def test_smaller_variant(self):
        variant = Variant(suits=(Suit.RED, Suit.BLUE))

        assert CardQuantum(variant).size() == 10


class TestClueLimits:
    def test_rank_touched(self):
        quantum = full()
        quantum.limit_by_rank(5, True)

        assert quantum.size() == 5
        assert quantum.is_rank(5)
        assert quantum.hard_size() == 5

    def test_rank_not_touched(self):
        quantum = full()
        quantum.limit_by_rank(1, False)

        assert quantum.size() == 20
        assert card("r1") not in quantum

    def test_suit_touched(self):
        quantum = full()
        quantum.limit_by_suit(Suit.GREEN, True)

        assert list(quantum) == cards("g1 g2 g3 g4 g5")

    def test_suit_not_touched(self):
        quantum = full()
        quantum.limit_by_suit(Suit.GREEN, False)

        assert quantum.size() == 20
        assert not any(c.suit == Suit.GREEN for c in quantum)

    def test_rank_and_suit_pin_identity(self):
        quantum = full()
        quantum.limit_by_rank(3, True)
        quantum.limit_by_suit(Suit.YELLOW, True)

        assert quantum.single() == card("y3")
        assert quantum.hard_single() == card("y3")


class TestSoftConstraints:
    def test_soft_remove_keeps_hard(self):
        quantum = full()
        quantum.remove_card(card("r1"), soft=True)

        assert not quantum.contains(card("r1"))
        assert quantum.hard_contains(card("r1"))
        assert quantum.size() == 24
        assert quantum.hard_size() == 25

    def test_reset_soft_restores_hard(self):
        quantum = full()
        quantum.limit_by_rank(2, True)
        quantum.soft_clear()
        assert quantum.is_empty()

        quantum.reset_soft()

        assert quantum.size() == 5

    def test_soft_add_cannot_exceed_hard(self):
        quantum = full()
        quantum.limit_by_rank(2, True)
        quantum.add_card(card("r3"), soft=True)

        assert card("r3") not in quantum
        assert quantum.size() == 5

    def test_soft_add_revives(self):
        quantum = full()
        quantum.remove_card(card("b2"), soft=True)
        quantum.add_card(card("b2"), soft=True)

        assert card("b2") in quantum

    def test_hard_add(self):
        quantum = CardQuantum.empty(DEFAULT_VARIANT)
        quantum.add_card(card("p5"))

        assert quantum.hard_single() == card("p5")
        assert quantum.single() == card("p5")

    def test_clear_drops_hard(self):
        quantum = full()
        quantum.clear()
        quantum.reset_soft()

        assert quantum.is_empty()
        assert quantum.hard_size() == 0


class TestSetOperations:
    def test_limit_to(self):
        quantum = full()
        quantum.limit_to(CardQuantum.of(DEFAULT_VARIANT, cards("r1 y1")))

        assert list(quantum) == cards("r1 y1")
        assert quantum.hard_size() == 2

    def test_soft_limit_to(self):
        quantum = full()
        quantum.limit_to(CardQuantum.of(DEFAULT_VARIANT, cards("r1 y1")), soft=True)

        assert quantum.size() == 2
        assert quantum.hard_size() == 25

    def test_remove_all(self):
        quantum = CardQuantum.of(DEFAULT_VARIANT, cards("r1 r2 r3"))
        quantum.remove_all(CardQuantum.of(DEFAULT_VARIANT, cards("r2")))

        assert list(quantum) == cards("r1 r3")

    def test_intersects_and_superset(self):
        low = CardQuantum.of(DEFAULT_VARIANT, cards("r1 g1"))
        other = CardQuantum.of(DEFAULT_VARIANT, cards("g1 g2"))

        assert low.intersects(other)
        assert full().issuperset(low)
        assert not low.issuperset(other)

    def test_is_rank_is_vacuous_on_empty(self):
        assert CardQuantum.empty(DEFAULT_VARIANT).is_rank(4)

    def test_iteration_order(self):
        quantum = CardQuantum.of(DEFAULT_VARIANT, cards("b2 r2 y2 g2"))

        assert list(quantum) == cards("r2 y2 g2 b2")

    def test_copy_is_independent(self):
        quantum = full()
        clone = quantum.copy()
        clone.limit_by_rank(1, True)

        assert quantum.size() == 25
        assert clone != quantum

    def test_single_requires_exactly_one(self):
        assert full().single() is None
        assert CardQuantum.empty(DEFAULT_VARIANT).single() is None
