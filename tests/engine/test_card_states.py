"""Tests for CardStates transitions and copy tracking."""

from src.engine.card_states import GONE, UNSEEN, CardPlayState, CardStates
from src.game.cards import DEFAULT_VARIANT
from tests.test_helpers import card


def states():
    return CardStates(DEFAULT_VARIANT)


class TestInitialClassification:
    def test_fresh_suit(self):
        card_states = states()

        assert card_states[card("r1")].play == CardPlayState.PLAYABLE
        for rank in (2, 3, 4):
            assert card_states[card(f"r{rank}")].play == CardPlayState.NORMAL
        assert card_states[card("r5")].play == CardPlayState.CRITICAL

    def test_aggregates(self):
        card_states = states()

        assert card_states.trash_quantum.is_empty()
        assert card_states.play_quantum.size() == 5
        assert card_states.play_quantum.is_rank(1)

    def test_every_identity_iterated(self):
        assert len(list(states())) == 25


class TestPlayed:
    def test_round_trip(self):
        card_states = states()

        card_states.played(card("g1"))
        assert card_states[card("g1")].play == CardPlayState.TRASH
        assert card_states[card("g2")].play == CardPlayState.PLAYABLE

        for rank in (2, 3, 4):
            card_states.played(card(f"g{rank}"))
        assert card_states[card("g5")].play == CardPlayState.CRITICAL_PLAYABLE

    def test_aggregates_follow(self):
        card_states = states()
        card_states.played(card("b1"))

        assert card("b1") in card_states.trash_quantum
        assert card("b1") not in card_states.play_quantum
        assert card("b2") in card_states.play_quantum

    def test_playing_a_five(self):
        card_states = states()
        for rank in range(1, 6):
            card_states.played(card(f"y{rank}"))

        assert card_states[card("y5")].play == CardPlayState.TRASH
        assert card_states.play_quantum.size() == 4

    def test_critical_promoted_when_reached(self):
        card_states = states()
        card_states.discarded(card("r2"))
        assert card_states[card("r2")].play == CardPlayState.CRITICAL

        card_states.played(card("r1"))

        assert card_states[card("r2")].play == CardPlayState.CRITICAL_PLAYABLE


class TestDiscarded:
    def test_escalation(self):
        card_states = states()

        card_states.discarded(card("r3"))
        assert card_states[card("r3")].play == CardPlayState.CRITICAL

        card_states.discarded(card("r3"))
        for rank in (3, 4, 5):
            assert card_states[card(f"r{rank}")].play == CardPlayState.DEAD
            assert card(f"r{rank}") in card_states.trash_quantum
        assert card_states[card("r2")].play == CardPlayState.NORMAL

    def test_first_rank_one_discard_absorbed(self):
        card_states = states()

        card_states.discarded(card("b1"))
        assert card_states[card("b1")].play == CardPlayState.PLAYABLE

        card_states.discarded(card("b1"))
        assert card_states[card("b1")].play == CardPlayState.CRITICAL_PLAYABLE

        card_states.discarded(card("b1"))
        assert card_states[card("b1")].play == CardPlayState.DEAD
        assert card("b1") not in card_states.play_quantum

    def test_discarding_a_five_kills_it(self):
        card_states = states()
        card_states.discarded(card("p5"))

        assert card_states[card("p5")].play == CardPlayState.DEAD

    def test_worthless_cards_unchanged(self):
        card_states = states()
        card_states.played(card("g1"))
        card_states.discarded(card("g1"))
        card_states.discarded(card("g1"))

        assert card_states[card("g1")].play == CardPlayState.TRASH


class TestTracking:
    def test_two_copy_card(self):
        card_states = states()

        assert not card_states.track(card("g4"), 1, UNSEEN)
        assert card_states.track(card("g4"), 3, UNSEEN)
        assert card_states.fully_tracked(card("g4"))
        assert card_states.fully_tracked(card("g4"), seat=2)
        assert not card_states.fully_tracked(card("g4"), seat=1)

    def test_moving_a_copy(self):
        card_states = states()
        card_states.track(card("b5"), 1, UNSEEN)
        card_states.track(card("b5"), GONE, 1)

        assert card_states.fully_tracked(card("b5"), seat=1)
        assert card_states[card("b5")].tracked_count == 1

    def test_copy_is_independent(self):
        card_states = states()
        clone = card_states.copy()
        clone.played(card("r1"))

        assert card_states[card("r1")].play == CardPlayState.PLAYABLE
        assert card("r1") in card_states.play_quantum
