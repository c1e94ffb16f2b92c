"""Tests for callback resolution."""

from src.engine.callbacks import (
    CallbackEvent,
    Finesse,
    PotentialFinesse,
    PotentialPrompt,
    WaitingPlay,
    describe,
    drop_finesses_on,
    resolve_callbacks,
)
from src.engine.line import Line
from tests.test_helpers import card, deal, deal_own


class TestCallbacks:
    def setup_method(self):
        self.line = Line(3)
        deal_own(self.line, 5)
        deal(self.line, 1, "r1 y1 g1 b1 p1")
        deal(self.line, 2, "r2 y3 g4 b4 p4")
        self.waiter = self.line.hands.slot_index(2, 0)
        self.pending = self.line.hands.slot_index(1, 0)

    def delay(self, index):
        slot = self.line.hands.slot_at(index)
        slot.delayed = 1
        slot.play = True
        return slot

    def test_waiting_play_success_revives_next_card(self):
        slot = self.delay(self.waiter)
        slot.quantum.soft_clear()
        self.line.callbacks.append(WaitingPlay(self.waiter, self.pending))

        self.line.played(1, 0, card("r1"), True)

        assert self.line.callbacks == []
        assert slot.delayed == 0
        assert slot.quantum.single() == card("r2")
        assert slot.play

    def test_waiting_play_ignores_other_events(self):
        slot = self.delay(self.waiter)
        self.line.callbacks.append(WaitingPlay(self.waiter, self.pending))

        self.line.discarded(1, 4, card("p1"))

        assert len(self.line.callbacks) == 1
        assert slot.delayed == 1

    def test_removing_the_delayed_slot_drops_callback(self):
        self.delay(self.waiter)
        self.line.callbacks.append(WaitingPlay(self.waiter, self.pending))

        self.line.discarded(2, 0, card("r2"))

        assert self.line.callbacks == []

    def test_potential_prompt_waits_for_player(self):
        slot = self.delay(self.waiter)
        self.line.callbacks.append(PotentialPrompt(self.waiter, 1))

        resolve_callbacks(self.line, CallbackEvent(0))
        assert slot.delayed == 1

        resolve_callbacks(self.line, CallbackEvent(1))
        assert slot.delayed == 0
        assert self.line.callbacks == []

    def test_potential_finesse_confirmed(self):
        delayed = self.line.hands.slot_index(0, 1)
        pending = self.line.hands.slot_index(0, 0)
        slot = self.delay(delayed)
        self.line.callbacks.append(PotentialFinesse(delayed, pending, card("r1")))

        resolve_callbacks(
            self.line, CallbackEvent(0, pending, card("r1"), played=True, successful=True)
        )

        assert slot.quantum.single() == card("r2")
        assert slot.delayed == 0

    def test_potential_finesse_abandoned(self):
        delayed = self.line.hands.slot_index(0, 1)
        pending = self.line.hands.slot_index(0, 0)
        slot = self.delay(delayed)
        self.line.callbacks.append(PotentialFinesse(delayed, pending, card("r1")))

        resolve_callbacks(
            self.line, CallbackEvent(0, pending, card("y1"), played=True, successful=True)
        )

        assert card("r2") not in slot.quantum
        assert slot.quantum.hard_contains(card("r2"))
        assert slot.delayed == 0

    def test_failed_finesse_does_not_revive(self):
        slot = self.delay(self.waiter)
        slot.quantum.soft_clear()
        self.line.callbacks.append(Finesse(self.waiter, self.pending))

        resolve_callbacks(
            self.line, CallbackEvent(1, self.pending, card("r1"), played=True, successful=False)
        )

        assert slot.quantum.is_empty()
        assert slot.delayed == 0

    def test_drop_finesses_on_seat(self):
        slot = self.delay(self.waiter)
        self.line.callbacks.append(Finesse(self.waiter, self.pending))
        self.line.callbacks.append(PotentialPrompt(self.waiter, 1))
        slot.delayed = 2

        drop_finesses_on(self.line, 1)

        assert self.line.callbacks == [PotentialPrompt(self.waiter, 1)]
        assert slot.delayed == 1

    def test_drop_finesses_skips_removed_waiter(self):
        self.delay(self.waiter)
        self.line.callbacks.append(Finesse(self.waiter, self.pending))
        self.line.hands.remove(2, 0)

        drop_finesses_on(self.line, 1)

        assert self.line.callbacks == []

    def test_describe(self):
        assert describe(WaitingPlay(3, 5)) == "WaitingPlay(3 after 5)"
        assert "r1" in describe(PotentialFinesse(3, 5, card("r1")))
        assert describe(Finesse(1, 2)).startswith("Finesse")
        assert "P2" in describe(PotentialPrompt(1, 2))
