"""
The belief state of one seat.

A ``Line`` receives every game event in order, keeps a quantum per visible
slot, interprets clues and answers the two decision queries (which card to
play, which to discard). Seats are numbered relative to the owner: seat 0 is
the owner, seat 1 the next player, and so on.

``Line.clue`` applies a hypothetical clue to the line itself and scores the
result; callers explore candidate clues on ``copy()``.
"""

from __future__ import annotations

import logging

from src.core.card_quantum import CardQuantum
from src.core.position_set import PositionSet
from src.engine.callbacks import (
    Callback,
    CallbackEvent,
    describe,
    drop_finesses_on,
    resolve_callbacks,
)
from src.engine.card_states import EVERYONE, GONE, UNSEEN, CardPlayState, CardStates
from src.engine.hands import Hands
from src.engine.line_score import LineScore
from src.engine.play_evaluation import resolve_play_clue
from src.engine.slot import Slot
from src.game.actions import Clue, Move, discard, play
from src.game.cards import DEFAULT_VARIANT, NUM_RANKS, Card, Variant
from src.shared.config import HeuristicsConfig

logger = logging.getLogger(__name__)


class Line:
    """
    Aggregate belief state for one seat of one game.

    Args:
        num_players: Seats in the game
        own_player: Absolute seat of the owner (only used for display)
        variant: Ruleset
        heuristics: Weights used by ``score`` and clue interpretation
    """

    def __init__(
        self,
        num_players: int,
        own_player: int = 0,
        variant: Variant = DEFAULT_VARIANT,
        heuristics: HeuristicsConfig | None = None,
    ):
        self.variant = variant
        self.heuristics = heuristics or HeuristicsConfig()
        self.own_player = own_player
        self.hands = Hands(num_players, variant.hand_size(num_players))
        self.card_states = CardStates(variant)
        self.callbacks: list[Callback] = []
        self.turn = 0
        self.points = 0
        self._draws = 0

    @property
    def num_players(self) -> int:
        return self.hands.num_players

    def copy(self) -> "Line":
        """Independent structural copy for what-if exploration."""
        clone = Line.__new__(Line)
        clone.variant = self.variant
        clone.heuristics = self.heuristics
        clone.own_player = self.own_player
        clone.hands = self.hands.copy()
        clone.card_states = self.card_states.copy()
        clone.callbacks = self.callbacks[:]
        clone.turn = self.turn
        clone.points = self.points
        clone._draws = self._draws
        return clone

    def find_slot(self, seat: int, turn: int) -> int | None:
        """Arena index of ``seat``'s slot drawn at ``turn``, if still held."""
        for index in self.hands.indices(seat):
            if self.hands.slots[index].turn == turn:
                return index
        return None

    def _update_all(self) -> None:
        for _seat, _pos, slot in self.hands.iter_all():
            slot.update_slot_attributes(self.card_states)

    def _next_draw(self) -> int:
        self._draws += 1
        return self._draws

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def drawn(self, seat: int, card: Card) -> None:
        """Another seat drew ``card``."""
        if seat == 0:
            raise ValueError("The owner's draws are unseen; use own_drawn()")
        quantum = CardQuantum(self.variant)
        for identity, _state in self.card_states:
            # All copies are visible to this seat elsewhere.
            if self.card_states.fully_tracked(identity, seat):
                quantum.remove_card(identity)
        self.hands.insert(seat, Slot(card, quantum, self._next_draw()))
        self._track_card(card, seat, UNSEEN)

    def own_drawn(self) -> None:
        """The owner drew an unseen card."""
        quantum = CardQuantum(self.variant)
        for identity, _state in self.card_states:
            if self.card_states.fully_tracked(identity):
                quantum.remove_card(identity)
        self.hands.insert(0, Slot(None, quantum, self._next_draw()))

    def _track_card(self, card: Card, place: int, old_place: int) -> None:
        if not self.card_states.track(card, place, old_place):
            return
        places = self.card_states[card].tracked_places
        for seat in range(self.num_players):
            if seat in places:
                continue
            # This seat sees every copy of the card somewhere else.
            for _pos, slot in self.hands.iter_hand(seat):
                if slot.card != card:
                    slot.quantum.remove_card(card)
                    slot.update_slot_attributes(self.card_states)

    def played(self, seat: int, pos: int, card: Card, successful: bool) -> None:
        """``seat`` played position ``pos``, revealing ``card``."""
        self.turn += 1
        index, slot = self.hands.remove(seat, pos)
        if seat == 0:
            self._track_card(card, GONE, UNSEEN)
        else:
            self._track_card(card, GONE, seat)

        if successful:
            self.points += 1
            self.card_states[card].clued = EVERYONE
            self.card_states.played(card)
            for _seat, _pos, other in self.hands.iter_all():
                if other.clued:
                    other.quantum.remove_card(card, soft=True)
        else:
            believed = slot.quantum.single()
            if believed is not None:
                self.card_states[believed].clued = None
            self.card_states[card].clued = None
            self.card_states.discarded(card)

        resolve_callbacks(self, CallbackEvent(seat, index, card, played=True, successful=successful))
        # Callbacks on the removed slot are settled before the hand is cleaned up.
        if not successful and not slot.clued:
            logger.debug(f"P{seat} misplayed blind {card}, finesses on that hand broken")
            self._break_finesses(seat)
        self._update_all()

    def _break_finesses(self, seat: int) -> None:
        drop_finesses_on(self, seat)
        for _pos, slot in self.hands.iter_hand(seat):
            if slot.promised is not None and not slot.clued:
                slot.promised = None
                slot.play = False

    def discarded(self, seat: int, pos: int, card: Card) -> None:
        """``seat`` discarded position ``pos``, revealing ``card``."""
        self.turn += 1
        self.card_states.discarded(card)
        index, slot = self.hands.remove(seat, pos)
        if slot.clued and seat > 0:
            self.card_states[slot.card].clued = None
        if seat == 0:
            self._track_card(card, GONE, UNSEEN)
        else:
            self._track_card(card, GONE, seat)
        resolve_callbacks(self, CallbackEvent(seat, index, card))
        self._update_all()

    def clued(self, who: int, whom: int, clue: Clue, touched: PositionSet) -> int:
        """
        ``who`` clued ``whom``, touching the positions in ``touched``.

        Returns the error weight accumulated while interpreting the clue.
        """
        if touched.is_empty():
            raise ValueError("A clue must touch at least one card")
        if who == whom:
            raise ValueError(f"Seat {who} cannot clue itself")
        size = self.hands.hand_size(whom)
        if touched.capacity != size:
            raise ValueError(
                f"Touched positions cover {touched.capacity} cards, hand has {size}"
            )
        self.turn += 1
        resolve_callbacks(self, CallbackEvent(who))

        weights = self.heuristics
        card_states = self.card_states
        error = 0
        previously = PositionSet(size)
        for pos, slot in self.hands.iter_hand(whom):
            if slot.clued:
                previously.add(pos)
        newly = touched - previously

        for pos, slot in self.hands.iter_hand(whom):
            old_size = slot.quantum.size()
            previous = slot.quantum.single()
            if clue.is_rank:
                slot.quantum.limit_by_rank(clue.value, pos in touched)
            else:
                slot.quantum.limit_by_suit(clue.value, pos in touched)
            if old_size != 0 and slot.quantum.size() == 0 and slot.quantum.hard_size() >= 1:
                # The clue contradicts an assumption: fall back to the facts.
                slot.quantum.reset_soft()
                if previous is not None:
                    card_states[previous].clued = None
                if slot.quantum.hard_size() == 1:
                    slot.fixed = True
            if old_size != 1 and slot.quantum.size() == 1:
                card = slot.quantum.single()
                if slot.clued or pos in newly:
                    if whom == 0 or slot.card == card:
                        card_states[card].clued = EVERYONE
                        card_states[card].locked = (whom, slot.turn)
                    if not slot.play:
                        slot.locked = True
                slot.update_slot_attributes(card_states)
                for other_pos, other in self.hands.iter_hand(whom):
                    if other_pos != pos:
                        other.quantum.remove_card(card, soft=True)

        if newly.is_empty():
            focus = touched.first()
            slot = self.hands.slot(whom, focus)
            if slot.play and not slot.locked and not slot.fixed:
                logger.debug(f"error {weights.reclue_error}: {slot!r} already has a play clue")
                error += weights.reclue_error
            if not slot.fixed:
                slot.play = True
            return error

        rank_five = clue.is_rank and clue.value == NUM_RANKS
        old_chop = self.hands.chop(whom)
        potential_safe = False
        if old_chop is not None and old_chop in touched:
            focus = old_chop
            chop_slot = self.hands.slot(whom, focus)
            for candidate in list(chop_slot.quantum):
                state = card_states[candidate].play
                if state == CardPlayState.CRITICAL:
                    # 5s are only saved by rank.
                    if candidate.rank != NUM_RANKS or rank_five:
                        potential_safe = True
                elif state.is_worthless():
                    chop_slot.quantum.remove_card(candidate, soft=True)
        else:
            focus = newly.first()

        for pos in newly.iter_first(focus):
            slot = self.hands.slot(whom, pos)
            slot.clued = True
            if not slot.locked:
                for identity, state in card_states.iter_clued():
                    if state.clued != whom:
                        slot.quantum.remove_card(identity, soft=True)
            if pos == focus:
                true_five = slot.card is not None and slot.card.rank == NUM_RANKS
                if potential_safe and (whom == 0 or rank_five or not true_five):
                    self._restrict_to_save(slot, rank_five)
                else:
                    slot.play = True
                    error += resolve_play_clue(self, who, whom, pos)
                single = slot.quantum.single()
                if single is not None and (whom == 0 or single == slot.card):
                    card_states[single].clued = EVERYONE
                    card_states[single].locked = (whom, slot.turn)
                    if whom == 0:
                        for seat in range(1, self.num_players):
                            if seat == who:
                                continue
                            for _pos, other in self.hands.iter_hand(seat):
                                if other.clued:
                                    other.quantum.remove_card(single, soft=True)
            slot.update_slot_attributes(card_states)
            if pos == focus and slot.trash:
                logger.debug(f"error {weights.trash_focus_error}: focus {slot!r} is trash")
                error += weights.trash_focus_error
            if whom != 0:
                card = slot.card
                for seat in range(self.num_players):
                    if seat in (who, whom):
                        continue
                    for _pos, other in self.hands.iter_hand(seat):
                        if other.clued:
                            other.quantum.remove_card(card, soft=True)
                if card_states[card].clued is None:
                    card_states[card].clued = whom
        return error

    def _restrict_to_save(self, slot: Slot, rank_five: bool) -> None:
        """A save clue only protects critical (or playable) identities."""
        for candidate in list(slot.quantum):
            state = self.card_states[candidate].play
            if state == CardPlayState.NORMAL or state.is_worthless():
                slot.quantum.remove_card(candidate, soft=True)
            elif state == CardPlayState.CRITICAL and candidate.rank == NUM_RANKS and not rank_five:
                slot.quantum.remove_card(candidate, soft=True)

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def play(self) -> Move | None:
        """First own card known to be playable with nothing left to wait for."""
        for pos, slot in self.hands.iter_hand(0):
            if slot.trash:
                continue
            if slot.clued:
                slot.update_slot_attributes(self.card_states)
            if (
                slot.play
                and slot.delayed == 0
                and self.card_states.play_quantum.intersects(slot.quantum)
            ):
                return play(pos)
        return None

    def discard(self) -> Move:
        """Known trash, else the chop, else the least valuable clued card."""
        for pos, slot in self.hands.iter_hand(0):
            if slot.trash:
                return discard(pos)
        chop = self.hands.chop(0)
        if chop is not None:
            return discard(chop)
        for rank in range(NUM_RANKS, 0, -1):
            for pos, slot in self.hands.iter_hand(0):
                if slot.quantum.is_empty() or not slot.quantum.is_rank(rank):
                    continue
                if not any(self.card_states[card].play.is_critical() for card in slot.quantum):
                    return discard(pos)
        return discard(0)

    def clue(self, whom: int, clue: Clue) -> LineScore | None:
        """
        Apply the owner cluing ``whom`` to this line and score the result.

        Returns None when the clue touches nothing, or when the receiver would
        read a newly touched card as something it is not.
        """
        if whom == 0:
            raise ValueError("The owner cannot clue itself")
        touched = PositionSet(self.hands.hand_size(whom))
        newly = []
        for pos, slot in self.hands.iter_hand(whom):
            if clue.touches(slot.card):
                touched.add(pos)
                if not slot.clued:
                    newly.append(self.hands.slot_index(whom, pos))
        if touched.is_empty():
            return None
        error = self.clued(0, whom, clue, touched)
        for index in newly:
            slot = self.hands.slot_at(index)
            if not slot.trash and not slot.quantum.contains(slot.card):
                logger.debug(f"clue {clue} to P{whom} misreads {slot!r}")
                return None
        return self.score(error)

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def score(self, extra_error: int = 0) -> LineScore:
        """Heuristic value of the position, seen from the owner."""
        weights = self.heuristics
        if extra_error > 0:
            logger.debug(f"error {extra_error}: passed in")
        errors = extra_error
        clued = play_count = finesses = discard_risks = bonus = 0

        for seat in range(1, self.num_players):
            queued_actions = 0
            chop_seen = False
            discard_risk = 0
            for _pos, slot in self.hands.iter_hand_reversed(seat):
                state = self.card_states[slot.card]
                if slot.clued:
                    clued += 1
                    if slot.play:
                        play_count += 1
                        queued_actions += 1
                    if slot.trash:
                        if state.play.is_worthless():
                            queued_actions += 1
                        elif not self._duplicate_of_locked(seat, slot):
                            logger.debug(f"error: trash flagged {slot!r} is {state.play}")
                            errors += self._flag_error(state.play)
                    elif state.play.is_worthless():
                        logger.debug(f"error {weights.flag_error}: clued {slot!r} is trash")
                        errors += weights.flag_error
                elif slot.promised is not None:
                    finesses += 1
                    queued_actions += 1
                elif not chop_seen:
                    chop_seen = True
                    if state.clued is None:
                        discard_risk += self._chop_risk(state.play)

                if slot.play and slot.delayed == 0 and not state.play.is_playable():
                    error = self._play_flag_error(state.play)
                    logger.debug(f"error {error}: {state.play} {slot!r} marked as to play")
                    errors += error

                locked = state.locked
                if (
                    not slot.trash
                    and (locked is None or locked == (seat, slot.turn) or slot.quantum.size() > 0)
                    and not slot.quantum.contains(slot.card)
                ):
                    error = self._misread_error(state.play)
                    logger.debug(f"error {error}: {slot.card} not in its quantum {slot!r}")
                    errors += error
                if slot.quantum.size() == 1:
                    bonus += 1
            if discard_risk != 0 and queued_actions < 1:
                discard_risks += discard_risk

        return LineScore(
            score=self.points,
            clued=clued,
            play=play_count,
            finesses=finesses,
            discard_risks=discard_risks,
            errors=errors,
            bonus=bonus,
            error_multiplier=weights.error_multiplier,
            clued_weight=weights.clued_weight,
        )

    def _duplicate_of_locked(self, seat: int, slot: Slot) -> bool:
        locked = self.card_states[slot.card].locked
        return (
            locked is not None
            and locked[0] == seat
            and locked[1] != slot.turn
            and slot.quantum.size() == 0
        )

    def _flag_error(self, play_state: CardPlayState) -> int:
        """Weight of a trash flag on a card that is still needed."""
        weights = self.heuristics
        if play_state.is_critical():
            return weights.critical_flag_error
        if play_state.is_playable():
            return weights.flag_error
        return weights.minor_flag_error

    def _play_flag_error(self, play_state: CardPlayState) -> int:
        """Weight of a play flag on a card that cannot be played now."""
        weights = self.heuristics
        if play_state.is_critical():
            return weights.critical_flag_error
        if play_state == CardPlayState.NORMAL:
            return weights.flag_error
        return weights.minor_flag_error

    def _misread_error(self, play_state: CardPlayState) -> int:
        """Weight of a quantum that lost the card's true identity."""
        weights = self.heuristics
        if play_state.is_critical():
            return weights.critical_flag_error
        if play_state.is_worthless():
            return weights.minor_flag_error
        return weights.flag_error

    def _chop_risk(self, play_state: CardPlayState) -> int:
        weights = self.heuristics
        if play_state == CardPlayState.CRITICAL:
            return weights.chop_critical_risk
        if play_state == CardPlayState.CRITICAL_PLAYABLE:
            return weights.chop_critical_playable_risk
        if play_state == CardPlayState.PLAYABLE:
            return weights.chop_playable_risk
        return 0

    def __repr__(self) -> str:
        lines = [f"Line (turn: {self.turn}, score: {self.points})"]
        for seat in range(self.num_players):
            absolute = (self.own_player + seat) % self.num_players
            cards = ", ".join(repr(slot) for _pos, slot in self.hands.iter_hand(seat))
            lines.append(f"P{absolute} [{cards}]")
        lines.append(f" card states: {self.card_states!r}")
        if self.callbacks:
            lines.append(" callbacks: " + ", ".join(describe(cb) for cb in self.callbacks))
        return "\n".join(lines)
