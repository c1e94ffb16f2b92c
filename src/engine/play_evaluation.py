"""
Backward chaining over predecessor ranks to interpret play clues.

Given that seat ``who`` clued seat ``whom`` and a hypothesized identity for the
focused slot, :meth:`PlayEvaluation.evaluate` checks whether every lower rank
of the same suit is accounted for: already played, or sitting somewhere it
will be played in time. Each predecessor is looked up with a fixed priority,
simplest explanation first:

1. already played
2. pinned for everybody (prompt)
3. clued to a known seat and queued to play there (waiting play)
4. clued to a known seat and unambiguous there (prompt)
5. the finesse position of another seat, last seat first (finesse)
6. a queued slot of the observing seat's own hand (waiting play)
7. a self prompt / self finesse, only in the matching search mode

The recorded chain is turned into callbacks by :meth:`PlayEvaluation.mark`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from src.engine.callbacks import (
    Finesse,
    PotentialFinesse,
    PotentialPrompt,
    WaitingPlay,
)
from src.engine.card_states import EVERYONE, CardPlayState
from src.game.cards import Card

if TYPE_CHECKING:
    from src.engine.line import Line

logger = logging.getLogger(__name__)


class SearchMode(Enum):
    """How far the observing seat may look into its own hand."""

    NO_SELF = auto()
    SELF_PROMPT = auto()
    SELF_FINESSE = auto()

    def __str__(self) -> str:
        return self.name.lower()


SEARCH_MODES = (SearchMode.NO_SELF, SearchMode.SELF_PROMPT, SearchMode.SELF_FINESSE)


class Certainty(Enum):
    """How firmly a recorded chain is committed."""

    PREP = auto()  # the true identity of another seat's card
    UNAMBIGUOUS = auto()
    AMBIGUOUS = auto()

    def __str__(self) -> str:
        return self.name.lower()


class Relation(Enum):
    """How a predecessor is expected to reach the stacks."""

    PROMPT = auto()
    WAITING_PLAY = auto()
    FINESSE = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class ChainLink:
    """Where one predecessor of the focused card is believed to be."""

    card: Card
    seat: int
    index: int
    relation: Relation


@dataclass
class PlayEvaluation:
    """
    Outcome of checking one hypothesized identity of a focused slot.

    Attributes:
        who: Clue giver
        whom: Clue receiver
        focus: Arena index of the focused slot
        card: Hypothesized identity
        mode: Search mode used
        admissible: Every predecessor was accounted for
        hard_reject: The identity can be excluded permanently
        links: Located predecessors, lowest rank first
    """

    who: int
    whom: int
    focus: int
    card: Card
    mode: SearchMode
    admissible: bool = True
    hard_reject: bool = False
    links: list[ChainLink] = field(default_factory=list)

    @classmethod
    def evaluate(
        cls,
        line: "Line",
        who: int,
        whom: int,
        focus: int,
        card: Card,
        mode: SearchMode = SearchMode.NO_SELF,
    ) -> "PlayEvaluation":
        evaluation = cls(who, whom, focus, card, mode)
        state = line.card_states[card].play
        if state.is_worthless():
            evaluation._reject(hard=True)
            return evaluation
        if state.is_playable():
            return evaluation

        used = {focus}
        for predecessor in card.predecessors():
            play_state = line.card_states[predecessor].play
            if play_state == CardPlayState.TRASH:
                continue
            if play_state == CardPlayState.DEAD:
                evaluation._reject(hard=True)
                return evaluation
            link = evaluation._locate(line, predecessor, used)
            if link is None:
                evaluation._reject(hard=not evaluation._revivable(line, predecessor, used))
                logger.debug(
                    f"{who} clued {whom}: {card} rejected ({mode}), "
                    f"{predecessor} not found"
                )
                return evaluation
            evaluation.links.append(link)
            used.add(link.index)
        return evaluation

    def _reject(self, hard: bool) -> None:
        self.admissible = False
        self.hard_reject = hard
        self.links = []

    def _revivable(self, line: "Line", predecessor: Card, used: set[int]) -> bool:
        """Whether a wider search mode could still find ``predecessor``."""
        if self.mode == SearchMode.SELF_FINESSE or self.who == 0:
            return False
        hands = line.hands
        return any(
            index not in used and hands.slots[index].quantum.contains(predecessor)
            for index in hands.indices(0)
        )

    def _locate(self, line: "Line", predecessor: Card, used: set[int]) -> ChainLink | None:
        hands = line.hands
        state = line.card_states[predecessor]

        if state.clued == EVERYONE and state.locked is not None:
            index = line.find_slot(*state.locked)
            if index is not None and index not in used:
                return ChainLink(predecessor, state.locked[0], index, Relation.PROMPT)

        if state.clued is not None and state.clued != EVERYONE:
            seat = state.clued
            # A slot visibly holding the card beats one that merely could.
            order = sorted(
                hands.indices(seat),
                key=lambda index: hands.slots[index].card != predecessor,
            )
            for index in order:
                slot = hands.slots[index]
                if (
                    index not in used
                    and (slot.clued or slot.promised is not None)
                    and (slot.play or slot.delayed > 0)
                    and slot.quantum.contains(predecessor)
                ):
                    return ChainLink(predecessor, seat, index, Relation.WAITING_PLAY)
            for index in hands.indices(seat):
                slot = hands.slots[index]
                if index in used or not slot.clued:
                    continue
                if slot.quantum.single() == predecessor or (
                    seat == self.who and slot.quantum.contains(predecessor)
                ):
                    return ChainLink(predecessor, seat, index, Relation.PROMPT)

        for seat in range(hands.num_players - 1, 0, -1):
            if seat == self.who:
                continue
            if seat == self.whom and self.mode != SearchMode.SELF_FINESSE:
                continue
            index = self._finesse_position(line, seat, used)
            if index is not None and hands.slots[index].card == predecessor:
                return ChainLink(predecessor, seat, index, Relation.FINESSE)

        for index in hands.indices(0):
            slot = hands.slots[index]
            if (
                index not in used
                and (slot.play or slot.delayed > 0)
                and slot.quantum.contains(predecessor)
            ):
                return ChainLink(predecessor, 0, index, Relation.WAITING_PLAY)

        if self.who == 0 or self.mode == SearchMode.NO_SELF:
            return None
        for index in hands.indices(0):
            slot = hands.slots[index]
            if index not in used and slot.clued and slot.quantum.contains(predecessor):
                return ChainLink(predecessor, 0, index, Relation.PROMPT)
        if self.mode == SearchMode.SELF_FINESSE:
            index = self._finesse_position(line, 0, used)
            if index is not None and hands.slots[index].quantum.contains(predecessor):
                return ChainLink(predecessor, 0, index, Relation.FINESSE)
        return None

    @staticmethod
    def _finesse_position(line: "Line", seat: int, used: set[int]) -> int | None:
        """
        First unclued, unpromised slot of ``seat`` not already part of the chain.

        Clued and promised cards ahead of it shift the position; they never block it.
        """
        for index in line.hands.indices(seat):
            slot = line.hands.slots[index]
            if slot.clued or slot.promised is not None or index in used:
                continue
            return index
        return None

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def mark(self, line: "Line", certainty: Certainty, correct: bool = False) -> None:
        """
        Turn the recorded chain into callbacks.

        Prep and unambiguous marks pin every predecessor slot and chain it to
        the slot that waits for it; ambiguous marks only delay the focus until
        the seats involved have acted.
        """
        if not self.links:
            return
        if certainty == Certainty.AMBIGUOUS:
            self._mark_ambiguous(line)
            return

        hands = line.hands
        waiter = self.focus
        for link in reversed(self.links):
            slot = hands.slot_at(link.index)
            waiting = hands.slot_at(waiter)
            if link.relation == Relation.FINESSE:
                slot.promised = waiting.turn
                slot.play = True
                if link.seat == 0:
                    _collapse(slot.quantum, link.card)
                    line.callbacks.append(PotentialFinesse(waiter, link.index, link.card))
                else:
                    line.callbacks.append(Finesse(waiter, link.index))
                if correct and line.card_states[link.card].clued is None:
                    line.card_states[link.card].clued = link.seat
            else:
                _collapse(slot.quantum, link.card)
                slot.play = True
                line.callbacks.append(WaitingPlay(waiter, link.index))
            waiting.delayed += 1
            logger.debug(
                f"{certainty}: {self.card} waits for {link.card} "
                f"({link.relation} in P{link.seat})"
            )
            waiter = link.index

    def _mark_ambiguous(self, line: "Line") -> None:
        focus = line.hands.slot_at(self.focus)
        for link in self.links:
            if link.seat == self.whom:
                callback = WaitingPlay(self.focus, link.index)
            else:
                callback = PotentialPrompt(self.focus, link.seat)
            if callback not in line.callbacks:
                line.callbacks.append(callback)
                focus.delayed += 1


def _collapse(quantum, card: Card) -> None:
    if quantum.hard_contains(card):
        quantum.soft_clear()
        quantum.add_card(card, soft=True)


def resolve_play_clue(line: "Line", who: int, whom: int, pos: int) -> int:
    """
    Interpret the clue focused on ``whom``'s position ``pos`` as a play clue.

    Returns the accumulated error weight.
    """
    weights = line.heuristics
    error = 0
    focus = line.hands.slot_index(whom, pos)
    slot = line.hands.slot_at(focus)

    if whom != 0:
        prep = _first_admissible(line, who, whom, focus, slot.card)
        if prep is not None:
            prep.mark(line, Certainty.PREP, correct=True)
        else:
            logger.debug(f"{who} clued {whom}: no chain for the true card {slot.card}")
            error += weights.no_interpretation_error

    survivors: dict[Card, PlayEvaluation] = {}
    rejected: set[Card] = set()
    candidates = list(slot.quantum)
    pending = candidates
    for mode in SEARCH_MODES:
        deferred = []
        for card in pending:
            evaluation = PlayEvaluation.evaluate(line, who, whom, focus, card, mode)
            if evaluation.admissible:
                survivors[card] = evaluation
            elif evaluation.hard_reject:
                rejected.add(card)
            else:
                deferred.append(card)
        if survivors:
            break
        pending = deferred

    # Removals only apply once some identity explains the clue as a play.
    for card in candidates:
        if card in survivors:
            continue
        if card in rejected and survivors:
            slot.quantum.remove_card(card)
        elif survivors or line.card_states[card].play.is_worthless():
            slot.quantum.remove_card(card, soft=True)

    if len(survivors) == 1:
        (card, evaluation), = survivors.items()
        _collapse(slot.quantum, card)
        if whom == 0:
            evaluation.mark(line, Certainty.UNAMBIGUOUS)
    elif survivors:
        if whom == 0:
            for evaluation in survivors.values():
                evaluation.mark(line, Certainty.AMBIGUOUS)
    else:
        logger.debug(f"{who} clued {whom}: no identity left for position {pos}")
        error += weights.no_interpretation_error

    return min(error, weights.no_interpretation_error)


def _first_admissible(
    line: "Line", who: int, whom: int, focus: int, card: Card
) -> PlayEvaluation | None:
    for mode in SEARCH_MODES:
        evaluation = PlayEvaluation.evaluate(line, who, whom, focus, card, mode)
        if evaluation.admissible:
            return evaluation
        if evaluation.hard_reject:
            return None
    return None
