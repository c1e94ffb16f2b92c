"""
Global per-identity bookkeeping shared by every slot of a line.

Each of the 25 identities carries a play classification derived from the
authoritative play/discard history, an optional public holder marker, and a
counter of how many of its copies are accounted for (and where). Two
aggregate quanta mirror the classification so that a slot can be classified
by set comparison:

* ``trash_quantum``: every identity that is Trash or Dead;
* ``play_quantum``: every identity that is Playable or CriticalPlayable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator

from src.core.card_quantum import CardQuantum
from src.game.cards import NUM_RANKS, Card, Variant

# Holder marker: every seat knows where the card is.
EVERYONE = -1

# Tracked places besides seat numbers.
GONE = -1
UNSEEN = -2

MAX_COPIES = 3


class CardPlayState(Enum):
    """Classification of one card identity."""

    NORMAL = auto()
    PLAYABLE = auto()
    CRITICAL_PLAYABLE = auto()
    CRITICAL = auto()
    DEAD = auto()
    TRASH = auto()

    def __str__(self) -> str:
        return self.name.lower()

    def is_playable(self) -> bool:
        return self in (CardPlayState.PLAYABLE, CardPlayState.CRITICAL_PLAYABLE)

    def is_critical(self) -> bool:
        return self in (CardPlayState.CRITICAL, CardPlayState.CRITICAL_PLAYABLE)

    def is_worthless(self) -> bool:
        """Trash (already played) or Dead (can never be played)."""
        return self in (CardPlayState.TRASH, CardPlayState.DEAD)


_SYMBOLS = {
    CardPlayState.NORMAL: "",
    CardPlayState.PLAYABLE: ">",
    CardPlayState.CRITICAL_PLAYABLE: "!>",
    CardPlayState.CRITICAL: "!",
    CardPlayState.DEAD: "x",
    CardPlayState.TRASH: "v",
}


@dataclass
class CardState:
    """
    Mutable record for one identity.

    Attributes:
        play: Current classification
        clued: Seat the card is publicly known to be clued to, EVERYONE, or None
        locked: (seat, draw turn) of the slot everybody knows holds the card
        tracked_count: Copies whose whereabouts are accounted for
        tracked_places: Where each tracked copy is (seat, GONE or UNSEEN)
    """

    play: CardPlayState = CardPlayState.NORMAL
    clued: int | None = None
    locked: tuple[int, int] | None = None
    tracked_count: int = 0
    tracked_places: list[int] = field(default_factory=lambda: [UNSEEN] * MAX_COPIES)
    discards: int = 0

    def copy(self) -> "CardState":
        return CardState(
            self.play,
            self.clued,
            self.locked,
            self.tracked_count,
            self.tracked_places[:],
            self.discards,
        )

    def __repr__(self) -> str:
        text = _SYMBOLS[self.play]
        if self.clued is not None:
            text += "'" if self.clued == EVERYONE else f"'{self.clued}"
        if self.locked is not None:
            text += f"L{self.locked}"
        return text or "-"


class CardStates:
    """Classification, holder markers and copy tracking for all identities."""

    def __init__(self, variant: Variant):
        self.variant = variant
        self._states = [CardState() for _ in range(variant.num_cards)]
        for card in variant.cards():
            single = variant.card_count(card.rank) == 1
            if card.rank == 1:
                self[card].play = (
                    CardPlayState.CRITICAL_PLAYABLE if single else CardPlayState.PLAYABLE
                )
            elif single:
                self[card].play = CardPlayState.CRITICAL
        self.trash_quantum = CardQuantum.empty(variant)
        self.play_quantum = CardQuantum(variant)
        self.play_quantum.limit_by_rank(1, True)

    def copy(self) -> "CardStates":
        clone = CardStates.__new__(CardStates)
        clone.variant = self.variant
        clone._states = [state.copy() for state in self._states]
        clone.trash_quantum = self.trash_quantum.copy()
        clone.play_quantum = self.play_quantum.copy()
        return clone

    def __getitem__(self, card: Card) -> CardState:
        return self._states[self.variant.card_index(card)]

    def __iter__(self) -> Iterator[tuple[Card, CardState]]:
        for index, state in enumerate(self._states):
            yield self.variant.card_at(index), state

    def iter_clued(self) -> Iterator[tuple[Card, CardState]]:
        """Identities carrying a holder marker."""
        for card, state in self:
            if state.clued is not None:
                yield card, state

    def copies(self, card: Card) -> int:
        return self.variant.card_count(card.rank)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def played(self, card: Card) -> None:
        """Apply a successful play of ``card``."""
        self[card].play = CardPlayState.TRASH
        self.trash_quantum.add_card(card)
        self.play_quantum.remove_card(card)
        following = card.next()
        if following is None:
            return
        state = self[following]
        if state.play == CardPlayState.NORMAL:
            state.play = CardPlayState.PLAYABLE
            self.play_quantum.add_card(following)
        elif state.play == CardPlayState.CRITICAL:
            state.play = CardPlayState.CRITICAL_PLAYABLE
            self.play_quantum.add_card(following)

    def discarded(self, card: Card) -> None:
        """
        Apply a lost copy of ``card`` (discard or misplay).

        A copy is only noticed once a single copy remains, so the first
        discard of a three-copy rank-1 card leaves the classification alone.
        """
        state = self[card]
        state.discards += 1
        if state.play.is_worthless():
            return
        remaining = self.copies(card) - state.discards
        if remaining > 1:
            return
        if remaining == 1 and not state.play.is_critical():
            if state.play == CardPlayState.PLAYABLE:
                state.play = CardPlayState.CRITICAL_PLAYABLE
            else:
                state.play = CardPlayState.CRITICAL
            return
        self.play_quantum.remove_card(card)
        for rank in range(card.rank, NUM_RANKS + 1):
            higher = Card.new(card.suit, rank)
            self[higher].play = CardPlayState.DEAD
            self.trash_quantum.add_card(higher)

    def track(self, card: Card, place: int, old_place: int) -> bool:
        """
        Move one tracked copy of ``card`` from ``old_place`` to ``place``.

        Moving from UNSEEN counts a newly accounted copy. Returns True when all
        copies of the identity are accounted for.
        """
        state = self[card]
        for index, tracked in enumerate(state.tracked_places):
            if tracked == old_place:
                state.tracked_places[index] = place
                break
        if old_place == UNSEEN:
            state.tracked_count += 1
        return state.tracked_count == self.copies(card)

    def fully_tracked(self, card: Card, seat: int | None = None) -> bool:
        """
        Whether every copy is accounted for, optionally outside of ``seat``.
        """
        state = self[card]
        if state.tracked_count != self.copies(card):
            return False
        return seat is None or seat not in state.tracked_places

    def __repr__(self) -> str:
        entries = ", ".join(
            f"{card}: {state!r}"
            for card, state in self
            if state.play != CardPlayState.TRASH
        )
        return f"CardStates({{{entries}}})"
