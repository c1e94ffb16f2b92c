"""One physical hand position as seen from a single seat."""

from __future__ import annotations

from dataclasses import dataclass

from src.core.card_quantum import CardQuantum
from src.engine.card_states import CardStates
from src.game.cards import Card


@dataclass
class Slot:
    """
    Belief about one card in some hand.

    Attributes:
        card: True identity (None for the observing seat's own cards)
        quantum: Identities still possible
        clued: Touched by a clue
        play: Believed to be playable once ``delayed`` reaches zero
        trash: Known to be worthless
        locked: Identity pinned for everybody
        fixed: Belief collapsed to the single remaining hard possibility
        promised: Draw turn of the clued card whose finesse this slot owes
        delayed: Pending inferences that must resolve before ``play`` counts
        turn: Draw counter, unique per slot of a line
    """

    card: Card | None
    quantum: CardQuantum
    turn: int
    clued: bool = False
    play: bool = False
    trash: bool = False
    locked: bool = False
    fixed: bool = False
    promised: int | None = None
    delayed: int = 0

    def copy(self) -> "Slot":
        return Slot(
            self.card,
            self.quantum.copy(),
            self.turn,
            self.clued,
            self.play,
            self.trash,
            self.locked,
            self.fixed,
            self.promised,
            self.delayed,
        )

    def update_slot_attributes(self, card_states: CardStates) -> None:
        """Derive the play/trash flags from the quantum and the aggregates."""
        if self.delayed > 0:
            return
        if self.quantum.size() == 0:
            self.trash = True
            self.play = False
            return
        all_trash = card_states.trash_quantum.issuperset(self.quantum)
        all_playable = card_states.play_quantum.issuperset(self.quantum)
        if not card_states.play_quantum.intersects(self.quantum):
            self.play = False
        if all_playable:
            self.play = True
            self.trash = False
        if all_trash:
            self.trash = True
        if self.trash:
            self.play = False

    def __repr__(self) -> str:
        text = f"{self.card if self.card is not None else '??'} {self.quantum!r}"
        if self.clued:
            text += "'"
        if self.trash:
            text += " kt"
        elif self.play:
            text += " !"
        if self.delayed:
            text += f" d{self.delayed}"
        if self.promised is not None:
            text += f" p{self.promised}"
        return f"Slot({text} t{self.turn})"
