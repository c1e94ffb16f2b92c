"""
Pending inferences and their resolution.

A callback ties a *delayed* slot (one whose ``play`` flag must not be trusted
yet) to the event that will settle it. Every slot reference is an arena index,
never a hand position. The four kinds form a closed set; each has exactly one
handler, selected by type in :func:`resolve_callbacks`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Union

from src.game.cards import Card

if TYPE_CHECKING:
    from src.engine.line import Line

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WaitingPlay:
    """``delayed`` follows whatever ``pending`` turns out to be."""

    delayed: int
    pending: int


@dataclass(frozen=True)
class PotentialPrompt:
    """Settled as soon as ``potential_player`` takes any action."""

    delayed: int
    potential_player: int


@dataclass(frozen=True)
class PotentialFinesse:
    """``pending`` is believed to be ``expected_card``; confirmed when it is played."""

    delayed: int
    pending: int
    expected_card: Card


@dataclass(frozen=True)
class Finesse:
    """``pending`` owes a blind play that ``delayed`` builds on."""

    delayed: int
    pending: int


Callback = Union[WaitingPlay, PotentialPrompt, PotentialFinesse, Finesse]


@dataclass(frozen=True)
class CallbackEvent:
    """
    A game event callbacks may react to.

    Attributes:
        seat: Acting seat
        index: Arena index of the removed slot (None for clues)
        card: Card revealed by the removal
        played: The slot was played rather than discarded
        successful: The play succeeded
    """

    seat: int
    index: int | None = None
    card: Card | None = None
    played: bool = False
    successful: bool = False


def _release(line: "Line", index: int) -> None:
    """Count down one pending inference of the slot at ``index``."""
    slot = line.hands.slot_at(index)
    if slot.delayed > 0:
        slot.delayed -= 1
    if slot.delayed == 0:
        slot.update_slot_attributes(line.card_states)


def _revive_next(line: "Line", index: int, card: Card) -> None:
    following = card.next()
    if following is not None:
        line.hands.slot_at(index).quantum.add_card(following, soft=True)


def _on_waiting_play(callback: WaitingPlay, line: "Line", event: CallbackEvent) -> bool:
    if event.index == callback.delayed:
        return False
    if event.index != callback.pending:
        return True
    if event.played and event.successful:
        _revive_next(line, callback.delayed, event.card)
    _release(line, callback.delayed)
    return False


def _on_potential_prompt(
    callback: PotentialPrompt, line: "Line", event: CallbackEvent
) -> bool:
    if event.index is not None and event.index == callback.delayed:
        return False
    if event.seat != callback.potential_player:
        return True
    _release(line, callback.delayed)
    return False


def _on_potential_finesse(
    callback: PotentialFinesse, line: "Line", event: CallbackEvent
) -> bool:
    if event.index == callback.delayed:
        return False
    if event.index != callback.pending:
        return True
    delayed = line.hands.slot_at(callback.delayed)
    following = callback.expected_card.next()
    if event.played and event.card == callback.expected_card:
        if following is not None and delayed.quantum.hard_contains(following):
            delayed.quantum.soft_clear()
            delayed.quantum.add_card(following, soft=True)
        logger.debug(f"finesse on {callback.expected_card} confirmed")
    else:
        if following is not None:
            delayed.quantum.remove_card(following, soft=True)
        logger.debug(f"finesse on {callback.expected_card} abandoned (revealed {event.card})")
    _release(line, callback.delayed)
    return False


def _on_finesse(callback: Finesse, line: "Line", event: CallbackEvent) -> bool:
    if event.index == callback.delayed:
        return False
    if event.index != callback.pending:
        return True
    if event.played and event.successful:
        _revive_next(line, callback.delayed, event.card)
    _release(line, callback.delayed)
    return False


_HANDLERS: dict[type, Callable[..., bool]] = {
    WaitingPlay: _on_waiting_play,
    PotentialPrompt: _on_potential_prompt,
    PotentialFinesse: _on_potential_finesse,
    Finesse: _on_finesse,
}


def resolve_callbacks(line: "Line", event: CallbackEvent) -> None:
    """Run every pending callback against ``event``, dropping the settled ones."""
    remaining = []
    # Handlers mutate slots, so work on a snapshot of the queue.
    for callback in list(line.callbacks):
        if _HANDLERS[type(callback)](callback, line, event):
            remaining.append(callback)
    line.callbacks = remaining


def drop_finesses_on(line: "Line", seat: int) -> None:
    """
    Abandon every finesse expected from ``seat``'s hand.

    Used after a blind play from that hand failed.
    """
    remaining = []
    for callback in line.callbacks:
        if not line.hands.is_live(callback.delayed):
            continue
        if isinstance(callback, (Finesse, PotentialFinesse)) and (
            line.hands.is_live(callback.pending)
            and line.hands.seat_of(callback.pending) == seat
        ):
            _release(line, callback.delayed)
            continue
        remaining.append(callback)
    line.callbacks = remaining


def describe(callback: Callback) -> str:
    """Compact rendering for debug logs."""
    if isinstance(callback, WaitingPlay):
        return f"WaitingPlay({callback.delayed} after {callback.pending})"
    if isinstance(callback, PotentialPrompt):
        return f"PotentialPrompt({callback.delayed} until P{callback.potential_player} acts)"
    if isinstance(callback, PotentialFinesse):
        return (
            f"PotentialFinesse({callback.delayed} after {callback.pending}"
            f" = {callback.expected_card})"
        )
    return f"Finesse({callback.delayed} after {callback.pending})"
