"""Test helpers for engine, agent and game tests."""

from src.game.actions import Move, discard
from src.game.cards import Card
from src.game.strategy import PlayerStrategy


def cards(text: str) -> list[Card]:
    """Parse a space separated list such as ``"r3 r4 b5"``."""
    return [Card.parse(token) for token in text.split()]


def card(text: str) -> Card:
    return Card.parse(text)


def deal(line, seat: int, hand: str) -> None:
    """
    Give ``seat`` the listed hand, newest card first.

    Cards are drawn in reverse so that the first listed card ends up at
    position 0 and the last one on chop.
    """
    for drawn in reversed(cards(hand)):
        line.drawn(seat, drawn)


def deal_own(line, count: int) -> None:
    for _ in range(count):
        line.own_drawn()


class InstructedPlayer(PlayerStrategy):
    """
    Strategy that replays a fixed list of moves and records every event.

    Once the moves run out it discards its oldest card.
    """

    def __init__(self, moves: list[Move] | None = None):
        self.moves = list(moves or [])
        self.events: list[tuple] = []
        self.hand_size = 0

    def init(self, num_players, own_player):
        self.events.append(("init", num_players, own_player))

    def act(self, status):
        self.events.append(("act", status))
        if self.moves:
            return self.moves.pop(0)
        return discard(max(self.hand_size - 1, 0))

    def drawn(self, seat, card):
        self.events.append(("drawn", seat, card))

    def own_drawn(self):
        self.hand_size += 1
        self.events.append(("own_drawn",))

    def played(self, seat, pos, card, successful):
        if seat == 0:
            self.hand_size -= 1
        self.events.append(("played", seat, pos, card, successful))

    def discarded(self, seat, pos, card):
        if seat == 0:
            self.hand_size -= 1
        self.events.append(("discarded", seat, pos, card))

    def clued(self, who, whom, clue, touched):
        self.events.append(("clued", who, whom, clue, touched))

    def of_kind(self, kind: str) -> list[tuple]:
        return [event for event in self.events if event[0] == kind]
