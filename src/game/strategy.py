"""
Interface between the game driver and a seat's decision maker.

Every event is delivered once, in game order, with seats given relative to
the receiving strategy (0 = the strategy's own seat).
"""

from abc import ABC, abstractmethod

from src.core.position_set import PositionSet
from src.game.actions import Clue, Move
from src.game.cards import Card
from src.game.state import GameStatus


class PlayerStrategy(ABC):
    """Abstract decision maker for one seat."""

    @abstractmethod
    def init(self, num_players: int, own_player: int) -> None:
        """Start a new game."""
        pass

    @abstractmethod
    def act(self, status: GameStatus) -> Move:
        """Choose the move for the current turn."""
        pass

    @abstractmethod
    def drawn(self, seat: int, card: Card) -> None:
        pass

    @abstractmethod
    def own_drawn(self) -> None:
        pass

    @abstractmethod
    def played(self, seat: int, pos: int, card: Card, successful: bool) -> None:
        pass

    @abstractmethod
    def discarded(self, seat: int, pos: int, card: Card) -> None:
        pass

    @abstractmethod
    def clued(self, who: int, whom: int, clue: Clue, touched: PositionSet) -> None:
        pass
