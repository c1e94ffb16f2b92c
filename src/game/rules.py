"""
Reference game driver.

``HanabiGame`` owns the deck, the hands and the token bookkeeping, asks each
seat's strategy for a move in turn and notifies every strategy of what
happened, with seats given relative to the receiver. A move a strategy is not
allowed to make ends the game in the INVALID phase instead of raising.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from src.core.position_set import PositionSet
from src.game.actions import Move, MoveType
from src.game.cards import DEFAULT_VARIANT, NUM_RANKS, Card, Variant
from src.game.state import GamePhase, GameStatus
from src.game.strategy import PlayerStrategy

logger = logging.getLogger(__name__)


@dataclass
class HeldCard:
    """A card in a hand, with the public fact whether it was ever clued."""

    card: Card
    clued: bool = False


class HanabiGame:
    """
    Rules engine and turn loop for one game.

    Args:
        strategies: One strategy per seat, in seat order
        variant: Ruleset
        seed: Seed for the deck shuffle
        deck: Explicit draw order (first element drawn first); overrides ``seed``
        debug: Log a full dump of the game after every move
    """

    def __init__(
        self,
        strategies: Sequence[PlayerStrategy],
        variant: Variant = DEFAULT_VARIANT,
        seed: Optional[int] = None,
        deck: Optional[Sequence[Card]] = None,
        debug: bool = False,
    ):
        self.strategies = list(strategies)
        self.variant = variant
        self.num_players = len(self.strategies)
        self.hand_size = variant.hand_size(self.num_players)
        self.debug = debug

        if deck is None:
            cards = variant.deck()
            rng = np.random.default_rng(seed)
            deck = [cards[i] for i in rng.permutation(len(cards))]
        self.deck: deque[Card] = deque(deck)

        self.hands: list[list[HeldCard]] = [[] for _ in range(self.num_players)]
        self.stacks = {suit: 0 for suit in variant.suits}
        self.discards: dict[Card, int] = {}
        self.clues = variant.max_clues
        self.strikes = 0
        self.score = 0
        self.max_score = variant.max_score
        self.turn = 0
        self.active_player = 0
        self.phase = GamePhase.EARLY
        self._final_turns: Optional[int] = None

        for seat, strategy in enumerate(self.strategies):
            strategy.init(self.num_players, seat)
        for seat in range(self.num_players):
            for _ in range(self.hand_size):
                self._draw(seat)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def status(self) -> GameStatus:
        return GameStatus(
            clues=self.clues,
            score=self.score,
            max_score=self.max_score,
            strikes=self.strikes,
            turn=self.turn,
            deck_size=len(self.deck),
            phase=self.phase,
        )

    def hand(self, seat: int) -> list[Card]:
        """Cards held by ``seat``, newest first."""
        return [held.card for held in self.hands[seat]]

    def _relative(self, seat: int, receiver: int) -> int:
        return (seat - receiver) % self.num_players

    def _max_rank(self, suit) -> int:
        for rank in range(1, NUM_RANKS + 1):
            if self.discards.get(Card.new(suit, rank), 0) == self.variant.card_count(rank):
                return rank - 1
        return NUM_RANKS

    # ------------------------------------------------------------------
    # Turn loop
    # ------------------------------------------------------------------

    def run(self) -> int:
        """Play until the game is over and return the final score."""
        if self.debug:
            self.dump()
        while self.phase.is_running():
            self.step()
            if self.debug:
                self.dump()
        return self.score

    def step(self) -> None:
        """Let the active seat make one move."""
        if self.phase == GamePhase.FINAL and self._final_turns == 0:
            self.phase = GamePhase.FINISHED
            return
        in_final = self.phase == GamePhase.FINAL
        move = self.strategies[self.active_player].act(self.status())
        self.turn += 1
        if move.type == MoveType.DISCARD:
            self._discard(move)
        elif move.type == MoveType.PLAY:
            self._play(move)
        else:
            self._clue(move)
        if in_final and self.phase == GamePhase.FINAL:
            self._final_turns -= 1
        self.active_player = (self.active_player + 1) % self.num_players

    def _invalid(self, message: str) -> None:
        logger.warning(f"Invalid move: player {self.active_player} {message}")
        self.phase = GamePhase.INVALID

    def _draw(self, seat: int) -> None:
        if not self.deck:
            return
        card = self.deck.popleft()
        self.hands[seat].insert(0, HeldCard(card))
        if not self.deck and self.phase.is_running():
            self.phase = GamePhase.FINAL
            self._final_turns = self.num_players
        for receiver, strategy in enumerate(self.strategies):
            if receiver == seat:
                strategy.own_drawn()
            else:
                strategy.drawn(self._relative(seat, receiver), card)

    def _lose(self, card: Card) -> None:
        count = self.discards.get(card, 0) + 1
        self.discards[card] = count
        if count == self.variant.card_count(card.rank):
            self.max_score = sum(self._max_rank(suit) for suit in self.variant.suits)

    def _take(self, move: Move, verb: str) -> Optional[HeldCard]:
        hand = self.hands[self.active_player]
        if move.position >= len(hand):
            self._invalid(
                f"tried to {verb} card {move.position} (hand only has {len(hand)} cards)"
            )
            return None
        return hand.pop(move.position)

    def _discard(self, move: Move) -> None:
        held = self._take(move, "discard")
        if held is None:
            return
        logger.debug(
            f"Player {self.active_player} discarded {held.card} from pos {move.position}"
        )
        self._lose(held.card)
        if self.phase == GamePhase.EARLY:
            self.phase = GamePhase.MID
        if self.clues < self.variant.max_clues:
            self.clues += 1
        for receiver, strategy in enumerate(self.strategies):
            strategy.discarded(
                self._relative(self.active_player, receiver), move.position, held.card
            )
        self._draw(self.active_player)

    def _play(self, move: Move) -> None:
        held = self._take(move, "play")
        if held is None:
            return
        card = held.card
        successful = self.stacks[card.suit] + 1 == card.rank
        if successful:
            logger.debug(f"Player {self.active_player} played {card} from pos {move.position}")
            self.stacks[card.suit] += 1
            self.score += 1
            if card.rank == NUM_RANKS and self.clues < self.variant.max_clues:
                self.clues += 1
            if self.score == self.variant.max_score:
                self.phase = GamePhase.WON
        else:
            logger.debug(
                f"Player {self.active_player} failed to play {card} from pos {move.position}"
            )
            self._lose(card)
            self.strikes += 1
            if self.strikes >= self.variant.max_strikes:
                logger.debug("Game lost due to strikes")
                self.phase = GamePhase.LOST
        for receiver, strategy in enumerate(self.strategies):
            strategy.played(
                self._relative(self.active_player, receiver), move.position, card, successful
            )
        self._draw(self.active_player)

    def _clue(self, move: Move) -> None:
        if move.target >= self.num_players:
            self._invalid(f"tried to clue invalid player offset {move.target}")
            return
        if self.clues == 0:
            self._invalid("tried to clue but no clue tokens are left")
            return
        target = (self.active_player + move.target) % self.num_players
        hand = self.hands[target]
        touched = PositionSet(len(hand))
        for pos, held in enumerate(hand):
            if move.clue.touches(held.card):
                touched.add(pos)
                held.clued = True
        if touched.is_empty():
            self._invalid(f"gave {move.clue} to player {target} touching no card")
            return
        logger.debug(
            f"Player {self.active_player} clued player {target} about "
            f"{len(touched)} {move.clue} cards"
        )
        self.clues -= 1
        for receiver, strategy in enumerate(self.strategies):
            strategy.clued(
                self._relative(self.active_player, receiver),
                self._relative(target, receiver),
                move.clue,
                touched.copy(),
            )

    def dump(self) -> None:
        """Log the complete game state at DEBUG level."""
        stacks = " ".join(f"{suit.char}={rank}" for suit, rank in self.stacks.items())
        logger.debug(f"Game: {self.status()}")
        logger.debug(f"  played: {stacks}")
        logger.debug(f"  discarded: {self.discards}")
        for seat, hand in enumerate(self.hands):
            cards = " ".join(f"{held.card}{'*' if held.clued else ''}" for held in hand)
            logger.debug(f"  hand {seat}: {cards}  {self.strategies[seat]!r}")
        logger.debug(f"  deck: {list(self.deck)}")
