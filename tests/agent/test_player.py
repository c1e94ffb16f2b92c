"""Tests for the deduction-based player."""

import pytest

from src.agent.player import DeductionPlayer
from src.core.position_set import PositionSet
from src.game.actions import MoveType, discard, play, rank_clue
from src.game.cards import DEFAULT_VARIANT
from src.game.rules import HanabiGame
from src.game.state import GamePhase, GameStatus
from src.shared.config import Config, HeuristicsConfig
from tests.test_helpers import cards


def seated_player(*hands):
    """A four-seat player that sees ``hands`` for seats 1..3."""
    player = DeductionPlayer()
    player.init(4, 0)
    for _ in range(4):
        player.own_drawn()
    for seat, hand in enumerate(hands, start=1):
        for drawn in reversed(cards(hand)):
            player.drawn(seat, drawn)
    return player


def status(clues):
    return GameStatus(clues=clues, score=0, max_score=25)


class TestAct:
    def test_plays_known_playable_card(self):
        player = seated_player("r3 r4 r4 b5", "y3 y3 y4 y4", "g4 g4 g3 g3")
        player.clued(1, 0, rank_clue(1), PositionSet.create(4, 0b0010))

        assert player.act(status(5)) == play(1)

    def test_discards_without_clue_tokens(self):
        player = seated_player("r3 r4 r4 b5", "y3 y3 y4 y4", "g4 g4 g3 g3")

        assert player.act(status(0)) == discard(3)

    def test_clues_at_max_tokens(self):
        player = seated_player("r3 r4 r4 b5", "y3 y3 y4 y4", "g4 g4 g3 g3")

        move = player.act(status(8))

        assert move.type == MoveType.CLUE
        assert 1 <= move.target <= 3

    def test_saves_critical_five(self):
        player = seated_player("r3 r4 r4 b5", "y3 y3 y4 y4", "g4 g4 g3 g3")

        move = player.act(status(8))

        assert move.target == 1
        assert move.clue == rank_clue(5)

    def test_act_does_not_change_beliefs(self):
        player = seated_player("r3 r4 r4 b5", "y3 y3 y4 y4", "g4 g4 g3 g3")
        before = player.line.score(0)

        player.act(status(8))

        assert player.line.score(0) == before
        assert not any(slot.clued for _seat, _pos, slot in player.line.hands.iter_all())

    def test_candidate_clues(self):
        clues = DeductionPlayer().candidate_clues()

        assert len(clues) == DEFAULT_VARIANT.num_suits + 5
        assert clues[-1] == rank_clue(5)

    def test_from_config(self):
        config = Config.from_dict({"heuristics": {"trash_focus_error": 9}})
        player = DeductionPlayer.from_config(config)

        assert player.heuristics == HeuristicsConfig(trash_focus_error=9)
        assert player.variant.max_score == 25


class TestSelfPlay:
    @pytest.mark.parametrize("num_players,seed", [(2, 3), (3, 1), (4, 7)])
    def test_game_runs_to_completion(self, num_players, seed):
        players = [DeductionPlayer() for _ in range(num_players)]
        game = HanabiGame(players, seed=seed)

        score = game.run()

        assert game.phase.is_over()
        assert game.phase != GamePhase.INVALID
        assert 0 <= score <= 25
        assert score == game.score

    def test_lines_agree_with_table_hands(self):
        players = [DeductionPlayer() for _ in range(3)]
        game = HanabiGame(players, seed=5)
        for _ in range(12):
            if game.phase.is_over():
                break
            game.step()

        for seat, player in enumerate(players):
            for offset in range(1, 3):
                other = (seat + offset) % 3
                seen = [slot.card for _pos, slot in player.line.hands.iter_hand(offset)]
                assert seen == game.hand(other)
            assert player.line.hands.hand_size(0) == len(game.hand(seat))
