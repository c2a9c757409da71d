"""Tests for move validation."""

from rummy500.game.state import GamePhase
from rummy500.game.validator import MoveValidator, ValidationResult
from rummy500.models.card import Rank, Suit
from rummy500.models.meld import Meld

from .conftest import card


class TestValidateTurn:
    """Tests for turn and phase checks."""

    def test_valid(self, game):
        """Test the current player in the right phase passes."""
        result = MoveValidator().validate_turn(game, 0, GamePhase.PLAYER_TURN_DRAW)
        assert result == ValidationResult(is_valid=True)

    def test_wrong_phase(self, game):
        """Test a phase mismatch names both phases."""
        result = MoveValidator().validate_turn(game, 0, GamePhase.PLAYER_TURN_MELD_DISCARD)
        assert not result.is_valid
        assert "player_turn_draw" in result.error_message

    def test_wrong_player(self, game):
        """Test another player's action is refused."""
        result = MoveValidator().validate_turn(game, 1, GamePhase.PLAYER_TURN_DRAW)
        assert not result.is_valid
        assert "not the current player" in result.error_message


class TestRequiredCard:
    """Tests for pickup obligations."""

    def test_no_obligation(self):
        """Test anything goes without a required card."""
        validator = MoveValidator()
        assert validator.validate_required_card(None, []).is_valid
        assert validator.validate_discard(None).is_valid

    def test_obligation(self):
        """Test the required card must be included and blocks discards."""
        validator = MoveValidator()
        king = card(Rank.KING, Suit.HEARTS)
        assert not validator.validate_required_card(king, [card(Rank.TWO, Suit.CLUBS)]).is_valid
        assert validator.validate_required_card(king, [king]).is_valid
        assert not validator.validate_discard(king).is_valid


class TestCanMeldPickup:
    """Tests for the pickup look-ahead."""

    def test_set_with_picked_stack(self):
        """Test cards picked along with the target count toward a set."""
        seven_s = card(Rank.SEVEN, Suit.SPADES)
        picked = [seven_s, card(Rank.SEVEN, Suit.HEARTS)]
        hand = [card(Rank.SEVEN, Suit.CLUBS)]
        assert MoveValidator().can_meld_pickup(seven_s, hand, picked, [])

    def test_set_needs_distinct_suits(self):
        """Test two cards of one rank and suit do not count twice."""
        seven_s = card(Rank.SEVEN, Suit.SPADES)
        hand = [seven_s, card(Rank.SEVEN, Suit.HEARTS)]
        assert not MoveValidator().can_meld_pickup(seven_s, hand, [seven_s], [])

    def test_table_meld(self):
        """Test a card extending a table meld is allowed."""
        meld = Meld.create_set(1, [card(Rank.NINE, s) for s in (Suit.SPADES, Suit.HEARTS, Suit.CLUBS)])
        nine_d = card(Rank.NINE, Suit.DIAMONDS)
        assert MoveValidator().can_meld_pickup(nine_d, [], [nine_d], [meld])

    def test_run_window(self):
        """Test a 3-card run in the same suit is found."""
        four_h = card(Rank.FOUR, Suit.HEARTS)
        hand = [card(Rank.TWO, Suit.HEARTS), card(Rank.THREE, Suit.HEARTS), card(Rank.NINE, Suit.HEARTS)]
        assert MoveValidator().can_meld_pickup(four_h, hand, [four_h], [])

    def test_ace_high_window(self):
        """Test an Ace closing Q-K-A is found."""
        ace = card(Rank.ACE, Suit.DIAMONDS)
        hand = [card(Rank.QUEEN, Suit.DIAMONDS), card(Rank.KING, Suit.DIAMONDS), card(Rank.TWO, Suit.DIAMONDS)]
        assert MoveValidator().can_meld_pickup(ace, hand, [ace], [])

    def test_gap_refused(self):
        """Test a run broken by a gap is refused."""
        six_h = card(Rank.SIX, Suit.HEARTS)
        hand = [card(Rank.FOUR, Suit.HEARTS), card(Rank.EIGHT, Suit.HEARTS), card(Rank.SIX, Suit.CLUBS)]
        assert not MoveValidator().can_meld_pickup(six_h, hand, [six_h], [])
