"""Tests for the heuristic opponent."""

from rummy500.models.card import Rank, Suit
from rummy500.models.meld import Meld
from rummy500.strategy import SimpleStrategy

from .conftest import card, rig

KINGS = [card(Rank.KING, Suit.HEARTS), card(Rank.KING, Suit.CLUBS)]


class TestChooseDraw:
    """Tests for draw source selection."""

    def test_take_discard_for_set(self, game):
        """Test the top discard is taken when it completes a set."""
        rig(game, [[*KINGS, card(Rank.TWO, Suit.SPADES)]],
            discard=[card(Rank.FIVE, Suit.CLUBS), card(Rank.KING, Suit.DIAMONDS)])
        assert SimpleStrategy().choose_draw(game, game.players[0]) == 1

    def test_take_discard_for_run(self, game):
        """Test the top discard is taken when it completes a run."""
        rig(game, [[card(Rank.JACK, Suit.SPADES), card(Rank.QUEEN, Suit.SPADES)]],
            discard=[card(Rank.KING, Suit.SPADES)])
        assert SimpleStrategy().choose_draw(game, game.players[0]) == 0

    def test_take_discard_for_table_meld(self, game):
        """Test the top discard is taken when it extends a table meld."""
        game._table_melds.append(
            Meld.create_set(1, [card(Rank.FOUR, s) for s in (Suit.SPADES, Suit.HEARTS, Suit.CLUBS)])
        )
        rig(game, [[card(Rank.NINE, Suit.CLUBS)]], discard=[card(Rank.FOUR, Suit.DIAMONDS)])
        assert SimpleStrategy().choose_draw(game, game.players[0]) == 0

    def test_draw_pile_otherwise(self, game):
        """Test an unhelpful discard leads to a pile draw."""
        rig(game, [[*KINGS, card(Rank.TWO, Suit.SPADES)]], discard=[card(Rank.SEVEN, Suit.DIAMONDS)])
        assert SimpleStrategy().choose_draw(game, game.players[0]) is None

    def test_choice_is_accepted(self, game):
        """Test the engine approves the strategy's pickup."""
        rig(game, [[card(Rank.JACK, Suit.SPADES), card(Rank.QUEEN, Suit.SPADES)]],
            discard=[card(Rank.KING, Suit.SPADES)])
        index = SimpleStrategy().choose_draw(game, game.players[0])
        assert game.try_draw_from_discard(0, index)


class TestFindRequiredPlay:
    """Tests for melding a picked-up card."""

    def test_set_preferred(self, game):
        """Test a set is laid for the picked card."""
        king_d = card(Rank.KING, Suit.DIAMONDS)
        rig(game, [[king_d, *KINGS, card(Rank.QUEEN, Suit.DIAMONDS), card(Rank.JACK, Suit.DIAMONDS)]])
        meld_index, cards = SimpleStrategy().find_required_play(game, game.players[0], king_d)
        assert meld_index is None
        assert set(cards) == {king_d, *KINGS}

    def test_run(self, game):
        """Test a run window is used when no set exists."""
        five = card(Rank.FIVE, Suit.HEARTS)
        rig(game, [[five, card(Rank.SIX, Suit.HEARTS), card(Rank.SEVEN, Suit.HEARTS)]])
        meld_index, cards = SimpleStrategy().find_required_play(game, game.players[0], five)
        assert meld_index is None
        assert len(cards) == 3 and five in cards

    def test_table_extension(self, game):
        """Test falling back to extending a table meld."""
        game._table_melds.append(
            Meld.create_sequence(1, [card(r, Suit.CLUBS) for r in (Rank.FIVE, Rank.SIX, Rank.SEVEN)])
        )
        eight = card(Rank.EIGHT, Suit.CLUBS)
        rig(game, [[eight, card(Rank.TWO, Suit.HEARTS)]])
        assert SimpleStrategy().find_required_play(game, game.players[0], eight) == (0, [eight])

    def test_nothing(self, game):
        """Test None when the card cannot be melded."""
        two = card(Rank.TWO, Suit.HEARTS)
        rig(game, [[two, card(Rank.NINE, Suit.CLUBS)]])
        assert SimpleStrategy().find_required_play(game, game.players[0], two) is None


class TestFindMelds:
    """Tests for melds and extensions from the hand."""

    def test_sets_then_runs(self, game):
        """Test sets are found before runs and no card is used twice."""
        king_d = card(Rank.KING, Suit.DIAMONDS)
        run = [card(r, Suit.SPADES) for r in (Rank.FOUR, Rank.FIVE, Rank.SIX, Rank.SEVEN)]
        rig(game, [[*KINGS, king_d, *run, card(Rank.NINE, Suit.HEARTS)]])
        melds = SimpleStrategy().find_melds_to_lay(game, game.players[0])
        assert len(melds) == 2
        assert set(melds[0]) == {*KINGS, king_d}
        assert melds[1] == run

    def test_short_run_ignored(self, game):
        """Test two consecutive cards are not a meld."""
        rig(game, [[card(Rank.FOUR, Suit.SPADES), card(Rank.FIVE, Suit.SPADES), card(Rank.SEVEN, Suit.SPADES)]])
        assert SimpleStrategy().find_melds_to_lay(game, game.players[0]) == []

    def test_extensions(self, game):
        """Test each table meld collects the hand cards that fit it."""
        game._table_melds.append(
            Meld.create_sequence(1, [card(r, Suit.CLUBS) for r in (Rank.FIVE, Rank.SIX, Rank.SEVEN)])
        )
        game._table_melds.append(
            Meld.create_set(1, [card(Rank.KING, s) for s in (Suit.SPADES, Suit.HEARTS, Suit.CLUBS)])
        )
        four_c, eight_c, king_d = card(Rank.FOUR, Suit.CLUBS), card(Rank.EIGHT, Suit.CLUBS), card(Rank.KING, Suit.DIAMONDS)
        rig(game, [[four_c, card(Rank.TWO, Suit.HEARTS), eight_c, king_d]])
        extensions = SimpleStrategy().find_extensions(game, game.players[0])
        assert extensions == [(0, [four_c, eight_c]), (1, [king_d])]


class TestChooseDiscard:
    """Tests for discard selection."""

    def test_isolated_high_card(self, game):
        """Test the isolated card with most points is discarded."""
        ace = card(Rank.ACE, Suit.DIAMONDS)
        rig(game, [[card(Rank.FOUR, Suit.SPADES), card(Rank.FIVE, Suit.SPADES), card(Rank.NINE, Suit.HEARTS), ace]])
        assert SimpleStrategy().choose_discard(game, game.players[0]) == ace

    def test_empty_hand(self, game):
        """Test None for an empty hand."""
        rig(game, [[]])
        assert SimpleStrategy().choose_discard(game, game.players[0]) is None
