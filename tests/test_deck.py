"""Tests for the draw and discard piles."""

import random
from collections import Counter

import pytest

from rummy500.game.deck import Deck, DeckExhaustedError
from rummy500.models.card import Rank, Suit

from .conftest import card


class TestDeck:
    """Tests for Deck class."""

    def test_fresh_deck(self):
        """Test a fresh deck holds 52 unique cards and no discards."""
        deck = Deck(seed=1)
        assert deck.draw_pile_count == 52
        assert sorted(c.id for c in deck.draw_pile) == list(range(52))
        assert deck.discard_pile_count == 0
        assert deck.top_discard is None

    def test_shuffle_is_permutation(self):
        """Test shuffling keeps the same multiset of cards."""
        deck = Deck(seed=3)
        before = Counter(deck.draw_pile)
        deck.shuffle()
        assert Counter(deck.draw_pile) == before

    def test_shuffle_reproducible(self):
        """Test equal seeds give equal orders."""
        a, b = Deck(seed=5), Deck(seed=5)
        a.shuffle()
        b.shuffle()
        assert a.draw_pile == b.draw_pile

    def test_injected_rng(self):
        """Test an injected rng takes precedence over seed."""
        a = Deck(rng=random.Random(8), seed=1)
        b = Deck(seed=8)
        a.shuffle()
        b.shuffle()
        assert a.draw_pile == b.draw_pile

    def test_deal(self):
        """Test seed 42, two hands of 7 leaves 37 in the pile and 1 discard."""
        deck = Deck(seed=42)
        deck.shuffle()
        hands: list[list] = [[], []]
        deck.deal(hands, 7)
        assert [len(h) for h in hands] == [7, 7]
        assert deck.discard_pile_count == 1
        assert deck.draw_pile_count == 52 - 14 - 1

    def test_deal_round_robin(self):
        """Test cards are dealt one at a time to each hand in turn."""
        deck = Deck(seed=2)
        order = list(reversed(deck.draw_pile))
        hands: list[list] = [[], []]
        deck.deal(hands, 2)
        assert hands[0] == [order[0], order[2]]
        assert hands[1] == [order[1], order[3]]
        assert deck.top_discard == order[4]

    def test_draw_from_pile_takes_top(self):
        """Test drawing takes the last card of the draw pile."""
        deck = Deck(seed=1)
        top = deck.draw_pile[-1]
        assert deck.draw_from_pile() == top
        assert deck.draw_pile_count == 51

    def test_draw_from_discard(self):
        """Test taking index i of N returns N - i cards bottom to top."""
        deck = Deck(seed=1)
        cards = [deck.draw_from_pile() for _ in range(5)]
        for c in cards:
            deck.add_to_discard(c)
        taken = deck.draw_from_discard(2)
        assert taken == cards[2:]
        assert deck.discard_pile == tuple(cards[:2])

    @pytest.mark.parametrize("index", [-1, 3])
    def test_draw_from_discard_out_of_range(self, index):
        """Test out-of-range discard index raises IndexError."""
        deck = Deck(seed=1)
        for _ in range(3):
            deck.add_to_discard(deck.draw_from_pile())
        with pytest.raises(IndexError):
            deck.draw_from_discard(index)
        assert deck.discard_pile_count == 3

    def test_recycle_discards(self):
        """Test an empty draw pile is refilled from all but the top discard."""
        deck = Deck(seed=4)
        while deck.draw_pile_count:
            deck.add_to_discard(deck.draw_from_pile())
        top = deck.top_discard

        deck.draw_from_pile()
        assert deck.discard_pile == (top,)
        assert deck.draw_pile_count == 52 - 1 - 1

    def test_exhausted(self):
        """Test drawing with nothing left to recycle raises."""
        deck = Deck(seed=4)
        while deck.draw_pile_count:
            deck.draw_from_pile()
        deck.add_to_discard(card(Rank.ACE, Suit.SPADES))
        with pytest.raises(DeckExhaustedError):
            deck.draw_from_pile()
        assert deck.top_discard == card(Rank.ACE, Suit.SPADES)
