"""Card model."""

from enum import IntEnum

from pydantic import BaseModel


class Suit(IntEnum):
    """Card suit (row of the 52-card id space)."""

    SPADES = 0
    HEARTS = 1
    DIAMONDS = 2
    CLUBS = 3


class Rank(IntEnum):
    """Card rank. Ace is low (1) unless a sequence wraps past the King."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13


# Rank value of the Ace when it closes a Q-K-A run
ACE_HIGH = 14

RANKS_PER_SUIT = 13
DECK_SIZE = 52

RANK_NAMES = {
    Rank.ACE: "A",
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "10",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
}

SUIT_SYMBOLS = {
    Suit.SPADES: "♠",
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
}


class Card(BaseModel, frozen=True):
    """Single playing card.

    Equality and hashing follow the (suit, rank) pair, which is the same
    identity as ``id``.
    """

    suit: Suit
    rank: Rank

    @property
    def id(self) -> int:
        """Stable identity in 0..51."""
        return self.suit * RANKS_PER_SUIT + self.rank - 1

    @property
    def point_value(self) -> int:
        """Scoring value: Ace 15, Ten to King 10, Two to Nine 5."""
        if self.rank == Rank.ACE:
            return 15
        if self.rank >= Rank.TEN:
            return 10
        return 5

    def rank_value(self, ace_high: bool = False) -> int:
        """Get the rank as an integer for ordering.

        Args:
            ace_high: If True, the Ace counts as 14 instead of 1.

        Returns:
            Rank value.
        """
        if ace_high and self.rank == Rank.ACE:
            return ACE_HIGH
        return int(self.rank)

    @classmethod
    def from_id(cls, card_id: int) -> "Card":
        """Create a card from its 0..51 id."""
        if not 0 <= card_id < DECK_SIZE:
            raise ValueError(f"Card id must be in [0, {DECK_SIZE}), got {card_id}")
        return cls(
            suit=Suit(card_id // RANKS_PER_SUIT),
            rank=Rank(card_id % RANKS_PER_SUIT + 1),
        )

    def __str__(self) -> str:
        return f"{RANK_NAMES[self.rank]}{SUIT_SYMBOLS[self.suit]}"

    def __repr__(self) -> str:
        return str(self)


def create_full_deck() -> list[Card]:
    """Create the 52 cards of a standard deck, ordered by id."""
    return [Card(suit=suit, rank=rank) for suit in Suit for rank in Rank]
