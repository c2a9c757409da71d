"""Player model."""

from collections import Counter
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from .card import Card
from .meld import Meld, is_valid_meld, is_valid_set


class PlayerState(BaseModel):
    """One player's hand, laid melds and running score."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    player_id: int
    display_name: str = "Player"

    # Hand order carries no meaning; it is kept for display continuity
    hand: list[Card] = Field(default_factory=list)
    melds: list[Meld] = Field(default_factory=list)
    score: int = 0

    @property
    def melded_points(self) -> int:
        """Points of the cards in this player's own melds."""
        return sum(meld.point_value for meld in self.melds)

    @property
    def hand_points(self) -> int:
        """Points of the cards still in hand."""
        return sum(card.point_value for card in self.hand)

    def add_card_to_hand(self, card: Card) -> None:
        """Add a card to the front of the hand."""
        self.hand.insert(0, card)

    def add_cards_to_hand(self, cards: Iterable[Card]) -> None:
        """Add cards to the front of the hand, keeping their order."""
        self.hand[0:0] = list(cards)

    def has_card(self, card: Card) -> bool:
        return card in self.hand

    def remove_card_from_hand(self, card: Card) -> bool:
        """Remove a single card from the hand.

        Returns:
            False if the card is not in the hand
        """
        if card not in self.hand:
            return False
        self.hand.remove(card)
        return True

    def remove_cards_from_hand(self, cards: Iterable[Card]) -> bool:
        """Remove several cards from the hand, all or nothing.

        Args:
            cards: Cards to remove

        Returns:
            False (and nothing removed) if any card is missing
        """
        wanted = Counter(cards)
        held = Counter(self.hand)
        if any(held[card] < count for card, count in wanted.items()):
            return False
        for card, count in wanted.items():
            for _ in range(count):
                self.hand.remove(card)
        return True

    def try_lay_meld(self, cards: Iterable[Card]) -> bool:
        """Lay a new meld from cards in hand.

        The cards are classified as a set if they form one, otherwise as
        a sequence.

        Args:
            cards: Cards to lay

        Returns:
            True if the meld was laid; on failure the hand is unchanged
        """
        snapshot = list(cards)
        if not is_valid_meld(snapshot):
            return False
        if not self.remove_cards_from_hand(snapshot):
            return False

        if is_valid_set(snapshot):
            meld = Meld.create_set(self.player_id, snapshot)
        else:
            meld = Meld.create_sequence(self.player_id, snapshot)
        self.melds.append(meld)
        return True

    def try_extend_meld(self, meld: Meld, cards: Iterable[Card]) -> bool:
        """Add cards from hand onto a meld, which may belong to anyone.

        Args:
            meld: Target meld
            cards: Cards to add

        Returns:
            True if the meld was extended; on failure the hand is restored
        """
        cards = list(cards)
        previous = list(self.hand)
        if not self.remove_cards_from_hand(cards):
            return False
        if not meld.try_extend(cards):
            # Rollback
            self.hand[:] = previous
            return False
        return True

    def apply_round_score(self, went_out: bool) -> None:
        """Add melded points and subtract hand points unless this player went out."""
        penalty = 0 if went_out else self.hand_points
        self.score += self.melded_points - penalty

    def reset_for_new_round(self) -> None:
        """Clear hand and melds; the score carries over."""
        self.hand.clear()
        self.melds.clear()

    def __str__(self) -> str:
        return (
            f"{self.display_name} | Score: {self.score} | "
            f"Hand: {len(self.hand)} cards | Melds: {self.melded_points}pts"
        )

    def __repr__(self) -> str:
        return (
            f"PlayerState(id={self.player_id}, name={self.display_name!r}, "
            f"score={self.score}, hand={len(self.hand)})"
        )
