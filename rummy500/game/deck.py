"""Draw pile and discard pile."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from rummy500.models.card import Card, create_full_deck

logger = logging.getLogger(__name__)


class DeckExhaustedError(RuntimeError):
    """Raised when neither pile has a card left to draw."""


class Deck:
    """Owns the draw pile and the discard pile.

    Both piles are ordered lists. The top of the draw pile is its last
    element; the discard pile runs from bottom (index 0) to top (last
    index).
    """

    def __init__(self, rng: random.Random | None = None, seed: int | None = None):
        """Initialize deck with a freshly built, unshuffled draw pile.

        Args:
            rng: Random source for shuffling (takes precedence over seed)
            seed: Seed for a private random source, for reproducible deals
        """
        self._rng = rng or random.Random(seed)
        self._draw_pile: list[Card] = []
        self._discard_pile: list[Card] = []
        self.build()

    @property
    def draw_pile_count(self) -> int:
        return len(self._draw_pile)

    @property
    def discard_pile_count(self) -> int:
        return len(self._discard_pile)

    @property
    def draw_pile(self) -> tuple[Card, ...]:
        """Draw pile, bottom to top."""
        return tuple(self._draw_pile)

    @property
    def discard_pile(self) -> tuple[Card, ...]:
        """Discard pile, bottom to top."""
        return tuple(self._discard_pile)

    @property
    def top_discard(self) -> Card | None:
        return self._discard_pile[-1] if self._discard_pile else None

    def build(self) -> None:
        """Fill the draw pile with one card per suit and rank, unshuffled."""
        self._draw_pile = create_full_deck()
        self._discard_pile = []

    def shuffle(self) -> None:
        """Shuffle the draw pile in place (Fisher-Yates)."""
        self._rng.shuffle(self._draw_pile)

    def draw_from_pile(self) -> Card:
        """Draw the top card of the draw pile.

        An empty draw pile is first refilled from the discard pile.

        Returns:
            The drawn card

        Raises:
            DeckExhaustedError: If both piles are empty after recycling
        """
        if not self._draw_pile:
            self._recycle_discards()
        if not self._draw_pile:
            raise DeckExhaustedError("No cards available to draw")
        return self._draw_pile.pop()

    def draw_from_discard(self, index: int) -> list[Card]:
        """Take the card at index and every card above it.

        Args:
            index: Position in the discard pile (0 = bottom)

        Returns:
            The taken cards, bottom to top

        Raises:
            IndexError: If index is outside the discard pile
        """
        if index < 0 or index >= len(self._discard_pile):
            raise IndexError(
                f"Discard index {index} out of range (pile has {len(self._discard_pile)} cards)"
            )
        taken = self._discard_pile[index:]
        del self._discard_pile[index:]
        return taken

    def add_to_discard(self, card: Card) -> None:
        """Put a card on top of the discard pile."""
        self._discard_pile.append(card)

    def deal(self, hands: Sequence[list[Card]], cards_per_player: int) -> None:
        """Deal cards round-robin, then flip one card to start the discard pile.

        Args:
            hands: Hand lists to deal into (mutated in place)
            cards_per_player: Number of cards each hand receives
        """
        for _ in range(cards_per_player):
            for hand in hands:
                hand.append(self.draw_from_pile())
        self.add_to_discard(self.draw_from_pile())

    def _recycle_discards(self) -> None:
        """Move all discards but the top one into the draw pile and shuffle."""
        if not self._discard_pile:
            return
        top = self._discard_pile.pop()
        self._draw_pile.extend(self._discard_pile)
        self._discard_pile = [top]
        self.shuffle()
        logger.debug(f"Recycled discards into draw pile ({len(self._draw_pile)} cards)")

    def __str__(self) -> str:
        return f"Deck(draw={len(self._draw_pile)}, discard={len(self._discard_pile)})"
