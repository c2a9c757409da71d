"""Base strategy class for computer opponents.

Defines the interface that all AI strategies must implement. A strategy
only reads the public game queries; the driver turns its decisions into
the same actions a human would issue.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from rummy500.models.card import Card

if TYPE_CHECKING:
    from rummy500.game.state import GameState
    from rummy500.models.player import PlayerState


class Strategy(ABC):
    """Abstract base class for opponent strategies."""

    @abstractmethod
    def choose_draw(self, game: GameState, player: PlayerState) -> int | None:
        """Choose where to draw from.

        Args:
            game: Current game state
            player: Player about to draw

        Returns:
            Discard pile index to pick up, or None to draw from the pile
        """

    @abstractmethod
    def find_required_play(
        self, game: GameState, player: PlayerState, card: Card
    ) -> tuple[int | None, list[Card]] | None:
        """Find a way to meld a card picked up from the discard pile.

        Args:
            game: Current game state
            player: Player holding the card
            card: The required meld card

        Returns:
            (None, cards) to lay a new meld, (meld_index, cards) to extend
            a table meld, or None if the card cannot be melded
        """

    @abstractmethod
    def find_melds_to_lay(self, game: GameState, player: PlayerState) -> list[list[Card]]:
        """Find new melds to lay from the hand (no card used twice)."""

    @abstractmethod
    def find_extensions(
        self, game: GameState, player: PlayerState
    ) -> list[tuple[int, list[Card]]]:
        """Find (meld_index, cards) pairs that extend table melds."""

    @abstractmethod
    def choose_discard(self, game: GameState, player: PlayerState) -> Card | None:
        """Choose the card to discard, or None if the hand is empty."""
