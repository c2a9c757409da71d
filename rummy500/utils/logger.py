"""Logging utilities and game state display."""

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rummy500.game.state import GameState
    from rummy500.models.meld import Meld
    from rummy500.models.player import PlayerState


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


class GameDisplay:
    """Display match progress to stdout."""

    def __init__(self, show_hands: bool = False):
        """Initialize display.

        Args:
            show_hands: Whether to show player hands
        """
        self.show_hands = show_hands

    def print_separator(self) -> None:
        """Print a separator line."""
        print("=" * 60)

    def print_round_start(self, game: "GameState") -> None:
        """Print round start message."""
        self.print_separator()
        print(f"ROUND {game.round_number}")
        self.print_separator()
        print(f"Discard pile top: {game.top_discard}")
        self.print_hands(game.players)

    def print_turn(self, player: "PlayerState") -> None:
        """Print whose turn it is."""
        print(f"\n--- {player.display_name}'s turn ({len(player.hand)} cards) ---")

    def print_meld(self, player: "PlayerState", meld: "Meld") -> None:
        """Print a newly laid meld."""
        print(f"  {player.display_name} laid: {meld}")

    def print_hands(self, players: "tuple[PlayerState, ...]") -> None:
        """Print hands for all players (if show_hands is enabled)."""
        if not self.show_hands:
            return

        print("\nHands:")
        for player in players:
            cards = ", ".join(str(c) for c in player.hand)
            print(f"  {player.display_name}: [{cards}]")

    def print_table(self, game: "GameState") -> None:
        """Print the melds on the table."""
        if not game.table_melds:
            return
        print(f"Table melds ({len(game.table_melds)}):")
        for i, meld in enumerate(game.table_melds):
            print(f"  [{i}] {meld}")

    def print_round_over(self, game: "GameState", went_out: "PlayerState") -> None:
        """Print round results."""
        print(f"\nRound {game.round_number} over! {went_out.display_name} went out.")
        self.print_table(game)
        scores = " | ".join(f"{p.display_name}: {p.score}" for p in game.players)
        print(f"Scores: {scores}")

    def print_final_results(self, game: "GameState") -> None:
        """Print final match standings."""
        self.print_separator()
        print("FINAL RESULTS")
        self.print_separator()

        if game.winner is not None:
            print(f"Winner: {game.winner.display_name} with {game.winner.score} points")
        else:
            print("No winner (match stopped before the score target)")

        standings = sorted(game.players, key=lambda p: p.score, reverse=True)
        for rank, player in enumerate(standings, 1):
            print(f"  #{rank}: {player.display_name} - {player.score} points")
