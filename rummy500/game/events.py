"""Game event notifications."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rummy500.models.meld import Meld
    from rummy500.models.player import PlayerState


class GameListener:
    """Receives game notifications.

    Notifications are delivered synchronously from inside the action
    that caused them. Handlers may read the game but must not call its
    actions. Override only the hooks you need.
    """

    def on_turn_changed(self, player: PlayerState) -> None:
        """Called when play passes to a new current player."""

    def on_meld_laid(self, player: PlayerState, meld: Meld) -> None:
        """Called when a player lays a new meld."""

    def on_round_over(self, player: PlayerState) -> None:
        """Called when a round ends; player is the one who went out.

        Scores are already updated. If the round decided the match the
        phase is already GAME_OVER here, and on_game_over follows.
        """

    def on_game_over(self, player: PlayerState) -> None:
        """Called when a score reaches the target; player is the winner."""
