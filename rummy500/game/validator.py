"""Action validation and discard pickup look-ahead."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rummy500.models.card import Card
from rummy500.models.meld import MIN_MELD_SIZE, Meld, is_valid_sequence

if TYPE_CHECKING:
    from .state import GamePhase, GameState


@dataclass
class ValidationResult:
    """Result of validating an action."""

    is_valid: bool
    error_message: str = ""


VALID = ValidationResult(is_valid=True)


class MoveValidator:
    """Checks turn ownership, phase gating and pickup legality."""

    def validate_turn(
        self,
        state: GameState,
        player_id: int,
        phase: GamePhase,
    ) -> ValidationResult:
        """Check that player_id is the current player and the phase matches.

        Args:
            state: Current game state
            player_id: Player attempting the action
            phase: Phase the action is allowed in

        Returns:
            ValidationResult
        """
        if state.phase != phase:
            return ValidationResult(
                is_valid=False,
                error_message=f"Action requires phase {phase.value}, game is in {state.phase.value}",
            )
        current = state.current_player
        if current is None or current.player_id != player_id:
            return ValidationResult(
                is_valid=False,
                error_message=f"Player {player_id} is not the current player",
            )
        return VALID

    def validate_required_card(
        self,
        required: Card | None,
        cards: Sequence[Card],
    ) -> ValidationResult:
        """Check that a pending pickup card is part of a meld or extension."""
        if required is not None and required not in cards:
            return ValidationResult(
                is_valid=False,
                error_message=f"{required} picked from the discard pile must be melded first",
            )
        return VALID

    def validate_discard(self, required: Card | None) -> ValidationResult:
        """Check that no pickup obligation is outstanding."""
        if required is not None:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cannot discard before melding {required}",
            )
        return VALID

    def can_meld_pickup(
        self,
        card: Card,
        hand: Iterable[Card],
        picked: Iterable[Card],
        table_melds: Iterable[Meld],
    ) -> bool:
        """Check whether a discard pile card could be melded right away.

        The player's hand after the pickup (hand plus the picked stack) is
        searched, in order, for a set containing the card, a table meld
        the card extends, and a 3-card same-suit run containing the card
        with the Ace low, then with the Ace high.

        Args:
            card: Targeted discard pile card
            hand: Player's current hand
            picked: The card and every card above it in the pile
            table_melds: Melds on the table

        Returns:
            True if the pickup should be allowed
        """
        full_hand = [*hand, *picked]
        return (
            self._forms_set(card, full_hand)
            or self._extends_table_meld(card, table_melds)
            or self._in_run_window(card, full_hand, ace_high=False)
            or self._in_run_window(card, full_hand, ace_high=True)
        )

    def _forms_set(self, card: Card, full_hand: list[Card]) -> bool:
        same_rank = [c for c in full_hand if c.rank == card.rank]
        if len(same_rank) < MIN_MELD_SIZE:
            return False
        return len({c.suit for c in same_rank}) >= MIN_MELD_SIZE

    def _extends_table_meld(self, card: Card, table_melds: Iterable[Meld]) -> bool:
        return any(meld.accepts([card]) for meld in table_melds)

    def _in_run_window(self, card: Card, full_hand: list[Card], ace_high: bool) -> bool:
        """Slide a 3-card window over the same-suit cards sorted by rank."""
        same_suit = sorted(
            (c for c in full_hand if c.suit == card.suit),
            key=lambda c: c.rank_value(ace_high),
        )
        for i in range(len(same_suit) - MIN_MELD_SIZE + 1):
            window = same_suit[i : i + MIN_MELD_SIZE]
            if card in window and is_valid_sequence(window):
                return True
        return False
