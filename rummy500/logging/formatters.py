"""Formatters for game log output."""

from collections.abc import Iterable

from rummy500.models.card import RANK_NAMES, Card, Suit
from rummy500.models.meld import Meld
from rummy500.models.player import PlayerState

# Suit codes for log output
SUIT_CODES: dict[Suit, str] = {
    Suit.SPADES: "S",
    Suit.HEARTS: "H",
    Suit.DIAMONDS: "D",
    Suit.CLUBS: "C",
}


def format_card(card: Card) -> str:
    """Format a single card to string.

    Args:
        card: Card to format.

    Returns:
        Formatted string (e.g., "SA" for Ace of Spades, "H10" for Ten of Hearts).
    """
    return f"{SUIT_CODES[card.suit]}{RANK_NAMES[card.rank]}"


def format_cards(cards: Iterable[Card]) -> str:
    """Format cards to comma-separated string, keeping their order.

    Args:
        cards: Cards to format.

    Returns:
        Comma-separated card strings (e.g., "SK,HK,DK").
        Empty string if no cards.
    """
    return ",".join(format_card(c) for c in cards)


def format_meld(meld: Meld) -> dict[str, object]:
    """Format a meld to dict with its type, owner and cards."""
    return {
        "type": meld.meld_type.value,
        "owner": meld.owner,
        "cards": format_cards(meld.cards),
    }


def format_hands(players: Iterable[PlayerState]) -> dict[str, str]:
    """Format all players' hands to dict.

    Args:
        players: Players whose hands to format.

    Returns:
        Dict mapping player_id (as string) to formatted hand string.
    """
    return {str(p.player_id): format_cards(p.hand) for p in players}


def format_scores(players: Iterable[PlayerState]) -> dict[str, int]:
    """Map player_id (as string) to score."""
    return {str(p.player_id): p.score for p in players}
