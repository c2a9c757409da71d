"""Game models."""

from .card import Card, Rank, Suit, create_full_deck
from .meld import Meld, MeldType, is_valid_meld, is_valid_sequence, is_valid_set
from .player import PlayerState

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "create_full_deck",
    "Meld",
    "MeldType",
    "is_valid_meld",
    "is_valid_sequence",
    "is_valid_set",
    "PlayerState",
]
