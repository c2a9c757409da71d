"""Game event logging."""

from .formatters import format_card, format_cards, format_hands, format_meld, format_scores
from .game_logger import GameLogConfig, GameLogger

__all__ = [
    "GameLogConfig",
    "GameLogger",
    "format_card",
    "format_cards",
    "format_hands",
    "format_meld",
    "format_scores",
]
