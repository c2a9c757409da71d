"""Rummy 500 rules engine with a computer opponent and match simulator."""

from rummy500.game import GameListener, GamePhase, GameSetupError, GameState, MatchDriver
from rummy500.models import Card, Meld, MeldType, PlayerState, Rank, Suit

__version__ = "0.1.0"

__all__ = [
    "Card",
    "GameListener",
    "GamePhase",
    "GameSetupError",
    "GameState",
    "MatchDriver",
    "Meld",
    "MeldType",
    "PlayerState",
    "Rank",
    "Suit",
]
