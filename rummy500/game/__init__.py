"""Game logic."""

from .deck import Deck, DeckExhaustedError
from .events import GameListener
from .state import GamePhase, GameSetupError, GameState
from .validator import MoveValidator, ValidationResult
from .driver import MatchDriver

__all__ = [
    "Deck",
    "DeckExhaustedError",
    "GameListener",
    "GamePhase",
    "GameSetupError",
    "GameState",
    "MatchDriver",
    "MoveValidator",
    "ValidationResult",
]
