"""Configuration management."""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

from rummy500.logging import GameLogConfig


class PlayerConfig(BaseModel):
    """A seat at the table."""

    name: str
    kind: Literal["human", "ai"] = "ai"


def _default_players() -> list[PlayerConfig]:
    return [PlayerConfig(name="Player 1"), PlayerConfig(name="Player 2")]


class GameConfig(BaseModel):
    """Game configuration."""

    score_target: int = 500
    cards_per_player: int = Field(default=7, ge=1)
    seed: int | None = None
    players: list[PlayerConfig] = Field(default_factory=_default_players)

    # Limits for unattended matches
    max_rounds: int = 100
    max_turns_per_round: int = 1000


class AIConfig(BaseModel):
    """Computer opponent pacing, in seconds."""

    think_delay: float = 0.6  # Before drawing
    step_delay: float = 0.4  # Between melding and discarding


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    show_hands: bool = False


class Config(BaseModel):
    """Root configuration."""

    game: GameConfig = GameConfig()
    ai: AIConfig = AIConfig()
    logging: LoggingConfig = LoggingConfig()
    game_log: GameLogConfig = GameLogConfig()


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses default config.

    Returns:
        Config object.
    """
    if path is None:
        return Config()

    config_path = Path(path)
    if not config_path.exists():
        return Config()

    with open(config_path) as f:
        data = yaml.safe_load(f)

    return Config(**data) if data else Config()
