"""Shared fixtures for the test suite."""

import pytest

from rummy500.config import AIConfig, Config, GameConfig, PlayerConfig
from rummy500.game.state import GameState
from rummy500.models.card import Card, Rank, Suit


def card(rank: Rank, suit: Suit) -> Card:
    """Shorthand card constructor."""
    return Card(suit=suit, rank=rank)


def rig(game: GameState, hands: list[list[Card]], discard: list[Card] | None = None) -> None:
    """Replace dealt hands (and optionally the discard pile) of a started game."""
    for player, hand in zip(game.players, hands):
        player.hand[:] = hand
    if discard is not None:
        game._deck._discard_pile[:] = discard


@pytest.fixture
def game() -> GameState:
    """A started 2-player game, seed 99."""
    state = GameState()
    state.add_player(0, "Alice")
    state.add_player(1, "Bob")
    state.start_game(seed=99)
    return state


@pytest.fixture
def fast_config() -> Config:
    """Config for two computer players with no pauses."""
    return Config(
        game=GameConfig(
            seed=7,
            players=[PlayerConfig(name="North"), PlayerConfig(name="South")],
        ),
        ai=AIConfig(think_delay=0.0, step_delay=0.0),
    )
