"""Main entry point for the Rummy 500 match simulator."""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

from rummy500.config import Config, PlayerConfig, load_config
from rummy500.game.driver import MatchDriver
from rummy500.game.events import GameListener
from rummy500.game.state import MAX_PLAYERS, MIN_PLAYERS, GameState
from rummy500.logging import GameLogConfig, GameLogger
from rummy500.models.meld import Meld
from rummy500.models.player import PlayerState
from rummy500.utils.logger import GameDisplay, setup_logging

logger = logging.getLogger(__name__)


def generate_log_filename(log_dir: str, config: Config) -> str:
    """Generate log filename with timestamp and player names.

    Format: {timestamp}_{player1}_..._{playerN}.jsonl, names in seat order.

    Args:
        log_dir: Directory for log files.
        config: Config holding the seats.

    Returns:
        Full path to log file.
    """
    timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    player_names = "_".join(p.name.replace(" ", "") for p in config.game.players)
    filename = f"{timestamp}_{player_names}.jsonl"
    return str(Path(log_dir) / filename)


class DisplayListener(GameListener):
    """Print game notifications through a GameDisplay."""

    def __init__(self, display: GameDisplay, driver: MatchDriver):
        self.display = display
        self.driver = driver

    @property
    def game(self) -> GameState:
        return self.driver.game

    def on_turn_changed(self, player: PlayerState) -> None:
        self.display.print_turn(player)

    def on_meld_laid(self, player: PlayerState, meld: Meld) -> None:
        self.display.print_meld(player, meld)

    def on_round_over(self, player: PlayerState) -> None:
        self.display.print_round_over(self.game, player)


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success)
    """
    parser = argparse.ArgumentParser(
        description="Rummy 500 match simulator (computer players)"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config file (YAML)",
    )
    parser.add_argument(
        "-n",
        "--num-players",
        type=int,
        choices=range(MIN_PLAYERS, MAX_PLAYERS + 1),
        help="Number of computer players (overrides config)",
    )
    parser.add_argument(
        "-s",
        "--seed",
        type=int,
        help="Random seed for a reproducible match",
    )
    parser.add_argument(
        "-t",
        "--score-target",
        type=int,
        help="Score that ends the match (overrides config)",
    )
    parser.add_argument(
        "-r",
        "--max-rounds",
        type=int,
        help="Stop after this many rounds (overrides config)",
    )
    parser.add_argument(
        "--no-delay",
        action="store_true",
        help="Play computer turns without pauses",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--show-hands",
        action="store_true",
        help="Show player hands in output",
    )
    parser.add_argument(
        "--game-log",
        type=Path,
        help="Directory for game log files (filename auto-generated)",
    )

    args = parser.parse_args()

    # Load config
    config = load_config(args.config)

    # Apply command-line overrides
    if args.num_players:
        config.game.players = [
            PlayerConfig(name=f"Player {i + 1}") for i in range(args.num_players)
        ]
    if args.seed is not None:
        config.game.seed = args.seed
    if args.score_target:
        config.game.score_target = args.score_target
    if args.max_rounds:
        config.game.max_rounds = args.max_rounds
    if args.no_delay:
        config.ai.think_delay = 0.0
        config.ai.step_delay = 0.0
    if args.verbose:
        config.logging.level = "DEBUG"
    if args.show_hands:
        config.logging.show_hands = True

    # The simulator seats computer players only
    for seat in config.game.players:
        seat.kind = "ai"

    # Determine game log directory (CLI argument overrides config file)
    game_log_enabled = args.game_log is not None or config.game_log.enabled
    if args.game_log:
        game_log_config = GameLogConfig(
            enabled=True, output_path=generate_log_filename(str(args.game_log), config)
        )
    else:
        game_log_config = GameLogConfig(
            enabled=game_log_enabled, output_path=config.game_log.output_path
        )

    # Setup logging
    setup_logging(config.logging.level)

    # Create display
    display = GameDisplay(show_hands=config.logging.show_hands)

    print("Rummy 500 starting...")
    print(f"Players: {', '.join(p.name for p in config.game.players)}")
    print(f"Score target: {config.game.score_target}")
    if config.game.seed is not None:
        print(f"Seed: {config.game.seed}")
    if game_log_enabled:
        print(f"Game log: {game_log_config.output_path}")
    print()

    try:
        with GameLogger(game_log_config) as game_logger:
            driver = MatchDriver(config, game_logger=game_logger)
            driver.add_listener(DisplayListener(display, driver))
            driver.set_callbacks(on_round_start=display.print_round_start)

            asyncio.run(driver.play_match())

            display.print_final_results(driver.game)
            if driver.stalled:
                print("Match stalled: no player could continue the round")

        return 0

    except KeyboardInterrupt:
        print("\nMatch interrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"Match error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
