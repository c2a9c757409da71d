"""Game logger for detailed match replay."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, TextIO

from pydantic import BaseModel

from rummy500.models.card import Card
from rummy500.models.meld import Meld
from rummy500.models.player import PlayerState

from .formatters import format_card, format_cards, format_hands, format_meld, format_scores


class GameLogConfig(BaseModel):
    """Configuration for game logging."""

    enabled: bool = False
    output_path: str = "game_log.jsonl"


class GameLogger:
    """Logger for match events in JSONL format.

    Each line in the output file is a JSON object representing one event.
    The log records actions, not full game state.
    """

    def __init__(self, config: GameLogConfig | None = None):
        """Initialize game logger.

        Args:
            config: Logging configuration. If None, logging is disabled.
        """
        self.config = config or GameLogConfig()
        self._file: TextIO | None = None

    def __enter__(self) -> "GameLogger":
        """Context manager entry."""
        if self.config.enabled and self.config.output_path:
            path = Path(self.config.output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(path, "a", encoding="utf-8")
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the log file."""
        if self._file:
            self._file.close()
            self._file = None

    def _write(self, event: dict[str, Any]) -> None:
        """Write an event to the log file.

        Args:
            event: Event dictionary to write as JSON.
        """
        if self._file:
            self._file.write(json.dumps(event, ensure_ascii=False) + "\n")
            self._file.flush()

    def log_session_start(self, players: list[PlayerState], score_target: int) -> None:
        """Log match start with player information.

        Args:
            players: Players in the match.
            score_target: Score that ends the match.
        """
        self._write({
            "type": "session_start",
            "timestamp": datetime.now().isoformat(),
            "score_target": score_target,
            "players": [
                {"id": p.player_id, "name": p.display_name}
                for p in players
            ],
        })

    def log_round_start(
        self,
        round_num: int,
        players: list[PlayerState],
        discard_top: Card | None,
        first_player: int,
    ) -> None:
        """Log round start with dealt hands.

        Args:
            round_num: Round number.
            players: Players with their dealt hands.
            discard_top: Card flipped to start the discard pile.
            first_player: Player ID who plays first.
        """
        self._write({
            "type": "round_start",
            "round": round_num,
            "hands": format_hands(players),
            "discard_top": format_card(discard_top) if discard_top else None,
            "first_player": first_player,
        })

    def log_action(
        self,
        round_num: int,
        turn_num: int,
        player_id: int,
        action: str,
        cards: list[Card] | None = None,
        meld: Meld | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        """Log a single accepted action.

        Args:
            round_num: Round number.
            turn_num: Turn number within the round.
            player_id: Player who took the action.
            action: "draw_pile", "draw_discard", "lay_meld", "extend_meld" or "discard".
            cards: Cards involved in the action.
            meld: Resulting meld for lay/extend actions.
            detail: Additional action details.
        """
        record: dict[str, Any] = {
            "type": "action",
            "round": round_num,
            "turn": turn_num,
            "player": player_id,
            "action": action,
        }
        if cards is not None:
            record["cards"] = format_cards(cards)
        if meld is not None:
            record["meld"] = format_meld(meld)
        if detail:
            record["detail"] = detail
        self._write(record)

    def log_round_end(
        self,
        round_num: int,
        went_out: int,
        players: list[PlayerState],
    ) -> None:
        """Log round end with updated scores.

        Args:
            round_num: Round number.
            went_out: Player ID who emptied their hand.
            players: Players with updated scores.
        """
        self._write({
            "type": "round_end",
            "round": round_num,
            "went_out": went_out,
            "scores": format_scores(players),
        })

    def log_game_end(
        self,
        rounds_played: int,
        winner: int | None,
        players: list[PlayerState],
    ) -> None:
        """Log match end with final results.

        Args:
            rounds_played: Total number of rounds played.
            winner: Winning player ID, or None if the match was cut short.
            players: Players with final scores.
        """
        self._write({
            "type": "game_end",
            "rounds": rounds_played,
            "winner": winner,
            "final_scores": format_scores(players),
        })
