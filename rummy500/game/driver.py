"""Match driver: owns the game, runs computer turns, relays human actions."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable

from rummy500.config import Config
from rummy500.logging import GameLogger
from rummy500.models.card import Card
from rummy500.models.meld import Meld
from rummy500.models.player import PlayerState
from rummy500.strategy import SimpleStrategy, Strategy

from .events import GameListener
from .state import GamePhase, GameSetupError, GameState

logger = logging.getLogger(__name__)


class MatchDriver(GameListener):
    """Drives one match at a time.

    Computer turns run as asyncio tasks scheduled on the running event
    loop; cancelling the task abandons the turn. A computer turn that comes
    up while no loop is running is held until the next ``wait_for_ai``. Human seats act through
    the ``draw_*``/``lay_meld``/``extend_meld``/``discard`` methods, which
    use hand indices and report refusals as warnings.
    """

    def __init__(
        self,
        config: Config | None = None,
        strategy: Strategy | None = None,
        game_logger: GameLogger | None = None,
    ):
        """Initialize driver.

        Args:
            config: Match configuration (defaults if not provided)
            strategy: Strategy for computer seats (SimpleStrategy if not provided)
            game_logger: Optional JSONL event logger
        """
        self.config = config or Config()
        self.strategy = strategy or SimpleStrategy()
        self.game_logger = game_logger or GameLogger()

        self._game: GameState | None = None
        self._human_seats: set[int] = set()
        self._listeners: list[GameListener] = []
        self._ai_task: asyncio.Task | None = None
        # Computer seat whose turn came up with no event loop running
        self._deferred_turn: int | None = None
        self._turn_number = 0
        self._went_out: PlayerState | None = None
        self._on_round_start: Callable[[GameState], None] | None = None
        self.stalled = False

    @property
    def game(self) -> GameState | None:
        return self._game

    @property
    def ai_turn_pending(self) -> bool:
        if self._deferred_turn is not None:
            return True
        return self._ai_task is not None and not self._ai_task.done()

    def is_human(self, player: PlayerState) -> bool:
        return player.player_id in self._human_seats

    def set_callbacks(self, on_round_start: Callable[[GameState], None] | None = None) -> None:
        """Set event callbacks.

        Args:
            on_round_start: Called after each deal, before the first turn
        """
        self._on_round_start = on_round_start

    def add_listener(self, listener: GameListener) -> None:
        """Attach a listener to the current game and every later one."""
        self._listeners.append(listener)
        if self._game is not None:
            self._game.add_listener(listener)

    # --- Match lifecycle ---

    def start_new_game(self, seed: int | None = None) -> GameState:
        """Abandon any match in progress and deal a new one."""
        self.cancel_ai_turn()
        game_config = self.config.game

        game = GameState(
            score_target=game_config.score_target,
            cards_per_player=game_config.cards_per_player,
        )
        self._human_seats = set()
        for player_id, seat in enumerate(game_config.players):
            game.add_player(player_id, seat.name)
            if seat.kind == "human":
                self._human_seats.add(player_id)

        game.add_listener(self)
        for listener in self._listeners:
            game.add_listener(listener)

        self._game = game
        self.stalled = False
        game.start_game(seed=seed if seed is not None else game_config.seed)

        self.game_logger.log_session_start(list(game.players), game.score_target)
        self._on_round_started()
        return game

    def start_next_round(self) -> None:
        """Deal the next round after a round has ended."""
        if self._game is None:
            raise GameSetupError("No game in progress")
        self.cancel_ai_turn()
        self._game.start_next_round()
        logger.info("New round started!")
        self._on_round_started()

    def _on_round_started(self) -> None:
        game = self._game
        self._turn_number = 1
        self._went_out = None
        self.game_logger.log_round_start(
            game.round_number,
            list(game.players),
            game.top_discard,
            game.current_player.player_id,
        )
        if self._on_round_start:
            self._on_round_start(game)
        # Play opens without a turn-changed notification
        self._schedule_turn(game.current_player)

    async def play_match(self, max_rounds: int | None = None) -> PlayerState | None:
        """Play an all-computer match to the end.

        Starts a new game unless one is in progress. Stops at game over,
        after max_rounds rounds, or when a round stalls.

        Returns:
            The winner, or None if the match stopped early
        """
        if self._human_seats or any(p.kind == "human" for p in self.config.game.players):
            raise GameSetupError("play_match needs a table of computer players")
        limit = max_rounds if max_rounds is not None else self.config.game.max_rounds

        if self._game is None or self._game.phase == GamePhase.GAME_OVER:
            self.start_new_game()
        game = self._game

        while True:
            await self.wait_for_ai()
            if game.phase == GamePhase.GAME_OVER:
                break
            if game.phase != GamePhase.ROUND_OVER:
                self.stalled = True
                logger.warning(f"Round {game.round_number} stalled after {self._turn_number} turns")
                break
            if game.round_number >= limit:
                logger.info(f"Stopping after {game.round_number} rounds without a winner")
                break
            self.start_next_round()

        if game.winner is None:
            self.game_logger.log_game_end(game.round_number, None, list(game.players))
        return game.winner

    # --- Computer turns ---

    def cancel_ai_turn(self) -> None:
        """Cancel a scheduled or running computer turn."""
        self._deferred_turn = None
        if self._ai_task is not None:
            self._ai_task.cancel()
            self._ai_task = None

    async def wait_for_ai(self) -> None:
        """Wait until no computer turn is pending.

        Follows the chain of turns while computer players hand play to
        each other. A turn that came up outside an event loop starts here.
        """
        self._start_deferred_turn()
        while self._ai_task is not None:
            task = self._ai_task
            await asyncio.wait([task])
            if self._ai_task is task:
                self._ai_task = None
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()
            self._start_deferred_turn()

    def _schedule_turn(self, player: PlayerState) -> None:
        if self.is_human(player):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.cancel_ai_turn()
            self._deferred_turn = player.player_id
            return
        self._deferred_turn = None
        # A finishing computer turn hands play on from inside its own task
        if self._ai_task is not None and self._ai_task is not asyncio.current_task():
            self._ai_task.cancel()
        self._ai_task = loop.create_task(self._run_ai_turn(self._game, player.player_id))

    def _start_deferred_turn(self) -> None:
        if self._deferred_turn is None or self._game is None:
            return
        player = self._game.get_player(self._deferred_turn)
        self._deferred_turn = None
        self._schedule_turn(player)

    def _still_turn(self, game: GameState, player_id: int, phase: GamePhase) -> bool:
        return (
            self._game is game
            and game.phase == phase
            and game.current_player.player_id == player_id
        )

    async def _run_ai_turn(self, game: GameState, player_id: int) -> None:
        try:
            await asyncio.sleep(self.config.ai.think_delay)
            if not self._still_turn(game, player_id, GamePhase.PLAYER_TURN_DRAW):
                return
            if self._turn_number > self.config.game.max_turns_per_round:
                return

            player = game.get_player(player_id)
            self._ai_draw(game, player)

            await asyncio.sleep(self.config.ai.step_delay)
            if not self._still_turn(game, player_id, GamePhase.PLAYER_TURN_MELD_DISCARD):
                return

            self._ai_meld(game, player)

            await asyncio.sleep(self.config.ai.step_delay)
            if not self._still_turn(game, player_id, GamePhase.PLAYER_TURN_MELD_DISCARD):
                return

            card = self.strategy.choose_discard(game, player)
            if card is not None:
                self._discard(game, player, card)
        finally:
            if self._ai_task is asyncio.current_task():
                self._ai_task = None

    def _ai_draw(self, game: GameState, player: PlayerState) -> None:
        index = self.strategy.choose_draw(game, player)
        if index is not None and self._draw_from_discard(game, player, index):
            return
        self._draw_from_pile(game, player)

    def _ai_meld(self, game: GameState, player: PlayerState) -> None:
        phase = GamePhase.PLAYER_TURN_MELD_DISCARD
        player_id = player.player_id

        required = game.required_meld_card
        if required is not None:
            play = self.strategy.find_required_play(game, player, required)
            if play is None:
                logger.warning(f"{player.display_name} found no way to meld {required}")
                return
            meld_index, cards = play
            if meld_index is None:
                self._lay_meld(game, player, cards)
            else:
                self._extend_meld(game, player, meld_index, cards)

        for cards in self.strategy.find_melds_to_lay(game, player):
            if not self._still_turn(game, player_id, phase):
                return
            self._lay_meld(game, player, cards)

        progress = True
        while progress:
            progress = False
            for meld_index, cards in self.strategy.find_extensions(game, player):
                if not self._still_turn(game, player_id, phase):
                    return
                if self._extend_meld(game, player, meld_index, cards):
                    progress = True
                    continue
                # Cards that fit one by one may not fit together
                for card in cards:
                    if self._still_turn(game, player_id, phase) and self._extend_meld(
                        game, player, meld_index, [card]
                    ):
                        progress = True

    # --- Engine calls shared by both kinds of seat ---

    def _log_action(self, game: GameState, player: PlayerState, action: str, **kwargs) -> None:
        self.game_logger.log_action(
            game.round_number, self._turn_number, player.player_id, action, **kwargs
        )
        if self._went_out is not None:
            self._log_round_result(game)

    def _log_round_result(self, game: GameState) -> None:
        went_out, self._went_out = self._went_out, None
        self.game_logger.log_round_end(game.round_number, went_out.player_id, list(game.players))
        if game.winner is not None:
            self.game_logger.log_game_end(
                game.round_number, game.winner.player_id, list(game.players)
            )

    def _draw_from_pile(self, game: GameState, player: PlayerState) -> bool:
        if not game.try_draw_from_pile(player.player_id):
            return False
        self._log_action(game, player, "draw_pile")
        return True

    def _draw_from_discard(self, game: GameState, player: PlayerState, index: int) -> bool:
        picked = list(game.discard_pile[index:]) if 0 <= index < len(game.discard_pile) else []
        if not game.try_draw_from_discard(player.player_id, index):
            return False
        self._log_action(game, player, "draw_discard", cards=picked, detail={"index": index})
        return True

    def _lay_meld(self, game: GameState, player: PlayerState, cards: list[Card]) -> bool:
        if not game.try_lay_meld(player.player_id, cards):
            return False
        self._log_action(game, player, "lay_meld", cards=cards, meld=game.table_melds[-1])
        return True

    def _extend_meld(
        self, game: GameState, player: PlayerState, meld_index: int, cards: list[Card]
    ) -> bool:
        if not game.try_extend_meld(player.player_id, meld_index, cards):
            return False
        self._log_action(
            game, player, "extend_meld",
            cards=cards, meld=game.table_melds[meld_index], detail={"meld_index": meld_index},
        )
        return True

    def _discard(self, game: GameState, player: PlayerState, card: Card) -> bool:
        if not game.try_discard(player.player_id, card):
            return False
        self._log_action(game, player, "discard", cards=[card])
        if game.phase == GamePhase.PLAYER_TURN_DRAW:
            self._turn_number += 1
        return True

    # --- Human seat actions ---

    def _human_turn(self) -> tuple[GameState, PlayerState] | None:
        game = self._game
        if game is None or game.phase not in (
            GamePhase.PLAYER_TURN_DRAW,
            GamePhase.PLAYER_TURN_MELD_DISCARD,
        ):
            logger.warning("No turn in progress.")
            return None
        player = game.current_player
        if not self.is_human(player):
            logger.warning(f"It is {player.display_name}'s turn, not yours.")
            return None
        return game, player

    def _cards_at(self, player: PlayerState, hand_indices: Iterable[int]) -> list[Card] | None:
        cards = []
        for i in hand_indices:
            if i < 0 or i >= len(player.hand):
                logger.warning(f"Hand index {i} out of range.")
                return None
            cards.append(player.hand[i])
        return cards

    def draw_from_pile(self) -> bool:
        turn = self._human_turn()
        if turn is None:
            return False
        if self._draw_from_pile(*turn):
            return True
        logger.warning("Can't draw from pile right now.")
        return False

    def draw_from_discard(self, index: int) -> bool:
        turn = self._human_turn()
        if turn is None:
            return False
        if self._draw_from_discard(*turn, index):
            return True
        logger.warning(f"Can't draw discard at index {index}, you may not be able to meld that card.")
        return False

    def lay_meld(self, hand_indices: Iterable[int]) -> bool:
        turn = self._human_turn()
        if turn is None:
            return False
        game, player = turn
        cards = self._cards_at(player, hand_indices)
        if cards is None:
            return False
        if self._lay_meld(game, player, cards):
            return True
        logger.warning("Invalid meld, check your card selection.")
        return False

    def extend_meld(self, meld_index: int, hand_indices: Iterable[int]) -> bool:
        turn = self._human_turn()
        if turn is None:
            return False
        game, player = turn
        cards = self._cards_at(player, hand_indices)
        if cards is None:
            return False
        if self._extend_meld(game, player, meld_index, cards):
            return True
        logger.warning("Can't extend that meld with those cards.")
        return False

    def discard(self, hand_index: int) -> bool:
        turn = self._human_turn()
        if turn is None:
            return False
        game, player = turn
        if hand_index < 0 or hand_index >= len(player.hand):
            logger.warning("Invalid hand index.")
            return False
        if self._discard(game, player, player.hand[hand_index]):
            return True
        logger.warning(
            "Can't discard right now, did you draw from the discard pile without melding that card?"
        )
        return False

    # --- GameListener ---

    def on_turn_changed(self, player: PlayerState) -> None:
        self._schedule_turn(player)

    def on_meld_laid(self, player: PlayerState, meld: Meld) -> None:
        logger.debug(f"{player.display_name} laid: {meld}")

    def on_round_over(self, player: PlayerState) -> None:
        # Written after the action that ended the round
        self._went_out = player
