"""Rummy 500 turn state machine."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from enum import Enum

from rummy500.models.card import DECK_SIZE, Card
from rummy500.models.meld import Meld
from rummy500.models.player import PlayerState

from .deck import Deck, DeckExhaustedError
from .events import GameListener
from .validator import MoveValidator, ValidationResult

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2
MAX_PLAYERS = 4
DEFAULT_SCORE_TARGET = 500
DEFAULT_CARDS_PER_PLAYER = 7


class GamePhase(str, Enum):
    """Phase of the match."""

    WAITING_FOR_PLAYERS = "waiting_for_players"
    PLAYER_TURN_DRAW = "player_turn_draw"  # Current player must draw
    PLAYER_TURN_MELD_DISCARD = "player_turn_meld_discard"  # May meld/extend, then discard
    ROUND_OVER = "round_over"
    GAME_OVER = "game_over"


class GameSetupError(RuntimeError):
    """Raised when the game is driven in a way no rule allows (driver bug)."""


class GameState:
    """Authoritative state of one Rummy 500 match.

    Every mutating action goes through the ``try_*`` methods, which check
    the acting player and phase, validate completely, and only then
    change anything. A refused action returns False and leaves hands,
    piles, melds, scores and phase exactly as they were.
    """

    def __init__(
        self,
        score_target: int = DEFAULT_SCORE_TARGET,
        cards_per_player: int = DEFAULT_CARDS_PER_PLAYER,
        validator: MoveValidator | None = None,
    ):
        """Initialize an empty match waiting for players.

        Args:
            score_target: Score that ends the match
            cards_per_player: Cards dealt to each player per round
            validator: MoveValidator instance (creates one if not provided)
        """
        self._score_target = score_target
        self._cards_per_player = cards_per_player
        self.validator = validator or MoveValidator()

        self._players: list[PlayerState] = []
        self._deck: Deck | None = None
        self._table_melds: list[Meld] = []
        self._phase = GamePhase.WAITING_FOR_PLAYERS
        self._current_index = 0
        self._required_meld_card: Card | None = None
        self._has_melded_this_turn = False
        self._round_number = 0
        self._winner: PlayerState | None = None
        self._rng = random.Random()
        self._listeners: list[GameListener] = []

    # --- Queries ---

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def score_target(self) -> int:
        return self._score_target

    @property
    def cards_per_player(self) -> int:
        return self._cards_per_player

    @property
    def players(self) -> tuple[PlayerState, ...]:
        return tuple(self._players)

    @property
    def current_player_index(self) -> int:
        return self._current_index

    @property
    def current_player(self) -> PlayerState | None:
        if not self._players:
            return None
        return self._players[self._current_index]

    @property
    def table_melds(self) -> tuple[Meld, ...]:
        """Melds of every player, in the order they were laid."""
        return tuple(self._table_melds)

    @property
    def discard_pile(self) -> tuple[Card, ...]:
        """Discard pile, bottom to top."""
        return self._deck.discard_pile if self._deck else ()

    @property
    def top_discard(self) -> Card | None:
        return self._deck.top_discard if self._deck else None

    @property
    def draw_pile_count(self) -> int:
        return self._deck.draw_pile_count if self._deck else 0

    @property
    def required_meld_card(self) -> Card | None:
        """Card picked from the discard pile that must be melded this turn."""
        return self._required_meld_card

    @property
    def has_melded_this_turn(self) -> bool:
        return self._has_melded_this_turn

    @property
    def round_number(self) -> int:
        return self._round_number

    @property
    def winner(self) -> PlayerState | None:
        return self._winner

    def get_player(self, player_id: int) -> PlayerState | None:
        for player in self._players:
            if player.player_id == player_id:
                return player
        return None

    def can_meld_pickup(self, index: int) -> bool:
        """Check whether the current player may pick up the discard at index.

        Runs the look-ahead used by ``try_draw_from_discard`` without
        changing anything.
        """
        player = self.current_player
        if self._deck is None or player is None:
            return False
        pile = self._deck.discard_pile
        if index < 0 or index >= len(pile):
            return False
        return self.validator.can_meld_pickup(
            pile[index], player.hand, pile[index:], self._table_melds
        )

    # --- Listeners ---

    def add_listener(self, listener: GameListener) -> None:
        """Subscribe to game notifications."""
        self._listeners.append(listener)

    def remove_listener(self, listener: GameListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # --- Setup ---

    def add_player(self, player_id: int, display_name: str) -> PlayerState:
        """Register a player.

        Raises:
            GameSetupError: If the game has started or the id is taken
        """
        if self._phase != GamePhase.WAITING_FOR_PLAYERS:
            raise GameSetupError("Cannot add players after the game has started")
        if self.get_player(player_id) is not None:
            raise GameSetupError(f"Player id {player_id} is already registered")
        player = PlayerState(player_id=player_id, display_name=display_name)
        self._players.append(player)
        return player

    def start_game(self, seed: int | None = None, rng: random.Random | None = None) -> None:
        """Deal the first round.

        Args:
            seed: Seed for the match's random source
            rng: Random source to use instead of a seeded one

        Raises:
            GameSetupError: If the game already started, the player count
                is outside 2-4, or the deal needs more than 52 cards
        """
        if self._phase != GamePhase.WAITING_FOR_PLAYERS:
            raise GameSetupError("Game has already started")
        if not MIN_PLAYERS <= len(self._players) <= MAX_PLAYERS:
            raise GameSetupError(
                f"Need {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(self._players)}"
            )
        if len(self._players) * self._cards_per_player + 1 > DECK_SIZE:
            raise GameSetupError(
                f"Cannot deal {self._cards_per_player} cards to {len(self._players)} players"
            )
        self._rng = rng or random.Random(seed)
        self._start_round()

    def start_next_round(self) -> None:
        """Start a new round after the previous one ended.

        Raises:
            GameSetupError: If the game is not in the RoundOver phase
        """
        if self._phase != GamePhase.ROUND_OVER:
            raise GameSetupError(f"Cannot start next round in phase {self._phase.value}")
        self._start_round()

    def _start_round(self) -> None:
        self._table_melds.clear()
        for player in self._players:
            player.reset_for_new_round()

        self._deck = Deck(rng=self._rng)
        self._deck.shuffle()
        self._deck.deal([p.hand for p in self._players], self._cards_per_player)

        self._current_index = 0
        self._required_meld_card = None
        self._has_melded_this_turn = False
        self._round_number += 1
        self._phase = GamePhase.PLAYER_TURN_DRAW

        logger.info(
            f"Round {self._round_number} dealt: {self._cards_per_player} cards each, "
            f"discard top {self._deck.top_discard}"
        )

    # --- Turn actions ---

    def try_draw_from_pile(self, player_id: int) -> bool:
        """Draw the top card of the draw pile."""
        if not self._accept(self.validator.validate_turn(self, player_id, GamePhase.PLAYER_TURN_DRAW)):
            return False

        try:
            card = self._deck.draw_from_pile()
        except DeckExhaustedError as e:
            logger.warning(f"Player {player_id} cannot draw: {e}")
            return False

        self.current_player.add_card_to_hand(card)
        self._required_meld_card = None
        self._has_melded_this_turn = False
        self._phase = GamePhase.PLAYER_TURN_MELD_DISCARD
        logger.debug(f"Player {player_id} drew from pile")
        return True

    def try_draw_from_discard(self, player_id: int, index: int) -> bool:
        """Pick up the discard at index and every card above it.

        The pickup is only allowed if the targeted card can be melded
        right away. It then becomes the required meld card for the turn.
        """
        if not self._accept(self.validator.validate_turn(self, player_id, GamePhase.PLAYER_TURN_DRAW)):
            return False
        if index < 0 or index >= self._deck.discard_pile_count:
            logger.debug(f"Rejected: discard index {index} out of range")
            return False
        if not self.can_meld_pickup(index):
            logger.debug(f"Rejected: {self._deck.discard_pile[index]} cannot be melded by player {player_id}")
            return False

        picked = self._deck.draw_from_discard(index)
        self.current_player.add_cards_to_hand(picked)
        self._required_meld_card = picked[0]
        self._has_melded_this_turn = False
        self._phase = GamePhase.PLAYER_TURN_MELD_DISCARD
        logger.debug(f"Player {player_id} picked up {len(picked)} cards from discard index {index}")
        return True

    def try_lay_meld(self, player_id: int, cards: Iterable[Card]) -> bool:
        """Lay a new meld from the current player's hand."""
        cards = list(cards)
        if not self._accept(self.validator.validate_turn(self, player_id, GamePhase.PLAYER_TURN_MELD_DISCARD)):
            return False
        if not self._accept(self.validator.validate_required_card(self._required_meld_card, cards)):
            return False

        player = self.current_player
        if not player.try_lay_meld(cards):
            logger.debug(f"Rejected: {cards} is not a meld player {player_id} can lay")
            return False

        meld = player.melds[-1]
        self._table_melds.append(meld)
        self._has_melded_this_turn = True
        self._required_meld_card = None
        logger.debug(f"Player {player_id} laid {meld}")

        for listener in list(self._listeners):
            listener.on_meld_laid(player, meld)
        self._check_round_over()
        return True

    def try_extend_meld(self, player_id: int, meld_index: int, cards: Iterable[Card]) -> bool:
        """Add cards from the current player's hand to any table meld."""
        cards = list(cards)
        if not self._accept(self.validator.validate_turn(self, player_id, GamePhase.PLAYER_TURN_MELD_DISCARD)):
            return False
        if meld_index < 0 or meld_index >= len(self._table_melds):
            logger.debug(f"Rejected: meld index {meld_index} out of range")
            return False
        if not self._accept(self.validator.validate_required_card(self._required_meld_card, cards)):
            return False

        meld = self._table_melds[meld_index]
        if not self.current_player.try_extend_meld(meld, cards):
            logger.debug(f"Rejected: {cards} do not extend {meld}")
            return False

        self._has_melded_this_turn = True
        self._required_meld_card = None
        logger.debug(f"Player {player_id} extended meld {meld_index} to {meld}")
        self._check_round_over()
        return True

    def try_discard(self, player_id: int, card: Card) -> bool:
        """Discard a card to end the turn."""
        if not self._accept(self.validator.validate_turn(self, player_id, GamePhase.PLAYER_TURN_MELD_DISCARD)):
            return False
        if not self._accept(self.validator.validate_discard(self._required_meld_card)):
            return False
        if not self.current_player.remove_card_from_hand(card):
            logger.debug(f"Rejected: player {player_id} does not hold {card}")
            return False

        self._deck.add_to_discard(card)
        logger.debug(f"Player {player_id} discarded {card}")
        if self._check_round_over():
            return True
        self._advance_turn()
        return True

    # --- Internal helpers ---

    def _accept(self, result: ValidationResult) -> bool:
        if not result.is_valid:
            logger.debug(f"Rejected: {result.error_message}")
        return result.is_valid

    def _check_round_over(self) -> bool:
        player = self.current_player
        if player.hand:
            return False
        self._end_round(player)
        return True

    def _end_round(self, went_out: PlayerState) -> None:
        for player in self._players:
            player.apply_round_score(player is went_out)

        scores = ", ".join(f"{p.display_name}: {p.score}" for p in self._players)
        logger.info(f"Round {self._round_number} over, {went_out.display_name} went out. Scores: {scores}")

        game_over = any(p.score >= self._score_target for p in self._players)
        if game_over:
            self._winner = max(self._players, key=lambda p: p.score)
            self._phase = GamePhase.GAME_OVER
            logger.info(f"Game over, {self._winner.display_name} wins with {self._winner.score} points")
        else:
            self._phase = GamePhase.ROUND_OVER

        for listener in list(self._listeners):
            listener.on_round_over(went_out)
        if game_over:
            for listener in list(self._listeners):
                listener.on_game_over(self._winner)

    def _advance_turn(self) -> None:
        self._current_index = (self._current_index + 1) % len(self._players)
        self._required_meld_card = None
        self._has_melded_this_turn = False
        self._phase = GamePhase.PLAYER_TURN_DRAW

        player = self.current_player
        for listener in list(self._listeners):
            listener.on_turn_changed(player)

    def __str__(self) -> str:
        parts = [f"Round {self._round_number}", f"[{self._phase.value}]"]
        if self._players:
            parts.append(f"{self.current_player.display_name}'s turn")
        return " ".join(parts)
