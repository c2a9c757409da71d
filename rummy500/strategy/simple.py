"""Simple strategy implementation.

Strategy:
- Draw: pick up the top discard only when it melds right away
  (set with two hand cards, table meld extension, or a 3-card run)
- Required play: meld a picked-up card as a set, then a run, then as a
  table extension
- Lay: sets first, then consecutive runs from the remaining cards
- Extend: any hand card that fits a table meld on its own
- Discard: lowest meld potential, ties broken by highest point value
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from rummy500.models.card import Card
from rummy500.models.meld import MIN_MELD_SIZE, is_valid_sequence

from .base import Strategy

if TYPE_CHECKING:
    from rummy500.game.state import GameState
    from rummy500.models.player import PlayerState


def _one_per_suit(cards: Iterable[Card]) -> list[Card]:
    """Keep the first card of each suit."""
    seen = set()
    result = []
    for card in cards:
        if card.suit not in seen:
            seen.add(card.suit)
            result.append(card)
    return result


def _run_window(cards: Iterable[Card], card: Card, ace_high: bool) -> list[Card] | None:
    """Find a 3-card same-suit run containing card.

    Same-suit cards are sorted by rank and scanned with a sliding
    window of three.
    """
    same_suit = sorted(
        {c for c in cards if c.suit == card.suit},
        key=lambda c: c.rank_value(ace_high),
    )
    for i in range(len(same_suit) - MIN_MELD_SIZE + 1):
        window = same_suit[i : i + MIN_MELD_SIZE]
        if card in window and is_valid_sequence(window):
            return window
    return None


class SimpleStrategy(Strategy):
    """Medium-difficulty opponent based on rank/suit adjacency."""

    def choose_draw(self, game: GameState, player: PlayerState) -> int | None:
        """Pick up the top discard if it melds immediately, else draw from the pile."""
        top = game.top_discard
        if top is None:
            return None
        top_index = len(game.discard_pile) - 1
        hand = player.hand

        # Set with two hand cards
        same_rank = [c for c in hand if c.rank == top.rank]
        if len(same_rank) >= 2 and len({c.suit for c in same_rank} | {top.suit}) >= MIN_MELD_SIZE:
            return top_index

        # Table meld extension
        if any(meld.accepts([top]) for meld in game.table_melds):
            return top_index

        # Run with hand cards
        for ace_high in (False, True):
            if _run_window([*hand, top], top, ace_high) is not None:
                return top_index

        return None

    def find_required_play(
        self, game: GameState, player: PlayerState, card: Card
    ) -> tuple[int | None, list[Card]] | None:
        """Find a meld or extension that uses the picked-up card.

        Laying a meld is preferred over extending, since only a player's
        own melds count towards their score.
        """
        if card not in player.hand:
            return None

        same_rank = _one_per_suit([card, *(c for c in player.hand if c.rank == card.rank)])
        if len(same_rank) >= MIN_MELD_SIZE:
            return None, same_rank

        for ace_high in (False, True):
            window = _run_window(player.hand, card, ace_high)
            if window is not None:
                return None, window

        for index, meld in enumerate(game.table_melds):
            if meld.accepts([card]):
                return index, [card]

        return None

    def find_melds_to_lay(self, game: GameState, player: PlayerState) -> list[list[Card]]:
        """Find sets first, then runs from the remaining cards."""
        result: list[list[Card]] = []
        used: set[Card] = set()

        by_rank: dict[int, list[Card]] = {}
        for card in player.hand:
            by_rank.setdefault(card.rank, []).append(card)
        for cards in by_rank.values():
            meld = _one_per_suit(cards)
            if len(meld) >= MIN_MELD_SIZE:
                result.append(meld)
                used.update(meld)

        by_suit: dict[int, list[Card]] = {}
        for card in player.hand:
            if card not in used:
                by_suit.setdefault(card.suit, []).append(card)
        for cards in by_suit.values():
            ordered = sorted(cards, key=lambda c: c.rank)
            start = 0
            while start < len(ordered):
                run = [ordered[start]]
                i = start + 1
                while i < len(ordered) and ordered[i].rank == ordered[i - 1].rank + 1:
                    run.append(ordered[i])
                    i += 1
                if len(run) >= MIN_MELD_SIZE:
                    result.append(run)
                    used.update(run)
                    start = i
                else:
                    start += 1

        return result

    def find_extensions(
        self, game: GameState, player: PlayerState
    ) -> list[tuple[int, list[Card]]]:
        """Find hand cards that each extend a table meld on their own."""
        extensions: list[tuple[int, list[Card]]] = []
        used: set[Card] = set()

        for index, meld in enumerate(game.table_melds):
            cards = [c for c in player.hand if c not in used and meld.accepts([c])]
            if cards:
                extensions.append((index, cards))
                used.update(cards)

        return extensions

    def choose_discard(self, game: GameState, player: PlayerState) -> Card | None:
        """Discard the card least likely to join a meld."""
        hand = player.hand
        if not hand:
            return None

        best: Card | None = None
        lowest_score = None
        highest_points = -1
        for card in hand:
            score = sum(1 for c in hand if c != card and c.rank == card.rank)
            score += sum(
                1
                for c in hand
                if c != card and c.suit == card.suit and abs(c.rank - card.rank) == 1
            )
            if (
                lowest_score is None
                or score < lowest_score
                or (score == lowest_score and card.point_value > highest_points)
            ):
                best = card
                lowest_score = score
                highest_points = card.point_value

        return best
