"""Meld model and meld validation rules."""

from collections.abc import Iterable, Iterator, Sequence
from enum import Enum

from .card import Card

MIN_MELD_SIZE = 3


class MeldType(str, Enum):
    """Kind of card grouping laid on the table."""

    SET = "set"  # Same rank, distinct suits
    SEQUENCE = "sequence"  # Same suit, consecutive ranks


def is_valid_set(cards: Sequence[Card]) -> bool:
    """Check whether cards form a set.

    A set has at least three cards of one rank with pairwise-distinct
    suits. A repeated suit invalidates the whole set.

    Args:
        cards: Cards to check

    Returns:
        True if the cards form a valid set
    """
    if len(cards) < MIN_MELD_SIZE:
        return False
    rank = cards[0].rank
    suits = set()
    for card in cards:
        if card.rank != rank:
            return False
        if card.suit in suits:
            return False
        suits.add(card.suit)
    return True


def _is_consecutive(values: list[int]) -> bool:
    return all(b == a + 1 for a, b in zip(values, values[1:]))


def _run_order(cards: Sequence[Card]) -> list[Card] | None:
    """Return cards in run order, or None if they do not form a run.

    The Ace-low reading (A-2-3) is tried first, then the Ace-high one
    (Q-K-A). The two readings are never mixed, so K-A-2 is rejected.
    """
    for ace_high in (False, True):
        ordered = sorted(cards, key=lambda c: c.rank_value(ace_high))
        if _is_consecutive([c.rank_value(ace_high) for c in ordered]):
            return ordered
    return None


def is_valid_sequence(cards: Sequence[Card]) -> bool:
    """Check whether cards form a sequence.

    A sequence has at least three cards of one suit whose ranks form a
    strictly consecutive run, with the Ace either low or high.

    Args:
        cards: Cards to check

    Returns:
        True if the cards form a valid sequence
    """
    if len(cards) < MIN_MELD_SIZE:
        return False
    suit = cards[0].suit
    if any(card.suit != suit for card in cards):
        return False
    return _run_order(cards) is not None


def is_valid_meld(cards: Sequence[Card]) -> bool:
    """Check whether cards form either a set or a sequence."""
    return is_valid_set(cards) or is_valid_sequence(cards)


_VALIDATORS = {
    MeldType.SET: is_valid_set,
    MeldType.SEQUENCE: is_valid_sequence,
}


class Meld:
    """Cards laid on the table by one player.

    The meld type is fixed at creation. The card list can only grow,
    through ``try_extend``, and only into another valid meld of the same
    type. Sequences are kept in run order.
    """

    def __init__(self, meld_type: MeldType, owner: int, cards: Iterable[Card]):
        """Initialize meld.

        Args:
            meld_type: SET or SEQUENCE
            owner: Id of the player who laid the meld
            cards: Cards of the meld

        Raises:
            ValueError: If the cards do not form a valid meld of this type
        """
        cards = list(cards)
        if not _VALIDATORS[meld_type](cards):
            raise ValueError(f"Invalid {meld_type.value}: {cards}")
        self._meld_type = meld_type
        self._owner = owner
        self._cards = self._arrange(cards)

    @classmethod
    def create_set(cls, owner: int, cards: Iterable[Card]) -> "Meld":
        """Create a set meld."""
        return cls(MeldType.SET, owner, cards)

    @classmethod
    def create_sequence(cls, owner: int, cards: Iterable[Card]) -> "Meld":
        """Create a sequence meld, stored in ascending run order."""
        return cls(MeldType.SEQUENCE, owner, cards)

    @property
    def meld_type(self) -> MeldType:
        return self._meld_type

    @property
    def owner(self) -> int:
        return self._owner

    @property
    def cards(self) -> tuple[Card, ...]:
        """Cards of the meld (read-only view)."""
        return tuple(self._cards)

    @property
    def point_value(self) -> int:
        return sum(card.point_value for card in self._cards)

    def accepts(self, new_cards: Iterable[Card]) -> bool:
        """Check whether adding cards would keep the meld valid."""
        return _VALIDATORS[self._meld_type]([*self._cards, *new_cards])

    def try_extend(self, new_cards: Iterable[Card]) -> bool:
        """Try to add cards to this meld.

        The combined cards are revalidated from scratch against the meld
        type before anything changes, so the extension is all-or-nothing.

        Args:
            new_cards: Cards to add

        Returns:
            True if all cards were added
        """
        combined = [*self._cards, *new_cards]
        if not _VALIDATORS[self._meld_type](combined):
            return False
        self._cards = self._arrange(combined)
        return True

    def _arrange(self, cards: list[Card]) -> list[Card]:
        if self._meld_type == MeldType.SEQUENCE:
            ordered = _run_order(cards)
            if ordered is not None:
                return ordered
        return cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(tuple(self._cards))

    def __contains__(self, card: object) -> bool:
        return card in self._cards

    def __str__(self) -> str:
        cards = ", ".join(str(c) for c in self._cards)
        return f"{self._meld_type.value.capitalize()} [{cards}] ({self.point_value}pts)"

    def __repr__(self) -> str:
        return f"Meld({self._meld_type.value}, owner={self._owner}, cards={self._cards!r})"
