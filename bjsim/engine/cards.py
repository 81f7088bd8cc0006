"""
Card value type and human-readable I/O helpers.

A Card is an immutable (rank, suit) pair. Its blackjack value is either a
single integer (2-10) or, for an ace, the two-valued alternative (1, 11).

    rank:  '2'..'10', 'J', 'Q', 'K', 'A'
    suit:  'C', 'D', 'H', 'S'

String representations ('AS', '10C', ...) are used only at I/O boundaries:
test setup and log lines.
"""

from __future__ import annotations

from dataclasses import dataclass

RANK_NAMES: tuple[str, ...] = ('2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K', 'A')
SUIT_NAMES: tuple[str, ...] = ('C', 'D', 'H', 'S')

RANK_ACE: str = 'A'

ACE_VALUE: tuple[int, int] = (1, 11)

# Point value per rank. Ace is the only two-valued rank.
RANK_VALUES: dict[str, int | tuple[int, int]] = {
    '2': 2, '3': 3, '4': 4, '5': 5, '6': 6, '7': 7, '8': 8, '9': 9,
    '10': 10, 'J': 10, 'Q': 10, 'K': 10,
    'A': ACE_VALUE,
}


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __post_init__(self) -> None:
        if self.rank not in RANK_VALUES:
            raise ValueError(f"Unknown rank {self.rank!r}")
        if self.suit not in SUIT_NAMES:
            raise ValueError(f"Unknown suit {self.suit!r}")

    @property
    def value(self) -> int | tuple[int, int]:
        return RANK_VALUES[self.rank]

    @property
    def is_ace(self) -> bool:
        return self.rank == RANK_ACE

    def absolute_value(self) -> int:
        """Return the single representative value: 11 for an ace, else the face value.

        Examples:
            >>> Card('A', 'S').absolute_value()
            11
            >>> Card('K', 'H').absolute_value()
            10
        """
        value = self.value
        return value[1] if isinstance(value, tuple) else value

    def __str__(self) -> str:
        return card_to_str(self)


def card_to_str(card: Card) -> str:
    """Convert a card to its short string form.

    Examples:
        >>> card_to_str(Card('10', 'C'))
        '10C'
    """
    return card.rank + card.suit


def str_to_card(s: str) -> Card:
    """Parse a short card string such as 'AS', '7H' or '10C'.

    The suit is the last character; everything before it is the rank.

    Raises:
        ValueError: If the rank or suit is not recognised.
    """
    return Card(rank=s[:-1], suit=s[-1])


def hand_to_str(cards) -> str:
    """Join a sequence of cards into a space-separated string.

    Examples:
        >>> hand_to_str([Card('A', 'C'), Card('K', 'S')])
        'AC KS'
    """
    return ' '.join(card_to_str(c) for c in cards)


def standard_deck(num_decks: int = 1) -> list[Card]:
    """Return num_decks full 52-card decks in a fixed suit/rank order (unshuffled)."""
    if num_decks < 1:
        raise ValueError(f"num_decks must be >= 1; got {num_decks}")
    single = [Card(rank, suit) for suit in SUIT_NAMES for rank in RANK_NAMES]
    return single * num_decks
