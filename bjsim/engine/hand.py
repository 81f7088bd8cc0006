"""
Hand state, score derivation and two-card shape predicates.

Score rule (applied card by card, in the order the cards were added):
    non-ace card:  low += value, high += value
    ace:           low += 1,     high += 11
                   unless high + 11 > 21, in which case the ace counts
                   1 in both low and high.

The reduction is sequential, not global: an ace counted as 11 early stays
at 11 in `high` even if later cards push `high` past 21. The engine treats
`high > 21` as a bust.

Status lifecycle:
    WAITING ──► PLAYING ──► WAITING (stood / doubled, awaiting resolution)
       │           │
       └───────────┴──► DRAW | LOSE | WON   (terminal, never left)
"""

from __future__ import annotations

from enum import Enum, auto
from typing import NamedTuple

from .cards import Card, hand_to_str
from .errors import HandShapeError, HandSizeError, IllegalTransitionError


# ─── Enumerations ─────────────────────────────────────────────────────────────

class HandStatus(Enum):
    WAITING = auto()
    PLAYING = auto()
    DRAW = auto()
    LOSE = auto()
    WON = auto()


class Reason(Enum):
    BLACKJACK = auto()
    BUST = auto()
    DEALER_WON = auto()
    DEALER_BUST = auto()
    DEALER_LOST = auto()


TERMINAL_STATUSES: frozenset[HandStatus] = frozenset(
    {HandStatus.DRAW, HandStatus.LOSE, HandStatus.WON}
)

_ALLOWED_TRANSITIONS: dict[HandStatus, frozenset[HandStatus]] = {
    HandStatus.WAITING: frozenset({HandStatus.WAITING, HandStatus.PLAYING}) | TERMINAL_STATUSES,
    HandStatus.PLAYING: frozenset({HandStatus.WAITING, HandStatus.PLAYING}) | TERMINAL_STATUSES,
    HandStatus.DRAW: frozenset(),
    HandStatus.LOSE: frozenset(),
    HandStatus.WON: frozenset(),
}


def check_transition(current: HandStatus, new: HandStatus) -> None:
    """Raise IllegalTransitionError unless current -> new is a legal hand transition."""
    if new not in _ALLOWED_TRANSITIONS[current]:
        raise IllegalTransitionError(
            f"Hand cannot move from {current.name} to {new.name}"
        )


class Score(NamedTuple):
    low: int
    high: int


# ─── Hand ─────────────────────────────────────────────────────────────────────

class Hand:
    """An ordered, append-only list of cards plus a lifecycle status."""

    def __init__(self, cards: list[Card] | None = None) -> None:
        self.cards: list[Card] = list(cards) if cards else []
        self.status: HandStatus = HandStatus.WAITING
        self.reason: Reason | None = None

    def __len__(self) -> int:
        return len(self.cards)

    def __repr__(self) -> str:
        return f"Hand([{hand_to_str(self.cards)}], {self.status.name})"

    @property
    def num_cards(self) -> int:
        return len(self.cards)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    # ── Cards ─────────────────────────────────────────────────────────────────

    def add_card(self, card: Card) -> None:
        if self.is_terminal:
            raise IllegalTransitionError(
                f"Cannot add {card} to a resolved hand ({self.status.name})"
            )
        self.cards.append(card)

    def pop_card(self) -> Card:
        """Remove and return the most recently added card (used by split)."""
        if not self.cards:
            raise HandSizeError("Cannot pop a card from an empty hand")
        return self.cards.pop()

    # ── Derived values ────────────────────────────────────────────────────────

    @property
    def score(self) -> Score:
        """Derive (low, high) from the cards; see the module docstring.

        Examples:
            >>> h = Hand([Card('5', 'C'), Card('A', 'S')])
            >>> h.score
            Score(low=6, high=16)
            >>> h.add_card(Card('A', 'H'))
            >>> h.score
            Score(low=7, high=17)
        """
        low = high = 0
        for card in self.cards:
            value = card.value
            if isinstance(value, tuple):
                ace_low, ace_high = value
                if high + ace_high > 21:
                    low += ace_low
                    high += ace_low
                else:
                    low += ace_low
                    high += ace_high
            else:
                low += value
                high += value
        return Score(low, high)

    @property
    def is_blackjack(self) -> bool:
        if len(self.cards) != 2:
            return False
        first, second = self.cards
        got_ten = first.value == 10 or second.value == 10
        got_ace = first.is_ace or second.is_ace
        return got_ten and got_ace

    @property
    def has_pairs(self) -> bool:
        if len(self.cards) != 2:
            return False
        first, second = self.cards
        return first.value == second.value or (first.is_ace and second.is_ace)

    @property
    def is_soft(self) -> bool:
        if len(self.cards) != 2:
            return False
        return any(card.is_ace for card in self.cards)

    def pairs_of(self) -> int:
        """Return the value of the paired card (11 for a pair of aces).

        Raises:
            HandSizeError:  The hand does not hold exactly two cards.
            HandShapeError: The two cards are not a pair.
        """
        if len(self.cards) != 2:
            raise HandSizeError("pairs_of() needs exactly two cards")
        if not self.has_pairs:
            raise HandShapeError("pairs_of() called on a hand without a pair")
        return self.cards[0].absolute_value()

    def soft_of(self) -> int:
        """Return the value of the non-ace card of a soft two-card hand.

        Raises:
            HandSizeError:  The hand does not hold exactly two cards.
            HandShapeError: Neither card is an ace.
        """
        if len(self.cards) != 2:
            raise HandSizeError("soft_of() needs exactly two cards")
        if not self.is_soft:
            raise HandShapeError("soft_of() called on a hand without an ace")
        first, second = self.cards
        return second.absolute_value() if first.is_ace else first.absolute_value()

    # ── Status ────────────────────────────────────────────────────────────────

    def set_status(self, status: HandStatus, reason: Reason | None = None) -> None:
        check_transition(self.status, status)
        self.status = status
        self.reason = reason

    def play(self) -> None:
        self.set_status(HandStatus.PLAYING)

    def wait(self) -> None:
        self.set_status(HandStatus.WAITING)

    def lose(self, reason: Reason) -> None:
        self.set_status(HandStatus.LOSE, reason)

    def push(self, reason: Reason | None = None) -> None:
        self.set_status(HandStatus.DRAW, reason)

    def won(self, reason: Reason) -> None:
        self.set_status(HandStatus.WON, reason)
