"""
Shared pytest fixtures for the blackjack engine tests.

Provides card builders from short strings and a scripted deck whose draw
order is fixed, so whole rounds can be played deterministically.
"""

from __future__ import annotations

import pytest

from bjsim.engine.cards import Card, str_to_card
from bjsim.engine.config import TableRules


def hand(*card_strs: str) -> list[Card]:
    """Build a list of cards from short strings.

    Examples:
        >>> hand('AS', '10C')
        [Card(rank='A', suit='S'), Card(rank='10', suit='C')]
    """
    return [str_to_card(s) for s in card_strs]


class ScriptedDeck:
    """Deck provider that deals the given cards in order.

    reset() puts the whole script back and counts the call. draw() raises
    ValueError once the script is exhausted, like a real empty shoe.
    """

    def __init__(self, *card_strs: str, cycle: bool = False) -> None:
        self._script = hand(*card_strs)
        self._cards = list(self._script)
        self.cycle = cycle
        self.resets = 0
        self.drawn: list[Card] = []

    def __len__(self) -> int:
        return len(self._cards)

    def draw(self) -> Card:
        if not self._cards:
            if not self.cycle:
                raise ValueError("Scripted deck is empty.")
            self._cards = list(self._script)
        card = self._cards.pop(0)
        self.drawn.append(card)
        return card

    def reset(self) -> None:
        self.resets += 1
        self._cards = list(self._script)


@pytest.fixture
def h():
    """Expose the hand() helper as a fixture for convenience."""
    return hand


@pytest.fixture
def no_shuffle() -> TableRules:
    """Default table rules with reshuffling switched off (for scripted decks)."""
    return TableRules(shuffle_perc=0)
