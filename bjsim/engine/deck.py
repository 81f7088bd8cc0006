"""
The Deck boundary and a numpy-shuffled multi-deck shoe.

The Dealer depends only on the Deck protocol:
    len(deck)    cards remaining
    deck.draw()  remove and return the top card (ValueError when empty)
    deck.reset() restore every card and reshuffle

Shoe shuffles with a numpy Generator so that a seeded simulation is
reproducible end to end.
"""

from __future__ import annotations

from typing import Protocol

import numpy as np

from .cards import Card, standard_deck


class Deck(Protocol):
    def __len__(self) -> int: ...

    def draw(self) -> Card: ...

    def reset(self) -> None: ...


class Shoe:
    """A shuffled shoe of num_decks standard decks.

    Args:
        num_decks: Number of 52-card decks in the shoe.
        seed:      Seed for a fresh numpy Generator. Ignored when rng is given.
        rng:       Existing numpy Generator to shuffle with.

    Examples:
        >>> shoe = Shoe(num_decks=2, seed=7)
        >>> len(shoe)
        104
        >>> _ = shoe.draw()
        >>> len(shoe)
        103
    """

    def __init__(
        self,
        num_decks: int = 4,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._full: list[Card] = standard_deck(num_decks)
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._cards: list[Card] = []
        self.num_decks = num_decks
        self.shuffles = 0
        self.reset()

    def __len__(self) -> int:
        return len(self._cards)

    @property
    def starting_length(self) -> int:
        return len(self._full)

    def draw(self) -> Card:
        """Remove and return the top card.

        Raises:
            ValueError: If the shoe is empty.
        """
        if not self._cards:
            raise ValueError("Cannot draw from an empty shoe.")
        return self._cards.pop()

    def reset(self) -> None:
        """Put every card back and reshuffle."""
        order = self._rng.permutation(len(self._full))
        self._cards = [self._full[i] for i in order]
        self.shuffles += 1
