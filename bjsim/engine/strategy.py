"""
Static basic-strategy tables: (hand key, dealer up-card) -> Play.

Three tables, one per hand shape:
    HARD   key = hand high total (4-21)
    SOFT   key = value of the non-ace card of a two-card soft hand (2-10)
    PAIRS  key = value of the paired card (2-11, aces = 11)

Dealer up-card is the card's absolute value (2-10, ace = 11).

Multi-deck basic strategy, dealer stands on all 17s, double after split
allowed, no surrender. Rows are written as one letter per up-card,
2 through ace:
    S = stand, H = hit, D = double (else hit), T = split

Tables are read-only MappingProxyType views built once at import.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .errors import StrategyLookupError


class Play(Enum):
    STAND = 'S'
    HIT = 'H'
    DOUBLE = 'D'
    SPLIT = 'T'


UP_CARDS: tuple[int, ...] = tuple(range(2, 12))

StrategyTable = Mapping[int, Mapping[int, Play]]


def _build(rows: dict[int, str]) -> StrategyTable:
    table: dict[int, Mapping[int, Play]] = {}
    for key, row in rows.items():
        letters = row.split()
        if len(letters) != len(UP_CARDS):
            raise ValueError(f"Strategy row {key} has {len(letters)} entries, expected {len(UP_CARDS)}")
        table[key] = MappingProxyType(
            {up: Play(letter) for up, letter in zip(UP_CARDS, letters)}
        )
    return MappingProxyType(table)


# ─── Tables ───────────────────────────────────────────────────────────────────
#                 2 3 4 5 6 7 8 9 T A

HARD: StrategyTable = _build({
    4:           'H H H H H H H H H H',
    5:           'H H H H H H H H H H',
    6:           'H H H H H H H H H H',
    7:           'H H H H H H H H H H',
    8:           'H H H H H H H H H H',
    9:           'H D D D D H H H H H',
    10:          'D D D D D D D D H H',
    11:          'D D D D D D D D D H',
    12:          'H H S S S H H H H H',
    13:          'S S S S S H H H H H',
    14:          'S S S S S H H H H H',
    15:          'S S S S S H H H H H',
    16:          'S S S S S H H H H H',
    17:          'S S S S S S S S S S',
    18:          'S S S S S S S S S S',
    19:          'S S S S S S S S S S',
    20:          'S S S S S S S S S S',
    21:          'S S S S S S S S S S',
})

SOFT: StrategyTable = _build({
    2:           'H H H D D H H H H H',
    3:           'H H H D D H H H H H',
    4:           'H H D D D H H H H H',
    5:           'H H D D D H H H H H',
    6:           'H D D D D H H H H H',
    7:           'S D D D D S S H H H',
    8:           'S S S S S S S S S S',
    9:           'S S S S S S S S S S',
    10:          'S S S S S S S S S S',
})

PAIRS: StrategyTable = _build({
    2:           'T T T T T T H H H H',
    3:           'T T T T T T H H H H',
    4:           'H H H T T H H H H H',
    5:           'D D D D D D D D H H',
    6:           'T T T T T H H H H H',
    7:           'T T T T T T H H H H',
    8:           'T T T T T T T T T T',
    9:           'T T T T T S T T S S',
    10:          'S S S S S S S S S S',
    11:          'T T T T T T T T T T',
})

HARD_KEYS: tuple[int, ...] = tuple(range(4, 22))
SOFT_KEYS: tuple[int, ...] = tuple(range(2, 11))
PAIR_KEYS: tuple[int, ...] = tuple(range(2, 12))


# ─── Lookup ───────────────────────────────────────────────────────────────────

def lookup(table: StrategyTable, hand_key: int, up_card: int) -> Play:
    """Return the play for (hand_key, up_card).

    Raises:
        StrategyLookupError: The table has no entry for the combination.

    Examples:
        >>> lookup(PAIRS, 8, 10)
        <Play.SPLIT: 'T'>
        >>> lookup(SOFT, 5, 6)
        <Play.DOUBLE: 'D'>
    """
    try:
        return table[hand_key][up_card]
    except KeyError:
        raise StrategyLookupError(
            f"No strategy for hand {hand_key} against dealer {up_card}"
        ) from None


def validate_tables() -> None:
    """Check that every table covers its full key range against every up-card.

    Raises:
        StrategyLookupError: Naming the first missing cell.
    """
    for name, table, keys in (
        ('HARD', HARD, HARD_KEYS),
        ('SOFT', SOFT, SOFT_KEYS),
        ('PAIRS', PAIRS, PAIR_KEYS),
    ):
        for key in keys:
            for up in UP_CARDS:
                if key not in table or up not in table[key]:
                    raise StrategyLookupError(f"{name} table is missing ({key}, {up})")
