"""
Table rules and betting-ladder parameters.

Both are frozen dataclasses passed explicitly into the Dealer and Player.
Defaults reproduce the reference table: $1 minimum, $100 maximum, a 4-deck
shoe reshuffled once half of it is gone, 3:2 blackjacks, and a 1-2-4-...-32
doubling ladder for every player.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TableRules:
    """Global parameters of a blackjack table.

    Attributes:
        min_bet:          Smallest accepted wager. A player whose ladder bid
                          falls below it is disabled for the rest of the run.
        max_bet:          Largest wager accepted in the bid phase.
        shuffle_perc:     Reshuffle once the shoe holds fewer than this
                          percentage of its starting cards (0 = never).
        num_decks:        Decks in the shoe built by the simulation driver.
        blackjack_payout: Profit multiple paid on a player blackjack (3:2).
        double_min_total: Lowest hand high-total on which DOUBLE is offered.
        double_max_total: Highest hand high-total on which DOUBLE is offered.
        double_soft_only: Offer DOUBLE only on soft two-card hands.
    """

    min_bet: float = 1
    max_bet: float = 100
    shuffle_perc: float = 50
    num_decks: int = 4
    blackjack_payout: float = 1.5
    double_min_total: int = 8
    double_max_total: int = 11
    double_soft_only: bool = True

    def __post_init__(self) -> None:
        if self.min_bet <= 0:
            raise ValueError(f"min_bet must be positive; got {self.min_bet}")
        if self.max_bet < self.min_bet:
            raise ValueError(
                f"max_bet ({self.max_bet}) must be >= min_bet ({self.min_bet})"
            )
        if not 0 <= self.shuffle_perc <= 100:
            raise ValueError(f"shuffle_perc must be within [0, 100]; got {self.shuffle_perc}")
        if self.num_decks < 1:
            raise ValueError(f"num_decks must be >= 1; got {self.num_decks}")
        if self.blackjack_payout <= 0:
            raise ValueError(f"blackjack_payout must be positive; got {self.blackjack_payout}")
        if self.double_min_total > self.double_max_total:
            raise ValueError(
                f"double window is empty: [{self.double_min_total}, {self.double_max_total}]"
            )


@dataclass(frozen=True)
class BettingConfig:
    """Progressive betting ladder parameters.

    The cap is original_bid * bid_multiplier ** bid_pow_limit; with the
    defaults the ladder runs 1, 2, 4, 8, 16, 32.
    """

    original_bid: float = 1
    bid_multiplier: float = 2
    bid_pow_limit: int = 5

    def __post_init__(self) -> None:
        if self.original_bid <= 0:
            raise ValueError(f"original_bid must be positive; got {self.original_bid}")
        if self.bid_multiplier < 1:
            raise ValueError(f"bid_multiplier must be >= 1; got {self.bid_multiplier}")
        if self.bid_pow_limit < 0:
            raise ValueError(f"bid_pow_limit must be >= 0; got {self.bid_pow_limit}")

    @property
    def bid_limit(self) -> float:
        return self.original_bid * self.bid_multiplier ** self.bid_pow_limit
