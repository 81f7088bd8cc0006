"""Tests for bjsim/engine/config.py — rule and ladder validation."""

from __future__ import annotations

import dataclasses

import pytest

from bjsim.engine.config import BettingConfig, TableRules


class TestTableRules:
    def test_defaults(self):
        rules = TableRules()
        assert (rules.min_bet, rules.max_bet, rules.shuffle_perc) == (1, 100, 50)
        assert rules.blackjack_payout == 1.5
        assert rules.double_soft_only

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            TableRules().min_bet = 5  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"min_bet": 0},
            {"min_bet": 10, "max_bet": 5},
            {"shuffle_perc": 101},
            {"shuffle_perc": -1},
            {"num_decks": 0},
            {"blackjack_payout": 0},
            {"double_min_total": 12, "double_max_total": 9},
        ],
    )
    def test_invalid_rejected(self, kwargs):
        with pytest.raises(ValueError):
            TableRules(**kwargs)


class TestBettingConfig:
    def test_default_limit(self):
        assert BettingConfig().bid_limit == 32

    def test_custom_limit(self):
        assert BettingConfig(original_bid=5, bid_multiplier=3, bid_pow_limit=2).bid_limit == 45

    @pytest.mark.parametrize(
        "kwargs",
        [{"original_bid": 0}, {"bid_multiplier": 0.5}, {"bid_pow_limit": -1}],
    )
    def test_invalid_rejected(self, kwargs):
        with pytest.raises(ValueError):
            BettingConfig(**kwargs)
