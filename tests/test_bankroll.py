"""Tests for bjsim/analysis/bankroll.py — round and trajectory statistics."""

from __future__ import annotations

import math

import numpy as np
import pytest

from bjsim.analysis.bankroll import (
    RoundStats,
    TrajectoryStats,
    compute_round_stats,
    compute_trajectory_stats,
    format_bankroll_report,
    risk_of_ruin,
)
from bjsim.analysis.simulator import SimulationResult, run_simulation

# ─── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture(scope="module")
def sim_result() -> SimulationResult:
    return run_simulation(player_ids=("yo", "mo"), initial_balance=1_000, n_rounds=300, seed=3)


def column(*balances: float) -> np.ndarray:
    return np.array(balances, dtype=np.float64).reshape(-1, 1)


# ─── compute_trajectory_stats ─────────────────────────────────────────────────


class TestTrajectoryStats:
    def test_known_path(self):
        ts = compute_trajectory_stats(column(100, 90, 120, 60, 80))
        assert isinstance(ts, TrajectoryStats)
        assert (ts.start, ts.final, ts.peak, ts.trough) == (100, 80, 120, 60)
        assert ts.max_drawdown == 60
        assert ts.ruin_round is None

    def test_ruin_round(self):
        ts = compute_trajectory_stats(column(3, 2, 0, 0))
        assert ts.ruin_round == 2

    def test_monotone_up_has_no_drawdown(self):
        assert compute_trajectory_stats(column(1, 2, 3)).max_drawdown == 0

    def test_player_index(self):
        history = np.array([[10, 100], [5, 110]], dtype=np.float64)
        assert compute_trajectory_stats(history, player_index=1).final == 110

    def test_bad_index_rejected(self):
        with pytest.raises(ValueError):
            compute_trajectory_stats(column(1, 2), player_index=1)

    def test_bad_shape_rejected(self):
        with pytest.raises(ValueError):
            compute_trajectory_stats(np.array([1.0, 2.0]))


# ─── compute_round_stats ──────────────────────────────────────────────────────


class TestRoundStats:
    def test_known_deltas(self):
        rs = compute_round_stats(column(100, 102, 101, 103))
        assert isinstance(rs, RoundStats)
        assert rs.n_rounds == 3
        assert math.isclose(rs.mean, 1.0)
        assert math.isclose(rs.std, np.std([2, -1, 2], ddof=1))

    def test_single_row_is_empty(self):
        rs = compute_round_stats(column(100))
        assert rs.n_rounds == 0
        assert rs.std == 0.0

    def test_constant_path_has_zero_moments(self):
        rs = compute_round_stats(column(5, 5, 5, 5))
        assert rs.std == 0.0
        assert rs.skewness == 0.0
        assert rs.kurtosis == 0.0

    def test_percentiles_ordered(self, sim_result):
        rs = compute_round_stats(sim_result.history)
        assert rs.percentiles["p5"] <= rs.percentiles["p50"] <= rs.percentiles["p95"]

    def test_mean_matches_net_change(self, sim_result):
        rs = compute_round_stats(sim_result.history)
        net = sim_result.history[-1, 0] - sim_result.history[0, 0]
        assert math.isclose(rs.mean * rs.n_rounds, net, abs_tol=1e-9)


# ─── risk_of_ruin ─────────────────────────────────────────────────────────────


class TestRiskOfRuin:
    def test_negative_edge_is_certain(self):
        assert risk_of_ruin(100, -0.01, 1.0) == 1.0

    def test_zero_edge_is_certain(self):
        assert risk_of_ruin(100, 0.0, 1.0) == 1.0

    def test_positive_edge_formula(self):
        assert math.isclose(risk_of_ruin(50, 0.02, 1.0), math.exp(-2.0))

    def test_no_variance_positive_edge(self):
        assert risk_of_ruin(10, 0.5, 0.0) == 0.0

    def test_more_bankroll_less_risk(self):
        assert risk_of_ruin(200, 0.01, 1.0) < risk_of_ruin(100, 0.01, 1.0)


# ─── format_bankroll_report ───────────────────────────────────────────────────


class TestReport:
    def test_contains_every_player(self, sim_result):
        text = format_bankroll_report(sim_result)
        assert "Player yo" in text
        assert "Player mo" in text
        assert "Max drawdown" in text

    def test_includes_error(self):
        result = SimulationResult(
            player_ids=("yo",),
            n_rounds=0,
            stop_reason="error",
            final_balances={"yo": 100.0},
            history=column(100),
            error="boom",
        )
        assert "boom" in format_bankroll_report(result)
