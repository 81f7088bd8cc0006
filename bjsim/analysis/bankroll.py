"""Bankroll analysis of a simulation's balance history.

Provides:
- Per-round result statistics (mean, std, skewness, kurtosis, percentiles)
- Trajectory statistics (peak, trough, max drawdown, round of ruin)
- Risk-of-ruin from the classic gambler's ruin approximation
- A plain-text report combining the above

Usage:
    from bjsim.analysis.simulator import run_simulation
    print(format_bankroll_report(run_simulation(n_rounds=5000)))
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from scipy import stats

from bjsim.analysis.simulator import SimulationResult

# ─── Dataclasses ──────────────────────────────────────────────────────────────


@dataclass
class RoundStats:
    """Distribution of the per-round balance change for one player.

    Attributes:
        mean:        Mean change per round (currency units).
        std:         Sample standard deviation (0.0 for fewer than 2 rounds).
        skewness:    Fisher skewness of the changes.
        kurtosis:    Excess kurtosis (normal = 0).
        percentiles: 'p5', 'p50', 'p95' -> value.
        n_rounds:    Number of round-to-round changes in the sample.
    """

    mean: float
    std: float
    skewness: float
    kurtosis: float
    percentiles: dict[str, float]
    n_rounds: int


@dataclass
class TrajectoryStats:
    """Shape of one player's balance path.

    Attributes:
        start:        Balance before the first round.
        final:        Balance after the last round.
        peak:         Highest balance reached.
        trough:       Lowest balance reached.
        max_drawdown: Largest peak-to-trough fall.
        ruin_round:   First round after which the balance was <= 0, or None.
    """

    start: float
    final: float
    peak: float
    trough: float
    max_drawdown: float
    ruin_round: int | None


# ─── Computation functions ────────────────────────────────────────────────────


def _column(history: np.ndarray, player_index: int) -> np.ndarray:
    if history.ndim != 2 or history.shape[0] == 0:
        raise ValueError(f"history must be a non-empty 2-D array; got shape {history.shape}")
    if not 0 <= player_index < history.shape[1]:
        raise ValueError(f"player_index {player_index} out of range for {history.shape[1]} players")
    return history[:, player_index]


def compute_round_stats(history: np.ndarray, player_index: int = 0) -> RoundStats:
    """Describe the distribution of per-round balance changes.

    Args:
        history:      (n_rounds + 1, n_players) balance array.
        player_index: Column to analyse.

    Returns:
        RoundStats for the chosen player.
    """
    deltas = np.diff(_column(history, player_index))
    n = len(deltas)
    if n == 0:
        return RoundStats(0.0, 0.0, 0.0, 0.0, {"p5": 0.0, "p50": 0.0, "p95": 0.0}, 0)

    std = float(np.std(deltas, ddof=1)) if n > 1 else 0.0
    if std > 0:
        skewness = float(stats.skew(deltas))
        kurt = float(stats.kurtosis(deltas))
    else:
        skewness = kurt = 0.0
    p5, p50, p95 = np.percentile(deltas, [5, 50, 95])
    return RoundStats(
        mean=float(np.mean(deltas)),
        std=std,
        skewness=skewness,
        kurtosis=kurt,
        percentiles={"p5": float(p5), "p50": float(p50), "p95": float(p95)},
        n_rounds=n,
    )


def compute_trajectory_stats(history: np.ndarray, player_index: int = 0) -> TrajectoryStats:
    """Peak, trough, max drawdown and ruin round of one balance path."""
    path = _column(history, player_index)
    running_max = np.maximum.accumulate(path)
    drawdowns = running_max - path
    ruined = np.nonzero(path[1:] <= 0)[0]
    return TrajectoryStats(
        start=float(path[0]),
        final=float(path[-1]),
        peak=float(np.max(path)),
        trough=float(np.min(path)),
        max_drawdown=float(np.max(drawdowns)),
        ruin_round=int(ruined[0]) + 1 if len(ruined) else None,
    )


def risk_of_ruin(bankroll: float, edge: float, std: float) -> float:
    """Probability of eventually losing bankroll given a per-round edge and std.

    Gambler's ruin approximation for a random walk:
        RoR = exp(-2 * edge * bankroll / variance)

    Returns 1.0 when edge <= 0 (ruin is certain in the long run) and 0.0
    when there is a positive edge with no variance.
    """
    if bankroll <= 0 or edge <= 0:
        return 1.0
    if std <= 0:
        return 0.0
    return float(math.exp(-2.0 * edge * bankroll / std**2))


# ─── Output ───────────────────────────────────────────────────────────────────


def format_bankroll_report(result: SimulationResult) -> str:
    """Return a multi-section text report, one block per player."""
    lines = [
        "=" * 70,
        "Bankroll Report",
        "=" * 70,
        f"  Rounds played   : {result.n_rounds:>10,}  (stopped: {result.stop_reason})",
        f"  Hands W/L/P     : {result.n_wins:,} / {result.n_losses:,} / {result.n_pushes:,}",
        f"  Blackjacks      : {result.n_blackjacks:>10,}",
        f"  Busts           : {result.n_busts:>10,}",
    ]
    if result.error:
        lines.append(f"  Error           : {result.error}")

    for index, pid in enumerate(result.player_ids):
        rs = compute_round_stats(result.history, index)
        ts = compute_trajectory_stats(result.history, index)
        ror = risk_of_ruin(ts.start, rs.mean, rs.std)
        lines += [
            "",
            f"── Player {pid} " + "─" * max(0, 58 - len(pid)),
            f"  Balance         : {ts.start:>10.2f} -> {ts.final:.2f}",
            f"  Peak / trough   : {ts.peak:>10.2f} / {ts.trough:.2f}",
            f"  Max drawdown    : {ts.max_drawdown:>10.2f}",
            f"  Ruined in round : {ts.ruin_round if ts.ruin_round is not None else '-':>10}",
            f"  Mean / round    : {rs.mean:>+10.4f}  (std {rs.std:.4f})",
            f"  Skew / kurtosis : {rs.skewness:>10.4f} / {rs.kurtosis:.4f}",
            f"  p5 / p50 / p95  : {rs.percentiles['p5']:.2f} / {rs.percentiles['p50']:.2f} / "
            f"{rs.percentiles['p95']:.2f}",
            f"  Risk of ruin    : {ror:>10.1%}",
        ]
    return "\n".join(lines)
