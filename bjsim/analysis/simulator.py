"""
Monte Carlo driver: repeated rounds against one seeded shoe.

Wires a Shoe, an initial balances map and a Dealer, then calls
Dealer.play_hand() until one of:
    - the round budget is used up               stop_reason = "budget"
    - every balance is <= 0                     stop_reason = "bankrupt"
    - no player is left able to bet             stop_reason = "no_players"
    - a round raised a BlackjackError           stop_reason = "error"

The balance of every player is recorded after each round, so the history
array has shape (n_rounds_played + 1, n_players); row 0 holds the initial
balances.

Usage (standalone report, plus balance.html in the working directory):
    python -m bjsim.analysis.simulator [n_rounds]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from bjsim.engine.config import BettingConfig, TableRules
from bjsim.engine.dealer import Dealer, RoundResult
from bjsim.engine.deck import Deck, Shoe
from bjsim.engine.errors import BlackjackError
from bjsim.engine.hand import HandStatus, Reason
from bjsim.engine.player import Player

logger = logging.getLogger(__name__)

# ─── Result type ──────────────────────────────────────────────────────────────


@dataclass
class SimulationResult:
    """Aggregate outcome of a simulation run.

    Attributes:
        player_ids:      Player ids, in table order (history column order).
        n_rounds:        Rounds actually played.
        stop_reason:     'budget', 'bankrupt', 'no_players' or 'error'.
        final_balances:  Player id -> balance after the last round.
        history:         float64 array (n_rounds + 1, n_players) of balances.
        n_wins:          Player hands won (blackjacks included).
        n_losses:        Player hands lost (busts included).
        n_pushes:        Player hands pushed.
        n_blackjacks:    Player hands paid at the blackjack rate.
        n_busts:         Player hands lost by busting.
        error:           Message of the error that stopped the run, if any.
    """

    player_ids: tuple[str, ...]
    n_rounds: int
    stop_reason: str
    final_balances: dict[str, float]
    history: np.ndarray
    n_wins: int = 0
    n_losses: int = 0
    n_pushes: int = 0
    n_blackjacks: int = 0
    n_busts: int = 0
    error: str | None = None

    @property
    def n_hands(self) -> int:
        return self.n_wins + self.n_losses + self.n_pushes

    def __str__(self) -> str:
        balances = ", ".join(f"{pid}={bal:g}" for pid, bal in self.final_balances.items())
        return (
            f"Rounds: {self.n_rounds:,} ({self.stop_reason}) | "
            f"Hands: {self.n_hands:,} W/L/P {self.n_wins}/{self.n_losses}/{self.n_pushes} | "
            f"Blackjacks: {self.n_blackjacks} | Busts: {self.n_busts} | "
            f"Balances: {balances}"
        )


@dataclass
class _Tally:
    wins: int = 0
    losses: int = 0
    pushes: int = 0
    blackjacks: int = 0
    busts: int = 0
    rows: list[list[float]] = field(default_factory=list)

    def add(self, result: RoundResult) -> None:
        for outcome in result.outcomes:
            if outcome.status is HandStatus.WON:
                self.wins += 1
                if outcome.reason is Reason.BLACKJACK:
                    self.blackjacks += 1
            elif outcome.status is HandStatus.LOSE:
                self.losses += 1
                if outcome.reason is Reason.BUST:
                    self.busts += 1
            elif outcome.status is HandStatus.DRAW:
                self.pushes += 1


# ─── Core simulation loop ─────────────────────────────────────────────────────


def run_simulation(
    player_ids: tuple[str, ...] = ("yo",),
    initial_balance: float = 100,
    n_rounds: int = 2800,
    seed: int | None = 42,
    rules: TableRules | None = None,
    betting: BettingConfig | None = None,
    deck: Deck | None = None,
) -> SimulationResult:
    """Play rounds until the budget is used up or nobody can keep playing.

    Args:
        player_ids:      Ids of the automated players, in table order.
        initial_balance: Starting balance of every player.
        n_rounds:        Maximum number of rounds.
        seed:            Seed for the shoe's numpy Generator. None for a
                         non-deterministic run. Ignored when deck is given.
        rules:           Table rules; defaults to TableRules().
        betting:         Betting ladder shared by every player.
        deck:            Deck provider to use instead of a fresh Shoe.

    Returns:
        SimulationResult with counts and the per-round balance history.
    """
    if not player_ids:
        raise ValueError("run_simulation() needs at least one player")
    if n_rounds < 0:
        raise ValueError(f"n_rounds must be >= 0; got {n_rounds}")

    rules = rules if rules is not None else TableRules()
    if deck is None:
        deck = Shoe(num_decks=rules.num_decks, seed=seed)

    balances: dict[str, float] = {pid: initial_balance for pid in player_ids}
    dealer = Dealer(deck=deck, balances=balances, rules=rules)
    for pid in player_ids:
        dealer.add_player(Player(pid, betting))

    tally = _Tally()
    tally.rows.append([balances[pid] for pid in player_ids])
    stop_reason = "budget"
    error: str | None = None
    played = 0

    while played < n_rounds:
        if not any(balance > 0 for balance in balances.values()):
            stop_reason = "bankrupt"
            break
        try:
            result = dealer.play_hand()
        except BlackjackError as exc:
            logger.error("simulation aborted in round %d: %s", played + 1, exc, exc_info=True)
            stop_reason = "error"
            error = str(exc)
            break
        if not result.played:
            stop_reason = "no_players"
            break
        played += 1
        tally.add(result)
        tally.rows.append([balances[pid] for pid in player_ids])

    return SimulationResult(
        player_ids=tuple(player_ids),
        n_rounds=played,
        stop_reason=stop_reason,
        final_balances=dict(balances),
        history=np.array(tally.rows, dtype=np.float64),
        n_wins=tally.wins,
        n_losses=tally.losses,
        n_pushes=tally.pushes,
        n_blackjacks=tally.blackjacks,
        n_busts=tally.busts,
        error=error,
    )


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    from bjsim.analysis.balance_plot import build_balance_figure, save_balance_html
    from bjsim.analysis.bankroll import format_bankroll_report

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    n = int(sys.argv[1]) if len(sys.argv) > 1 else 2800
    print(f"Blackjack progression simulation — up to {n:,} rounds\n")
    sim = run_simulation(n_rounds=n)
    print(sim)
    print()
    print(format_bankroll_report(sim))

    save_balance_html(build_balance_figure(sim), "balance.html")
    print("\nSaved: balance.html")
    print("That's all Folks!")
