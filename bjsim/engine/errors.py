"""
Exception taxonomy for the blackjack round engine.

    BlackjackError
    ├── ValidationError            recoverable by the caller, fatal to the round
    │   ├── InsufficientFundsError
    │   └── InvalidBalanceError    (also a TypeError)
    ├── StateError                 an operation called outside its precondition
    │   ├── HandSizeError          (also an IndexError)
    │   ├── HandShapeError
    │   └── IllegalTransitionError
    ├── StrategyLookupError        incomplete strategy table
    └── LogicError
        └── ActionNotAvailableError

Nothing inside the engine catches these. They propagate out of
Dealer.play_hand() and the simulation driver decides what to do.
"""

from __future__ import annotations


class BlackjackError(Exception):
    """Base class for every error raised by the engine."""


# ─── Validation ───────────────────────────────────────────────────────────────

class ValidationError(BlackjackError):
    pass


class InsufficientFundsError(ValidationError):
    """A wager (initial bid, double or split) exceeds the player's balance."""


class InvalidBalanceError(ValidationError, TypeError):
    """A stored balance is missing, NaN or negative."""


# ─── State ────────────────────────────────────────────────────────────────────

class StateError(BlackjackError):
    pass


class HandSizeError(StateError, IndexError):
    """A two-card query was made on a hand without exactly two cards."""


class HandShapeError(StateError):
    """pairs_of()/soft_of() called on a hand that is not a pair / not soft."""


class IllegalTransitionError(StateError):
    """A status change out of a terminal (or otherwise forbidden) state."""


# ─── Strategy / decision ──────────────────────────────────────────────────────

class StrategyLookupError(BlackjackError):
    """No strategy entry for a (hand key, dealer up-card) combination."""


class LogicError(BlackjackError):
    pass


class ActionNotAvailableError(LogicError):
    """The decision engine chose an action that is neither offered nor covered
    by the fallback ladder."""
