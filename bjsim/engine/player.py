"""
Automated player: progressive betting ladder and strategy-table decisions.

Decision precedence for the active hand (play()):
    1. pair         -> PAIRS table, key = paired card value
    2. soft 2-card  -> SOFT table,  key = non-ace card value
    3. hard >= 17   -> STAND, no table lookup
    4. otherwise    -> HARD table,  key = hand high total

Fallback when the chosen play is not offered by the dealer:
    DOUBLE -> HIT
    SPLIT  -> re-evaluate as a hard hand (stand on 17+, else HARD table,
              with DOUBLE -> HIT and anything else unavailable -> STAND)
    other  -> ActionNotAvailableError
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable

from .cards import Card
from .config import BettingConfig
from .errors import ActionNotAvailableError, IllegalTransitionError, StateError
from .hand import Hand, HandStatus
from .strategy import HARD, PAIRS, SOFT, Play, StrategyTable, lookup

logger = logging.getLogger(__name__)


# ─── Status ───────────────────────────────────────────────────────────────────

class PlayerStatus(Enum):
    DISABLED = auto()
    WAITING = auto()
    BIDING = auto()
    PLAYING = auto()


_ALLOWED_TRANSITIONS: dict[PlayerStatus, frozenset[PlayerStatus]] = {
    PlayerStatus.WAITING: frozenset(
        {PlayerStatus.WAITING, PlayerStatus.BIDING, PlayerStatus.PLAYING, PlayerStatus.DISABLED}
    ),
    PlayerStatus.BIDING: frozenset({PlayerStatus.WAITING}),
    PlayerStatus.PLAYING: frozenset({PlayerStatus.WAITING}),
    PlayerStatus.DISABLED: frozenset(),
}


# ─── Actions capability record ────────────────────────────────────────────────

Action = Callable[[], None]


@dataclass(frozen=True)
class Actions:
    """Legal actions at one decision point, built fresh by the dealer.

    stand and hit are always present; double and split are None when they
    are not legal for this hand right now.
    """

    stand: Action
    hit: Action
    double: Action | None = None
    split: Action | None = None

    def get(self, play: Play) -> Action | None:
        return {
            Play.STAND: self.stand,
            Play.HIT: self.hit,
            Play.DOUBLE: self.double,
            Play.SPLIT: self.split,
        }[play]


# ─── Player ───────────────────────────────────────────────────────────────────

class Player:
    def __init__(self, player_id: str, betting: BettingConfig | None = None) -> None:
        self.id = player_id
        self.betting = betting if betting is not None else BettingConfig()
        self.status = PlayerStatus.WAITING
        self.hands: list[Hand] = []
        self.current_hand_index = 0
        self.last_bid: float = self.betting.original_bid
        self.lost_balance: float = 0

    def __repr__(self) -> str:
        return f"Player({self.id!r}, {self.status.name}, hands={self.hands!r})"

    @property
    def original_bid(self) -> float:
        return self.betting.original_bid

    @property
    def bid_multiplier(self) -> float:
        return self.betting.bid_multiplier

    @property
    def bid_limit(self) -> float:
        return self.betting.bid_limit

    @property
    def current_hand(self) -> Hand | None:
        if self.current_hand_index < len(self.hands):
            return self.hands[self.current_hand_index]
        return None

    @property
    def has_second_hand(self) -> bool:
        """True while the player is on hand 0 and a split hand is still pending."""
        return self.current_hand_index == 0 and len(self.hands) == 2

    def set_status(self, status: PlayerStatus) -> None:
        if status not in _ALLOWED_TRANSITIONS[self.status]:
            raise IllegalTransitionError(
                f"Player {self.id!r} cannot move from {self.status.name} to {status.name}"
            )
        self.status = status

    # ── Betting ───────────────────────────────────────────────────────────────

    def bid(self, balance: float) -> float:
        """Return the next wager from the progressive ladder, capped at balance.

        Ladder, in precedence order:
            lost_balance < 0   -> last_bid * multiplier, unless that exceeds
                                  the bid limit, in which case last_bid
            lost_balance == 0  -> last_bid
            lost_balance > 0   -> original_bid

        The chosen amount becomes the new last_bid.
        """
        self.set_status(PlayerStatus.BIDING)

        if self.lost_balance < 0:
            next_bid = self.last_bid * self.bid_multiplier
            current_bid = next_bid if next_bid <= self.bid_limit else self.last_bid
        elif self.lost_balance == 0:
            current_bid = self.last_bid
        else:
            current_bid = self.original_bid

        if current_bid > balance:
            logger.debug("player %r goes all in with %s", self.id, balance)
            current_bid = balance

        self.last_bid = current_bid
        self.set_status(PlayerStatus.WAITING)
        return current_bid

    def record_loss(self, amount: float) -> None:
        self.lost_balance -= amount

    def record_push(self) -> None:
        if self.lost_balance > 0:
            self.lost_balance = 0

    def record_win(self, amount: float) -> None:
        self.lost_balance += amount

    # ── Hands ─────────────────────────────────────────────────────────────────

    def add_card(self, card: Card) -> None:
        if self.current_hand is None:
            self.hands.append(Hand())
        self.current_hand.add_card(card)

    def split(self) -> None:
        """Move the last card of the current hand into a new second hand."""
        hand = self.current_hand
        if hand is None or len(hand) == 0:
            raise StateError(f"Player {self.id!r} has no card to split")
        if len(self.hands) > 1:
            raise StateError(f"Player {self.id!r} has already split this round")
        second = Hand()
        second.add_card(hand.pop_card())
        self.hands.append(second)

    def select_second_hand(self) -> None:
        if not self.has_second_hand:
            raise StateError(f"Player {self.id!r} has no pending second hand")
        self.current_hand_index = 1
        self.hands[1].play()

    def clear(self) -> None:
        """Drop this round's hands. A disabled player stays disabled."""
        self.current_hand_index = 0
        self.hands = []
        if self.status is not PlayerStatus.DISABLED:
            self.set_status(PlayerStatus.WAITING)

    # ── Decisions ─────────────────────────────────────────────────────────────

    def play(self, up_card: int, actions: Actions) -> Play:
        """Choose and invoke one action for the current hand.

        Args:
            up_card: Absolute value of the dealer's up-card (2-11).
            actions: Legal actions offered by the dealer at this point.

        Returns:
            The play that was actually invoked (after any fallback).

        Raises:
            StrategyLookupError:     No table entry for the hand.
            ActionNotAvailableError: The chosen play is neither offered nor
                                     covered by the fallback.
        """
        hand = self.current_hand
        if hand is None:
            raise StateError(f"Player {self.id!r} has no hand to play")
        hand.play()

        table: StrategyTable
        if hand.has_pairs:
            table, hand_key = PAIRS, hand.pairs_of()
        elif hand.is_soft:
            table, hand_key = SOFT, hand.soft_of()
        else:
            hand_key = hand.score.high
            if hand_key >= 17:
                actions.stand()
                return Play.STAND
            table = HARD

        play = lookup(table, hand_key, up_card)
        action = actions.get(play)
        if action is not None:
            action()
            return play

        if play is Play.DOUBLE:
            actions.hit()
            return Play.HIT
        if play is Play.SPLIT:
            return self._play_as_hard(hand, up_card, actions)
        raise ActionNotAvailableError(f"{play.name} is not available to player {self.id!r}")

    def _play_as_hard(self, hand: Hand, up_card: int, actions: Actions) -> Play:
        hard_total = hand.score.high
        if hard_total >= 17:
            actions.stand()
            return Play.STAND

        play = lookup(HARD, hard_total, up_card)
        action = actions.get(play)
        if action is not None:
            action()
            return play
        if play is Play.DOUBLE:
            actions.hit()
            return Play.HIT
        actions.stand()
        return Play.STAND


def is_done(player: Player) -> bool:
    """A player's turn is over once none of its hands is still PLAYING."""
    return not any(hand.status is HandStatus.PLAYING for hand in player.hands)
