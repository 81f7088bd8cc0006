"""
Round orchestration: bids, deal, player turns, dealer play and payout.

One call to Dealer.play_hand() runs a complete round, synchronously:

    BID      every non-disabled player bids from its balance; a bid below
             min_bet disables the player for the rest of the run
    DEAL     two passes of one card per active player, then one to the dealer
    TURNS    players in table order; each decision point gets a fresh
             Actions record (DOUBLE / SPLIT only when legal)
    DEALER   dealer 21 -> every pending hand loses
             else: pending blackjacks paid 3:2, dealer draws to 17 on its
             high total, then bust -> all pending win, or totals compared
    SETTLE   win = stake * 2, blackjack = stake * 2.5, push = stake back

The dealer hand ends WON on a two-card 21, LOSE on a bust and WAITING once it
stands.

Players are visited in a fixed order; that order decides draw order and so
when the shoe reshuffles.

The balances mapping is injected and shared with the caller. The Dealer
does no locking: never run two rounds concurrently on one instance.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterator, MutableMapping

from .cards import Card, hand_to_str
from .config import TableRules
from .deck import Deck
from .errors import InsufficientFundsError, InvalidBalanceError
from .hand import Hand, HandStatus, Reason
from .player import Actions, Player, PlayerStatus, is_done

logger = logging.getLogger(__name__)


# ─── Result types ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class HandOutcome:
    """Final state of one player hand after a round."""
    player_id: str
    hand_index: int
    cards: tuple[Card, ...]
    status: HandStatus
    reason: Reason | None
    wager: float


@dataclass
class RoundResult:
    """Summary of a single round, returned by Dealer.play_hand()."""
    dealer_cards: tuple[Card, ...] = ()
    dealer_score: int = 0
    outcomes: list[HandOutcome] = field(default_factory=list)
    disabled: list[str] = field(default_factory=list)

    @property
    def played(self) -> bool:
        return bool(self.outcomes)

    @property
    def dealer_busted(self) -> bool:
        return self.dealer_score > 21

    def __str__(self) -> str:
        if not self.played:
            return "No hands played"
        hands = " | ".join(
            f"{o.player_id}[{o.hand_index}]: {hand_to_str(o.cards)} "
            f"{o.status.name}{'/' + o.reason.name if o.reason else ''} ({o.wager:g})"
            for o in self.outcomes
        )
        return f"Dealer: {hand_to_str(self.dealer_cards)} ({self.dealer_score}) | {hands}"


# ─── Dealer ───────────────────────────────────────────────────────────────────

class Dealer:
    """Runs rounds for a list of players against one shoe.

    Args:
        deck:     Deck provider (see engine.deck.Deck).
        balances: Player id -> non-negative balance. Mutated in place by bids
                  and payouts.
        rules:    Table rules; defaults to TableRules().
    """

    def __init__(
        self,
        deck: Deck,
        balances: MutableMapping[str, float],
        rules: TableRules | None = None,
    ) -> None:
        self.deck = deck
        self.deck_starting_length = len(deck)
        self.balances = balances
        self.rules = rules if rules is not None else TableRules()
        self.players: list[Player] = []
        self.bids: dict[str, dict[int, float]] = {}
        self.hand = Hand()

    @property
    def min_bet(self) -> float:
        return self.rules.min_bet

    @property
    def max_bet(self) -> float:
        return self.rules.max_bet

    @property
    def shuffle_perc(self) -> float:
        return self.rules.shuffle_perc

    def add_player(self, player: Player) -> None:
        self.players.append(player)

    def new_hand(self) -> Hand:
        """Reset round state and return a fresh dealer hand."""
        self.reset()
        self.hand = Hand()
        return self.hand

    def reset(self) -> None:
        self.bids = {}
        for player in self.players:
            player.clear()

    # ── Cards ─────────────────────────────────────────────────────────────────

    def draw_card(self) -> Card:
        """Draw one card, reshuffling if the shoe fell below the shuffle threshold."""
        card = self.deck.draw()
        shuffle_limit = self.shuffle_perc * self.deck_starting_length / 100
        if len(self.deck) < shuffle_limit:
            logger.debug("reshuffling: %d cards left (limit %.1f)", len(self.deck), shuffle_limit)
            self.deck.reset()
        return card

    # ── Balances and bids ─────────────────────────────────────────────────────

    def get_balance(self, player: Player) -> float:
        """Return the player's balance.

        Raises:
            InvalidBalanceError: The balance is missing, not a number, NaN or negative.
        """
        try:
            balance = self.balances[player.id]
        except KeyError:
            raise InvalidBalanceError(f'no balance for player "{player.id}"') from None
        if not isinstance(balance, (int, float)) or math.isnan(balance) or balance < 0:
            raise InvalidBalanceError(f'balance for player "{player.id}" is not a valid number')
        return balance

    def set_balance(self, player: Player, amount: float) -> None:
        self.balances[player.id] = amount

    def bid(self, player: Player, amount: float, hand_index: int | None = None) -> None:
        """Escrow amount from the player's balance onto one hand's wager.

        Args:
            player:     The wagering player.
            amount:     Amount to move from balance to the wager.
            hand_index: Hand to wager on; defaults to the player's current hand.

        Raises:
            InsufficientFundsError: The balance is smaller than amount.
        """
        index = player.current_hand_index if hand_index is None else hand_index
        if self.get_balance(player) < amount:
            raise InsufficientFundsError(
                f'player "{player.id}" cannot bid {amount} with balance {self.balances[player.id]}'
            )
        self.balances[player.id] -= amount
        player_bids = self.bids.setdefault(player.id, {})
        player_bids[index] = player_bids.get(index, 0) + amount

    def get_bid_amount(self, player: Player, hand_index: int = 0) -> float:
        return self.bids.get(player.id, {}).get(hand_index, 0)

    def can_double(self, player: Player) -> bool:
        bid = self.get_bid_amount(player, player.current_hand_index)
        return self.get_balance(player) >= bid

    def bid_double(self, player: Player) -> None:
        self.bid(player, self.get_bid_amount(player, player.current_hand_index))

    def can_split(self, player: Player, hand: Hand) -> bool:
        return (
            len(hand) == 2
            and hand.has_pairs
            and len(player.hands) == 1
            and self.get_balance(player) >= self.get_bid_amount(player, 0)
        )

    def _double_allowed(self, player: Player, hand: Hand) -> bool:
        rules = self.rules
        if len(hand) != 2 or not self.can_double(player):
            return False
        if rules.double_soft_only and not hand.is_soft:
            return False
        return rules.double_min_total <= hand.score.high <= rules.double_max_total

    # ── Settlement ────────────────────────────────────────────────────────────

    def player_hand_lose(self, player: Player, hand_index: int, reason: Reason) -> None:
        hand = player.hands[hand_index]
        amount_lost = self.get_bid_amount(player, hand_index)
        hand.lose(reason)
        player.record_loss(amount_lost)

    def player_hand_draw(self, player: Player, hand_index: int, reason: Reason | None = None) -> None:
        hand = player.hands[hand_index]
        self.balances[player.id] += self.get_bid_amount(player, hand_index)
        hand.push(reason)
        player.record_push()

    def player_hand_won(self, player: Player, hand_index: int, reason: Reason) -> None:
        hand = player.hands[hand_index]
        bid_amount = self.get_bid_amount(player, hand_index)
        multiple = self.rules.blackjack_payout if reason is Reason.BLACKJACK else 1
        amount_won = bid_amount + bid_amount * multiple
        self.balances[player.id] += amount_won
        hand.won(reason)
        player.record_win(amount_won)

    def get_waiting_players(self) -> list[Player]:
        return [player for player in self.players if player.status is PlayerStatus.WAITING]

    # ── Round ─────────────────────────────────────────────────────────────────

    def play_hand(self) -> RoundResult:
        """Play one full round for every non-disabled player.

        Returns:
            RoundResult describing the dealer hand and every player hand.

        Raises:
            BlackjackError: Any engine error aborts the round and propagates.
        """
        dealer_hand = self.new_hand()
        result = RoundResult()

        players = self._collect_bids(result)
        if not players:
            logger.info("no players available")
            return result

        for _ in range(2):
            for player in players:
                player.add_card(self.draw_card())
            dealer_hand.add_card(self.draw_card())

        up_card = dealer_hand.cards[0].absolute_value()
        for player in players:
            self._play_turn(player, up_card)

        self._play_dealer(dealer_hand)

        result.dealer_cards = tuple(dealer_hand.cards)
        result.dealer_score = dealer_hand.score.high
        result.outcomes = [
            HandOutcome(
                player_id=player.id,
                hand_index=index,
                cards=tuple(hand.cards),
                status=hand.status,
                reason=hand.reason,
                wager=self.get_bid_amount(player, index),
            )
            for player in players
            for index, hand in enumerate(player.hands)
        ]
        return result

    def _collect_bids(self, result: RoundResult) -> list[Player]:
        active: list[Player] = []
        for player in self.players:
            if player.status is PlayerStatus.DISABLED:
                continue
            amount = player.bid(self.get_balance(player))
            if amount < self.min_bet:
                logger.info('player "%s" is out', player.id)
                player.set_status(PlayerStatus.DISABLED)
                result.disabled.append(player.id)
                continue
            if amount > self.max_bet:
                logger.debug('capping bid of player "%s" from %s to %s', player.id, amount, self.max_bet)
                amount = self.max_bet
            self.bid(player, amount)
            active.append(player)
        return active

    def _play_turn(self, player: Player, up_card: int) -> None:
        player.set_status(PlayerStatus.PLAYING)

        if player.current_hand.is_blackjack:
            player.set_status(PlayerStatus.WAITING)
            return

        while player.status is PlayerStatus.PLAYING:
            hand = player.current_hand
            player.play(up_card, self._build_actions(player, hand))

            if hand.score.high > 21:
                hand.lose(Reason.BUST)
                if player.has_second_hand:
                    self._select_second_hand(player)

            if is_done(player):
                loss_amount = sum(
                    self.get_bid_amount(player, index)
                    for index, h in enumerate(player.hands)
                    if h.status is HandStatus.LOSE
                )
                if loss_amount > 0:
                    player.record_loss(loss_amount)
                player.set_status(PlayerStatus.WAITING)

    def _build_actions(self, player: Player, hand: Hand) -> Actions:
        def stand() -> None:
            hand.wait()
            if player.has_second_hand:
                self._select_second_hand(player)

        def hit() -> None:
            hand.add_card(self.draw_card())

        def split() -> None:
            self.bid(player, self.get_bid_amount(player, 0), hand_index=1)
            player.split()
            hand.add_card(self.draw_card())

        def double() -> None:
            self.bid_double(player)
            hand.add_card(self.draw_card())
            hand.wait()
            if player.has_second_hand:
                self._select_second_hand(player)

        return Actions(
            stand=stand,
            hit=hit,
            double=double if self._double_allowed(player, hand) else None,
            split=split if self.can_split(player, hand) else None,
        )

    def _select_second_hand(self, player: Player) -> None:
        player.select_second_hand()
        hand = player.current_hand
        if len(hand) < 2:
            hand.add_card(self.draw_card())

    def _pending_hands(self, players: list[Player]) -> Iterator[tuple[Player, int, Hand]]:
        for player in players:
            for index, hand in enumerate(player.hands):
                if hand.status is HandStatus.WAITING:
                    yield player, index, hand

    def _play_dealer(self, dealer_hand: Hand) -> None:
        dealer_hand.play()
        dealer_score = dealer_hand.score.high
        waiting = self.get_waiting_players()

        # Dealer 21 beats every pending hand, player blackjacks included.
        if dealer_score == 21:
            dealer_hand.won(Reason.BLACKJACK)
            for player, index, _ in self._pending_hands(waiting):
                self.player_hand_lose(player, index, Reason.DEALER_WON)
            return

        for player, index, hand in self._pending_hands(waiting):
            if hand.is_blackjack:
                self.player_hand_won(player, index, Reason.BLACKJACK)

        while dealer_score < 17:
            dealer_hand.add_card(self.draw_card())
            dealer_score = dealer_hand.score.high

        if dealer_score > 21:
            dealer_hand.lose(Reason.BUST)
            for player, index, _ in self._pending_hands(waiting):
                self.player_hand_won(player, index, Reason.DEALER_BUST)
            return

        dealer_hand.wait()
        for player, index, hand in self._pending_hands(waiting):
            player_score = hand.score.high
            if dealer_score > player_score:
                self.player_hand_lose(player, index, Reason.DEALER_WON)
            elif dealer_score < player_score:
                self.player_hand_won(player, index, Reason.DEALER_LOST)
            else:
                self.player_hand_draw(player, index)
