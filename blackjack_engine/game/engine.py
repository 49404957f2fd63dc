"""Round driver built on the pure rules engine, using a state machine."""

import logging
from dataclasses import dataclass
from random import Random
from typing import Callable, Sequence

from transitions import Machine

from blackjack_engine.cards import Card, Shoe, create_shoe, draw_card, needs_reshuffle
from blackjack_engine.config import DEFAULT_CONFIG, GameConfig
from blackjack_engine.eligibility import Action, allowed_actions, can_split
from blackjack_engine.game.events import EventEmitter, EventType, GameEvent
from blackjack_engine.game.state import RoundState
from blackjack_engine.hand import Hand
from blackjack_engine.outcome import (
    Outcome,
    adjudicate,
    calculate_payout,
    dealer_has_blackjack,
    dealer_should_hit,
)

logger = logging.getLogger(__name__)

# Two cards each for player and dealer
MIN_CARDS_TO_DEAL = 4


@dataclass(frozen=True)
class RoundSummary:
    """What a finished round hands back to the table."""

    winnings: float
    cards_used: int
    remaining_shoe: Shoe
    outcomes: tuple[Outcome, ...]


class BlackjackRound:
    """
    A single round of blackjack for one player seat.

    Cards, hands and the shoe are immutable snapshots; the round only swaps
    its references to them as play proceeds. Progress is reported through
    events and return values.
    """

    STATES = [s.name.lower() for s in RoundState]

    TRANSITIONS = [
        {"trigger": "deal_cards", "source": "dealing", "dest": "player_turn"},
        {"trigger": "settle_naturals", "source": "dealing", "dest": "complete"},
        {"trigger": "player_action", "source": "player_turn", "dest": "player_turn"},
        {"trigger": "player_done", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "dealer_done", "source": "dealer_turn", "dest": "complete"},
    ]

    def __init__(
        self,
        shoe: Sequence[Card],
        bet: float,
        config: GameConfig | None = None,
        events: EventEmitter | None = None,
    ) -> None:
        """
        Prepare a round; call ``start`` to deal.

        Args:
            shoe: Undealt cards, top of the shoe last
            bet: Initial wager on the player's hand
            config: Table rules (defaults apply if not provided)
            events: Emitter to report to, shared with the table if given
        """
        if len(shoe) < MIN_CARDS_TO_DEAL:
            raise ValueError(f"Need at least {MIN_CARDS_TO_DEAL} cards to deal a round")

        self.config = config or DEFAULT_CONFIG
        self.bet = bet
        self.shoe: Shoe = tuple(shoe)
        self.events = events or EventEmitter()

        self.hands: tuple[Hand, ...] = ()
        self.dealer_hand = Hand()
        self.active_index = 0
        self.is_first_action = True

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="dealing",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to round events."""
        self.events.subscribe(handler, event_type)

    @property
    def active_hand(self) -> Hand | None:
        """The hand awaiting a decision, if the player is to act."""
        if self.state != RoundState.PLAYER_TURN:
            return None
        return self.hands[self.active_index]

    @property
    def num_splits_done(self) -> int:
        return max(len(self.hands) - 1, 0)

    @property
    def available_actions(self) -> list[Action]:
        """Legal decisions for the active hand."""
        hand = self.active_hand
        if hand is None:
            return []
        return allowed_actions(hand, self.num_splits_done, self.is_first_action, self.config)

    def start(self) -> bool:
        """
        Deal the opening cards and settle naturals.

        Order: player, dealer, player, dealer hole card (face down).
        """
        if self.state != RoundState.DEALING:
            return self._reject("Round already dealt")

        player_first = self._draw_to("player")
        dealer_up = self._draw_to("dealer")
        player_second = self._draw_to("player")
        hole_card = self._draw_to("dealer", face_up=False)

        self.hands = (Hand(cards=(player_first, player_second), bet=self.bet),)
        self.dealer_hand = Hand(cards=(dealer_up, hole_card.hidden()))
        self.events.emit_new(EventType.ROUND_STARTED, bet=self.bet)

        player = self.hands[0]
        if dealer_has_blackjack(self.dealer_hand):
            self._reveal_dealer()
            self.events.emit_new(EventType.DEALER_BLACKJACK)
            self._resolve(0, Outcome.PUSH if player.is_natural else Outcome.LOSE)
            self.settle_naturals()
            self._finish()
        elif player.is_natural:
            self.events.emit_new(EventType.PLAYER_BLACKJACK)
            self._reveal_dealer()
            self._resolve(0, Outcome.BLACKJACK)
            self.settle_naturals()
            self._finish()
        else:
            self.deal_cards()
        return True

    def hit(self) -> bool:
        """Player takes another card."""
        if not self._check_action(Action.HIT):
            return False

        card = self._draw_to("player")
        if card is None:
            return self._reject("Shoe is empty")

        self.is_first_action = False
        hand = self.hands[self.active_index].with_card(card)
        self._replace_hand(self.active_index, hand)
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=hand.value)

        if hand.is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_index=self.active_index)
            self._resolve(self.active_index, Outcome.LOSE)
            self._advance()
        else:
            self.player_action()
        return True

    def stand(self) -> bool:
        """Player keeps the current hand."""
        if not self._check_action(Action.STAND):
            return False

        self.is_first_action = False
        self.events.emit_new(
            EventType.PLAYER_STAND,
            hand_value=self.hands[self.active_index].value,
        )
        self._advance()
        return True

    def double_down(self) -> bool:
        """Player doubles the bet and takes exactly one more card."""
        if not self._check_action(Action.DOUBLE):
            return False

        card = self._draw_to("player")
        if card is None:
            return self._reject("Shoe is empty")

        self.is_first_action = False
        hand = self.hands[self.active_index].doubled(card)
        self._replace_hand(self.active_index, hand)
        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            hand_value=hand.value,
            new_bet=hand.bet,
        )

        if hand.is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_index=self.active_index)
            self._resolve(self.active_index, Outcome.LOSE)
        self._advance()
        return True

    def split(self) -> bool:
        """Player splits a pair into two hands, each dealt one more card."""
        if not self._check_action(Action.SPLIT):
            return False
        if len(self.shoe) < 2:
            return self._reject("Not enough cards to split")

        self.is_first_action = False
        first, second = self.hands[self.active_index].split()
        first = first.with_card(self._draw_to("player"))
        second = second.with_card(self._draw_to("player"))

        index = self.active_index
        self.hands = self.hands[:index] + (first, second) + self.hands[index + 1:]
        self.events.emit_new(
            EventType.PLAYER_SPLIT,
            hand1_value=first.value,
            hand2_value=second.value,
            num_hands=len(self.hands),
        )

        # Split aces get one card each; play moves on unless they can re-split
        self._advance(start=index)
        return True

    def surrender(self) -> bool:
        """Player gives up half the bet."""
        if not self._check_action(Action.SURRENDER):
            return False

        self.is_first_action = False
        self.events.emit_new(EventType.PLAYER_SURRENDER, hand_index=self.active_index)
        self._resolve(self.active_index, Outcome.SURRENDER)
        self._advance()
        return True

    def summary(self) -> RoundSummary:
        """Winnings and card usage of a completed round."""
        if self.state != RoundState.COMPLETE:
            raise ValueError(f"Round is not complete (state: {self.state})")

        return RoundSummary(
            winnings=sum(
                calculate_payout(hand.bet, hand.result, self.config) for hand in self.hands
            ),
            cards_used=sum(len(hand) for hand in self.hands) + len(self.dealer_hand),
            remaining_shoe=self.shoe,
            outcomes=tuple(hand.result for hand in self.hands),
        )

    def _draw_to(self, recipient: str, face_up: bool = True) -> Card | None:
        """Take the top card off the shoe and report it."""
        drawn = draw_card(self.shoe)
        if drawn is None:
            return None

        self.shoe = drawn.remaining_shoe
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(drawn.card) if face_up else "??",
            hand=recipient,
        )
        logger.debug("Dealt %s to %s, %d cards left", drawn.card, recipient, len(self.shoe))
        return drawn.card

    def _check_action(self, action: Action) -> bool:
        if self.state != RoundState.PLAYER_TURN:
            return self._reject(f"Cannot {action} in current state", state=self.state.name)
        if action not in self.available_actions:
            return self._reject(f"Cannot {action}", hand_index=self.active_index)
        return True

    def _reject(self, message: str, **data) -> bool:
        self.events.emit_new(EventType.INVALID_ACTION, message=message, **data)
        return False

    def _replace_hand(self, index: int, hand: Hand) -> None:
        self.hands = self.hands[:index] + (hand,) + self.hands[index + 1:]

    def _resolve(self, index: int, outcome: Outcome) -> None:
        self._replace_hand(index, self.hands[index].resolved(outcome))
        self.events.emit_new(EventType.HAND_RESOLVED, hand_index=index, outcome=str(outcome))

    def _needs_decision(self, hand: Hand) -> bool:
        if hand.is_resolved:
            return False
        if hand.is_split_aces:
            return can_split(hand, self.num_splits_done, True, self.config)
        return True

    def _advance(self, start: int | None = None) -> None:
        """Move to the next hand that needs a decision, or to the dealer."""
        index = self.active_index + 1 if start is None else start
        while index < len(self.hands) and not self._needs_decision(self.hands[index]):
            index += 1

        if index < len(self.hands):
            self.active_index = index
            self.is_first_action = True
            self.player_action()
            return

        self.player_done()
        self._play_dealer()

    def _reveal_dealer(self) -> None:
        self.dealer_hand = self.dealer_hand.revealed()
        self.events.emit_new(
            EventType.DEALER_REVEALS,
            card=str(self.dealer_hand[1]),
            hand_value=self.dealer_hand.value,
        )

    def _play_dealer(self) -> None:
        """Reveal the hole card, draw to the dealer's rules and settle every hand."""
        self._reveal_dealer()

        while dealer_should_hit(self.dealer_hand, self.config):
            card = self._draw_to("dealer")
            if card is None:
                logger.warning("Shoe ran out during the dealer's turn")
                break
            self.dealer_hand = self.dealer_hand.with_card(card)
            self.events.emit_new(EventType.DEALER_HITS, hand_value=self.dealer_hand.value)

        if self.dealer_hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.value)

        for index, hand in enumerate(self.hands):
            if not hand.is_resolved:
                self._resolve(index, adjudicate(hand, self.dealer_hand))

        self.dealer_done()
        self._finish()

    def _finish(self) -> None:
        summary = self.summary()
        self.events.emit_new(
            EventType.ROUND_ENDED,
            winnings=summary.winnings,
            cards_used=summary.cards_used,
            outcomes=[str(outcome) for outcome in summary.outcomes],
        )
        logger.info(
            "Round complete: %s, winnings %s",
            ", ".join(str(outcome) for outcome in summary.outcomes),
            summary.winnings,
        )


class Table:
    """
    Owns the shoe across rounds and reshuffles at the cut card.

    Rounds borrow the current shoe; ``finish_round`` takes back what is left.
    Only one round can be open at a time, so no two rounds deal from the
    same cards.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: Random | None = None,
        events: EventEmitter | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self._rng = rng or Random()
        self.events = events or EventEmitter()
        self.shoe: Shoe = create_shoe(self.config.num_decks, self._rng)
        self.discard_count = 0
        self.rounds_played = 0
        self.open_round: BlackjackRound | None = None

    @property
    def needs_reshuffle(self) -> bool:
        return (
            needs_reshuffle(self.shoe, self.config)
            or len(self.shoe) < MIN_CARDS_TO_DEAL
        )

    def shuffle(self) -> None:
        """Replace the shoe with a freshly shuffled one and empty the discard tray."""
        if self.open_round is not None:
            raise ValueError("Cannot shuffle while a round is in progress")

        self.shoe = create_shoe(self.config.num_decks, self._rng)
        self.discard_count = 0
        self.events.emit_new(EventType.SHOE_SHUFFLED, cards=len(self.shoe))
        logger.debug("Shoe reshuffled: %d cards", len(self.shoe))

    def new_round(self, bet: float) -> BlackjackRound:
        """Start and deal a round, reshuffling first if the cut card was reached."""
        if self.open_round is not None:
            raise ValueError("Finish the current round before starting another")

        if self.needs_reshuffle:
            self.shuffle()

        round_ = BlackjackRound(self.shoe, bet, config=self.config, events=self.events)
        self.open_round = round_
        round_.start()
        return round_

    def finish_round(self, round_: BlackjackRound) -> RoundSummary:
        """Take back the round's remaining shoe and move its cards to the discard tray."""
        if round_ is not self.open_round:
            raise ValueError("Round was not dealt at this table or is already finished")

        summary = round_.summary()
        self.shoe = summary.remaining_shoe
        self.discard_count += summary.cards_used
        self.rounds_played += 1
        self.open_round = None
        return summary
