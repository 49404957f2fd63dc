"""Dealer policy, outcome adjudication and payouts."""

from enum import Enum
from typing import Sequence

from blackjack_engine.cards import Card
from blackjack_engine.config import DEFAULT_CONFIG, GameConfig
from blackjack_engine.hand import Hand, calculate_hand_value


class Outcome(str, Enum):
    """Final result of a player hand. Assigned once, never revised."""

    WIN = "win"
    LOSE = "lose"
    PUSH = "push"
    BLACKJACK = "blackjack"
    SURRENDER = "surrender"

    def __str__(self) -> str:
        return self.value


# Total returned to the player per unit bet, stake included
_RETURN_MULTIPLIERS = {
    Outcome.WIN: 2,
    Outcome.PUSH: 1,
    Outcome.SURRENDER: 0.5,
    Outcome.LOSE: 0,
}


def dealer_should_hit(dealer_cards: Sequence[Card], config: GameConfig | None = None) -> bool:
    """
    Decide a single dealer draw.

    Hits below 17, and on soft 17 under H17 rules. Face-down cards are not
    counted, so reveal the hole card before playing the dealer out.
    """
    config = config or DEFAULT_CONFIG
    result = calculate_hand_value(dealer_cards)

    if result.value < 17:
        return True
    if result.value == 17 and result.is_soft and config.dealer_hits_soft_17:
        return True
    return False


def dealer_has_blackjack(dealer_cards: Sequence[Card]) -> bool:
    """Peek at the dealer's two cards for a natural without exposing the hole card."""
    if len(dealer_cards) != 2:
        return False
    return calculate_hand_value(card.revealed() for card in dealer_cards).is_blackjack


def determine_outcome(
    player_value: int,
    player_blackjack: bool,
    player_busted: bool,
    dealer_value: int,
    dealer_blackjack: bool,
    dealer_busted: bool,
) -> Outcome:
    """
    Compare a finished player hand with the dealer's.

    ``player_blackjack`` must already exclude 21s made from split hands.
    Never returns ``Outcome.SURRENDER``.
    """
    # Player busts always loses, even if the dealer busts too
    if player_busted:
        return Outcome.LOSE
    if dealer_busted:
        return Outcome.WIN

    if player_blackjack and dealer_blackjack:
        return Outcome.PUSH
    if player_blackjack:
        return Outcome.BLACKJACK
    if dealer_blackjack:
        return Outcome.LOSE

    if player_value > dealer_value:
        return Outcome.WIN
    if player_value < dealer_value:
        return Outcome.LOSE
    return Outcome.PUSH


def adjudicate(hand: Hand, dealer_cards: Sequence[Card]) -> Outcome:
    """
    Settle a player hand against the dealer, taking split provenance into account.

    A hand that already carries a result (bust, surrender) keeps it.
    """
    if hand.result is not None:
        return hand.result

    player = hand.evaluate()
    dealer = calculate_hand_value(card.revealed() for card in dealer_cards)
    return determine_outcome(
        player.value,
        player.is_blackjack and not hand.is_from_split,
        player.is_busted,
        dealer.value,
        dealer.is_blackjack,
        dealer.is_busted,
    )


def calculate_payout(
    bet: float,
    outcome: Outcome,
    config: GameConfig | None = None,
) -> float:
    """
    Return the total paid back to the player for a settled hand.

    The stake is included: a won bet of 100 returns 200, a natural returns
    250 at 3:2. No rounding is applied.
    """
    config = config or DEFAULT_CONFIG
    if outcome == Outcome.BLACKJACK:
        return bet * (1 + config.blackjack_payout)
    return bet * _RETURN_MULTIPLIERS[Outcome(outcome)]
