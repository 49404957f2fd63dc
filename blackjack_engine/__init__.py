"""Blackjack rules engine - pure functions over immutable cards and hands."""

from blackjack_engine.cards import (
    Card,
    Draw,
    Rank,
    Shoe,
    Suit,
    cards_used,
    create_shoe,
    draw_card,
    needs_reshuffle,
    shuffle_cards,
)
from blackjack_engine.config import DEFAULT_CONFIG, GameConfig
from blackjack_engine.eligibility import (
    Action,
    allowed_actions,
    can_double,
    can_split,
    can_surrender,
)
from blackjack_engine.hand import Hand, HandResult, calculate_hand_value
from blackjack_engine.outcome import (
    Outcome,
    adjudicate,
    calculate_payout,
    dealer_has_blackjack,
    dealer_should_hit,
    determine_outcome,
)

__all__ = [
    "Card",
    "Draw",
    "Rank",
    "Shoe",
    "Suit",
    "cards_used",
    "create_shoe",
    "draw_card",
    "needs_reshuffle",
    "shuffle_cards",
    "DEFAULT_CONFIG",
    "GameConfig",
    "Action",
    "allowed_actions",
    "can_double",
    "can_split",
    "can_surrender",
    "Hand",
    "HandResult",
    "calculate_hand_value",
    "Outcome",
    "adjudicate",
    "calculate_payout",
    "dealer_has_blackjack",
    "dealer_should_hit",
    "determine_outcome",
]
