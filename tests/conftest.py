"""Pytest fixtures for rules engine tests."""

from random import Random

import pytest
from hypothesis import strategies as st

from blackjack_engine.cards import Card, Rank, Suit
from blackjack_engine.config import GameConfig
from blackjack_engine.game import EventEmitter
from blackjack_engine.hand import Hand


def cards(*labels: str) -> tuple[Card, ...]:
    """Build cards from strings like 'AS', '10H', 'KD'."""
    return tuple(Card.from_string(label) for label in labels)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def make_cards():
    """Factory turning card strings into a tuple of cards."""
    return cards


@pytest.fixture
def stacked_shoe():
    """
    Factory for a shoe that deals the given cards in order.

    The first label is the first card drawn (the top of the shoe).
    """

    def _stack(*labels: str) -> tuple[Card, ...]:
        return tuple(reversed(cards(*labels)))

    return _stack


@pytest.fixture
def events():
    """A fresh event emitter."""
    return EventEmitter()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return Hand(cards=cards("AS", "KH"), bet=100)


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return Hand(cards=cards("AS", "6H"))


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return Hand(cards=cards("10S", "6H"))


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return Hand(cards=cards("8S", "8H"), bet=100)


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return Hand(cards=cards("10S", "6H", "KC"))


@pytest.fixture
def rules():
    """Default rules."""
    return GameConfig()


@pytest.fixture
def s17_rules():
    """Dealer stands on soft 17."""
    return GameConfig(dealer_hits_soft_17=False)


@pytest.fixture
def rsa_rules():
    """Re-splitting aces allowed."""
    return GameConfig(rsa_allowed=True)


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random face-up card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)


@st.composite
def hand_cards_strategy(draw, min_cards=0, max_cards=8):
    """Generate a random list of cards for a hand."""
    return draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards))
