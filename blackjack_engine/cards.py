"""Cards and shoe management - immutable card representations."""

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from random import Random
from typing import NamedTuple, Sequence

from blackjack_engine.config import DEFAULT_CONFIG, GameConfig


class Suit(Enum):
    """Card suits."""

    SPADES = auto()
    HEARTS = auto()
    DIAMONDS = auto()
    CLUBS = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.SPADES: "♠",
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks with blackjack values."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        if 2 <= self.value <= 10:
            return str(self.value)
        return {
            Rank.ACE: "A",
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the nominal point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        return min(self.value, 10)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        """Check if this rank belongs to the ten-value group (10, J, Q, K)."""
        return self.value >= 10


_RANK_LOOKUP = {
    "A": Rank.ACE,
    "2": Rank.TWO,
    "3": Rank.THREE,
    "4": Rank.FOUR,
    "5": Rank.FIVE,
    "6": Rank.SIX,
    "7": Rank.SEVEN,
    "8": Rank.EIGHT,
    "9": Rank.NINE,
    "10": Rank.TEN,
    "T": Rank.TEN,
    "J": Rank.JACK,
    "Q": Rank.QUEEN,
    "K": Rank.KING,
}

_SUIT_LOOKUP = {
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
}


@dataclass(frozen=True, slots=True)
class Card:
    """
    Immutable playing card.

    ``face_down`` marks the dealer's hole card. It is ignored by equality
    and hashing, and a face-down card is excluded from hand valuation.
    """

    rank: Rank
    suit: Suit
    face_down: bool = field(default=False, compare=False)

    def __str__(self) -> str:
        if self.face_down:
            return "??"
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        flag = ", face_down=True" if self.face_down else ""
        return f"Card({self.rank.name}, {self.suit.name}{flag})"

    @property
    def value(self) -> int:
        """Return the nominal blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        return self.rank.is_ten_value

    def revealed(self) -> "Card":
        """Return a face-up copy of this card."""
        return replace(self, face_down=False) if self.face_down else self

    def hidden(self) -> "Card":
        """Return a face-down copy of this card."""
        return self if self.face_down else replace(self, face_down=True)

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', '10h' or 'Td'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        if rank_str not in _RANK_LOOKUP:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in _SUIT_LOOKUP:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(_RANK_LOOKUP[rank_str], _SUIT_LOOKUP[suit_str])


# Undealt inventory; the top of the shoe is the last element.
Shoe = tuple[Card, ...]


class Draw(NamedTuple):
    """A card taken from the top of a shoe, plus what is left of it."""

    card: Card
    remaining_shoe: Shoe


def create_shoe(num_decks: int = 6, rng: Random | None = None) -> Shoe:
    """
    Build a shuffled shoe of ``num_decks`` standard 52-card decks.

    Args:
        num_decks: Number of decks in the shoe (typically 6 or 8)
        rng: Random number generator for reproducible shuffles

    Returns:
        A tuple of ``num_decks * 52`` cards in random order

    Raises:
        ValueError: If ``num_decks`` is less than 1
    """
    if num_decks < 1:
        raise ValueError("Shoe must have at least 1 deck")

    cards = [
        Card(rank, suit)
        for _ in range(num_decks)
        for suit in Suit
        for rank in Rank
    ]
    return shuffle_cards(cards, rng)


def shuffle_cards(cards: Sequence[Card], rng: Random | None = None) -> Shoe:
    """
    Return a uniformly random permutation of ``cards``.

    Fisher-Yates over a copy: walks from the last index down to 1 and swaps
    each position with a uniformly chosen index at or below it. The input
    sequence is left untouched.
    """
    rng = rng or Random()
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return tuple(shuffled)


def draw_card(shoe: Sequence[Card]) -> Draw | None:
    """
    Take the top card of the shoe.

    Returns:
        ``Draw(card, remaining_shoe)``, or None when the shoe is empty.
        The input is never modified.
    """
    if not shoe:
        return None
    return Draw(card=shoe[-1], remaining_shoe=tuple(shoe[:-1]))


def cards_used(shoe: Sequence[Card], config: GameConfig | None = None) -> int:
    """Number of cards dealt out of a full shoe of the configured size."""
    config = config or DEFAULT_CONFIG
    return config.total_cards - len(shoe)


def needs_reshuffle(shoe: Sequence[Card], config: GameConfig | None = None) -> bool:
    """
    Check if the cut card has been reached.

    True once the number of cards dealt is at least
    ``total_cards * penetration``. The caller is responsible for replacing
    the shoe.
    """
    config = config or DEFAULT_CONFIG
    return cards_used(shoe, config) >= config.cut_point
