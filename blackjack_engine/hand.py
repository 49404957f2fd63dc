"""Hand evaluation for blackjack."""

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Iterable, Iterator

from blackjack_engine.cards import Card

if TYPE_CHECKING:
    from blackjack_engine.outcome import Outcome


@dataclass(frozen=True)
class HandResult:
    """Derived valuation of a sequence of cards."""

    value: int
    is_soft: bool
    is_busted: bool
    is_blackjack: bool


def calculate_hand_value(cards: Iterable[Card]) -> HandResult:
    """
    Calculate the best value of a hand.

    Face-down cards are ignored. Aces start at 11 and are counted down to 1,
    one at a time, while the total is over 21. The result is soft while at
    least one ace still counts as 11. Blackjack means exactly two visible
    cards totalling 21; whether the hand came from a split is for the
    caller to decide.
    """
    visible = [card for card in cards if not card.face_down]

    total = 0
    aces = 0
    for card in visible:
        total += card.value
        if card.is_ace:
            aces += 1

    # Reduce aces from 11 to 1 as needed
    while total > 21 and aces > 0:
        total -= 10
        aces -= 1

    return HandResult(
        value=total,
        is_soft=aces > 0 and total <= 21,
        is_busted=total > 21,
        is_blackjack=len(visible) == 2 and total == 21,
    )


@dataclass(frozen=True)
class Hand:
    """
    Immutable snapshot of one participant's hand.

    Every change produces a new Hand. Once ``result`` is assigned the hand
    is terminal and further transformations raise ValueError.
    """

    cards: tuple[Card, ...] = ()
    bet: float = 0
    is_doubled: bool = False
    is_from_split: bool = False
    is_split_aces: bool = False
    result: "Outcome | None" = None

    def __post_init__(self) -> None:
        if not isinstance(self.cards, tuple):
            object.__setattr__(self, "cards", tuple(self.cards))

    def _check_open(self) -> None:
        if self.result is not None:
            raise ValueError(f"Hand is already resolved as {self.result}")

    def with_card(self, card: Card) -> "Hand":
        """Return a copy of this hand with ``card`` appended."""
        self._check_open()
        return replace(self, cards=self.cards + (card,))

    def doubled(self, card: Card) -> "Hand":
        """Return the doubled-down hand: twice the bet and one more card."""
        self._check_open()
        return replace(
            self,
            cards=self.cards + (card,),
            bet=self.bet * 2,
            is_doubled=True,
        )

    def split(self) -> tuple["Hand", "Hand"]:
        """
        Split a two-card hand into two one-card hands carrying the same bet.

        The caller deals the second card to each hand.
        """
        self._check_open()
        if len(self.cards) != 2:
            raise ValueError("Only a two-card hand can be split")
        is_aces = all(card.is_ace for card in self.cards)
        return tuple(
            Hand(
                cards=(card,),
                bet=self.bet,
                is_from_split=True,
                is_split_aces=is_aces,
            )
            for card in self.cards
        )

    def revealed(self) -> "Hand":
        """Return this hand with every card face up."""
        return replace(self, cards=tuple(card.revealed() for card in self.cards))

    def resolved(self, outcome: "Outcome") -> "Hand":
        """Return the terminal hand carrying ``outcome``."""
        self._check_open()
        return replace(self, result=outcome)

    def evaluate(self) -> HandResult:
        return calculate_hand_value(self.cards)

    @property
    def value(self) -> int:
        return self.evaluate().value

    @property
    def is_soft(self) -> bool:
        return self.evaluate().is_soft

    @property
    def is_busted(self) -> bool:
        return self.evaluate().is_busted

    @property
    def is_blackjack(self) -> bool:
        """Two visible cards totalling 21, regardless of split provenance."""
        return self.evaluate().is_blackjack

    @property
    def is_natural(self) -> bool:
        """A blackjack that pays as one: two cards, 21, not from a split."""
        return self.is_blackjack and not self.is_from_split

    @property
    def is_pair(self) -> bool:
        """Check if the hand is two cards of the same rank."""
        return len(self.cards) == 2 and self.cards[0].rank == self.cards[1].rank

    @property
    def is_resolved(self) -> bool:
        return self.result is not None

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __getitem__(self, index: int) -> Card:
        return self.cards[index]

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_natural:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"
