"""Player action eligibility under a configurable rule set."""

from enum import Enum, auto
from typing import Sequence

from blackjack_engine.cards import Card
from blackjack_engine.config import DEFAULT_CONFIG, GameConfig
from blackjack_engine.hand import Hand


class Action(Enum):
    """Player decisions."""

    HIT = auto()
    STAND = auto()
    DOUBLE = auto()
    SPLIT = auto()
    SURRENDER = auto()

    def __str__(self) -> str:
        return self.name.lower()


def can_split(
    hand: Sequence[Card],
    num_splits_done: int,
    is_aces: bool,
    config: GameConfig | None = None,
) -> bool:
    """
    Check if a hand may be split.

    The first split of aces is always allowed; ``rsa_allowed`` only gates
    re-splitting them. Mixed ten-value pairs (K-Q, 10-J, ...) are splittable.
    """
    config = config or DEFAULT_CONFIG

    if num_splits_done >= config.max_splits:
        return False
    if is_aces and not config.rsa_allowed and num_splits_done > 0:
        return False
    if len(hand) != 2:
        return False

    first, second = hand[0], hand[1]
    if first.rank == second.rank:
        return True
    return first.is_ten_value and second.is_ten_value


def can_double(
    hand: Sequence[Card],
    is_after_split: bool,
    config: GameConfig | None = None,
) -> bool:
    """Check if a hand may be doubled down (two cards, DAS permitting)."""
    config = config or DEFAULT_CONFIG
    if len(hand) != 2:
        return False
    return not is_after_split or config.das_allowed


def can_surrender(
    hand: Sequence[Card],
    is_first_action: bool,
    config: GameConfig | None = None,
) -> bool:
    """
    Check if late surrender is available.

    Split provenance is not considered here; see ``allowed_actions``.
    """
    config = config or DEFAULT_CONFIG
    return config.late_surrender_allowed and is_first_action and len(hand) == 2


def allowed_actions(
    hand: Hand,
    num_splits_done: int,
    is_first_action: bool,
    config: GameConfig | None = None,
) -> list[Action]:
    """
    List the legal decisions for a hand in play.

    Split aces take no further cards; they can only stand, or be re-split
    when the rules allow it. Surrender is never offered on a hand created
    by a split.
    """
    config = config or DEFAULT_CONFIG

    if hand.is_resolved or hand.is_busted:
        return []

    actions = [Action.STAND]
    if not hand.is_split_aces:
        actions.append(Action.HIT)
        if can_double(hand, hand.is_from_split, config):
            actions.append(Action.DOUBLE)
    if can_split(hand, num_splits_done, hand.is_split_aces, config):
        actions.append(Action.SPLIT)
    if not hand.is_from_split and can_surrender(hand, is_first_action, config):
        actions.append(Action.SURRENDER)
    return actions
