"""Round state enumeration."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round state machine states.

    Flow: DEALING → PLAYER_TURN → DEALER_TURN → COMPLETE
    (DEALING → COMPLETE when a natural settles the round at once)
    """

    DEALING = auto()
    PLAYER_TURN = auto()
    DEALER_TURN = auto()
    COMPLETE = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

