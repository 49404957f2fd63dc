"""Round driver, table and event system."""

from blackjack_engine.game.events import EventEmitter, EventType, GameEvent
from blackjack_engine.game.state import RoundState
from blackjack_engine.game.engine import BlackjackRound, RoundSummary, Table

__all__ = [
    "EventEmitter",
    "EventType",
    "GameEvent",
    "RoundState",
    "BlackjackRound",
    "RoundSummary",
    "Table",
]
