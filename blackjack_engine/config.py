"""Table rule configuration with environment variable support."""

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() == "true"


@dataclass(frozen=True)
class GameConfig:
    """
    Blackjack table rules configuration.

    Consulted by every eligibility and dealer policy decision. Defaults
    describe a 6-deck H17 game with DAS, no RSA, late surrender, up to 3
    splits and a 3:2 natural.
    """

    # Shoe
    num_decks: int = 6
    penetration: float = 0.75  # Fraction dealt before a reshuffle is due

    # Dealer rules
    dealer_hits_soft_17: bool = True  # H17 vs S17

    # Player options
    das_allowed: bool = True  # Double after split
    rsa_allowed: bool = False  # Re-split aces
    late_surrender_allowed: bool = True
    max_splits: int = 3

    # Net payout on a natural (3:2 = 1.5, 6:5 = 1.2)
    blackjack_payout: float = 1.5

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.num_decks < 1:
            raise ValueError("num_decks must be at least 1")
        if not 0.0 < self.penetration <= 1.0:
            raise ValueError("penetration must be between 0 and 1")
        if self.max_splits < 0:
            raise ValueError("max_splits cannot be negative")
        if self.blackjack_payout < 1.0:
            raise ValueError("blackjack_payout must be at least 1.0")

    @property
    def total_cards(self) -> int:
        """Return the number of cards in a full shoe."""
        return self.num_decks * 52

    @property
    def cut_point(self) -> float:
        """Return how many cards must be dealt before a reshuffle."""
        return self.total_cards * self.penetration

    @classmethod
    def from_env(cls, prefix: str = "BLACKJACK_") -> "GameConfig":
        """
        Build a configuration from environment variables.

        Variables are named after the fields (``BLACKJACK_NUM_DECKS``,
        ``BLACKJACK_DEALER_HITS_SOFT_17``, ...). Unset variables keep the
        defaults; booleans are true only for the string "true".
        """
        defaults = cls()
        return cls(
            num_decks=int(os.getenv(f"{prefix}NUM_DECKS", str(defaults.num_decks))),
            penetration=float(os.getenv(f"{prefix}PENETRATION", str(defaults.penetration))),
            dealer_hits_soft_17=_env_bool(
                f"{prefix}DEALER_HITS_SOFT_17", defaults.dealer_hits_soft_17
            ),
            das_allowed=_env_bool(f"{prefix}DAS_ALLOWED", defaults.das_allowed),
            rsa_allowed=_env_bool(f"{prefix}RSA_ALLOWED", defaults.rsa_allowed),
            late_surrender_allowed=_env_bool(
                f"{prefix}LATE_SURRENDER_ALLOWED", defaults.late_surrender_allowed
            ),
            max_splits=int(os.getenv(f"{prefix}MAX_SPLITS", str(defaults.max_splits))),
            blackjack_payout=float(
                os.getenv(f"{prefix}BLACKJACK_PAYOUT", str(defaults.blackjack_payout))
            ),
        )

    @classmethod
    def vegas_strip(cls) -> "GameConfig":
        """Standard Vegas Strip rules."""
        return cls(
            num_decks=6,
            dealer_hits_soft_17=False,
            das_allowed=True,
            rsa_allowed=False,
            late_surrender_allowed=True,
        )

    @classmethod
    def downtown_vegas(cls) -> "GameConfig":
        """Downtown Las Vegas rules (typically H17)."""
        return cls(
            num_decks=6,
            dealer_hits_soft_17=True,
            das_allowed=True,
            rsa_allowed=False,
            late_surrender_allowed=True,
        )

    @classmethod
    def single_deck(cls) -> "GameConfig":
        """Single deck rules."""
        return cls(
            num_decks=1,
            penetration=0.5,
            dealer_hits_soft_17=True,
            das_allowed=False,
            rsa_allowed=False,
            late_surrender_allowed=False,
        )

    @classmethod
    def atlantic_city(cls) -> "GameConfig":
        """Atlantic City rules."""
        return cls(
            num_decks=8,
            dealer_hits_soft_17=False,
            das_allowed=True,
            rsa_allowed=False,
            late_surrender_allowed=True,
        )


# Used whenever a caller does not supply its own rules
DEFAULT_CONFIG = GameConfig()
