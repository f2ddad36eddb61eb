# trick_table/config.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .agents.heuristic_agents import DIFFICULTIES
from .dealing import check_deal_capacity
from .errors import ConfigurationError

SEAT_COUNT = 4
HAND_SIZE = 7
MAX_ROUNDS = 5
DECK_SIZE = 52

# Seconds an automated seat "thinks" before its card lands.
AI_PLAY_DELAY = 1.2

DEFAULT_SEAT_NAMES: Tuple[str, ...] = ("Player", "Alex", "Sam", "Jordan")
DEFAULT_RULE_SET_ID = "highest-card"
DEFAULT_DIFFICULTY = "easy"


@dataclass(frozen=True)
class GameConfig:
    """
    Startup configuration for a GameEngine.

    These values are fixed for the lifetime of an engine; they are not meant
    to be changed between games.
    """

    seat_count: int = SEAT_COUNT
    hand_size: int = HAND_SIZE
    max_rounds: int = MAX_ROUNDS
    ai_play_delay: float = AI_PLAY_DELAY
    human_turn_timeout: Optional[float] = None
    ai_difficulty: str = DEFAULT_DIFFICULTY
    default_seat_names: Tuple[str, ...] = DEFAULT_SEAT_NAMES

    def validate(self) -> None:
        """Raise ConfigurationError if this configuration cannot be played."""
        if self.seat_count < 2:
            raise ConfigurationError(
                f"At least 2 seats are required; got {self.seat_count}"
            )
        if self.hand_size < 1:
            raise ConfigurationError(
                f"hand_size must be positive; got {self.hand_size}"
            )
        if self.max_rounds < 1:
            raise ConfigurationError(
                f"max_rounds must be positive; got {self.max_rounds}"
            )
        check_deal_capacity(self.seat_count, self.hand_size, DECK_SIZE)
        if len(self.default_seat_names) != self.seat_count:
            raise ConfigurationError(
                "default_seat_names must have one entry per seat"
            )
        if self.ai_play_delay < 0:
            raise ConfigurationError("ai_play_delay must not be negative")
        if self.human_turn_timeout is not None and self.human_turn_timeout <= 0:
            raise ConfigurationError("human_turn_timeout must be positive")
        if self.ai_difficulty not in DIFFICULTIES:
            raise ConfigurationError(
                f"Unknown difficulty {self.ai_difficulty!r}; "
                f"expected one of: {', '.join(DIFFICULTIES)}"
            )

    @property
    def total_tricks(self) -> int:
        """Trick points awarded over a full game (one per trick)."""
        return self.max_rounds * self.hand_size
