# trick_table/events.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List
import enum

from .state import Phase

logger = logging.getLogger(__name__)


class EventType(enum.Enum):
    GAME_STARTED = "game_started"
    ROUND_STARTED = "round_started"
    CARD_PLAYED = "card_played"
    TRICK_WON = "trick_won"
    GAME_OVER = "game_over"
    GAME_RESET = "game_reset"


@dataclass(frozen=True)
class GameEvent:
    type: EventType
    phase: Phase
    round: int
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "phase": self.phase.value,
            "round": self.round,
            "payload": dict(self.payload),
        }


EventHandler = Callable[[GameEvent], None]


class EventPublisher:
    """
    Minimal synchronous observer list.

    Handlers run in subscription order after the engine has finished
    mutating, so they always see a consistent state. A handler that raises
    is logged and skipped; it cannot undo or block the move that caused it.
    """

    def __init__(self) -> None:
        self._handlers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def publish(self, event: GameEvent) -> None:
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Event handler %r failed on %s", handler, event.type.value
                )
