# trick_table/verbose_logger.py
from __future__ import annotations

from pathlib import Path
from threading import Lock
from typing import List, Optional

from .events import EventType, GameEvent


class VerboseGameLogger:
    """
    Accumulates a turn-by-turn text log of engine events.

    Subscribe `log_event` to one or more engines; nothing touches the disk
    until flush(). Safe to share between games running in worker threads.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._entries: List[str] = []
        self._lock = Lock()

    def log_event(self, event: GameEvent, game_id: Optional[str] = None) -> None:
        header_parts = [f"Event: {event.type.value}"]
        if game_id is not None:
            header_parts.append(f"Game: {game_id}")
        header_parts.append(f"Round: {event.round}")
        header_parts.append(f"Phase: {event.phase.value}")
        header = " | ".join(header_parts)

        payload = event.payload
        lines = [f"=== {header} ==="]
        if event.type == EventType.CARD_PLAYED:
            line = f"{payload['seat_id']} played {payload['card_id']}"
            if payload.get("auto_played"):
                line += " (auto)"
            lines.append(line)
        elif event.type == EventType.TRICK_WON:
            plays = ", ".join(f"{seat}:{card}" for seat, card in payload["plays"])
            lines.extend(
                [
                    f"Trick {payload['trick_index'] + 1}: {plays}",
                    f"Winner: {payload['winner_id']}",
                    f"Scores: {payload['scores']}",
                ]
            )
        elif event.type == EventType.GAME_OVER:
            lines.extend(
                [
                    f"Winner(s): {', '.join(payload['winners'])}",
                    f"Final scores: {payload['scores']}",
                ]
            )
        elif payload:
            lines.append(repr(payload))

        entry = "\n".join(lines).strip()
        with self._lock:
            self._entries.append(entry)

    def flush(self) -> None:
        with self._lock:
            if not self._entries:
                return
            to_write = "\n\n".join(self._entries)
            self._entries.clear()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(to_write, encoding="utf-8")
