# trick_table/driver.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from .agents.base import SeatAgent
from .cards import card_to_dict
from .rules import legal_moves
from .scheduler import Scheduler, TimerHandle
from .state import HUMAN_SEAT_INDEX, GameSnapshot, Phase

if TYPE_CHECKING:
    from .engine import GameEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Turn:
    """Identifies the exact turn a callback was scheduled for."""
    generation: int
    round: int
    trick_index: int
    plays_so_far: int
    seat_index: int
    timed_out: bool


def build_play_observation(snapshot: GameSnapshot, seat_index: int) -> Dict[str, Any]:
    """JSON-like view of the table from one seat's point of view."""
    seat = snapshot.seats[seat_index]
    hand = list(seat.hand)
    lead_suit = None
    if snapshot.lead_seat_id is not None:
        lead_suit = snapshot.played_cards[snapshot.lead_seat_id].suit.value

    return {
        "phase": "play",
        "game": {
            "round": snapshot.round,
            "max_rounds": snapshot.max_rounds,
            "trick_index": snapshot.trick_index,
            "num_seats": len(snapshot.seats),
            "rule_set_id": snapshot.rule_set_id,
        },
        "player": {
            "index": seat_index,
            "id": seat.id,
            "name": seat.name,
            "score": seat.score,
        },
        "hand": [card_to_dict(c) for c in hand],
        "hand_cards": hand,
        "legal_move_indices": legal_moves(hand),
        "current_trick": {
            "plays": [
                {"seat_id": seat_id, "card": card_to_dict(card)}
                for seat_id, card in snapshot.played_cards.items()
            ],
            "lead_seat_id": snapshot.lead_seat_id,
            "lead_suit": lead_suit,
        },
        "scores": {s.id: s.score for s in snapshot.seats},
    }


class AutoSeatDriver:
    """
    Plays for automated seats after a fixed delay.

    The driver keeps at most one pending timer. Each time the turn moves the
    engine asks it to reschedule, which cancels whatever was pending first.
    When a timer fires the turn is re-validated against the live engine, so
    a callback that survived a reset or a turn change does nothing.

    The human seat is only ever played for when a turn timeout is
    configured; it then gets the fallback agent's choice. The fallback agent
    also stands in for an agent that raises.
    """

    def __init__(
        self,
        engine: "GameEngine",
        scheduler: Scheduler,
        agents: Dict[int, SeatAgent],
        delay: float,
        fallback_agent: SeatAgent,
        human_turn_timeout: Optional[float] = None,
    ) -> None:
        self._engine = engine
        self._scheduler = scheduler
        self._agents = agents
        self._delay = delay
        self._fallback_agent = fallback_agent
        self._human_turn_timeout = human_turn_timeout
        self._handle: Optional[TimerHandle] = None
        self._pending_turn: Optional[_Turn] = None

    @property
    def pending_turn(self) -> Optional[_Turn]:
        return self._pending_turn

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            logger.debug("Cancelled pending move for seat %d", self._pending_turn.seat_index)
        self._handle = None
        self._pending_turn = None

    def schedule_turn(self) -> None:
        """Replace any pending move with one for whoever is to act now."""
        self.cancel()
        snapshot = self._engine.get_state()
        if snapshot.phase != Phase.PLAYING:
            return

        seat_index = snapshot.current_player
        if seat_index == HUMAN_SEAT_INDEX:
            if self._human_turn_timeout is None:
                return
            delay = self._human_turn_timeout
            timed_out = True
        else:
            delay = self._delay
            timed_out = False

        turn = _Turn(
            generation=self._engine.generation,
            round=snapshot.round,
            trick_index=snapshot.trick_index,
            plays_so_far=len(snapshot.played_cards),
            seat_index=seat_index,
            timed_out=timed_out,
        )
        self._pending_turn = turn
        self._handle = self._scheduler.call_later(delay, lambda: self._fire(turn))
        logger.debug(
            "Scheduled %s for seat %d in %.2fs",
            "timeout move" if timed_out else "move",
            seat_index,
            delay,
        )

    def _is_current(self, turn: _Turn, snapshot: GameSnapshot) -> bool:
        return (
            turn.generation == self._engine.generation
            and snapshot.phase == Phase.PLAYING
            and snapshot.round == turn.round
            and snapshot.trick_index == turn.trick_index
            and len(snapshot.played_cards) == turn.plays_so_far
            and snapshot.current_player == turn.seat_index
            and len(snapshot.seats[turn.seat_index].hand) > 0
        )

    def _fire(self, turn: _Turn) -> None:
        if self._pending_turn == turn:
            self._handle = None
            self._pending_turn = None

        snapshot = self._engine.get_state()
        if not self._is_current(turn, snapshot):
            logger.debug("Ignoring stale move for seat %d", turn.seat_index)
            return

        if turn.timed_out:
            agent = self._fallback_agent
        else:
            agent = self._agents[turn.seat_index]

        obs = build_play_observation(snapshot, turn.seat_index)
        legal_indices = obs["legal_move_indices"]
        try:
            move_index = agent.choose_card(obs)
        except Exception:
            logger.warning(
                "Agent for seat %d failed to choose a card; using fallback agent",
                turn.seat_index,
                exc_info=True,
            )
            move_index = self._fallback_agent.choose_card(obs)
        if move_index not in legal_indices:
            logger.warning(
                "Agent for seat %d chose illegal index %r; playing first legal card",
                turn.seat_index,
                move_index,
            )
            move_index = legal_indices[0]

        seat = snapshot.seats[turn.seat_index]
        card = seat.hand[move_index]
        if turn.timed_out:
            logger.info("Time's up for %s; auto-playing %s", seat.name, card)
        self._engine.play_card(seat.id, card.id, auto_played=True)
