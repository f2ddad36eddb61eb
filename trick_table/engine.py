# trick_table/engine.py
from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List, Optional, Sequence

from .agents import RandomSeatAgent, SeatAgent, make_agent
from .cards import build_shuffled_deck
from .config import DEFAULT_RULE_SET_ID, GameConfig
from .dealing import deal
from .driver import AutoSeatDriver
from .errors import ConfigurationError, IllegalMoveError
from .events import EventHandler, EventPublisher, EventType, GameEvent
from .rules import RuleSet, get_rule_set, lead_suit
from .scheduler import AsyncioScheduler, Scheduler
from .scoring import award_trick, final_winners
from .state import (
    HUMAN_SEAT_INDEX,
    GameSnapshot,
    GameState,
    Phase,
    Seat,
    TrickResult,
    WinnerEntry,
    seat_id_for,
)

logger = logging.getLogger(__name__)


class GameEngine:
    """
    Authoritative state machine for one table: one human seat, the rest
    played by agents.

    Every public operation either completes fully or raises before touching
    the state. Presentation code reads immutable snapshots via get_state()
    and may subscribe to events; it never mutates the engine directly.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        scheduler: Optional[Scheduler] = None,
        agents: Optional[Dict[int, SeatAgent]] = None,
        rng_seed: Optional[int] = None,
        game_label: Optional[str] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.config.validate()

        self.rng = random.Random(rng_seed)
        self.game_label = game_label
        self.scheduler: Scheduler = scheduler or AsyncioScheduler()

        if agents is None:
            agents = {
                i: make_agent(
                    self.config.ai_difficulty,
                    seed=None if rng_seed is None else rng_seed + i,
                )
                for i in range(1, self.config.seat_count)
            }
        missing = [
            i for i in range(self.config.seat_count)
            if i != HUMAN_SEAT_INDEX and i not in agents
        ]
        if missing:
            raise ConfigurationError(f"No agent configured for seats {missing}")

        self._events = EventPublisher()
        self._pending_events: List[GameEvent] = []
        self._generation = 0
        self._rule_set: Optional[RuleSet] = None
        self._state = self._initial_state()
        self._driver = AutoSeatDriver(
            self,
            scheduler=self.scheduler,
            agents=agents,
            delay=self.config.ai_play_delay,
            fallback_agent=RandomSeatAgent(rng=random.Random(self.rng.random())),
            human_turn_timeout=self.config.human_turn_timeout,
        )

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    @property
    def generation(self) -> int:
        """Bumped on every start and reset; stale timers compare against it."""
        return self._generation

    @property
    def rule_set(self) -> Optional[RuleSet]:
        return self._rule_set

    @property
    def driver(self) -> AutoSeatDriver:
        return self._driver

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Register an event handler; returns a function that unsubscribes it."""
        return self._events.subscribe(handler)

    def get_state(self) -> GameSnapshot:
        return self._state.snapshot()

    def start_game(
        self,
        seat_names: Optional[Sequence[str]] = None,
        rule_set_id: str = DEFAULT_RULE_SET_ID,
    ) -> None:
        """Deal the first round and hand the lead to seat 0."""
        if self._state.phase != Phase.WAITING:
            raise IllegalMoveError(
                f"Cannot start a game while the game is {self._state.phase.value}; "
                "reset it first"
            )
        self.config.validate()
        rule_set = get_rule_set(rule_set_id)
        names = self._resolve_names(seat_names)
        self.scheduler.check_ready()

        self._generation += 1
        self._rule_set = rule_set
        self._state = self._initial_state(names)
        self._state.rule_set_id = rule_set.id.value
        self._state.phase = Phase.DEALING
        logger.info(
            "Starting game%s: %s, rule set %s, %d rounds",
            f" {self.game_label}" if self.game_label else "",
            ", ".join(names),
            rule_set.id.value,
            self.config.max_rounds,
        )
        self._emit(
            EventType.GAME_STARTED,
            seat_names=list(names),
            rule_set_id=rule_set.id.value,
        )
        self._deal_round()
        self._finish_operation()

    def play_card(self, seat_id: str, card_id: str, *, auto_played: bool = False) -> None:
        """
        Play `card_id` from `seat_id`'s hand into the current trick.

        Completing the trick evaluates it immediately. `auto_played` marks
        moves made by the automated-seat driver.
        """
        state = self._state
        if state.phase != Phase.PLAYING:
            raise IllegalMoveError(
                f"Cannot play a card while the game is {state.phase.value}"
            )
        seat_index = state.seat_index(seat_id)
        if seat_index is None:
            raise IllegalMoveError(f"Unknown seat {seat_id!r}")
        if seat_index != state.current_player:
            raise IllegalMoveError(
                f"It is not {seat_id}'s turn; waiting on "
                f"{state.seats[state.current_player].id}"
            )
        seat = state.seats[seat_index]
        hand_index = seat.find_card(card_id)
        if hand_index is None:
            raise IllegalMoveError(f"{seat_id} does not hold card {card_id!r}")
        # The move schedules the next seat's timer; fail before mutating.
        self.scheduler.check_ready()

        card = seat.hand.pop(hand_index)
        if not state.played_cards:
            state.lead_seat_id = seat_id
        state.played_cards[seat_id] = card
        state.current_player = (seat_index + 1) % state.num_seats
        state.sync_active_flags()
        logger.debug("%s played %s", seat.name, card)
        self._emit(
            EventType.CARD_PLAYED,
            seat_id=seat_id,
            card_id=card.id,
            auto_played=auto_played,
        )

        if len(state.played_cards) == state.num_seats:
            self._evaluate_trick()
        self._finish_operation()

    def reset_game(self) -> None:
        """Abandon the current game and return to waiting. Always succeeds."""
        self._driver.cancel()
        self._generation += 1
        self._rule_set = None
        self._state = self._initial_state()
        logger.info(
            "Game reset%s", f" for {self.game_label}" if self.game_label else ""
        )
        self._emit(EventType.GAME_RESET)
        self._finish_operation()

    def get_winner(self) -> List[WinnerEntry]:
        """
        Seat(s) with the top score once the game is over.

        Ties are returned as several entries, in seating order.
        """
        state = self._state
        if state.phase != Phase.GAME_OVER:
            raise IllegalMoveError(
                f"No winner while the game is {state.phase.value}"
            )
        return [
            WinnerEntry(
                seat_id=state.seats[i].id,
                name=state.seats[i].name,
                score=state.scores[i],
            )
            for i in final_winners(state.scores)
        ]

    # -------------------------------------------------------------------------
    # Round / trick lifecycle
    # -------------------------------------------------------------------------

    def _deal_round(self) -> None:
        state = self._state
        state.phase = Phase.DEALING
        deck = build_shuffled_deck(self.rng)
        hands = deal(deck, state.num_seats, self.config.hand_size)
        for i, seat in enumerate(state.seats):
            seat.hand = hands[i]

        state.played_cards.clear()
        state.lead_seat_id = None
        state.trick_index = 0
        state.current_player = HUMAN_SEAT_INDEX
        state.phase = Phase.PLAYING
        state.sync_active_flags()
        logger.debug("Dealt round %d/%d", state.round, state.max_rounds)
        self._emit(EventType.ROUND_STARTED)

    def _evaluate_trick(self) -> None:
        state = self._state
        rule_set = self._rule_set
        assert rule_set is not None

        state.phase = Phase.EVALUATING
        state.sync_active_flags()

        winner_id = rule_set.evaluate_winner(state.played_cards, state.lead_seat_id)
        winner_index = state.seat_index(winner_id)
        assert winner_index is not None
        award_trick(state.scores, winner_index)
        state.seats[winner_index].score = state.scores[winner_index]

        result = TrickResult(
            round=state.round,
            trick_index=state.trick_index,
            plays=tuple(state.played_cards.items()),
            lead_seat_id=state.lead_seat_id or winner_id,
            lead_suit=lead_suit(state.played_cards, state.lead_seat_id),
            winner_id=winner_id,
        )
        state.last_trick = result
        state.trick_history.append(result)
        logger.debug(
            "Trick %d of round %d won by %s",
            result.trick_index + 1,
            result.round,
            state.seats[winner_index].name,
        )

        state.played_cards.clear()
        state.lead_seat_id = None
        state.trick_index += 1
        self._emit(
            EventType.TRICK_WON,
            winner_id=winner_id,
            trick_index=result.trick_index,
            plays=[(seat_id, card.id) for seat_id, card in result.plays],
            scores=list(state.scores),
        )

        if not state.hands_empty():
            state.current_player = winner_index
            state.phase = Phase.PLAYING
            state.sync_active_flags()
            return

        logger.info(
            "Finished round %d/%d%s",
            state.round,
            state.max_rounds,
            f" for {self.game_label}" if self.game_label else "",
        )
        state.round += 1
        if state.round > state.max_rounds:
            self._end_game()
        else:
            self._deal_round()

    def _end_game(self) -> None:
        state = self._state
        state.phase = Phase.GAME_OVER
        state.sync_active_flags()
        winners = [state.seats[i].id for i in final_winners(state.scores)]
        logger.info(
            "Finished game%s; scores %s, winner(s) %s",
            f" {self.game_label}" if self.game_label else "",
            state.scores,
            ", ".join(winners),
        )
        self._emit(EventType.GAME_OVER, winners=winners, scores=list(state.scores))

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _initial_state(self, names: Optional[Sequence[str]] = None) -> GameState:
        names = names or self.config.default_seat_names
        return GameState(
            seats=[Seat(id=seat_id_for(i), name=name) for i, name in enumerate(names)],
            max_rounds=self.config.max_rounds,
        )

    def _resolve_names(self, seat_names: Optional[Sequence[str]]) -> List[str]:
        defaults = self.config.default_seat_names
        if seat_names is None:
            return list(defaults)
        if len(seat_names) != self.config.seat_count:
            raise ConfigurationError(
                f"Expected {self.config.seat_count} seat names; got {len(seat_names)}"
            )
        return [
            name.strip() or defaults[i]
            for i, name in enumerate(seat_names)
        ]

    def _emit(self, event_type: EventType, **payload) -> None:
        self._pending_events.append(
            GameEvent(
                type=event_type,
                phase=self._state.phase,
                round=self._state.round,
                payload=payload,
            )
        )

    def _finish_operation(self) -> None:
        """
        Reschedule the driver, then tell subscribers what happened.

        A handler may reset the game mid-batch; the rest of the batch belongs
        to the abandoned game and is dropped.
        """
        self._driver.schedule_turn()
        generation = self._generation
        events, self._pending_events = self._pending_events, []
        for i, event in enumerate(events):
            if self._generation != generation:
                logger.debug(
                    "Dropping %d event(s) from a game that was reset",
                    len(events) - i,
                )
                break
            self._events.publish(event)
