# trick_table/simulate.py
from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .agents import DIFFICULTIES, SeatAgent, make_agent
from .config import DEFAULT_DIFFICULTY, GameConfig, HAND_SIZE, MAX_ROUNDS, SEAT_COUNT
from .driver import build_play_observation
from .engine import GameEngine
from .game_log import (
    STANDING_FIELDNAMES,
    TRICK_FIELDNAMES,
    build_standing_rows,
    build_trick_rows,
    write_rows_csv,
)
from .rules import RuleSetId
from .scheduler import ManualScheduler
from .state import HUMAN_SEAT_INDEX, GameSnapshot, Phase
from .stats import format_summary, plot_mean_scores, standings_frame, summarize_standings
from .verbose_logger import VerboseGameLogger

# A full default game is 4 seats × 7 cards × 5 rounds = 140 plays.
MAX_STEPS_PER_GAME = 10_000

# Standings, trick logs, verbose logs and plots land here by default.
RESULTS_DIR = Path(__file__).resolve().parent / "results"


def output_path(path_like: str | Path, results_dir: Path = RESULTS_DIR) -> Path:
    """
    Where a simulation output file goes.

    Relative paths (including ones with subfolders) are placed under
    `results_dir`; absolute paths are kept. The parent folder is created.
    """
    path = Path(path_like)
    if not path.is_absolute():
        path = results_dir / path
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def play_out(
    engine: GameEngine,
    scheduler: ManualScheduler,
    human_agent: SeatAgent,
    max_steps: int = MAX_STEPS_PER_GAME,
) -> GameSnapshot:
    """
    Drive a started game to game over.

    The human seat is played by `human_agent` through play_card, exactly as
    a UI would; every other seat is left to the engine's own timers, which
    are fired by advancing the manual scheduler.
    """
    for _ in range(max_steps):
        snapshot = engine.get_state()
        if snapshot.phase == Phase.GAME_OVER:
            return snapshot
        if (
            snapshot.phase == Phase.PLAYING
            and snapshot.current_player == HUMAN_SEAT_INDEX
            and scheduler.pending == 0
        ):
            obs = build_play_observation(snapshot, HUMAN_SEAT_INDEX)
            move_index = human_agent.choose_card(obs)
            card = snapshot.current_seat.hand[move_index]
            engine.play_card(snapshot.current_seat.id, card.id)
            continue
        if not scheduler.run_next():
            raise RuntimeError(
                f"Game stalled in phase {snapshot.phase.value} "
                f"waiting on seat {snapshot.current_player}"
            )
    raise RuntimeError(f"Game did not finish within {max_steps} steps")


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Play all-automated trick-taking games and log per-seat standings "
            "to a CSV file."
        )
    )

    parser.add_argument(
        "--games",
        type=int,
        default=1,
        help="Number of full games to play per rule set (default: 1).",
    )
    parser.add_argument(
        "--rule-sets",
        nargs="+",
        default=[r.value for r in RuleSetId],
        choices=[r.value for r in RuleSetId],
        help="Rule sets to simulate (default: all three).",
    )
    parser.add_argument(
        "--difficulties",
        nargs="+",
        default=[DEFAULT_DIFFICULTY] * (SEAT_COUNT - 1),
        choices=list(DIFFICULTIES),
        help=(
            "Difficulty of each automated seat, seats 2..4 in order "
            f"(default: {DEFAULT_DIFFICULTY} for all)."
        ),
    )
    parser.add_argument(
        "--human-agent",
        default="hard",
        choices=list(DIFFICULTIES),
        help="Agent standing in for the human seat (default: hard).",
    )
    parser.add_argument(
        "--max-rounds",
        type=int,
        default=MAX_ROUNDS,
        help=f"Rounds per game (default: {MAX_ROUNDS}).",
    )
    parser.add_argument(
        "--csv",
        type=str,
        default="trick_table_standings.csv",
        help="Path to the standings CSV (default: trick_table_standings.csv).",
    )
    parser.add_argument(
        "--trick-log",
        type=str,
        default=None,
        help="Optional path for a per-trick CSV log.",
    )
    parser.add_argument(
        "--verbose-log",
        type=str,
        default=None,
        help="Optional path for a detailed turn-by-turn log file.",
    )
    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="Optional path for a PNG chart of mean scores.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Base random seed for deals and agents.",
    )
    parser.add_argument(
        "--parallel-games",
        type=int,
        default=1,
        help="Max number of games to play concurrently (default: 1).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ...). Default: INFO.",
    )

    return parser.parse_args(argv)


def _play_single_game(
    game_index: int,
    rule_set_id: str,
    *,
    args: argparse.Namespace,
    verbose_logger: Optional[VerboseGameLogger],
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]], str]:
    """Run one game synchronously (meant for thread execution)."""
    game_id = f"{rule_set_id}-game-{game_index}"
    base_seed = args.seed + game_index * 1000

    agents = {
        seat: make_agent(difficulty, seed=base_seed + seat)
        for seat, difficulty in enumerate(args.difficulties, start=1)
    }
    human_agent = make_agent(args.human_agent, seed=base_seed)
    agent_labels = [args.human_agent] + list(args.difficulties)

    scheduler = ManualScheduler()
    engine = GameEngine(
        config=GameConfig(max_rounds=args.max_rounds),
        scheduler=scheduler,
        agents=agents,
        rng_seed=base_seed,
        game_label=game_id,
    )
    if verbose_logger is not None:
        engine.subscribe(lambda event: verbose_logger.log_event(event, game_id=game_id))

    engine.start_game(rule_set_id=rule_set_id)
    snapshot = play_out(engine, scheduler, human_agent)

    standings = build_standing_rows(snapshot, game_id=game_id, agent_labels=agent_labels)
    tricks = build_trick_rows(snapshot, game_id=game_id)
    return standings, tricks, game_id


async def async_main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if len(args.difficulties) != SEAT_COUNT - 1:
        raise SystemExit(
            f"--difficulties needs {SEAT_COUNT - 1} values; got {len(args.difficulties)}"
        )
    if args.games < 1:
        raise SystemExit("--games must be at least 1")
    if args.max_rounds < 1:
        raise SystemExit("--max-rounds must be at least 1")

    csv_path = output_path(args.csv)
    trick_path = output_path(args.trick_log) if args.trick_log else None
    verbose_path = output_path(args.verbose_log) if args.verbose_log else None
    plot_path = output_path(args.plot) if args.plot else None

    logging.info("Rule sets: %s", ", ".join(args.rule_sets))
    logging.info(
        "Seats: human=%s, automated=%s", args.human_agent, ", ".join(args.difficulties)
    )
    logging.info("Games per rule set: %d (%d tricks each)", args.games, args.max_rounds * HAND_SIZE)
    logging.info("Output CSV: %s", csv_path)

    verbose_logger = VerboseGameLogger(verbose_path) if verbose_path else None
    parallel_games = max(1, args.parallel_games)

    jobs = [
        (game_index, rule_set_id)
        for rule_set_id in args.rule_sets
        for game_index in range(args.games)
    ]
    standing_rows: List[Dict[str, Any]] = []
    trick_rows: List[Dict[str, Any]] = []
    failures = 0

    for batch_start in range(0, len(jobs), parallel_games):
        batch = jobs[batch_start:batch_start + parallel_games]
        tasks = [
            asyncio.create_task(
                asyncio.to_thread(
                    _play_single_game,
                    game_index,
                    rule_set_id,
                    args=args,
                    verbose_logger=verbose_logger,
                )
            )
            for game_index, rule_set_id in batch
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logging.error("Game task failed: %s", result)
                failures += 1
                continue
            standings, tricks, game_id = result
            standing_rows.extend(standings)
            trick_rows.extend(tricks)
            logging.debug("Collected results for %s", game_id)

    write_rows_csv(standing_rows, csv_path, STANDING_FIELDNAMES)
    if trick_path:
        write_rows_csv(trick_rows, trick_path, TRICK_FIELDNAMES)
        logging.info("Trick log: %s", trick_path)
    if verbose_logger:
        verbose_logger.flush()
        logging.info("Verbose log: %s", verbose_path)

    summary = summarize_standings(standings_frame(standing_rows))
    for line in format_summary(summary):
        logging.info("%s", line)
    if plot_path and not summary.empty:
        plot_mean_scores(summary, plot_path)
        logging.info("Plot: %s", plot_path)

    logging.info(
        "Finished %d/%d games; wrote %d rows to %s",
        len(jobs) - failures,
        len(jobs),
        len(standing_rows),
        csv_path,
    )


def main(argv: List[str] | None = None) -> None:
    asyncio.run(async_main(argv))


if __name__ == "__main__":
    main()
