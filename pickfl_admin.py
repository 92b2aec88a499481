#!/usr/bin/env python3
"""
PICKFL league administration CLI

Publishes weeks, manages edit locks, scores picks and lineups, and exports
results. Data lives in the JSON store under --data-dir (default from
data/league_config.json). Each run appends to a daily log under
<data-dir>/logs unless --no-log-file is given.

Usage:
    python pickfl_admin.py new-week --questions questions.json
    python pickfl_admin.py lock-question --week 3 --index 0 --lock
    python pickfl_admin.py lineup-edits --week 3 --deny
    python pickfl_admin.py set-answers --week 3 --answers '["Chiefs", ["Over", "Push"]]'
    python pickfl_admin.py score-picks --week 3
    python pickfl_admin.py score-lineups --week 3
    python pickfl_admin.py export --week 3 --output exports/week_3.xlsx
    python pickfl_admin.py sync-players
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pickfl import ESPNStatsProvider, JsonStore, LeagueService, PickflError, export_week_workbook
from pickfl.config import get_data_dir
from pickfl.logging_config import setup_logging

logger = logging.getLogger('pickfl.admin')


def load_json_argument(value: str):
    """Parse a JSON literal, or the contents of a file when given a path."""
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        with open(value) as f:
            return json.load(f)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PICKFL weekly pick'em and fantasy league admin")
    parser.add_argument(
        "--data-dir", "-d",
        default=None,
        help="Path to data directory (default: from league_config.json)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug output",
    )
    parser.add_argument(
        "--no-log-file",
        dest="log_to_file",
        action="store_false",
        help="Only log to the console, not to <data-dir>/logs",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    new_week = sub.add_parser("new-week", help="Publish the next week and make it current")
    new_week.add_argument(
        "--questions", "-q",
        required=True,
        help="JSON list of questions (literal or path to a file)",
    )

    lock = sub.add_parser("lock-question", help="Allow or forbid edits to one question")
    lock.add_argument("--week", "-w", type=int, required=True)
    lock.add_argument("--index", "-i", type=int, required=True, help="Question index (0-based)")
    group = lock.add_mutually_exclusive_group(required=True)
    group.add_argument("--lock", dest="allowed", action="store_false")
    group.add_argument("--unlock", dest="allowed", action="store_true")

    edits = sub.add_parser("lineup-edits", help="Allow or forbid lineup edits for a week")
    edits.add_argument("--week", "-w", type=int, required=True)
    group = edits.add_mutually_exclusive_group(required=True)
    group.add_argument("--allow", dest="allowed", action="store_true")
    group.add_argument("--deny", dest="allowed", action="store_false")

    answers = sub.add_parser("set-answers", help="Store manual correct answers")
    answers.add_argument("--week", "-w", type=int, required=True)
    answers.add_argument(
        "--answers", "-a",
        required=True,
        help="JSON list of answers (literal or path); lists mean several correct answers",
    )

    picks = sub.add_parser("score-picks", help="Auto-score, merge answers and award pick points")
    picks.add_argument("--week", "-w", type=int, required=True)

    lineups = sub.add_parser("score-lineups", help="Compute PPR totals for every lineup of a week")
    lineups.add_argument("--week", "-w", type=int, required=True)

    export = sub.add_parser("export", help="Write a week's picks and leaderboard to Excel")
    export.add_argument("--week", "-w", type=int, required=True)
    export.add_argument(
        "--output", "-o",
        default=None,
        help="Workbook path (default: exports/week_{N}.xlsx)",
    )

    sub.add_parser("sync-players", help="Rebuild players.json from nflverse")

    return parser


def resolve_data_dir(args: argparse.Namespace) -> Path:
    return Path(args.data_dir) if args.data_dir else get_data_dir()


def run(args: argparse.Namespace) -> int:
    store = JsonStore(resolve_data_dir(args))

    if args.command == "sync-players":
        from pickfl.player_sync import sync_players

        players = sync_players(store.players_path)
        print(f"Synced {len(players)} players to {store.players_path}")
        return 0

    service = LeagueService(store, ESPNStatsProvider())

    if args.command == "new-week":
        pointer = service.create_new_week(load_json_argument(args.questions))
        print(f"Week {pointer.week_number} is now current")

    elif args.command == "lock-question":
        locks = service.set_question_lock(args.week, args.index, args.allowed)
        state = "editable" if args.allowed else "locked"
        print(f"Week {args.week} question {args.index} {state}; edit permissions: {locks}")

    elif args.command == "lineup-edits":
        service.set_lineup_edits(args.week, args.allowed)
        print(f"Week {args.week} lineup edits {'allowed' if args.allowed else 'locked'}")

    elif args.command == "set-answers":
        stored = service.set_correct_answers(args.week, load_json_argument(args.answers))
        print(f"Week {args.week} correct answers: {stored}")

    elif args.command == "score-picks":
        report = service.merge_and_score_questions(args.week)
        print(f"Week {args.week}: {report.auto_resolved} answers auto-resolved")
        for user_id, score in sorted(report.user_scores.items(), key=lambda x: x[1], reverse=True):
            print(f"  {user_id}: {score:g} pts")
        for failure in report.failures:
            print(f"  FAILED {failure.key}: {failure.message}")
        if report.failures:
            return 1

    elif args.command == "score-lineups":
        report = service.score_week_lineups(args.week)

        print("\n" + "=" * 60)
        print(f"WEEK {args.week} LINEUPS")
        print("=" * 60)
        ranked = sorted(report.succeeded, key=lambda s: s.total_points, reverse=True)
        for rank, score in enumerate(ranked, 1):
            flagged = f" (unresolved: {', '.join(score.flagged_slots)})" if score.flagged_slots else ""
            print(f"  {rank}. {score.user_id}: {score.total_points:.2f} pts{flagged}")
        for failure in report.failures:
            print(f"  FAILED {failure.key}: {failure.message}")
        if report.failures:
            return 1

    elif args.command == "export":
        output = Path(args.output) if args.output else Path("exports") / f"week_{args.week}.xlsx"
        header, rows = service.responses_table(args.week)
        week = store.load_week(args.week)
        path = export_week_workbook(
            output, header, rows, week.correct_answers, service.leaderboard(args.week)
        )
        print(f"Exported week {args.week} to {path}")

    return 0


def main():
    parser = build_parser()
    args = parser.parse_args()

    setup_logging(
        data_dir=resolve_data_dir(args),
        verbose=args.verbose,
        log_to_file=args.log_to_file,
    )

    try:
        sys.exit(run(args))
    except PickflError as e:
        logger.error(str(e))
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
