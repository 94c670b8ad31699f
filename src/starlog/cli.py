"""Command line interface for starlog.

Usage:
    starlog log --description "XGBoost baseline" --tag ml --version 1.0 --number 1 "Final AUC:" 0.789 ""
    starlog log --description "Feature tables" --number 2 --csv train.csv --csv test.csv
    starlog capitan --description "Recovered entry" --version 1.0 --number 1
    starlog --folder ./logs/ history
"""

import argparse
import logging
import sys
from typing import List, Optional

import pandas as pd

from starlog.capitan_log import append_capitan_log, read_capitan_log
from starlog.config import DEFAULT_CONFIG, LogConfig
from starlog.errors import StarlogError
from starlog.experiment_log import ExperimentLogger
from starlog.values import LoggableValue

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="starlog",
        description="Keep a captain's log of your experiments",
    )
    parser.add_argument(
        "--folder",
        default=DEFAULT_CONFIG.folder,
        help="Folder to store the logs (default: %(default)s)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    log_parser = subparsers.add_parser("log", help="Create an experiment log file")
    log_parser.add_argument("values", nargs="*", help="Text values to log; \"\" writes a blank line")
    log_parser.add_argument("--description", default="", help="Main information of the experiment")
    log_parser.add_argument("--tag", default="", help="Optional tag to organize logs")
    log_parser.add_argument("--version", default=DEFAULT_CONFIG.version, help="Project version (default: %(default)s)")
    log_parser.add_argument("--number", type=int, required=True, help="Experiment number")
    log_parser.add_argument(
        "--csv",
        action="append",
        default=[],
        metavar="PATH",
        help="CSV file to log as a table after the text values; repeat for several files",
    )

    capitan_parser = subparsers.add_parser("capitan", help="Append an entry to the captain's log")
    capitan_parser.add_argument("--description", default="", help="Main information of the experiment")
    capitan_parser.add_argument("--version", default=DEFAULT_CONFIG.version, help="Project version (default: %(default)s)")
    capitan_parser.add_argument("--number", type=int, required=True, help="Experiment number")
    capitan_parser.add_argument("--stardate", help="Stardate of the entry (default: now)")

    subparsers.add_parser("history", help="Print the captain's log entries")

    return parser


def _run_log(args: argparse.Namespace) -> int:
    config = LogConfig(folder=args.folder, version=args.version, tag=args.tag)
    values: List[object] = list(args.values)
    for csv_path in args.csv:
        values.append(LoggableValue.table(pd.read_csv(csv_path)))

    path = ExperimentLogger(config).log(*values, description=args.description, number=args.number)
    print(path)
    return 0


def _run_capitan(args: argparse.Namespace) -> int:
    entry = append_capitan_log(
        timestamp=args.stardate,
        description=args.description,
        version=args.version,
        number=args.number,
        folder=args.folder,
    )
    print(f"Experiment v:{entry.full_version} - Stardate: {entry.timestamp}")
    return 0


def _run_history(args: argparse.Namespace) -> int:
    entries = read_capitan_log(args.folder)
    if not entries:
        print(f"No captain's log entries in {args.folder}")
        return 0

    for entry in entries:
        print(f"v:{entry.full_version:<12} {entry.timestamp}  {entry.description}")
    print(f"\n{len(entries)} entries")
    return 0


COMMANDS = {
    "log": _run_log,
    "capitan": _run_capitan,
    "history": _run_history,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        return COMMANDS[args.command](args)
    except (StarlogError, OSError, ValueError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
