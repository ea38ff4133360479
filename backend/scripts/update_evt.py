"""CLI helper for merging a GCPV race-day CSV export into a FinishLynx event file."""

from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from evt_core import SourceRace, load_config, parse_source_file, update_event_file


def _lap_count(text: str) -> float:
    try:
        laps = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid lap count: {text!r}") from None
    if not math.isfinite(laps) or laps <= 0:
        raise argparse.ArgumentTypeError(f"lap count must be a positive number: {text!r}")
    return laps


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("source", type=Path, help="GCPV CSV export to read")
    parser.add_argument("event_file", type=Path, nargs="?", help="event file to create or update")
    parser.add_argument("--config", type=Path, default=None, help="settings file (default: ./appsettings.json)")
    parser.add_argument("--backup", action="store_true", help="back up the event file before writing")
    parser.add_argument("--laps", type=_lap_count, default=None, help="lap count applied to every race")
    parser.add_argument("--list", action="store_true", help="print the parsed races")
    parser.add_argument("-v", "--verbose", action="store_true", help="log progress")
    return parser


def _format_races(races: Sequence[SourceRace]) -> str:
    if not races:
        return "No races found"
    return "\n".join(race.describe() for race in races)


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        config.codec()
        races = parse_source_file(args.source, config.distance_laps)
    except (ValueError, OSError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.list or args.event_file is None:
        print(_format_races(races))
    if args.event_file is None:
        return 0

    try:
        result = update_event_file(
            args.event_file,
            races,
            create_backup=args.backup,
            config=config,
            lap_override=args.laps,
        )
    except (RuntimeError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(result.summary_message())
    print(f"Total races: {result.total}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
