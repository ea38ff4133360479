"""Race extraction from GCPV race-day CSV exports.

The export has no header and no fixed column layout. Race and skater data are
found by keyword sentinels (``Race``, ``Event :``, ``Stage :`` and the
``Lane, Skaters, Club`` triple) wherever they occur in a row, and a single row
may carry both a race header and a skater.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .race import SourceRace, laps_for_parameters
from .skater import SourceSkater, split_skater_name
from .tokenizer import iter_rows, parse_int, read_text

logger = logging.getLogger(__name__)

RACE_MARKER = "race"
EVENT_MARKER = "event :"
STAGE_MARKER = "stage :"
SKATER_MARKERS = ("lane", "skaters", "club")


def _find(fields: Sequence[str], marker: str) -> int:
    for idx, value in enumerate(fields):
        if value.strip().lower() == marker:
            return idx
    return -1


def _field_after(fields: Sequence[str], marker: str, offset: int = 1) -> Optional[str]:
    idx = _find(fields, marker)
    if idx < 0 or idx + offset >= len(fields):
        return None
    return fields[idx + offset]


def find_race_number(fields: Sequence[str]) -> str:
    return (_field_after(fields, RACE_MARKER) or "").strip()


def parse_race_header(
    fields: Sequence[str],
    race_number: str,
    distance_laps: Mapping[int, float] | None = None,
) -> SourceRace:
    parameters = _field_after(fields, EVENT_MARKER) or ""
    race = SourceRace(
        race_number=race_number,
        race_parameters=parameters,
        race_group=_field_after(fields, EVENT_MARKER, offset=2) or "",
        race_stage=_field_after(fields, STAGE_MARKER) or "",
    )
    race.laps = laps_for_parameters(parameters, distance_laps)
    return race


def parse_skater(fields: Sequence[str]) -> Optional[SourceSkater]:
    """Return the skater following a ``Lane, Skaters, Club`` triple, if any.

    Rows without the triple, or whose lane is not an integer, yield ``None``.
    """

    lowered = [value.strip().lower() for value in fields]
    width = len(SKATER_MARKERS)
    for idx in range(len(lowered) - width):
        if tuple(lowered[idx : idx + width]) != SKATER_MARKERS:
            continue
        start = idx + width
        lane = parse_int(fields[start])
        if lane is None:
            logger.debug("Dropping skater with non-numeric lane %r", fields[start])
            return None
        name = fields[start + 1] if start + 1 < len(fields) else ""
        club = fields[start + 2] if start + 2 < len(fields) else ""
        skater_id, last_name, first_name = split_skater_name(name)
        return SourceSkater(
            lane=lane,
            skater_id=skater_id,
            last_name=last_name,
            first_name=first_name,
            club=club,
        )
    return None


def _accumulate(
    races: Dict[str, SourceRace],
    fields: Sequence[str],
    distance_laps: Mapping[int, float] | None,
) -> Dict[str, SourceRace]:
    race_number = find_race_number(fields)
    if not race_number:
        return races

    race = races.get(race_number)
    if race is None:
        race = parse_race_header(fields, race_number, distance_laps)
        races[race_number] = race

    skater = parse_skater(fields)
    if skater is not None:
        race.add_skater(skater)
    return races


def extract_races(
    rows: Iterable[Sequence[str]],
    distance_laps: Mapping[int, float] | None = None,
) -> List[SourceRace]:
    """Fold tokenized rows into races keyed by race number.

    The header of a race is taken from the first row mentioning its number;
    later rows with the same number only contribute skaters.
    """

    races: Dict[str, SourceRace] = {}
    for fields in rows:
        races = _accumulate(races, fields, distance_laps)
    return list(races.values())


def parse_source_text(text: str, distance_laps: Mapping[int, float] | None = None) -> List[SourceRace]:
    return extract_races(iter_rows(text), distance_laps)


def parse_source_file(path: Path, distance_laps: Mapping[int, float] | None = None) -> List[SourceRace]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")
    races = parse_source_text(read_text(path), distance_laps)
    logger.info("Parsed %d races from %s", len(races), path)
    return races
