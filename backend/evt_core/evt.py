"""Reading and writing the ``.evt`` event file.

The file is header-less CSV. Each race is a 13 field row (race number in field
0, event name in field 3, laps in field 12) followed by one 3 field row per
skater (blank, skater ID, lane). Rows of any other shape are ignored on read
and never written.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .race import TargetRace, format_laps, sort_races
from .skater import TargetSkater
from .tokenizer import iter_rows, parse_int, parse_number, read_text

logger = logging.getLogger(__name__)

RACE_FIELD_COUNT = 13
SKATER_FIELD_COUNT = 3
LINE_ENDING = "\r\n"


def _is_race_row(fields: Sequence[str]) -> bool:
    return (
        len(fields) == RACE_FIELD_COUNT
        and bool(fields[0].strip())
        and not fields[1].strip()
        and not fields[2].strip()
    )


def _skater_from_row(fields: Sequence[str]) -> Optional[TargetSkater]:
    if len(fields) != SKATER_FIELD_COUNT or fields[0].strip() or not fields[1].strip():
        return None
    lane = parse_int(fields[2])
    if lane is None:
        return None
    return TargetSkater(lane=lane, skater_id=fields[1])


def read_event_races(text: str) -> List[TargetRace]:
    races: List[TargetRace] = []
    current: TargetRace | None = None
    for fields in iter_rows(text):
        if _is_race_row(fields):
            if current is not None:
                races.append(current)
            current = TargetRace(
                race_number=fields[0],
                full_event_name=fields[3],
                laps=parse_number(fields[12]),
            )
            continue

        skater = _skater_from_row(fields)
        if skater is not None and current is not None:
            current.skaters.append(skater)
        elif any(value for value in fields):
            logger.debug("Ignoring event file row %r", fields)

    if current is not None:
        races.append(current)
    return races


def load_event_file(path: Path) -> List[TargetRace]:
    """Races stored in ``path``; a missing file is an empty database."""

    path = Path(path)
    if not path.exists():
        logger.debug("Event file %s does not exist; starting empty", path)
        return []
    return read_event_races(read_text(path))


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _field(value: str) -> str:
    if any(char in value for char in ',"\r\n') or value != value.strip():
        return _quote(value)
    return value


def _race_line(race: TargetRace) -> str:
    fields = [_field(race.race_number), "", "", _quote(race.full_event_name)]
    fields.extend([""] * 8)
    fields.append(format_laps(race.laps))
    return ",".join(fields)


def _skater_line(skater: TargetSkater) -> str:
    return ",".join(["", _field(skater.skater_id), str(skater.lane)])


def render_event_file(races: Iterable[TargetRace]) -> str:
    lines: List[str] = []
    for race in sort_races(races):
        lines.append(_race_line(race))
        for skater in race.sorted_skaters():
            lines.append(_skater_line(skater))
    return "".join(line + LINE_ENDING for line in lines)


def _current_umask() -> int:
    # os.umask can only be read by setting it.
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_event_file(path: Path, races: Iterable[TargetRace], encoding: str) -> None:
    """Replace ``path`` with the rendered races in one step.

    The content goes to a temporary file beside the target which is then moved
    over it, so an interrupted write never leaves a truncated event file.
    """

    path = Path(path)
    payload = render_event_file(races).encode(encoding, errors="replace")
    path.parent.mkdir(parents=True, exist_ok=True)

    handle, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(handle, "wb") as stream:
            stream.write(payload)
        if path.exists():
            shutil.copymode(path, temp_name)
        else:
            os.chmod(temp_name, 0o666 & ~_current_umask())
        os.replace(temp_name, path)
    except OSError:
        try:
            os.unlink(temp_name)
        except OSError as cleanup_exc:
            logger.warning("Could not remove temporary file %s: %s", temp_name, cleanup_exc)
        raise
