from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .race import SourceRace, TargetRace, format_laps
from .skater import TargetSkater


@dataclass
class MergeResult:
    races: List[TargetRace] = field(default_factory=list)
    added: int = 0
    updated: int = 0
    unchanged: int = 0

    @property
    def total(self) -> int:
        return len(self.races)


def effective_laps(race: SourceRace, lap_override: float | None = None) -> float | None:
    return lap_override if lap_override is not None else race.laps


def _skater_keys(skaters: Sequence[TargetSkater]) -> List[tuple]:
    return sorted(skater.sort_key() for skater in skaters)


def has_race_changed(
    existing: TargetRace,
    event_name: str,
    laps: float | None,
    skaters: Sequence[TargetSkater],
) -> bool:
    """Compare an event-file race with freshly parsed data.

    Laps are compared as they would be written to the file and skaters as
    lane-sorted ``(lane, skater_id)`` pairs, so row order never counts as a
    change.
    """

    if existing.full_event_name != event_name:
        return True
    if format_laps(existing.laps) != format_laps(laps):
        return True
    if len(existing.skaters) != len(skaters):
        return True
    return _skater_keys(existing.skaters) != _skater_keys(skaters)


def merge_races(
    existing: Sequence[TargetRace],
    new_races: Sequence[SourceRace],
    lap_override: float | None = None,
    trim_suffixes: Sequence[str] = (),
) -> MergeResult:
    """Merge parsed races into the races already in the event file.

    Races are matched on race number. Unknown numbers are appended, known ones
    are overwritten only when their content differs. Existing races the new
    data does not mention are kept as they are and counted as unchanged. The
    inputs are never modified.
    """

    result = MergeResult(races=copy.deepcopy(list(existing)))
    by_number: Dict[str, TargetRace] = {}
    for race in result.races:
        by_number.setdefault(race.race_number, race)

    for new_race in new_races:
        event_name = new_race.event_name(trim_suffixes)
        laps = effective_laps(new_race, lap_override)
        skaters = [skater.to_target() for skater in new_race.skaters]

        current = by_number.get(new_race.race_number)
        if current is None:
            added = TargetRace(
                race_number=new_race.race_number,
                full_event_name=event_name,
                laps=laps,
                skaters=skaters,
            )
            result.races.append(added)
            by_number[added.race_number] = added
            result.added += 1
        elif has_race_changed(current, event_name, laps, skaters):
            current.full_event_name = event_name
            current.laps = laps
            current.skaters = skaters
            result.updated += 1
        else:
            result.unchanged += 1

    new_numbers = {race.race_number for race in new_races}
    result.unchanged += sum(1 for race in existing if race.race_number not in new_numbers)
    return result
