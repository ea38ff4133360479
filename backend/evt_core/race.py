from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .skater import SourceSkater, TargetSkater

_DISTANCE_RE = re.compile(r"^\s*(\d+)", re.ASCII)


@dataclass
class SourceRace:
    race_number: str
    race_parameters: str = ""
    race_group: str = ""
    race_stage: str = ""
    laps: float | None = None
    skaters: List[SourceSkater] = field(default_factory=list)

    def add_skater(self, skater: SourceSkater) -> None:
        self.skaters.append(skater)

    def event_name(self, trim_suffixes: Sequence[str] = ()) -> str:
        group = trim_group_suffix(self.race_group, trim_suffixes)
        return compose_event_name(group, self.race_parameters, self.race_stage)

    def describe(self) -> str:
        lines = [f"Race {self.race_number}: {self.race_parameters} - {self.race_group}"]
        lines.append(f"  Stage: {self.race_stage}")
        if self.laps is not None:
            lines.append(f"  Laps: {format_laps(self.laps)}")
        lines.append(f"  Skaters ({len(self.skaters)}):")
        for skater in self.skaters:
            lines.append(f"    {skater}")
        return "\n".join(lines)


@dataclass
class TargetRace:
    """A race as stored in the event file: number, display name, laps and lanes."""

    race_number: str
    full_event_name: str = ""
    laps: float | None = None
    skaters: List[TargetSkater] = field(default_factory=list)

    def sorted_skaters(self) -> List[TargetSkater]:
        return sorted(self.skaters, key=TargetSkater.sort_key)

    def __str__(self) -> str:
        lines = [f"Race {self.race_number}: {self.full_event_name}"]
        if self.laps is not None:
            lines.append(f"  Laps: {format_laps(self.laps)}")
        lines.append(f"  Skaters ({len(self.skaters)}):")
        for skater in self.skaters:
            lines.append(f"    {skater}")
        return "\n".join(lines)


def compose_event_name(group: str, parameters: str, stage: str) -> str:
    """Build ``"group (parameters) stage"``, leaving out blank parts."""

    parts: List[str] = []
    if group and group.strip():
        parts.append(group.strip())
    if parameters and parameters.strip():
        parts.append(f"({parameters.strip()})")
    if stage and stage.strip():
        parts.append(stage.strip())
    return " ".join(parts)


def trim_group_suffix(group: str, suffixes: Iterable[str]) -> str:
    """Drop one trailing word from ``group`` when it is a configured suffix.

    Matching is case-insensitive and on whole words, longest suffix first, so
    ``"female"`` is never cut down to ``"fe"`` by ``"male"``.
    """

    text = (group or "").strip()
    lowered = text.lower()
    for suffix in sorted((s.strip() for s in suffixes if s and s.strip()), key=len, reverse=True):
        tail = suffix.lower()
        if lowered == tail:
            return ""
        if lowered.endswith(tail) and lowered[-len(tail) - 1].isspace():
            return text[: -len(tail)].rstrip()
    return text


def race_number_key(value: str | None) -> Tuple[int, int, str]:
    """Sort key putting race numbers in natural order (``3A < 3B < 25A``).

    Blank values sort ahead of everything else.
    """

    if not value:
        return (0, 0, "")
    digits = 0
    while digits < len(value) and value[digits].isdigit() and value[digits].isascii():
        digits += 1
    if digits == 0:
        return (1, 0, value.casefold())
    return (1, int(value[:digits]), value[digits:].casefold())


def compare_race_numbers(left: str | None, right: str | None) -> int:
    left_key = race_number_key(left)
    right_key = race_number_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def format_laps(laps: float | None) -> str:
    """Laps with at most one decimal and no trailing zero (2.0 -> "2")."""

    if laps is None:
        return ""
    text = f"{laps:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    if text == "-0":
        text = "0"
    return text


def laps_for_parameters(parameters: str, distance_laps: Mapping[int, float] | None) -> Optional[float]:
    """Look up the lap count for the distance leading ``parameters`` (``"1500 111m"``)."""

    if not distance_laps:
        return None
    match = _DISTANCE_RE.match(parameters or "")
    if not match:
        return None
    return distance_laps.get(int(match.group(1)))


def sort_races(races: Iterable[TargetRace]) -> List[TargetRace]:
    return sorted(races, key=lambda race: race_number_key(race.race_number))


DEFAULT_DISTANCE_LAPS: Dict[int, float] = {
    500: 4.5,
    777: 7,
    1000: 9,
    1500: 13.5,
    3000: 27,
}
