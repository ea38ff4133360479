from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass
class SourceSkater:
    """A skater line recovered from a race-day export.

    The export carries the skater as one ``"ID LASTNAME, FIRSTNAME"`` string;
    it is stored here already split into its parts.
    """

    lane: int
    skater_id: str = ""
    last_name: str = ""
    first_name: str = ""
    club: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.skater_id} {self.last_name}, {self.first_name}"

    def to_target(self) -> "TargetSkater":
        return TargetSkater(lane=self.lane, skater_id=self.skater_id)

    def __str__(self) -> str:
        return (
            f"Lane {self.lane}: ID={self.skater_id}, LastName={self.last_name}, "
            f"FirstName={self.first_name} ({self.club})"
        )


@dataclass
class TargetSkater:
    lane: int
    skater_id: str

    def sort_key(self) -> Tuple[int, str]:
        return (self.lane, self.skater_id)

    def __str__(self) -> str:
        return f"Lane {self.lane}: ID={self.skater_id}"


def split_skater_name(name: str | None) -> Tuple[str, str, str]:
    """Split ``"ID LASTNAME, FIRSTNAME"`` into ``(skater_id, last_name, first_name)``.

    Without a comma the whole string is the last name. Without a space before
    the comma there is no ID.
    """

    if not name or not name.strip():
        return "", "", ""

    before, sep, after = name.partition(",")
    if not sep:
        return "", name.strip(), ""

    before = before.strip()
    first_name = after.strip()
    space = before.rfind(" ")
    if space > 0:
        return before[:space].strip(), before[space + 1 :].strip(), first_name
    return "", before, first_name
