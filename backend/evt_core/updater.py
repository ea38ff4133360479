from __future__ import annotations

import datetime as dt
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from .config import AppConfig
from .evt import load_event_file, write_event_file
from .merge import merge_races
from .race import SourceRace

logger = logging.getLogger(__name__)


@dataclass
class UpdateResult:
    added: int = 0
    updated: int = 0
    unchanged: int = 0
    total: int = 0
    backup_created: bool = False
    backup_path: Optional[Path] = None

    def summary_message(self) -> str:
        parts: List[str] = []
        if self.added:
            parts.append(f"{self.added} added")
        if self.updated:
            parts.append(f"{self.updated} updated")
        if self.unchanged:
            parts.append(f"{self.unchanged} unchanged")
        summary = f"Races: {', '.join(parts)}" if parts else "No races processed"
        if self.backup_created and self.backup_path is not None:
            summary += f"\nBackup created: {self.backup_path.name}"
        return summary


def backup_file_path(path: Path, backup_dir_name: str, now: dt.datetime | None = None) -> Path:
    stamp = (now or dt.datetime.now()).strftime("%Y%m%d%H%M%S")
    return path.parent / backup_dir_name / f"{path.stem}.{stamp}{path.suffix}"


def backup_event_file(path: Path, backup_dir_name: str, now: dt.datetime | None = None) -> Path:
    """Copy ``path`` into its backup directory and return the copy's location.

    An existing backup of the same name is never overwritten.
    """

    target = backup_file_path(path, backup_dir_name, now)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.exists():
            raise FileExistsError(f"Backup file already exists: {target}")
        shutil.copy2(path, target)
    except OSError as exc:
        raise RuntimeError(f"Failed to create backup of {path}: {exc}") from exc
    logger.info("Backed up %s to %s", path, target)
    return target


class EventFileUpdater:
    """Merges parsed races into an event file on disk.

    One call to :meth:`update` backs up the file when asked to, reads the races
    already stored, merges the new races in and rewrites the whole file.
    """

    def __init__(
        self,
        event_path: Path,
        races: Sequence[SourceRace],
        create_backup: bool = False,
        config: AppConfig | None = None,
        lap_override: float | None = None,
    ) -> None:
        if event_path is None:
            raise ValueError("An event file path is required")
        if races is None:
            raise ValueError("A list of races is required")
        self.event_path = Path(event_path)
        self.races = list(races)
        self.create_backup = create_backup
        self.config = config or AppConfig()
        self.lap_override = lap_override

    @property
    def effective_lap_override(self) -> float | None:
        if self.lap_override is not None:
            return self.lap_override
        return self.config.lap_override

    def should_backup(self) -> bool:
        return (self.create_backup or self.config.backups_enabled) and self.event_path.exists()

    def update(self) -> UpdateResult:
        encoding = self.config.codec()
        result = UpdateResult()

        if self.should_backup():
            result.backup_path = backup_event_file(self.event_path, self.config.backup_directory_name)
            result.backup_created = True

        try:
            existing = load_event_file(self.event_path)
            merged = merge_races(
                existing,
                self.races,
                lap_override=self.effective_lap_override,
                trim_suffixes=self.config.race_group_trim_suffixes,
            )
            write_event_file(self.event_path, merged.races, encoding)
        except OSError as exc:
            raise RuntimeError(f"Failed to update event file {self.event_path}: {exc}") from exc

        result.added = merged.added
        result.updated = merged.updated
        result.unchanged = merged.unchanged
        result.total = merged.total
        logger.info(
            "Updated %s: %d added, %d updated, %d unchanged, %d total",
            self.event_path,
            result.added,
            result.updated,
            result.unchanged,
            result.total,
        )
        return result


def update_event_file(
    event_path: Path,
    races: Sequence[SourceRace],
    create_backup: bool = False,
    config: AppConfig | None = None,
    lap_override: float | None = None,
) -> UpdateResult:
    updater = EventFileUpdater(
        event_path,
        races,
        create_backup=create_backup,
        config=config,
        lap_override=lap_override,
    )
    return updater.update()
