"""Race-day CSV parsing and event file reconciliation."""

from .config import AppConfig, load_config
from .merge import MergeResult, merge_races
from .race import SourceRace, TargetRace
from .skater import SourceSkater, TargetSkater
from .source import parse_source_file
from .updater import EventFileUpdater, UpdateResult, update_event_file

__all__ = [
    "AppConfig",
    "EventFileUpdater",
    "MergeResult",
    "SourceRace",
    "SourceSkater",
    "TargetRace",
    "TargetSkater",
    "UpdateResult",
    "load_config",
    "merge_races",
    "parse_source_file",
    "update_event_file",
]
