from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .race import DEFAULT_DISTANCE_LAPS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "appsettings.json"

# Configured name -> Python codec. The Unicode variants carry a byte-order mark.
OUTPUT_ENCODINGS: Dict[str, str] = {
    "ascii": "ascii",
    "utf-8": "utf-8-sig",
    "utf-16": "utf-16",
}


class BackupSettings(BaseModel):
    backups_enabled: bool = Field(default=False, alias="BackupsEnabled")
    backup_directory_name: str = Field(default="backups", alias="BackupDirectoryName", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class AppConfig(BaseModel):
    output_encoding: str = Field(default="ascii", alias="OutputEncoding")
    race_group_trim_suffixes: List[str] = Field(
        default_factory=lambda: ["male", "female"], alias="RaceGroupTrimSuffixes"
    )
    backup: BackupSettings = Field(default_factory=BackupSettings, alias="EvtBackupSettings")
    lap_override: Optional[float] = Field(default=None, alias="LapOverride", gt=0, allow_inf_nan=False)
    distance_laps: Dict[int, float] = Field(
        default_factory=lambda: dict(DEFAULT_DISTANCE_LAPS), alias="DistanceLaps"
    )

    model_config = ConfigDict(populate_by_name=True)

    @property
    def backups_enabled(self) -> bool:
        return self.backup.backups_enabled

    @property
    def backup_directory_name(self) -> str:
        return self.backup.backup_directory_name

    def codec(self) -> str:
        return resolve_encoding(self.output_encoding)


def resolve_encoding(name: str) -> str:
    """Map a configured output encoding to a Python codec name."""

    codec = OUTPUT_ENCODINGS.get((name or "").strip().lower())
    if codec is None:
        supported = ", ".join(OUTPUT_ENCODINGS)
        raise ValueError(f"Unsupported output encoding {name!r}; expected one of: {supported}")
    return codec


def load_config(path: Path | None = None) -> AppConfig:
    """Load settings from a JSON file, falling back to defaults when it is absent."""

    config_path = Path(path) if path is not None else Path.cwd() / DEFAULT_CONFIG_FILE
    if not config_path.exists():
        logger.debug("No configuration at %s; using defaults", config_path)
        return AppConfig()

    try:
        with config_path.open("r", encoding="utf-8-sig") as handle:
            raw = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Could not read configuration file {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Configuration file {config_path} must contain a JSON object")

    try:
        return AppConfig.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration in {config_path}: {exc}") from exc
