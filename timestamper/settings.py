"""Settings model and YAML-backed settings store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class StampSettings(BaseModel):
    """User settings for stamp insertion.

    Persisted under the camelCase keys (``timeStampFormat`` …); field names
    are accepted too when building a model in code.
    """

    model_config = ConfigDict(populate_by_name=True)

    time_stamp_format: str = Field("hh:mm:ss", alias="timeStampFormat")
    date_stamp_format: str = Field("YYYY-MM-DD", alias="dateStampFormat")
    last_format: str = Field("", alias="lastFormat")
    new_line: bool = Field(False, alias="newLine")
    make_bold: bool = Field(False, alias="makeBold")
    extra_string: str = Field("", alias="extraString")

    def to_record(self) -> dict[str, Any]:
        """Return the flat key/value record written to storage."""
        return self.model_dump(by_alias=True)


DEFAULT_SETTINGS = StampSettings()


@dataclass(frozen=True)
class SettingField:
    """Settings-panel metadata for one field."""

    field: str
    alias: str
    name: str
    description: str


SETTING_FIELDS: list[SettingField] = [
    SettingField(
        "date_stamp_format",
        "dateStampFormat",
        "Date Stamp Template",
        "Template String for inserting a date stamp",
    ),
    SettingField(
        "time_stamp_format",
        "timeStampFormat",
        "Time Stamp Template",
        "Template String for inserting a time stamp",
    ),
    SettingField(
        "new_line",
        "newLine",
        "Insert line break",
        "Add a line break after the time/date stamp",
    ),
    SettingField("make_bold", "makeBold", "Make bold", "Make time/date stamp bold"),
    SettingField(
        "extra_string",
        "extraString",
        "Extra String",
        "Add extra string after time/date stamp",
    ),
    SettingField(
        "last_format",
        "lastFormat",
        "Last custom format",
        "Most recently used custom format string",
    ),
]


def resolve_field(key: str) -> SettingField:
    """Look up a setting by persisted key or field name.

    Raises:
        KeyError: If *key* names no setting.
    """
    for entry in SETTING_FIELDS:
        if key in (entry.field, entry.alias):
            return entry
    raise KeyError(f"Unknown setting: {key}")


class SettingsStore(Protocol):
    """Persistent storage for :class:`StampSettings`."""

    def load(self) -> dict[str, Any]: ...

    def save(self, settings: StampSettings) -> None: ...


class YamlSettingsStore:
    """Stores settings as a YAML mapping in a single file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, Any]:
        """Read the persisted record.

        A missing or empty file means nothing has been persisted yet.

        Raises:
            ValueError: If the file does not contain a YAML mapping.
        """
        if not self.path.exists():
            logger.debug("No settings file at %s, using defaults", self.path)
            return {}

        data = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file must contain a YAML mapping: {self.path}")
        return data

    def save(self, settings: StampSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            yaml.safe_dump(settings.to_record(), sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )


class MemorySettingsStore:
    """In-process store, for embedding hosts that persist elsewhere."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = dict(data or {})
        self.saves = 0

    def load(self) -> dict[str, Any]:
        return dict(self.data)

    def save(self, settings: StampSettings) -> None:
        self.data = settings.to_record()
        self.saves += 1


def merge_settings(persisted: dict[str, Any]) -> StampSettings:
    """Overlay *persisted* values on the defaults, field by field.

    Keys may be persisted names (``makeBold``) or field names
    (``make_bold``); unknown keys are ignored.
    """
    record = DEFAULT_SETTINGS.model_dump()
    for key, value in persisted.items():
        try:
            entry = resolve_field(key)
        except KeyError:
            logger.debug("Ignoring unknown setting %r", key)
            continue
        record[entry.field] = value
    return StampSettings.model_validate(record)


def load_settings(store: SettingsStore) -> StampSettings:
    """Load settings from *store*, falling back to defaults per field.

    Raises:
        ValueError: If a persisted value is neither a string nor a boolean
            where one is expected.
    """
    logger.info("Loading Settings...")
    settings = merge_settings(store.load())
    logger.debug("  - timeStampFormat: %s", settings.time_stamp_format)
    logger.debug("  - dateStampFormat: %s", settings.date_stamp_format)
    logger.debug("  - lastFormat:      %s", settings.last_format)
    return settings


def apply_settings(settings: StampSettings, **changes: Any) -> StampSettings:
    """Return a validated copy of *settings* with *changes* applied.

    Raises:
        KeyError: If a change names no setting.
        ValueError: If a value does not fit its setting's type.
    """
    for key in changes:
        if key not in StampSettings.model_fields:
            raise KeyError(f"Unknown setting: {key}")
    return StampSettings.model_validate({**settings.model_dump(), **changes})


def persist_settings(store: SettingsStore, settings: StampSettings) -> None:
    logger.info("Saving Settings...")
    store.save(settings)
    logger.info("  Done.")


def update_settings(store: SettingsStore, settings: StampSettings, **changes: Any) -> StampSettings:
    """Apply *changes* to *settings*, persist the result and return it.

    Settings change after loading only through this function or, where the
    new value must be kept even if saving fails, through
    :func:`apply_settings` followed by :func:`persist_settings`.
    """
    updated = apply_settings(settings, **changes)
    persist_settings(store, updated)
    return updated
