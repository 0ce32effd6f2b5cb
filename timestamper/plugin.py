"""Plugin lifecycle: load settings, register commands, apply settings changes."""

from __future__ import annotations

import logging
from typing import Any

from timestamper import __version__
from timestamper.commands import (
    Clock,
    Command,
    InsertionDispatcher,
    get_registry,
    run_command,
    system_clock,
)
from timestamper.composer import Formatter, format_timestamp
from timestamper.editor import Editor
from timestamper.settings import (
    DEFAULT_SETTINGS,
    SettingsStore,
    StampSettings,
    load_settings,
    resolve_field,
    update_settings,
)

logger = logging.getLogger(__name__)


class PluginNotLoadedError(RuntimeError):
    """Raised when a command runs before :meth:`TimeStamperPlugin.load`."""


class TimeStamperPlugin:
    """Owns the settings and the insertion commands for one host session."""

    def __init__(
        self,
        store: SettingsStore,
        clock: Clock = system_clock,
        formatter: Formatter = format_timestamp,
    ) -> None:
        self.store = store
        self.clock = clock
        self.formatter = formatter
        self.dispatcher: InsertionDispatcher | None = None
        self.commands: dict[str, Command] = {}

    @property
    def settings(self) -> StampSettings:
        return self._require_dispatcher().settings

    def load(self) -> None:
        logger.info("Loading Plugin v%s", __version__)
        settings = load_settings(self.store)
        self.dispatcher = InsertionDispatcher(settings, self.store, self.clock, self.formatter)
        self.commands = get_registry()
        logger.debug("Registered commands: %s", ", ".join(self.commands))

    def unload(self) -> None:
        self.dispatcher = None
        self.commands = {}
        logger.debug("Bye!")

    def run(self, command_id: str, editor: Editor) -> object:
        return run_command(self._require_dispatcher(), command_id, editor)

    def update_setting(self, key: str, value: Any) -> StampSettings:
        """Change one setting from the settings panel and persist it.

        Args:
            key: Persisted key (``makeBold``) or field name (``make_bold``).
            value: New value; booleans accept ``true/false/yes/no/on/off``.

        Raises:
            KeyError: If *key* names no setting.
            ValueError: If *value* does not fit the setting's type.
        """
        entry = resolve_field(key)
        logger.info("Settings update - %s: %s", entry.name, value)
        dispatcher = self._require_dispatcher()
        dispatcher.settings = update_settings(
            self.store, dispatcher.settings, **{entry.field: value}
        )
        return dispatcher.settings

    def reset_settings(self) -> StampSettings:
        """Restore and persist the default settings."""
        dispatcher = self._require_dispatcher()
        dispatcher.settings = update_settings(
            self.store, dispatcher.settings, **DEFAULT_SETTINGS.model_dump()
        )
        return dispatcher.settings

    def _require_dispatcher(self) -> InsertionDispatcher:
        if self.dispatcher is None:
            raise PluginNotLoadedError("Plugin is not loaded")
        return self.dispatcher
