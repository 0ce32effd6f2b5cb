"""Insertion commands: pick a pattern, compose the stamp, insert it."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from timestamper.composer import Formatter, StampRequest, compose_request, format_timestamp
from timestamper.editor import Editor
from timestamper.prompt import StampPrompt
from timestamper.settings import SettingsStore, StampSettings, apply_settings, persist_settings

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Return the current local time, timezone-aware."""
    return datetime.now().astimezone()


class UnknownCommandError(KeyError):
    """Raised when a command id is not registered."""


class InsertionDispatcher:
    """Runs the three insertion variants against an editor.

    Holds the current settings value; the custom variant replaces it
    when it records the last used format, before that format is persisted.
    """

    def __init__(
        self,
        settings: StampSettings,
        store: SettingsStore,
        clock: Clock = system_clock,
        formatter: Formatter = format_timestamp,
    ) -> None:
        self.settings = settings
        self.store = store
        self.clock = clock
        self.formatter = formatter

    def _compose(self, pattern: str) -> str:
        request = StampRequest(instant=self.clock(), pattern=pattern)
        return compose_request(request, self.settings, self.formatter)

    def _insert(self, editor: Editor, text: str) -> None:
        editor.insert_at_cursor(text)
        logger.debug("new line" if self.settings.new_line else "no new line")

    def insert_time(self, editor: Editor) -> str:
        """Insert a stamp using the configured time format."""
        text = self._compose(self.settings.time_stamp_format)
        self._insert(editor, text)
        return text

    def insert_date(self, editor: Editor) -> str:
        """Insert a stamp using the configured date format."""
        text = self._compose(self.settings.date_stamp_format)
        self._insert(editor, text)
        return text

    def open_custom(self, editor: Editor) -> StampPrompt:
        """Open a prompt for a one-off format, pre-filled with the last one used.

        Confirming the prompt inserts the stamp, remembers the format,
        persists settings, closes the prompt and scrolls the editor to the
        caret, in that order.

        Once the stamp is inserted the format is remembered and the prompt
        closed even if persisting fails; the store's error still propagates.
        """

        def confirm(prompt: StampPrompt, pattern: str) -> str:
            text = self._compose(pattern)
            self._insert(editor, text)
            self.settings = apply_settings(self.settings, last_format=pattern)
            try:
                persist_settings(self.store, self.settings)
            finally:
                prompt.close()
                editor.scroll_to_cursor()
            return text

        return StampPrompt(self.settings.last_format, confirm)


@dataclass(frozen=True)
class Command:
    """A registered editor command."""

    id: str
    name: str
    handler: Callable[[InsertionDispatcher, Editor], object]


def _custom(dispatcher: InsertionDispatcher, editor: Editor) -> StampPrompt:
    return dispatcher.open_custom(editor)


def _time(dispatcher: InsertionDispatcher, editor: Editor) -> str:
    return dispatcher.insert_time(editor)


def _date(dispatcher: InsertionDispatcher, editor: Editor) -> str:
    return dispatcher.insert_date(editor)


_COMMAND_REGISTRY: dict[str, Command] = {
    command.id: command
    for command in (
        Command("obsidian-custom-timestamp", "Insert custom time/date stamp", _custom),
        Command("obsidian-fast-timestamp", "Insert preconfigured time stamp", _time),
        Command("obsidian-fast-datestamp", "Insert preconfigured date stamp", _date),
    )
}


def get_registry() -> dict[str, Command]:
    """Return the registered commands keyed by id."""
    return dict(_COMMAND_REGISTRY)


def run_command(dispatcher: InsertionDispatcher, command_id: str, editor: Editor) -> object:
    """Run a registered command.

    Returns whatever the handler returns: the inserted text for the
    preconfigured commands, the open prompt for the custom one.

    Raises:
        UnknownCommandError: If *command_id* is not registered.
    """
    command = _COMMAND_REGISTRY.get(command_id)
    if command is None:
        raise UnknownCommandError(command_id)
    logger.debug("Running command %s", command_id)
    return command.handler(dispatcher, editor)
