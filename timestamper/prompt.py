"""The custom-format prompt and its Open -> Confirmed/Cancelled lifecycle."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)

LABEL = "Format string:"
PLACEHOLDER = "e.g. YYYY-MM-DD"
SUBMIT_TEXT = "Insert Date/Time Stamp"
CONFIRM_KEY = "Enter"


class PromptState(str, Enum):
    OPEN = "open"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class StampPrompt:
    """Single-line format field with a submit action.

    The field is pre-filled and stays editable while the prompt is open.
    Submitting and pressing :data:`CONFIRM_KEY` both hand the current value
    to *on_confirm*, which is responsible for calling :meth:`close` once its
    work is done; whatever it returns is kept in :attr:`result`. If
    *on_confirm* raises before closing, the prompt stays open. Events that
    arrive after the prompt has closed are ignored.
    """

    def __init__(self, initial: str, on_confirm: Callable[[StampPrompt, str], str]) -> None:
        self.value = initial
        self.result: str | None = None
        self.state = PromptState.OPEN
        self._on_confirm = on_confirm

    @property
    def is_open(self) -> bool:
        return self.state is PromptState.OPEN

    def set_value(self, value: str) -> None:
        if self.is_open:
            self.value = value

    def submit(self) -> None:
        self._confirm()

    def key_press(self, key: str) -> None:
        if key == CONFIRM_KEY:
            self._confirm()

    def dismiss(self) -> None:
        """Close without inserting anything."""
        if self.is_open:
            self.state = PromptState.CANCELLED
            logger.debug("Prompt cancelled")

    def close(self) -> None:
        if self.is_open:
            self.state = PromptState.CONFIRMED

    def _confirm(self) -> None:
        if not self.is_open:
            logger.debug("Ignoring confirmation on a closed prompt")
            return
        self.result = self._on_confirm(self, self.value)
