"""Editor interface and plain-text document implementations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class Editor(Protocol):
    """What the insertion commands need from an editor."""

    def insert_at_cursor(self, text: str) -> None: ...

    def scroll_to_cursor(self) -> None: ...


class TextDocument:
    """An in-memory text buffer with a caret and an optional selection.

    The selection runs between ``anchor`` and ``head`` (character offsets);
    when they are equal there is only a caret. Line and column positions are
    zero-based.
    """

    def __init__(self, text: str = "", cursor: int | None = None) -> None:
        self.text = text
        offset = len(text) if cursor is None else self._clamp(cursor)
        self.anchor = offset
        self.head = offset
        self.scrolled_to: tuple[int, int] | None = None

    def _clamp(self, offset: int) -> int:
        return max(0, min(offset, len(self.text)))

    def offset_of(self, line: int, column: int) -> int:
        """Convert a ``(line, column)`` position to a character offset.

        Positions past the end of a line or of the document are clamped.
        """
        lines = self.text.split("\n")
        if line < 0:
            return 0
        if line >= len(lines):
            return len(self.text)
        start = sum(len(part) + 1 for part in lines[:line])
        return start + max(0, min(column, len(lines[line])))

    def position_of(self, offset: int) -> tuple[int, int]:
        before = self.text[: self._clamp(offset)]
        line = before.count("\n")
        return line, len(before) - (before.rfind("\n") + 1)

    def set_cursor(self, line: int, column: int) -> None:
        offset = self.offset_of(line, column)
        self.anchor = offset
        self.head = offset

    def select(self, start: int, end: int) -> None:
        """Select the characters between two offsets."""
        self.anchor = self._clamp(start)
        self.head = self._clamp(end)

    def selection(self) -> str:
        start, end = sorted((self.anchor, self.head))
        return self.text[start:end]

    def cursor_position(self) -> tuple[int, int]:
        return self.position_of(self.head)

    def insert_at_cursor(self, text: str) -> None:
        """Replace the selection (or insert at the caret) with *text*.

        The caret ends up right after the inserted text.
        """
        start, end = sorted((self.anchor, self.head))
        self.text = self.text[:start] + text + self.text[end:]
        self.anchor = self.head = start + len(text)

    def scroll_to_cursor(self) -> None:
        self.scrolled_to = self.cursor_position()
        logger.debug("Scrolled to line %d, column %d", *self.scrolled_to)


class FileDocument(TextDocument):
    """A :class:`TextDocument` that writes through to a file on every insertion."""

    def __init__(self, path: Path | str, text: str, cursor: int | None = None) -> None:
        super().__init__(text, cursor)
        self.path = Path(path)

    @classmethod
    def open(cls, path: Path | str) -> FileDocument:
        """Load *path* without newline translation.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"Document not found: {file_path}")
        with file_path.open(encoding="utf-8", newline="") as fh:
            return cls(file_path, fh.read())

    def insert_at_cursor(self, text: str) -> None:
        super().insert_at_cursor(text)
        self.save()

    def save(self) -> None:
        with self.path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(self.text)
