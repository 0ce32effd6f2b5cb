"""Shared test fixtures for TimeStamper."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

import pytest

from timestamper.commands import InsertionDispatcher
from timestamper.editor import TextDocument
from timestamper.logging_setup import LOGGER_NAME
from timestamper.settings import MemorySettingsStore, StampSettings

INSTANT = datetime(2024, 1, 5, 9, 3, 7)


@pytest.fixture()
def instant() -> datetime:
    return INSTANT


@pytest.fixture()
def store() -> MemorySettingsStore:
    return MemorySettingsStore()


@pytest.fixture()
def document() -> TextDocument:
    """A two-line document with the caret at the end of the first line."""
    doc = TextDocument("Meeting notes\nAgenda\n")
    doc.set_cursor(0, len("Meeting notes"))
    return doc


@pytest.fixture()
def dispatcher(store: MemorySettingsStore) -> InsertionDispatcher:
    return InsertionDispatcher(StampSettings(), store, clock=lambda: INSTANT)


@pytest.fixture()
def settings_file(tmp_path: Path) -> Path:
    return tmp_path / "timestamper.yaml"


@pytest.fixture()
def notes_file(tmp_path: Path) -> Path:
    path = tmp_path / "notes.md"
    path.write_text("# Log\n\nentry\n", encoding="utf-8")
    return path


@pytest.fixture()
def clean_logger() -> Iterator[logging.Logger]:
    """Detach any handlers ``setup_logging`` adds during a test."""
    logger = logging.getLogger(LOGGER_NAME)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
