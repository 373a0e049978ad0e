"""Storage utilities for the persisted conversation history."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from leetaid.config import DEFAULT_HISTORY_KEY
from leetaid.conversations.models import Message, MessageList, to_records

logger = logging.getLogger(__name__)


class ConversationStore:
    """
    Persist the conversation history in a local JSON file.

    The file holds a JSON object mapping entry names to values; the history
    lives under a single entry. Every operation fails soft: read problems
    look like an empty history and write problems are logged, never raised.
    """

    def __init__(self, path: Path | str, key: str = DEFAULT_HISTORY_KEY) -> None:
        self._path = Path(path)
        self._key = key

    @property
    def path(self) -> Path:
        return self._path

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[Message]:
        """Return the stored history, or an empty list if absent or malformed."""
        entries = self._read_entries()
        if entries is None or self._key not in entries:
            return []
        try:
            return MessageList.validate_python(entries[self._key])
        except ValidationError as e:
            logger.warning(
                f"Discarding malformed conversation history in {self._path}: "
                f"{e.error_count()} invalid field(s)",
                extra={"path": str(self._path), "key": self._key},
            )
            return []

    def save(self, history: list[Message]) -> None:
        """Overwrite the stored history with ``history``."""
        entries = self._read_entries() or {}
        entries[self._key] = to_records(history)
        try:
            self._write_entries(entries)
        except (OSError, ValueError) as e:
            logger.warning(
                f"Failed to persist conversation history to {self._path}: {e}",
                extra={"path": str(self._path), "messages": len(history)},
            )

    def clear(self) -> None:
        """Remove the stored history entry."""
        entries = self._read_entries()
        if entries is not None:
            entries.pop(self._key, None)
        try:
            if entries:
                self._write_entries(entries)
            else:
                self._path.unlink(missing_ok=True)
        except (OSError, ValueError) as e:
            logger.warning(
                f"Failed to clear conversation history in {self._path}: {e}",
                extra={"path": str(self._path)},
            )

    def _write_entries(self, entries: dict[str, Any]) -> None:
        """Replace the file with ``entries``; the old file survives any failure."""
        data = json.dumps(entries, ensure_ascii=False).encode("utf-8")
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read_entries(self) -> dict[str, Any] | None:
        """Read the entry mapping; None when the file is missing or unusable."""
        if not self._path.exists():
            return None
        try:
            with open(self._path, encoding="utf-8") as handle:
                entries = json.load(handle)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(
                f"Ignoring unreadable conversation storage {self._path}: {e}",
                extra={"path": str(self._path)},
            )
            return None
        if not isinstance(entries, dict):
            logger.warning(
                f"Ignoring conversation storage {self._path}: expected a JSON object",
                extra={"path": str(self._path)},
            )
            return None
        return entries
