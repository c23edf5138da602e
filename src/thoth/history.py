"""Local history of answered questions.

A JSON file holding the trimmed :class:`HistoryItem` projection of
recent results, newest first, one entry per result id.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from thoth.consensus.models import HistoryItem

if TYPE_CHECKING:
    from thoth.config.schema import HistoryConfig
    from thoth.consensus.models import GoldenTruthResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 50


def default_history_path() -> Path:
    """Return XDG-compliant data path for the history file."""
    xdg = os.environ.get("XDG_DATA_HOME", "")
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / "thoth" / "history.json"


class HistoryStore:
    """File-backed list of recent results."""

    def __init__(self, path: Path, *, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        self.path = path
        self.max_entries = max_entries

    @classmethod
    def from_config(cls, config: HistoryConfig) -> HistoryStore:
        path = Path(config.path).expanduser() if config.path else default_history_path()
        return cls(path, max_entries=config.max_entries)

    def load(self) -> list[HistoryItem]:
        """Entries newest first. A missing or unreadable file is empty."""
        if not self.path.is_file():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [HistoryItem.from_dict(entry) for entry in raw]
        except (OSError, ValueError, TypeError, KeyError) as e:
            logger.error("Failed to load history from %s: %s", self.path, e)
            return []

    def add(self, item: HistoryItem) -> list[HistoryItem]:
        """Insert *item* first, replacing any entry with the same id."""
        entries = [item, *(h for h in self.load() if h.id != item.id)]
        entries = entries[: self.max_entries]

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(
            json.dumps([h.to_dict() for h in entries], indent=2),
            encoding="utf-8",
        )
        tmp.replace(self.path)
        return entries

    def record(self, result: GoldenTruthResult) -> list[HistoryItem]:
        return self.add(HistoryItem.from_result(result))
