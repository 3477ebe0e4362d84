"""Bounded, client-local generation history.

Storage is a capability with two methods, load() and save(entries), so the
JSON file used by the Streamlit app can be swapped for any other backend.
"""

import json
import os
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Protocol

MAX_ENTRIES = 5
SNIPPET_LENGTH = 100


@dataclass
class HistoryEntry:
    """One past generation."""
    id: int
    prompt: str
    document: str
    created_at: str


class HistoryStore(Protocol):
    def load(self) -> list[HistoryEntry]: ...

    def save(self, entries: list[HistoryEntry]) -> None: ...


class MemoryHistoryStore:
    """In-process store, kept only for the lifetime of the object."""

    def __init__(self):
        self._entries: list[HistoryEntry] = []

    def load(self) -> list[HistoryEntry]:
        return list(self._entries)

    def save(self, entries: list[HistoryEntry]) -> None:
        self._entries = list(entries)


class JsonFileHistoryStore:
    """Stores the history as a single JSON array on local disk."""

    def __init__(self, path: str | Path | None = None):
        default = Path.home() / ".weburle" / "history.json"
        self.path = Path(path or os.environ.get("HISTORY_PATH", default))

    def load(self) -> list[HistoryEntry]:
        """Read entries; a missing or corrupt file yields an empty history."""
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [HistoryEntry(**item) for item in raw][:MAX_ENTRIES]
        except (ValueError, TypeError, OSError):
            return []

    def save(self, entries: list[HistoryEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps([asdict(e) for e in entries], ensure_ascii=False), encoding="utf-8")
        tmp.replace(self.path)


def prompt_snippet(prompt: str) -> str:
    """The prompt cut to at most 100 characters, ending in '...' when truncated."""
    if len(prompt) <= SNIPPET_LENGTH:
        return prompt
    return prompt[:SNIPPET_LENGTH - 3] + "..."


def push_entry(entries: list[HistoryEntry], prompt: str, document: str) -> list[HistoryEntry]:
    """Return a new history with this generation first and at most 5 entries."""
    entry = HistoryEntry(
        id=int(time.time() * 1000),
        prompt=prompt_snippet(prompt),
        document=document,
        created_at=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    )
    return [entry, *entries][:MAX_ENTRIES]
