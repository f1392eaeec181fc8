"""InMemoryBackend — trust store kept in process memory."""

from __future__ import annotations

from typing import Any

from ..models import TrustEntry
from ..protocol import EntriesUpdate


class InMemoryBackend:
    """Trust store backend that never touches disk."""

    def __init__(self, entries: list[TrustEntry] | None = None) -> None:
        self._entries: list[TrustEntry] = list(entries or [])
        self.save_count = 0

    @property
    def store_type(self) -> str:
        return "memory"

    def load(self) -> list[TrustEntry]:
        return list(self._entries)

    def save(self, entries: list[TrustEntry]) -> None:
        self._entries = list(entries)
        self.save_count += 1

    def update(self, mutate: EntriesUpdate) -> list[TrustEntry]:
        entries = mutate(self.load())
        self.save(entries)
        return list(entries)

    def info(self) -> dict[str, Any]:
        return {"entries": len(self._entries)}
