"""ReadOnlyBackend — rejects writes to a trust store backend.

Used for trust queries (is-whitelisted, list) so that a query can never
change trust state.
"""

from __future__ import annotations

from typing import Any

from ..models import TrustEntry
from ..protocol import EntriesUpdate, TrustStoreBackend


class ReadOnlyBackend:
    """Rejects save and update. Load passes through."""

    def __init__(self, inner: TrustStoreBackend) -> None:
        self._inner = inner

    @property
    def store_type(self) -> str:
        return self._inner.store_type

    def info(self) -> dict[str, Any]:
        return self._inner.info()

    def load(self) -> list[TrustEntry]:
        return self._inner.load()

    def save(self, entries: list[TrustEntry]) -> None:
        raise PermissionError("Trust store is read-only for this operation")

    def update(self, mutate: EntriesUpdate) -> list[TrustEntry]:
        raise PermissionError("Trust store is read-only for this operation")
