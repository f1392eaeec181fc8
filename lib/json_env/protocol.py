"""TrustStoreBackend protocol — the persistence handle for the trust store.

Every backend (JSON file, in-memory) implements this protocol. The
TrustRegistry loads entries through it once per run and applies each
mutation with ``update``; wrappers (logging, read-only) compose around it.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from .models import TrustEntry

EntriesUpdate = Callable[[list[TrustEntry]], list[TrustEntry]]


@runtime_checkable
class TrustStoreBackend(Protocol):
    """Uniform interface for trust store persistence."""

    @property
    def store_type(self) -> str:
        """Backend type identifier: 'file' or 'memory'."""
        ...

    def load(self) -> list[TrustEntry]:
        """Return every persisted entry. A store that does not exist yet is empty."""
        ...

    def save(self, entries: list[TrustEntry]) -> None:
        """Replace the persisted entries atomically."""
        ...

    def update(self, mutate: EntriesUpdate) -> list[TrustEntry]:
        """Read, apply ``mutate`` and write back as one step.

        No other writer may save between the read and the write. Returns the
        entries that were written.
        """
        ...

    def info(self) -> dict[str, Any]:
        """Return metadata about this backend for diagnostics."""
        ...
