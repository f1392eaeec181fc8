"""TrustRegistry — query and mutate approved config files.

Supports state, is_whitelisted, whitelist, unwhitelist and list_entries.
Entries are keyed by canonical absolute path. Every decision recomputes the
file's fingerprint from disk; nothing is cached between runs.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .discovery import canonical_path
from .errors import ConfigNotFound
from .fingerprint import fingerprint_file
from .models import TrustEntry, TrustState
from .protocol import TrustStoreBackend

logger = logging.getLogger(__name__)


class TrustRegistry:
    """Trust decisions over a TrustStoreBackend."""

    def __init__(self, backend: TrustStoreBackend) -> None:
        self._backend = backend
        self._entries: dict[str, TrustEntry] = {
            entry.path: entry for entry in backend.load()
        }

    def get(self, path: str) -> TrustEntry | None:
        """Get the entry for a path, or None if it was never whitelisted."""
        return self._entries.get(canonical_path(path))

    def state(self, path: str) -> TrustState:
        """Live trust state of ``path``, checked against its current bytes."""
        entry = self.get(path)
        if entry is None:
            return TrustState.UNKNOWN
        try:
            current = fingerprint_file(entry.path)
        except ConfigNotFound:
            current = None
        return entry.state_for(current)

    def is_whitelisted(self, path: str) -> bool:
        state = self.state(path)
        logger.debug("trust: %s is %s", path, state.value)
        return state == TrustState.APPROVED

    def whitelist(self, path: str) -> TrustEntry:
        """Approve ``path`` at its current contents and persist.

        Raises ConfigNotFound if the file cannot be read.
        """
        resolved = canonical_path(path)
        entry = TrustEntry(path=resolved, fingerprint=fingerprint_file(resolved), approved=True)

        def _approve(latest: dict[str, TrustEntry]) -> None:
            latest[resolved] = entry

        self._update(_approve)
        logger.info("trust: whitelisted %s (%s)", resolved, entry.fingerprint)
        return entry

    def unwhitelist(self, path: str) -> bool:
        """Revoke approval for ``path``. Returns False if it was never tracked."""
        resolved = canonical_path(path)
        if resolved not in self._entries:
            self._entries = {e.path: e for e in self._backend.load()}
        if resolved not in self._entries:
            logger.info("trust: %s is not tracked, nothing to revoke", resolved)
            return False

        def _revoke(latest: dict[str, TrustEntry]) -> None:
            current = latest.get(resolved, self._entries[resolved])
            latest[resolved] = current.model_copy(update={"approved": False})

        self._update(_revoke)
        logger.info("trust: revoked %s", resolved)
        return True

    def list_entries(self) -> list[tuple[TrustEntry, TrustState]]:
        """Return all tracked entries with their live state, sorted by path."""
        return [
            (entry, self.state(entry.path))
            for entry in sorted(self._entries.values(), key=lambda e: e.path)
        ]

    def _update(self, change: Callable[[dict[str, TrustEntry]], None]) -> None:
        # Applied to the current stored entries under the backend's lock
        def _mutate(entries: list[TrustEntry]) -> list[TrustEntry]:
            latest = {e.path: e for e in entries}
            change(latest)
            return list(latest.values())

        self._entries = {e.path: e for e in self._backend.update(_mutate)}
