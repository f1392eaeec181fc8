"""LoggingBackend — composable logging for trust store backends.

Wraps any TrustStoreBackend, logging loads and saves as they pass through.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from ..models import TrustEntry
from ..protocol import EntriesUpdate, TrustStoreBackend


class LoggingBackend:
    """Logs operations passing through a trust store backend.

    Delegates all calls to the inner backend. Loads are logged at DEBUG,
    saves at INFO since they change trust state.
    """

    def __init__(self, inner: TrustStoreBackend, logger_name: str = "json_env.trust") -> None:
        self._inner = inner
        self._logger = logging.getLogger(logger_name)

    @property
    def store_type(self) -> str:
        return self._inner.store_type

    def info(self) -> dict[str, Any]:
        return self._inner.info()

    def load(self) -> list[TrustEntry]:
        t0 = time.monotonic()
        entries = self._inner.load()
        duration_ms = int((time.monotonic() - t0) * 1000)
        self._logger.debug(
            "trust [%s]: loaded %d entries in %dms",
            self.store_type,
            len(entries),
            duration_ms,
        )
        return entries

    def save(self, entries: list[TrustEntry]) -> None:
        self._logger.info("trust [%s]: saving %d entries", self.store_type, len(entries))
        self._inner.save(entries)

    def update(self, mutate: EntriesUpdate) -> list[TrustEntry]:
        t0 = time.monotonic()
        entries = self._inner.update(mutate)
        duration_ms = int((time.monotonic() - t0) * 1000)
        self._logger.info(
            "trust [%s]: updated to %d entries in %dms",
            self.store_type,
            len(entries),
            duration_ms,
        )
        return entries
