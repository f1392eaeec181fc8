"""JsonFileBackend — trust store persisted as a JSON document.

Reads tolerate a missing file (empty store). Writes go to a temp file in the
same directory which is fsynced and then renamed over the store with
os.replace, so concurrent shells never observe a half-written document.

Every write holds an exclusive flock on the sibling ``<store>.lock`` file,
and ``update`` holds it across the read as well, so two shells changing the
store at the same time are applied one after the other.
"""

from __future__ import annotations

import contextlib
import fcntl
import json
import os
import tempfile
import time
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import TrustStoreIOError
from ..models import TRUST_STORE_VERSION, TrustEntry, TrustStoreDocument
from ..protocol import EntriesUpdate

LOCK_TIMEOUT = 10.0
_LOCK_POLL_INTERVAL = 0.05


class JsonFileBackend:
    """Trust store backend for a JSON file in a user-scoped directory."""

    def __init__(self, path: str, lock_timeout: float = LOCK_TIMEOUT) -> None:
        self._path = os.path.abspath(path)
        self._lock_path = self._path + ".lock"
        self._lock_timeout = lock_timeout

    @property
    def store_type(self) -> str:
        return "file"

    @property
    def path(self) -> str:
        return self._path

    def load(self) -> list[TrustEntry]:
        try:
            raw = Path(self._path).read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise TrustStoreIOError(self._path, exc.strerror or str(exc)) from exc

        try:
            document = TrustStoreDocument.model_validate(json.loads(raw))
        except json.JSONDecodeError as exc:
            raise TrustStoreIOError(self._path, f"invalid JSON: {exc.msg}") from exc
        except ValidationError as exc:
            raise TrustStoreIOError(
                self._path, f"unexpected structure ({exc.error_count()} errors)"
            ) from exc
        if document.version != TRUST_STORE_VERSION:
            raise TrustStoreIOError(
                self._path, f"unsupported version {document.version}"
            )
        return list(document.entries)

    def save(self, entries: list[TrustEntry]) -> None:
        with self._locked():
            self._write(entries)

    def update(self, mutate: EntriesUpdate) -> list[TrustEntry]:
        with self._locked():
            entries = mutate(self.load())
            self._write(entries)
        return entries

    def info(self) -> dict[str, Any]:
        return {"path": self._path}

    @contextlib.contextmanager
    def _locked(self) -> Iterator[None]:
        """Hold the store's exclusive lock, waiting up to the lock timeout."""
        try:
            os.makedirs(os.path.dirname(self._path), mode=0o700, exist_ok=True)
            fd = os.open(self._lock_path, os.O_CREAT | os.O_RDWR, 0o600)
        except OSError as exc:
            raise TrustStoreIOError(self._path, exc.strerror or str(exc)) from exc

        try:
            deadline = time.monotonic() + self._lock_timeout
            while True:
                try:
                    fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
                    break
                except BlockingIOError:
                    if time.monotonic() >= deadline:
                        raise TrustStoreIOError(
                            self._path,
                            f"still locked by another json-env after {self._lock_timeout:g}s",
                        ) from None
                    time.sleep(_LOCK_POLL_INTERVAL)
            try:
                yield
            finally:
                fcntl.flock(fd, fcntl.LOCK_UN)
        finally:
            # The lock file stays; unlinking it would let writers lock different inodes
            os.close(fd)

    def _write(self, entries: list[TrustEntry]) -> None:
        document = TrustStoreDocument(
            entries=sorted(entries, key=lambda e: e.path)
        )
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=os.path.dirname(self._path), prefix=".trust-", suffix=".tmp"
            )
        except OSError as exc:
            raise TrustStoreIOError(self._path, exc.strerror or str(exc)) from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(document.model_dump_json(indent=2))
                fh.write("\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self._path)
        except OSError as exc:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise TrustStoreIOError(self._path, exc.strerror or str(exc)) from exc
