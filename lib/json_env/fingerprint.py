"""Content fingerprints for trust decisions."""

from __future__ import annotations

import hashlib

from .errors import ConfigNotFound

_CHUNK_SIZE = 64 * 1024


def fingerprint_file(path: str) -> str:
    """SHA-256 over the file's raw bytes. Raises ConfigNotFound if unreadable."""
    digest = hashlib.sha256()
    try:
        with open(path, "rb") as fh:
            for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as exc:
        raise ConfigNotFound(path, exc.strerror) from exc
    return "sha256:" + digest.hexdigest()
