"""Locating config files on disk."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import ConfigNotFound


def canonical_path(path: str, cwd: str | None = None) -> str:
    """Absolute path with symlinks resolved, relative to ``cwd`` if given."""
    p = Path(path)
    if not p.is_absolute():
        p = Path(cwd or os.getcwd()) / p
    return str(p.resolve())


def find_config_upward(start: str, name: str) -> str:
    """Return the nearest ``name`` file in ``start`` or any parent directory.

    Raises ConfigNotFound when the filesystem root is reached without a match.
    """
    current = Path(start).resolve()
    for directory in (current, *current.parents):
        candidate = directory / name
        if candidate.is_file():
            return str(candidate)
    raise ConfigNotFound(name, f"no such file in {current} or any parent directory")
