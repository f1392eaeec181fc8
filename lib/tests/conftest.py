"""Shared fixtures for json_env unit tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from json_env.backends.memory import InMemoryBackend


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[..., str]:
    """Write a JSON document under tmp_path and return its path as a string."""

    def _write(name: str, data: Any) -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def memory_backend() -> InMemoryBackend:
    return InMemoryBackend()
