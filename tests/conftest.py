"""Shared fixtures for json-env command line tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable

import pytest


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    """Drop the stderr handler the CLI installs so it never outlives a runner."""
    yield
    package_logger = logging.getLogger("json_env")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[..., Path]:
    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
