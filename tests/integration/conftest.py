"""Integration test configuration: json-env run as a real process.

Spawn tests always run. Shell hook tests need bash and are skipped without it:
    pytest tests/integration/ -v
"""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path

import pytest

LIB_DIR = Path(__file__).resolve().parents[2] / "lib"


# ---------------------------------------------------------------------------
# pytest hooks: shell_integration marker
# ---------------------------------------------------------------------------


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "shell_integration: marks tests that source the hook into a real bash",
    )


def pytest_collection_modifyitems(config, items):
    if shutil.which("bash") is None:
        skip_shell = pytest.mark.skip(reason="bash not available")
        for item in items:
            if "shell_integration" in item.keywords:
                item.add_marker(skip_shell)


# ---------------------------------------------------------------------------
# Process helpers
# ---------------------------------------------------------------------------


def _base_env(tmp_path: Path) -> dict[str, str]:
    env = {
        "PATH": os.environ.get("PATH", "/usr/bin:/bin"),
        "HOME": str(tmp_path / "home"),
        "JSON_ENV_TRUST_STORE": str(tmp_path / "home" / "trust.json"),
        "PYTHONPATH": str(LIB_DIR),
    }
    return env


@pytest.fixture
def json_env(tmp_path):
    """Run ``python -m json_env`` in tmp_path and return the CompletedProcess."""

    def _run(*args: str, env: dict[str, str] | None = None, cwd: Path | None = None):
        return subprocess.run(
            [sys.executable, "-m", "json_env", *args],
            cwd=cwd or tmp_path,
            env={**_base_env(tmp_path), **(env or {})},
            capture_output=True,
            text=True,
            timeout=30,
        )

    return _run


@pytest.fixture
def json_env_on_path(tmp_path):
    """A bin directory holding a ``json-env`` launcher for this interpreter."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    launcher = bin_dir / "json-env"
    launcher.write_text(f'#!/bin/sh\nexec "{sys.executable}" -m json_env "$@"\n')
    launcher.chmod(0o755)
    env = _base_env(tmp_path)
    env["PATH"] = f"{bin_dir}{os.pathsep}{env['PATH']}"
    return env


@pytest.fixture
def json_env_environ(tmp_path):
    """Environment ``json_env`` runs with, for tests that start processes themselves."""
    return _base_env(tmp_path)
