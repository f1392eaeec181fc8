"""Tests for the launcher — export lines and spawning programs."""

from __future__ import annotations

import os
import signal
import sys

import pytest

from json_env.errors import ChildSpawnError
from json_env.launcher import (
    EXIT_NOT_EXECUTABLE,
    EXIT_NOT_FOUND,
    child_environment,
    exit_code_for,
    render_export,
    run_program,
    spawn,
)


# ---------------------------------------------------------------------------
# render_export
# ---------------------------------------------------------------------------


class TestRenderExport:
    def test_sorted_by_key(self):
        lines = render_export({"USER": "admin", "PASSWORD": "hunter2"})
        assert lines == ["PASSWORD=hunter2", "USER=admin"]

    def test_values_quoted_for_shell(self):
        lines = render_export({"GREETING": "hello world", "QUOTE": "it's"})
        assert lines == ["GREETING='hello world'", "QUOTE='it'\"'\"'s'"]

    def test_empty_value(self):
        assert render_export({"EMPTY": ""}) == ["EMPTY=''"]

    def test_dollar_not_expanded_by_shell(self):
        assert render_export({"A": "$HOME"}) == ["A='$HOME'"]

    def test_json_value_quoted(self):
        assert render_export({"DB": '{"port":5432}'}) == ["DB='{\"port\":5432}'"]

    def test_invalid_names_skipped(self, caplog):
        lines = render_export({"my-var": "x", "1ABC": "y", "OK": "z"})
        assert lines == ["OK=z"]
        assert any("my-var" in r.getMessage() for r in caplog.records)

    def test_empty_env(self):
        assert render_export({}) == []


# ---------------------------------------------------------------------------
# child_environment / exit_code_for
# ---------------------------------------------------------------------------


class TestChildEnvironment:
    def test_overrides_win(self):
        result = child_environment({"PATH": "/bin", "X": "old"}, {"X": "new"})
        assert result == {"PATH": "/bin", "X": "new"}

    def test_inputs_untouched(self):
        ambient = {"A": "1"}
        child_environment(ambient, {"A": "2"})
        assert ambient == {"A": "1"}


class TestExitCodeFor:
    def test_passthrough(self):
        assert exit_code_for(0) == 0
        assert exit_code_for(3) == 3

    def test_signal(self):
        assert exit_code_for(-signal.SIGTERM) == 128 + signal.SIGTERM


# ---------------------------------------------------------------------------
# spawn
# ---------------------------------------------------------------------------


def _python(code: str) -> tuple[str, list[str]]:
    return sys.executable, ["-c", code]


class TestSpawn:
    @pytest.mark.asyncio
    async def test_propagates_exit_code(self):
        program, args = _python("import sys; sys.exit(7)")
        assert await spawn(program, args, dict(os.environ)) == 7

    @pytest.mark.asyncio
    async def test_zero_exit(self):
        program, args = _python("pass")
        assert await spawn(program, args, dict(os.environ)) == 0

    @pytest.mark.asyncio
    async def test_environment_passed(self, capfd):
        program, args = _python("import os; print(os.environ['X'])")
        env = child_environment(os.environ, {"X": "1"})
        assert await spawn(program, args, env) == 0
        assert capfd.readouterr().out.strip() == "1"

    @pytest.mark.asyncio
    async def test_arguments_passed(self, capfd):
        program, args = _python("import sys; print(' '.join(sys.argv[1:]))")
        assert await spawn(program, [*args, "--flag", "two words"], dict(os.environ)) == 0
        assert capfd.readouterr().out.strip() == "--flag two words"

    @pytest.mark.asyncio
    async def test_killed_by_signal(self):
        program, args = _python("import os, signal; os.kill(os.getpid(), signal.SIGTERM)")
        assert await spawn(program, args, dict(os.environ)) == 128 + signal.SIGTERM

    @pytest.mark.asyncio
    async def test_missing_program(self, tmp_path):
        missing = str(tmp_path / "definitely-not-here")
        with pytest.raises(ChildSpawnError) as exc_info:
            await spawn(missing, [], dict(os.environ))
        assert exc_info.value.exit_code == EXIT_NOT_FOUND
        assert exc_info.value.exit_code != 1
        assert "definitely-not-here" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_not_executable(self, tmp_path):
        script = tmp_path / "script.sh"
        script.write_text("#!/bin/sh\nexit 0\n")
        script.chmod(0o644)
        with pytest.raises(ChildSpawnError) as exc_info:
            await spawn(str(script), [], dict(os.environ))
        assert exc_info.value.exit_code == EXIT_NOT_EXECUTABLE

    @pytest.mark.asyncio
    async def test_signal_handlers_removed(self):
        before = signal.getsignal(signal.SIGTERM)
        program, args = _python("pass")
        await spawn(program, args, dict(os.environ))
        assert signal.getsignal(signal.SIGTERM) == before


class TestRunProgram:
    def test_blocking_wrapper(self):
        program, args = _python("import sys; sys.exit(3)")
        assert run_program(program, args, dict(os.environ)) == 3
