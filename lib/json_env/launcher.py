"""Launcher — export the final EnvMap or run a program with it.

- render_export: ``NAME=value`` lines for a shell to source
- child_environment: ambient environment overlaid by the EnvMap
- spawn: asyncio.create_subprocess_exec with inherited stdio, signal
  forwarding and exit-code propagation
"""

from __future__ import annotations

import asyncio
import logging
import re
import shlex
import signal
from collections.abc import Mapping, Sequence

from .errors import ChildSpawnError

logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 127
EXIT_NOT_EXECUTABLE = 126

# Forwarded to the child instead of terminating json-env itself
FORWARDED_SIGNALS: tuple[signal.Signals, ...] = tuple(
    getattr(signal, name)
    for name in ("SIGINT", "SIGTERM", "SIGHUP", "SIGQUIT")
    if hasattr(signal, name)
)

_SHELL_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def render_export(env: Mapping[str, str]) -> list[str]:
    """Return one ``NAME=value`` line per variable, sorted by name.

    Values are quoted with shlex.quote. Names a shell cannot assign are
    skipped with a warning.
    """
    lines = []
    for name in sorted(env):
        if not _SHELL_NAME.match(name):
            logger.warning("launcher: skipping %r, not a valid shell variable name", name)
            continue
        lines.append(f"{name}={shlex.quote(env[name])}")
    return lines


def child_environment(
    ambient: Mapping[str, str], overrides: Mapping[str, str]
) -> dict[str, str]:
    """Ambient environment with the resolved variables applied on top."""
    result = dict(ambient)
    result.update(overrides)
    return result


def exit_code_for(returncode: int) -> int:
    """Map a child's return code to ours; death by signal N becomes 128 + N."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def _forward(proc: asyncio.subprocess.Process, sig: signal.Signals) -> None:
    logger.debug("launcher: forwarding %s to pid %d", sig.name, proc.pid)
    try:
        proc.send_signal(sig)
    except ProcessLookupError:
        pass


async def spawn(program: str, args: Sequence[str], env: Mapping[str, str]) -> int:
    """Run ``program`` with ``args`` and ``env``; return the exit code to use.

    Raises ChildSpawnError if the program cannot be started.
    """
    try:
        proc = await asyncio.create_subprocess_exec(program, *args, env=dict(env))
    except FileNotFoundError as exc:
        raise ChildSpawnError(program, "no such file or directory", EXIT_NOT_FOUND) from exc
    except PermissionError as exc:
        raise ChildSpawnError(program, "permission denied", EXIT_NOT_EXECUTABLE) from exc
    except OSError as exc:
        raise ChildSpawnError(
            program, exc.strerror or str(exc), EXIT_NOT_EXECUTABLE
        ) from exc

    logger.debug("launcher: started %s (pid %d)", program, proc.pid)
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    for sig in FORWARDED_SIGNALS:
        try:
            loop.add_signal_handler(sig, _forward, proc, sig)
        except (NotImplementedError, RuntimeError, ValueError):
            # No loop signal support here (non-main thread or Windows)
            continue
        installed.append(sig)

    try:
        returncode = await proc.wait()
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)

    logger.debug("launcher: %s exited with %d", program, returncode)
    return exit_code_for(returncode)


def run_program(program: str, args: Sequence[str], env: Mapping[str, str]) -> int:
    """Blocking wrapper around spawn for the CLI."""
    return asyncio.run(spawn(program, args, env))
