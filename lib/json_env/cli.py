"""json-env command line.

    json-env [-c FILE [-p EXPR]]... [-e] PROGRAM [ARGS...]
    json-env [-c FILE [-p EXPR]]... [-e] --export
    json-env [-c FILE]... --print-config-path | --is-whitelisted | --whitelist
             | --unwhitelist | --list-whitelist
    json-env --shell-hook bash|zsh

Domain errors are reported as ``json-env: <message>`` on stderr and mapped to
their exit codes here; nothing below this module prints or exits.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any

import click

from . import __version__
from .backends.file import JsonFileBackend
from .discovery import canonical_path, find_config_upward
from .errors import ConfigNotFound, JsonEnvError
from .launcher import child_environment, render_export, run_program
from .models import ROOT_EXPRESSION, ConfigSource
from .pipeline import resolve_env
from .protocol import TrustStoreBackend
from .registry import TrustRegistry
from .settings import DEFAULT_LOG_LEVEL, JsonEnvSettings
from .wrappers.logging_wrapper import LoggingBackend
from .wrappers.readonly_wrapper import ReadOnlyBackend

logger = logging.getLogger(__name__)

SHELL_HOOK_DIR = Path(__file__).parent / "shell"

_TRUST_MODES = ("print_config_path", "is_whitelisted", "whitelist", "unwhitelist", "list_whitelist")


def configure_logging(level: str) -> None:
    """Send json_env logs to stderr; stdout stays reserved for output."""
    package_logger = logging.getLogger("json_env")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("json-env: %(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)


def build_sources(
    configs: tuple[str, ...], expressions: tuple[str, ...], default_name: str
) -> list[ConfigSource]:
    """Pair -c and -p occurrences positionally.

    Without -c the default config in the current directory is used. When any
    -p is given there must be exactly one per config.
    """
    paths = list(configs) or [default_name]
    if expressions and len(expressions) != len(paths):
        raise click.UsageError(
            f"got {len(paths)} config file(s) but {len(expressions)} path expression(s); "
            "give one -p per -c or none at all"
        )
    exprs = list(expressions) or [ROOT_EXPRESSION] * len(paths)
    return [ConfigSource(path=path, expression=expr) for path, expr in zip(paths, exprs)]


def trust_targets(configs: tuple[str, ...], default_name: str) -> list[str]:
    """Files a trust operation applies to: explicit -c paths or the nearest default."""
    if configs:
        return [canonical_path(path) for path in configs]
    return [find_config_upward(os.getcwd(), default_name)]


def open_registry(
    settings: JsonEnvSettings, backend: TrustStoreBackend | None, readonly: bool
) -> TrustRegistry:
    if backend is None:
        backend = JsonFileBackend(settings.trust_store_path)
    backend = LoggingBackend(backend)
    if readonly:
        backend = ReadOnlyBackend(backend)
    return TrustRegistry(backend)


def _run_trust_mode(
    mode: str,
    configs: tuple[str, ...],
    settings: JsonEnvSettings,
    backend: TrustStoreBackend | None,
) -> int:
    if mode == "list_whitelist":
        registry = open_registry(settings, backend, readonly=True)
        for entry, state in registry.list_entries():
            click.echo(f"{state.value}\t{entry.path}")
        return 0

    targets = trust_targets(configs, settings.config_name)

    if mode == "print_config_path":
        for target in targets:
            if not os.path.isfile(target):
                raise ConfigNotFound(target, "no such file")
            click.echo(target)
        return 0

    if mode == "is_whitelisted":
        registry = open_registry(settings, backend, readonly=True)
        return 0 if all(registry.is_whitelisted(t) for t in targets) else 1

    registry = open_registry(settings, backend, readonly=False)
    for target in targets:
        if mode == "whitelist":
            registry.whitelist(target)
        else:
            registry.unwhitelist(target)
    return 0


@click.command(
    context_settings={
        "allow_interspersed_args": False,
        "help_option_names": ["-h", "--help"],
    }
)
@click.option(
    "-c",
    "--config",
    "configs",
    multiple=True,
    metavar="FILE",
    help="Config file to load (repeatable, later files win). Default: .env.json",
)
@click.option(
    "-p",
    "--path",
    "expressions",
    multiple=True,
    metavar="EXPR",
    help="jq path expression per -c selecting the object to load. Default: .",
)
@click.option("-e", "--expand", is_flag=True, help="Expand $NAME and ${NAME} in values.")
@click.option("--export", "export", is_flag=True, help="Print NAME=value lines instead of running a program.")
@click.option("--print-config-path", is_flag=True, help="Print the nearest config file's absolute path.")
@click.option("--is-whitelisted", is_flag=True, help="Exit 0 if the config file is whitelisted and unchanged.")
@click.option("--whitelist", is_flag=True, help="Trust the config file at its current contents.")
@click.option("--unwhitelist", is_flag=True, help="Revoke trust for the config file.")
@click.option("--list-whitelist", is_flag=True, help="List tracked config files and their state.")
@click.option(
    "--shell-hook",
    type=click.Choice(["bash", "zsh"]),
    help="Print the shell integration snippet.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.version_option(__version__, prog_name="json-env")
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def main(
    ctx: click.Context,
    configs: tuple[str, ...],
    expressions: tuple[str, ...],
    expand: bool,
    export: bool,
    print_config_path: bool,
    is_whitelisted: bool,
    whitelist: bool,
    unwhitelist: bool,
    list_whitelist: bool,
    shell_hook: str | None,
    verbose: bool,
    command: tuple[str, ...],
) -> None:
    """Run PROGRAM with the variables from .env.json, or export them.

    json-env reads the config files, merges them in order and starts PROGRAM
    with the result added to the current environment. Its exit code is
    PROGRAM's exit code.
    """
    obj: dict[str, Any] = ctx.obj or {}
    environ: dict[str, str] = obj.get("environ", dict(os.environ))
    configure_logging("DEBUG" if verbose else DEFAULT_LOG_LEVEL)
    settings = JsonEnvSettings.from_env(environ)
    configure_logging("DEBUG" if verbose else settings.log_level)

    flags = {
        "export": export,
        "shell_hook": shell_hook is not None,
        "print_config_path": print_config_path,
        "is_whitelisted": is_whitelisted,
        "whitelist": whitelist,
        "unwhitelist": unwhitelist,
        "list_whitelist": list_whitelist,
    }
    selected = [name for name, on in flags.items() if on]
    if len(selected) > 1:
        options = ", ".join("--" + name.replace("_", "-") for name in selected)
        raise click.UsageError(f"options {options} are mutually exclusive")
    mode = selected[0] if selected else "spawn"
    logger.debug("cli: mode %s, %d config file(s)", mode, len(configs))

    if mode != "spawn" and command:
        raise click.UsageError(f"--{mode.replace('_', '-')} does not take a program")
    if mode == "spawn" and not command:
        click.echo(ctx.get_help())
        ctx.exit(2)

    if mode == "shell_hook":
        click.echo((SHELL_HOOK_DIR / f"hook.{shell_hook}").read_text(encoding="utf-8"), nl=False)
        return

    try:
        if mode in _TRUST_MODES:
            code = _run_trust_mode(mode, configs, settings, obj.get("trust_backend"))
            ctx.exit(code)

        sources = build_sources(configs, expressions, settings.config_name)
        env = resolve_env(sources, environ, expand=expand)

        if mode == "export":
            for line in render_export(env):
                click.echo(line)
            return

        program, *args = command
        ctx.exit(run_program(program, args, child_environment(environ, env)))
    except JsonEnvError as exc:
        logger.debug("cli: failed with %s", exc.code)
        click.echo(f"json-env: {exc.message}", err=True)
        ctx.exit(exc.exit_code)
