"""Loader, path extractor and flattener.

- load_json: file → parsed JSON tree (stdlib json)
- extract: tree + jq expression → the selected object
- flatten: object → EnvMap, one variable per top-level key
- load_source: the three steps for one ConfigSource
"""

from __future__ import annotations

import json
import logging
from typing import Any

import jq

from .errors import (
    ConfigNotFound,
    ConfigParseError,
    PathInvalid,
    PathNotAnObject,
    PathNotFound,
)
from .models import ROOT_EXPRESSION, ConfigSource

logger = logging.getLogger(__name__)


def load_json(path: str) -> Any:
    """Read and parse a JSON file. Raises ConfigNotFound or ConfigParseError."""
    try:
        with open(path, encoding="utf-8-sig") as fh:
            contents = fh.read()
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
        raise ConfigNotFound(path, exc.strerror) from exc
    except PermissionError as exc:
        raise ConfigNotFound(path, "permission denied") from exc
    except UnicodeDecodeError as exc:
        raise ConfigParseError(path, f"not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise ConfigNotFound(path, exc.strerror) from exc

    try:
        tree = json.loads(contents)
    except json.JSONDecodeError as exc:
        raise ConfigParseError(
            path, f"{exc.msg} at line {exc.lineno} column {exc.colno}"
        ) from exc
    logger.debug("loader: parsed %s", path)
    return tree


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


_MISSING = object()


def _locate(tree: Any, expression: str, path: str) -> list[list[Any]]:
    """Run ``path(expression)`` through jq and return the matched locations.

    jq holds numbers as doubles, so only locations come back from it; the
    values themselves are read from the parsed tree by _follow.
    """
    try:
        jq.compile(expression)
        program = jq.compile(f"path({expression})")
    except ValueError as exc:
        raise PathInvalid(expression, path, str(exc)) from exc
    try:
        return program.input_value(tree).all()
    except ValueError as exc:
        if "Invalid path expression" in str(exc):
            raise PathInvalid(
                expression, path, "does not select a location in the document"
            ) from exc
        raise PathNotFound(expression, path, str(exc)) from exc


def _follow(tree: Any, location: list[Any]) -> Any:
    """Walk ``location`` (keys, indexes or slices) down ``tree``."""
    node = tree
    for step in location:
        if isinstance(step, str):
            if not isinstance(node, dict) or step not in node:
                return _MISSING
            node = node[step]
        elif isinstance(step, dict):
            if not isinstance(node, list):
                return _MISSING
            start, end = step.get("start"), step.get("end")
            node = node[
                None if start is None else int(start) : None if end is None else int(end)
            ]
        else:
            index = int(step)
            if not isinstance(node, list) or not -len(node) <= index < len(node):
                return _MISSING
            node = node[index]
    return node


def extract(tree: Any, expression: str | None = None, path: str = "<input>") -> dict:
    """Select the object that holds the variables.

    ``expression`` is a jq path expression; ``None`` or ``"."`` selects the root.
    The selected object is returned from ``tree`` itself, never a copy.
    The result must be exactly one JSON object; anything else is a hard
    failure rather than an empty map.
    """
    expression = expression or ROOT_EXPRESSION
    if expression == ROOT_EXPRESSION:
        results = [tree]
    else:
        results = [_follow(tree, p) for p in _locate(tree, expression, path)]

    # a missing key and an explicit null both count as no match
    results = [r for r in results if r is not None and r is not _MISSING]
    if not results:
        raise PathNotFound(expression, path)
    if len(results) > 1:
        raise PathInvalid(
            expression, path, f"selects {len(results)} values, expected exactly one"
        )

    selected = results[0]
    if not isinstance(selected, dict):
        raise PathNotAnObject(expression, path, _type_name(selected))
    return selected


def to_env_value(value: Any) -> str:
    """Canonical string form of a JSON value."""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    # null, booleans and numbers share their JSON spelling
    return json.dumps(value)


def flatten(obj: dict, path: str = "<input>") -> dict[str, str]:
    """Flatten one level of an object into an EnvMap. Nesting stays opaque."""
    result: dict[str, str] = {}
    for name, value in obj.items():
        if not name:
            raise ConfigParseError(path, "empty variable name")
        if "=" in name or "\0" in name:
            raise ConfigParseError(path, f"invalid variable name {name!r}")
        result[name] = to_env_value(value)
    return result


def load_source(source: ConfigSource) -> dict[str, str]:
    """Load, extract and flatten a single config source."""
    tree = load_json(source.path)
    selected = extract(tree, source.expression, path=source.path)
    env = flatten(selected, path=source.path)
    logger.debug(
        "loader: %s [%s] → %d variables", source.path, source.expression, len(env)
    )
    return env
