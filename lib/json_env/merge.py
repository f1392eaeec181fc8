"""Merging of per-source EnvMaps."""

from __future__ import annotations

from collections.abc import Iterable, Mapping


def merge_envs(envs: Iterable[Mapping[str, str]]) -> dict[str, str]:
    """Fold EnvMaps left to right; later values win.

    A key written again moves to its last-write position, keys written once
    keep their original order. Inputs are never mutated.
    """
    result: dict[str, str] = {}
    for env in envs:
        for name, value in env.items():
            result.pop(name, None)
            result[name] = value
    return result
