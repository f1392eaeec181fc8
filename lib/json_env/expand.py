"""Variable expansion for ``$NAME`` and ``${NAME}`` references."""

from __future__ import annotations

import re
from collections.abc import Mapping

_REFERENCE = re.compile(r"\$(?:\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)\}|(?P<bare>[A-Za-z_][A-Za-z0-9_]*))")


def expand_value(value: str, merged: Mapping[str, str], ambient: Mapping[str, str]) -> str:
    """Substitute references in a single value.

    Lookup order: ``merged`` (earlier sources), then ``ambient``. Unknown
    names are left as written. Substituted text is not scanned again.
    """

    def _substitute(match: re.Match) -> str:
        name = match.group("braced") or match.group("bare")
        if name in merged:
            return merged[name]
        if name in ambient:
            return ambient[name]
        return match.group(0)

    return _REFERENCE.sub(_substitute, value)


def expand_env(
    env: Mapping[str, str],
    merged: Mapping[str, str],
    ambient: Mapping[str, str],
) -> dict[str, str]:
    """Expand every value of ``env``. Returns a new map; inputs are untouched."""
    return {name: expand_value(value, merged, ambient) for name, value in env.items()}
