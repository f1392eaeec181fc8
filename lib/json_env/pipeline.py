"""Config resolution: load every source, then expand and merge in order."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence

from .expand import expand_env
from .loader import load_source
from .merge import merge_envs
from .models import ConfigSource

logger = logging.getLogger(__name__)

SourceLoader = Callable[[ConfigSource], dict[str, str]]


def resolve_env(
    sources: Sequence[ConfigSource],
    ambient: Mapping[str, str],
    expand: bool = False,
    loader: SourceLoader = load_source,
) -> dict[str, str]:
    """Resolve the final EnvMap for an ordered list of sources.

    Every source is loaded before any merging happens, so a failure in the
    last source still leaves nothing exported or spawned.
    """
    loaded = [loader(source) for source in sources]

    merged: dict[str, str] = {}
    for source, env in zip(sources, loaded):
        if expand:
            env = expand_env(env, merged, ambient)
        merged = merge_envs([merged, env])
        logger.debug("pipeline: merged %s (%d variables total)", source.path, len(merged))
    return merged
