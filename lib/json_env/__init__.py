"""json-env: load environment variables from JSON files.

This package provides the pieces used by the ``json-env`` command:
- loader, expand, merge, pipeline: config resolution (load → extract → flatten → expand → merge)
- launcher: export lines or spawn a program with the resolved environment
- registry: TrustRegistry — the whitelist gating automatic per-directory loading
- protocol: TrustStoreBackend — the persistence handle behind the registry
"""

__version__ = "0.1.0"

from .errors import (
    ChildSpawnError,
    ConfigNotFound,
    ConfigParseError,
    JsonEnvError,
    PathInvalid,
    PathNotAnObject,
    PathNotFound,
    TrustStoreIOError,
)
from .models import ConfigSource, TrustEntry, TrustState
from .pipeline import resolve_env
from .protocol import TrustStoreBackend
from .registry import TrustRegistry

__all__ = [
    "__version__",
    "ChildSpawnError",
    "ConfigNotFound",
    "ConfigParseError",
    "JsonEnvError",
    "PathInvalid",
    "PathNotAnObject",
    "PathNotFound",
    "TrustStoreIOError",
    "ConfigSource",
    "TrustEntry",
    "TrustState",
    "resolve_env",
    "TrustStoreBackend",
    "TrustRegistry",
]
