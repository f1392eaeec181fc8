"""Runtime settings for json-env.

Resolved from an explicit environment mapping (normally os.environ, passed in
by the CLI):

  JSON_ENV_TRUST_STORE  — trust store file path
  XDG_DATA_HOME         — base directory for the default trust store
  JSON_ENV_CONFIG_NAME  — default config file name (default: .env.json)
  JSON_ENV_LOG_LEVEL    — logging level name (default: WARNING)

An unknown JSON_ENV_LOG_LEVEL is reported as a warning and the default is
used instead.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = ".env.json"
DEFAULT_LOG_LEVEL = "WARNING"
TRUST_STORE_FILENAME = "trust.json"


def default_trust_store_path(environ: Mapping[str, str]) -> str:
    data_home = environ.get("XDG_DATA_HOME") or os.path.join(
        environ.get("HOME") or os.path.expanduser("~"), ".local", "share"
    )
    return os.path.join(data_home, "json_env", TRUST_STORE_FILENAME)


def _is_level_name(value: str) -> bool:
    return isinstance(logging.getLevelName(value.upper()), int)


class JsonEnvSettings(BaseModel):
    """Settings shared by every json-env command."""

    trust_store_path: str = Field(..., description="Where approved config files are recorded")
    config_name: str = Field(
        default=DEFAULT_CONFIG_NAME, description="File name looked up when no -c is given"
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Root log level for json-env")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        if not _is_level_name(value):
            raise ValueError(f"unknown log level '{value}'")
        return value.upper()

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "JsonEnvSettings":
        log_level = environ.get("JSON_ENV_LOG_LEVEL") or DEFAULT_LOG_LEVEL
        if not _is_level_name(log_level):
            logger.warning(
                "settings: unknown JSON_ENV_LOG_LEVEL %r, using %s", log_level, DEFAULT_LOG_LEVEL
            )
            log_level = DEFAULT_LOG_LEVEL
        return cls(
            trust_store_path=environ.get("JSON_ENV_TRUST_STORE")
            or default_trust_store_path(environ),
            config_name=environ.get("JSON_ENV_CONFIG_NAME") or DEFAULT_CONFIG_NAME,
            log_level=log_level,
        )
