"""Data models shared across json-env.

- ConfigSource: one ``-c``/``-p`` pair from the command line
- TrustEntry: one tracked config file in the trust store
- TrustStoreDocument: the on-disk shape of the trust store
- TrustState: live trust state of a tracked path
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

ROOT_EXPRESSION = "."

TRUST_STORE_VERSION = 1


class ConfigSource(BaseModel):
    """A config file plus the path expression selecting its variables."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path to the JSON config file")
    expression: str = Field(
        default=ROOT_EXPRESSION,
        description="jq path expression selecting the object to load (default: root)",
    )


class TrustState(str, Enum):
    """Trust state of a config file."""

    UNKNOWN = "unknown"
    APPROVED = "approved"
    REVOKED = "revoked"


class TrustEntry(BaseModel):
    """An approved (or formerly approved) config file."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Canonical absolute path of the config file")
    fingerprint: str = Field(..., description="Content fingerprint at approval time")
    approved: bool = Field(default=False, description="Whether auto-loading is allowed")

    def state_for(self, fingerprint: str | None) -> TrustState:
        """Live state of this entry given the file's current fingerprint."""
        if not self.approved:
            return TrustState.REVOKED
        if fingerprint is None or fingerprint != self.fingerprint:
            return TrustState.REVOKED
        return TrustState.APPROVED


class TrustStoreDocument(BaseModel):
    """Serialized trust store."""

    version: int = Field(default=TRUST_STORE_VERSION)
    entries: list[TrustEntry] = Field(default_factory=list)
