"""
Plugin models — the configured metadata commands.

Loaded from metagen.yml, these declare which external commands produce
metadata and how often each one should be run.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

# Plugin names double as cache file names
_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class MetadataPlugin(BaseModel):
    """A single metadata command declaration."""

    command: str
    execution_interval: int | None = None   # minutes, None = default cadence
    timeout_seconds: float | None = None
    env: dict[str, str] = Field(default_factory=dict)

    @field_validator("command")
    @classmethod
    def _command_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("command must not be empty")
        return v

    @field_validator("timeout_seconds")
    @classmethod
    def _timeout_positive(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("timeout_seconds must be positive")
        return v


class AgentConfig(BaseModel):
    """Root configuration — loaded from metagen.yml."""

    state_dir: str = ".state/metadata"
    metadata_plugins: dict[str, MetadataPlugin] = Field(default_factory=dict)

    @field_validator("metadata_plugins")
    @classmethod
    def _valid_names(cls, v: dict[str, MetadataPlugin]) -> dict[str, MetadataPlugin]:
        bad = [name for name in v if not _NAME_PATTERN.match(name)]
        if bad:
            raise ValueError(f"invalid plugin names: {', '.join(sorted(bad))}")
        return v

    def get_plugin(self, name: str) -> MetadataPlugin | None:
        """Look up a plugin by name."""
        return self.metadata_plugins.get(name)
