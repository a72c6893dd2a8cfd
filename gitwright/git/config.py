"""Git configuration models for gitwright."""

from __future__ import annotations

from pydantic import BaseModel, Field

from gitwright.constants import (
    DEFAULT_GIT_BINARY,
    DEFAULT_TERMINATE_GRACE_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
)


class GitCommitConfig(BaseModel):
    """Configuration for git commit behavior."""

    sign: bool = False


class GitConfig(BaseModel):
    """Top-level git configuration."""

    binary: str = Field(default=DEFAULT_GIT_BINARY, min_length=1)
    timeout_seconds: int = Field(default=DEFAULT_TIMEOUT_SECONDS, ge=1, le=3600)
    terminate_grace_seconds: float = Field(default=DEFAULT_TERMINATE_GRACE_SECONDS, ge=0.0, le=60.0)
    env: dict[str, str] = Field(default_factory=dict)
    commit: GitCommitConfig = Field(default_factory=GitCommitConfig)
