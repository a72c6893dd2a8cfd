"""Shared data types for gitwright git operations."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from gitwright.constants import DEFAULT_TENANT_ID, MergeBaseMode
from gitwright.exceptions import ProcessExitError


@dataclass
class RequestContext:
    """Per-request tracing and cancellation token."""

    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timeout_seconds: float | None = None
    cancel_event: asyncio.Event | None = None

    def cancel(self) -> None:
        """Signal cancellation to any process running under this context."""
        if self.cancel_event is None:
            self.cancel_event = asyncio.Event()
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()


@dataclass
class OperationContext:
    """Where and on whose behalf an operation runs."""

    working_directory: str | Path
    request_context: RequestContext = field(default_factory=RequestContext)
    tenant_id: str = DEFAULT_TENANT_ID


@dataclass(frozen=True)
class CommandSpec:
    """A git subcommand plus its ordered arguments."""

    command: str
    args: tuple[str, ...] = ()

    def argv(self, binary: str = "git") -> list[str]:
        """Full argument vector for the given git binary."""
        return [binary, self.command, *self.args]


@dataclass(frozen=True)
class ProcessOutcome:
    """Result of one git invocation, whatever its exit code."""

    command: tuple[str, ...]
    exit_code: int
    stdout: str
    stderr: str
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def check(self) -> ProcessOutcome:
        """Return self, or raise ProcessExitError on a non-zero exit."""
        if self.exit_code != 0:
            raise ProcessExitError(self.command, self.exit_code, self.stdout, self.stderr)
        return self


# =============================================================================
# Operation options
# =============================================================================


@dataclass(frozen=True)
class CommitAuthor:
    """Author override for a commit."""

    name: str
    email: str

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True)
class CommitOptions:
    """Options for creating a commit.

    ``sign=None`` defers to the provider's configured signing policy.
    """

    message: str
    amend: bool = False
    allow_empty: bool = False
    no_verify: bool = False
    author: CommitAuthor | None = None
    sign: bool | None = None
    force_unsigned_on_failure: bool = False


@dataclass(frozen=True)
class DiffOptions:
    """Options for diffing trees, the index, or the working tree."""

    source: str | None = None
    target: str | None = None
    path: str | None = None
    paths: tuple[str, ...] | None = None
    staged: bool = False
    include_untracked: bool = False
    stat: bool = False
    name_only: bool = False
    unified: int | None = None


@dataclass(frozen=True)
class MergeBaseOptions:
    """Refs to compare and how to query them."""

    refs: tuple[str, ...]
    mode: MergeBaseMode | str = MergeBaseMode.DEFAULT


@dataclass(frozen=True)
class CloneOptions:
    """Options for cloning a remote repository."""

    remote_url: str
    local_path: str | Path
    branch: str | None = None
    depth: int | None = None
    bare: bool = False
    mirror: bool = False
    recurse_submodules: bool = False


# =============================================================================
# Parsed values and operation results
# =============================================================================


@dataclass
class DiffStat:
    """Aggregate diffstat parsed from ``git diff --numstat``."""

    files: list[str] = field(default_factory=list)
    total_additions: int = 0
    total_deletions: int = 0
    binary_files: list[str] = field(default_factory=list)


@dataclass
class CommitMetadata:
    """Author, time and files decoded from the commit metadata codec."""

    author_name: str = ""
    timestamp: int = 0
    files_changed: list[str] = field(default_factory=list)


@dataclass
class OperationResult:
    """Base for operation results."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


@dataclass
class CommitResult(OperationResult):
    """Outcome of a commit."""

    success: bool
    commit_hash: str
    message: str
    author: str
    timestamp: int
    files_changed: list[str] = field(default_factory=list)
    signed: bool = False


@dataclass
class DiffResult(OperationResult):
    """Diff body plus aggregate counts."""

    diff: str
    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0
    binary: bool = False
    untracked_files: list[str] = field(default_factory=list)


@dataclass
class MergeBaseResult(OperationResult):
    """Common ancestor(s) or ancestry verdict."""

    success: bool
    merge_base: str | list[str] | None
    refs: list[str]
    mode: MergeBaseMode
    is_ancestor: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        if self.is_ancestor is None:
            del data["is_ancestor"]
        return data


@dataclass
class CloneResult(OperationResult):
    """Where a repository was cloned to."""

    success: bool
    local_path: str
    remote_url: str
    branch: str
