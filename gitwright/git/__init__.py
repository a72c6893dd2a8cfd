"""gitwright git package -- typed git operations over the git CLI.

Re-exports core classes for convenient access:
    from gitwright.git import CliGitProvider, OperationContext, CommitOptions
"""

from gitwright.git.command import build_git_command
from gitwright.git.config import GitCommitConfig, GitConfig
from gitwright.git.errors import git_operation, map_git_error
from gitwright.git.executor import GitExecutor
from gitwright.git.provider import CliGitProvider, GitProvider
from gitwright.git.types import (
    CloneOptions,
    CloneResult,
    CommandSpec,
    CommitAuthor,
    CommitOptions,
    CommitResult,
    DiffOptions,
    DiffResult,
    MergeBaseOptions,
    MergeBaseResult,
    OperationContext,
    ProcessOutcome,
    RequestContext,
)

__all__ = [
    "CliGitProvider",
    "GitProvider",
    "GitExecutor",
    "GitConfig",
    "GitCommitConfig",
    "build_git_command",
    "map_git_error",
    "git_operation",
    "CommandSpec",
    "ProcessOutcome",
    "RequestContext",
    "OperationContext",
    "CommitAuthor",
    "CommitOptions",
    "CommitResult",
    "DiffOptions",
    "DiffResult",
    "MergeBaseOptions",
    "MergeBaseResult",
    "CloneOptions",
    "CloneResult",
]
