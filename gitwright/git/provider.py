"""Provider interface -- the stable per-operation contract callers consume."""

from __future__ import annotations

from typing import Protocol

from gitwright.git.config import GitConfig
from gitwright.git.executor import GitExecutor
from gitwright.git.operations import execute_clone, execute_commit, execute_diff, execute_merge_base
from gitwright.git.operations.base import Executor
from gitwright.git.types import (
    CloneOptions,
    CloneResult,
    CommitOptions,
    CommitResult,
    DiffOptions,
    DiffResult,
    MergeBaseOptions,
    MergeBaseResult,
    OperationContext,
)


class GitProvider(Protocol):
    """One async method per operation; failures are GitOperationError."""

    async def commit(self, options: CommitOptions, context: OperationContext) -> CommitResult: ...

    async def diff(self, options: DiffOptions, context: OperationContext) -> DiffResult: ...

    async def merge_base(self, options: MergeBaseOptions, context: OperationContext) -> MergeBaseResult: ...

    async def clone(self, options: CloneOptions, context: OperationContext) -> CloneResult: ...


class CliGitProvider:
    """GitProvider backed by the git command-line tool.

    Configuration is read once here and passed explicitly into each
    operation; nothing is mutated during a call.

    Args:
        config: Git configuration (binary, timeouts, default signing policy)
        executor: Executor override, mainly for tests
    """

    def __init__(self, config: GitConfig | None = None, executor: Executor | None = None) -> None:
        self.config = config or GitConfig()
        self.executor: Executor = executor or GitExecutor(
            binary=self.config.binary,
            timeout_seconds=self.config.timeout_seconds,
            terminate_grace_seconds=self.config.terminate_grace_seconds,
            env=self.config.env,
        )

    async def commit(self, options: CommitOptions, context: OperationContext) -> CommitResult:
        return await execute_commit(
            options,
            context,
            self.executor,
            sign_by_default=self.config.commit.sign,
        )

    async def diff(self, options: DiffOptions, context: OperationContext) -> DiffResult:
        return await execute_diff(options, context, self.executor)

    async def merge_base(self, options: MergeBaseOptions, context: OperationContext) -> MergeBaseResult:
        return await execute_merge_base(options, context, self.executor)

    async def clone(self, options: CloneOptions, context: OperationContext) -> CloneResult:
        return await execute_clone(options, context, self.executor)
