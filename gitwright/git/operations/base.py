"""Pieces shared by the operation orchestrators."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from gitwright.exceptions import GitEnvironmentError
from gitwright.git.types import CommandSpec, OperationContext, ProcessOutcome, RequestContext


class Executor(Protocol):
    """Anything that can run a CommandSpec (GitExecutor, test doubles)."""

    async def execute(
        self,
        spec: CommandSpec,
        working_directory: str | Path,
        context: RequestContext | None = None,
    ) -> ProcessOutcome: ...


def resolve_working_directory(context: OperationContext, operation: str) -> Path:
    """Resolve the context's working directory to an existing absolute path.

    Raises:
        GitEnvironmentError: If the directory does not exist
    """
    working_directory = Path(context.working_directory).expanduser().resolve()
    if not working_directory.is_dir():
        raise GitEnvironmentError(
            f"Working directory does not exist: {working_directory}",
            operation=operation,
            details={"path": str(working_directory)},
        )
    return working_directory
