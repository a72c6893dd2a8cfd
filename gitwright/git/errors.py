"""Error mapper -- classifies execution failures into the domain taxonomy.

Every operation funnels its failures through ``git_operation`` so callers see
the same small set of error kinds whichever operation failed.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from gitwright.constants import ErrorKind
from gitwright.exceptions import (
    ExecutionFailure,
    GitEnvironmentError,
    GitOperationError,
    ProcessExitError,
    ProcessSpawnError,
)
from gitwright.logging import get_logger

logger = get_logger("git.errors")

# stderr fragments meaning the working directory cannot be used as a repository
ENVIRONMENT_PATTERNS: list[str] = [
    "not a git repository",
    "detected dubious ownership",
]


def classify_stderr(stderr: str) -> ErrorKind:
    """Return ENVIRONMENT for repository/setup problems, else EXECUTION."""
    lowered = stderr.lower()
    for pattern in ENVIRONMENT_PATTERNS:
        if pattern in lowered:
            return ErrorKind.ENVIRONMENT
    return ErrorKind.EXECUTION


def map_git_error(error: BaseException, operation: str) -> GitOperationError:
    """Map a caught failure to a GitOperationError.

    Args:
        error: Exception raised while running the operation
        operation: Operation name used in messages (commit, diff, ...)

    Returns:
        The classified error. Already-classified errors are returned as is;
        everything else keeps the original exception as ``cause``.
    """
    if isinstance(error, GitOperationError):
        if error.operation is None:
            error.operation = operation
        return error

    if isinstance(error, ProcessSpawnError):
        return GitEnvironmentError(
            f"git {operation} could not start: {error.error.strerror or error.message}",
            operation=operation,
            cause=error,
            details=error.details,
        )

    if isinstance(error, OSError):
        return GitEnvironmentError(f"git {operation} failed: {error}", operation=operation, cause=error)

    if isinstance(error, ProcessExitError):
        stderr = error.stderr.strip()
        message = stderr or error.stdout.strip() or f"git {operation} failed with exit code {error.exit_code}"
        if stderr and classify_stderr(stderr) is ErrorKind.ENVIRONMENT:
            return GitEnvironmentError(
                message,
                operation=operation,
                cause=error,
                details={"exit_code": error.exit_code},
            )
        return ExecutionFailure(
            message,
            operation=operation,
            cause=error,
            exit_code=error.exit_code,
            stderr=error.stderr,
            command=error.command,
        )

    return ExecutionFailure(str(error) or f"git {operation} failed", operation=operation, cause=error)


@contextmanager
def git_operation(operation: str) -> Iterator[None]:
    """Translate any failure inside the block through map_git_error."""
    try:
        yield
    except GitOperationError as e:
        if e.operation is None:
            e.operation = operation
        raise
    except Exception as e:  # noqa: BLE001
        mapped = map_git_error(e, operation)
        logger.debug(f"{operation} failed ({mapped.kind.value}): {mapped.message}")
        raise mapped from e
