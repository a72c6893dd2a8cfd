"""gitwright exception hierarchy."""

from collections.abc import Sequence
from typing import Any

from gitwright.constants import ErrorKind


class GitwrightError(Exception):
    """Base exception for all gitwright errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(GitwrightError):
    """Error in gitwright configuration."""

    pass


class ProcessSpawnError(GitwrightError):
    """The git binary could not be started at all."""

    def __init__(self, message: str, command: Sequence[str], error: OSError) -> None:
        super().__init__(message, {"command": " ".join(command), "errno": error.errno})
        self.command = tuple(command)
        self.error = error


class ProcessExitError(GitwrightError):
    """git ran and exited non-zero.

    Raised by ``ProcessOutcome.check()``. Not yet classified: the error mapper
    turns it into a ``GitOperationError``.
    """

    def __init__(self, command: Sequence[str], exit_code: int, stdout: str = "", stderr: str = "") -> None:
        stderr_text = stderr.strip()
        message = stderr_text or f"Command exited with code {exit_code}"
        super().__init__(message, {"command": " ".join(command), "exit_code": exit_code})
        self.command = tuple(command)
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class GitOperationError(GitwrightError):
    """Classified failure of a provider operation.

    Attributes:
        kind: Taxonomy bucket the failure belongs to
        operation: Name of the operation that failed (commit, diff, ...)
        cause: Original exception, kept for diagnostics
    """

    kind: ErrorKind = ErrorKind.EXECUTION

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.operation = operation
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "operation": self.operation,
            "cause": str(self.cause) if self.cause is not None else None,
            "details": self.details,
        }


class ValidationError(GitOperationError):
    """Options were malformed or insufficient; nothing was executed."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        field: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, operation=operation, details=details)
        self.field = field


class GitEnvironmentError(GitOperationError):
    """git is missing, not executable, or the working directory is unusable."""

    kind = ErrorKind.ENVIRONMENT


class ExecutionFailure(GitOperationError):
    """git ran and failed in a way that is not an expected outcome."""

    kind = ErrorKind.EXECUTION

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        cause: BaseException | None = None,
        exit_code: int | None = None,
        stderr: str = "",
        command: Sequence[str] | None = None,
    ) -> None:
        super().__init__(
            message,
            operation=operation,
            cause=cause,
            details={"exit_code": exit_code} if exit_code is not None else None,
        )
        self.exit_code = exit_code
        self.stderr = stderr
        self.command = tuple(command) if command else None


class CancellationError(GitOperationError):
    """The request was cancelled or timed out; the child process was terminated."""

    kind = ErrorKind.CANCELLED

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(
            message,
            operation=operation,
            details={"timeout_seconds": timeout_seconds} if timeout_seconds is not None else None,
        )
        self.timeout_seconds = timeout_seconds
