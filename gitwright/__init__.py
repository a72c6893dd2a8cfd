"""gitwright - git operation execution engine.

Runs git as a subprocess behind a typed async provider interface.
"""

__version__ = "0.1.0"
__author__ = "gitwright Team"

from gitwright.constants import ErrorKind, MergeBaseMode
from gitwright.exceptions import (
    CancellationError,
    ExecutionFailure,
    GitEnvironmentError,
    GitOperationError,
    GitwrightError,
    ValidationError,
)

__all__ = [
    "__version__",
    "ErrorKind",
    "MergeBaseMode",
    # Errors
    "GitwrightError",
    "GitOperationError",
    "ValidationError",
    "GitEnvironmentError",
    "ExecutionFailure",
    "CancellationError",
]
