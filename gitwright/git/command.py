"""Command builder -- structured arguments to a git argument vector."""

from collections.abc import Iterable

from gitwright.exceptions import ValidationError
from gitwright.git.types import CommandSpec


def build_git_command(command: str, args: Iterable[str] = ()) -> CommandSpec:
    """Build a CommandSpec for a git subcommand.

    Each argument stays a discrete argv element; nothing is ever joined into
    a shell string, so spaces, quotes and metacharacters cannot change the
    shape of the invocation.

    Args:
        command: git subcommand (e.g. "commit", "diff")
        args: Ordered flags and positional arguments

    Returns:
        Immutable CommandSpec
    """
    return CommandSpec(command=command, args=tuple(args))


def ensure_not_option(value: str, field: str, operation: str) -> str:
    """Reject values git would parse as a flag.

    Refs, revisions and URLs are positional arguments; one starting with
    ``-`` would be read as an option.

    Raises:
        ValidationError: If the value is empty or starts with ``-``
    """
    if not value or not value.strip():
        raise ValidationError(f"{field} must not be empty", field=field, operation=operation)
    if value.startswith("-"):
        raise ValidationError(
            f"{field} must not start with '-': {value!r}",
            field=field,
            operation=operation,
        )
    return value
