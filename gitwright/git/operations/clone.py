"""Clone operation."""

from __future__ import annotations

from pathlib import Path

from gitwright.constants import DEFAULT_CLONE_BRANCH
from gitwright.exceptions import ValidationError
from gitwright.git.command import build_git_command, ensure_not_option
from gitwright.git.errors import git_operation
from gitwright.git.operations.base import Executor
from gitwright.git.types import CloneOptions, CloneResult, OperationContext
from gitwright.logging import get_operation_logger

OPERATION = "clone"


def resolve_clone_target(options: CloneOptions, context: OperationContext) -> Path:
    """Absolute target path; relative paths are taken from the context's working directory."""
    local_path = Path(options.local_path).expanduser()
    if not local_path.is_absolute():
        local_path = Path(context.working_directory).expanduser() / local_path
    return local_path.resolve()


def build_clone_args(options: CloneOptions, destination: str) -> list[str]:
    """Clone flags, then ``--``, the remote and the destination name."""
    if options.depth is not None and options.depth < 1:
        raise ValidationError("depth must be >= 1", field="depth", operation=OPERATION)

    args: list[str] = []
    if options.branch:
        args.extend(["--branch", ensure_not_option(options.branch, "branch", OPERATION)])
    if options.depth is not None:
        args.extend(["--depth", str(options.depth)])
    if options.bare:
        args.append("--bare")
    if options.mirror:
        args.append("--mirror")
    if options.recurse_submodules:
        args.append("--recurse-submodules")

    args.extend(["--", ensure_not_option(options.remote_url, "remote_url", OPERATION), destination])
    return args


async def execute_clone(
    options: CloneOptions,
    context: OperationContext,
    executor: Executor,
) -> CloneResult:
    """Clone a repository into ``options.local_path``.

    The target does not exist yet, so git runs in its parent directory with
    the final path segment as the destination argument.

    Args:
        options: Clone options
        context: Operation context
        executor: Runs the git command

    Returns:
        CloneResult with the absolute local path

    Raises:
        GitOperationError: Classified failure
    """
    log = get_operation_logger(OPERATION, context)

    with git_operation(OPERATION):
        target = resolve_clone_target(options, context)
        parent_dir = target.parent
        if not target.name:
            raise ValidationError(f"local_path has no final segment: {target}", field="local_path", operation=OPERATION)
        args = build_clone_args(options, target.name)

        cmd = build_git_command("clone", args)
        (await executor.execute(cmd, parent_dir, context.request_context)).check()

    log.info(f"Cloned {options.remote_url} into {target}")
    return CloneResult(
        success=True,
        local_path=str(target),
        remote_url=options.remote_url,
        branch=options.branch or DEFAULT_CLONE_BRANCH,
    )
