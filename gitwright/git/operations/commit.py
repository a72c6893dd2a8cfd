"""Commit operation with signed-first, optional unsigned fallback."""

from __future__ import annotations

from gitwright.exceptions import ValidationError
from gitwright.git.command import build_git_command
from gitwright.git.errors import git_operation
from gitwright.git.operations.base import Executor, resolve_working_directory
from gitwright.git.parsers import commit_metadata_format, parse_commit_metadata
from gitwright.git.types import CommitOptions, CommitResult, OperationContext
from gitwright.logging import get_operation_logger

OPERATION = "commit"


def build_commit_args(options: CommitOptions) -> list[str]:
    """Arguments shared by the signed and unsigned attempts."""
    args = ["-m", options.message]

    if options.amend:
        args.append("--amend")
    if options.allow_empty:
        args.append("--allow-empty")
    if options.no_verify:
        args.append("--no-verify")
    if options.author:
        args.append(f"--author={options.author}")

    return args


async def execute_commit(
    options: CommitOptions,
    context: OperationContext,
    executor: Executor,
    *,
    sign_by_default: bool = False,
) -> CommitResult:
    """Create a commit, then read back its hash and metadata.

    When signing is requested (explicitly or by ``sign_by_default``) the
    signed attempt runs first. If it fails and
    ``options.force_unsigned_on_failure`` is set, exactly one unsigned attempt
    follows; otherwise the signed attempt's error is raised.

    Args:
        options: Commit options
        context: Operation context
        executor: Runs the git commands
        sign_by_default: Signing policy used when ``options.sign`` is None

    Returns:
        CommitResult for the new HEAD commit

    Raises:
        GitOperationError: Classified failure
    """
    log = get_operation_logger(OPERATION, context)

    with git_operation(OPERATION):
        if not options.message.strip():
            raise ValidationError("Commit message must not be empty", field="message", operation=OPERATION)

        cwd = resolve_working_directory(context, OPERATION)
        request = context.request_context
        args = build_commit_args(options)

        should_sign = options.sign if options.sign is not None else sign_by_default
        signed = False

        if should_sign:
            cmd = build_git_command("commit", [*args, "--gpg-sign"])
            outcome = await executor.execute(cmd, cwd, request)
            if outcome.ok:
                signed = True
            elif options.force_unsigned_on_failure:
                log.warning(f"Signed commit failed, retrying unsigned: {outcome.stderr.strip()}")
            else:
                outcome.check()

        if not signed:
            cmd = build_git_command("commit", [*args, "--no-gpg-sign"])
            (await executor.execute(cmd, cwd, request)).check()

        # The commit command's own output is not a stable format; ask HEAD instead
        hash_outcome = await executor.execute(build_git_command("rev-parse", ["HEAD"]), cwd, request)
        commit_hash = hash_outcome.check().stdout.strip()

        show_cmd = build_git_command("show", [commit_metadata_format(), "--name-only", commit_hash])
        show_outcome = await executor.execute(show_cmd, cwd, request)
        metadata = parse_commit_metadata(show_outcome.check().stdout)

    log.info(f"Created commit {commit_hash[:8]} ({'signed' if signed else 'unsigned'})")
    return CommitResult(
        success=True,
        commit_hash=commit_hash,
        message=options.message,
        author=metadata.author_name,
        timestamp=metadata.timestamp,
        files_changed=metadata.files_changed,
        signed=signed,
    )
