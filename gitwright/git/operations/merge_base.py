"""Merge-base operation -- common ancestors and ancestry checks."""

from __future__ import annotations

from gitwright.constants import NOT_ANCESTOR_EXIT_CODE, MergeBaseMode
from gitwright.exceptions import ValidationError
from gitwright.git.command import build_git_command, ensure_not_option
from gitwright.git.errors import git_operation
from gitwright.git.operations.base import Executor, resolve_working_directory
from gitwright.git.parsers import parse_merge_base
from gitwright.git.types import MergeBaseOptions, MergeBaseResult, OperationContext, ProcessOutcome
from gitwright.logging import get_operation_logger

OPERATION = "merge-base"

MODE_FLAGS: dict[MergeBaseMode, list[str]] = {
    MergeBaseMode.DEFAULT: [],
    MergeBaseMode.ALL: ["--all"],
    MergeBaseMode.IS_ANCESTOR: ["--is-ancestor"],
}


def validate_merge_base(options: MergeBaseOptions) -> tuple[MergeBaseMode, list[str]]:
    """Check mode and ref count before anything is executed.

    Raises:
        ValidationError: On an unknown mode, no refs, a ref count other than
            two for is-ancestor, or an option-like ref
    """
    try:
        mode = MergeBaseMode(options.mode)
    except ValueError:
        raise ValidationError(
            f"Unknown merge-base mode: {options.mode!r}", field="mode", operation=OPERATION
        ) from None

    refs = list(options.refs)
    if len(refs) < 1:
        raise ValidationError("At least 1 ref required for merge-base", field="refs", operation=OPERATION)
    if mode is MergeBaseMode.IS_ANCESTOR and len(refs) != 2:
        raise ValidationError(
            f"is-ancestor mode requires exactly 2 refs, got {len(refs)}",
            field="refs",
            operation=OPERATION,
        )
    for ref in refs:
        ensure_not_option(ref, "refs", OPERATION)

    return mode, refs


def _is_no_common_ancestor(outcome: ProcessOutcome) -> bool:
    # Plain merge-base exits 1 silently when the histories share nothing
    return (
        outcome.exit_code == NOT_ANCESTOR_EXIT_CODE
        and not outcome.stdout.strip()
        and not outcome.stderr.strip()
    )


async def execute_merge_base(
    options: MergeBaseOptions,
    context: OperationContext,
    executor: Executor,
) -> MergeBaseResult:
    """Find common ancestor(s) or test ancestry between refs.

    Under is-ancestor, exit code 1 means "not an ancestor" and is returned
    as a successful result. Empty output in the other modes means there is
    no common ancestor and yields ``merge_base=None``.

    Args:
        options: Refs and mode
        context: Operation context
        executor: Runs the git command

    Returns:
        MergeBaseResult

    Raises:
        GitOperationError: Classified failure
    """
    log = get_operation_logger(OPERATION, context)

    with git_operation(OPERATION):
        mode, refs = validate_merge_base(options)
        cwd = resolve_working_directory(context, OPERATION)

        cmd = build_git_command("merge-base", [*MODE_FLAGS[mode], *refs])
        outcome = await executor.execute(cmd, cwd, context.request_context)

        if mode is MergeBaseMode.IS_ANCESTOR:
            if outcome.ok:
                return MergeBaseResult(success=True, merge_base=None, refs=refs, mode=mode, is_ancestor=True)
            if outcome.exit_code == NOT_ANCESTOR_EXIT_CODE:
                log.debug(f"{refs[0]} is not an ancestor of {refs[1]}")
                return MergeBaseResult(success=True, merge_base=None, refs=refs, mode=mode, is_ancestor=False)
            outcome.check()

        if not outcome.ok and not _is_no_common_ancestor(outcome):
            outcome.check()

        merge_base = parse_merge_base(outcome.stdout, mode)

    if merge_base is None:
        log.info(f"No merge-base found for {', '.join(refs)}")
    return MergeBaseResult(success=True, merge_base=merge_base, refs=refs, mode=mode)
