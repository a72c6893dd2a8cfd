"""Diff operation -- diff body plus an always-run numstat for the counts."""

from __future__ import annotations

from gitwright.exceptions import ValidationError
from gitwright.git.command import build_git_command, ensure_not_option
from gitwright.git.errors import git_operation
from gitwright.git.operations.base import Executor, resolve_working_directory
from gitwright.git.parsers import parse_hash_lines, parse_numstat
from gitwright.git.types import DiffOptions, DiffResult, OperationContext
from gitwright.logging import get_operation_logger

OPERATION = "diff"

# Flags that only shape the body and are dropped for the numstat invocation
BODY_ONLY_FLAGS = ("--name-only", "--stat")


def resolve_diff_path(options: DiffOptions) -> str | None:
    """Pick the single path filter from ``path`` and ``paths`` together.

    Raises:
        ValidationError: If more than one distinct path was given
    """
    candidates = [options.path] if options.path else []
    candidates.extend(options.paths or ())
    distinct = list(dict.fromkeys(candidates))
    if len(distinct) > 1:
        raise ValidationError(
            f"Only a single path filter is supported, got {len(distinct)}",
            field="paths",
            operation=OPERATION,
        )
    return distinct[0] if distinct else None


def validate_untracked(options: DiffOptions) -> None:
    """Untracked files only belong to a diff against the working tree.

    Raises:
        ValidationError: If include_untracked is combined with a target or staged
    """
    if options.include_untracked and (options.target or options.staged):
        raise ValidationError(
            "include_untracked requires a working-tree diff (no target, not staged)",
            field="include_untracked",
            operation=OPERATION,
        )


def build_diff_args(options: DiffOptions, path: str | None) -> tuple[list[str], list[str], list[str]]:
    """Split diff arguments into (flags, revisions, pathspec).

    Flags always come before revisions, and the pathspec is introduced by
    ``--`` so neither can be mistaken for the other.
    """
    if options.unified is not None and options.unified < 0:
        raise ValidationError("unified must be >= 0", field="unified", operation=OPERATION)

    flags: list[str] = []
    if options.staged:
        flags.append("--cached")
    if options.name_only:
        flags.append("--name-only")
    elif options.stat:
        flags.append("--stat")
    if options.unified is not None and not options.name_only:
        flags.append(f"--unified={options.unified}")

    revisions: list[str] = []
    if options.source:
        revisions.append(ensure_not_option(options.source, "source", OPERATION))
    if options.target:
        revisions.append(ensure_not_option(options.target, "target", OPERATION))

    pathspec = ["--", path] if path else []
    return flags, revisions, pathspec


async def execute_diff(
    options: DiffOptions,
    context: OperationContext,
    executor: Executor,
) -> DiffResult:
    """Show changes and aggregate insertion/deletion counts.

    Args:
        options: Diff options
        context: Operation context
        executor: Runs the git commands

    Returns:
        DiffResult; identical trees give an empty diff and zero counts

    Raises:
        GitOperationError: Classified failure
    """
    log = get_operation_logger(OPERATION, context)

    with git_operation(OPERATION):
        path = resolve_diff_path(options)
        validate_untracked(options)
        flags, revisions, pathspec = build_diff_args(options, path)
        cwd = resolve_working_directory(context, OPERATION)
        request = context.request_context

        diff_cmd = build_git_command("diff", [*flags, *revisions, *pathspec])
        diff_outcome = (await executor.execute(diff_cmd, cwd, request)).check()

        stat_flags = [f for f in flags if f not in BODY_ONLY_FLAGS and not f.startswith("--unified")]
        stat_cmd = build_git_command("diff", [*stat_flags, "--numstat", *revisions, *pathspec])
        stat_outcome = (await executor.execute(stat_cmd, cwd, request)).check()
        stats = parse_numstat(stat_outcome.stdout)

        untracked: list[str] = []
        if options.include_untracked:
            ls_cmd = build_git_command("ls-files", ["--others", "--exclude-standard", *pathspec])
            ls_outcome = (await executor.execute(ls_cmd, cwd, request)).check()
            untracked = [f for f in parse_hash_lines(ls_outcome.stdout) if f not in stats.files]

    binary = bool(stats.binary_files)
    log.debug(
        f"Diff: {len(stats.files)} files, +{stats.total_additions}/-{stats.total_deletions}"
        + (f", {len(untracked)} untracked" if untracked else "")
    )
    return DiffResult(
        diff=diff_outcome.stdout,
        files_changed=len(stats.files) + len(untracked),
        insertions=stats.total_additions,
        deletions=stats.total_deletions,
        binary=binary,
        untracked_files=untracked,
    )
