"""gitwright command-line interface."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, TypeVar

import click
from rich.console import Console
from rich.table import Table

from gitwright import __version__
from gitwright.config import GitwrightConfig
from gitwright.constants import CLI_EXIT_CODES, MergeBaseMode
from gitwright.exceptions import ConfigurationError, GitOperationError
from gitwright.git.provider import CliGitProvider
from gitwright.git.types import (
    CloneOptions,
    CommitAuthor,
    CommitOptions,
    DiffOptions,
    MergeBaseOptions,
    OperationContext,
    OperationResult,
    RequestContext,
)
from gitwright.logging import get_logger, setup_logging

console = Console()
error_console = Console(stderr=True)
logger = get_logger("cli")

T = TypeVar("T", bound=OperationResult)

repo_option = click.option(
    "--repo",
    "-C",
    "repo",
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="Repository working directory",
)
timeout_option = click.option("--timeout", type=float, default=None, help="Timeout in seconds for each git process")


def _context(repo: Path, timeout: float | None, tenant: str | None) -> OperationContext:
    request = RequestContext(timeout_seconds=timeout)
    if tenant:
        return OperationContext(working_directory=repo, request_context=request, tenant_id=tenant)
    return OperationContext(working_directory=repo, request_context=request)


def _run(ctx: click.Context, coro: Coroutine[Any, Any, T]) -> T:
    """Run an operation, turning domain errors into an exit status."""
    try:
        return asyncio.run(coro)
    except GitOperationError as e:
        logger.debug(f"Operation failed: {e.to_dict()}")
        error_console.print(f"[red]{e.kind.value} error:[/red] {e.message}")
        ctx.exit(CLI_EXIT_CODES[e.kind])


def _emit(ctx: click.Context, result: OperationResult, table: Table | None = None, text: str | None = None) -> None:
    if ctx.obj["json"]:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    if table is not None:
        console.print(table)
    if text:
        click.echo(text, nl=not text.endswith("\n"))


@click.group()
@click.version_option(version=__version__, prog_name="gitwright")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Config file")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "error"]),
    default=None,
    help="Override configured log level",
)
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON")
@click.option("--tenant", default=None, help="Tenant id recorded in logs")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    json_output: bool,
    tenant: str | None,
) -> None:
    """gitwright - typed git operations over the git CLI."""
    ctx.ensure_object(dict)

    try:
        config = GitwrightConfig.load(config_path)
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e

    setup_logging(
        level=log_level or config.logging.level,
        log_dir=config.logging.directory if config.logging.structured_output else None,
        json_output=config.logging.structured_output,
        max_bytes=config.logging.max_log_size_mb * 1024 * 1024,
    )

    ctx.obj["config"] = config
    ctx.obj["provider"] = CliGitProvider(config.git)
    ctx.obj["json"] = json_output
    ctx.obj["tenant"] = tenant


@cli.command()
@repo_option
@timeout_option
@click.option("--message", "-m", required=True, help="Commit message")
@click.option("--amend", is_flag=True, help="Amend the previous commit")
@click.option("--allow-empty", is_flag=True, help="Allow a commit with no changes")
@click.option("--no-verify", is_flag=True, help="Skip pre-commit and commit-msg hooks")
@click.option("--author-name", default=None, help="Override author name")
@click.option("--author-email", default=None, help="Override author email")
@click.option("--sign/--no-sign", default=None, help="Sign the commit (default: configured policy)")
@click.option("--force-unsigned-on-failure", is_flag=True, help="Retry unsigned if signing fails")
@click.pass_context
def commit(
    ctx: click.Context,
    repo: Path,
    timeout: float | None,
    message: str,
    amend: bool,
    allow_empty: bool,
    no_verify: bool,
    author_name: str | None,
    author_email: str | None,
    sign: bool | None,
    force_unsigned_on_failure: bool,
) -> None:
    """Create a commit from the staged changes."""
    if bool(author_name) != bool(author_email):
        raise click.UsageError("--author-name and --author-email must be given together")

    options = CommitOptions(
        message=message,
        amend=amend,
        allow_empty=allow_empty,
        no_verify=no_verify,
        author=CommitAuthor(author_name, author_email) if author_name and author_email else None,
        sign=sign,
        force_unsigned_on_failure=force_unsigned_on_failure,
    )
    provider: CliGitProvider = ctx.obj["provider"]
    result = _run(ctx, provider.commit(options, _context(repo, timeout, ctx.obj["tenant"])))

    table = Table(title="Commit", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in result.to_dict().items():
        if key == "files_changed":
            value = ", ".join(value) or "-"
        table.add_row(key, str(value))
    _emit(ctx, result, table=table)


@cli.command()
@repo_option
@timeout_option
@click.option("--source", default=None, help="Source commit/branch")
@click.option("--target", default=None, help="Target commit/branch")
@click.option("--path", "paths", multiple=True, help="Limit to a path (only one supported)")
@click.option("--staged", is_flag=True, help="Diff staged changes")
@click.option("--include-untracked", is_flag=True, help="Report untracked files too (working-tree diffs only)")
@click.option("--stat", is_flag=True, help="Show a diffstat instead of the patch")
@click.option("--name-only", is_flag=True, help="Show only changed file names")
@click.option("--unified", "-U", type=int, default=None, help="Context lines")
@click.pass_context
def diff(
    ctx: click.Context,
    repo: Path,
    timeout: float | None,
    source: str | None,
    target: str | None,
    paths: tuple[str, ...],
    staged: bool,
    include_untracked: bool,
    stat: bool,
    name_only: bool,
    unified: int | None,
) -> None:
    """Show changes between commits, the index and the working tree."""
    options = DiffOptions(
        source=source,
        target=target,
        paths=paths or None,
        staged=staged,
        include_untracked=include_untracked,
        stat=stat,
        name_only=name_only,
        unified=unified,
    )
    provider: CliGitProvider = ctx.obj["provider"]
    result = _run(ctx, provider.diff(options, _context(repo, timeout, ctx.obj["tenant"])))

    summary = (
        f"{result.files_changed} file(s) changed, "
        f"{result.insertions} insertion(s), {result.deletions} deletion(s)"
    )
    _emit(ctx, result, text=result.diff)
    if not ctx.obj["json"]:
        console.print(f"[dim]{summary}[/dim]")


@cli.command("merge-base")
@repo_option
@timeout_option
@click.argument("refs", nargs=-1, required=True)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in MergeBaseMode]),
    default=MergeBaseMode.DEFAULT.value,
    help="default: best ancestor, all: every ancestor, is-ancestor: ancestry check",
)
@click.pass_context
def merge_base(ctx: click.Context, repo: Path, timeout: float | None, refs: tuple[str, ...], mode: str) -> None:
    """Find common ancestors of REFS or check ancestry."""
    options = MergeBaseOptions(refs=refs, mode=MergeBaseMode(mode))
    provider: CliGitProvider = ctx.obj["provider"]
    result = _run(ctx, provider.merge_base(options, _context(repo, timeout, ctx.obj["tenant"])))

    if result.is_ancestor is not None:
        text = "yes" if result.is_ancestor else "no"
    elif result.merge_base is None:
        text = "(no common ancestor)"
    elif isinstance(result.merge_base, list):
        text = "\n".join(result.merge_base)
    else:
        text = result.merge_base
    _emit(ctx, result, text=text)


@cli.command()
@timeout_option
@click.argument("remote_url")
@click.argument("local_path", type=click.Path(path_type=Path))
@click.option("--branch", "-b", default=None, help="Branch to check out")
@click.option("--depth", type=int, default=None, help="Shallow clone depth")
@click.option("--bare", is_flag=True, help="Create a bare repository")
@click.option("--mirror", is_flag=True, help="Create a mirror repository")
@click.option("--recurse-submodules", is_flag=True, help="Initialize submodules")
@click.pass_context
def clone(
    ctx: click.Context,
    timeout: float | None,
    remote_url: str,
    local_path: Path,
    branch: str | None,
    depth: int | None,
    bare: bool,
    mirror: bool,
    recurse_submodules: bool,
) -> None:
    """Clone REMOTE_URL into LOCAL_PATH."""
    options = CloneOptions(
        remote_url=remote_url,
        local_path=local_path,
        branch=branch,
        depth=depth,
        bare=bare,
        mirror=mirror,
        recurse_submodules=recurse_submodules,
    )
    provider: CliGitProvider = ctx.obj["provider"]
    result = _run(ctx, provider.clone(options, _context(Path.cwd(), timeout, ctx.obj["tenant"])))
    _emit(ctx, result, text=f"Cloned into {result.local_path}")


if __name__ == "__main__":
    cli()
