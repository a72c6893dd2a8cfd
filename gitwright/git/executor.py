"""Process executor -- runs git as a child process and captures its output.

A non-zero exit is never raised here. Every invocation produces a
ProcessOutcome and the calling operation decides which exit codes are
expected results and which are failures.
"""

from __future__ import annotations

import asyncio
import os
import time
from pathlib import Path
from typing import Any

from gitwright.constants import (
    DEFAULT_GIT_BINARY,
    DEFAULT_TERMINATE_GRACE_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
)
from gitwright.exceptions import CancellationError, ProcessSpawnError
from gitwright.git.types import CommandSpec, ProcessOutcome, RequestContext
from gitwright.logging import get_logger

logger = get_logger("git.executor")


class GitExecutor:
    """Async runner for git invocations.

    Args:
        binary: git executable to run
        timeout_seconds: Default timeout when the request context sets none
        terminate_grace_seconds: Time between SIGTERM and SIGKILL
        env: Extra environment variables layered over the inherited environment
    """

    def __init__(
        self,
        binary: str = DEFAULT_GIT_BINARY,
        timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
        terminate_grace_seconds: float = DEFAULT_TERMINATE_GRACE_SECONDS,
        env: dict[str, str] | None = None,
    ) -> None:
        self.binary = binary
        self.timeout_seconds = timeout_seconds
        self.terminate_grace_seconds = terminate_grace_seconds
        self.env = env or {}

    def _build_env(self) -> dict[str, str]:
        exec_env = os.environ.copy()
        # Never block on a credential prompt; there is no terminal to answer it
        exec_env["GIT_TERMINAL_PROMPT"] = "0"
        exec_env.update(self.env)
        return exec_env

    async def execute(
        self,
        spec: CommandSpec,
        working_directory: str | Path,
        context: RequestContext | None = None,
    ) -> ProcessOutcome:
        """Run one git command to completion.

        Args:
            spec: Command to run
            working_directory: Directory the child process runs in
            context: Request context carrying timeout and cancellation

        Returns:
            ProcessOutcome with exit code and complete stdout/stderr

        Raises:
            ProcessSpawnError: If the process could not be started
            CancellationError: If the context was cancelled or timed out
        """
        context = context or RequestContext()
        argv = spec.argv(self.binary)
        timeout = context.timeout_seconds if context.timeout_seconds is not None else self.timeout_seconds
        start_time = time.monotonic()

        logger.debug(f"Running: {' '.join(argv)} (cwd={working_directory})")

        if context.cancelled:
            raise CancellationError(f"Request {context.request_id} cancelled before {spec.command} started")

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                cwd=str(working_directory),
                env=self._build_env(),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (FileNotFoundError, PermissionError, NotADirectoryError) as e:
            raise ProcessSpawnError(f"Failed to start {argv[0]}: {e}", argv, e) from e

        communicate = asyncio.ensure_future(process.communicate())
        waiters: set[asyncio.Future[Any]] = {communicate}
        cancel_waiter: asyncio.Future[Any] | None = None
        if context.cancel_event is not None:
            cancel_waiter = asyncio.ensure_future(context.cancel_event.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            # Caller's task was cancelled; do not leave an orphaned child behind
            await self._terminate(process, communicate)
            raise
        finally:
            if cancel_waiter is not None:
                cancel_waiter.cancel()

        if communicate not in done:
            await self._terminate(process, communicate)
            if context.cancelled:
                raise CancellationError(f"Request {context.request_id} cancelled during {spec.command}")
            raise CancellationError(
                f"git {spec.command} timed out after {timeout}s",
                timeout_seconds=timeout,
            )

        stdout_bytes, stderr_bytes = communicate.result()
        outcome = ProcessOutcome(
            command=tuple(argv),
            exit_code=process.returncode if process.returncode is not None else -1,
            stdout=stdout_bytes.decode("utf-8", errors="replace"),
            stderr=stderr_bytes.decode("utf-8", errors="replace"),
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )
        self._log_execution(outcome)
        return outcome

    async def _terminate(
        self,
        process: asyncio.subprocess.Process,
        communicate: asyncio.Future[Any],
    ) -> None:
        """Stop the child: SIGTERM, then SIGKILL after the grace period."""
        if process.returncode is None:
            try:
                process.terminate()
                try:
                    await asyncio.wait_for(process.wait(), timeout=self.terminate_grace_seconds)
                except TimeoutError:
                    logger.warning(f"Process {process.pid} ignored SIGTERM, killing")
                    process.kill()
                    await process.wait()
            except ProcessLookupError:
                pass
        communicate.cancel()
        logger.warning(f"Terminated process {process.pid}")

    def _log_execution(self, outcome: ProcessOutcome) -> None:
        cmd_preview = " ".join(outcome.command)[:100]
        if outcome.ok:
            logger.debug(f"Command OK: {cmd_preview} (exit={outcome.exit_code}, {outcome.duration_ms}ms)")
        else:
            logger.warning(f"Command FAILED: {cmd_preview} (exit={outcome.exit_code})")
