"""Pytest configuration and fixtures for gitwright tests."""

import os
import subprocess
from collections.abc import Generator
from pathlib import Path

import pytest

from gitwright.git.config import GitConfig
from gitwright.git.types import OperationContext


def run_git(*args: str, cwd: Path | None = None) -> str:
    """Run git command safely without shell=True."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def init_repo(path: Path) -> Path:
    """Initialize a repository with an identity and no signing."""
    path.mkdir(parents=True, exist_ok=True)
    run_git("init", "-q", "-b", "main", cwd=path)
    run_git("config", "user.email", "test@test.com", cwd=path)
    run_git("config", "user.name", "Test", cwd=path)
    run_git("config", "commit.gpgsign", "false", cwd=path)
    return path


@pytest.fixture
def tmp_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository with one commit.

    Yields:
        Path to the temporary repository
    """
    orig_dir = os.getcwd()
    repo = init_repo(tmp_path / "repo")
    os.chdir(repo)

    (repo / "README.md").write_text("# Test Repo\n")
    run_git("add", "-A", cwd=repo)
    run_git("commit", "-q", "-m", "Initial commit", cwd=repo)

    yield repo

    os.chdir(orig_dir)


@pytest.fixture
def repo_context(tmp_repo: Path) -> OperationContext:
    """Operation context pointing at tmp_repo."""
    return OperationContext(working_directory=tmp_repo)


@pytest.fixture
def git_config() -> GitConfig:
    """Git configuration with a short timeout for tests."""
    return GitConfig(timeout_seconds=60, terminate_grace_seconds=1.0)
