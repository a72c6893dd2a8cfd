"""Integration tests running the provider against real repositories."""

import asyncio
from pathlib import Path

import pytest

from gitwright.constants import MergeBaseMode
from gitwright.exceptions import ExecutionFailure, GitEnvironmentError, ValidationError
from gitwright.git.config import GitConfig
from gitwright.git.provider import CliGitProvider
from gitwright.git.types import (
    CloneOptions,
    CommitOptions,
    DiffOptions,
    MergeBaseOptions,
    OperationContext,
)
from tests.conftest import run_git

pytestmark = pytest.mark.integration


@pytest.fixture
def provider(git_config: GitConfig) -> CliGitProvider:
    return CliGitProvider(git_config)


def commit_file(repo: Path, name: str, content: str, message: str) -> str:
    (repo / name).write_text(content)
    run_git("add", name, cwd=repo)
    run_git("commit", "-q", "-m", message, cwd=repo)
    return run_git("rev-parse", "HEAD", cwd=repo).strip()


class TestCommit:
    """Commit against a real repository."""

    def test_commit_staged_file(self, tmp_repo: Path, repo_context: OperationContext, provider: CliGitProvider) -> None:
        (tmp_repo / "app.py").write_text("print('hi')\n")
        run_git("add", "app.py", cwd=tmp_repo)

        result = asyncio.run(provider.commit(CommitOptions(message="feat: add app"), repo_context))

        assert result.success is True
        assert result.commit_hash == run_git("rev-parse", "HEAD", cwd=tmp_repo).strip()
        assert result.author == "Test"
        assert result.timestamp > 0
        assert result.files_changed == ["app.py"]
        assert result.signed is False

    def test_nothing_to_commit(self, repo_context: OperationContext, provider: CliGitProvider) -> None:
        with pytest.raises(ExecutionFailure):
            asyncio.run(provider.commit(CommitOptions(message="empty"), repo_context))

    def test_allow_empty(self, repo_context: OperationContext, provider: CliGitProvider) -> None:
        result = asyncio.run(provider.commit(CommitOptions(message="empty", allow_empty=True), repo_context))
        assert result.files_changed == []

    def test_signing_failure_falls_back(
        self, tmp_repo: Path, repo_context: OperationContext, provider: CliGitProvider
    ) -> None:
        run_git("config", "gpg.program", "false", cwd=tmp_repo)
        (tmp_repo / "a.txt").write_text("a\n")
        run_git("add", "a.txt", cwd=tmp_repo)

        options = CommitOptions(message="signed?", sign=True, force_unsigned_on_failure=True)
        result = asyncio.run(provider.commit(options, repo_context))

        assert result.success is True
        assert result.signed is False
        assert run_git("log", "-1", "--format=%s", cwd=tmp_repo).strip() == "signed?"

    def test_signing_failure_without_fallback(
        self, tmp_repo: Path, repo_context: OperationContext, provider: CliGitProvider
    ) -> None:
        run_git("config", "gpg.program", "false", cwd=tmp_repo)
        (tmp_repo / "a.txt").write_text("a\n")
        run_git("add", "a.txt", cwd=tmp_repo)

        with pytest.raises(ExecutionFailure):
            asyncio.run(provider.commit(CommitOptions(message="signed", sign=True), repo_context))

        assert run_git("log", "-1", "--format=%s", cwd=tmp_repo).strip() == "Initial commit"

    def test_not_a_repository(self, tmp_path: Path, provider: CliGitProvider) -> None:
        plain = tmp_path / "plain"
        plain.mkdir()
        with pytest.raises(GitEnvironmentError):
            asyncio.run(provider.commit(CommitOptions(message="m"), OperationContext(plain)))


class TestDiff:
    """Diff against a real repository."""

    def test_no_changes(self, repo_context: OperationContext, provider: CliGitProvider) -> None:
        result = asyncio.run(provider.diff(DiffOptions(), repo_context))

        assert result.diff == ""
        assert (result.files_changed, result.insertions, result.deletions) == (0, 0, 0)

    def test_working_tree_changes(self, tmp_repo: Path, repo_context: OperationContext, provider: CliGitProvider) -> None:
        (tmp_repo / "README.md").write_text("# Test Repo\nmore\nlines\n")

        result = asyncio.run(provider.diff(DiffOptions(), repo_context))

        assert "+more" in result.diff
        assert result.files_changed == 1
        assert result.insertions == 2
        assert result.deletions == 0

    def test_between_commits_with_path(
        self, tmp_repo: Path, repo_context: OperationContext, provider: CliGitProvider
    ) -> None:
        first = run_git("rev-parse", "HEAD", cwd=tmp_repo).strip()
        (tmp_repo / "src").mkdir()
        (tmp_repo / "src" / "a.py").write_text("a = 1\n")
        (tmp_repo / "b.txt").write_text("b\n")
        run_git("add", "-A", cwd=tmp_repo)
        run_git("commit", "-q", "-m", "two files", cwd=tmp_repo)

        result = asyncio.run(provider.diff(DiffOptions(source=first, target="HEAD", paths=("src",)), repo_context))

        assert result.files_changed == 1
        assert result.insertions == 1
        assert "b.txt" not in result.diff

    def test_working_tree_and_untracked(
        self, tmp_repo: Path, repo_context: OperationContext, provider: CliGitProvider
    ) -> None:
        (tmp_repo / "README.md").write_text("# Test Repo\nedited\n")
        (tmp_repo / "loose.txt").write_text("l\n")

        result = asyncio.run(provider.diff(DiffOptions(include_untracked=True), repo_context))

        assert "README.md" in result.diff
        assert result.untracked_files == ["loose.txt"]
        assert result.files_changed == 2

    def test_untracked_rejected_between_commits(
        self, tmp_repo: Path, repo_context: OperationContext, provider: CliGitProvider
    ) -> None:
        commit_file(tmp_repo, "README.md", "# Test Repo\nchanged\n", "edit readme")
        (tmp_repo / "scratch.txt").write_text("s\n")

        with pytest.raises(ValidationError):
            asyncio.run(
                provider.diff(DiffOptions(source="HEAD~1", target="HEAD", include_untracked=True), repo_context)
            )

        result = asyncio.run(provider.diff(DiffOptions(source="HEAD~1", target="HEAD"), repo_context))
        assert result.files_changed == 1
        assert result.untracked_files == []

    def test_untracked_rejected_for_staged(
        self, tmp_repo: Path, repo_context: OperationContext, provider: CliGitProvider
    ) -> None:
        (tmp_repo / "staged.txt").write_text("s\n")
        run_git("add", "staged.txt", cwd=tmp_repo)

        with pytest.raises(ValidationError):
            asyncio.run(provider.diff(DiffOptions(staged=True, include_untracked=True), repo_context))

    def test_multiple_paths_rejected(self, repo_context: OperationContext, provider: CliGitProvider) -> None:
        with pytest.raises(ValidationError):
            asyncio.run(provider.diff(DiffOptions(paths=("a", "b")), repo_context))


class TestMergeBase:
    """Merge-base against a real repository."""

    def test_branch_point(self, tmp_repo: Path, repo_context: OperationContext, provider: CliGitProvider) -> None:
        base = run_git("rev-parse", "HEAD", cwd=tmp_repo).strip()
        run_git("checkout", "-q", "-b", "feature", cwd=tmp_repo)
        commit_file(tmp_repo, "f.txt", "f\n", "feature work")
        run_git("checkout", "-q", "main", cwd=tmp_repo)
        commit_file(tmp_repo, "m.txt", "m\n", "main work")

        result = asyncio.run(provider.merge_base(MergeBaseOptions(refs=("main", "feature")), repo_context))

        assert result.merge_base == base

    def test_is_ancestor(self, tmp_repo: Path, repo_context: OperationContext, provider: CliGitProvider) -> None:
        old = run_git("rev-parse", "HEAD", cwd=tmp_repo).strip()
        new = commit_file(tmp_repo, "n.txt", "n\n", "newer")

        forward = asyncio.run(
            provider.merge_base(MergeBaseOptions(refs=(old, new), mode=MergeBaseMode.IS_ANCESTOR), repo_context)
        )
        backward = asyncio.run(
            provider.merge_base(MergeBaseOptions(refs=(new, old), mode=MergeBaseMode.IS_ANCESTOR), repo_context)
        )

        assert forward.success is True and forward.is_ancestor is True
        assert backward.success is True and backward.is_ancestor is False
        assert backward.merge_base is None

    def test_unrelated_histories(self, tmp_repo: Path, repo_context: OperationContext, provider: CliGitProvider) -> None:
        run_git("checkout", "-q", "--orphan", "island", cwd=tmp_repo)
        run_git("rm", "-rq", "--cached", ".", cwd=tmp_repo)
        commit_file(tmp_repo, "island.txt", "i\n", "unrelated root")

        for mode in (MergeBaseMode.DEFAULT, MergeBaseMode.ALL):
            result = asyncio.run(
                provider.merge_base(MergeBaseOptions(refs=("main", "island"), mode=mode), repo_context)
            )
            assert result.success is True
            assert result.merge_base is None

    def test_unknown_ref(self, repo_context: OperationContext, provider: CliGitProvider) -> None:
        with pytest.raises(ExecutionFailure):
            asyncio.run(
                provider.merge_base(
                    MergeBaseOptions(refs=("main", "no-such-ref"), mode=MergeBaseMode.IS_ANCESTOR), repo_context
                )
            )


class TestClone:
    """Clone from a local repository."""

    def test_clone_local(self, tmp_repo: Path, tmp_path: Path, provider: CliGitProvider) -> None:
        target = tmp_path / "clones" / "copy"
        target.parent.mkdir()

        result = asyncio.run(
            provider.clone(CloneOptions(remote_url=str(tmp_repo), local_path=target), OperationContext(tmp_path))
        )

        assert result.success is True
        assert result.local_path == str(target.resolve())
        assert result.branch == "main"
        assert (target / "README.md").read_text() == "# Test Repo\n"

    def test_relative_target(self, tmp_repo: Path, tmp_path: Path, provider: CliGitProvider) -> None:
        result = asyncio.run(
            provider.clone(CloneOptions(remote_url=str(tmp_repo), local_path="rel-copy"), OperationContext(tmp_path))
        )

        assert Path(result.local_path) == (tmp_path / "rel-copy").resolve()
        assert (tmp_path / "rel-copy" / ".git").is_dir()

    def test_missing_source(self, tmp_path: Path, provider: CliGitProvider) -> None:
        with pytest.raises(ExecutionFailure):
            asyncio.run(
                provider.clone(
                    CloneOptions(remote_url=str(tmp_path / "nowhere"), local_path=tmp_path / "dst"),
                    OperationContext(tmp_path),
                )
            )

    def test_missing_parent(self, tmp_repo: Path, tmp_path: Path, provider: CliGitProvider) -> None:
        with pytest.raises(GitEnvironmentError):
            asyncio.run(
                provider.clone(
                    CloneOptions(remote_url=str(tmp_repo), local_path=tmp_path / "no" / "parent" / "dst"),
                    OperationContext(tmp_path),
                )
            )
