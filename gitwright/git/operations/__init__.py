"""Operation orchestrators: build, execute, parse and classify per operation."""

from gitwright.git.operations.clone import execute_clone
from gitwright.git.operations.commit import execute_commit
from gitwright.git.operations.diff import execute_diff
from gitwright.git.operations.merge_base import execute_merge_base

__all__ = [
    "execute_clone",
    "execute_commit",
    "execute_diff",
    "execute_merge_base",
]
