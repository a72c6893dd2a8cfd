"""Mock objects for gitwright testing."""

from tests.mocks.mock_executor import MockExecutor, outcome

__all__ = [
    "MockExecutor",
    "outcome",
]
