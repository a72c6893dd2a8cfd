"""gitwright constants and enumerations."""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Stable taxonomy of operation failures."""

    VALIDATION = "validation"
    ENVIRONMENT = "environment"
    EXECUTION = "execution"
    CANCELLED = "cancelled"


class MergeBaseMode(StrEnum):
    """Query modes for merge-base."""

    DEFAULT = "default"
    ALL = "all"
    IS_ANCESTOR = "is-ancestor"


# Tenant used when the caller does not supply one
DEFAULT_TENANT_ID = "default-tenant"

# Branch reported for clones that did not request one
DEFAULT_CLONE_BRANCH = "main"

# Sentinels for the commit metadata codec (ASCII unit/record separators)
FIELD_DELIMITER = "\x1f"
RECORD_DELIMITER = "\x1e"

# `git merge-base --is-ancestor` exits 1 when the first ref is not an ancestor.
# Plain `git merge-base` uses the same code when no common ancestor exists.
NOT_ANCESTOR_EXIT_CODE = 1

# Executor defaults
DEFAULT_GIT_BINARY = "git"
DEFAULT_TIMEOUT_SECONDS = 300
DEFAULT_TERMINATE_GRACE_SECONDS = 5.0

# Config locations
CONFIG_DIR = ".gitwright"
CONFIG_FILE = f"{CONFIG_DIR}/config.yaml"
LOGS_DIR = f"{CONFIG_DIR}/logs"

# Environment override for the default signing policy
SIGN_COMMITS_ENV = "GIT_SIGN_COMMITS"

# Exit codes used by the CLI per error kind
CLI_EXIT_CODES: dict[ErrorKind, int] = {
    ErrorKind.EXECUTION: 1,
    ErrorKind.VALIDATION: 2,
    ErrorKind.ENVIRONMENT: 3,
    ErrorKind.CANCELLED: 130,
}
