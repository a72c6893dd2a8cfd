"""Output parsers -- git's textual output to structured values.

All parsers are pure and never raise on well-formed or empty input;
missing pieces degrade to empty strings, zero and empty lists.
"""

from __future__ import annotations

from gitwright.constants import FIELD_DELIMITER, RECORD_DELIMITER, MergeBaseMode
from gitwright.git.types import CommitMetadata, DiffStat

# Numstat marks binary files with '-' in both count columns
BINARY_STAT_MARKER = "-"


def parse_numstat(numstat_output: str) -> DiffStat:
    """Parse ``git diff --numstat`` output into a DiffStat.

    Format per line: <insertions>\\t<deletions>\\t<filename>
    Binary files show '-' for insertions/deletions; they are counted in
    ``files`` but contribute nothing to the totals.

    Args:
        numstat_output: Raw output from git diff --numstat.

    Returns:
        Populated DiffStat (empty when nothing changed).
    """
    stat = DiffStat()

    for line in numstat_output.splitlines():
        if not line.strip():
            continue

        parts = line.split("\t", 2)
        if len(parts) < 3:
            continue

        ins_str, del_str, filepath = parts
        stat.files.append(filepath)

        if ins_str == BINARY_STAT_MARKER and del_str == BINARY_STAT_MARKER:
            stat.binary_files.append(filepath)
            continue

        stat.total_additions += _to_int(ins_str)
        stat.total_deletions += _to_int(del_str)

    return stat


def commit_metadata_format() -> str:
    """``--format`` value whose output parse_commit_metadata decodes.

    Author name and epoch timestamp separated by FIELD_DELIMITER, closed by
    RECORD_DELIMITER; ``--name-only`` then appends the file list.
    """
    return f"--format=%an{FIELD_DELIMITER}%at{RECORD_DELIMITER}"


def parse_commit_metadata(output: str) -> CommitMetadata:
    """Decode the two-segment commit metadata payload.

    Segment 1 (before RECORD_DELIMITER) holds author name and epoch seconds
    split by FIELD_DELIMITER. Segment 2 is a newline-separated file list.

    Args:
        output: Raw ``git show`` output produced with commit_metadata_format().

    Returns:
        CommitMetadata; absent segments become "", 0 and [].
    """
    header, _, files_segment = output.partition(RECORD_DELIMITER)
    author_name, _, timestamp_str = header.partition(FIELD_DELIMITER)

    return CommitMetadata(
        author_name=author_name.strip(),
        timestamp=_to_int(timestamp_str.strip()),
        files_changed=[f.strip() for f in files_segment.splitlines() if f.strip()],
    )


def parse_hash_lines(output: str) -> list[str]:
    """Split output into trimmed, non-empty lines in emitted order."""
    return [line.strip() for line in output.splitlines() if line.strip()]


def parse_merge_base(output: str, mode: MergeBaseMode) -> str | list[str] | None:
    """Interpret ``git merge-base`` output for the given mode.

    Empty output means no common ancestor (e.g. unrelated histories) and is
    returned as None rather than treated as an error.
    """
    hashes = parse_hash_lines(output)
    if not hashes:
        return None
    if mode is MergeBaseMode.ALL:
        return hashes
    return hashes[0]


def _to_int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0
