"""Git commit and diff extraction."""

from mrchecker.diff.extractor import (
    GitError,
    fetch_remote,
    get_file_diff,
    list_changed_files,
    list_commits,
)

__all__ = [
  "fetch_remote",
  "get_file_diff",
  "list_changed_files",
  "list_commits",
  "GitError",
]
