"""Output formatting and result persistence."""

from mrchecker.output.formatter import (
    GitHubFormatter,
    JsonFormatter,
    MarkdownFormatter,
    OutputFormatter,
    TerminalFormatter,
    get_formatter,
    group_by_severity,
    report,
    summarize,
)
from mrchecker.output.snapshot import read_snapshot, write_snapshot

__all__ = [
  "OutputFormatter",
  "TerminalFormatter",
  "JsonFormatter",
  "MarkdownFormatter",
  "GitHubFormatter",
  "get_formatter",
  "group_by_severity",
  "read_snapshot",
  "report",
  "summarize",
  "write_snapshot",
]
