"""Core domain models for merge-request review."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence


class Severity(Enum):
  """Issue severity levels, ordered low < medium < high."""

  LOW = "low"
  MEDIUM = "medium"
  HIGH = "high"


# Order in which severity buckets are reported.
REPORT_ORDER = (Severity.HIGH, Severity.MEDIUM, Severity.LOW)


class RuleScope(Enum):
  """Granularity of content a rule is evaluated against."""

  HISTORY = "history"
  FILE = "file"
  INLINE = "inline"


class FileStatus(Enum):
  """Change status of a file between base and branch."""

  ADDED = "A"
  MODIFIED = "M"
  DELETED = "D"
  RENAMED = "R"
  COPIED = "C"


@dataclass(frozen=True)
class CommitMeta:
  """A single commit on the reviewed branch."""

  hash: str
  timestamp: int  # epoch millis
  message: str


@dataclass(frozen=True)
class FileDiff:
  """A changed file and its line counts."""

  file_path: str
  status: FileStatus
  additions: int = 0
  deletions: int = 0

  @property
  def is_deleted(self) -> bool:
    return self.status == FileStatus.DELETED


@dataclass(frozen=True)
class Issue:
  """A rule violation reported by the model backend."""

  severity: Severity
  rule_id: str
  message: str
  file: str | None = None
  line: int | None = None

  @property
  def location(self) -> str:
    if self.file is None:
      return "repository"
    if self.line is None:
      return self.file
    return f"{self.file}:{self.line}"

  def to_dict(self) -> dict[str, Any]:
    data: dict[str, Any] = {"severity": self.severity.value, "ruleId": self.rule_id}
    if self.file is not None:
      data["file"] = self.file
    if self.line is not None:
      data["line"] = self.line
    data["message"] = self.message
    return data

  @classmethod
  def from_dict(cls, data: dict[str, Any]) -> "Issue":
    return cls(
      severity=Severity(data["severity"]),
      rule_id=data["ruleId"],
      message=data.get("message", ""),
      file=data.get("file"),
      line=data.get("line"),
    )


@dataclass(frozen=True)
class NoViolation:
  """Verdict: the content complies with the rule."""


@dataclass(frozen=True)
class Violation:
  """Verdict: the rule is violated."""

  severity: Severity
  message: str


Verdict = NoViolation | Violation


@dataclass(frozen=True)
class SystemPrompts:
  """System prompts sent with each scope's evaluation requests."""

  history: str = ""
  file: str = ""
  inline: str = ""


@dataclass(frozen=True)
class ReviewResult:
  """Result of a review run."""

  issues: Sequence[Issue]
  summary: str
  provider: str
  model: str

  @property
  def has_high_severity(self) -> bool:
    """Check if result contains any HIGH severity issue."""
    return any(i.severity == Severity.HIGH for i in self.issues)

  @property
  def exit_status(self) -> int:
    return 1 if self.has_high_severity else 0
