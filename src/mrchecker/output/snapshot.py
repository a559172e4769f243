"""Persisted snapshot of a run's issues."""

import json
from pathlib import Path
from typing import Sequence

from mrchecker.models import Issue


def write_snapshot(path: Path, issues: Sequence[Issue]) -> None:
  """Write issues as a pretty-printed JSON array, replacing any previous run."""
  data = [issue.to_dict() for issue in issues]
  path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def read_snapshot(path: Path) -> list[Issue]:
  """Read issues back from a snapshot file."""
  data = json.loads(path.read_text(encoding="utf-8"))
  return [Issue.from_dict(item) for item in data]
