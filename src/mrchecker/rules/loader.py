"""Rule and ignore-pattern loading from the repository."""

import hashlib
import json
import re
from pathlib import Path

import yaml
from pydantic import ValidationError
from rich.console import Console

from mrchecker.config import ConfigError
from mrchecker.rules.base import Rule

RULE_FILE_PATTERN = re.compile(r".review\.rule\.(yml|yaml|json)$", re.IGNORECASE)

_console = Console(stderr=True)


class RuleLoadError(ConfigError):
  """A rule file could not be read or is invalid."""


def derive_rule_id(file_name: str, index: int) -> str:
  """Stable id for a rule without an explicit one."""
  return hashlib.sha1(f"{file_name}:{index}".encode("utf-8")).hexdigest()[:10]


def load_rules(repo_dir: Path, rules_dir: str = ".ai") -> list[Rule]:
  """Load all rule files from the repository's rules directory.

  Files are read in name order. When two rules share an id the one
  loaded last replaces the earlier one.

  Raises:
    RuleLoadError: A rule file is unreadable, malformed or invalid.
  """
  directory = repo_dir / rules_dir
  if not directory.is_dir():
    return []

  paths = sorted(
    p for p in directory.iterdir()
    if p.is_file() and RULE_FILE_PATTERN.search(p.name)
  )

  rules: dict[str, Rule] = {}
  for path in paths:
    for rule in _load_rule_file(path):
      if rule.id in rules:
        _console.print(
          f"[yellow]Warning:[/yellow] Rule '{rule.id}' from {path.name} replaces an earlier rule"
        )
      rules[rule.id] = rule
  return list(rules.values())


def _load_rule_file(path: Path) -> list[Rule]:
  try:
    raw = path.read_text(encoding="utf-8")
  except (OSError, UnicodeDecodeError) as e:
    raise RuleLoadError(f"Cannot read rule file {path.name}: {e}") from e

  try:
    data = json.loads(raw) if path.suffix.lower() == ".json" else yaml.safe_load(raw)
  except (json.JSONDecodeError, yaml.YAMLError) as e:
    raise RuleLoadError(f"Cannot parse rule file {path.name}: {e}") from e

  if data is None:
    return []

  documents = data if isinstance(data, list) else [data]
  rules: list[Rule] = []
  for index, document in enumerate(documents):
    if not isinstance(document, dict):
      raise RuleLoadError(f"Rule {index} in {path.name} must be a mapping")

    values = dict(document)
    if values.get("id") is None:
      values["id"] = derive_rule_id(path.name, index)

    try:
      rules.append(Rule.model_validate(values))
    except ValidationError as e:
      raise RuleLoadError(f"Invalid rule {index} in {path.name}: {e}") from e

  return rules


def load_ignore_patterns(repo_dir: Path, ignore_file: str = ".aiignore") -> list[str]:
  """Read ignore globs, one per non-blank line. A missing file means none."""
  path = repo_dir / ignore_file
  if not path.is_file():
    return []

  try:
    text = path.read_text(encoding="utf-8")
  except (OSError, UnicodeDecodeError) as e:
    raise ConfigError(f"Cannot read ignore file {path}: {e}") from e

  return [line.strip() for line in text.splitlines() if line.strip()]
