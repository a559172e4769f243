"""Path glob and content regex matching for rule applicability."""

import re
from typing import Sequence

from mrchecker.rules.base import Rule


def rule_applies(rule: Rule, path: str, content: str | None = None) -> bool:
  """Check a rule's path filters and, when content is known, its content filters."""
  if not path_applies(path, rule.include, rule.exclude):
    return False
  if content is None:
    return True
  return content_applies(content, rule.match_include, rule.match_exclude)


def path_applies(
  path: str,
  include: Sequence[str] | None = None,
  exclude: Sequence[str] | None = None,
) -> bool:
  """Check a path against include and exclude globs."""
  if include is not None and not matches_glob(path, include):
    return False
  if exclude is not None and matches_glob(path, exclude):
    return False
  return True


def content_applies(
  content: str,
  include: Sequence[str] | None = None,
  exclude: Sequence[str] | None = None,
) -> bool:
  """Check content against include and exclude regexes.

  Raises:
    re.error: A pattern is not a valid regular expression.
  """
  if include is not None and not any(re.search(p, content) for p in include):
    return False
  if exclude is not None and any(re.search(p, content) for p in exclude):
    return False
  return True


def matches_glob(path: str, patterns: Sequence[str]) -> bool:
  """Check if a repository-relative path matches any glob pattern.

  ``*`` and ``?`` stay within one path segment, ``**`` spans segments and
  ``{a,b}`` expands to alternatives. Dotfiles are matched like any other
  name.
  """
  norm = path.replace("\\", "/").removeprefix("./")
  for pattern in patterns:
    pattern = pattern.replace("\\", "/").removeprefix("./")
    for alternative in expand_braces(pattern):
      if re.fullmatch(translate_glob(alternative), norm):
        return True
  return False


def expand_braces(pattern: str) -> list[str]:
  """Expand ``{a,b}`` groups into separate patterns."""
  start = pattern.find("{")
  while start != -1:
    end = _closing_brace(pattern, start)
    if end == -1:
      return [pattern]

    alternatives = _split_alternatives(pattern[start + 1:end])
    if len(alternatives) > 1:
      prefix, suffix = pattern[:start], pattern[end + 1:]
      return [
        expanded
        for alternative in alternatives
        for expanded in expand_braces(prefix + alternative + suffix)
      ]
    start = pattern.find("{", end + 1)

  return [pattern]


def translate_glob(pattern: str) -> str:
  """Convert a brace-free glob pattern to a regular expression."""
  parts: list[str] = []
  i = 0
  n = len(pattern)

  while i < n:
    c = pattern[i]
    if c == "*":
      if pattern.startswith("**/", i):
        parts.append("(?:.*/)?")
        i += 3
      elif pattern.startswith("**", i):
        parts.append(".*")
        i += 2
      else:
        parts.append("[^/]*")
        i += 1
    elif c == "?":
      parts.append("[^/]")
      i += 1
    elif c == "[":
      end = _closing_bracket(pattern, i)
      if end == -1:
        parts.append(re.escape(c))
        i += 1
      else:
        body = pattern[i + 1:end].replace("\\", "\\\\")
        if body[:1] in ("!", "^"):
          body = "^" + body[1:]
        parts.append(f"[{body}]")
        i = end + 1
    else:
      parts.append(re.escape(c))
      i += 1

  return "".join(parts)


def _closing_brace(pattern: str, start: int) -> int:
  depth = 0
  for i in range(start, len(pattern)):
    if pattern[i] == "{":
      depth += 1
    elif pattern[i] == "}":
      depth -= 1
      if depth == 0:
        return i
  return -1


def _split_alternatives(body: str) -> list[str]:
  alternatives: list[str] = []
  depth = 0
  current: list[str] = []
  for c in body:
    if c == "," and depth == 0:
      alternatives.append("".join(current))
      current = []
      continue
    if c == "{":
      depth += 1
    elif c == "}":
      depth -= 1
    current.append(c)
  alternatives.append("".join(current))
  return alternatives


def _closing_bracket(pattern: str, start: int) -> int:
  j = start + 1
  if j < len(pattern) and pattern[j] in "!^":
    j += 1
  # A "]" right after the opening bracket is a literal member.
  if j < len(pattern) and pattern[j] == "]":
    j += 1
  return pattern.find("]", j)
