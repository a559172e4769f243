"""Judgment request construction."""

import re

from mrchecker.rules.base import Rule

_BACKTICK_RUN = re.compile(r"`{3,}")


def build_rule_prompt(rule: Rule, content: str) -> str:
  """Build the user prompt asking whether content violates a rule."""
  exceptions = f"\n\nExceptions:\n{rule.exceptions}" if rule.exceptions else ""
  fence = _fence_for(content)

  return f"""Check the following content against this rule.

Rule:
{rule.statement}{exceptions}

Content:
{fence}
{content}
{fence}

Respond with JSON:
{_response_shape(rule)}"""


def _response_shape(rule: Rule) -> str:
  if rule.has_fixed_severity:
    return '{ "violation": true|false, "message": "..." }'
  allowed = "|".join(s.value for s in rule.allowed_severities)
  return f'{{ "violation": true|false, "severity": "{allowed}", "message": "..." }}'


def _fence_for(content: str) -> str:
  """Return a code fence longer than any backtick run inside content."""
  longest = max((len(m) for m in _BACKTICK_RUN.findall(content)), default=2)
  return "`" * (longest + 1)
