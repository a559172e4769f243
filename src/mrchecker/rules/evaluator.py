"""Evaluation of a single rule against a piece of content."""

import asyncio
from typing import Any

from mrchecker.models import Issue, NoViolation
from mrchecker.providers import ModelBackend
from mrchecker.rules.base import Rule
from mrchecker.rules.prompt import build_rule_prompt
from mrchecker.rules.verdict import parse_verdict


class Evaluator:
  """Asks the model backend whether content violates a rule.

  Backend failures are never treated as "no violation"; they propagate
  to the caller.

  Example:
    evaluator = Evaluator(backend)
    issue = await evaluator.evaluate(rule, diff_text, system_prompt, file="src/app.py")
  """

  def __init__(
    self,
    backend: ModelBackend,
    provider: str | None = None,
    max_concurrency: int | None = None,
  ):
    """Initialize the evaluator.

    Args:
      backend: Configured model backend.
      provider: Provider to send requests to. Defaults to the backend's.
      max_concurrency: Upper bound on in-flight backend calls. None is unbounded.
    """
    self._backend = backend
    self._provider = provider or backend.provider
    self._limit = asyncio.Semaphore(max_concurrency) if max_concurrency else None

  @property
  def provider(self) -> str:
    return self._provider

  async def evaluate(
    self,
    rule: Rule,
    content: str,
    system_prompt: str = "",
    file: str | None = None,
    line: int | None = None,
  ) -> Issue | None:
    """Judge content against a rule, returning an Issue on violation."""
    prompt = build_rule_prompt(rule, content)
    data = await self._request(system_prompt, prompt)

    verdict = parse_verdict(data, rule)
    if isinstance(verdict, NoViolation):
      return None

    return Issue(
      severity=verdict.severity,
      rule_id=rule.id,
      message=verdict.message,
      file=file,
      line=line,
    )

  async def _request(self, system_prompt: str, prompt: str) -> dict[str, Any]:
    if self._limit is None:
      return await self._backend.evaluate(self._provider, system_prompt, prompt)
    async with self._limit:
      return await self._backend.evaluate(self._provider, system_prompt, prompt)
