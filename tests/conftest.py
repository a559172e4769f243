"""Pytest fixtures."""

from typing import Any, Callable

import pytest
from mrchecker.models import Issue, Severity
from mrchecker.rules.base import Rule

PROVIDER_ENV_VARS = ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GEMINI_API_KEY", "OLLAMA_HOST")


class FakeBackend:
  """Model backend double that records requests and returns canned verdicts."""

  provider = "fake"
  model = "fake-model"

  def __init__(self, respond: Callable[[str], dict[str, Any]] | None = None):
    self._respond = respond or (lambda prompt: {"violation": False})
    self.calls: list[tuple[str, str, str]] = []

  async def evaluate(self, provider_id: str, system_prompt: str, user_prompt: str) -> dict[str, Any]:
    self.calls.append((provider_id, system_prompt, user_prompt))
    return self._respond(user_prompt)


@pytest.fixture
def make_rule() -> Callable[..., Rule]:
  def factory(**overrides: Any) -> Rule:
    values: dict[str, Any] = {
      "id": "rule-1",
      "scope": "file",
      "severity": "medium",
      "statement": "Functions must have docstrings.",
    }
    values.update(overrides)
    return Rule.model_validate(values)
  return factory


@pytest.fixture
def fake_backend() -> FakeBackend:
  return FakeBackend()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
  for name in PROVIDER_ENV_VARS:
    monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_issues() -> list[Issue]:
  return [
    Issue(severity=Severity.LOW, rule_id="style", message="Minor nit", file="a.py", line=3),
    Issue(severity=Severity.HIGH, rule_id="secrets", message="Key committed", file="b.py"),
    Issue(severity=Severity.MEDIUM, rule_id="history", message="Vague commit message"),
    Issue(severity=Severity.HIGH, rule_id="sql", message="Injection", file="c.py", line=10),
  ]
