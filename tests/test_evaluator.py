"""Tests for rule evaluation against the model backend."""

import asyncio

import pytest
from conftest import FakeBackend
from mrchecker.models import Issue, NoViolation, Severity, Violation
from mrchecker.providers.parser import BackendError
from mrchecker.rules.evaluator import Evaluator
from mrchecker.rules.prompt import build_rule_prompt
from mrchecker.rules.verdict import VerdictError, parse_verdict, resolve_severity


class TestBuildRulePrompt:
  def test_embeds_statement_and_content(self, make_rule) -> None:
    rule = make_rule(statement="No secrets in code.")

    prompt = build_rule_prompt(rule, "+API_KEY = 'abc'")

    assert "Rule:\nNo secrets in code." in prompt
    assert "```\n+API_KEY = 'abc'\n```" in prompt
    assert "Exceptions" not in prompt

  def test_includes_exceptions(self, make_rule) -> None:
    rule = make_rule(exceptions="Test fixtures are fine.")

    prompt = build_rule_prompt(rule, "x")

    assert "Exceptions:\nTest fixtures are fine." in prompt

  def test_fixed_severity_shape_omits_severity(self, make_rule) -> None:
    prompt = build_rule_prompt(make_rule(severity="high"), "x")

    assert '"violation": true|false' in prompt
    assert '"severity"' not in prompt

  def test_severity_set_shape_lists_allowed_values(self, make_rule) -> None:
    prompt = build_rule_prompt(make_rule(severity=["low", "medium"]), "x")

    assert '"severity": "low|medium"' in prompt

  def test_fence_outgrows_backticks_in_content(self, make_rule) -> None:
    content = "+```python\n+print('hi')\n+```"

    prompt = build_rule_prompt(make_rule(), content)

    assert f"````\n{content}\n````" in prompt


class TestParseVerdict:
  def test_no_violation(self, make_rule) -> None:
    assert parse_verdict({"violation": False, "message": "ok"}, make_rule()) == NoViolation()

  def test_fixed_severity_ignores_backend_choice(self, make_rule) -> None:
    rule = make_rule(severity="high")

    assert parse_verdict({"violation": True}, rule) == Violation(Severity.HIGH, "")
    assert parse_verdict({"violation": True, "severity": "low"}, rule).severity == Severity.HIGH

  def test_severity_set_falls_back_to_first(self, make_rule) -> None:
    rule = make_rule(severity=["low", "medium"])

    assert parse_verdict({"violation": True, "message": "m"}, rule) == Violation(Severity.LOW, "m")

  def test_severity_set_uses_backend_choice(self, make_rule) -> None:
    rule = make_rule(severity=["low", "medium"])

    verdict = parse_verdict({"violation": True, "severity": "Medium"}, rule)

    assert verdict == Violation(Severity.MEDIUM, "")

  def test_severity_outside_set_uses_backend_choice(self, make_rule) -> None:
    rule = make_rule(severity=["low", "medium"])

    verdict = parse_verdict({"violation": True, "severity": "high", "message": "m"}, rule)

    assert verdict == Violation(Severity.HIGH, "m")

  def test_fixed_severity_ignores_unknown_suggestion(self, make_rule) -> None:
    rule = make_rule(severity="high")

    verdict = parse_verdict({"violation": True, "severity": "critical", "message": "m"}, rule)

    assert verdict == Violation(Severity.HIGH, "m")

  @pytest.mark.parametrize("severity", ["none", "critical", 3])
  def test_no_violation_ignores_leftover_severity(self, make_rule, severity) -> None:
    verdict = parse_verdict({"violation": False, "severity": severity}, make_rule())

    assert verdict == NoViolation()

  def test_severity_set_rejects_unknown_severity(self, make_rule) -> None:
    rule = make_rule(severity=["low", "medium"])

    with pytest.raises(VerdictError, match="Unknown severity 'critical'"):
      parse_verdict({"violation": True, "severity": "critical"}, rule)

  def test_severity_set_treats_blank_as_missing(self, make_rule) -> None:
    rule = make_rule(severity=["medium", "low"])

    assert parse_verdict({"violation": True, "severity": " "}, rule) == Violation(Severity.MEDIUM, "")

  def test_null_message_defaults_to_empty(self, make_rule) -> None:
    verdict = parse_verdict({"violation": True, "message": None}, make_rule())

    assert verdict == Violation(Severity.MEDIUM, "")

  @pytest.mark.parametrize("data", [
    {},
    {"violation": "yes"},
    {"violation": 1},
    {"violation": True, "message": ["not", "text"]},
  ])
  def test_malformed_verdict_raises(self, make_rule, data: dict) -> None:
    with pytest.raises(VerdictError, match="Malformed verdict"):
      parse_verdict(data, make_rule())

  def test_verdict_error_is_backend_error(self) -> None:
    assert issubclass(VerdictError, BackendError)


class TestResolveSeverity:
  def test_fixed(self, make_rule) -> None:
    assert resolve_severity(make_rule(severity="low"), Severity.HIGH) == Severity.LOW

  def test_set_without_choice(self, make_rule) -> None:
    assert resolve_severity(make_rule(severity=["high", "low"]), None) == Severity.HIGH

  def test_set_with_raw_choice(self, make_rule) -> None:
    assert resolve_severity(make_rule(severity=["low"]), "HIGH") == Severity.HIGH


class TestEvaluator:
  def test_returns_issue_on_violation(self, make_rule) -> None:
    backend = FakeBackend(lambda prompt: {"violation": True, "message": "Missing docstring"})
    evaluator = Evaluator(backend)

    issue = asyncio.run(
      evaluator.evaluate(make_rule(severity="high"), "+def f(): pass", "be strict", "a.py", 4)
    )

    assert issue == Issue(
      severity=Severity.HIGH, rule_id="rule-1", message="Missing docstring", file="a.py", line=4,
    )

  def test_returns_none_without_violation(self, make_rule, fake_backend: FakeBackend) -> None:
    issue = asyncio.run(Evaluator(fake_backend).evaluate(make_rule(), "content"))

    assert issue is None

  def test_sends_prompts_to_backend_provider(self, make_rule, fake_backend: FakeBackend) -> None:
    asyncio.run(Evaluator(fake_backend).evaluate(make_rule(), "the content", "system text"))

    provider_id, system_prompt, user_prompt = fake_backend.calls[0]
    assert provider_id == "fake"
    assert system_prompt == "system text"
    assert "the content" in user_prompt

  def test_explicit_provider(self, make_rule, fake_backend: FakeBackend) -> None:
    asyncio.run(Evaluator(fake_backend, provider="other").evaluate(make_rule(), "x"))

    assert fake_backend.calls[0][0] == "other"

  def test_backend_failure_propagates(self, make_rule) -> None:
    def fail(prompt: str) -> dict:
      raise BackendError("transport failed")

    with pytest.raises(BackendError, match="transport failed"):
      asyncio.run(Evaluator(FakeBackend(fail)).evaluate(make_rule(), "x"))

  def test_severity_set_rule_reports_backend_severity(self, make_rule) -> None:
    backend = FakeBackend(lambda prompt: {"violation": True, "severity": "high", "message": "m"})

    issue = asyncio.run(Evaluator(backend).evaluate(make_rule(severity=["low", "medium"]), "x"))

    assert issue is not None
    assert issue.severity == Severity.HIGH

  def test_concurrency_limit(self, make_rule) -> None:
    active = 0
    peak = 0

    class SlowBackend(FakeBackend):
      async def evaluate(self, provider_id: str, system_prompt: str, user_prompt: str) -> dict:
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1
        return {"violation": False}

    async def run_all() -> None:
      evaluator = Evaluator(SlowBackend(), max_concurrency=2)
      await asyncio.gather(*(evaluator.evaluate(make_rule(), str(i)) for i in range(6)))

    asyncio.run(run_all())

    assert peak == 2
