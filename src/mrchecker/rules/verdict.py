"""Interpretation of model verdicts."""

from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError

from mrchecker.models import NoViolation, Severity, Verdict, Violation
from mrchecker.providers.parser import BackendError
from mrchecker.rules.base import Rule


class VerdictError(BackendError):
  """Model response does not have the verdict shape."""


class RawVerdict(BaseModel):
  """Verdict JSON as returned by the backend.

  The severity is kept as sent; whether it matters depends on the rule.
  """

  model_config = ConfigDict(extra="ignore")

  violation: StrictBool
  severity: Any = None
  message: str | None = None


def parse_verdict(data: dict[str, Any], rule: Rule) -> Verdict:
  """Validate a raw verdict against the rule's severity shape.

  Raises:
    VerdictError: Required fields are missing, or a severity rule needs
      the backend's severity and it is not low, medium or high.
  """
  try:
    raw = RawVerdict.model_validate(data)
  except ValidationError as e:
    raise VerdictError(f"Malformed verdict for rule {rule.id}: {e}") from e

  if not raw.violation:
    return NoViolation()

  return Violation(
    severity=resolve_severity(rule, raw.severity),
    message=raw.message or "",
  )


def resolve_severity(rule: Rule, suggested: Any) -> Severity:
  """Pick the issue severity for a violated rule.

  A fixed severity always wins and the suggestion is not inspected. For
  a severity set the backend's choice is used when given, falling back
  to the first allowed severity.
  """
  if isinstance(rule.severity, Severity):
    return rule.severity

  severity = _coerce_severity(rule, suggested)
  return severity if severity is not None else rule.allowed_severities[0]


def _coerce_severity(rule: Rule, value: Any) -> Severity | None:
  if value is None or isinstance(value, Severity):
    return value
  if not isinstance(value, str):
    raise VerdictError(f"Severity for rule {rule.id} must be a string, got {value!r}")

  normalized = value.strip().lower()
  if not normalized:
    return None
  try:
    return Severity(normalized)
  except ValueError:
    raise VerdictError(
      f"Unknown severity '{value}' for rule {rule.id}; expected low, medium or high"
    ) from None
