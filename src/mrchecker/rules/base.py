"""Rule definitions loaded from the repository."""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mrchecker.models import RuleScope, Severity


class Rule(BaseModel):
  """A review policy judged by the model backend.

  ``severity`` is either one fixed severity or an ordered, non-empty set
  of severities the backend may choose from. The first entry of a set is
  used when the backend does not pick one.

  Example (YAML):
    id: no-debug-output
    scope: inline
    severity: [low, medium]
    statement: Debug output must not be committed.
    include: ["src/**"]
    matchInclude: ["print\\(", "console\\.log"]
  """

  model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

  id: str
  scope: RuleScope
  severity: Severity | tuple[Severity, ...]
  statement: str
  exceptions: str | None = None
  include: tuple[str, ...] | None = None
  exclude: tuple[str, ...] | None = None
  match_include: tuple[str, ...] | None = Field(default=None, alias="matchInclude")
  match_exclude: tuple[str, ...] | None = Field(default=None, alias="matchExclude")

  @property
  def has_fixed_severity(self) -> bool:
    return isinstance(self.severity, Severity)

  @property
  def allowed_severities(self) -> tuple[Severity, ...]:
    if isinstance(self.severity, Severity):
      return (self.severity,)
    return self.severity

  @field_validator("id", mode="before")
  @classmethod
  def _id_as_text(cls, value: Any) -> Any:
    if isinstance(value, (int, float)):
      return str(value)
    return value

  @field_validator("severity")
  @classmethod
  def _severity_set_not_empty(cls, value: Severity | tuple[Severity, ...]) -> Any:
    if isinstance(value, tuple) and not value:
      raise ValueError("severity set must not be empty")
    return value

  @field_validator("include", "exclude", "match_include", "match_exclude", mode="before")
  @classmethod
  def _single_pattern_as_list(cls, value: Any) -> Any:
    if isinstance(value, str):
      return [value]
    return value

  @field_validator("match_include", "match_exclude")
  @classmethod
  def _regexes_compile(cls, value: tuple[str, ...] | None) -> tuple[str, ...] | None:
    for pattern in value or ():
      try:
        re.compile(pattern)
      except re.error as e:
        raise ValueError(f"invalid regular expression {pattern!r}: {e}") from e
    return value
