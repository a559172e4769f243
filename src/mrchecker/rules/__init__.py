"""Rule loading, matching and model-backed evaluation."""

from mrchecker.rules.base import Rule
from mrchecker.rules.evaluator import Evaluator
from mrchecker.rules.loader import (
  RuleLoadError,
  derive_rule_id,
  load_ignore_patterns,
  load_rules,
)
from mrchecker.rules.matcher import content_applies, matches_glob, path_applies, rule_applies
from mrchecker.rules.verdict import VerdictError, parse_verdict

__all__ = [
  "Evaluator",
  "Rule",
  "RuleLoadError",
  "VerdictError",
  "content_applies",
  "derive_rule_id",
  "load_ignore_patterns",
  "load_rules",
  "matches_glob",
  "parse_verdict",
  "path_applies",
  "rule_applies",
]
