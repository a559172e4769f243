"""Shared response parsing utilities."""

import json
import re
from typing import Any

MAX_RESPONSE_LENGTH = 1_000_000  # 1MB limit for regex processing


class BackendError(Exception):
  """Model backend returned an unusable response."""


def extract_json(text: str) -> dict[str, Any]:
  """Extract a JSON object from LLM response, handling markdown code blocks."""
  text = text.strip()

  if len(text) > MAX_RESPONSE_LENGTH:
    raise BackendError(f"Response too large ({len(text)} bytes), max {MAX_RESPONSE_LENGTH}")

  for candidate in _candidates(text):
    try:
      data = json.loads(candidate)
    except json.JSONDecodeError:
      continue
    if isinstance(data, dict):
      return data

  raise BackendError(f"Could not extract a JSON object from response: {text[:200]}...")


def _candidates(text: str) -> list[str]:
  candidates = [text]

  json_match = re.search(r"```(?:json)?\s*\n?(.*?)\n?```", text, re.DOTALL)
  if json_match:
    candidates.append(json_match.group(1).strip())

  brace_match = re.search(r"\{.*\}", text, re.DOTALL)
  if brace_match:
    candidates.append(brace_match.group(0))

  return candidates
