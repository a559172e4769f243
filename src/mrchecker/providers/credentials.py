"""Credentials file loading."""

import json
from pathlib import Path

from mrchecker.config import ConfigError


def load_credentials(path: Path) -> dict[str, str]:
  """Read provider credentials from a JSON file.

  The file holds a list of ``{"provider": ..., "credentials": {"apiKey": ...}}``
  entries. The first entry per provider wins. A missing file yields no
  credentials; an unreadable or malformed one is a configuration error.
  """
  if not path.exists():
    return {}

  try:
    entries = json.loads(path.read_text(encoding="utf-8"))
  except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
    raise ConfigError(f"Failed to read credentials file {path}: {e}") from e

  if not isinstance(entries, list):
    raise ConfigError(f"Credentials file {path} must contain a JSON list")

  credentials: dict[str, str] = {}
  for entry in entries:
    if not isinstance(entry, dict) or not isinstance(entry.get("credentials"), dict):
      raise ConfigError(f"Malformed entry in credentials file {path}: {entry!r}")
    provider = entry.get("provider")
    api_key = entry["credentials"].get("apiKey")
    if isinstance(provider, str) and api_key and provider not in credentials:
      credentials[provider] = str(api_key)

  return credentials
