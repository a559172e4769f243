"""Configuration and prompt file loading."""

from pathlib import Path

import yaml
from pydantic import ValidationError

from mrchecker.config.settings import Settings
from mrchecker.models import SystemPrompts

CONFIG_FILENAMES = [".mr-checker.yaml", ".mr-checker.yml", "mr-checker.yaml", "mr-checker.yml"]


class ConfigError(Exception):
  """Configuration is missing, unreadable or invalid."""


def _find_config_file(config_path: Path | None = None, repo_dir: Path | None = None) -> Path | None:
  """Find config file path, or None if no config exists."""
  if config_path:
    if not config_path.exists():
      raise ConfigError(f"Config file not found: {config_path}")
    return config_path

  search_dir = repo_dir or Path.cwd()
  for filename in CONFIG_FILENAMES:
    path = search_dir / filename
    if path.exists():
      return path

  return None


def load_config(config_path: Path | None = None, repo_dir: Path | None = None) -> Settings:
  """Load configuration from file or defaults."""
  path = _find_config_file(config_path, repo_dir)
  if path:
    return _load_from_file(path)
  return Settings()


def _load_from_file(path: Path) -> Settings:
  """Load settings from a YAML file."""
  try:
    with open(path) as f:
      data = yaml.safe_load(f) or {}
  except (OSError, yaml.YAMLError) as e:
    raise ConfigError(f"Cannot read config file {path}: {e}") from e

  if not isinstance(data, dict):
    raise ConfigError(f"Config file {path} must contain a mapping")

  return _parse_config(data, path)


def _parse_config(data: dict, source: Path | None = None) -> Settings:
  """Parse config dict into Settings."""
  if "credentials_file" in data:
    data["credentials_file"] = Path(data["credentials_file"]).expanduser()

  try:
    return Settings(**data)
  except ValidationError as e:
    where = f" in {source}" if source else ""
    raise ConfigError(f"Invalid configuration{where}: {e}") from e


def load_prompt(path: Path | None) -> str:
  """Read a system prompt file.

  A prompt that was not requested is empty; a requested prompt that
  does not exist is a configuration error.
  """
  if path is None:
    return ""

  resolved = path.expanduser().resolve()
  if not resolved.is_file():
    raise ConfigError(f"Prompt file not found: {resolved}")

  try:
    return resolved.read_text(encoding="utf-8")
  except (OSError, UnicodeDecodeError) as e:
    raise ConfigError(f"Cannot read prompt file {resolved}: {e}") from e


def load_prompts(
  history: Path | None = None,
  file: Path | None = None,
  inline: Path | None = None,
) -> SystemPrompts:
  """Load the system prompts for all three review scopes."""
  return SystemPrompts(
    history=load_prompt(history),
    file=load_prompt(file),
    inline=load_prompt(inline),
  )
