"""Application settings."""

from pathlib import Path

from pydantic import BaseModel, Field


def _default_credentials_file() -> Path:
  return Path.home() / ".ai" / "review" / "credentials.json"


class Settings(BaseModel):
  """Application configuration."""

  provider: str | None = None
  model: str | None = None
  rules_dir: str = ".ai"
  ignore_file: str = ".aiignore"
  result_file: str = ".ai-review.result.json"
  credentials_file: Path = Field(default_factory=_default_credentials_file)
  max_concurrency: int | None = Field(default=None, ge=1)
  verbose: bool = False
