"""Provider discovery and registration."""

from typing import Callable

from mrchecker.providers.base import JudgeProvider


class ProviderNotFoundError(Exception):
  """Requested provider not found."""


class ProviderUnavailableError(Exception):
  """Provider found but not available (missing API key, etc)."""


class ProviderNotSupportedError(Exception):
  """Provider is recognized but cannot evaluate rules yet."""


# Factories receive the model override and a credential from the credentials file.
ProviderFactory = Callable[[str | None, str | None], JudgeProvider]

_providers: dict[str, ProviderFactory] = {}


def register_provider(name: str, factory: ProviderFactory) -> None:
  """Register a provider factory."""
  _providers[name] = factory


def create_provider(
  name: str,
  model: str | None = None,
  credential: str | None = None,
) -> JudgeProvider:
  """Instantiate a registered provider."""
  if name not in _providers:
    available = ", ".join(_providers.keys()) or "none"
    raise ProviderNotFoundError(
      f"Provider '{name}' not found. Available: {available}"
    )
  return _providers[name](model, credential)


def list_providers() -> list[str]:
  """List registered provider names."""
  return list(_providers.keys())


class ProviderRegistry:
  """Registry for lazy provider loading."""

  @staticmethod
  def load_all() -> None:
    """Load all provider modules to trigger registration."""
    from mrchecker.providers import anthropic, gemini, ollama, openai  # noqa: F401
