"""Model backend shared by all evaluations of a run."""

from typing import Any, Mapping

from mrchecker.config import Settings
from mrchecker.providers.base import JudgeProvider
from mrchecker.providers.credentials import load_credentials
from mrchecker.providers.detection import ProviderDetector
from mrchecker.providers.registry import (
  ProviderNotFoundError,
  ProviderRegistry,
  ProviderUnavailableError,
  create_provider,
  list_providers,
)

NO_PROVIDERS_MESSAGE = (
  "No AI providers configured. Please either:\n"
  "1. Set OPENAI_API_KEY, ANTHROPIC_API_KEY, GEMINI_API_KEY or OLLAMA_HOST, or\n"
  "2. Create a credentials file at ~/.ai/review/credentials.json"
)


class ModelBackend:
  """The set of configured providers plus the one selected for this run.

  Construction fails when no provider has credentials or when the
  selected provider is unknown or unconfigured, so a broken setup is
  reported before any evaluation starts.
  """

  def __init__(self, providers: Mapping[str, JudgeProvider], default: str | None = None):
    self._detector = ProviderDetector(providers)
    self._registered = dict(providers)
    self._available = {name: p for name, p in providers.items() if p.is_available()}

    if not self._available:
      raise ProviderUnavailableError(NO_PROVIDERS_MESSAGE)

    selected = default or self._detector.detect() or next(iter(self._available))
    self.require(selected)
    self._default = selected

  @classmethod
  def from_settings(cls, settings: Settings) -> "ModelBackend":
    """Build every registered provider from environment and credentials file."""
    ProviderRegistry.load_all()
    credentials = load_credentials(settings.credentials_file)

    if settings.provider and settings.provider not in list_providers():
      create_provider(settings.provider)  # raises ProviderNotFoundError

    providers = {
      name: create_provider(
        name,
        settings.model if name == settings.provider else None,
        credentials.get(name),
      )
      for name in list_providers()
    }
    backend = cls(providers, settings.provider)

    # Auto-detected provider still honors an explicit model override.
    if settings.model and not settings.provider:
      name = backend.provider
      backend._replace(name, create_provider(name, settings.model, credentials.get(name)))
    return backend

  @property
  def provider(self) -> str:
    """Name of the provider evaluations are sent to."""
    return self._default

  @property
  def model(self) -> str:
    return self._available[self._default].model

  def require(self, name: str) -> JudgeProvider:
    """Return a usable provider or raise a configuration error."""
    if name not in self._registered:
      available = ", ".join(self._registered) or "none"
      raise ProviderNotFoundError(f"Provider '{name}' not found. Available: {available}")
    if name not in self._available:
      raise ProviderUnavailableError(self._detector.format_error(name))
    return self._available[name]

  async def evaluate(self, provider_id: str, system_prompt: str, user_prompt: str) -> dict[str, Any]:
    """Send a judgment request to a provider and return its JSON object."""
    provider = self.require(provider_id)
    return await provider.evaluate(system_prompt, user_prompt)

  def _replace(self, name: str, provider: JudgeProvider) -> None:
    self._registered[name] = provider
    self._available[name] = provider
