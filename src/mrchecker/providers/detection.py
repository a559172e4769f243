"""Provider auto-detection."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
  from mrchecker.providers.base import JudgeProvider


@dataclass(frozen=True)
class ProviderStatus:
  """Availability status for a provider."""

  name: str
  available: bool
  reason: str


class ProviderDetector:
  """Detects which instantiated providers have credentials."""

  DETECTION_ORDER = ("openai", "anthropic", "ollama", "gemini")
  ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "ollama": "OLLAMA_HOST",
  }

  def __init__(self, providers: Mapping[str, "JudgeProvider"]):
    self._providers = providers

  def detect(self) -> str | None:
    """Return first available provider, or None."""
    for name in self._ordered():
      if self._providers[name].is_available():
        return name
    return None

  def get_status(self) -> list[ProviderStatus]:
    """Get status for all providers in detection order."""
    return [self._check(name) for name in self._ordered()]

  def format_error(self, failed: str) -> str:
    """Format error message with provider status."""
    lines = [f"Provider '{failed}' is not available.", "", "Provider status:"]
    for s in self.get_status():
      lines.append(f"  {'[ok]' if s.available else '[--]'} {s.name}: {s.reason}")
    if failed in self.ENV_VARS:
      lines.extend([
        "",
        f"Set {self.ENV_VARS[failed]} or add '{failed}' to the credentials file.",
      ])
    return "\n".join(lines)

  def _ordered(self) -> list[str]:
    known = [name for name in self.DETECTION_ORDER if name in self._providers]
    extra = sorted(name for name in self._providers if name not in self.DETECTION_ORDER)
    return known + extra

  def _check(self, name: str) -> ProviderStatus:
    available = self._providers[name].is_available()
    source = self.ENV_VARS.get(name, "credentials")
    return ProviderStatus(name, available, f"{source} {'set' if available else 'not set'}")
