"""Tests for provider auto-detection."""

import pytest
from mrchecker.providers.detection import ProviderDetector


class StubProvider:
  def __init__(self, available: bool):
    self._available = available

  def is_available(self) -> bool:
    return self._available


@pytest.fixture
def mock_providers():
  """Provider instances keyed by name; only ollama starts unavailable."""
  return {
    "anthropic": StubProvider(True),
    "openai": StubProvider(True),
    "gemini": StubProvider(True),
    "ollama": StubProvider(False),
  }


class TestProviderDetector:
  """Tests for ProviderDetector."""

  @pytest.mark.parametrize("available,expected", [
    ("openai", "openai"),
    ("anthropic", "anthropic"),
    ("ollama", "ollama"),
    ("gemini", "gemini"),
  ])
  def test_detect_single_available(self, available, expected):
    """Detects the only provider with credentials."""
    providers = {name: StubProvider(name == available) for name in ProviderDetector.DETECTION_ORDER}

    detector = ProviderDetector(providers)
    assert detector.detect() == expected

  def test_detect_priority_order(self, mock_providers):
    """Prefers openai over anthropic when both available."""
    detector = ProviderDetector(mock_providers)
    assert detector.detect() == "openai"

  def test_detect_prefers_ollama_over_gemini(self, mock_providers):
    mock_providers["openai"] = StubProvider(False)
    mock_providers["anthropic"] = StubProvider(False)
    mock_providers["ollama"] = StubProvider(True)

    detector = ProviderDetector(mock_providers)
    assert detector.detect() == "ollama"

  def test_detect_returns_none_when_nothing_available(self):
    """Returns None when no providers available."""
    providers = {"openai": StubProvider(False), "ollama": StubProvider(False)}

    detector = ProviderDetector(providers)
    assert detector.detect() is None

  def test_unknown_providers_follow_known_ones(self):
    providers = {"zeta": StubProvider(True), "alpha": StubProvider(True), "gemini": StubProvider(True)}

    detector = ProviderDetector(providers)
    assert [s.name for s in detector.get_status()] == ["gemini", "alpha", "zeta"]
    assert detector.detect() == "gemini"

  def test_get_status_returns_all_providers(self, mock_providers):
    """Returns status for all providers in order."""
    detector = ProviderDetector(mock_providers)
    status = detector.get_status()

    assert [s.name for s in status] == ["openai", "anthropic", "ollama", "gemini"]
    assert status[0].available is True
    assert status[2].available is False
    assert status[2].reason == "OLLAMA_HOST not set"

  def test_format_error_includes_env_var_hint(self, mock_providers):
    """Error message includes hint about required env var."""
    detector = ProviderDetector(mock_providers)
    error = detector.format_error("ollama")

    assert "OLLAMA_HOST" in error
    assert "not available" in error
    assert "[--] ollama" in error
    assert "[ok] openai" in error
