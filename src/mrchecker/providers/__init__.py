"""LLM providers for rule evaluation."""

from mrchecker.providers.backend import ModelBackend
from mrchecker.providers.base import JudgeProvider
from mrchecker.providers.parser import BackendError, extract_json
from mrchecker.providers.registry import (
  ProviderNotFoundError,
  ProviderNotSupportedError,
  ProviderRegistry,
  ProviderUnavailableError,
  create_provider,
  list_providers,
  register_provider,
)

__all__ = [
  "BackendError",
  "JudgeProvider",
  "ModelBackend",
  "ProviderNotFoundError",
  "ProviderNotSupportedError",
  "ProviderRegistry",
  "ProviderUnavailableError",
  "create_provider",
  "extract_json",
  "list_providers",
  "register_provider",
]
