"""Google Gemini provider."""

import os
from typing import Any

from mrchecker.providers.base import JudgeProvider
from mrchecker.providers.registry import ProviderNotSupportedError, register_provider


class GeminiProvider(JudgeProvider):
  """Google Gemini provider.

  Credentials are recognized so the provider can be configured and
  selected, but rule evaluation is not implemented for it yet.
  """

  DEFAULT_MODEL = "gemini-1.5-flash"

  def __init__(self, model: str | None = None, api_key: str | None = None):
    self._model = model or self.DEFAULT_MODEL
    self._api_key = os.environ.get("GEMINI_API_KEY") or api_key

  @property
  def name(self) -> str:
    return "gemini"

  @property
  def model(self) -> str:
    return self._model

  def is_available(self) -> bool:
    return bool(self._api_key)

  async def evaluate(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
    raise ProviderNotSupportedError("Gemini is not supported yet")


def _create_gemini(model: str | None, api_key: str | None) -> JudgeProvider:
  return GeminiProvider(model, api_key)


register_provider("gemini", _create_gemini)
