"""Anthropic Claude provider."""

import os
from typing import Any

from mrchecker.providers.base import JudgeProvider
from mrchecker.providers.parser import extract_json
from mrchecker.providers.registry import register_provider


class AnthropicProvider(JudgeProvider):
  """Anthropic Claude LLM provider."""

  DEFAULT_MODEL = "claude-opus-4-5-20251101"
  MAX_TOKENS = 1024

  def __init__(self, model: str | None = None, api_key: str | None = None):
    self._model = model or self.DEFAULT_MODEL
    self._api_key = os.environ.get("ANTHROPIC_API_KEY") or api_key
    self._client: Any = None

  @property
  def name(self) -> str:
    return "anthropic"

  @property
  def model(self) -> str:
    return self._model

  def is_available(self) -> bool:
    return bool(self._api_key)

  def _get_client(self) -> Any:
    if self._client is None:
      try:
        from anthropic import AsyncAnthropic
        self._client = AsyncAnthropic(api_key=self._api_key)
      except ImportError as e:
        raise ImportError(
          "anthropic not installed. Install with: pip install 'mr-checker[anthropic]'"
        ) from e
    return self._client

  async def evaluate(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
    client = self._get_client()

    kwargs: dict[str, Any] = {}
    if system_prompt:
      kwargs["system"] = system_prompt

    response = await client.messages.create(
      model=self._model,
      max_tokens=self.MAX_TOKENS,
      messages=[{"role": "user", "content": user_prompt}],
      **kwargs,
    )

    content = response.content[0].text if response.content else "{}"
    return extract_json(content)


def _create_anthropic(model: str | None, api_key: str | None) -> JudgeProvider:
  return AnthropicProvider(model, api_key)


register_provider("anthropic", _create_anthropic)
