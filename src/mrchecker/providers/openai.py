"""OpenAI provider."""

import os
from typing import Any

from mrchecker.providers.base import JudgeProvider
from mrchecker.providers.parser import extract_json
from mrchecker.providers.registry import register_provider


class OpenAIProvider(JudgeProvider):
  """OpenAI LLM provider using JSON mode."""

  DEFAULT_MODEL = "gpt-4o"

  def __init__(self, model: str | None = None, api_key: str | None = None):
    self._model = model or self.DEFAULT_MODEL
    self._api_key = os.environ.get("OPENAI_API_KEY") or api_key
    self._client: Any = None

  @property
  def name(self) -> str:
    return "openai"

  @property
  def model(self) -> str:
    return self._model

  def is_available(self) -> bool:
    return bool(self._api_key)

  def _get_client(self) -> Any:
    if self._client is None:
      from openai import AsyncOpenAI
      self._client = AsyncOpenAI(api_key=self._api_key)
    return self._client

  async def evaluate(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
    client = self._get_client()

    messages = []
    if system_prompt:
      messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": user_prompt})

    response = await client.chat.completions.create(
      model=self._model,
      messages=messages,
      response_format={"type": "json_object"},
    )

    return extract_json(response.choices[0].message.content or "{}")


def _create_openai(model: str | None, api_key: str | None) -> JudgeProvider:
  return OpenAIProvider(model, api_key)


register_provider("openai", _create_openai)
