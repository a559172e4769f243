"""Ollama local LLM provider."""

import os
from typing import Any

import httpx

from mrchecker.providers.base import JudgeProvider
from mrchecker.providers.parser import extract_json
from mrchecker.providers.registry import register_provider


class OllamaProvider(JudgeProvider):
  """Ollama local LLM provider.

  Enabled by OLLAMA_HOST (or a credentials-file entry holding the host),
  since a local server needs no API key.
  """

  DEFAULT_MODEL = "codellama"
  REQUEST_TIMEOUT = 120.0

  def __init__(self, model: str | None = None, host: str | None = None):
    self._model = model or self.DEFAULT_MODEL
    self._host = os.environ.get("OLLAMA_HOST") or host

  @property
  def name(self) -> str:
    return "ollama"

  @property
  def model(self) -> str:
    return self._model

  def is_available(self) -> bool:
    return bool(self._host)

  async def evaluate(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
    payload: dict[str, Any] = {
      "model": self._model,
      "prompt": user_prompt,
      "stream": False,
      "format": "json",
    }
    if system_prompt:
      payload["system"] = system_prompt

    async with httpx.AsyncClient(timeout=self.REQUEST_TIMEOUT) as client:
      response = await client.post(f"{self._host}/api/generate", json=payload)
      response.raise_for_status()

    return extract_json(response.json().get("response", "{}"))


def _create_ollama(model: str | None, host: str | None) -> JudgeProvider:
  return OllamaProvider(model, host)


register_provider("ollama", _create_ollama)
