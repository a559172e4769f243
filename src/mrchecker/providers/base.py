"""Base provider protocol."""

from abc import ABC, abstractmethod
from typing import Any


class JudgeProvider(ABC):
  """Abstract base for LLM backends that judge rule compliance."""

  @abstractmethod
  async def evaluate(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
    """Send one judgment request and return the decoded JSON object."""
    ...

  @property
  @abstractmethod
  def name(self) -> str:
    """Provider name."""
    ...

  @property
  @abstractmethod
  def model(self) -> str:
    """Model being used."""
    ...

  @abstractmethod
  def is_available(self) -> bool:
    """Check if provider is configured with credentials."""
    ...
