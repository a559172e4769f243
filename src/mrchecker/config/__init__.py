"""Configuration management."""

from mrchecker.config.loader import ConfigError, load_config, load_prompt, load_prompts
from mrchecker.config.settings import Settings

__all__ = ["ConfigError", "Settings", "load_config", "load_prompt", "load_prompts"]
