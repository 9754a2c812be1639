"""Configuration management with Pydantic models."""

from .loader import load_config, parse_config
from .settings import EngineSettings

__all__ = ["EngineSettings", "load_config", "parse_config"]
