"""Configuration module for modebridge."""

from modebridge.config.loader import load_config, get_config_path
from modebridge.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
