"""Configuration module: exports Settings and load_config."""

from stickerpacks.config.loader import load_config
from stickerpacks.config.settings import Settings

__all__ = ["Settings", "load_config"]
