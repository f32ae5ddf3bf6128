"""Configuration management for fpb.

Loads and validates optional YAML-based configuration with Pydantic
models. Defaults reproduce the stock helper (127.0.0.1:6914, ``python``).
"""

from fpb.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
