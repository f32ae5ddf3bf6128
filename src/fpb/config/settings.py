"""Configuration management for fpb.

Loads settings from an optional YAML configuration file with environment
variable overrides (``FPB_`` prefix, ``__`` for nested sections).
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/fpb.yaml")


class ServerConfig(BaseModel):
    host: str = Field(default="127.0.0.1", description="Loopback address to bind")
    port: int = Field(default=6914, ge=1, le=65535)
    max_workers: int = Field(default=1, gt=0, description="Connections handled at once")
    backlog: int = Field(default=100, gt=0)


class InterpreterConfig(BaseModel):
    executable: str = Field(default="python")
    scratch_root: Path | None = Field(
        default=None, description="Parent of the scratch directory (system temp dir if unset)"
    )
    scratch_dir_name: str = Field(default="fpb")
    timeout: float | None = Field(default=None, gt=0, description="Seconds before the interpreter is killed")


class LoggingConfig(BaseModel):
    level: str = Field(default="WARNING")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for the fpb helper.

    Loads from YAML file and supports environment variable overrides.
    """

    model_config = {
        "env_prefix": "FPB_",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }

    server: ServerConfig = Field(default_factory=ServerConfig)
    interpreter: InterpreterConfig = Field(default_factory=InterpreterConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # YAML values arrive as init kwargs; environment must still win.
        return env_settings, init_settings, file_secret_settings


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + environment variables.

    Priority: env vars > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    elif config_path:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    return Settings(**yaml_data)
