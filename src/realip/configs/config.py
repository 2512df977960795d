"""Configuration management using pydantic-settings.

Priority order (highest first):

1. Init kwargs (``AppConfig(real_ip=...)``)
2. Override YAML (path from ``REALIP_CONFIG_FILE`` env var)
3. Environment variables (``REALIP_`` prefix, ``__`` for nesting)
4. ``.env`` dotenv file
5. Static YAML (``configs/config.yaml``)
6. File secrets
7. Field defaults

Nested lists are given as JSON in env vars, e.g.
``REALIP_REAL_IP__TRUSTED_NETWORKS='["10.0.0.0/8"]'``.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .system import LoggingConfig, RealIPConfig, ServerConfig

# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

CONFIG_PY_PATH = Path(__file__).resolve()
PROJECT_ROOT = CONFIG_PY_PATH.parent.parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "configs"

STATIC_CONFIG_FILE = CONFIG_DIR / "config.yaml"

OVERRIDE_CONFIG_ENV = "REALIP_CONFIG_FILE"

DOTENV_FILE_PATH = PROJECT_ROOT / ".env"
ENV_DELIMITER = "__"
ENV_PREFIX = "REALIP_"

DEFAULT_ENCODING = "utf-8"


def _override_config_file() -> Optional[Path]:
    value = os.environ.get(OVERRIDE_CONFIG_ENV)
    return Path(value) if value else None


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=DOTENV_FILE_PATH,
        env_file_encoding=DEFAULT_ENCODING,
        env_nested_delimiter=ENV_DELIMITER,
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        yaml_file=STATIC_CONFIG_FILE,
        yaml_file_encoding=DEFAULT_ENCODING,
    )

    real_ip: RealIPConfig = Field(
        default_factory=RealIPConfig,
        description="Trusted proxy settings",
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings",
    )

    server: ServerConfig = Field(
        default_factory=ServerConfig,
        description="HTTP server settings",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [init_settings]

        override_file = _override_config_file()
        if override_file is not None and override_file.is_file():
            sources.append(
                YamlConfigSettingsSource(
                    settings_cls,
                    yaml_file=override_file,
                    yaml_file_encoding=DEFAULT_ENCODING,
                )
            )

        sources.append(env_settings)
        sources.append(dotenv_settings)

        # Static YAML (missing file → empty)
        sources.append(YamlConfigSettingsSource(settings_cls))

        sources.append(file_secret_settings)

        return tuple(sources)


def get_app_config() -> AppConfig:
    """Get the application configuration (re-read on every call)."""
    return AppConfig()
