import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .errors import ConfigError

CONFIG_PATH = os.environ.get("CF_DDNS_CONFIG_PATH", "config.yml")

APEX = "@"


class SubdomainConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = APEX
    proxied: bool
    # pins the provider record id, skipping the lookup request
    id: str | None = None

    @field_validator("name")
    @classmethod
    def _normalize_apex(cls, name: str) -> str:
        name = name.strip()
        return name if name else APEX


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CF_DDNS_",
        env_file=".env",
        env_nested_delimiter="__",
        frozen=True,
        # env and .env may carry unrelated CF_DDNS_ variables, unknown yaml keys
        # are rejected in load_config
        extra="ignore",
    )

    api_token: str = Field(min_length=1)
    zone_id: str = Field(min_length=1)
    ttl: PositiveInt
    subdomains: list[SubdomainConfig]
    # read from the zone when omitted
    domain: str | None = None
    logging_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # yaml values arrive as init kwargs, env vars and .env take precedence over them
        return (env_settings, dotenv_settings, init_settings)


def _format_validation_error(e: ValidationError) -> str:
    problems = []
    for error in e.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


def load_config(path: str | Path = CONFIG_PATH) -> Config:
    """
    load and validate the yaml config file at path

    :raises ConfigError: if the file is missing, isn't valid yaml,
        or any field is missing or invalid
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise ConfigError(f"config file {path} not found")

    try:
        yaml_values = YamlConfigSettingsSource(Config, yaml_file=path)()
    except yaml.YAMLError as e:
        raise ConfigError(f"config file {path} is not valid yaml: {e}") from e
    except (TypeError, ValueError) as e:
        # the top level of the document isn't a mapping
        raise ConfigError(f"config file {path} must contain a mapping") from e
    except OSError as e:
        raise ConfigError(f"failed to read config file {path}: {e}") from e

    unknown_keys = sorted(str(key) for key in yaml_values if key not in Config.model_fields)
    if unknown_keys:
        raise ConfigError(
            f"invalid config file {path}: unknown keys {', '.join(unknown_keys)}"
        )

    try:
        return Config(**yaml_values)
    except ValidationError as e:
        raise ConfigError(
            f"invalid config file {path}: {_format_validation_error(e)}"
        ) from e
