"""Allow-list configuration with environment variable support.

All settings can be configured via environment variables with the ORIGINMATCH_ prefix.
Example: ORIGINMATCH_ALLOWED_ORIGINS="https://*.example.com,localhost:3000"
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from originmatch.matcher_set import MatcherSet
from originmatch.parser import build, check_strict


def load_config_from_file(path: str | Path) -> dict[str, Any]:
    """Load configuration from a YAML or TOML file.

    Args:
        path: Path to the configuration file (.yaml, .yml, or .toml)

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config file has encoding errors, invalid syntax, or unsupported format
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValueError(f"Config file encoding error in {path}: {e}") from e

    try:
        if path.suffix in (".yaml", ".yml"):
            return yaml.safe_load(content) or {}
        elif path.suffix == ".toml":
            return tomllib.loads(content)
        else:
            raise ValueError(f"Unsupported config format: {path.suffix}")
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e


def flatten_config(config: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in config.items():
        full_key = f"{prefix}_{key}" if prefix else key
        if isinstance(value, dict):
            result.update(flatten_config(value, full_key))
        else:
            result[full_key] = value
    return result


class OriginMatchConfig(BaseSettings):
    """Origin allow-list configuration.

    All settings can be overridden via environment variables:
    - ORIGINMATCH_ALLOWED_ORIGINS: Comma-separated origin specs
    - ORIGINMATCH_STRICT: Reject specs that do not round-trip
    - ORIGINMATCH_LOG_LEVEL: Log level for the CLI

    Example:
        config = OriginMatchConfig()
        origins = config.matcher_set()
        origins.matches(request.headers["origin"])
    """

    model_config = SettingsConfigDict(
        env_prefix="ORIGINMATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    allowed_origins: str = Field(
        default="",
        description="Comma-separated origin specs. Empty allows nothing.",
    )
    strict: bool = Field(
        default=False,
        description="Reject specs with ignored components (path, query, casing).",
    )
    log_level: str = Field(
        default="warning",
        description="Log level (debug, info, warning, error).",
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _join_origin_list(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return ",".join(str(item) for item in value)
        return value

    def specs(self) -> list[str]:
        """Split allowed_origins into individual specs."""
        if not self.allowed_origins:
            return []
        return self.allowed_origins.split(",")

    def matcher_set(self) -> MatcherSet:
        """Build the configured allow-list.

        Raises:
            OriginSpecError: If a spec is invalid, or does not round-trip in strict mode.
        """
        specs = self.specs()
        if self.strict:
            for spec in specs:
                check_strict(spec)
        return build(specs)


def load_config(path: str | Path | None = None) -> OriginMatchConfig:
    """Create a configuration, letting values from ``path`` override the environment."""
    if path is None:
        return OriginMatchConfig()
    return OriginMatchConfig(**flatten_config(load_config_from_file(path)))
