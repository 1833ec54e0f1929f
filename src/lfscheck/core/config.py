# src/lfscheck/core/config.py
"""Settings schema and loading for a compliance run.

Uses Pydantic for validation with a frozen (immutable) model.
Precedence: CLI flags > YAML file > defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from lfscheck.contracts.errors import ConfigurationError

DEFAULT_OID_COUNT = 50
DEFAULT_LINE_WIDTH = 70


class CheckSettings(BaseModel):
    """Validated settings for one run."""

    model_config = {"frozen": True, "extra": "forbid"}

    count: int = Field(
        default=DEFAULT_OID_COUNT,
        gt=0,
        description="Number of present and of missing OIDs to synthesize",
    )
    seed: int | None = Field(
        default=None,
        description="PRNG seed for OID synthesis (defaults to count)",
    )
    object_size: int = Field(
        default=1024,
        ge=0,
        description="Size in bytes declared for every object in batch requests",
    )
    line_width: int = Field(
        default=DEFAULT_LINE_WIDTH,
        gt=0,
        description="Column width of the check name field in console output",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP request timeout in seconds",
    )
    user_agent: str = Field(
        default="lfscheck",
        min_length=1,
        description="User-Agent header sent with every request",
    )
    strict: bool = Field(
        default=False,
        description="Exit with status 1 when any check fails",
    )
    output_format: Literal["console", "json"] = Field(
        default="console",
        description="Report format",
    )

    @property
    def effective_seed(self) -> int:
        return self.count if self.seed is None else self.seed


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dicts, with override taking precedence.

    Returns a new dict; inputs are not mutated.
    """
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_settings(
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> CheckSettings:
    """Load settings with precedence handling.

    Args:
        config_file: Optional YAML file holding a mapping of settings.
        cli_overrides: Values given on the command line (None entries ignored).

    Raises:
        ConfigurationError: If the file is missing or unreadable, is not a
            YAML mapping, or the merged settings fail validation.
    """
    config_dict: dict[str, Any] = {}

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            with config_file.open(encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Error reading config file {config_file}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Config file {config_file} is not valid YAML: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Config file {config_file} must be a YAML mapping, got {type(loaded).__name__}")
        config_dict = loaded

    if cli_overrides is not None:
        config_dict = deep_merge(config_dict, {k: v for k, v in cli_overrides.items() if v is not None})

    try:
        return CheckSettings.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
