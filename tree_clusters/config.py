"""Clustering configuration with file and environment overrides."""

import json
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .clusters_logging import get_logger
from .distance import DistanceCosts
from .errors import ConfigurationError

logger = get_logger()

# Environment variable -> config field
ENV_VARS = {
    "TREE_CLUSTERS_DIFFERENT_DEPTH_COST": "different_depth_cost",
    "TREE_CLUSTERS_DIFFERENT_TAG_COST": "different_tag_cost",
    "TREE_CLUSTERS_SAME_TAG_COST": "same_tag_cost",
    "TREE_CLUSTERS_STRIDE_COST": "stride_cost",
    "TREE_CLUSTERS_TOO_FAR": "too_far",
    "TREE_CLUSTERS_LOG_LEVEL": "log_level",
    "TREE_CLUSTERS_LOG_FORMAT": "log_format",
    "TREE_CLUSTERS_LOG_FILE": "log_file",
}


class ClusteringConfig(BaseModel):
    """Configuration model with validation."""

    model_config = ConfigDict(extra="forbid")

    # Distance costs
    different_depth_cost: float = Field(default=2, ge=0)
    different_tag_cost: float = Field(default=2, ge=0)
    same_tag_cost: float = Field(default=1, ge=0)
    stride_cost: float = Field(default=1, ge=0)

    # Default merge threshold when a caller does not pass one
    too_far: float | None = Field(default=None, ge=0)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["text", "json"] = Field(default="text")
    log_file: str | None = None

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator("log_format", mode="before")
    @classmethod
    def lower_log_format(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    def costs(self) -> DistanceCosts:
        """Return the distance cost table."""
        return DistanceCosts(
            different_depth_cost=self.different_depth_cost,
            different_tag_cost=self.different_tag_cost,
            same_tag_cost=self.same_tag_cost,
            stride_cost=self.stride_cost,
        )


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration file: {e}", config_file=str(path)
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in configuration file: {e}", config_file=str(path)
        ) from e
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Configuration file must contain a JSON object", config_file=str(path)
        )
    return data


def load_config(path: str | Path | None = None, **overrides: Any) -> ClusteringConfig:
    """Load configuration from all sources.

    Precedence (highest to lowest):
    1. Explicit overrides (None values are ignored)
    2. Environment variables
    3. JSON configuration file
    4. Defaults

    Raises:
        ConfigurationError: If the file is unreadable or a value is invalid.
    """
    config_dict: dict[str, Any] = {}

    if path is not None:
        file_settings = _read_config_file(Path(path))
        config_dict.update(file_settings)
        logger.debug(f"Loaded {len(file_settings)} settings from {path}")

    env_count = 0
    for env_var, field_name in ENV_VARS.items():
        value = os.environ.get(env_var)
        if value is not None:
            config_dict[field_name] = value
            env_count += 1
    if env_count > 0:
        logger.debug(f"Applied {env_count} environment variables")

    config_dict.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ClusteringConfig.model_validate(config_dict)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            config_file=str(path) if path is not None else None,
        ) from e
