"""Configuration Management with Pydantic.

This module implements configuration models using Pydantic for parsing and
validation of an optional YAML configuration file with environment variable
overrides.
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from depsort.log_config import get_logger

# Initialize logger
logger = get_logger(__name__)

DEFAULT_CONFIG_FILES = ("depsort.yaml", "depsort.yml")


class OutputConfig(BaseModel):
    """Command output configuration settings.

    Attributes:
        show_cycle_path: Print the full cycle, not only the closing edge
        check_fails_on_cycle: Make ``check`` exit with failure when a cycle exists
    """

    show_cycle_path: bool = Field(
        default=False,
        description="Print the full cycle path on detection",
    )
    check_fails_on_cycle: bool = Field(
        default=False,
        description="Exit with failure from check when a cycle is found",
    )


class DepsortConfig(BaseModel):
    """Main configuration combining all settings.

    Attributes:
        output: Command output configuration
        logging_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render log lines as JSON instead of console format
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    logging_level: str = Field(
        default="WARNING",
        description="Logging level",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON",
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "DepsortConfig":
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file

        Returns:
            Parsed and validated DepsortConfig instance

        Raises:
            FileNotFoundError: If configuration file doesn't exist
            ValueError: If configuration is invalid
        """
        config_path = Path(path)

        if not config_path.exists():
            msg = f"Configuration file not found: {config_path}"
            raise FileNotFoundError(msg)

        logger.info("loading_configuration", path=str(config_path))

        try:
            with config_path.open() as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.exception("yaml_parse_error", error=str(e), path=str(config_path))
            msg = f"Invalid YAML in configuration file: {e}"
            raise ValueError(msg) from e

        if not config_data:
            msg = "Configuration file is empty"
            raise ValueError(msg)

        if not isinstance(config_data, dict):
            msg = "Configuration file must contain a mapping"
            raise ValueError(msg)

        config = cls.from_dict(config_data)

        logger.info(
            "configuration_loaded",
            logging_level=config.logging_level,
            show_cycle_path=config.output.show_cycle_path,
        )

        return config

    @classmethod
    def from_dict(cls, config_data: dict) -> "DepsortConfig":
        """Build configuration from a dictionary after environment overrides.

        Args:
            config_data: Base configuration dictionary

        Returns:
            Parsed and validated DepsortConfig instance
        """
        return cls(**cls._apply_env_overrides(config_data))

    @classmethod
    def _apply_env_overrides(cls, config_data: dict) -> dict:
        """Apply environment variable overrides to configuration.

        Environment variables follow the pattern: DEPSORT_<KEY>
        Example: DEPSORT_LOGGING_LEVEL, DEPSORT_SHOW_CYCLE_PATH

        Args:
            config_data: Base configuration dictionary

        Returns:
            Configuration dictionary with environment overrides applied
        """
        env_overrides = {
            ("output", "show_cycle_path"): "DEPSORT_SHOW_CYCLE_PATH",
            ("output", "check_fails_on_cycle"): "DEPSORT_CHECK_FAILS_ON_CYCLE",
            ("logging_level",): "DEPSORT_LOGGING_LEVEL",
            ("json_logs",): "DEPSORT_JSON_LOGS",
        }

        for path, env_var in env_overrides.items():
            value = os.environ.get(env_var)
            if value is not None:
                # Navigate to nested config section
                current = config_data
                for key in path[:-1]:
                    if key not in current:
                        current[key] = {}
                    current = current[key]

                final_key = path[-1]
                if env_var == "DEPSORT_LOGGING_LEVEL":
                    value = value.upper()
                else:
                    value = value.lower() in ("true", "1", "yes")

                current[final_key] = value
                logger.debug(
                    "env_override_applied",
                    env_var=env_var,
                    config_path=".".join(path),
                )

        return config_data


def load_config(config_path: str | Path | None = None) -> DepsortConfig:
    """Load configuration from file, falling back to defaults.

    Args:
        config_path: Path to configuration file. If None, looks for depsort.yaml
                    or depsort.yml in the current directory and uses defaults
                    when neither exists.

    Returns:
        Loaded DepsortConfig instance

    Raises:
        FileNotFoundError: If an explicit config file is not found
        ValueError: If config file is invalid
    """
    if config_path is None:
        for default_name in DEFAULT_CONFIG_FILES:
            default_path = Path(default_name)
            if default_path.exists():
                config_path = default_path
                break
        else:
            logger.debug("no_configuration_file", message="Using default configuration")
            return DepsortConfig.from_dict({})

    return DepsortConfig.from_yaml(config_path)


__all__ = [
    "DepsortConfig",
    "OutputConfig",
    "load_config",
]
