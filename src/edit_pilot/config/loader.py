"""
Configuration loading for Edit Pilot.

Configuration is merged from YAML files and environment variables, then
validated by the pydantic models in .models.
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any, Union
import yaml
from pydantic import ValidationError
from dotenv import load_dotenv

from .models import EditPilotConfig
from ..utils.error_handling import ConfigurationError


ENV_PREFIX = "PILOT_"


class ConfigLoader:
    """
    Configuration loader that supports multiple sources and validation.

    Loading priority (highest to lowest):
    1. Environment variables (PILOT_<SECTION>_<KEY>)
    2. CLI-specified config file
    3. Environment-specific config (e.g., configs/development.yaml)
    4. Default configuration file
    5. Built-in defaults (from the pydantic models)
    """

    def __init__(self, search_root: Optional[Union[str, Path]] = None):
        self._config: Optional[EditPilotConfig] = None
        self._config_path: Optional[Path] = None
        self._root = Path(search_root) if search_root else Path(".")

        env_file = self._root / ".env"
        if env_file.exists():
            load_dotenv(env_file)

    @property
    def config_path(self) -> Optional[Path]:
        return self._config_path

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> EditPilotConfig:
        """
        Load configuration from all sources and validate it.

        Args:
            config_path: Optional path to a specific config file

        Returns:
            Validated EditPilotConfig instance

        Raises:
            ConfigurationError: If configuration loading or validation fails
        """
        try:
            config_data: Dict[str, Any] = {}

            default_config_path = self._find_default_config()
            if default_config_path:
                config_data = self._deep_merge(config_data, self._load_yaml_file(default_config_path))
                self._config_path = default_config_path

            env_config_path = self._find_environment_config()
            if env_config_path and env_config_path != default_config_path:
                config_data = self._deep_merge(config_data, self._load_yaml_file(env_config_path))
                self._config_path = env_config_path

            if config_path:
                cli_config_path = Path(config_path)
                if not cli_config_path.exists():
                    raise ConfigurationError(f"Specified config file not found: {config_path}")

                config_data = self._deep_merge(config_data, self._load_yaml_file(cli_config_path))
                self._config_path = cli_config_path

            config_data = self._apply_env_overrides(config_data)

            self._config = EditPilotConfig(**config_data)
            return self._config

        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {self._format_validation_error(e)}") from e
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

    def get_config(self) -> EditPilotConfig:
        """Get the current configuration, loading it if necessary."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def reload_config(self, config_path: Optional[Union[str, Path]] = None) -> EditPilotConfig:
        """Drop the cached configuration and load it again."""
        self._config = None
        return self.load_config(config_path)

    def _find_default_config(self) -> Optional[Path]:
        for name in ("configs/default.yaml", "configs/default.yml",
                     "config/default.yaml", "config/default.yml",
                     "default.yaml", "default.yml"):
            path = self._root / name
            if path.exists():
                return path
        return None

    def _find_environment_config(self) -> Optional[Path]:
        env = os.getenv("PILOT_ENV") or os.getenv("ENVIRONMENT")
        if not env:
            return None

        for name in (f"configs/{env}.yaml", f"configs/{env}.yml",
                     f"config/{env}.yaml", f"config/{env}.yml"):
            path = self._root / name
            if path.exists():
                return path
        return None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load and parse a YAML configuration file.

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)

            if data is None:
                return {}

            if not isinstance(data, dict):
                raise ConfigurationError(f"Configuration file {file_path} must contain a YAML object (dictionary)")

            return data

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {file_path}: {e}") from e
        except IOError as e:
            raise ConfigurationError(f"Cannot read configuration file {file_path}: {e}") from e

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply PILOT_* environment variables on top of file configuration.

        The first segment after the prefix names the section and the rest is
        the key, so PILOT_COMPLETION_ENDPOINT_URL sets completion.endpoint_url.
        PILOT_ENV selects an environment file and is not a setting.
        """
        result = config_data.copy()

        for env_key, env_value in os.environ.items():
            if not env_key.startswith(ENV_PREFIX) or env_key == "PILOT_ENV":
                continue

            parts = env_key[len(ENV_PREFIX):].lower().split('_', 1)
            if len(parts) != 2 or not parts[1]:
                continue

            section, key = parts
            section_data = result.get(section)
            if section_data is None:
                section_data = {}
            elif not isinstance(section_data, dict):
                continue

            result[section] = {**section_data, key: self._convert_env_value(env_value)}

        return result

    def _convert_env_value(self, value: str) -> Any:
        """Convert an environment string to bool, int, float, or leave it as a string."""
        lowered = value.strip().lower()
        if lowered in ('true', 'yes', 'on'):
            return True
        if lowered in ('false', 'no', 'off'):
            return False
        if lowered in ('null', 'none'):
            return None

        try:
            return int(value)
        except ValueError:
            pass
        try:
            return float(value)
        except ValueError:
            pass

        return value

    def _format_validation_error(self, error: ValidationError) -> str:
        messages = []
        for err in error.errors():
            location = " -> ".join(str(loc) for loc in err['loc'])
            messages.append(f"  {location}: {err['msg']} (got: {err.get('input', 'N/A')})")

        return "Validation errors:\n" + "\n".join(messages)


_config_loader = ConfigLoader()


def load_config(config_path: Optional[Union[str, Path]] = None) -> EditPilotConfig:
    """
    Load configuration from multiple sources.

    Raises:
        ConfigurationError: If configuration loading fails
    """
    return _config_loader.load_config(config_path)


def get_config() -> EditPilotConfig:
    """Get the current configuration, loading it if necessary."""
    return _config_loader.get_config()


def reload_config(config_path: Optional[Union[str, Path]] = None) -> EditPilotConfig:
    """Reload configuration from sources."""
    return _config_loader.reload_config(config_path)


def validate_config_file(config_path: Union[str, Path]) -> tuple[bool, Optional[str]]:
    """
    Validate a configuration file without loading it globally.

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        ConfigLoader().load_config(config_path)
        return True, None
    except ConfigurationError as e:
        return False, str(e)
