"""
Configuration loader for appsync_resolvers.

This module handles loading runtime settings from files and environment
variables, and reading/writing the declared resolver config and the state
document persisted between runs.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigLoadError
from ..models import ResolverConfig, ResolverState
from .models import GlobalConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Configuration loader with support for multiple sources."""

    def __init__(self) -> None:
        """Initialize configuration loader."""
        self.config_paths = [
            Path("appsync_resolvers.yaml"),
            Path("appsync_resolvers.yml"),
            Path("appsync_resolvers.json"),
            Path.home() / ".appsync_resolvers" / "config.yaml",
            Path.home() / ".appsync_resolvers" / "config.yml",
            Path.home() / ".appsync_resolvers" / "config.json",
        ]

        # Environment variable prefix
        self.env_prefix = "APPSYNC_RESOLVERS_"

    def load_settings(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> GlobalConfig:
        """
        Load runtime settings from all available sources.

        Args:
            config_file: Specific settings file to load

        Returns:
            GlobalConfig with file values overridden by environment variables
        """
        config_data: Dict[str, Any] = {}

        file_config = self._load_from_file(config_file)
        if file_config:
            config_data.update(file_config)

        env_config = self._load_from_environment()
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        try:
            return GlobalConfig(**config_data)
        except ValidationError as e:
            raise ConfigLoadError(
                f"Invalid settings: {e}", path=str(config_file) if config_file else None
            ) from e

    def load_resolver_config(self, path: Union[str, Path]) -> ResolverConfig:
        """
        Load the declared resolver configuration.

        Relative template paths in the document are resolved against the
        directory containing it.

        Args:
            path: YAML or JSON file with ``apiId``, ``mappingTemplates``
                and ``functions``

        Returns:
            Validated ResolverConfig
        """
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigLoadError(
                f"Resolver config file not found: {config_path}", path=str(config_path)
            )

        data = self._parse_config_file(config_path)
        data.setdefault("base_dir", str(config_path.resolve().parent))

        try:
            return ResolverConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigLoadError(
                f"Invalid resolver config {config_path}: {e}", path=str(config_path)
            ) from e

    def load_state(self, path: Union[str, Path]) -> ResolverState:
        """
        Load the state written by a previous run.

        Returns:
            The recorded state, or an empty state if the file does not exist
        """
        state_path = Path(path)
        if not state_path.exists():
            logger.debug("No state file at %s, starting from empty state", state_path)
            return ResolverState()

        data = self._parse_config_file(state_path)
        try:
            return ResolverState.model_validate(data)
        except ValidationError as e:
            raise ConfigLoadError(
                f"Invalid state file {state_path}: {e}", path=str(state_path)
            ) from e

    def save_state(self, state: ResolverState, path: Union[str, Path]) -> None:
        """Save state to file, as YAML or JSON depending on the suffix."""
        state_path = Path(path)
        suffix = state_path.suffix.lower()
        if suffix not in (".yaml", ".yml", ".json"):
            raise ConfigLoadError(
                f"Unsupported state file format: {state_path.suffix}",
                path=str(state_path),
            )

        state_path.parent.mkdir(parents=True, exist_ok=True)
        document = state.to_document()

        with open(state_path, "w", encoding="utf-8") as f:
            if suffix == ".json":
                json.dump(document, f, indent=2, default=str)
            else:
                yaml.safe_dump(document, f, default_flow_style=False, indent=2)
        logger.debug("Saved %d resolvers to %s", len(state.mapping_templates), state_path)

    def _load_from_file(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> Optional[Dict[str, Any]]:
        """Load settings from file."""
        if config_file:
            config_path = Path(config_file)
            if config_path.exists():
                return self._parse_config_file(config_path)
            raise ConfigLoadError(
                f"Settings file not found: {config_path}", path=str(config_path)
            )

        for config_path in self.config_paths:
            if config_path.exists():
                return self._parse_config_file(config_path)

        return None

    def _parse_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Parse configuration file based on extension."""
        suffix = config_path.suffix.lower()
        if suffix not in (".yaml", ".yml", ".json"):
            raise ConfigLoadError(
                f"Unsupported config file format: {config_path.suffix}",
                path=str(config_path),
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigLoadError(
                f"Failed to parse config file {config_path}: {e}", path=str(config_path)
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigLoadError(
                f"Config file {config_path} must contain a mapping at the top level",
                path=str(config_path),
            )
        return data

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load settings from environment variables."""
        config: Dict[str, Any] = {}

        env_mappings = {
            # Logging
            f"{self.env_prefix}LOG_LEVEL": ("logging", "level"),
            f"{self.env_prefix}LOG_FILE": ("logging", "file_path"),
            f"{self.env_prefix}LOG_FORMAT": ("logging", "format"),
            f"{self.env_prefix}STRUCTURED_LOGS": ("logging", "enable_structured"),
            # AWS
            f"{self.env_prefix}REGION": ("aws", "region"),
            f"{self.env_prefix}PROFILE": ("aws", "profile"),
            f"{self.env_prefix}ENDPOINT_URL": ("aws", "endpoint_url"),
        }

        for env_var, config_path in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                converted_value = self._convert_env_value(value)

                current = config
                for key in config_path[:-1]:
                    current = current.setdefault(key, {})
                current[config_path[-1]] = converted_value

        return config

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type."""
        lower = value.lower()
        if lower in ("true", "yes", "on"):
            return True
        if lower in ("false", "no", "off"):
            return False
        return value

    def _deep_merge(
        self, base: Dict[str, Any], override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
