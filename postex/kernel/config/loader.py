"""Configuration loader for postex.

Supports two config sources:

1. **kind: Config YAML** (or a flat TOML file), loaded via explicit path
   or the ``POSTEX_CONFIG_PATH`` env var.
2. **pyproject.toml [tool.postex]** as the auto-discovery fallback.

Environment variables override file values for logging and framing.
"""

from __future__ import annotations

import os
import re
import tomllib
from pathlib import Path
from typing import Any

import yaml

from postex.kernel.config.models import LoggingConfig, PostExConfig, ShellConfig
from postex.kernel.exceptions import ConfigurationError
from postex.kernel.logging import get_logger

logger = get_logger(__name__)

_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})


def _parse_bool_env(value: str) -> bool:
    """Parse boolean from environment variable value.

    Raises
    ------
    ValueError
        If value is not a recognized boolean string
    """
    normalized = value.lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    expected = sorted(_TRUTHY_VALUES | _FALSY_VALUES)
    raise ValueError(f"Invalid boolean value: {value!r}. Expected one of: {expected}")


class ConfigLoader:
    """Loads and processes postex configuration files."""

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load_config_file(self, path: str | Path | None = None) -> PostExConfig:
        """Load configuration from YAML, TOML or pyproject.toml.

        Parameters
        ----------
        path : str | Path | None
            Path to config file. If None, searches using discovery order.

        Returns
        -------
        PostExConfig
            Parsed configuration with environment variables substituted

        Raises
        ------
        FileNotFoundError
            If no configuration file is found
        """
        config_path = self._find_config_file(path)
        logger.info("Loading configuration from {path}", path=config_path)

        if config_path.suffix in (".yaml", ".yml"):
            data = self._load_yaml(config_path)
        else:
            data = self._load_toml(config_path)
        return self._parse_config(self._substitute_env_vars(data))

    def _load_yaml(self, config_path: Path) -> dict[str, Any]:
        """Load the ``spec`` mapping of a ``kind: Config`` YAML file."""
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(str(config_path), "YAML config must be a mapping")
        if data.get("kind", "Config") != "Config":
            raise ConfigurationError(str(config_path), f"expected kind: Config, got {data['kind']!r}")

        spec = data.get("spec", {})
        if not isinstance(spec, dict):
            raise ConfigurationError(str(config_path), "'spec' field must be a mapping")
        return spec

    def _load_toml(self, config_path: Path) -> dict[str, Any]:
        """Load a TOML file, reading ``[tool.postex]`` when present."""
        with config_path.open("rb") as f:
            data = tomllib.load(f)

        if "tool" in data and "postex" in data.get("tool", {}):
            return data["tool"]["postex"]
        if config_path.name == "pyproject.toml":
            logger.warning("No [tool.postex] section found in pyproject.toml, using defaults")
            return {}
        return data

    def _find_config_file(self, path: str | Path | None) -> Path:
        """Find configuration file.

        Discovery order:
        1. Explicit path argument
        2. ``POSTEX_CONFIG_PATH`` env var
        3. ``pyproject.toml`` with ``[tool.postex]`` in CWD or a parent directory
        """
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return config_path

        if env_path := os.getenv("POSTEX_CONFIG_PATH"):
            config_path = Path(env_path)
            if config_path.exists():
                logger.debug("Using config from POSTEX_CONFIG_PATH: {}", config_path)
                return config_path
            logger.warning("POSTEX_CONFIG_PATH set but file not found: {}", config_path)

        current = Path.cwd()
        while True:
            pyproject = current / "pyproject.toml"
            if pyproject.exists():
                with pyproject.open("rb") as f:
                    data = tomllib.load(f)
                if "postex" in data.get("tool", {}):
                    return pyproject
            if current == current.parent:
                break
            current = current.parent

        raise FileNotFoundError(
            "No configuration file found. Provide a config path, "
            "set POSTEX_CONFIG_PATH, or add [tool.postex] to pyproject.toml"
        )

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively replace ``${VAR}`` placeholders with environment values."""
        if isinstance(data, str):

            def replacer(match: re.Match[str]) -> str:
                value = os.environ.get(match.group(1))
                if value is None:
                    return match.group(0)  # Keep original placeholder
                return value

            return self.ENV_VAR_PATTERN.sub(replacer, data)

        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]

        return data

    def _parse_config(self, data: dict[str, Any]) -> PostExConfig:
        """Parse raw configuration data into PostExConfig."""
        config = PostExConfig()
        config.logging = self._parse_logging_config(data.get("logging", {}))
        config.shell = self._parse_shell_config(data.get("shell", {}))

        if "settings" in data:
            config.settings = dict(data["settings"])
            logger.debug("Loaded {count} settings", count=len(config.settings))

        return config

    def _parse_logging_config(self, logging_data: dict[str, Any]) -> LoggingConfig:
        """Parse logging configuration with environment variable overrides.

        Environment variables take precedence over config file values:
        - POSTEX_LOG_LEVEL: Log level
        - POSTEX_LOG_FORMAT: Output format (console, json, structured, rich)
        - POSTEX_LOG_FILE: Optional file path for log output
        - POSTEX_LOG_COLOR: Use color output (true/false)
        """
        level = str(logging_data.get("level", "WARNING")).upper()
        format_type = str(logging_data.get("format", "structured")).lower()
        output_file = logging_data.get("output_file")
        use_color = logging_data.get("use_color", True)
        include_timestamp = logging_data.get("include_timestamp", True)

        if env_level := os.getenv("POSTEX_LOG_LEVEL"):
            level = env_level.upper()
            logger.debug("Overriding log level from env: {}", level)

        if env_format := os.getenv("POSTEX_LOG_FORMAT"):
            format_type = env_format.lower()

        if env_file := os.getenv("POSTEX_LOG_FILE"):
            output_file = env_file

        if env_color := os.getenv("POSTEX_LOG_COLOR"):
            try:
                use_color = _parse_bool_env(env_color)
            except ValueError as e:
                logger.warning("Invalid POSTEX_LOG_COLOR value: {}", e)

        return LoggingConfig(
            level=level,  # type: ignore[arg-type]
            format=format_type,  # type: ignore[arg-type]
            output_file=output_file,
            use_color=use_color,
            include_timestamp=include_timestamp,
        )

    def _parse_shell_config(self, shell_data: dict[str, Any]) -> ShellConfig:
        """Parse shell framing configuration (``POSTEX_SHELL_DELIMITER`` wins)."""
        delimiter = shell_data.get("delimiter", "---")
        encoding = shell_data.get("encoding", "utf-8")

        if env_delimiter := os.getenv("POSTEX_SHELL_DELIMITER"):
            delimiter = env_delimiter

        return ShellConfig(delimiter=delimiter, encoding=encoding)


def load_config(path: str | Path | None = None) -> PostExConfig:
    """Load configuration from file or return defaults.

    Parameters
    ----------
    path : str | Path | None
        Path to configuration file or None to search

    Returns
    -------
    PostExConfig
        Loaded configuration or defaults if no file found
    """
    loader = ConfigLoader()
    if path:
        return loader.load_config_file(path)
    try:
        return loader.load_config_file(None)
    except FileNotFoundError:
        logger.debug("No configuration file found, using defaults")
        return loader._parse_config({})


__all__ = ["ConfigLoader", "load_config"]
