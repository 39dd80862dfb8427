"""Configuration data models for postex."""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from typing import Any, Literal

from postex.kernel.exceptions import ConfigurationError

_BASE64_ALPHABET = frozenset(string.ascii_letters + string.digits + "+/=")

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("console", "json", "structured", "rich")


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration for postex.

    Attributes
    ----------
    level : str, default="WARNING"
        Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich)
    output_file : str | None, default=None
        Optional file path to write logs to
    use_color : bool, default=True
        Use ANSI color codes (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.postex.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export POSTEX_LOG_LEVEL=DEBUG
    export POSTEX_LOG_FORMAT=json
    export POSTEX_LOG_FILE=/tmp/postex.log
    ```
    """

    level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = True

    def __post_init__(self) -> None:
        """Validate level and format.

        Raises
        ------
        ConfigurationError
            If the level or format is not recognized
        """
        if self.level not in _LOG_LEVELS:
            raise ConfigurationError("logging", f"unknown level {self.level!r}")
        if self.format not in _LOG_FORMATS:
            raise ConfigurationError("logging", f"unknown format {self.format!r}")


@dataclass(frozen=True, slots=True)
class ShellConfig:
    """Framing settings for shell-emulated sessions.

    Attributes
    ----------
    delimiter : str, default="---"
        Sentinel line echoed before and after every framed command
    encoding : str, default="utf-8"
        Encoding used for command lines and textual command output
    """

    delimiter: str = "---"
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        """Validate the delimiter.

        A delimiter made only of base64 characters could be mistaken for a
        line of encoded payload, so at least one character must fall
        outside the base64 alphabet.

        Raises
        ------
        ConfigurationError
            If the delimiter is empty, spans lines, or is pure base64
        """
        if not self.delimiter or self.delimiter.strip() != self.delimiter:
            raise ConfigurationError("shell", "delimiter must be non-empty without surrounding whitespace")
        if "\n" in self.delimiter or "\r" in self.delimiter:
            raise ConfigurationError("shell", "delimiter must be a single line")
        if set(self.delimiter) <= _BASE64_ALPHABET:
            raise ConfigurationError(
                "shell", f"delimiter {self.delimiter!r} only uses base64 characters"
            )


@dataclass(slots=True)
class PostExConfig:
    """Complete postex configuration.

    Attributes
    ----------
    logging : LoggingConfig
        Logging configuration
    shell : ShellConfig
        Shell framing configuration
    settings : dict[str, Any]
        Additional custom settings

    Examples
    --------
    TOML configuration in pyproject.toml:

    ```toml
    [tool.postex.logging]
    level = "INFO"

    [tool.postex.shell]
    delimiter = "--8<--"
    ```
    """

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    shell: ShellConfig = field(default_factory=ShellConfig)
    settings: dict[str, Any] = field(default_factory=dict)
