"""Configuration models and loading."""

from postex.kernel.config.loader import ConfigLoader, load_config
from postex.kernel.config.models import LoggingConfig, PostExConfig, ShellConfig

__all__ = ["ConfigLoader", "LoggingConfig", "PostExConfig", "ShellConfig", "load_config"]
