"""
Edit Pilot Configuration System

    from edit_pilot.config import get_config, load_config

    config = get_config()
    print(config.completion.endpoint_url)     # "http://localhost:1234"
    print(config.dispatch.open_settle_seconds)  # 0.3
"""

from .loader import (
    ConfigLoader,
    load_config,
    get_config,
    reload_config,
    validate_config_file,
    ConfigurationError,
)

from .models import (
    EditPilotConfig,
    AppConfig,
    CompletionConfig,
    DispatchConfig,
    LogLevel,
    DEFAULT_MODEL,
)

__all__ = [
    "ConfigLoader",
    "get_config",
    "load_config",
    "reload_config",
    "validate_config_file",
    "ConfigurationError",
    "EditPilotConfig",
    "AppConfig",
    "CompletionConfig",
    "DispatchConfig",
    "LogLevel",
    "DEFAULT_MODEL",
]
