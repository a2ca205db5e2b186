"""
Edit Pilot Utilities

Logging and error handling shared by every layer of Edit Pilot.
"""

from .logging import (
    setup_logging,
    get_logger,
    log_performance,
    performance_timer,
    log_startup,
    log_config_info,
    log_shutdown,
)

from .error_handling import (
    EditPilotError,
    ConfigurationError,
    ValidationError,
    DispatchError,
    handle_dispatch_operation,
    validate_input,
    coerce_int,
)

__all__ = [
    # Logging utilities
    "setup_logging",
    "get_logger",
    "log_performance",
    "performance_timer",
    "log_startup",
    "log_config_info",
    "log_shutdown",

    # Error handling utilities
    "EditPilotError",
    "ConfigurationError",
    "ValidationError",
    "DispatchError",
    "handle_dispatch_operation",
    "validate_input",
    "coerce_int",
]
