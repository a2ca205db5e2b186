"""
Error types and error handling helpers for Edit Pilot.

Every failure the pipeline can report derives from EditPilotError so the
orchestrator and the shell bridge can turn it into one user-visible result.
"""

import functools
import logging
from typing import Any, Callable, Optional, Type, Dict

from .logging import get_logger


class EditPilotError(Exception):
    """Base exception for all Edit Pilot errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(EditPilotError):
    """Configuration could not be loaded or validated."""
    pass


class ValidationError(EditPilotError):
    """Input (a command parameter or a shell message) failed validation."""
    pass


class DispatchError(EditPilotError):
    """A command handler or a pass-through editor call failed."""
    pass


def handle_dispatch_operation(operation_name: str, logger: Optional[logging.Logger] = None):
    """
    Decorator that normalizes failures of an async editor operation into DispatchError.

    DispatchError passes through untouched; ValidationError and anything else
    are wrapped with the original exception chained.

    Args:
        operation_name: Human-readable name of the operation
        logger: Optional logger instance (defaults to an operation-specific logger)
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> Any:
            _logger = logger or get_logger(f"edit_pilot.core.dispatch.{operation_name}")

            try:
                _logger.debug(f"Starting {operation_name}")
                result = await func(*args, **kwargs)
                _logger.info(f"{operation_name} completed successfully")
                return result

            except DispatchError as e:
                _logger.error(f"{operation_name} failed: {e}")
                raise

            except ValidationError as e:
                _logger.error(f"{operation_name} failed - invalid parameter: {e}")
                raise DispatchError(
                    f"{operation_name} failed: {e}",
                    details={"error_type": "validation", **e.details}
                ) from e

            except Exception as e:
                _logger.error(f"{operation_name} failed - unexpected error: {e}", exc_info=True)
                raise DispatchError(
                    f"{operation_name} failed: {e}",
                    details={"error_type": "editor", "original_error": str(e)}
                ) from e

        return async_wrapper

    return decorator


def validate_input(
    data: Any,
    field_name: str,
    expected_type: Type = None,
    required: bool = True,
    validator: Optional[Callable] = None
) -> Any:
    """
    Standardized input validation utility.

    Args:
        data: The data to validate
        field_name: Name of the field being validated
        expected_type: Expected type of the data
        required: Whether the field is required
        validator: Optional function that converts or checks the value

    Returns:
        The validated (possibly converted) data

    Raises:
        ValidationError: If validation fails
    """
    if required and data is None:
        raise ValidationError(f"{field_name} is required", details={"field": field_name})

    if data is not None and expected_type and not isinstance(data, expected_type):
        raise ValidationError(
            f"{field_name} must be of type {expected_type.__name__}, got {type(data).__name__}",
            details={"field": field_name}
        )

    if validator and data is not None:
        try:
            return validator(data)
        except Exception as e:
            raise ValidationError(
                f"{field_name} validation failed: {e}", details={"field": field_name}
            ) from e

    return data


def coerce_int(value: Any) -> int:
    """Accept ints and integer strings ("25", " 7 "); reject bools and floats with fractions."""
    if isinstance(value, bool):
        raise TypeError("boolean is not a number")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("+-").isdigit():
        return int(value.strip())
    raise ValueError(f"{value!r} is not an integer")
