"""
Logging setup for Edit Pilot.

Wires the standard library logging module to the application configuration:
a colored console handler, an optional rotating JSON log file, redaction of
credentials that may appear in endpoint URLs or headers, and small helpers for
timing pipeline stages.
"""

import os
import sys
import json
import time
import logging
import logging.handlers
import re
from pathlib import Path
from typing import Dict, Optional, Callable
from functools import wraps
from contextlib import contextmanager
from datetime import datetime


class Colors:
    """ANSI color codes for console output."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    BRIGHT_BLACK = '\033[90m'
    BRIGHT_RED = '\033[91m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_MAGENTA = '\033[95m'


class SensitiveDataFilter(logging.Filter):
    """Redact secrets from log records before they reach any handler."""

    PATTERNS = [
        (re.compile(r'(api[_-]?key|token|secret|password)["\s]*[:=]["\s]*([^\s"]{8,})', re.IGNORECASE),
         r'\1=***REDACTED***'),
        (re.compile(r'(bearer\s+)([a-zA-Z0-9._-]{20,})', re.IGNORECASE), r'\1***REDACTED***'),
        (re.compile(r'(sk-[a-zA-Z0-9]{32,})'), r'sk-***REDACTED***'),
        # user:password@host in endpoint URLs
        (re.compile(r'(://[^:/@\s]+:)([^@\s]+)(@)'), r'\1***REDACTED***\3'),
    ]

    def _redact(self, text: str) -> str:
        for pattern, replacement in self.PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def filter(self, record):
        if isinstance(record.msg, str):
            record.msg = self._redact(record.msg)

        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                self._redact(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )

        return True


class ColoredConsoleFormatter(logging.Formatter):
    """Formatter that colors whole console lines by level."""

    LEVEL_COLORS = {
        'DEBUG': Colors.BRIGHT_BLACK,
        'INFO': Colors.BRIGHT_BLUE,
        'WARNING': Colors.BRIGHT_YELLOW,
        'ERROR': Colors.BRIGHT_RED,
        'CRITICAL': Colors.BRIGHT_MAGENTA + Colors.BOLD,
    }

    def __init__(self, use_colors: bool = True):
        self.use_colors = use_colors and self._supports_color()
        fmt = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
        super().__init__(fmt, datefmt='%Y-%m-%d %H:%M:%S')

    def _supports_color(self) -> bool:
        if not hasattr(sys.stderr, 'isatty') or not sys.stderr.isatty():
            return False
        if os.getenv('NO_COLOR'):
            return False
        if os.getenv('FORCE_COLOR'):
            return True
        term = os.getenv('TERM', '').lower()
        return 'color' in term or term in ('xterm', 'screen', 'linux')

    def format(self, record):
        formatted = super().format(record)
        if not self.use_colors:
            return formatted

        color = self.LEVEL_COLORS.get(record.levelname, '')
        return f"{color}{formatted}{Colors.RESET}" if color else formatted


class JSONFileFormatter(logging.Formatter):
    """One JSON object per line for the log file."""

    _RESERVED = {
        'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
        'module', 'exc_info', 'exc_text', 'stack_info', 'lineno', 'funcName',
        'created', 'msecs', 'relativeCreated', 'thread', 'threadName',
        'processName', 'process', 'message', 'taskName',
    }

    def format(self, record):
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'module': record.name,
            'message': record.getMessage(),
            'extra': {
                'funcName': record.funcName,
                'lineno': record.lineno,
            },
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in self._RESERVED:
                log_entry['extra'][key] = value

        return json.dumps(log_entry, default=str)


class PerformanceTimer:
    """Context manager that logs how long an operation took."""

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.DEBUG):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.log(self.level, f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        duration = self.end_time - self.start_time

        if exc_type is None:
            self.logger.log(self.level, f"Completed {self.operation} in {duration:.3f}s")
        else:
            self.logger.log(self.level, f"Failed {self.operation} after {duration:.3f}s")

    @property
    def duration(self) -> Optional[float]:
        """Elapsed seconds, once the block has exited."""
        if self.start_time is not None and self.end_time is not None:
            return self.end_time - self.start_time
        return None


def performance_timer(operation: str = None, level: int = logging.DEBUG):
    """Decorator form of PerformanceTimer for plain functions."""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)
            with PerformanceTimer(logger, operation or f"{func.__name__}()", level):
                return func(*args, **kwargs)

        return wrapper
    return decorator


class LoggingManager:
    """Owns handler setup so it happens once per process."""

    MODULE_LEVELS = {
        "edit_pilot.core": "INFO",
        "edit_pilot.config": "INFO",
        "edit_pilot.ui": "INFO",
        "edit_pilot.cli": "WARNING",
        "httpx": "WARNING",
        "httpcore": "WARNING",
    }

    def __init__(self):
        self._initialized = False
        self._loggers: Dict[str, logging.Logger] = {}
        self._log_dir: Optional[Path] = None

    def setup_logging(self, config, verbose: bool = False, force_reinit: bool = False):
        """Configure the root logger from an EditPilotConfig.

        Args:
            config: EditPilotConfig instance
            verbose: Force DEBUG level regardless of config
            force_reinit: Replace handlers even if already configured
        """
        if self._initialized and not force_reinit:
            return

        if verbose or config.app.verbose_logging:
            log_level = logging.DEBUG
        else:
            log_level = getattr(logging, config.app.log_level.value, logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        self._setup_console_handler(root_logger, log_level)

        if config.app.log_file:
            self._setup_file_handler(root_logger, config, log_level)

        if not verbose:
            for module_name, level_name in self.MODULE_LEVELS.items():
                logging.getLogger(module_name).setLevel(
                    max(getattr(logging, level_name), log_level)
                )

        sensitive_filter = SensitiveDataFilter()
        for handler in root_logger.handlers:
            handler.addFilter(sensitive_filter)

        self._initialized = True

        logger = self.get_logger('edit_pilot.logging')
        logger.debug(f"Logging initialized at {logging.getLevelName(log_level)}")
        if self._log_dir:
            logger.debug(f"Log directory: {self._log_dir}")

    def _setup_console_handler(self, root_logger: logging.Logger, log_level: int):
        # stderr keeps stdout clean for command results
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(ColoredConsoleFormatter(use_colors=True))
        root_logger.addHandler(console_handler)

    def _setup_file_handler(self, root_logger: logging.Logger, config, log_level: int):
        try:
            log_file = Path(config.app.log_file)
            self._log_dir = log_file.parent
            self._log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=config.app.max_log_size_mb * 1024 * 1024,
                backupCount=config.app.backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(JSONFileFormatter())
            root_logger.addHandler(file_handler)

        except OSError as e:
            print(f"Warning: Could not setup file logging: {e}", file=sys.stderr)

    def get_logger(self, name: str) -> logging.Logger:
        if name not in self._loggers:
            self._loggers[name] = logging.getLogger(name)
        return self._loggers[name]

    def create_performance_timer(self, operation: str, level: int = logging.DEBUG) -> PerformanceTimer:
        return PerformanceTimer(self.get_logger('edit_pilot.performance'), operation, level)

    def is_initialized(self) -> bool:
        return self._initialized


_logging_manager = LoggingManager()


def setup_logging(config, verbose: bool = False, force_reinit: bool = False):
    """Setup logging based on configuration.

    Args:
        config: EditPilotConfig instance
        verbose: Enable verbose logging
        force_reinit: Force reinitialization
    """
    _logging_manager.setup_logging(config, verbose, force_reinit)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name (typically __name__)."""
    return _logging_manager.get_logger(name)


@contextmanager
def log_performance(operation: str, level: int = logging.DEBUG):
    """Time a block and log its duration.

    Yields:
        PerformanceTimer instance
    """
    timer = _logging_manager.create_performance_timer(operation, level)
    with timer:
        yield timer


def log_startup(config_path: Optional[str] = None):
    """Log application startup information."""
    logger = get_logger('edit_pilot.startup')
    logger.info("Edit Pilot starting up")

    if config_path:
        logger.info(f"Configuration loaded from: {config_path}")
    else:
        logger.info("Using default configuration")


def log_config_info(config):
    """Log the settings that shape a run."""
    logger = get_logger('edit_pilot.config')

    logger.debug(f"Log level: {config.app.log_level.value}")
    logger.debug(f"Completion endpoint: {config.completion.endpoint_url}")
    logger.debug(f"Completion model: {config.completion.model}")
    logger.debug(
        "Settle delays (open/type/navigate): "
        f"{config.dispatch.open_settle_seconds}/"
        f"{config.dispatch.type_settle_seconds}/"
        f"{config.dispatch.navigate_settle_seconds}s"
    )


def log_shutdown():
    """Log application shutdown."""
    get_logger('edit_pilot.shutdown').info("Edit Pilot shutting down")
