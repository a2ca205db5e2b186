"""
Pydantic models for Edit Pilot configuration validation.
"""

from typing import Optional
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from enum import Enum


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AppConfig(BaseModel):
    """Application-level configuration settings."""

    name: str = Field(default="Edit Pilot", description="Application display name")
    version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    verbose_logging: bool = Field(default=False, description="Enable verbose debug logging")

    log_file: Optional[str] = Field(default=None, description="JSON log file location (disabled when unset)")
    max_log_size_mb: int = Field(default=10, ge=1, le=1000, description="Maximum log file size")
    backup_count: int = Field(default=5, ge=1, le=100, description="Number of backup log files")

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        """Accept lower-case level names from YAML and environment."""
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_file')
    @classmethod
    def expand_path(cls, v):
        """Expand user home directory in paths."""
        return str(Path(v).expanduser()) if v else v


# The model name sent in every completion request, and the name quoted in the
# description of a degraded command.
DEFAULT_MODEL = "local-model"


class CompletionConfig(BaseModel):
    """Chat-completion endpoint configuration."""

    # Command-line flags assign onto a loaded config
    model_config = ConfigDict(validate_assignment=True)

    endpoint_url: str = Field(default="http://localhost:1234", description="Completion service base URL")
    chat_path: str = Field(default="/v1/chat/completions", description="Sub-path of the chat endpoint")
    model: str = Field(default=DEFAULT_MODEL, min_length=1, description="Model name sent with each request")
    temperature: float = Field(default=0.1, ge=0.0, le=2.0, description="Response randomness")
    max_tokens: int = Field(default=500, ge=1, le=32768, description="Maximum tokens per response")
    request_timeout: Optional[float] = Field(
        default=None, gt=0.0,
        description="Request timeout in seconds; unset means wait until the transport gives up"
    )

    @field_validator('endpoint_url')
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip('/')

    @field_validator('chat_path')
    @classmethod
    def leading_slash(cls, v):
        return v if v.startswith('/') else '/' + v


class DispatchConfig(BaseModel):
    """Settle-delays between dependent editor UI steps.

    The editor widgets give no ready signal in general, so each handler waits a
    fixed time between opening a surface and typing into it, and between typing
    and accepting. Every gap must stay above zero.
    """

    open_settle_seconds: float = Field(default=0.3, gt=0.0, le=10.0, description="Wait after opening a widget")
    type_settle_seconds: float = Field(default=0.5, gt=0.0, le=10.0, description="Wait after typing before accepting")
    navigate_settle_seconds: float = Field(default=0.1, gt=0.0, le=10.0, description="Wait after opening a file before moving the caret")

    use_readiness_signal: bool = Field(default=True, description="Await editor readiness events when the editor offers them")
    readiness_timeout_seconds: float = Field(default=2.0, gt=0.0, le=60.0, description="Upper bound on a readiness wait")
    minimum_gap_seconds: float = Field(default=0.02, gt=0.0, le=1.0, description="Gap kept even after a readiness event")


class EditPilotConfig(BaseModel):
    """Main configuration model."""

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    app: AppConfig = Field(default_factory=AppConfig)
    completion: CompletionConfig = Field(default_factory=CompletionConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)

    @model_validator(mode='after')
    def validate_config_consistency(self):
        """A readiness wait shorter than the kept gap would never be observed."""
        if self.dispatch.readiness_timeout_seconds < self.dispatch.minimum_gap_seconds:
            raise ValueError("dispatch.readiness_timeout_seconds must not be below dispatch.minimum_gap_seconds")
        return self
