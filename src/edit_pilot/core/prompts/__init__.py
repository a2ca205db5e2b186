"""System prompt generation for the completion service."""

from .builder import build_system_prompt, format_command

__all__ = ["build_system_prompt", "format_command"]
