"""
Interpretation of completion text into structured commands.
"""

from .interpreter import ResponseInterpreter, find_json_objects, interpret

__all__ = ["ResponseInterpreter", "find_json_objects", "interpret"]
