"""
Edit Pilot: natural-language editor commands through a chat-completion model.
"""

__version__ = "0.1.0"
