"""Terminal access, keyboard input, styled output and ANSI-aware text utilities."""

__version__ = "0.15.11"

__all__ = ["ansi", "cursor", "keys", "platform", "style", "term", "text"]