"""Natural-language command parsing for a text survival game."""

__version__ = "0.1.0"
