"""Track lint and formatting issue counts over time."""

__version__ = "0.1.0"
