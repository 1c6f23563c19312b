"""Create GitHub releases and upload their assets."""

__version__ = "0.1.0"
