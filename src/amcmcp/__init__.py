"""Tool server for AMC Theatres."""

__version__ = "0.1.0"
