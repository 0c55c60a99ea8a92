"""Zipcode to weather lookup services."""

__version__ = "1.0.0"
