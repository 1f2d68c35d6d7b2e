"""Builders for the BoM station reference tables."""

__version__ = "0.1.0"
