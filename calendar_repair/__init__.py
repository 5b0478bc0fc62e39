"""Repair job for recursively imported calendar events."""

__version__ = "0.1.0"
