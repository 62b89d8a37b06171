"""Flip Journal - a date-by-date personal journal with backups."""

__version__ = "0.1.0"
