"""Roster import: people & vehicles from hosted or uploaded spreadsheets."""

__version__ = "0.1.0"
