"""Manage hosts-file entries through named, switchable profiles kept in SQLite."""

__version__ = "0.1.1"