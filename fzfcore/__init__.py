"""Fuzzy matching, ANSI color extraction, chunked item storage and query history."""

__version__ = "0.57.0"