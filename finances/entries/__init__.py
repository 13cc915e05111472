"""Ledger entry package."""

from finances.entries.engine import EntryEngine

__all__ = ["EntryEngine"]
