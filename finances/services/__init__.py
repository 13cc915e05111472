"""
Services Package

External collaborators of the ledger core. Currently only storage.
"""

from finances.services import storage

__all__ = ["storage"]
