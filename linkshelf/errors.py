"""Exceptions raised by the Linkshelf data layer.

Errors carry plain human-readable messages; the controller shows
``str(exc)`` to the user as-is.
"""

from __future__ import annotations


class ShelfError(Exception):
    """Base class for every error the data layer raises on purpose."""


class ValidationError(ShelfError):
    """Input rejected before anything was persisted."""


class StorageError(ShelfError):
    """The storage backend failed to read or write a value."""


class ClipboardError(ShelfError):
    """Every clipboard method failed."""


class BridgeError(ShelfError):
    """A host bridge channel is missing or its handler raised."""
