"""Persistence layer: JSON files on disk, one store class per layout."""

from ._base import JsonStore
from .host_store import HostStore
from .keyvalue import KeyValueDirectory

__all__ = [
    "HostStore",
    "JsonStore",
    "KeyValueDirectory",
]
