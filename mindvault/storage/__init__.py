"""Persistence for the resource collection."""

from .slots import FileSlots, KeyValueSlots, MemorySlots
from .resource_store import DEFAULT_STORAGE_KEY, ResourceStore, sample_resources

__all__ = [
    "FileSlots",
    "KeyValueSlots",
    "MemorySlots",
    "DEFAULT_STORAGE_KEY",
    "ResourceStore",
    "sample_resources",
]
