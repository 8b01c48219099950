"""Filesystem implementations for just-expand."""

from .in_memory_fs import (
    InMemoryFs,
    FileEntry,
    DirectoryEntry,
    FsEntry,
)

__all__ = [
    "InMemoryFs",
    "FileEntry",
    "DirectoryEntry",
    "FsEntry",
]
