"""In-memory filesystem.

A flat mapping of normalized absolute paths to entries. Directories are
created implicitly for every parent of an initial file. This is the
filesystem pathname expansion walks and `ls`/`cat` read from.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass
class FileEntry:
    """A regular file."""

    content: bytes = b""
    mode: int = 0o644
    type: str = field(default="file", init=False)


@dataclass
class DirectoryEntry:
    """A directory. Children are found by path prefix."""

    mode: int = 0o755
    type: str = field(default="directory", init=False)


FsEntry = Union[FileEntry, DirectoryEntry]


def _normalize(path: str) -> str:
    normalized = posixpath.normpath("/" + path.lstrip("/"))
    # normpath keeps a leading "//"
    return "/" + normalized.lstrip("/")


class InMemoryFs:
    """Filesystem held entirely in memory."""

    def __init__(self, initial_files: Optional[dict[str, Union[str, bytes]]] = None):
        self._entries: dict[str, FsEntry] = {"/": DirectoryEntry()}
        for path in ("/bin", "/tmp", "/home/user"):
            self._mkdir_sync(path)
        for path, content in (initial_files or {}).items():
            self._write_sync(path, content)

    # -------------------------------------------------------------------------
    # Synchronous helpers
    # -------------------------------------------------------------------------

    def _mkdir_sync(self, path: str) -> None:
        path = _normalize(path)
        parts = [p for p in path.split("/") if p]
        current = ""
        for part in parts:
            current += "/" + part
            entry = self._entries.get(current)
            if entry is None:
                self._entries[current] = DirectoryEntry()
            elif not isinstance(entry, DirectoryEntry):
                raise NotADirectoryError(f"ENOTDIR: not a directory, mkdir '{current}'")

    def _write_sync(self, path: str, content: Union[str, bytes]) -> None:
        path = _normalize(path)
        if isinstance(self._entries.get(path), DirectoryEntry):
            raise IsADirectoryError(f"EISDIR: illegal operation on a directory, write '{path}'")
        self._mkdir_sync(posixpath.dirname(path))
        data = content.encode("utf-8") if isinstance(content, str) else content
        self._entries[path] = FileEntry(content=data)

    # -------------------------------------------------------------------------
    # IFileSystem
    # -------------------------------------------------------------------------

    def resolve_path(self, base: str, path: str) -> str:
        """Resolve path against base, normalizing '.' and '..'."""
        if path.startswith("/"):
            return _normalize(path)
        return _normalize(posixpath.join(base, path))

    async def read_file(self, path: str) -> str:
        path = _normalize(path)
        entry = self._entries.get(path)
        if entry is None:
            raise FileNotFoundError(f"ENOENT: no such file or directory, open '{path}'")
        if isinstance(entry, DirectoryEntry):
            raise IsADirectoryError(f"EISDIR: illegal operation on a directory, read '{path}'")
        return entry.content.decode("utf-8", errors="replace")

    async def write_file(self, path: str, content: Union[str, bytes]) -> None:
        self._write_sync(path, content)

    async def exists(self, path: str) -> bool:
        return _normalize(path) in self._entries

    async def is_directory(self, path: str) -> bool:
        return isinstance(self._entries.get(_normalize(path)), DirectoryEntry)

    async def readdir(self, path: str) -> list[str]:
        """List the names directly inside a directory, sorted."""
        path = _normalize(path)
        entry = self._entries.get(path)
        if entry is None:
            raise FileNotFoundError(f"ENOENT: no such file or directory, scandir '{path}'")
        if not isinstance(entry, DirectoryEntry):
            raise NotADirectoryError(f"ENOTDIR: not a directory, scandir '{path}'")
        prefix = path if path.endswith("/") else path + "/"
        names = {
            key[len(prefix):]
            for key in self._entries
            if key.startswith(prefix) and key != path and "/" not in key[len(prefix):]
        }
        return sorted(names)

    async def mkdir(self, path: str, recursive: bool = False) -> None:
        path = _normalize(path)
        if path in self._entries:
            if recursive and isinstance(self._entries[path], DirectoryEntry):
                return
            raise FileExistsError(f"EEXIST: file already exists, mkdir '{path}'")
        parent = posixpath.dirname(path)
        if not recursive and not isinstance(self._entries.get(parent), DirectoryEntry):
            raise FileNotFoundError(f"ENOENT: no such file or directory, mkdir '{path}'")
        self._mkdir_sync(path)
