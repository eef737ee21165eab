"""Tolerant filesystem checks used by entrypoint resolution.

Responsibilities:
- Check that a candidate is an existing, readable regular file.
- Dereference symlinks without raising on missing paths or loops.

Both checks report absence through their return value; callers never need to
catch filesystem exceptions.
"""

from __future__ import annotations

import os
from typing import Protocol


class FileSystemView(Protocol):
    """Protocol for the read-only filesystem checks used during resolution."""

    def exists(self, path: str) -> bool:
        """Return whether `path` is an existing, readable regular file."""

    def realpath(self, path: str) -> str | None:
        """Return the fully dereferenced form of `path`, or `None` on failure."""


class LocalFileSystem:
    """Filesystem view backed by the host operating system."""

    def exists(self, path: str) -> bool:
        """Return whether `path` is an existing, readable regular file."""

        try:
            return os.path.isfile(path) and os.access(path, os.R_OK)
        except (OSError, ValueError):
            return False

    def realpath(self, path: str) -> str | None:
        """Return the fully dereferenced form of `path`, or `None` on failure."""

        try:
            return os.path.realpath(path, strict=True)
        except (OSError, RuntimeError, ValueError):
            return None
