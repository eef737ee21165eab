"""Shared pytest fixtures for the full clawlaunch test suite."""

from __future__ import annotations

from typing import Callable, Iterable, Mapping

import pytest


class FakeFileSystem:
    """In-memory filesystem view with explicit existing files and realpath answers."""

    def __init__(
        self,
        existing: Iterable[str] = (),
        realpaths: Mapping[str, str] | None = None,
        realpath_default: Callable[[str], str | None] | None = None,
    ) -> None:
        """Initialize the fake with existing files and realpath mappings.

        Paths absent from `realpaths` resolve through `realpath_default`, which
        defaults to returning the path itself.
        """

        self.existing = set(existing)
        self.realpaths = dict(realpaths or {})
        self._realpath_default = realpath_default or (lambda path: path)
        self.exists_calls: list[str] = []

    def exists(self, path: str) -> bool:
        """Report whether `path` was registered as an existing file."""

        self.exists_calls.append(path)
        return path in self.existing

    def realpath(self, path: str) -> str | None:
        """Return the registered realpath, or the default answer."""

        if path in self.realpaths:
            return self.realpaths[path]
        return self._realpath_default(path)


class RecordingLookup:
    """PATH lookup double that records every requested binary name."""

    def __init__(self, result: str | None = None) -> None:
        """Initialize the lookup with the path it should report."""

        self.result = result
        self.calls: list[str] = []

    def __call__(self, name: str) -> str | None:
        """Record the lookup and return the configured result."""

        self.calls.append(name)
        return self.result


@pytest.fixture
def fake_filesystem_factory() -> type[FakeFileSystem]:
    """Provide the in-memory filesystem view class."""

    return FakeFileSystem


@pytest.fixture
def recording_lookup_factory() -> type[RecordingLookup]:
    """Provide the recording PATH lookup class."""

    return RecordingLookup
