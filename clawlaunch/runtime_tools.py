"""Runtime executable and PATH binary lookup helpers.

Responsibilities:
- Locate the tool's published binary on the system search path via `which`/`where`.
- Resolve the runtime executable written as the first program argument.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from typing import Protocol

LOOKUP_TIMEOUT_SECONDS = 5.0


class BinaryLookup(Protocol):
    """Capability that maps a binary name to its PATH location."""

    def __call__(self, name: str) -> str | None:
        """Return the absolute path of `name` on PATH, or `None`."""


def lookup_binary_on_path(name: str) -> str | None:
    """Locate `name` on PATH with the platform lookup command.

    Returns:
        The first non-empty line of the lookup output as an absolute path, or
        `None` when the command is missing, fails, times out, or prints nothing.
    """

    command = ["where" if sys.platform == "win32" else "which", name]
    try:
        result = subprocess.run(
            command,
            check=False,
            capture_output=True,
            text=True,
            timeout=LOOKUP_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.SubprocessError):
        return None

    if result.returncode != 0:
        return None

    for line in (result.stdout or "").splitlines():
        candidate = line.strip()
        if candidate:
            return os.path.abspath(candidate)
    return None


def resolve_runtime_executable(override: str | None, default: str) -> str:
    """Resolve the runtime executable, honoring an explicit override.

    An override containing no path separator is looked up on PATH; when the
    lookup fails the override is returned unchanged so the service manager
    reports the missing binary itself.
    """

    if override is None or not override.strip():
        return default

    normalized = override.strip()
    if os.sep in normalized or (os.altsep and os.altsep in normalized):
        return os.path.abspath(normalized)

    resolved_path = shutil.which(normalized)
    if resolved_path is not None:
        return resolved_path
    return normalized
