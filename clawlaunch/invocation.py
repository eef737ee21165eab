"""Read how the current process was invoked."""

from __future__ import annotations

import os
import sys

from .models.datatypes import Invocation


def current_invocation() -> Invocation:
    """Return the running interpreter and the script path it was told to execute."""

    script_path = sys.argv[0] if sys.argv and sys.argv[0] else os.getcwd()
    return Invocation(
        executable=sys.executable,
        script_path=normalize_invoked_path(script_path),
    )


def normalize_invoked_path(path: str) -> str:
    """Return `path` as an absolute, normalized path without resolving symlinks."""

    return os.path.abspath(os.path.expanduser(path))
