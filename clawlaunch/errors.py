"""Domain exceptions for entrypoint resolution and CLI diagnostics."""

from __future__ import annotations

from typing import Sequence


class LaunchStageError(RuntimeError):
    """Raised when a specific launch-resolution stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped launch error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class EntrypointNotFoundError(LaunchStageError):
    """Raised when no candidate from the invoking path's lineage exists on disk."""

    def __init__(self, invoked_path: str, attempted_paths: Sequence[str]) -> None:
        """Initialize the error with the invoking path and every path that was checked."""

        self.invoked_path = invoked_path
        self.attempted_paths = tuple(attempted_paths)
        attempted = " or ".join(self.attempted_paths) if self.attempted_paths else "(none)"
        super().__init__(
            stage="entrypoint",
            detail=(
                f"Cannot find built CLI for `{invoked_path}`; looked at {attempted}."
            ),
            hint="Build the CLI first (for example `pnpm build`), or reinstall the package.",
        )
