"""Built CLI entrypoint resolution for service relaunches.

Responsibilities:
- Collect entrypoint candidates from the invoking path, its real path, the
  binary found on PATH, and `dist` siblings derived from package roots.
- Rank candidates so persisted service configs point at stable,
  version-independent paths.
- Refuse to substitute an unrelated installation found on PATH.

Key public API:
- `EntrypointResolver`: injectable resolver (lookup, filesystem, logger).
- `resolve_cli_entrypoint`: one-shot convenience wrapper.
- `derive_sibling_candidates`, `looks_like_built_entry`, `is_version_pinned`.
"""

from __future__ import annotations

import os
import re
from pathlib import PurePath
from typing import Iterable

from .errors import EntrypointNotFoundError
from .filesystem import FileSystemView, LocalFileSystem
from .invocation import normalize_invoked_path
from .models.datatypes import Candidate, CandidateOrigin, ResolvedEntrypoint
from .runtime_tools import BinaryLookup, lookup_binary_on_path
from .telemetry.logger import RunLogger

DEFAULT_BINARY_NAME = "openclaw"

_STAGE = "entrypoint"
_BUILT_ENTRY_SUFFIXES = (".js", ".mjs", ".cjs")
_DIST_ENTRY_NAMES = ("entry.js", "index.js", "entry.mjs", "index.mjs")
_STORE_SEGMENTS = frozenset({".pnpm"})
_VERSION_PINNED_SEGMENT = re.compile(r"[^@/\\]@v?\d+\.\d+")


def looks_like_built_entry(path: str) -> bool:
    """Return whether `path` is a script file below a `dist` directory."""

    parts = PurePath(path).parts
    return path.endswith(_BUILT_ENTRY_SUFFIXES) and "dist" in parts[:-1]


def is_version_pinned(path: str) -> bool:
    """Return whether `path` runs through a per-version package store directory."""

    for segment in PurePath(path).parts:
        if segment in _STORE_SEGMENTS or _VERSION_PINNED_SEGMENT.search(segment):
            return True
    return False


def derive_sibling_candidates(path: str) -> list[str]:
    """Return expected `dist` entry files for the package that owns `path`.

    `.../node_modules/.bin/<name>` and `.../node_modules/<name>/...` map to
    `.../node_modules/<name>/dist/<entry>`. Paths outside `node_modules` are
    treated as a source checkout, trying `<dir>/../dist` then `<dir>/dist`.
    """

    roots = _package_roots(PurePath(path).parts)
    return _unique(
        os.path.join(root, "dist", entry_name)
        for root in roots
        for entry_name in _DIST_ENTRY_NAMES
    )


def _package_roots(parts: tuple[str, ...]) -> list[str]:
    """Return candidate package root directories for a split path."""

    last = len(parts) - 1
    for index in range(last - 1, -1, -1):
        if parts[index] != "node_modules":
            continue
        following = parts[index + 1]
        if following == ".bin":
            if index + 2 == last:
                return [os.path.join(*parts[: index + 1], parts[last])]
            return []
        if following.startswith("@"):
            if index + 2 <= last:
                return [os.path.join(*parts[: index + 3])]
            return []
        return [os.path.join(*parts[: index + 2])]

    if last < 1:
        return []
    directory = os.path.join(*parts[:last])
    return _unique([os.path.dirname(directory), directory])


def _unique(paths: Iterable[str]) -> list[str]:
    """Drop repeated paths while keeping first-seen order."""

    seen: set[str] = set()
    ordered: list[str] = []
    for path in paths:
        if path and path not in seen:
            seen.add(path)
            ordered.append(path)
    return ordered


def _same_install(
    first: str, first_real: str | None, second: str, second_real: str | None
) -> bool:
    """Heuristic identity check between two entrypoint paths.

    Two paths belong to the same install when their real paths match, or when
    one real path equals the other's raw path.
    """

    if first_real is not None and second_real is not None and first_real == second_real:
        return True
    return first_real == second or (second_real is not None and second_real == first)


class _CheckSession:
    """Per-call filesystem wrapper that caches results and records attempted paths."""

    def __init__(self, filesystem: FileSystemView) -> None:
        self._filesystem = filesystem
        self._exists: dict[str, bool] = {}
        self._realpaths: dict[str, str | None] = {}
        self.attempted: list[str] = []

    def exists(self, path: str) -> bool:
        if path not in self._exists:
            self.attempted.append(path)
            self._exists[path] = bool(self._filesystem.exists(path))
        return self._exists[path]

    def realpath(self, path: str) -> str | None:
        if path not in self._realpaths:
            resolved = self._filesystem.realpath(path)
            self._realpaths[path] = normalize_invoked_path(resolved) if resolved else None
        return self._realpaths[path]


class EntrypointResolver:
    """Resolve the durable path of the tool's built CLI entrypoint.

    Precedence, first existing candidate wins:

    1. A stable (not version-pinned) form of the invoking install: the invoking
       path itself, then its real path, else a PATH-derived `dist` file that
       shares its real path. The PATH lookup runs only when neither invoking
       form is stable.
    2. The real-path form of the invoking path when it is a built file.
    3. The invoking path itself when it is a built file.
    4. `dist` siblings derived from the invoking path's package root.

    PATH-derived candidates from a different install are never returned.
    """

    def __init__(
        self,
        *,
        binary_name: str = DEFAULT_BINARY_NAME,
        lookup: BinaryLookup | None = None,
        filesystem: FileSystemView | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        """Initialize resolver collaborators; defaults touch the real host."""

        self._binary_name = binary_name
        self._lookup = lookup if lookup is not None else lookup_binary_on_path
        self._filesystem = filesystem if filesystem is not None else LocalFileSystem()
        self._run_logger = run_logger

    def resolve(self, invoked_path: str) -> ResolvedEntrypoint:
        """Resolve the entrypoint for a process started with `invoked_path`.

        Raises:
            EntrypointNotFoundError: If no candidate from the invoking path's
                lineage exists on disk.
        """

        self._log_start()
        checks = _CheckSession(self._filesystem)
        invoked = normalize_invoked_path(invoked_path)
        invoked_real = checks.realpath(invoked)

        lineage = [
            candidate
            for candidate in (
                Candidate(invoked, CandidateOrigin.INVOKED),
                Candidate(invoked_real, CandidateOrigin.INVOKED_REALPATH)
                if invoked_real is not None and invoked_real != invoked
                else None,
            )
            if candidate is not None and looks_like_built_entry(candidate.path)
        ]
        existing = [candidate for candidate in lineage if checks.exists(candidate.path)]

        if existing:
            winner = self._rank_built_lineage(invoked, invoked_real, existing, checks)
        else:
            winner = self._first_derived_sibling(invoked, invoked_real, checks)

        if winner is None:
            error = EntrypointNotFoundError(invoked, checks.attempted)
            if self._run_logger is not None:
                self._run_logger.log_stage_failure(_STAGE, type(error).__name__)
            raise error

        if self._run_logger is not None:
            self._run_logger.log_candidate_selected(_STAGE, winner.path, winner.origin.value)
            self._run_logger.log_stage_complete(_STAGE, origin=winner.origin.value)
        return ResolvedEntrypoint(
            path=winner.path,
            origin=winner.origin,
            attempted_paths=tuple(checks.attempted),
        )

    def _rank_built_lineage(
        self,
        invoked: str,
        invoked_real: str | None,
        existing: list[Candidate],
        checks: _CheckSession,
    ) -> Candidate:
        """Pick among existing built files of the invoking lineage."""

        for candidate in existing:
            if candidate.origin is CandidateOrigin.INVOKED and not is_version_pinned(
                candidate.path
            ):
                return candidate
        for candidate in existing:
            if candidate.origin is CandidateOrigin.INVOKED_REALPATH and not is_version_pinned(
                candidate.path
            ):
                return candidate

        stable = self._stable_path_candidate(invoked, invoked_real, checks)
        if stable is not None:
            return stable

        for candidate in existing:
            if candidate.origin is CandidateOrigin.INVOKED_REALPATH:
                return candidate
        return existing[0]

    def _stable_path_candidate(
        self, invoked: str, invoked_real: str | None, checks: _CheckSession
    ) -> Candidate | None:
        """Return a stable PATH-derived entrypoint of the same install, if any."""

        path_binary = self._lookup(self._binary_name)
        if not path_binary:
            self._log_rejected(self._binary_name, "lookup_unavailable")
            return None

        path_binary = normalize_invoked_path(path_binary.strip())
        path_binary_real = checks.realpath(path_binary)

        candidates = [
            Candidate(path, CandidateOrigin.DERIVED_SIBLING)
            for path in derive_sibling_candidates(path_binary)
        ]
        if path_binary_real is not None:
            candidates.extend(
                Candidate(path, CandidateOrigin.DERIVED_SIBLING)
                for path in derive_sibling_candidates(path_binary_real)
            )
            candidates.append(Candidate(path_binary_real, CandidateOrigin.PATH_BINARY_REALPATH))
        candidates.append(Candidate(path_binary, CandidateOrigin.PATH_BINARY))

        seen: set[str] = set()
        for candidate in candidates:
            if candidate.path in seen:
                continue
            seen.add(candidate.path)
            if not looks_like_built_entry(candidate.path):
                continue
            if is_version_pinned(candidate.path):
                self._log_rejected(candidate.path, "version_pinned")
                continue
            if not checks.exists(candidate.path):
                self._log_rejected(candidate.path, "missing")
                continue
            candidate_real = checks.realpath(candidate.path)
            if _same_install(candidate.path, candidate_real, invoked, invoked_real):
                return candidate
            self._log_rejected(candidate.path, "different_install")
        return None

    def _first_derived_sibling(
        self, invoked: str, invoked_real: str | None, checks: _CheckSession
    ) -> Candidate | None:
        """Return the first existing `dist` sibling, stable paths before pinned ones."""

        derived = _unique(
            [
                *(derive_sibling_candidates(invoked_real) if invoked_real else []),
                *derive_sibling_candidates(invoked),
            ]
        )
        ordered = [path for path in derived if not is_version_pinned(path)] + [
            path for path in derived if is_version_pinned(path)
        ]
        for path in ordered:
            if checks.exists(path):
                return Candidate(path, CandidateOrigin.DERIVED_SIBLING)
            self._log_rejected(path, "missing")
        return None

    def _log_start(self) -> None:
        if self._run_logger is not None:
            self._run_logger.log_stage_start(_STAGE)

    def _log_rejected(self, path: str, reason: str) -> None:
        if self._run_logger is not None:
            self._run_logger.log_candidate_rejected(_STAGE, path, reason)


def resolve_cli_entrypoint(
    invoked_path: str,
    *,
    binary_name: str = DEFAULT_BINARY_NAME,
    lookup: BinaryLookup | None = None,
    filesystem: FileSystemView | None = None,
    run_logger: RunLogger | None = None,
) -> ResolvedEntrypoint:
    """Resolve the built CLI entrypoint for `invoked_path` with one-shot collaborators."""

    resolver = EntrypointResolver(
        binary_name=binary_name,
        lookup=lookup,
        filesystem=filesystem,
        run_logger=run_logger,
    )
    return resolver.resolve(invoked_path)
