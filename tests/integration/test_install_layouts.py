"""Entrypoint resolution against real symlinked install layouts on disk."""

from __future__ import annotations

from pathlib import Path

import pytest

from clawlaunch.entrypoint import resolve_cli_entrypoint
from clawlaunch.errors import EntrypointNotFoundError
from clawlaunch.models.datatypes import CandidateOrigin, Invocation
from clawlaunch.program_args import resolve_gateway_program_arguments

from .layouts import PINNED_STORE_SEGMENT, InstallLayouts


def _lookup_returning(path: Path | None):
    """Return a PATH lookup double that always reports `path`."""

    def _lookup(name: str) -> str | None:
        """Report the configured binary location for any name."""

        del name
        return str(path) if path is not None else None

    return _lookup


def test_pinned_store_invocation_maps_to_global_stable_symlink(
    install_layouts: InstallLayouts,
) -> None:
    """A process started from the pnpm store should persist the stable symlink path."""

    resolved = resolve_cli_entrypoint(
        str(install_layouts.global_pinned_index),
        lookup=_lookup_returning(install_layouts.global_bin),
    )

    assert resolved.path == str(install_layouts.global_stable_index)
    assert PINNED_STORE_SEGMENT not in resolved.path
    assert resolved.origin is CandidateOrigin.DERIVED_SIBLING


def test_stable_symlink_invocation_is_kept(install_layouts: InstallLayouts) -> None:
    """Invoking through the stable symlink should not switch to the store path."""

    resolved = resolve_cli_entrypoint(
        str(install_layouts.global_stable_index),
        lookup=_lookup_returning(None),
    )

    assert resolved.path == str(install_layouts.global_stable_index)


def test_npx_symlink_shim_resolves_to_its_own_entry(install_layouts: InstallLayouts) -> None:
    """An npx `.bin` symlink should resolve to the npx cache entry, not the global one."""

    arguments = resolve_gateway_program_arguments(
        {"port": 18789},
        invocation=Invocation(executable="/usr/bin/node", script_path=str(install_layouts.npx_bin)),
        lookup=_lookup_returning(install_layouts.global_bin),
    )

    assert arguments.program_arguments == [
        "/usr/bin/node",
        str(install_layouts.npx_entry),
        "gateway",
        "--port",
        "18789",
    ]


def test_npx_shell_wrapper_shim_falls_back_to_package_dist(
    install_layouts: InstallLayouts,
) -> None:
    """A generated shell wrapper (not a symlink) should map to the package `dist` entry."""

    install_layouts.npx_bin.unlink()
    install_layouts.npx_bin.write_text("#!/bin/sh\nexec node ../openclaw/dist/entry.js\n")

    resolved = resolve_cli_entrypoint(
        str(install_layouts.npx_bin), lookup=_lookup_returning(None)
    )

    assert resolved.path == str(install_layouts.npx_entry)
    assert resolved.origin is CandidateOrigin.DERIVED_SIBLING


def test_dev_source_without_build_fails_even_with_global_install(
    install_layouts: InstallLayouts,
) -> None:
    """A source checkout without `dist` must fail instead of using the global install."""

    lookups: list[str] = []

    def _recording_lookup(name: str) -> str | None:
        """Record the lookup and report the global install."""

        lookups.append(name)
        return str(install_layouts.global_bin)

    with pytest.raises(EntrypointNotFoundError, match="Cannot find built CLI"):
        resolve_cli_entrypoint(str(install_layouts.dev_source), lookup=_recording_lookup)

    assert lookups == []


def test_dev_build_is_found_from_source_invocation(install_layouts: InstallLayouts) -> None:
    """Once the checkout is built, the source invocation should map to `dist/entry.js`."""

    install_layouts.dev_entry.parent.mkdir(parents=True)
    install_layouts.dev_entry.write_text("// built\n", encoding="utf-8")

    resolved = resolve_cli_entrypoint(
        str(install_layouts.dev_source), lookup=_lookup_returning(install_layouts.global_bin)
    )

    assert resolved.path == str(install_layouts.dev_entry)
