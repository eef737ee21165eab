"""Integration-test fixtures for on-disk install layouts."""

from __future__ import annotations

from pathlib import Path

import pytest

from .layouts import InstallLayouts, build_install_layouts


@pytest.fixture
def install_layouts(tmp_path: Path) -> InstallLayouts:
    """Create pnpm-global, npx-cache and source-checkout layouts under `tmp_path`."""

    return build_install_layouts(tmp_path)
