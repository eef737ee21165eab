"""Module entrypoint for running clawlaunch as ``python -m clawlaunch``."""

from __future__ import annotations

from clawlaunch.cli import main


if __name__ == "__main__":
    main()
