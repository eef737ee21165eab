"""Shared typed data models for clawlaunch.

This package contains dataclasses used across resolution stages to avoid
cross-module coupling and circular imports.
"""

from .datatypes import (
    Candidate,
    CandidateOrigin,
    GatewayProgramArguments,
    Invocation,
    LaunchOptions,
    ResolvedEntrypoint,
)

__all__ = [
    "Candidate",
    "CandidateOrigin",
    "GatewayProgramArguments",
    "Invocation",
    "LaunchOptions",
    "ResolvedEntrypoint",
]
