"""Telemetry and observability helpers.

This package emits deterministic resolution events for auditing.
"""

from .logger import RunLogger

__all__ = ["RunLogger"]
