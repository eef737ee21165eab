"""Top-level package for clawlaunch.

This package resolves the durable path of a Node-based CLI's built entrypoint
and assembles the argument vector that relaunches it as a `gateway` service.
The main entry point is `resolve_gateway_program_arguments`.
"""

from .errors import EntrypointNotFoundError, LaunchStageError
from .models import GatewayProgramArguments, LaunchOptions
from .program_args import resolve_gateway_program_arguments

__all__ = [
    "EntrypointNotFoundError",
    "GatewayProgramArguments",
    "LaunchOptions",
    "LaunchStageError",
    "__version__",
    "resolve_gateway_program_arguments",
]

__version__ = "0.1.0"
