"""Gateway relaunch argument assembly.

Responsibilities:
- Build the ordered argument vector persisted into service descriptors.
- Wire invocation inspection, entrypoint resolution and option forwarding.
"""

from __future__ import annotations

from typing import Any, Mapping

from .entrypoint import DEFAULT_BINARY_NAME, EntrypointResolver
from .filesystem import FileSystemView
from .invocation import current_invocation
from .models.datatypes import GatewayProgramArguments, Invocation, LaunchOptions
from .parsing import parse_port
from .runtime_tools import BinaryLookup, resolve_runtime_executable
from .telemetry.logger import RunLogger

GATEWAY_SUBCOMMAND = "gateway"


def build_gateway_program_arguments(
    runtime_executable: str,
    entrypoint: str,
    options: LaunchOptions,
) -> GatewayProgramArguments:
    """Assemble `[runtime, entrypoint, "gateway", "--port", port, ...flags]`."""

    arguments = [
        runtime_executable,
        entrypoint,
        GATEWAY_SUBCOMMAND,
        "--port",
        str(parse_port(options.port)),
    ]
    arguments.extend(options.forwarded_flags())
    return GatewayProgramArguments(program_arguments=arguments)


def resolve_gateway_program_arguments(
    options: LaunchOptions | Mapping[str, Any],
    *,
    invocation: Invocation | None = None,
    binary_name: str = DEFAULT_BINARY_NAME,
    runtime_executable: str | None = None,
    lookup: BinaryLookup | None = None,
    filesystem: FileSystemView | None = None,
    run_logger: RunLogger | None = None,
) -> GatewayProgramArguments:
    """Resolve the program arguments that relaunch the running CLI as a gateway.

    Args:
        options: Launch options, or a mapping accepted by `LaunchOptions.from_mapping`.
        invocation: How the tool was started; defaults to the current process.
        binary_name: Published binary name used for the PATH lookup.
        runtime_executable: Optional runtime override (path or PATH name).
        lookup: PATH lookup capability; defaults to `which`/`where`.
        filesystem: Filesystem view; defaults to the host filesystem.
        run_logger: Optional structured logger for resolution events.

    Raises:
        EntrypointNotFoundError: If no built entrypoint can be resolved.
        ValueError: If `options` carries an invalid port or flag value.
    """

    launch_options = (
        options if isinstance(options, LaunchOptions) else LaunchOptions.from_mapping(options)
    )
    resolved_invocation = invocation if invocation is not None else current_invocation()

    resolver = EntrypointResolver(
        binary_name=binary_name,
        lookup=lookup,
        filesystem=filesystem,
        run_logger=run_logger,
    )
    entrypoint = resolver.resolve(resolved_invocation.script_path)
    executable = resolve_runtime_executable(runtime_executable, resolved_invocation.executable)
    return build_gateway_program_arguments(executable, entrypoint.path, launch_options)
