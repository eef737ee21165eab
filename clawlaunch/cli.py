"""Command-line interface for clawlaunch.

Responsibilities:
- Expose commands that print the resolved entrypoint and gateway program arguments.
- Convert CLI arguments, environment and YAML settings into `LaunchConfig`.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import echo_entrypoint, echo_program_arguments, exit_with_command_error
from .config import ConfigLoader, LaunchConfig
from .entrypoint import resolve_cli_entrypoint
from .errors import LaunchStageError
from .invocation import current_invocation, normalize_invoked_path
from .models.datatypes import Invocation
from .program_args import resolve_gateway_program_arguments
from .telemetry.logger import RunLogger

app = typer.Typer(
    name="clawlaunch",
    no_args_is_help=True,
    help="Resolve gateway relaunch arguments for an installed CLI.",
)


def _load_yaml_config(config_path: Path | None) -> LaunchConfig:
    """Load a YAML config file when requested and map failures to stage errors."""

    if config_path is None:
        return LaunchConfig()

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise LaunchStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise LaunchStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config keys/values and rerun.",
        ) from exc


def _resolve_launch_config(
    config_file: Path | None, cli_overrides: dict[str, object]
) -> LaunchConfig:
    """Resolve effective config with precedence CLI > env > YAML > defaults."""

    base_config = _load_yaml_config(config_file)
    try:
        env_config = ConfigLoader.from_env(base=base_config)
        return env_config.merged_with(cli_overrides)
    except ValueError as exc:
        raise LaunchStageError(
            stage="config",
            detail=str(exc),
            hint="Check `CLAWLAUNCH_*` environment variables and command options.",
        ) from exc


def _resolve_invocation(invoked_path: Path | None) -> Invocation:
    """Return the current invocation, optionally with an explicit script path."""

    invocation = current_invocation()
    if invoked_path is None:
        return invocation
    return replace(invocation, script_path=normalize_invoked_path(str(invoked_path)))


@app.command("program-args")
def program_args_command(
    port: Annotated[
        int | None, typer.Option("--port", help="Gateway port (default 18789).")
    ] = None,
    bind: Annotated[str | None, typer.Option("--bind", help="Forwarded `--bind` mode.")] = None,
    auth: Annotated[str | None, typer.Option("--auth", help="Forwarded `--auth` mode.")] = None,
    tailscale: Annotated[
        str | None, typer.Option("--tailscale", help="Forwarded `--tailscale` mode.")
    ] = None,
    ws_log: Annotated[
        str | None, typer.Option("--ws-log", help="Forwarded `--ws-log` style.")
    ] = None,
    allow_unconfigured: Annotated[
        bool, typer.Option("--allow-unconfigured", help="Forward `--allow-unconfigured`.")
    ] = False,
    force: Annotated[bool, typer.Option("--force", help="Forward `--force`.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Forward `--verbose`.")] = False,
    config_file: Annotated[
        Path | None, typer.Option("--config", help="YAML launch configuration file.")
    ] = None,
    invoked_path: Annotated[
        Path | None,
        typer.Option("--invoked-path", help="Path the CLI was invoked with (default: argv[0])."),
    ] = None,
    runtime: Annotated[
        str | None,
        typer.Option("--runtime", help="Runtime executable path or PATH name (default: node)."),
    ] = None,
    binary_name: Annotated[
        str | None, typer.Option("--binary-name", help="Binary name looked up on PATH.")
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", help="Print a `programArguments` JSON object.")
    ] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Log resolution events.")] = False,
) -> None:
    """Print the argument vector that relaunches the CLI as a gateway service."""

    try:
        config = _resolve_launch_config(
            config_file,
            {
                "port": port,
                "bind": bind,
                "auth": auth,
                "tailscale": tailscale,
                "ws_log": ws_log,
                "allow_unconfigured": allow_unconfigured or None,
                "force": force or None,
                "verbose": verbose or None,
                "runtime_executable": runtime,
                "binary_name": binary_name,
            },
        )
        run_logger = RunLogger(level="DEBUG") if debug else None
        arguments = resolve_gateway_program_arguments(
            config.to_launch_options(),
            invocation=_resolve_invocation(invoked_path),
            binary_name=config.binary_name,
            runtime_executable=config.runtime_executable,
            run_logger=run_logger,
        )
    except Exception as exc:
        exit_with_command_error("program-args", exc)

    echo_program_arguments(arguments, as_json=json_output)


@app.command("entrypoint")
def entrypoint_command(
    invoked_path: Annotated[
        Path | None,
        typer.Option("--invoked-path", help="Path the CLI was invoked with (default: argv[0])."),
    ] = None,
    binary_name: Annotated[
        str | None, typer.Option("--binary-name", help="Binary name looked up on PATH.")
    ] = None,
    config_file: Annotated[
        Path | None, typer.Option("--config", help="YAML launch configuration file.")
    ] = None,
    trace: Annotated[
        bool, typer.Option("--trace", help="Also print origin and attempted paths.")
    ] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Log resolution events.")] = False,
) -> None:
    """Print the resolved built CLI entrypoint."""

    try:
        config = _resolve_launch_config(config_file, {"binary_name": binary_name})
        run_logger = RunLogger(level="DEBUG") if debug else None
        resolved = resolve_cli_entrypoint(
            _resolve_invocation(invoked_path).script_path,
            binary_name=config.binary_name,
            run_logger=run_logger,
        )
    except Exception as exc:
        exit_with_command_error("entrypoint", exc)

    echo_entrypoint(resolved, trace=trace)


def main() -> None:
    """Run the clawlaunch CLI."""

    app()
