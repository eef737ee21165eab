"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
program-argument listings and entrypoint resolution traces.
"""

from __future__ import annotations

import json
from typing import NoReturn

import typer

from .errors import LaunchStageError
from .models.datatypes import GatewayProgramArguments, ResolvedEntrypoint


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, LaunchStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_program_arguments(arguments: GatewayProgramArguments, as_json: bool) -> None:
    """Print program arguments one per line, or as a descriptor JSON object."""

    if as_json:
        typer.echo(json.dumps(arguments.as_descriptor_payload(), indent=2))
        return
    for argument in arguments.program_arguments:
        typer.echo(argument)


def echo_entrypoint(resolved: ResolvedEntrypoint, trace: bool) -> None:
    """Print the resolved entrypoint and, when tracing, how it was found."""

    typer.echo(resolved.path)
    if not trace:
        return
    typer.echo(f"Origin: {resolved.origin.value}")
    for attempted in resolved.attempted_paths:
        typer.echo(f"Attempted: {attempted}")

