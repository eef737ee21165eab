"""Unit tests for gateway argument assembly and launch option handling."""

from __future__ import annotations

import pytest

from clawlaunch.models.datatypes import Invocation, LaunchOptions
from clawlaunch.program_args import (
    build_gateway_program_arguments,
    resolve_gateway_program_arguments,
)

ENTRY = "/opt/openclaw/dist/entry.js"


def test_build_gateway_program_arguments_basic_vector() -> None:
    """Builder should emit runtime, entrypoint, subcommand and port in order."""

    arguments = build_gateway_program_arguments("/usr/bin/node", ENTRY, LaunchOptions(port=8080))

    assert arguments.program_arguments == ["/usr/bin/node", ENTRY, "gateway", "--port", "8080"]
    assert arguments.runtime_executable == "/usr/bin/node"
    assert arguments.entrypoint == ENTRY


def test_forwarded_flags_follow_enumeration_order() -> None:
    """Forwarded flags should follow the fixed option order, not caller order."""

    first = LaunchOptions.from_mapping(
        {"verbose": True, "tailscale": "serve", "port": 18789, "bind": "lan", "force": "yes"}
    )
    second = LaunchOptions.from_mapping(
        {"bind": "lan", "force": True, "port": "18789", "tailscale": "serve", "verbose": "1"}
    )

    first_arguments = build_gateway_program_arguments("node", ENTRY, first).program_arguments
    second_arguments = build_gateway_program_arguments("node", ENTRY, second).program_arguments

    assert first_arguments == second_arguments
    assert first_arguments[5:] == [
        "--bind",
        "lan",
        "--tailscale",
        "serve",
        "--force",
        "--verbose",
    ]


def test_port_is_rendered_without_leading_zeros() -> None:
    """Textual ports should be normalized to plain base-10 digits."""

    options = LaunchOptions.from_mapping({"port": " 018789 "})

    arguments = build_gateway_program_arguments("node", ENTRY, options).program_arguments

    assert arguments[4] == "18789"


def test_unrecognized_options_are_kept_but_not_forwarded() -> None:
    """Unknown option keys should be preserved on the options and never emitted."""

    options = LaunchOptions.from_mapping({"port": 18789, "color": "blue"})

    arguments = build_gateway_program_arguments("node", ENTRY, options).program_arguments

    assert options.unrecognized == {"color": "blue"}
    assert arguments == ["node", ENTRY, "gateway", "--port", "18789"]


def test_false_boolean_flags_are_not_emitted() -> None:
    """Boolean flags should only appear when true."""

    options = LaunchOptions.from_mapping({"port": 1, "force": "no", "allow_unconfigured": False})

    assert options.forwarded_flags() == []


@pytest.mark.parametrize("port", [0, -1, 65536, True, "abc", "+80", None])
def test_invalid_ports_are_rejected(port: object) -> None:
    """Ports outside 1..65535, booleans and non-digit text should be rejected."""

    with pytest.raises(ValueError, match="`port`"):
        LaunchOptions.from_mapping({"port": port})


def test_missing_port_is_rejected() -> None:
    """Options without a port cannot describe a gateway launch."""

    with pytest.raises(ValueError, match="`port` is required"):
        LaunchOptions.from_mapping({"bind": "lan"})


def test_invalid_boolean_flag_is_rejected() -> None:
    """Boolean flags should reject tokens outside the accepted set."""

    with pytest.raises(ValueError, match="`force` must be a boolean value"):
        LaunchOptions.from_mapping({"port": 18789, "force": "maybe"})


def test_direct_construction_normalizes_value_options() -> None:
    """Blank values should be dropped and non-string values rendered as text."""

    options = LaunchOptions(port=1, bind="", auth=7, tailscale="  serve ")

    arguments = build_gateway_program_arguments("node", ENTRY, options).program_arguments

    assert options.forwarded_flags() == ["--auth", "7", "--tailscale", "serve"]
    assert all(isinstance(item, str) and item for item in arguments)


def test_direct_construction_rejects_invalid_flags_and_ports() -> None:
    """Constructing options directly should apply the same checks as `from_mapping`."""

    with pytest.raises(ValueError, match="`force` must be a boolean value"):
        LaunchOptions(port=1, force="maybe")
    with pytest.raises(ValueError, match="`port`"):
        LaunchOptions(port=0)


def test_launch_options_are_hashable_despite_unrecognized_keys() -> None:
    """Options should hash by their forwarded values, ignoring unknown keys."""

    first = LaunchOptions.from_mapping({"port": 1, "bind": "lan", "color": "blue"})
    second = LaunchOptions.from_mapping({"port": 1, "bind": "lan", "color": "blue"})

    assert hash(first) == hash(second)
    assert len({first, second}) == 1


def test_resolve_gateway_program_arguments_honors_runtime_override(
    fake_filesystem_factory, recording_lookup_factory
) -> None:
    """A path-like runtime override should replace the invoking executable."""

    filesystem = fake_filesystem_factory(existing={ENTRY})

    arguments = resolve_gateway_program_arguments(
        LaunchOptions(port=18789, bind="loopback"),
        invocation=Invocation(executable="/usr/bin/node", script_path=ENTRY),
        runtime_executable="/opt/node22/bin/node",
        lookup=recording_lookup_factory(),
        filesystem=filesystem,
    )

    assert arguments.program_arguments == [
        "/opt/node22/bin/node",
        ENTRY,
        "gateway",
        "--port",
        "18789",
        "--bind",
        "loopback",
    ]
    assert arguments.as_descriptor_payload() == {
        "programArguments": arguments.program_arguments
    }
