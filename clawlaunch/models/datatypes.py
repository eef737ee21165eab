"""Core datatypes shared across clawlaunch modules.

Responsibilities:
- Represent the records exchanged between resolution stages.
- Keep launch option ordering explicit so argument vectors stay byte-stable.

Key types:
- `Invocation`, `CandidateOrigin`, `Candidate`, `ResolvedEntrypoint`,
  `LaunchOptions`, and `GatewayProgramArguments`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Mapping

from ..parsing import normalize_optional_string, parse_port, parse_required_boolean


@dataclass(frozen=True, slots=True)
class Invocation:
    """How the current process was started.

    Attributes:
        executable: Runtime executable that is running the tool.
        script_path: Script or module path the runtime was told to execute.
    """

    executable: str
    script_path: str


class CandidateOrigin(str, Enum):
    """Where an entrypoint candidate came from."""

    INVOKED = "invoked"
    INVOKED_REALPATH = "invoked_realpath"
    PATH_BINARY = "path_binary"
    PATH_BINARY_REALPATH = "path_binary_realpath"
    DERIVED_SIBLING = "derived_sibling"


@dataclass(frozen=True, slots=True)
class Candidate:
    """A filesystem path considered as a possible entrypoint."""

    path: str
    origin: CandidateOrigin


@dataclass(frozen=True, slots=True)
class ResolvedEntrypoint:
    """The winning entrypoint of one resolution call.

    Attributes:
        path: Absolute path that passed an existence check in this call.
        origin: Origin tag of the winning candidate.
        attempted_paths: Every path checked for existence, in check order.
    """

    path: str
    origin: CandidateOrigin
    attempted_paths: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class LaunchOptions:
    """Options forwarded to the relaunched `gateway` subcommand.

    Attributes:
        port: Network port the gateway binds.
        bind: Optional bind mode (`--bind`).
        auth: Optional auth mode (`--auth`).
        tailscale: Optional tailscale exposure mode (`--tailscale`).
        ws_log: Optional websocket log style (`--ws-log`).
        allow_unconfigured: Emit `--allow-unconfigured` when true.
        force: Emit `--force` when true.
        verbose: Emit `--verbose` when true.
        unrecognized: Caller-supplied keys that are not forwarded.
    """

    VALUE_OPTIONS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("bind", "--bind"),
        ("auth", "--auth"),
        ("tailscale", "--tailscale"),
        ("ws_log", "--ws-log"),
    )
    FLAG_OPTIONS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("allow_unconfigured", "--allow-unconfigured"),
        ("force", "--force"),
        ("verbose", "--verbose"),
    )

    port: int
    bind: str | None = None
    auth: str | None = None
    tailscale: str | None = None
    ws_log: str | None = None
    allow_unconfigured: bool = False
    force: bool = False
    verbose: bool = False
    unrecognized: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        """Validate and normalize values so the builder only ever emits strings.

        Raises:
            ValueError: If the port is invalid or a flag is not a boolean token.
        """

        object.__setattr__(self, "port", parse_port(self.port))
        for key, _flag in self.VALUE_OPTIONS:
            object.__setattr__(self, key, normalize_optional_string(getattr(self, key)))
        for key, _flag in self.FLAG_OPTIONS:
            object.__setattr__(self, key, parse_required_boolean(getattr(self, key), key))

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> LaunchOptions:
        """Build options from a loose mapping, keeping unknown keys aside.

        Raises:
            ValueError: If `port` is missing or invalid, or a flag is not boolean.
        """

        if "port" not in payload:
            raise ValueError("`port` is required to build gateway launch options.")

        known = {"port"}
        values: dict[str, Any] = {"port": parse_port(payload["port"])}
        for key, _flag in cls.VALUE_OPTIONS:
            known.add(key)
            values[key] = payload.get(key)
        for key, _flag in cls.FLAG_OPTIONS:
            known.add(key)
            if payload.get(key) is not None:
                values[key] = payload[key]

        unrecognized = {key: value for key, value in payload.items() if key not in known}
        return cls(**values, unrecognized=unrecognized)

    def forwarded_flags(self) -> list[str]:
        """Return extra gateway flags in fixed enumeration order."""

        flags: list[str] = []
        for key, flag in self.VALUE_OPTIONS:
            value = getattr(self, key)
            if value is not None:
                flags.extend([flag, value])
        for key, flag in self.FLAG_OPTIONS:
            if getattr(self, key):
                flags.append(flag)
        return flags


@dataclass(frozen=True, slots=True)
class GatewayProgramArguments:
    """Argument vector that relaunches the tool as a gateway service.

    Attributes:
        program_arguments: `[runtime, entrypoint, "gateway", "--port", port, ...]`.
    """

    program_arguments: list[str]

    @property
    def runtime_executable(self) -> str:
        """Return the runtime executable (first element)."""

        return self.program_arguments[0]

    @property
    def entrypoint(self) -> str:
        """Return the resolved entrypoint (second element)."""

        return self.program_arguments[1]

    def as_descriptor_payload(self) -> dict[str, list[str]]:
        """Return a JSON-ready mapping for service descriptor writers."""

        return {"programArguments": list(self.program_arguments)}
