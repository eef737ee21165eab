"""Configuration model and loaders for clawlaunch.

Responsibilities:
- Define gateway launch configuration as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.
- Apply deterministic precedence: CLI > env > YAML > defaults.

Key types:
- `LaunchConfig`: normalized launch settings for one resolution.
- `ConfigLoader`: static construction helpers for `LaunchConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .entrypoint import DEFAULT_BINARY_NAME
from .models.datatypes import LaunchOptions
from .parsing import normalize_optional_string, parse_permissive_boolean, parse_port

DEFAULT_GATEWAY_PORT = 18789
DEFAULT_RUNTIME_EXECUTABLE = "node"

_STRING_KEYS = ("bind", "auth", "tailscale", "ws_log", "binary_name", "runtime_executable")
_BOOLEAN_KEYS = ("allow_unconfigured", "force", "verbose")


@dataclass(frozen=True, slots=True)
class LaunchConfig:
    """Launch settings for one gateway program-argument resolution.

    Attributes:
        port: Gateway port.
        bind: Optional `--bind` value.
        auth: Optional `--auth` value.
        tailscale: Optional `--tailscale` value.
        ws_log: Optional `--ws-log` value.
        allow_unconfigured: Forward `--allow-unconfigured`.
        force: Forward `--force`.
        verbose: Forward `--verbose`.
        binary_name: Published binary name looked up on PATH.
        runtime_executable: Runtime written as the first argument, a path or a
            name looked up on PATH.
    """

    port: int = DEFAULT_GATEWAY_PORT
    bind: str | None = None
    auth: str | None = None
    tailscale: str | None = None
    ws_log: str | None = None
    allow_unconfigured: bool = False
    force: bool = False
    verbose: bool = False
    binary_name: str = DEFAULT_BINARY_NAME
    runtime_executable: str = DEFAULT_RUNTIME_EXECUTABLE

    def validate(self) -> None:
        """Validate configuration values before resolution."""

        parse_port(self.port)
        if normalize_optional_string(self.binary_name) is None:
            raise ValueError("`binary_name` must be a non-empty string.")

    def merged_with(self, overrides: Mapping[str, Any]) -> LaunchConfig:
        """Return a copy with non-`None` override values applied."""

        known = {item.name for item in fields(self)}
        unknown = sorted(set(overrides).difference(known))
        if unknown:
            raise ValueError(f"Unsupported launch setting(s): {', '.join(unknown)}.")

        changes = {key: value for key, value in overrides.items() if value is not None}
        merged = replace(self, **changes)
        merged.validate()
        return merged

    def to_launch_options(self) -> LaunchOptions:
        """Build the forwarded gateway options for this configuration."""

        return LaunchOptions(
            port=parse_port(self.port),
            bind=self.bind,
            auth=self.auth,
            tailscale=self.tailscale,
            ws_log=self.ws_log,
            allow_unconfigured=self.allow_unconfigured,
            force=self.force,
            verbose=self.verbose,
        )


class ConfigLoader:
    """Factory methods for creating `LaunchConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset({"port", *_STRING_KEYS, *_BOOLEAN_KEYS})
    ENV_PREFIX = "CLAWLAUNCH_"

    @staticmethod
    def from_yaml(path: Path) -> LaunchConfig:
        """Create a validated config from a YAML file."""

        payload = ConfigLoader._parse_yaml_payload(path.read_text(encoding="utf-8"), path)
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(
        env: Mapping[str, str] | None = None, base: LaunchConfig | None = None
    ) -> LaunchConfig:
        """Create a validated config from `CLAWLAUNCH_*` environment variables.

        Values missing from the environment fall back to `base` (or defaults).
        """

        env_map: Mapping[str, str] = os.environ if env is None else env
        overrides: dict[str, Any] = {}

        port = ConfigLoader._optional_env_string(env_map, "PORT")
        if port is not None:
            try:
                overrides["port"] = parse_port(port, f"{ConfigLoader.ENV_PREFIX}PORT")
            except ValueError as exc:
                raise ValueError(
                    f"Environment variable `{ConfigLoader.ENV_PREFIX}PORT` must be a valid port."
                ) from exc

        for key in _STRING_KEYS:
            value = ConfigLoader._optional_env_string(env_map, key.upper())
            if value is not None:
                overrides[key] = value

        for key in _BOOLEAN_KEYS:
            value = ConfigLoader._optional_env_boolean(env_map, key.upper())
            if value is not None:
                overrides[key] = value

        return (base or LaunchConfig()).merged_with(overrides)

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> LaunchConfig:
        """Build a validated config from a normalized mapping payload."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(str(key) for key in unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        overrides: dict[str, Any] = {}
        if "port" in payload and payload["port"] is not None:
            try:
                overrides["port"] = parse_port(payload["port"])
            except ValueError as exc:
                raise ValueError(f"{source_label} field `port` is not a valid port.") from exc

        for key in _STRING_KEYS:
            value = normalize_optional_string(payload.get(key))
            if value is not None:
                overrides[key] = value

        for key in _BOOLEAN_KEYS:
            if key not in payload:
                continue
            parsed = parse_permissive_boolean(payload[key])
            if parsed is None:
                raise ValueError(
                    f"{source_label} field `{key}` must be a boolean value "
                    "(`true`/`false`, `1`/`0`, `yes`/`no`)."
                )
            overrides[key] = parsed

        return LaunchConfig().merged_with(overrides)

    @staticmethod
    def _optional_env_string(env: Mapping[str, str], suffix: str) -> str | None:
        """Read and normalize an optional `CLAWLAUNCH_<suffix>` value."""

        return normalize_optional_string(env.get(f"{ConfigLoader.ENV_PREFIX}{suffix}"))

    @staticmethod
    def _optional_env_boolean(env: Mapping[str, str], suffix: str) -> bool | None:
        """Read an optional boolean `CLAWLAUNCH_<suffix>` value."""

        key = f"{ConfigLoader.ENV_PREFIX}{suffix}"
        if key not in env:
            return None
        parsed = parse_permissive_boolean(env.get(key))
        if parsed is None:
            raise ValueError(
                f"Environment variable `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed
