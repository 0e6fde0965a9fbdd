"""Typed configuration objects for the dscript toolchain."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

from dscript.utils.runtime import DEFAULT_COMMAND, DEFAULT_PREFIX


def _as_path(value: Path | str | None) -> Path | None:
    if value is None or value == "":
        return None
    return value if isinstance(value, Path) else Path(value)


def _deep_update(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``updates`` recursively merged."""

    result: dict[str, Any] = {key: value for key, value in base.items()}
    for key, value in updates.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = _deep_update(result[key], value)
        else:
            result[key] = value
    return result


def _coerce_float(value: Any, *, fallback: float | None = None) -> float | None:
    if value is None:
        return fallback
    try:
        return float(value)
    except (TypeError, ValueError):
        return fallback


@dataclass(slots=True)
class RuntimeOptions:
    """How rewritten programs are executed by ``dscript run``."""

    command: tuple[str, ...] = DEFAULT_COMMAND
    timeout: float | None = None
    temp_root: Path | None = None
    temp_prefix: str = DEFAULT_PREFIX

    def to_kwargs(self) -> dict[str, Any]:
        return {
            "command": self.command,
            "timeout": self.timeout,
            "temp_root": self.temp_root,
            "prefix": self.temp_prefix,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "command": list(self.command),
            "timeout": self.timeout,
            "temp_root": str(self.temp_root) if self.temp_root else None,
            "temp_prefix": self.temp_prefix,
        }


@dataclass(slots=True)
class OutputOptions:
    """Where ``dscript compile`` writes its result."""

    suffix: str = ".js"


@dataclass(slots=True)
class ToolchainConfig:
    """Top-level configuration bundle."""

    runtime: RuntimeOptions = field(default_factory=RuntimeOptions)
    output: OutputOptions = field(default_factory=OutputOptions)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ToolchainConfig":
        payload = dict(data or {})
        return cls(
            runtime=cls._build_runtime_options(payload.get("runtime")),
            output=cls._build_output_options(payload.get("output")),
        )

    def merge(self, overrides: Mapping[str, Any] | None) -> "ToolchainConfig":
        if not overrides:
            return self
        return ToolchainConfig.from_mapping(_deep_update(self.to_dict(), overrides))

    def to_dict(self) -> dict[str, Any]:
        return {
            "runtime": self.runtime.to_dict(),
            "output": {"suffix": self.output.suffix},
        }

    @staticmethod
    def _build_runtime_options(data: Any) -> RuntimeOptions:
        if not isinstance(data, Mapping):
            return RuntimeOptions()
        raw_command = data.get("command")
        if isinstance(raw_command, str):
            command = tuple(raw_command.split())
        elif isinstance(raw_command, Sequence):
            command = tuple(str(item) for item in raw_command)
        else:
            command = ()
        timeout = _coerce_float(data.get("timeout"))
        if timeout is not None and timeout <= 0:
            raise ValueError(f"runtime.timeout must be positive, got {timeout!r}")
        return RuntimeOptions(
            command=command or DEFAULT_COMMAND,
            timeout=timeout,
            temp_root=_as_path(data.get("temp_root")),
            temp_prefix=str(data.get("temp_prefix") or DEFAULT_PREFIX),
        )

    @staticmethod
    def _build_output_options(data: Any) -> OutputOptions:
        if not isinstance(data, Mapping):
            return OutputOptions()
        suffix = str(data.get("suffix") or ".js")
        if not suffix.startswith("."):
            raise ValueError(f"output suffix must start with '.', got {suffix!r}")
        return OutputOptions(suffix=suffix)


__all__ = ["OutputOptions", "RuntimeOptions", "ToolchainConfig"]
