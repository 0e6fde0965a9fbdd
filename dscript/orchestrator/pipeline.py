"""End-to-end helpers tying the checker, rewriter, and runtime together."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from dscript.dsl import checker
from dscript.dsl.transpiler import CompileResult, transpile
from dscript.telemetry.logger import get_logger
from dscript.utils import config as config_loader
from dscript.utils import runtime

from .types import ToolchainConfig

_LOGGER = get_logger("dscript.orchestrator.pipeline")

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "dscript.yaml"


def load_configuration(
    config_path: str | Path | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
) -> ToolchainConfig:
    """Return a :class:`ToolchainConfig` from ``config_path`` and overrides."""

    data: Mapping[str, Any] | None = None
    if config_path is not None:
        data = config_loader.load_config(config_path)
    return ToolchainConfig.from_mapping(data).merge(overrides)


def compile_source(
    source: str, *, on_diagnostic: Optional[checker.DiagnosticCallback] = None
) -> CompileResult:
    return transpile(source, on_diagnostic=on_diagnostic)


def check_file(
    path: str | Path, *, on_diagnostic: Optional[checker.DiagnosticCallback] = None
) -> checker.ScanResult:
    """Type check ``path`` without producing any output."""

    return checker.scan(runtime.read_source(path), on_diagnostic=on_diagnostic)


def default_output_path(source_path: str | Path, suffix: str = ".js") -> Path:
    return Path(source_path).with_suffix(suffix)


def compile_file(
    path: str | Path,
    output: str | Path | None = None,
    *,
    config: ToolchainConfig,
    on_diagnostic: Optional[checker.DiagnosticCallback] = None,
) -> Optional[Path]:
    """Rewrite ``path`` to JavaScript on disk.

    Returns the written path, or ``None`` when type errors prevented the
    rewrite.  Nothing is written in that case.
    """

    result = compile_source(runtime.read_source(path), on_diagnostic=on_diagnostic)
    if result.output is None:
        return None
    target = Path(output) if output is not None else default_output_path(path, config.output.suffix)
    if target.resolve() == Path(path).resolve():
        raise ValueError(f"refusing to overwrite source file {path}")
    written = runtime.write_output(target, result.output)
    _LOGGER.info("compiled %s -> %s", path, written)
    return written


def run_file(
    path: str | Path,
    *,
    config: ToolchainConfig,
    on_diagnostic: Optional[checker.DiagnosticCallback] = None,
) -> Optional[int]:
    """Check, rewrite, and execute ``path``; return the interpreter's exit status.

    ``None`` means the program never ran because of type errors.  A non-zero
    status is returned to the caller as-is; the rewrite itself stays valid.
    """

    result = compile_source(runtime.read_source(path), on_diagnostic=on_diagnostic)
    if result.output is None:
        return None
    status = runtime.run_ephemeral(result.output, **config.runtime.to_kwargs())
    if status != 0:
        _LOGGER.info("%s exited with status %d", path, status)
    return status


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "check_file",
    "compile_file",
    "compile_source",
    "default_output_path",
    "load_configuration",
    "run_file",
]
