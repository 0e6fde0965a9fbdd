"""File and process collaborators used around the compiler core.

These helpers are the only place where dscript touches the filesystem or spawns
processes.  :func:`run_ephemeral` mirrors what a user would do by hand: drop the
rewritten JavaScript into a throw-away file, hand it to ``node`` with the
terminal attached, and clean the file up once the interpreter exits.
"""

from __future__ import annotations

import subprocess
import tempfile
import time
from pathlib import Path
from typing import Sequence

from dscript.telemetry.logger import get_logger

__all__ = [
    "DEFAULT_COMMAND",
    "DEFAULT_PREFIX",
    "DScriptRuntimeError",
    "RuntimeLaunchError",
    "RuntimeTimeoutError",
    "delete_temp",
    "read_source",
    "run_ephemeral",
    "write_output",
]

_LOGGER = get_logger("dscript.utils.runtime")

DEFAULT_COMMAND: tuple[str, ...] = ("node",)
DEFAULT_PREFIX = "d_temp_"


class DScriptRuntimeError(RuntimeError):
    """Base error raised by the runtime helpers."""


class RuntimeLaunchError(DScriptRuntimeError):
    """Raised when the JavaScript interpreter cannot be started."""

    def __init__(self, command: Sequence[str], reason: str) -> None:
        super().__init__(f"failed to launch {' '.join(command)!r}: {reason}")
        self.command = tuple(command)


class RuntimeTimeoutError(DScriptRuntimeError):
    """Raised when the interpreter exceeds the configured wall-clock timeout."""

    def __init__(self, *, timeout: float) -> None:
        super().__init__(f"execution timed out after {timeout:.3f}s")
        self.timeout = timeout


def read_source(path: str | Path) -> str:
    return Path(path).read_text(encoding="utf-8")


def write_output(path: str | Path, text: str) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
    return target


def delete_temp(path: str | Path) -> None:
    try:
        Path(path).unlink()
    except FileNotFoundError:
        _LOGGER.debug("temp file already removed: %s", path)


def run_ephemeral(
    text: str,
    *,
    command: Sequence[str] = DEFAULT_COMMAND,
    timeout: float | None = None,
    temp_root: str | Path | None = None,
    prefix: str = DEFAULT_PREFIX,
) -> int:
    """Execute ``text`` with the configured interpreter and return its exit status.

    The script is written to ``<temp_root>/<prefix><epoch-millis>.js`` and the
    interpreter inherits this process's stdin/stdout/stderr.  The temp file is
    removed whether the run succeeds, fails, or times out.  ``timeout=None``
    waits indefinitely and ``temp_root=None`` uses the system temp directory.
    """

    argv = tuple(command)
    if not argv:
        raise ValueError("command must name an interpreter")
    if timeout is not None and timeout <= 0:
        raise ValueError(f"timeout must be positive, got {timeout!r}")
    deadline = timeout
    root = Path(temp_root) if temp_root is not None else None
    script = _temp_script_path(root, prefix)

    write_output(script, text)
    start = time.perf_counter()
    try:
        _LOGGER.info("launch | cmd=%s script=%s", " ".join(argv), script)
        completed = subprocess.run([*argv, str(script)], timeout=deadline, check=False)
    except FileNotFoundError as exc:
        raise RuntimeLaunchError(argv, "interpreter not found") from exc
    except PermissionError as exc:
        raise RuntimeLaunchError(argv, str(exc)) from exc
    except subprocess.TimeoutExpired as exc:
        raise RuntimeTimeoutError(timeout=float(deadline or 0.0)) from exc
    finally:
        delete_temp(script)
    _LOGGER.info(
        "exit | status=%d duration=%.3fs", completed.returncode, time.perf_counter() - start
    )
    return completed.returncode


def _temp_script_path(root: Path | None, prefix: str) -> Path:
    base = root if root is not None else Path(tempfile.gettempdir())
    stamp = int(time.time() * 1000)
    candidate = base / f"{prefix}{stamp}.js"
    # Two runs in the same millisecond must not share a file.
    while candidate.exists():
        stamp += 1
        candidate = base / f"{prefix}{stamp}.js"
    return candidate

