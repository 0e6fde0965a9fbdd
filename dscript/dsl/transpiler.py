"""Rewrite checked dscript source into plain JavaScript.

The rewrite is a fixed, ordered list of whole-text substitutions applied to the
original source.  It performs no validation of its own and is only reached
through :func:`transpile` once the checker has found no type errors, so a file
with any mismatch produces no output at all.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from dscript.telemetry.logger import get_logger

from . import checker
from .type_system import TypeName

__all__ = ["CompileResult", "SUBSTITUTIONS", "rewrite", "transpile"]

_LOGGER = get_logger("dscript.dsl.transpiler")

_TYPE_NAMES = "|".join(name.value for name in TypeName)
_ANNOTATION = rf"[ \t]*:[ \t]*(?:{_TYPE_NAMES})\b(?:[ \t]*\|[ \t]*(?:{_TYPE_NAMES})\b)*"

SUBSTITUTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bmut\b"), "let"),
    (re.compile(_ANNOTATION), ""),
    (re.compile(r"\bfn\b"), "function"),
    (re.compile(r"(?<![\w.$])print(?=\s*\()"), "console.log"),
)


@dataclass(slots=True, frozen=True)
class CompileResult:
    """Outcome of :func:`transpile`: rewritten text, or the reasons there is none."""

    output: Optional[str]
    diagnostics: tuple[checker.TypeMismatch, ...] = ()

    @property
    def ok(self) -> bool:
        return self.output is not None


def rewrite(source: str) -> str:
    """Strip type annotations and map dialect keywords to JavaScript."""

    text = source
    for pattern, replacement in SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    return text


def transpile(
    source: str, *, on_diagnostic: Optional[checker.DiagnosticCallback] = None
) -> CompileResult:
    """Type check ``source`` and rewrite it only if the check is clean."""

    result = checker.scan(source, on_diagnostic=on_diagnostic)
    if not result.ok:
        _LOGGER.info("rewrite skipped: %d type error(s)", len(result.diagnostics))
        return CompileResult(None, result.diagnostics)
    return CompileResult(rewrite(source))
