"""Line-by-line type checking pass.

The scan walks the source once, in order, and validates two things:

* typed variable declarations against the literal they are initialised with;
* ``return`` statements inside a function against the function's declared
  return annotation.

Mismatches are collected as :class:`TypeMismatch` values rather than raised,
so a single pass reports every problem in the file.  Callers that want to show
diagnostics as soon as they are found pass an ``on_diagnostic`` callback.

Function tracking is a single slot.  A ``fn`` line replaces whatever function
was active and any line that is exactly ``}`` clears it, whether or not that
brace actually closes the function.  Nested functions are therefore not
modelled: a ``return`` after an inner function's closing brace is not checked.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Literal, Optional

from dscript.telemetry.logger import get_logger

from . import grammar
from .type_system import TypeName, infer_literal

__all__ = [
    "DiagnosticCallback",
    "FunctionContextTracker",
    "ScanResult",
    "ScanState",
    "TypeMismatch",
    "scan",
]

_LOGGER = get_logger("dscript.dsl.checker")

DiagnosticCallback = Callable[["TypeMismatch"], None]


@dataclass(slots=True, frozen=True)
class TypeMismatch:
    """An inferred type that is not a member of the declared annotation."""

    line: int
    subject: str
    declared: str
    inferred: TypeName
    kind: Literal["variable", "return"] = "variable"

    @property
    def message(self) -> str:
        verb = "assigned" if self.kind == "variable" else "returns"
        return (
            f"Type Error on line {self.line}: {self.subject} is declared as "
            f"'{self.declared}' but {verb} a '{self.inferred.value}'"
        )

    def __str__(self) -> str:
        return self.message


class FunctionContextTracker:
    """Remembers the signature of the function currently being scanned."""

    def __init__(self) -> None:
        self._active: Optional[grammar.FunctionSignature] = None

    @property
    def active(self) -> Optional[grammar.FunctionSignature]:
        return self._active

    def open(self, signature: grammar.FunctionSignature) -> None:
        if self._active is not None:
            _LOGGER.debug(
                "function %s (line %d) replaced by %s (line %d) before closing",
                self._active.name,
                self._active.line,
                signature.name,
                signature.line,
            )
        self._active = signature

    def close(self) -> None:
        self._active = None


@dataclass(slots=True)
class ScanState:
    """Mutable state for one scan of one source text."""

    line: int = 0
    functions: FunctionContextTracker = field(default_factory=FunctionContextTracker)
    diagnostics: list[TypeMismatch] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.diagnostics)


@dataclass(slots=True, frozen=True)
class ScanResult:
    diagnostics: tuple[TypeMismatch, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def scan(source: str, *, on_diagnostic: Optional[DiagnosticCallback] = None) -> ScanResult:
    """Type check ``source`` and return every mismatch found, in line order."""

    state = ScanState()
    for index, text in enumerate(source.splitlines(), start=1):
        state.line = index
        mismatch = _visit(grammar.classify_line(text, index), state)
        if mismatch is None:
            continue
        state.diagnostics.append(mismatch)
        if on_diagnostic is not None:
            on_diagnostic(mismatch)
    _LOGGER.debug(
        "scanned %d lines failed=%s errors=%d", state.line, state.failed, len(state.diagnostics)
    )
    return ScanResult(tuple(state.diagnostics))


def _visit(node: Optional[grammar.LineNode], state: ScanState) -> Optional[TypeMismatch]:
    if isinstance(node, grammar.VariableDeclaration):
        return _check_declaration(node)
    if isinstance(node, grammar.FunctionSignature):
        state.functions.open(node)
    elif isinstance(node, grammar.BlockClose):
        state.functions.close()
    elif isinstance(node, grammar.ReturnStatement):
        return _check_return(node, state.functions.active)
    return None


def _check_declaration(decl: grammar.VariableDeclaration) -> Optional[TypeMismatch]:
    if decl.annotation.is_wildcard:
        return None
    inferred = infer_literal(decl.expression)
    if decl.annotation.matches(inferred):
        return None
    return TypeMismatch(decl.line, decl.name, str(decl.annotation), inferred, "variable")


def _check_return(
    stmt: grammar.ReturnStatement, function: Optional[grammar.FunctionSignature]
) -> Optional[TypeMismatch]:
    if function is None or function.return_annotation is None or not stmt.expression:
        return None
    inferred = infer_literal(stmt.expression)
    if function.return_annotation.matches(inferred):
        return None
    return TypeMismatch(
        stmt.line, function.name, str(function.return_annotation), inferred, "return"
    )
