"""Primitive type names, annotations, and literal type inference.

Inference here is purely syntactic: an expression is classified by its surface
form alone.  Nothing flows through operators, calls, or variable references;
anything that is not an obvious string, number, or boolean literal is ``any``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .lexer import QUOTES

__all__ = [
    "TypeAnnotation",
    "TypeName",
    "infer_literal",
]

_NUMERAL = re.compile(r"[0-9]+(?:\.[0-9]+)?")


class TypeName(str, Enum):
    """Closed set of primitive types understood by the checker."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ANY = "any"

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True, frozen=True)
class TypeAnnotation:
    """``|``-separated set of allowed type names, kept in source order.

    Names are stored verbatim so an annotation such as ``int`` survives parsing
    and is reported back to the user; it simply never matches an inferred type.
    """

    names: tuple[str, ...]

    @property
    def is_wildcard(self) -> bool:
        return self.names == (TypeName.ANY.value,)

    def matches(self, inferred: TypeName) -> bool:
        if self.is_wildcard:
            return True
        return inferred.value in self.names

    def __str__(self) -> str:
        return "|".join(self.names)


def infer_literal(expression: str) -> TypeName:
    """Classify ``expression`` into one of the primitive :class:`TypeName` values."""

    text = expression.strip()
    if text[:1] in QUOTES:
        return TypeName.STRING
    if _NUMERAL.fullmatch(text):
        return TypeName.NUMBER
    if text in {"true", "false"}:
        return TypeName.BOOLEAN
    return TypeName.ANY
