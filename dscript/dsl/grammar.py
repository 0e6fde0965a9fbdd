"""Line-oriented parser for the dscript dialect.

Each physical line is tokenised on its own and matched against the handful of
shapes the checker cares about: typed variable declarations, function
signatures, a bare closing brace, and ``return`` statements.  Every other line
classifies as ``None`` and is ignored by the checker.  There is no statement
that spans lines and no tree beyond the per-line records below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from .lexer import Token, tokenize_line
from .type_system import TypeAnnotation

__all__ = [
    "BlockClose",
    "DECLARATION_KEYWORDS",
    "FunctionSignature",
    "LineNode",
    "Parameter",
    "ReturnStatement",
    "VariableDeclaration",
    "classify_line",
]

DECLARATION_KEYWORDS = ("let", "const", "mut")


@dataclass(slots=True, frozen=True)
class VariableDeclaration:
    """``<let|const|mut> name : annotation = expression`` on a single line."""

    keyword: str
    name: str
    annotation: TypeAnnotation
    expression: str
    line: int

    @property
    def mutable(self) -> bool:
        return self.keyword == "mut"


@dataclass(slots=True, frozen=True)
class Parameter:
    name: str
    annotation: Optional[TypeAnnotation] = None


@dataclass(slots=True, frozen=True)
class FunctionSignature:
    """Header of a ``fn`` declaration and the line it started on.

    Only the header is matched; whatever follows it on the line (usually an
    opening brace) is ignored.
    """

    name: str
    parameters: tuple[Parameter, ...] = field(default_factory=tuple)
    return_annotation: Optional[TypeAnnotation] = None
    line: int = 0


@dataclass(slots=True, frozen=True)
class ReturnStatement:
    expression: str
    line: int


@dataclass(slots=True, frozen=True)
class BlockClose:
    line: int


LineNode = Union[VariableDeclaration, FunctionSignature, ReturnStatement, BlockClose]


def classify_line(text: str, line: int = 1) -> Optional[LineNode]:
    """Return the record describing ``text`` or ``None`` if no shape matches."""

    stripped = text.strip()
    if not stripped:
        return None
    if stripped == "}":
        return BlockClose(line)
    parser = _LineParser(stripped, tokenize_line(stripped, line), line)
    head = parser.peek().kind
    if head in DECLARATION_KEYWORDS:
        return parser.parse_declaration()
    if head == "fn":
        return parser.parse_function()
    if head == "return":
        return parser.parse_return()
    return None


class _NoMatch(Exception):
    """Internal signal that the line does not have the expected shape."""


class _LineParser:
    """Cursor over the tokens of one line."""

    def __init__(self, text: str, tokens: Sequence[Token], line: int) -> None:
        self.text = text
        self.tokens = tokens
        self.line = line
        self.index = 0

    def peek(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind != "EOF":
            self.index += 1
        return token

    def expect(self, kind: str) -> Token:
        token = self.peek()
        if token.kind != kind:
            raise _NoMatch(kind)
        return self.advance()

    def accept(self, kind: str) -> Optional[Token]:
        if self.peek().kind == kind:
            return self.advance()
        return None

    def rest_after(self, token: Token) -> str:
        return _strip_terminator(self.text[token.end :])

    # ------------------------------------------------------------------
    # Line shapes

    def parse_declaration(self) -> Optional[VariableDeclaration]:
        try:
            keyword = self.advance().kind
            name = self.expect("IDENT").value
            self.expect("COLON")
            annotation = self._annotation()
            assign = self.expect("ASSIGN")
        except _NoMatch:
            return None
        expression = self.rest_after(assign)
        if not expression:
            return None
        return VariableDeclaration(keyword, name, annotation, expression, self.line)

    def parse_function(self) -> Optional[FunctionSignature]:
        try:
            self.advance()
            name = self.expect("IDENT").value
            self.expect("LPAREN")
            parameters = self._parameters()
            self.expect("RPAREN")
            return_annotation = self._annotation() if self.accept("COLON") else None
        except _NoMatch:
            return None
        return FunctionSignature(name, parameters, return_annotation, self.line)

    def parse_return(self) -> ReturnStatement:
        keyword = self.advance()
        return ReturnStatement(self.rest_after(keyword), self.line)

    # ------------------------------------------------------------------
    # Fragments

    def _annotation(self) -> TypeAnnotation:
        names = [self.expect("IDENT").value]
        while self.accept("PIPE"):
            names.append(self.expect("IDENT").value)
        return TypeAnnotation(tuple(names))

    def _parameters(self) -> tuple[Parameter, ...]:
        parameters: list[Parameter] = []
        if self.peek().kind == "RPAREN":
            return ()
        while True:
            name = self.expect("IDENT").value
            annotation = self._annotation() if self.accept("COLON") else None
            parameters.append(Parameter(name, annotation))
            if not self.accept("COMMA"):
                return tuple(parameters)


def _strip_terminator(fragment: str) -> str:
    text = fragment.strip()
    if text.endswith(";"):
        text = text[:-1].rstrip()
    return text
