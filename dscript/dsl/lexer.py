"""Single-line tokenizer for the dscript dialect.

The checker only ever looks at one physical line at a time, so the lexer works
on a line rather than a whole file.  It is deliberately forgiving: characters it
does not understand become ``OTHER`` tokens and an unterminated string simply
runs to the end of the line.  Rejecting input is the grammar's job, never the
lexer's.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["KEYWORDS", "QUOTES", "Token", "Tokenizer", "tokenize_line"]


@dataclass(slots=True, frozen=True)
class Token:
    """Single lexical token.

    ``start``/``end`` are character offsets into the line, which lets the
    grammar recover the raw text of an expression that follows a token.
    """

    kind: str
    value: str
    line: int
    column: int
    start: int
    end: int


KEYWORDS = {
    "let",
    "const",
    "mut",
    "fn",
    "return",
}

QUOTES = {'"', "'", "`"}

_PUNCTUATION = {
    "(": "LPAREN",
    ")": "RPAREN",
    "{": "LBRACE",
    "}": "RBRACE",
    ":": "COLON",
    ",": "COMMA",
    "|": "PIPE",
    ";": "SEMICOLON",
}

_OPERATOR_CHARS = set("=<>!+-*/%&^~?.")

_DIGITS = set("0123456789")


class Tokenizer:
    """Hand-written scanner over a single source line."""

    def __init__(self, text: str, line: int = 1) -> None:
        self.text = text
        self.line = line
        self.length = len(text)
        self.index = 0

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        while not self._eof:
            ch = self._peek()
            if ch.isspace():
                self.index += 1
                continue
            if ch.isalpha() or ch == "_" or ch == "$":
                tokens.append(self._consume_identifier())
                continue
            if ch in _DIGITS:
                tokens.append(self._consume_number())
                continue
            if ch in QUOTES:
                tokens.append(self._consume_string())
                continue
            tokens.append(self._consume_punctuation())
        tokens.append(self._make("EOF", self.index))
        return tokens

    @property
    def _eof(self) -> bool:
        return self.index >= self.length

    def _peek(self, offset: int = 0) -> str:
        if self.index + offset >= self.length:
            return "\0"
        return self.text[self.index + offset]

    def _make(self, kind: str, start: int) -> Token:
        return Token(
            kind,
            self.text[start : self.index],
            self.line,
            start + 1,
            start,
            self.index,
        )

    def _consume_identifier(self) -> Token:
        start = self.index
        self.index += 1
        while self._peek().isalnum() or self._peek() in {"_", "$"}:
            self.index += 1
        value = self.text[start : self.index]
        return self._make(value if value in KEYWORDS else "IDENT", start)

    def _consume_number(self) -> Token:
        start = self.index
        while self._peek() in _DIGITS:
            self.index += 1
        if self._peek() == "." and self._peek(1) in _DIGITS:
            self.index += 1
            while self._peek() in _DIGITS:
                self.index += 1
        return self._make("NUMBER", start)

    def _consume_string(self) -> Token:
        start = self.index
        quote = self._peek()
        self.index += 1
        while not self._eof:
            ch = self._peek()
            self.index += 1
            if ch == "\\":
                self.index = min(self.index + 1, self.length)
                continue
            if ch == quote:
                break
        return self._make("STRING", start)

    def _consume_punctuation(self) -> Token:
        start = self.index
        ch = self._peek()
        if ch in _PUNCTUATION:
            self.index += 1
            return self._make(_PUNCTUATION[ch], start)
        if ch == "=" and self._peek(1) not in {"=", ">"}:
            self.index += 1
            return self._make("ASSIGN", start)
        if ch in _OPERATOR_CHARS:
            while self._peek() in _OPERATOR_CHARS:
                self.index += 1
            return self._make("OP", start)
        self.index += 1
        return self._make("OTHER", start)


def tokenize_line(text: str, line: int = 1) -> list[Token]:
    """Return the tokens of ``text`` terminated by an ``EOF`` token."""

    return Tokenizer(text, line).tokenize()
