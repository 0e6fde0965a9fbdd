"""Tests for the line-by-line type checking scan."""

from __future__ import annotations

import pytest

from dscript.dsl import checker, grammar
from dscript.dsl.type_system import TypeName


def _messages(source: str) -> list[str]:
    return [d.message for d in checker.scan(source).diagnostics]


def test_declaration_mismatch_is_reported() -> None:
    result = checker.scan('let x : number = "hello"')
    assert not result.ok
    (mismatch,) = result.diagnostics
    assert mismatch.line == 1
    assert mismatch.subject == "x"
    assert mismatch.declared == "number"
    assert mismatch.inferred is TypeName.STRING
    assert mismatch.kind == "variable"
    assert mismatch.message == (
        "Type Error on line 1: x is declared as 'number' but assigned a 'string'"
    )


@pytest.mark.parametrize(
    "line",
    [
        "let a : number = 1",
        "const b : string = 'x'",
        "mut c : boolean = false",
        "let d : string|number = 2.5",
        "let e : any = true",
        "let f : any = whatever()",
    ],
)
def test_matching_declarations_are_accepted(line: str) -> None:
    assert checker.scan(line).ok


@pytest.mark.parametrize(
    "line, inferred",
    [
        ("let a : string = 1", "number"),
        ("const b : boolean = 'x'", "string"),
        ("mut c : number = compute()", "any"),
        ("let d : string|number = true", "boolean"),
        ("let e : int = 5", "number"),
    ],
)
def test_each_mismatching_declaration_reports_once(line: str, inferred: str) -> None:
    result = checker.scan(line)
    assert len(result.diagnostics) == 1
    assert result.diagnostics[0].inferred.value == inferred


@pytest.mark.parametrize(
    "line, subject",
    [
        ("let x : number =-5", "x"),
        ("let b : boolean =!flag", "b"),
        ("const s : string =+1", "s"),
    ],
)
def test_declaration_without_space_after_equals_is_checked(line: str, subject: str) -> None:
    result = checker.scan(line)
    assert len(result.diagnostics) == 1
    assert result.diagnostics[0].subject == subject
    assert result.diagnostics[0].inferred is TypeName.ANY


def test_every_mismatch_in_the_file_is_reported() -> None:
    source = "\n".join(
        [
            'let a : number = "1"',
            "let ok : number = 1",
            "const b : boolean = 0",
        ]
    )
    assert [d.line for d in checker.scan(source).diagnostics] == [1, 3]


def test_return_mismatch_names_the_function() -> None:
    source = 'fn greet(name: string): number {\n    return "hi"\n}'
    assert _messages(source) == [
        "Type Error on line 2: greet is declared as 'number' but returns a 'string'"
    ]


def test_return_union_annotation() -> None:
    source = "fn f(): string|boolean\nreturn true\nreturn 'x'\nreturn 3\n}"
    result = checker.scan(source)
    assert [(d.line, d.declared) for d in result.diagnostics] == [(4, "string|boolean")]


def test_function_without_return_annotation_is_not_checked() -> None:
    assert checker.scan("fn f(a, b)\nreturn 'anything'\n}").ok


def test_bare_return_is_not_checked() -> None:
    assert checker.scan("fn f(): number\nreturn\nreturn;\n}").ok


def test_return_outside_any_function_is_ignored() -> None:
    assert checker.scan('return "x"\nreturn 5').ok


def test_closing_brace_clears_the_function_context() -> None:
    source = 'fn f(): number\nreturn 1\n}\nreturn "late"'
    assert checker.scan(source).ok


def test_any_brace_line_closes_even_if_it_is_not_the_function_end() -> None:
    source = "\n".join(
        [
            "fn f(): number {",
            "  if (x) {",
            "    return 1",
            "  }",
            '  return "not checked"',
            "}",
        ]
    )
    assert checker.scan(source).ok


def test_second_function_replaces_the_first() -> None:
    source = "\n".join(
        [
            "fn outer(): number",
            "fn inner(): string",
            "return 'ok'",
            "return 1",
            "}",
        ]
    )
    (mismatch,) = checker.scan(source).diagnostics
    assert mismatch.subject == "inner"
    assert mismatch.line == 4


def test_diagnostics_are_streamed_in_order() -> None:
    seen: list[int] = []
    source = 'let a : number = "x"\nlet b : string = 1'
    result = checker.scan(source, on_diagnostic=lambda d: seen.append(d.line))
    assert seen == [1, 2]
    assert tuple(d.line for d in result.diagnostics) == (1, 2)


def test_tracker_state_transitions() -> None:
    tracker = checker.FunctionContextTracker()
    assert tracker.active is None
    first = grammar.FunctionSignature("a", line=1)
    second = grammar.FunctionSignature("b", line=2)
    tracker.open(first)
    assert tracker.active is first
    tracker.open(second)
    assert tracker.active is second
    tracker.close()
    assert tracker.active is None


def test_scan_state_failure_flag() -> None:
    state = checker.ScanState()
    assert not state.failed
    state.diagnostics.append(
        checker.TypeMismatch(1, "x", "number", TypeName.STRING)
    )
    assert state.failed


def test_windows_line_endings_keep_line_numbers() -> None:
    source = "let a : number = 1\r\nlet b : number = 'x'\r\n"
    (mismatch,) = checker.scan(source).diagnostics
    assert mismatch.line == 2
