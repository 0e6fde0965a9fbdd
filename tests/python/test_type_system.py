"""Tests for literal inference and annotation matching."""

import pytest

from dscript.dsl.type_system import TypeAnnotation, TypeName, infer_literal


@pytest.mark.parametrize(
    "expression, expected",
    [
        ('"hello"', TypeName.STRING),
        ("'c'", TypeName.STRING),
        ("`x ${y}`", TypeName.STRING),
        ('"a" + 1', TypeName.STRING),
        ("42", TypeName.NUMBER),
        ("3.14", TypeName.NUMBER),
        ("  7  ", TypeName.NUMBER),
        ("true", TypeName.BOOLEAN),
        ("false", TypeName.BOOLEAN),
        ("-1", TypeName.ANY),
        ("1e5", TypeName.ANY),
        ("0x1F", TypeName.ANY),
        ("3.", TypeName.ANY),
        (".5", TypeName.ANY),
        ("1 + 2", TypeName.ANY),
        ("True", TypeName.ANY),
        ("someVar", TypeName.ANY),
        ("add(1, 2)", TypeName.ANY),
        ("", TypeName.ANY),
        ("\u0663", TypeName.ANY),
        ("1.\u0665", TypeName.ANY),
    ],
)
def test_infer_literal(expression, expected):
    assert infer_literal(expression) is expected


def test_infer_literal_is_deterministic():
    samples = ['"s"', "12", "true", "null", "[1, 2]"]
    assert [infer_literal(s) for s in samples] == [infer_literal(s) for s in samples]
    assert all(isinstance(infer_literal(s), TypeName) for s in samples)


def test_annotation_membership():
    annotation = TypeAnnotation(("string", "number"))
    assert annotation.matches(TypeName.STRING)
    assert annotation.matches(TypeName.NUMBER)
    assert not annotation.matches(TypeName.BOOLEAN)
    assert not annotation.matches(TypeName.ANY)
    assert str(annotation) == "string|number"


def test_any_annotation_is_a_wildcard():
    annotation = TypeAnnotation(("any",))
    assert annotation.is_wildcard
    assert all(annotation.matches(name) for name in TypeName)


def test_unknown_names_never_match():
    annotation = TypeAnnotation(("int",))
    assert not annotation.is_wildcard
    assert not any(annotation.matches(name) for name in TypeName)
