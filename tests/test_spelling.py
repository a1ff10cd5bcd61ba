"""Tests for canonical Go type spelling."""

from __future__ import annotations

import pytest
import tree_sitter_go
from tree_sitter import Language, Parser

from skygen.errors import UnsupportedSyntaxError, UnsupportedTypeError
from skygen.extractors.spelling import spell_type


def _field_type(type_src: str):
    """Parse ``type T struct { F <type_src> }`` and return the field's type node."""
    source = f"package p\n\ntype T struct {{\n\tF {type_src}\n}}\n".encode("utf-8")
    tree = Parser(Language(tree_sitter_go.language())).parse(source)
    assert not tree.root_node.has_error
    decl = next(c for c in tree.root_node.named_children if c.type == "type_declaration")
    spec = next(c for c in decl.named_children if c.type == "type_spec")
    body = spec.child_by_field_name("type").named_children[0]
    field = next(c for c in body.named_children if c.type == "field_declaration")
    return field.child_by_field_name("type")


@pytest.mark.parametrize(
    ("type_src", "expected"),
    [
        ("string", "string"),
        ("int64", "int64"),
        ("byte", "uint8"),
        ("uint8", "uint8"),
        ("*string", "*string"),
        ("**int", "**int"),
        ("time.Time", "time.Time"),
        ("*time.Time", "*time.Time"),
        ("[]byte", "[]uint8"),
        ("[]*Item", "[]*Item"),
        ("[16]byte", "[16]uint8"),
        ("[0x10]int", "[0x10]int"),
        ("[Size]int", "[Size]int"),
        ("[2][3]float64", "[2][3]float64"),
    ],
)
def test_spelling(type_src: str, expected: str):
    assert spell_type(_field_type(type_src)) == expected


def test_byte_only_rewritten_as_whole_identifier():
    assert spell_type(_field_type("bytes.Buffer")) == "bytes.Buffer"


@pytest.mark.parametrize(
    "type_src",
    ["map[string]int", "chan int", "func()", "interface{}", "struct{ X int }"],
)
def test_unsupported_shapes(type_src: str):
    with pytest.raises(UnsupportedTypeError) as excinfo:
        spell_type(_field_type(type_src))
    assert isinstance(excinfo.value, UnsupportedSyntaxError)
    assert "Please report this bug" in str(excinfo.value)
