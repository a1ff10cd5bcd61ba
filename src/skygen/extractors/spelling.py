"""Canonical spelling of Go field types from tree-sitter nodes."""

from __future__ import annotations

from tree_sitter import Node

from ..errors import UnsupportedTypeError

# Predeclared aliases rewritten to the type they stand for.
_ALIASES: dict[str, str] = {
    "byte": "uint8",
}

_IDENTIFIERS = frozenset({"type_identifier", "identifier", "field_identifier", "package_identifier"})
_LITERALS = frozenset({"int_literal", "rune_literal", "imaginary_literal", "float_literal"})


def _text(node: Node) -> str:
    return node.text.decode("utf-8")


def spell_type(node: Node) -> str:
    """Return the canonical spelling of the type expression *node*.

    Handles pointers, qualified names, identifiers, arrays and slices.
    ``byte`` is spelled ``uint8``.  Any other shape raises
    :class:`UnsupportedTypeError`.
    """
    kind = node.type
    if kind == "pointer_type":
        return "*" + spell_type(node.named_children[0])
    if kind == "qualified_type":
        package = node.child_by_field_name("package")
        name = node.child_by_field_name("name")
        return spell_type(package) + "." + _text(name)
    if kind == "selector_expression":
        # pkg.Const as an array length.
        operand = node.child_by_field_name("operand")
        field = node.child_by_field_name("field")
        return spell_type(operand) + "." + _text(field)
    if kind in _IDENTIFIERS:
        name = _text(node)
        return _ALIASES.get(name, name)
    if kind == "array_type":
        length = node.child_by_field_name("length")
        element = node.child_by_field_name("element")
        return "[" + spell_type(length) + "]" + spell_type(element)
    if kind == "slice_type":
        return "[]" + spell_type(node.child_by_field_name("element"))
    if kind in _LITERALS:
        return _text(node)
    raise UnsupportedTypeError(kind, _text(node))
