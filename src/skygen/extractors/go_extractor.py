"""Go extractor -- finds ``sky:``-marked structs in a Go source file.

A struct is picked up when its doc comment contains ``sky:<store>``::

    // User is a row of the users table. sky:users
    type User struct {
        ID   string `sky:"id,pk"`
        Name string `sky:"name"`
    }

Tagged fields become :class:`~skygen.models.Field` records.  Any tag that
cannot be honoured aborts extraction of the whole file.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from ..errors import GoSyntaxError, StructValidationError, UnsupportedSyntaxError
from ..models import Field, Struct
from .spelling import spell_type
from .tags import IGNORE, TAG_KEY, lookup_tag, parse_field_tag, unquote

logger = logging.getLogger(__name__)

MARKER_RE = re.compile(r"sky:([0-9A-Za-z_]+)")

_TYPE_SPECS = ("type_spec", "type_alias")


# --------------------------------------------------------------------------
# Grammar
# --------------------------------------------------------------------------

# Cache loaded grammars.
_grammar_cache: dict[str, Language] = {}


def _get_grammar() -> Language:
    if "go" not in _grammar_cache:
        _grammar_cache["go"] = Language(tree_sitter_go.language())
    return _grammar_cache["go"]


def _text(node: Node) -> str:
    return node.text.decode("utf-8")


def _first_error(node: Node) -> Node | None:
    """Depth-first search for the first ERROR or MISSING node."""
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return node


def _check_syntax(path: Path, root: Node) -> None:
    bad = _first_error(root)
    if bad is not None:
        row, col = bad.start_point
        if bad.is_missing:
            message = f"missing {bad.type}"
        else:
            snippet = _text(bad).split("\n", 1)[0][:40]
            message = f"unexpected {snippet!r}"
        raise GoSyntaxError(path, row + 1, col + 1, message)
    if not any(child.type == "package_clause" for child in root.named_children):
        raise GoSyntaxError(path, 1, 1, "expected 'package'")


# --------------------------------------------------------------------------
# Doc comments
# --------------------------------------------------------------------------

def doc_comment(node: Node) -> list[Node]:
    """Return the comment group directly above *node*, oldest first.

    The group must end on the line right before *node*, with no blank lines
    between its comments.  A comment sharing a line with preceding code
    belongs to that code and never starts a doc group.
    """
    group: list[Node] = []
    below = node.start_point[0]
    sibling = node.prev_sibling
    while sibling is not None and sibling.type == "comment":
        end_row = sibling.end_point[0]
        if group:
            if end_row + 1 < below:
                break
        elif end_row + 1 != below:
            break
        group.append(sibling)
        below = sibling.start_point[0]
        sibling = sibling.prev_sibling

    if group and sibling is not None:
        # Statement terminators ("\n") end on the following line.
        code_row = sibling.end_point[0] if sibling.is_named else sibling.start_point[0]
        group = [c for c in group if c.start_point[0] > code_row]
    group.reverse()
    return group


def comment_text(group: list[Node]) -> str:
    """Join raw comment texts, markers included."""
    return " ".join(_text(c) for c in group)


# --------------------------------------------------------------------------
# Field extraction
# --------------------------------------------------------------------------

def _tag_literal(node: Node) -> str | None:
    """Return the string value of a struct tag literal."""
    raw = _text(node)
    if node.type == "raw_string_literal":
        return raw[1:-1]
    return unquote(raw)


def _embedded_spelling(decl: Node, type_node: Node) -> str:
    star = "*" if decl.children and decl.children[0].type == "*" else ""
    return star + _text(type_node)


def extract_fields(type_name: str, struct_node: Node) -> tuple[list[Field], int]:
    """Build the mapped fields of the struct *type_name*.

    Returns ``(fields, pk_index)`` where *pk_index* is ``-1`` when no field
    is tagged ``pk``.  Raises :class:`StructValidationError` for tags that
    break the mapping rules.
    """
    fields: list[Field] = []
    pk_index = -1

    body = next(
        (c for c in struct_node.named_children if c.type == "field_declaration_list"),
        None,
    )
    declarations = [] if body is None else [
        c for c in body.named_children if c.type == "field_declaration"
    ]

    for decl in declarations:
        tag_node = decl.child_by_field_name("tag")
        if tag_node is None:
            continue
        names = [_text(n) for n in decl.children_by_field_name("name")]
        type_node = decl.child_by_field_name("type")

        value = _tag_literal(tag_node)
        if value is None:
            raise StructValidationError(
                type_name, names[0] if names else None,
                f"has field with malformed tag literal {_text(tag_node)}",
            )
        tag = lookup_tag(value, TAG_KEY)
        if not tag or tag == IGNORE:
            continue

        if not names:
            embedded = _embedded_spelling(decl, type_node)
            raise StructValidationError(
                type_name, embedded,
                f"has anonymous field {embedded} with 'sky:' tag",
            )
        if len(names) != 1:
            raise UnsupportedSyntaxError(
                f"{type_name} declares {len(names)} fields ({', '.join(names)}) "
                "with a single 'sky:' tag"
            )
        name = names[0]
        if not name[0].isupper():
            raise StructValidationError(
                type_name, name,
                f"has non-exported field {name} with 'sky:' tag",
            )

        column, is_pk = parse_field_tag(tag)
        if not column:
            raise StructValidationError(
                type_name, name,
                f"has field {name} with invalid 'sky:' tag value {tag!r}",
            )

        typ = spell_type(type_node)
        if is_pk:
            if typ.startswith("*"):
                raise StructValidationError(
                    type_name, name,
                    f"has pointer field {name} with 'pk' label in 'sky:' tag",
                )
            if typ.startswith("["):
                raise StructValidationError(
                    type_name, name,
                    f"has slice or array field {name} with 'pk' label in 'sky:' tag",
                )
            if pk_index >= 0:
                first = fields[pk_index].name
                raise StructValidationError(
                    type_name, name,
                    f"has field {name} with duplicate 'pk' label in 'sky:' tag "
                    f"(first used by {first})",
                    other_field=first,
                )
            pk_index = len(fields)

        fields.append(Field(name=name, type=typ, column=column, is_pk=is_pk))

    _check_fields(type_name, fields)
    return fields, pk_index


def _check_fields(type_name: str, fields: list[Field]) -> None:
    if not fields:
        raise StructValidationError(
            type_name, None, "has no mapped fields (no fields with 'sky:' tag)",
        )
    columns: dict[str, str] = {}
    for f in fields:
        if f.column in columns:
            other = columns[f.column]
            raise StructValidationError(
                type_name, f.name,
                f"has field {f.name} with 'sky:' tag with duplicate column name "
                f"{f.column} (used by {other})",
                other_field=other,
            )
        columns[f.column] = f.name


# --------------------------------------------------------------------------
# Extractor class
# --------------------------------------------------------------------------

class GoStructExtractor:
    """Extract ``sky:``-marked structs from Go source files."""

    def extract_file(self, path: Path | str) -> list[Struct]:
        path = Path(path)
        source = path.read_bytes()
        structs = self.extract_source(source, path)
        logger.info("Extracted %d struct(s) from %s", len(structs), path)
        return structs

    def extract_source(self, source: bytes, path: Path | str = "<source>") -> list[Struct]:
        """Extract structs from Go *source*; *path* is only used in errors."""
        tree = Parser(_get_grammar()).parse(source)
        root = tree.root_node
        _check_syntax(Path(path), root)

        structs: list[Struct] = []
        for decl in root.named_children:
            if decl.type != "type_declaration":
                continue
            specs = [c for c in decl.named_children if c.type in _TYPE_SPECS]
            for spec in specs:
                struct = self._process_spec(decl, spec, len(specs))
                if struct is not None:
                    structs.append(struct)
        return structs

    def _process_spec(self, decl: Node, spec: Node, spec_count: int) -> Struct | None:
        name = _text(spec.child_by_field_name("name"))
        if spec.type == "type_alias":
            logger.debug("Skipping %s: type alias", name)
            return None

        doc = doc_comment(spec)
        if not doc and spec_count == 1:
            doc = doc_comment(decl)
        if not doc:
            logger.debug("Skipping %s: no doc comment", name)
            return None

        match = MARKER_RE.search(comment_text(doc))
        if match is None:
            logger.debug("Skipping %s: no sky: marker", name)
            return None
        store_name = match.group(1)

        type_node = spec.child_by_field_name("type")
        if type_node is None or type_node.type != "struct_type":
            logger.debug("Skipping %s: not a struct", name)
            return None
        if type_node.has_error:
            logger.debug("Skipping %s: incomplete field list", name)
            return None

        fields, pk_index = extract_fields(name, type_node)
        logger.debug(
            "Extracted %s -> %s: %d field(s), pk_index=%d",
            name, store_name, len(fields), pk_index,
        )
        return Struct(type=name, store_name=store_name, fields=tuple(fields), pk_index=pk_index)


def extract_file(path: Path | str) -> list[Struct]:
    """Return the marked structs of the Go file at *path*, in file order."""
    return GoStructExtractor().extract_file(path)
