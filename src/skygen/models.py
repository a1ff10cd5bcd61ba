"""Pydantic models for the extracted struct metadata."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator

from .errors import NoPrimaryKeyError


_QUOTE_ESCAPES: dict[str, str] = {
    "\a": "\\a", "\b": "\\b", "\f": "\\f", "\n": "\\n", "\r": "\\r", "\t": "\\t",
    "\v": "\\v", "\\": "\\\\", '"': '\\"',
}


def go_quote(value: str) -> str:
    """Quote *value* the way Go's ``strconv.Quote`` (and ``%q``) does."""
    out = ['"']
    for ch in value:
        cp = ord(ch)
        if ch in _QUOTE_ESCAPES:
            out.append(_QUOTE_ESCAPES[ch])
        elif 0xDC80 <= cp <= 0xDCFF:
            # Invalid UTF-8 byte carried as a surrogate escape.
            out.append(f"\\x{cp - 0xDC00:02x}")
        elif ch == " " or ch.isprintable():
            out.append(ch)
        elif cp < 0x80:
            out.append(f"\\x{cp:02x}")
        elif cp < 0x10000:
            out.append(f"\\u{cp:04x}")
        else:
            out.append(f"\\U{cp:08x}")
    out.append('"')
    return "".join(out)


# ---------------------------------------------------------------------------
# Field / Struct
# ---------------------------------------------------------------------------

class Field(BaseModel):
    """One tagged member of a marked struct."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str  # canonical spelling, e.g. "*string", "[16]uint8"
    column: str
    is_pk: bool = False

    def go_string(self) -> str:
        return (
            f"{{Name: {go_quote(self.name)}, Type: {go_quote(self.type)}, "
            f"Column: {go_quote(self.column)}}}"
        )


class Struct(BaseModel):
    """A marked Go struct and the store it maps to.

    ``fields`` keeps declaration order; generated code relies on it.
    ``pk_index`` is ``-1`` for structs without a primary key (views).
    """

    model_config = ConfigDict(frozen=True)

    type: str
    store_name: str
    fields: tuple[Field, ...]
    pk_index: int = -1

    @model_validator(mode="after")
    def _check_invariants(self) -> "Struct":
        if not self.fields:
            raise ValueError(f"{self.type} has no mapped fields")

        pk_indexes = [i for i, f in enumerate(self.fields) if f.is_pk]
        if len(pk_indexes) > 1:
            raise ValueError(f"{self.type} has more than one primary key field")
        expected = pk_indexes[0] if pk_indexes else -1
        if self.pk_index != expected:
            raise ValueError(
                f"{self.type} pk_index is {self.pk_index}, expected {expected}"
            )

        seen: set[str] = set()
        for f in self.fields:
            if f.column in seen:
                raise ValueError(f"{self.type} maps column {f.column!r} twice")
            seen.add(f.column)
        return self

    def has_pk(self) -> bool:
        return self.pk_index >= 0

    def pk_field(self) -> Field:
        """Return the primary key field; views have none."""
        if not self.has_pk():
            raise NoPrimaryKeyError(f"skygen: {self.type} has no pk field")
        return self.fields[self.pk_index]

    def go_string(self) -> str:
        """Render the struct as a ``gen.Struct`` Go composite literal."""
        lines = [
            "gen.Struct{",
            f"\tType: {go_quote(self.type)},",
            f"\tSQLName: {go_quote(self.store_name)},",
            "\tFields: []gen.Field{",
        ]
        lines.extend(f"\t\t{f.go_string()}," for f in self.fields)
        lines.append("\t},")
        lines.append(f"\tPKFieldIndex: {self.pk_index},")
        lines.append("}")
        return "\n".join(lines)
