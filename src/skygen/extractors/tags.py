"""Go struct tag handling.

Two layers: :func:`lookup_tag` pulls one key's value out of a raw Go struct
tag (``json:"id" sky:"id,pk"``), and :func:`parse_field_tag` interprets the
``sky`` value itself.
"""

from __future__ import annotations

TAG_KEY = "sky"
IGNORE = "-"
PK_OPTION = "pk"

_SIMPLE_ESCAPES: dict[str, int] = {
    "a": 0x07, "b": 0x08, "f": 0x0C, "n": 0x0A, "r": 0x0D, "t": 0x09, "v": 0x0B,
    "\\": 0x5C, '"': 0x22,
}
_HEX_WIDTH = {"x": 2, "u": 4, "U": 8}
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_OCT_DIGITS = frozenset("01234567")


def unquote(quoted: str) -> str | None:
    """Decode a double-quoted Go string literal, or ``None`` if malformed.

    Follows ``strconv.Unquote``.  ``\\x`` and octal escapes produce raw
    bytes; bytes that are not valid UTF-8 come back as surrogate escapes.
    """
    if len(quoted) < 2 or quoted[0] != '"' or quoted[-1] != '"':
        return None
    body = quoted[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == '"' or ch == "\n":
            return None
        if ch != "\\":
            out += ch.encode("utf-8", "surrogateescape")
            i += 1
            continue
        if i + 1 >= len(body):
            return None
        esc = body[i + 1]
        if esc in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[esc])
            i += 2
        elif esc in _HEX_WIDTH:
            width = _HEX_WIDTH[esc]
            digits = body[i + 2:i + 2 + width]
            if len(digits) != width or not set(digits) <= _HEX_DIGITS:
                return None
            value = int(digits, 16)
            if esc == "x":
                out.append(value)
            elif value > 0x10FFFF or 0xD800 <= value < 0xE000:
                return None
            else:
                out += chr(value).encode("utf-8")
            i += 2 + width
        elif esc in _OCT_DIGITS:
            digits = body[i + 1:i + 4]
            if len(digits) != 3 or not set(digits) <= _OCT_DIGITS:
                return None
            value = int(digits, 8)
            if value > 0xFF:
                return None
            out.append(value)
            i += 4
        else:
            return None
    return out.decode("utf-8", "surrogateescape")
def lookup_tag(tag: str, key: str) -> str | None:
    """Return the value stored under *key* in the struct tag *tag*.

    Follows ``reflect.StructTag.Lookup``: the tag is a space separated list
    of ``key:"value"`` pairs.  Scanning stops at the first malformed pair, so
    keys after it are never found.  Returns ``None`` when *key* is absent.
    """
    while tag:
        # Skip leading space.
        i = 0
        while i < len(tag) and tag[i] == " ":
            i += 1
        tag = tag[i:]
        if not tag:
            break

        # Scan to colon.  A space, a quote or a control character is a
        # syntax error.
        i = 0
        while (
            i < len(tag)
            and tag[i] > " "
            and tag[i] != ":"
            and tag[i] != '"'
            and tag[i] != "\x7f"
        ):
            i += 1
        if i == 0 or i + 1 >= len(tag) or tag[i] != ":" or tag[i + 1] != '"':
            break
        name = tag[:i]
        tag = tag[i + 1:]

        # Scan quoted string to find value.
        i = 1
        while i < len(tag) and tag[i] != '"':
            if tag[i] == "\\":
                i += 1
            i += 1
        if i >= len(tag):
            break
        qvalue = tag[: i + 1]
        tag = tag[i + 1:]

        if name == key:
            return unquote(qvalue)
    return None


def parse_field_tag(raw: str) -> tuple[str, bool]:
    """Parse a ``sky`` tag value into ``(column, is_pk)``.

    Accepts ``column`` or ``column,pk``.  Anything else yields an empty
    column, which callers must treat as invalid.
    """
    parts = raw.split(",")
    if not parts or len(parts) > 2:
        return "", False
    if len(parts) == 2 and parts[1] != PK_OPTION:
        return "", False
    return parts[0], len(parts) == 2
