"""Exception types raised by skygen."""

from __future__ import annotations

from pathlib import Path


class SkygenError(Exception):
    """Base class for every error skygen raises on purpose."""


class ConfigError(SkygenError):
    """``[tool.skygen]`` configuration could not be loaded."""


class GoSyntaxError(SkygenError):
    """The Go source file could not be parsed."""

    def __init__(self, path: Path | str, line: int, column: int, message: str = "syntax error") -> None:
        self.path = str(path)
        self.line = line
        self.column = column
        self.message = message
        super().__init__(f"{self.path}:{line}:{column}: {message}")


class StructValidationError(SkygenError):
    """A marked struct carries tags that cannot be turned into a model.

    ``field_name`` is ``None`` for struct-wide problems (no mapped fields).
    ``other_field`` names the earlier field involved in a duplicate.
    """

    def __init__(
        self,
        type_name: str,
        field_name: str | None,
        reason: str,
        *,
        other_field: str | None = None,
    ) -> None:
        self.type_name = type_name
        self.field_name = field_name
        self.reason = reason
        self.other_field = other_field
        super().__init__(f"skygen: {type_name} {reason}, it is not allowed")


class UnsupportedSyntaxError(SkygenError):
    """Input uses a Go construct the extractor does not handle.

    This signals a gap in skygen, not a mistake in the user's tags.
    """

    def __init__(self, message: str) -> None:
        super().__init__(f"skygen: {message}. Please report this bug.")


class UnsupportedTypeError(UnsupportedSyntaxError):
    """A field type expression has a shape with no canonical spelling."""

    def __init__(self, kind: str, text: str) -> None:
        self.kind = kind
        self.text = text
        super().__init__(f"spell_type: unhandled '{text}' ({kind})")


class NoPrimaryKeyError(SkygenError, LookupError):
    """``Struct.pk_field()`` was called on a struct without a primary key."""
