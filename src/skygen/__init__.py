"""skygen - table metadata extraction for sky:-marked Go structs."""

from .errors import (  # noqa: F401 -- public re-exports
    ConfigError,
    GoSyntaxError,
    NoPrimaryKeyError,
    SkygenError,
    StructValidationError,
    UnsupportedSyntaxError,
    UnsupportedTypeError,
)
from .extractors import GoStructExtractor, extract_file
from .models import Field, Struct

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "Field",
    "GoStructExtractor",
    "GoSyntaxError",
    "NoPrimaryKeyError",
    "SkygenError",
    "Struct",
    "StructValidationError",
    "UnsupportedSyntaxError",
    "UnsupportedTypeError",
    "extract_file",
]
