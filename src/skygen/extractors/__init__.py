"""Extraction engine -- turns marked Go structs into skygen models."""

from __future__ import annotations

from .go_extractor import GoStructExtractor, extract_fields, extract_file
from .spelling import spell_type
from .tags import lookup_tag, parse_field_tag

__all__ = [
    "GoStructExtractor",
    "extract_fields",
    "extract_file",
    "lookup_tag",
    "parse_field_tag",
    "spell_type",
]
