"""
Schema Parser

Extracts microdata (itemprop/itemtype annotations) of one schema type from an
HTML document and renders it as HTML tables or JSON.
- Extractor: recursive itemprop tree → nested Group/Leaf/Repeated data
- Renderer:  parsed data → table, textarea (JSON) or error elements
- SchemaParser: session owning the parsed result set and the output container

Public API surface:
  Session            — SchemaParser, ParseState, parse_html, parse_html_file
  Building blocks    — TreeExtractor, Renderer, load_document, load_document_file
  Data models        — ExtractedValue, Leaf, Group, Repeated, ParserConfig
  Error types        — SchemaParserError and its subclasses
"""

# --- Session ---
from .main import SchemaParser, ParseState, parse_html, parse_html_file

# --- Building blocks ---
from .extractor import TreeExtractor, find_schema_roots, find_annotated_descendants
from .renderer import Renderer
from .document import load_document, load_document_file, detect_charset_from_bytes

# --- Data models ---
from .schemas import ExtractedValue, Leaf, Group, Repeated, ParserConfig

# --- Exceptions ---
from .exceptions import (
    SchemaParserError,
    InvalidRootError,
    SchemaNotFoundError,
    EmptyResultError,
    DocumentLoadError,
)

__version__ = "0.1.0"
__all__ = [
    "SchemaParser",
    "ParseState",
    "parse_html",
    "parse_html_file",
    "TreeExtractor",
    "find_schema_roots",
    "find_annotated_descendants",
    "Renderer",
    "load_document",
    "load_document_file",
    "detect_charset_from_bytes",
    "ExtractedValue",
    "Leaf",
    "Group",
    "Repeated",
    "ParserConfig",
    "SchemaParserError",
    "InvalidRootError",
    "SchemaNotFoundError",
    "EmptyResultError",
    "DocumentLoadError",
]
