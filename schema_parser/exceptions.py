"""
Custom exceptions for the Schema Parser.

Error philosophy:
  - InvalidRootError, SchemaNotFoundError, EmptyResultError → CAPTURED:
    SchemaParser.parse() stores them as the session error and logs them.
    Rendering in that state shows the error instead of data.
  - DocumentLoadError → FAIL HARD: raised by the document loader when no
    parser backend can build a DOM, before any session exists.
"""

from typing import Optional


class SchemaParserError(Exception):
    """Base exception for all Schema Parser errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> dict:
        """Convert to a JSON-friendly error record."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details
        }


# --- Captured by SchemaParser.parse() ---

class InvalidRootError(SchemaParserError):
    """Raised when the scan root is not a parsed HTML element."""
    pass


class SchemaNotFoundError(SchemaParserError):
    """Raised when no element's itemtype ends with the configured schema name."""

    def __init__(self, schema_name: str, details: Optional[dict] = None):
        super().__init__(
            f"The schema type {schema_name} was not found in this page",
            details
        )
        self.schema_name = schema_name


class EmptyResultError(SchemaParserError):
    """Raised when schema roots were found but none yielded any property."""
    pass


# --- Raised to the caller ---

class DocumentLoadError(SchemaParserError):
    """Raised when the HTML cannot be turned into a document tree."""
    pass
