"""
Main session object for the Schema Parser.

SchemaParser ties the pieces together for one document:
  find schema roots → TreeExtractor per root → parsed result set → Renderer

State machine:
  UNPARSED ──parse()──▶ PARSED_OK | PARSED_ERROR
  parse() from any state clears previous results and re-scans.
  render_table()/render_json() parse first when UNPARSED, and show the error
  instead of data when PARSED_ERROR.

parse() never raises: InvalidRootError, SchemaNotFoundError and
EmptyResultError are stored on the session and logged.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

from .document import load_document, load_document_file
from .extractor import TreeExtractor, find_schema_roots
from .renderer import Renderer, to_json
from .schemas import Group, ParserConfig
from .exceptions import (
    SchemaParserError,
    InvalidRootError,
    SchemaNotFoundError,
    EmptyResultError,
)
from .logger import get_module_logger, setup_logger

logger = get_module_logger("main")


class ParseState(Enum):
    UNPARSED = "unparsed"
    PARSED_OK = "parsed_ok"
    PARSED_ERROR = "parsed_error"


class SchemaParser:
    """
    Parses microdata of one schema type out of a document and renders it
    into a container appended to that document.
    """

    def __init__(
        self,
        document: Union[BeautifulSoup, str, bytes],
        config: Optional[ParserConfig] = None,
        log_level: int = None,
        **options
    ):
        """
        Args:
            document: Parsed document, or HTML text/bytes to parse
            config: Session options; keyword options build one when omitted
            log_level: Reconfigure the package logger level
            **options: schema_name, container_id, class_namespace
        """
        if log_level is not None:
            setup_logger(level=log_level)

        if not isinstance(document, BeautifulSoup):
            document = load_document(document)

        self.document = document
        self.config = config or ParserConfig(**options)
        self.extractor = TreeExtractor()
        self.renderer = Renderer(document, self.config)

        self.parsed_data: list[Group] = []
        self.error: Optional[SchemaParserError] = None
        self.state = ParseState.UNPARSED

        self._container: Optional[Tag] = None

    @classmethod
    def from_file(cls, file_path: Union[str, Path], config: Optional[ParserConfig] = None,
                  **options) -> "SchemaParser":
        return cls(load_document_file(file_path), config=config, **options)

    @property
    def schema_name(self) -> str:
        return self.config.schema_name

    @property
    def has_data(self) -> bool:
        return len(self.parsed_data) > 0

    @property
    def is_error(self) -> bool:
        return self.state is ParseState.PARSED_ERROR

    # --- Parsing ---

    def parse(self, root: Optional[Tag] = None) -> list[Group]:
        """
        Scan root (default: the whole document) for schema roots and extract
        each of them.

        Returns:
            The parsed result set (empty on failure; see self.error)
        """
        self.parsed_data = []
        self.error = None

        scan_root = self.document if root is None else root
        logger.info(f"Parsing {self.schema_name} schema")

        try:
            results = self._scan(scan_root)
        except (InvalidRootError, SchemaNotFoundError, EmptyResultError) as e:
            self.error = e
            self.state = ParseState.PARSED_ERROR
            logger.error(f"Error at parsing the page schema html: {e}")
            return self.parsed_data

        self.parsed_data = results
        self.state = ParseState.PARSED_OK
        logger.info(f"Complete: {len(results)} {self.schema_name} item(s)")
        return self.parsed_data

    def _scan(self, scan_root) -> list[Group]:
        if not isinstance(scan_root, Tag):
            raise InvalidRootError(
                f"{scan_root!r} is not a valid node",
                details={"type": type(scan_root).__name__}
            )

        schema_roots = find_schema_roots(scan_root, self.schema_name)
        if not schema_roots:
            raise SchemaNotFoundError(self.schema_name)

        # Fresh Group per root: no data is shared between roots
        results = [self.extractor.extract(el) for el in schema_roots]

        if not any(len(group) for group in results):
            raise EmptyResultError(
                "Invalid schema types. Cannot parse.",
                details={"schema_roots": len(schema_roots)}
            )
        return results

    def to_data(self) -> list[dict]:
        """Parsed result set as plain JSON-compatible data."""
        return [group.to_data() for group in self.parsed_data]

    def to_json(self, **dumps_kwargs) -> str:
        return to_json(self.parsed_data, **dumps_kwargs)

    # --- Container ---

    @property
    def container(self) -> Tag:
        """The owned output div, appended to the document when missing."""
        if self._container is None or self._container.parent is None:
            self._container = self.renderer.create_container()
            host = self.document.body or self.document
            host.append(self._container)
            logger.debug(f"Appended container #{self.config.container_id} to <{host.name}>")
        return self._container

    def clear_container(self) -> None:
        """Remove everything inside the container."""
        self.container.clear()

    def remove_container(self) -> None:
        """Detach the container from the document; it is recreated on next render."""
        if self._container is not None:
            self._container.extract()
            self._container = None

    # --- Rendering ---

    def _ensure_parsed(self) -> bool:
        """Parse if needed; False (after showing the error) when in error state."""
        if self.state is ParseState.UNPARSED:
            self.parse()
        if self.is_error:
            self.render_error()
            return False
        return True

    def render_error(self, message=None) -> Tag:
        """Show message (default: the session error) in the container."""
        self.clear_container()
        span = self.renderer.render_error(message or self.error)
        self.container.append(span)
        return span

    def render_table(self) -> Tag:
        """Render one table per parsed schema root into the container."""
        if not self._ensure_parsed():
            return self.container

        self.clear_container()
        for table in self.renderer.render_tables(self.parsed_data):
            self.container.append(table)
        return self.container

    def render_json(self) -> Tag:
        """Render the parsed result set as JSON inside a textarea."""
        if not self._ensure_parsed():
            return self.container

        self.clear_container()
        self.container.append(self.renderer.render_json(self.parsed_data))
        return self.container


def parse_html(html: Union[str, bytes], schema_name: str = "Product") -> list[dict]:
    """
    Convenience function: parse HTML and return plain data.

    Raises the captured error instead of returning an empty list.
    """
    parser = SchemaParser(html, schema_name=schema_name)
    parser.parse()
    if parser.error:
        raise parser.error
    return parser.to_data()


def parse_html_file(file_path: Union[str, Path], schema_name: str = "Product") -> list[dict]:
    """Convenience function to parse an HTML file."""
    parser = SchemaParser.from_file(file_path, schema_name=schema_name)
    parser.parse()
    if parser.error:
        raise parser.error
    return parser.to_data()
