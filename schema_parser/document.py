"""
Document loading: raw HTML text or bytes → BeautifulSoup tree.

The parser session works on a live tree: it reads the annotations from it and
appends its output container to it, so callers keep the returned soup and
serialize it afterwards if they want the rendered page.
"""

import re
from pathlib import Path
from typing import Optional, Union

from bs4 import BeautifulSoup

from .exceptions import DocumentLoadError
from .logger import get_module_logger

logger = get_module_logger("document")

# html5lib follows the WHATWG parsing algorithm (same tree a browser builds);
# lxml is faster but less faithful; html.parser ships with Python.
PARSER_CHAIN = ("html5lib", "lxml", "html.parser")

# WHATWG encoding spec: browsers silently remap these charset labels.
# https://encoding.spec.whatwg.org/#names-and-labels
WHATWG_CHARSET_MAP = {
    'iso-8859-1': 'windows-1252',
    'iso8859-1': 'windows-1252',
    'iso88591': 'windows-1252',
    'latin-1': 'windows-1252',
    'latin1': 'windows-1252',
    'us-ascii': 'windows-1252',
    'ascii': 'windows-1252',
    'iso-8859-9': 'windows-1254',
    'iso-8859-11': 'windows-874',
}

META_CHARSET_PATTERN = re.compile(r'<meta[^>]+charset=["\']?\s*([^\s"\';>]+)', re.IGNORECASE)
META_CONTENT_TYPE_PATTERN = re.compile(
    r'<meta[^>]+content=["\'][^"\']*charset=([^\s"\';>]+)', re.IGNORECASE
)


def detect_charset_from_bytes(raw_bytes: bytes) -> str:
    """
    Detect the declared charset of raw HTML bytes.

    Scans the first 2048 bytes for <meta charset=...> or the legacy
    <meta http-equiv="Content-Type" content="...; charset=..."> form and
    applies the WHATWG label mapping. Returns 'utf-8' when nothing is declared.
    """
    # Declarations must sit in the first 1024 bytes; 2048 leaves slack
    head_str = raw_bytes[:2048].decode('ascii', errors='ignore')

    m = META_CHARSET_PATTERN.search(head_str) or META_CONTENT_TYPE_PATTERN.search(head_str)
    if not m:
        return 'utf-8'

    charset = m.group(1).strip().lower()
    return WHATWG_CHARSET_MAP.get(charset, charset)


def decode_html(raw_bytes: bytes) -> str:
    """Decode HTML bytes with their declared charset, replacing bad sequences."""
    charset = detect_charset_from_bytes(raw_bytes)
    try:
        return raw_bytes.decode(charset, errors='replace')
    except LookupError:
        logger.warning(f"Unknown charset {charset}, decoding as utf-8")
        return raw_bytes.decode('utf-8', errors='replace')


def load_document(html: Union[str, bytes], parser: Optional[str] = None) -> BeautifulSoup:
    """
    Parse HTML into a BeautifulSoup document.

    Args:
        html: HTML text, or bytes (decoded with the declared charset)
        parser: Force one BeautifulSoup backend instead of the fallback chain

    Returns:
        BeautifulSoup document

    Raises:
        DocumentLoadError: if no backend could parse the input
    """
    if isinstance(html, bytes):
        html = decode_html(html)

    backends = (parser,) if parser else PARSER_CHAIN
    failures = {}

    for backend in backends:
        try:
            soup = BeautifulSoup(html, backend)
        except Exception as e:
            logger.warning(f"{backend} parsing failed: {e}")
            failures[backend] = str(e)
            continue
        logger.debug(f"Parsed document with {backend}")
        return soup

    raise DocumentLoadError("Could not parse the HTML document", details=failures)


def load_document_file(file_path: Union[str, Path], parser: Optional[str] = None) -> BeautifulSoup:
    """Read an HTML file and parse it, honoring its declared charset."""
    file_path = Path(file_path)
    logger.debug(f"Loading {file_path.name}")
    return load_document(file_path.read_bytes(), parser=parser)
