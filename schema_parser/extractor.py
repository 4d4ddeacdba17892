"""
Microdata tree extractor.

Walks the itemprop-annotated subtree of a schema root and builds the nested
Group described in schemas.py.

Merge rules when a property name is seen again at the same level:
  leaf after anything      → promoted to Repeated([existing, new]); later ones append
  group after a Group      → merged into the existing group
  group after a Leaf       → promoted to Repeated([leaf, new group])
  group after a Repeated   → merged into its last item if that is a Group, else appended

Input:  a BeautifulSoup Tag (borrowed, never modified)
Output: Group
"""

import re
from typing import Optional, Union

from bs4 import Tag

from .schemas import ExtractedValue, Leaf, Group, Repeated
from .logger import get_module_logger

logger = get_module_logger("extractor")

ITEMPROP_ATTR = "itemprop"
ITEMTYPE_ATTR = "itemtype"

# Leaf attributes, in the order they are consulted
CONTENT_ATTR = "content"
ALT_ATTR = "alt"
URL_ATTR = "href"
SRC_ATTR = "src"

WHITESPACE_PATTERN = re.compile(r"\s+")


def find_schema_roots(scan_root: Tag, schema_name: str) -> list[Tag]:
    """
    Find descendants of scan_root whose itemtype ends with schema_name.

    Suffix matching lets "https://schema.org/Product" match "Product".
    Results are in document order; scan_root itself is not a candidate.
    """
    def matches(itemtype) -> bool:
        return bool(itemtype) and itemtype.strip().endswith(schema_name)

    return scan_root.find_all(attrs={ITEMTYPE_ATTR: matches})


def find_annotated_descendants(elem: Tag) -> list[Tag]:
    """
    Nearest itemprop elements below elem.

    Descends through unannotated wrappers but stops at the first annotated
    element on each path, so grandchildren of an annotated child belong to
    that child and not to elem.
    """
    found = []
    # Explicit stack, no recursion per wrapper level
    stack = list(reversed(elem.contents))
    while stack:
        node = stack.pop()
        if not isinstance(node, Tag):
            continue
        if node.has_attr(ITEMPROP_ATTR):
            found.append(node)
        else:
            stack.extend(reversed(node.contents))
    return found


def get_property_name(elem: Tag) -> Optional[str]:
    """The element's itemprop, or None when missing or blank."""
    name = elem.get(ITEMPROP_ATTR)
    if name is None:
        return None
    name = name.strip()
    return name or None


def rendered_text(elem: Tag) -> str:
    """Text content with whitespace runs collapsed, like a browser's innerText."""
    return WHITESPACE_PATTERN.sub(" ", elem.get_text()).strip()


def resolve_leaf(elem: Tag) -> ExtractedValue:
    """
    Read the terminal value of an annotated element.

    value: content attribute, else rendered text, else alt attribute.
    Empty strings fall through to the next source.
    """
    value = elem.get(CONTENT_ATTR) or rendered_text(elem) or elem.get(ALT_ATTR)
    return ExtractedValue(
        value=value,
        url=elem.get(URL_ATTR),
        src=elem.get(SRC_ATTR),
    )


class TreeExtractor:
    """Builds a Group from one schema root element."""

    def extract(self, root: Tag) -> Group:
        """Extract a schema root into a fresh Group."""
        return self.extract_into(root, Group())

    def extract_into(self, elem: Tag, accumulator: Group) -> Group:
        """
        Merge the data of elem's subtree into accumulator and return it.

        Args:
            elem: Annotated element (or the schema root, which may lack itemprop)
            accumulator: Group receiving elem's property

        Returns:
            The same accumulator, mutated
        """
        # Depth-first in document order: each child subtree is finished before
        # its next sibling, so collisions see occurrences in encounter order
        pending = [(elem, accumulator)]
        while pending:
            current, target = pending.pop()
            descendants = find_annotated_descendants(current)
            key = get_property_name(current)

            if descendants:
                destination = self._resolve_destination(target, key)
                pending.extend((child, destination) for child in reversed(descendants))
            elif key is None:
                # A root with nothing annotated inside has no name to store a value under
                logger.debug(f"Skipping unnamed element <{current.name}> without annotated descendants")
            else:
                self._store(target, key, Leaf(extracted=resolve_leaf(current)))

        return accumulator

    def _resolve_destination(self, accumulator: Group, key: Optional[str]) -> Group:
        """Pick the Group that a non-leaf element's descendants merge into."""
        if key is None:
            # Schema root: no extra nesting level
            return accumulator

        existing = accumulator.get(key)
        if isinstance(existing, Group):
            return existing
        if isinstance(existing, Repeated) and existing.items and isinstance(existing.items[-1], Group):
            return existing.items[-1]

        group = Group()
        self._store(accumulator, key, group)
        return group

    def _store(self, accumulator: Group, key: str, value: Union[Leaf, Group]) -> None:
        """Store value under key, promoting to Repeated on collision."""
        if key not in accumulator:
            accumulator.properties[key] = value
            return

        existing = accumulator.properties[key]
        if isinstance(existing, Repeated):
            existing.items.append(value)
        else:
            accumulator.properties[key] = Repeated(items=[existing, value])


def extract(root: Tag) -> Group:
    """Convenience function to extract one schema root."""
    return TreeExtractor().extract(root)
