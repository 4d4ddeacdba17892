"""
Renderer: parsed schema data → HTML elements.

Builds elements with the target document's own factories (new_tag /
new_string) so they can be appended to that document. The renderer never
touches the tree itself; SchemaParser owns the container and decides where
the elements go.

Output shapes:
  table   <table class="{ns}__table" border="0">
            <thead><tr><th colspan="2">{schema} Table #{i}</th></tr></thead>
            <tbody> one row per property </tbody>
          </table>
  json    <textarea class="{ns}__textarea">[...]</textarea>
  error   <span class="{ns}__error">An error occurred: ...</span>
"""

import json
from typing import Union

from bs4 import BeautifulSoup, NavigableString, Tag

from .schemas import ExtractedValue, Leaf, Group, Repeated, ParserConfig
from .logger import get_module_logger

logger = get_module_logger("renderer")


class Renderer:
    """Creates presentation elements for one document and config."""

    def __init__(self, document: BeautifulSoup, config: ParserConfig):
        self.document = document
        self.config = config

    def _tag(self, name: str, css_class: str = None, **attrs) -> Tag:
        if css_class:
            attrs["class"] = css_class
        return self.document.new_tag(name, attrs=attrs)

    def _text(self, text) -> NavigableString:
        return self.document.new_string("" if text is None else str(text))

    # --- Leaves ---

    def render_leaf(self, extracted: ExtractedValue) -> Union[Tag, NavigableString]:
        """
        Link if url is set (even when src is set too), else image if src is
        set, else plain text.
        """
        if extracted.url:
            link = self._tag("a", href=extracted.url)
            link.append(self._text(extracted.value))
            return link
        if extracted.src:
            return self._tag("img", src=extracted.src, alt=extracted.value or "")
        return self._text(extracted.value)

    # --- Tables ---

    def render_table_body(self, tbody: Tag, group: Group) -> Tag:
        """Append one row per property of group to tbody, in insertion order."""
        for key, value in group.properties.items():
            if isinstance(value, Repeated):
                # Every occurrence gets its own row under the same label
                for item in value.items:
                    tbody.append(self._render_row(key, item))
            else:
                tbody.append(self._render_row(key, value))
        return tbody

    def _render_row(self, key: str, value: Union[Leaf, Group]) -> Tag:
        row = self._tag("tr")

        prop_cell = self._tag("td")
        prop_cell.append(self._text(key))
        row.append(prop_cell)

        if isinstance(value, Group):
            value_cell = self._tag("td", css_class=self.config.class_name("td--nested"))
            inner_table = self._tag("table")
            inner_table.append(self.render_table_body(self._tag("tbody"), value))
            value_cell.append(inner_table)
        elif isinstance(value, Leaf):
            value_cell = self._tag("td")
            value_cell.append(self.render_leaf(value.extracted))
        else:
            raise TypeError(f"Cannot render a {type(value).__name__} as a single row")

        row.append(value_cell)
        return row

    def render_table(self, group: Group, index: int) -> Tag:
        """Render one schema root's data as a captioned two-column table."""
        table = self._tag("table", css_class=self.config.class_name("table"), border="0")

        head_cell = self._tag("th", colspan="2")
        head_cell.append(self._text(f"{self.config.schema_name} Table #{index}"))
        head_row = self._tag("tr")
        head_row.append(head_cell)
        thead = self._tag("thead")
        thead.append(head_row)

        table.append(thead)
        table.append(self.render_table_body(self._tag("tbody"), group))
        return table

    def render_tables(self, results: list[Group]) -> list[Tag]:
        return [self.render_table(group, i) for i, group in enumerate(results)]

    # --- JSON / error ---

    def render_json(self, results: list[Group]) -> Tag:
        """Textarea holding the full result set serialized as JSON."""
        textarea = self._tag("textarea", css_class=self.config.class_name("textarea"))
        textarea.append(self._text(to_json(results)))
        return textarea

    def render_error(self, message) -> Tag:
        span = self._tag("span", css_class=self.config.class_name("error"))
        span.append(self._text(f"An error occurred: {message}"))
        return span

    # --- Container ---

    def create_container(self) -> Tag:
        return self._tag(
            "div",
            css_class=self.config.class_name("container"),
            id=self.config.container_id,
        )


def to_json(results: list[Group], **dumps_kwargs) -> str:
    """Serialize a parsed result set with no transformation beyond to_data()."""
    return json.dumps([group.to_data() for group in results], **dumps_kwargs)
