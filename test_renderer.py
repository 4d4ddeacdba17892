"""
Tests for table/JSON/error rendering and the session's output container.
"""

import json

import pytest
from bs4 import NavigableString

from schema_parser.document import load_document
from schema_parser.main import SchemaParser
from schema_parser.renderer import Renderer
from schema_parser.schemas import ExtractedValue, Leaf, Group, Repeated, ParserConfig


def leaf(value=None, url=None, src=None) -> Leaf:
    return Leaf(extracted=ExtractedValue(value=value, url=url, src=src))


@pytest.fixture
def renderer() -> Renderer:
    return Renderer(load_document("<html><body></body></html>"), ParserConfig())


PAGE = (
    '<html><body><h1>Shop</h1>'
    '<div itemscope itemtype="https://schema.org/Product">'
    '<span itemprop="name">Widget</span>'
    '<a itemprop="image" href="/p/widget" src="/img/widget.png">Photo</a>'
    '<li itemprop="color">Red</li><li itemprop="color">Blue</li>'
    '<div itemprop="offers"><meta itemprop="price" content="9.99"></div>'
    '</div></body></html>'
)


# --- Leaves ---

def test_leaf_with_url_and_src_renders_as_link(renderer):
    element = renderer.render_leaf(ExtractedValue(value="Photo", url="/p", src="/i.png"))

    assert element.name == "a"
    assert element["href"] == "/p"
    assert element.get_text() == "Photo"


def test_leaf_with_src_renders_as_image(renderer):
    element = renderer.render_leaf(ExtractedValue(value="Front", src="/i.png"))

    assert element.name == "img"
    assert element["src"] == "/i.png"
    assert element["alt"] == "Front"


def test_plain_leaf_renders_as_text(renderer):
    element = renderer.render_leaf(ExtractedValue(value="Widget"))

    assert isinstance(element, NavigableString)
    assert element == "Widget"


# --- Tables ---

def test_table_rows_follow_insertion_order_and_repeat_labels(renderer):
    group = Group(properties={
        "name": leaf("Widget"),
        "offers": Group(properties={"price": leaf("9.99")}),
        "color": Repeated(items=[leaf("Red"), leaf("Blue")]),
    })
    table = renderer.render_table(group, 0)

    rows = table.tbody.find_all("tr", recursive=False)
    labels = [row.find("td").get_text() for row in rows]
    assert labels == ["name", "offers", "color", "color"]
    assert [rows[2].find_all("td")[1].get_text(), rows[3].find_all("td")[1].get_text()] == ["Red", "Blue"]


def test_table_head_and_attributes(renderer):
    table = renderer.render_table(Group(properties={"name": leaf("Widget")}), 3)

    head = table.thead.find("th")
    assert head.get_text() == "Product Table #3"
    assert head["colspan"] == "2"
    assert table["border"] == "0"
    assert "schema-parser__table" in table["class"]


def test_nested_group_renders_nested_table(renderer):
    group = Group(properties={"offers": Group(properties={"price": leaf("9.99")})})
    table = renderer.render_table(group, 0)

    value_cell = table.tbody.find("tr").find_all("td", recursive=False)[1]
    assert "schema-parser__td--nested" in value_cell["class"]
    inner = value_cell.find("table")
    assert [td.get_text() for td in inner.find_all("td")] == ["price", "9.99"]


def test_json_text_is_the_serialized_result_set(renderer):
    results = [Group(properties={"name": leaf("Widget")})]
    textarea = renderer.render_json(results)

    assert textarea.name == "textarea"
    assert json.loads(textarea.get_text()) == [{"name": {"value": "Widget", "url": None, "src": None}}]


# --- Session rendering ---

def test_render_table_parses_first_and_fills_container():
    parser = SchemaParser(PAGE)
    container = parser.render_table()

    assert parser.has_data
    assert container is parser.document.body.find(id="jsSchemaParser")
    assert "schema-parser__container" in container["class"]
    assert len(container.select("table.schema-parser__table")) == 1


def test_link_beats_image_in_rendered_table():
    parser = SchemaParser(PAGE)
    container = parser.render_table()

    assert container.find("a", href="/p/widget") is not None
    assert container.find("img") is None


def test_rendering_twice_keeps_one_container():
    parser = SchemaParser(PAGE)
    parser.render_table()
    parser.render_table()
    parser.render_json()

    containers = parser.document.find_all(id="jsSchemaParser")
    assert len(containers) == 1
    assert containers[0].find("table") is None
    assert len(containers[0].find_all("textarea")) == 1


def test_render_json_round_trips_to_parsed_data():
    parser = SchemaParser(PAGE)
    container = parser.render_json()

    decoded = json.loads(container.find("textarea").get_text())
    assert decoded == parser.to_data()
    assert decoded[0]["offers"] == {"price": {"value": "9.99", "url": None, "src": None}}


def test_render_in_error_state_shows_error():
    parser = SchemaParser("<html><body><p>nothing</p></body></html>")
    container = parser.render_table()

    assert parser.is_error
    assert container.find("table") is None
    error = container.find("span")
    assert "schema-parser__error" in error["class"]
    assert error.get_text() == "An error occurred: The schema type Product was not found in this page"


def test_render_json_in_error_state_shows_error():
    parser = SchemaParser("<html><body></body></html>")
    parser.parse()
    container = parser.render_json()

    assert container.find("textarea") is None
    assert container.find("span").get_text().startswith("An error occurred: ")


def test_render_error_with_explicit_message():
    parser = SchemaParser(PAGE)
    span = parser.render_error("disk full")

    assert span.get_text() == "An error occurred: disk full"
    assert parser.container.contents == [span]


def test_custom_container_id_and_namespace():
    parser = SchemaParser(PAGE, container_id="microdata", class_namespace="acme")
    container = parser.render_table()

    assert container["id"] == "microdata"
    assert "acme__container" in container["class"]
    assert len(container.select("table.acme__table")) == 1
    assert len(container.select("td.acme__td--nested")) == 1


def test_removed_container_is_recreated():
    parser = SchemaParser(PAGE)
    parser.render_table()
    parser.remove_container()
    assert parser.document.find(id="jsSchemaParser") is None

    parser.render_json()
    assert len(parser.document.find_all(id="jsSchemaParser")) == 1


def test_clear_container_empties_it():
    parser = SchemaParser(PAGE)
    parser.render_table()
    parser.clear_container()

    assert parser.container.contents == []
