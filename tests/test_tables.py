from __future__ import annotations

import base64

import pytest
from pptx.dml.color import RGBColor
from pptx.util import Inches

from deckgen.errors import DeckRequestError, TableNotFoundError
from deckgen.tables import generate_from_table, hinted_widths, parse_table

from conftest import open_deck, shape_texts

SIMPLE_TABLE = "<table><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></table>"


def _table(prs):
    return next(shape for shape in prs.slides[0].shapes if shape.has_table)


def test_header_and_one_row_become_two_by_two_grid() -> None:
    deck = generate_from_table(SIMPLE_TABLE)
    prs = open_deck(deck.content)
    frame = _table(prs)
    table = frame.table

    assert len(prs.slides) == 1
    assert len(table.rows) == 2 and len(table.columns) == 2
    assert [table.cell(0, c).text for c in range(2)] == ["A", "B"]
    assert [table.cell(1, c).text for c in range(2)] == ["1", "2"]
    assert table.cell(0, 0).text_frame.paragraphs[0].runs[0].font.bold is True
    assert table.cell(1, 0).text_frame.paragraphs[0].runs[0].font.bold is False
    assert table.cell(0, 0).fill.fore_color.rgb == RGBColor.from_string("4472C4")
    assert table.cell(1, 0).fill.fore_color.rgb != table.cell(0, 0).fill.fore_color.rgb
    assert (frame.left, frame.top) == (Inches(0.5), Inches(2.0))


def test_response_data_and_defaults() -> None:
    deck = generate_from_table(SIMPLE_TABLE)

    assert deck.filename == "Table_Presentation.pptx"
    assert deck.data["format"] == "pptx"
    assert deck.data["slideCount"] == 1
    assert base64.b64decode(deck.data["presentation"]) == deck.content
    prs = open_deck(deck.content)
    assert "Table Data" in shape_texts(prs.slides[0].shapes)
    assert "Data Presentation" in shape_texts(prs.slide_master.shapes)
    assert prs.core_properties.title == "Table Presentation"


def test_title_author_and_company_are_applied() -> None:
    deck = generate_from_table(SIMPLE_TABLE, title="Sales", author="Dana", company="Acme")
    prs = open_deck(deck.content)

    assert deck.filename == "Sales.pptx"
    assert "Sales" in shape_texts(prs.slides[0].shapes)
    assert prs.slide_master.name == "TABLE_MASTER"
    assert prs.core_properties.author == "Dana"
    assert prs.core_properties.comments == "Company: Acme"


def test_markup_without_table_is_rejected() -> None:
    with pytest.raises(TableNotFoundError) as excinfo:
        generate_from_table("<div><p>No grid here</p></div>")

    assert excinfo.value.message == "No table found in provided HTML"
    assert excinfo.value.status_code == 400


@pytest.mark.parametrize("markup", ["", "   ", None])
def test_empty_markup_is_rejected(markup) -> None:
    with pytest.raises(DeckRequestError):
        generate_from_table(markup)


def test_empty_table_still_yields_one_slide() -> None:
    prs = open_deck(generate_from_table("<table></table>").content)

    assert len(prs.slides) == 1
    assert not any(shape.has_table for shape in prs.slides[0].shapes)
    assert "Table Data" in shape_texts(prs.slides[0].shapes)


def test_ragged_rows_are_padded() -> None:
    grid, _ = parse_table(
        "<table><tr><td> a </td><td>b</td><td>c</td></tr><tr><td>d</td></tr><tr></tr></table>"
    )

    assert grid == [["a", "b", "c"], ["d", "", ""]]


def test_width_hints_from_thead() -> None:
    markup = (
        "<table><thead><tr>"
        '<th data-pptx-width="2">Name</th>'
        '<th data-pptx-min-width="5">Description</th>'
        '<th data-pptx-width="oops">Notes</th>'
        "</tr></thead><tbody><tr><td>x</td><td>y</td><td>z</td></tr></tbody></table>"
    )
    grid, headers = parse_table(markup)

    assert len(grid) == 2
    assert hinted_widths(headers, 3) == [2.0, 5.0, 3.0]


def test_min_width_never_shrinks_a_column() -> None:
    grid, headers = parse_table(
        '<table><tr><th data-pptx-min-width="1">A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></table>'
    )

    assert hinted_widths(headers, 2) == [4.5, 4.5]


@pytest.mark.parametrize("hint", ["nan", "inf", "-inf", "-2", "0"])
def test_unusable_width_hints_are_ignored(hint: str) -> None:
    _, headers = parse_table(
        f'<table><tr><th data-pptx-width="{hint}" data-pptx-min-width="{hint}">A</th>'
        "<th>B</th></tr></table>"
    )

    assert hinted_widths(headers, 2) == [4.5, 4.5]


def test_non_finite_hint_still_renders_a_table() -> None:
    markup = '<table><tr><th data-pptx-width="nan">A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></table>'
    frame = _table(open_deck(generate_from_table(markup).content))

    assert frame.table.columns[0].width == Inches(4.5)


def test_title_is_made_safe_for_the_filename() -> None:
    deck = generate_from_table(SIMPLE_TABLE, title="../Q1 sales/report")

    assert deck.filename == "___Q1_sales_report.pptx"
    assert deck.data["filename"] == deck.filename


def test_control_characters_in_cells_and_title_are_dropped() -> None:
    markup = "<table><tr><th>A\x01</th><th>B</th></tr><tr><td>1\x0b</td><td>2</td></tr></table>"
    deck = generate_from_table(markup, title="Sales\x00", company="Acme\x1f")
    prs = open_deck(deck.content)
    table = _table(prs).table

    assert table.cell(0, 0).text == "A"
    assert table.cell(1, 0).text == "1"
    assert "Sales" in shape_texts(prs.slides[0].shapes)
    assert prs.core_properties.comments == "Company: Acme"
