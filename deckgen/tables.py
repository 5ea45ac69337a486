"""One-slide decks built from an HTML table."""

import base64
import logging
import math

from bs4 import BeautifulSoup

from .document import xml_safe
from .errors import DeckRequestError, TableNotFoundError
from .master import add_label, add_master_slide, compose_master, table_master
from .pipeline import GeneratedDeck, deck_filename, optional_text
from .renderer import add_styled_table, new_presentation, serialize, set_properties

logger = logging.getLogger(__name__)

TABLE_WIDTH = 9.0
TABLE_ORIGIN = (0.5, 2.0)
HEADER_FILL = "4472C4"
HEADING_COLOR = "363636"


def _inches(value):
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def parse_table(markup):
    """Return ``(grid, header_cells)`` for the first table in ``markup``.

    ``grid`` is a list of equally long rows of stripped cell text.
    """
    soup = BeautifulSoup(markup, "lxml")
    table = soup.find("table")
    if table is None:
        raise TableNotFoundError()

    grid = []
    for row in table.find_all("tr"):
        cells = [xml_safe(cell.get_text()).strip() for cell in row.find_all(["td", "th"])]
        if cells:
            grid.append(cells)
    width = max(len(row) for row in grid) if grid else 0
    grid = [row + [""] * (width - len(row)) for row in grid]

    header_row = table.select_one("thead tr") or table.find("tr")
    header_cells = header_row.find_all("th") if header_row is not None else []
    return grid, header_cells


def hinted_widths(header_cells, count, total=TABLE_WIDTH):
    """Even split of ``total`` adjusted by ``data-pptx-width``/``-min-width`` hints."""
    widths = [total / count] * count
    for index, cell in enumerate(header_cells[:count]):
        exact = _inches(cell.get("data-pptx-width"))
        if exact is not None:
            widths[index] = exact
        minimum = _inches(cell.get("data-pptx-min-width"))
        if minimum is not None:
            widths[index] = max(widths[index], minimum)
    return widths


def generate_from_table(table_html, title=None, author=None, company=None):
    """Build a single-slide deck holding the table found in ``table_html``."""
    if not isinstance(table_html, str) or not table_html.strip():
        raise DeckRequestError("Table HTML is required")

    title, author, company = optional_text(title), optional_text(author), optional_text(company)
    grid, header_cells = parse_table(table_html)
    logger.info("Importing table with %d rows", len(grid))

    prs = new_presentation()
    compose_master(prs, table_master(title or "Data Presentation"))
    slide = add_master_slide(prs)
    add_label(slide.shapes, title or "Table Data", 0.5, 1.0, 9.0, 0.8, HEADING_COLOR, 24, bold=True)

    if grid:
        x, y = TABLE_ORIGIN
        add_styled_table(
            slide.shapes,
            grid,
            x, y,
            hinted_widths(header_cells, len(grid[0])),
            HEADER_FILL,
        )

    set_properties(
        prs,
        title=title or "Table Presentation",
        author=author,
        comments=f"Company: {company}" if company else None,
    )
    content = serialize(prs)
    filename = deck_filename(title or "Table_Presentation")
    return GeneratedDeck(content, filename, {
        "presentation": base64.b64encode(content).decode("ascii"),
        "format": "pptx",
        "filename": filename,
        "slideCount": len(prs.slides),
    })
