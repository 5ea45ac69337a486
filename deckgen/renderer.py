"""Render a defaulted presentation document into a PPTX file.

Every drawable unit (background, visual element, title, body, chart,
table, image slot, notes) is emitted through a renderer wrapped by
``element_renderer``. A wrapped renderer never raises: it returns an
``ElementResult`` and the slide assembler swaps any failure for a
translucent placeholder box, so one bad element cannot take down the rest
of the slide or the deck.
"""

import logging
import uuid
from collections import namedtuple
from functools import wraps
from io import BytesIO

from lxml import etree
from pptx import Presentation
from pptx.chart.data import CategoryChartData, XyChartData
from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_CONNECTOR
from pptx.enum.text import PP_ALIGN
from pptx.oxml.ns import qn
from pptx.oxml.xmlchemy import OxmlElement
from pptx.util import Inches, Pt

from .catalogs import (
    CANVASES,
    CHART_KINDS,
    DEFAULT_CANVAS,
    DEFAULT_CHART,
    DEFAULT_SHAPE,
    PLACEHOLDER_CAPTIONS,
    SAMPLE_CHART_DATA,
    SHAPE_ALIASES,
    SHAPE_KINDS,
    SLOT_REGIONS,
    TABLE_BAND_EVEN,
    TABLE_BAND_ODD,
    TABLE_HEADER_TEXT,
    TABLE_ROW_HEIGHT,
)
from .document import default_position, normalize_color
from .master import add_bar, add_label, add_master_slide, compose_master, deck_master, set_fill_alpha

logger = logging.getLogger(__name__)

ElementResult = namedtuple("ElementResult", ["kind", "ok", "error", "region", "caption"])
ElementFailure = namedtuple("ElementFailure", ["slide_index", "kind", "error"])
RenderedDeck = namedtuple("RenderedDeck", ["presentation", "failures", "sections"])

P14_NS = "http://schemas.microsoft.com/office/powerpoint/2010/main"
SECTION_LIST_URI = "{521415D9-36F7-43E2-AB2F-B90AF26B5E84}"
DEFAULT_SECTION = "Default Section"

ALIGNMENTS = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "centre": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
    "justify": PP_ALIGN.JUSTIFY,
}


class RenderContext:
    """Per-document render state: theme, canvas, flags and collected failures."""

    def __init__(self, theme, canvas=DEFAULT_CANVAS, include_charts=True, include_images=True):
        self.colors = theme["colorScheme"]
        self.fonts = theme["fonts"]
        self.canvas = canvas
        self.slots = SLOT_REGIONS[canvas]
        self.include_charts = include_charts
        self.include_images = include_images
        self.failures = []
        self.slide_index = None
        self.slide = None

    def begin(self, index, slide_doc):
        self.slide_index = index
        self.slide = slide_doc


def split_color(value, fallback):
    """Return ``(rgb_hex, opacity)`` for a colour that may carry an alpha byte."""
    color = normalize_color(value, allow_alpha=True) or fallback
    if len(color) == 8:
        return color[:6], int(color[6:], 16) / 255.0
    return color, 1.0


def _rgb(hex_color):
    return RGBColor.from_string(hex_color)


def _align(value):
    return ALIGNMENTS.get(str(value or "left").lower(), PP_ALIGN.LEFT)


def _box(position):
    return position["x"], position["y"], position["width"], position["height"]


def _discard_shapes_after(slide, mark):
    for shape in list(slide.shapes)[mark:]:
        element = shape._element
        element.getparent().remove(element)


def element_renderer(kind, locate=None):
    """Wrap ``render(slide, payload, ctx)`` so it returns an ElementResult.

    ``locate(payload, ctx)`` gives the ``(region, caption)`` used for the
    placeholder when rendering fails; without it failures leave no trace
    on the slide.
    """
    def decorate(render):
        @wraps(render)
        def attempt(slide, payload, ctx):
            mark = len(slide.shapes)
            try:
                render(slide, payload, ctx)
            except Exception as exc:
                _discard_shapes_after(slide, mark)
                region, caption = None, ""
                if locate is not None:
                    try:
                        region, caption = locate(payload, ctx)
                    except Exception:
                        logger.debug("Could not locate placeholder for failed %s", kind)
                return ElementResult(kind, False, str(exc) or exc.__class__.__name__, region, caption)
            return ElementResult(kind, True, None, None, None)
        return attempt
    return decorate


def _caption(kind, title):
    return PLACEHOLDER_CAPTIONS[kind].format(title=title)


def _locate_element(element, ctx):
    kind = element.get("type")
    if kind not in PLACEHOLDER_CAPTIONS:
        kind = "shape"
    title = element.get("title") or "Data Visualization"
    return _box(default_position(element.get("position"))), _caption(kind, title)


def _chart_slot_region(chart, ctx):
    if isinstance(chart.get("position"), dict):
        return _box(default_position(chart["position"], ctx.slots["chart"]))
    return _box(ctx.slots["chart"])


def _locate_chart_slot(chart, ctx):
    return _chart_slot_region(chart, ctx), _caption("chart", chart.get("title") or "Data Visualization")


def _image_slot_region(image, ctx):
    if isinstance(image.get("position"), dict):
        return _box(default_position(image["position"], ctx.slots["image"]))
    return _box(ctx.slots["image"])


def _locate_image_slot(image, ctx):
    return _image_slot_region(image, ctx), _caption("image", image.get("placeholder") or "Visual Representation")


def _table_origin(ctx):
    slot = ctx.slots["table"]
    y = slot["y_below_content"] if ctx.slide and ctx.slide.get("content") else slot["y"]
    return slot["x"], y, slot["width"]


def _locate_table(table, ctx):
    x, y, width = _table_origin(ctx)
    rows = 1 + len(table.get("rows") or [])
    return (x, y, width, rows * TABLE_ROW_HEIGHT), _caption("table", table.get("title") or "Data")


def _locate_title(slide_doc, ctx):
    return _box(slide_doc["layout"]["titlePosition"]), _caption("title", "")


def _locate_body(slide_doc, ctx):
    return _box(slide_doc["layout"]["contentPosition"]), _caption("body", "")


def _style_runs(paragraph, size=None, color=None, name=None, bold=None):
    for run in paragraph.runs:
        if size is not None:
            run.font.size = Pt(size)
        if color is not None:
            run.font.color.rgb = _rgb(color)
        if name:
            run.font.name = name
        if bold is not None:
            run.font.bold = bold


def shape_kind(name):
    """Resolve a requested shape name against the allow-list."""
    name = str(name or "").strip().lower()
    name = SHAPE_ALIASES.get(name, name)
    return name if name in SHAPE_KINDS else DEFAULT_SHAPE


def chart_kind(name):
    name = str(name or "").strip().lower()
    return name if name in CHART_KINDS else DEFAULT_CHART


@element_renderer("background")
def render_background(slide, slide_doc, ctx):
    override = slide_doc.get("background")
    if isinstance(override, dict):
        override = override.get("color")
    color = normalize_color(override)
    if color is None:
        return
    fill = slide.background.fill
    fill.solid()
    fill.fore_color.rgb = _rgb(color)


@element_renderer("shape", locate=_locate_element)
def render_shape(slide, element, ctx):
    x, y, w, h = _box(element["position"])
    color, tint = split_color(element.get("color"), ctx.colors["primary"])
    outline = element.get("outline") if isinstance(element.get("outline"), dict) else None
    kind = shape_kind(element.get("shape"))

    if kind == "line":
        line = slide.shapes.add_connector(
            MSO_CONNECTOR.STRAIGHT, Inches(x), Inches(y), Inches(x + w), Inches(y + h)
        )
        line.line.color.rgb = _rgb(color)
        line.line.width = Pt(float((outline or {}).get("width") or 2))
        return

    shape = slide.shapes.add_shape(SHAPE_KINDS[kind], Inches(x), Inches(y), Inches(w), Inches(h))
    shape.fill.solid()
    shape.fill.fore_color.rgb = _rgb(color)
    # renderer transparency is (1 - opacity) * 100; alpha stores the opacity
    opacity = float(element.get("opacity", 1.0)) * tint
    if opacity < 1.0:
        set_fill_alpha(shape._element.spPr, opacity)
    if outline:
        outline_color, _ = split_color(outline.get("color"), color)
        shape.line.color.rgb = _rgb(outline_color)
        shape.line.width = Pt(float(outline.get("width") or 1))
    else:
        shape.line.fill.background()
    if element.get("rotation"):
        shape.rotation = float(element["rotation"])


@element_renderer("text", locate=_locate_element)
def render_text(slide, element, ctx):
    x, y, w, h = _box(element["position"])
    color, _ = split_color(element.get("color"), ctx.colors["text"])
    add_label(
        slide.shapes,
        element.get("text", ""),
        x, y, w, h,
        color,
        element.get("fontSize", 20),
        bold=bool(element.get("bold")),
        italic=bool(element.get("italic")),
        align=_align(element.get("align")),
        font_name=element.get("fontFace") or ctx.fonts["body"],
    )


def chart_series(data):
    """Validate chart data into parallel ``(labels, values)`` lists."""
    if not isinstance(data, dict):
        raise ValueError("chart has no data")
    labels = data.get("labels") or SAMPLE_CHART_DATA["labels"]
    values = data.get("values") or SAMPLE_CHART_DATA["values"]
    if not isinstance(labels, list) or not isinstance(values, list):
        raise ValueError("chart labels and values must be lists")
    values = [float(value) for value in values]
    count = min(len(labels), len(values))
    if count == 0:
        raise ValueError("chart has no data points")
    return [str(label) for label in labels[:count]], values[:count]


def emit_chart(slide, spec, region, color, show_title=True, show_legend=True, default_title="Chart"):
    kind = chart_kind(spec.get("chartType"))
    labels, values = chart_series(spec.get("data"))
    title = spec.get("title") or default_title
    name = spec.get("title") or "Data"

    if kind == "scatter":
        chart_data = XyChartData()
        series = chart_data.add_series(name)
        for position, value in enumerate(values, start=1):
            series.add_data_point(position, value)
    else:
        chart_data = CategoryChartData()
        chart_data.categories = labels
        chart_data.add_series(name, values)

    x, y, w, h = region
    chart = slide.shapes.add_chart(
        CHART_KINDS[kind], Inches(x), Inches(y), Inches(w), Inches(h), chart_data
    ).chart
    chart.has_title = show_title
    if show_title:
        chart.chart_title.text_frame.text = title
    chart.has_legend = show_legend
    if show_legend:
        chart.legend.include_in_layout = False
    if kind in ("pie", "doughnut"):
        return chart
    series_format = chart.plots[0].series[0].format
    if kind in ("line", "scatter"):
        series_format.line.color.rgb = _rgb(color)
    else:
        series_format.fill.solid()
        series_format.fill.fore_color.rgb = _rgb(color)
    return chart


@element_renderer("chart", locate=_locate_element)
def render_inline_chart(slide, element, ctx):
    color, _ = split_color(element.get("color"), ctx.colors["primary"])
    emit_chart(
        slide,
        element,
        _box(element["position"]),
        color,
        show_title=element.get("showTitle") is not False,
        show_legend=element.get("showLegend") is not False,
    )


@element_renderer("chart", locate=_locate_chart_slot)
def render_chart_slot(slide, chart, ctx):
    emit_chart(
        slide,
        chart,
        _chart_slot_region(chart, ctx),
        ctx.colors["primary"],
        default_title="Data Analysis",
    )


@element_renderer("title", locate=_locate_title)
def render_title(slide, slide_doc, ctx):
    position = slide_doc["layout"]["titlePosition"]
    style = slide_doc["layout"]["titleStyle"]
    x, y, w, h = _box(position)
    add_label(
        slide.shapes,
        slide_doc["title"],
        x, y, w, h,
        ctx.colors["text"],
        style["fontSize"],
        bold=style["bold"],
        align=_align(position.get("align")),
        font_name=ctx.fonts["title"],
    )


@element_renderer("body", locate=_locate_body)
def render_body(slide, slide_doc, ctx):
    items = [item for item in slide_doc.get("content") or [] if item]
    if not items:
        return
    style = slide_doc["layout"]["contentStyle"]
    x, y, w, h = _box(slide_doc["layout"]["contentPosition"])
    frame = slide.shapes.add_textbox(Inches(x), Inches(y), Inches(w), Inches(h)).text_frame
    frame.word_wrap = True
    for index, item in enumerate(items):
        paragraph = frame.paragraphs[0] if index == 0 else frame.add_paragraph()
        paragraph.text = f"• {item}" if style["bullet"] else item
        paragraph.line_spacing = style["lineSpacing"]
        paragraph.space_after = Pt(12)
        _style_runs(paragraph, style["fontSize"], ctx.colors["text"], ctx.fonts["body"])


def column_widths(requested, count, total):
    """Caller widths when they cover every column, else an even split."""
    if isinstance(requested, list) and len(requested) >= count:
        try:
            widths = [float(width) for width in requested[:count]]
        except (TypeError, ValueError):
            widths = []
        if widths and all(width > 0 for width in widths):
            return widths
    return [total / count] * count


def add_styled_table(shapes, rows, x, y, widths, header_fill, text_color="333333",
                     font_name=None, font_size=14, header_size=16):
    """Grid with a bold light-on-``header_fill`` header and banded body rows."""
    row_count = len(rows)
    col_count = max(len(row) for row in rows) if rows else 0
    if row_count == 0 or col_count == 0:
        raise ValueError("table has no cells")
    table = shapes.add_table(
        row_count, col_count, Inches(x), Inches(y),
        Inches(sum(widths)), Inches(TABLE_ROW_HEIGHT * row_count),
    ).table
    table.first_row = True
    table.horz_banding = False
    for index, width in enumerate(widths):
        table.columns[index].width = Inches(width)

    for r, row in enumerate(rows):
        if r == 0:
            fill, color, size, bold = header_fill, TABLE_HEADER_TEXT, header_size, True
        else:
            fill = TABLE_BAND_ODD if r % 2 == 1 else TABLE_BAND_EVEN
            color, size, bold = text_color, font_size, False
        for c in range(col_count):
            cell = table.cell(r, c)
            cell.fill.solid()
            cell.fill.fore_color.rgb = _rgb(fill)
            value = row[c] if c < len(row) else ""
            cell.text = "" if value is None else str(value)
            for paragraph in cell.text_frame.paragraphs:
                _style_runs(paragraph, size, color, font_name, bold)
    return table


@element_renderer("table", locate=_locate_table)
def render_table(slide, table_data, ctx):
    headers = table_data.get("headers")
    rows = table_data.get("rows")
    if not isinstance(headers, list) or not isinstance(rows, list):
        return
    grid = [headers] + [row if isinstance(row, list) else [row] for row in rows]
    x, y, width = _table_origin(ctx)
    col_count = max(len(row) for row in grid)
    add_styled_table(
        slide.shapes,
        grid,
        x, y,
        column_widths(table_data.get("colW"), col_count, width),
        ctx.colors["primary"],
        text_color=ctx.colors["text"],
        font_name=ctx.fonts["body"],
    )


@element_renderer("image", locate=_locate_image_slot)
def render_image_slot(slide, image, ctx):
    x, y, w, h = _image_slot_region(image, ctx)
    color = ctx.colors["secondary"]
    box = add_bar(slide.shapes, x, y, w, h, color)
    set_fill_alpha(box._element.spPr, 0x22 / 255.0)
    box.line.color.rgb = _rgb(color)
    box.line.width = Pt(1)
    add_label(
        slide.shapes,
        _caption("image", image.get("placeholder") or "Visual Representation"),
        x + 0.1, y + h / 2 - 0.5, w - 0.2, 1.0,
        color, 14,
        align=PP_ALIGN.CENTER,
        middle=True,
    )


@element_renderer("notes")
def render_notes(slide, notes, ctx):
    slide.notes_slide.notes_text_frame.text = notes


INLINE_RENDERERS = {
    "shape": render_shape,
    "text": render_text,
    "chart": render_inline_chart,
}


def substitute_placeholder(slide, result, ctx):
    """Translucent box plus centered caption where a failed element was."""
    x, y, w, h = result.region
    color = ctx.colors["primary"]
    box = add_bar(slide.shapes, x, y, w, h, color)
    set_fill_alpha(box._element.spPr, 0x33 / 255.0)
    box.line.color.rgb = _rgb(color)
    box.line.width = Pt(2)
    if result.caption:
        add_label(
            slide.shapes, result.caption, x, y + h / 2 - 0.25, w, 0.5, color, 16,
            align=PP_ALIGN.CENTER,
        )


def settle(slide, result, ctx):
    """Record a failed element and put a placeholder in its place."""
    if result.ok:
        return
    logger.warning(
        "Slide %s: %s failed to render (%s)", ctx.slide_index + 1, result.kind, result.error
    )
    ctx.failures.append(ElementFailure(ctx.slide_index, result.kind, result.error))
    if result.region is None:
        return
    mark = len(slide.shapes)
    try:
        substitute_placeholder(slide, result, ctx)
    except Exception:
        _discard_shapes_after(slide, mark)
        logger.exception("Slide %s: placeholder for %s failed", ctx.slide_index + 1, result.kind)


def render_slide(slide, slide_doc, ctx):
    settle(slide, render_background(slide, slide_doc, ctx), ctx)

    for element in slide_doc.get("visualElements") or []:
        kind = element.get("type")
        render = INLINE_RENDERERS.get(kind)
        if render is None:
            logger.debug("Skipping visual element of unknown type %r", kind)
            continue
        if kind == "chart" and not ctx.include_charts:
            continue
        settle(slide, render(slide, element, ctx), ctx)

    if slide_doc.get("title"):
        settle(slide, render_title(slide, slide_doc, ctx), ctx)
    settle(slide, render_body(slide, slide_doc, ctx), ctx)

    if ctx.include_charts and slide_doc.get("chartData"):
        settle(slide, render_chart_slot(slide, slide_doc["chartData"], ctx), ctx)
    if slide_doc.get("tableData"):
        settle(slide, render_table(slide, slide_doc["tableData"], ctx), ctx)
    if ctx.include_images and slide_doc.get("imageData"):
        settle(slide, render_image_slot(slide, slide_doc["imageData"], ctx), ctx)
    if slide_doc.get("speakerNotes"):
        settle(slide, render_notes(slide, slide_doc["speakerNotes"], ctx), ctx)


def section_groups(document):
    """Contiguous ``(section title, [slide indexes])`` runs in slide order."""
    slides = document.get("slides") or []
    declared = [section["title"] for section in document.get("sections") or []]
    if not declared and not any(slide.get("sectionTitle") for slide in slides):
        return []

    groups = []
    current = declared[0] if declared else DEFAULT_SECTION
    for index, slide in enumerate(slides):
        title = slide.get("sectionTitle")
        if title and (not declared or title in declared):
            current = title
        if groups and groups[-1][0] == current:
            groups[-1][1].append(index)
        else:
            groups.append((current, [index]))
    used = set(title for title, _ in groups)
    for title in declared:
        if title not in used:
            groups.append((title, []))
            used.add(title)
    return groups


def write_sections(prs, groups):
    if not groups:
        return
    slide_ids = [slide.slide_id for slide in prs.slides]
    presentation = prs.part._element
    ext_list = presentation.find(qn("p:extLst"))
    if ext_list is None:
        ext_list = OxmlElement("p:extLst")
        presentation.append(ext_list)
    ext = OxmlElement("p:ext")
    ext.set("uri", SECTION_LIST_URI)
    ext_list.append(ext)

    section_list = etree.SubElement(ext, "{%s}sectionLst" % P14_NS, nsmap={"p14": P14_NS})
    for position, (title, indexes) in enumerate(groups):
        section = etree.SubElement(section_list, "{%s}section" % P14_NS)
        section.set("name", title)
        section_id = uuid.uuid5(uuid.NAMESPACE_URL, "%d:%s" % (position, title))
        section.set("id", "{%s}" % str(section_id).upper())
        id_list = etree.SubElement(section, "{%s}sldIdLst" % P14_NS)
        for index in indexes:
            etree.SubElement(id_list, "{%s}sldId" % P14_NS).set("id", str(slide_ids[index]))


def read_sections(prs):
    """``[(name, slide_count)]`` from a presentation's section list."""
    found = prs.part._element.findall(".//{%s}section" % P14_NS)
    return [
        (section.get("name"), len(section.findall("{%s}sldIdLst/{%s}sldId" % (P14_NS, P14_NS))))
        for section in found
    ]


def set_properties(prs, title=None, subject=None, author=None, comments=None):
    props = prs.core_properties
    props.title = title or ""
    props.subject = subject or ""
    props.author = author or "Presentation Generator"
    props.last_modified_by = props.author
    if comments:
        props.comments = comments


def new_presentation(canvas=DEFAULT_CANVAS):
    prs = Presentation()
    width, height = CANVASES[canvas]
    prs.slide_width = Inches(width)
    prs.slide_height = Inches(height)
    return prs


def render_document(document, canvas=DEFAULT_CANVAS, include_charts=True, include_images=True):
    """Render a defaulted document; returns a :data:`RenderedDeck`."""
    theme = document["theme"]
    prs = new_presentation(canvas)
    compose_master(prs, deck_master(theme["colorScheme"]))
    ctx = RenderContext(theme, canvas, include_charts, include_images)

    for index, slide_doc in enumerate(document["slides"]):
        slide = add_master_slide(prs)
        ctx.begin(index, slide_doc)
        render_slide(slide, slide_doc, ctx)

    groups = section_groups(document)
    write_sections(prs, groups)
    if ctx.failures:
        logger.warning("Rendered with %d isolated element failure(s)", len(ctx.failures))
    return RenderedDeck(prs, ctx.failures, [title for title, _ in groups])


def serialize(prs):
    buffer = BytesIO()
    prs.save(buffer)
    return buffer.getvalue()
