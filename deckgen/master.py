"""Reusable slide master: background, decoration bars, logo and page number.

A master definition is a plain dict so the three operations (prompt decks,
table decks, templates) share one composer:

    {
        "name": "MASTER_SLIDE",
        "background": {"color": "FFFFFF", "transparency": 0},
        "bars": [{"x": 0, "y": 0, "width": 0.4, "height": "100%", "color": "4472C4"}],
        "texts": [{"text": "...", "x": ..., "y": ..., "width": ..., "height": ..., ...}],
        "logo": {"x": 9.0, "y": 0.1, "w": 1.0, "h": 0.5, "color": "5B9BD5"} or None,
        "slideNumber": {"x": 0.5, "y": "end", "color": "FFFFFF"} or None,
    }

Sizes may be given in inches or as percentages of the canvas; "end" as a
position anchors the item against the far edge.
"""

from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.oxml.ns import qn
from pptx.oxml.xmlchemy import OxmlElement
from pptx.shapes.shapetree import SlideShapes
from pptx.util import Inches, Pt

from .catalogs import (
    ACCENT_BAR_WIDTH,
    FOOTER_BAR_HEIGHT,
    HEADER_BAR_HEIGHT,
    LOGO_POSITION,
)

SLIDE_NUMBER_FIELD_ID = "{B6F15528-21DE-4FAA-801E-634DDDAF4B2B}"
BLANK_LAYOUT_NAME = "Blank"
BLANK_LAYOUT_INDEX = 6


def resolve_length(value, extent, size=0.0):
    """Inches for a number, a share of ``extent`` for strings like '95%',
    or the far edge less ``size`` for 'end'.
    """
    if value == "end":
        return extent - size
    if isinstance(value, str) and value.strip().endswith("%"):
        return extent * float(value.strip()[:-1]) / 100.0
    return float(value)


def set_fill_alpha(fill_parent, opacity):
    """Attach an ``a:alpha`` modifier to the solid fill under ``fill_parent``.

    ``opacity`` runs from 0 (invisible) to 1 (opaque).
    """
    solid = fill_parent.find(qn("a:solidFill"))
    if solid is None:
        return
    clr = solid.find(qn("a:srgbClr"))
    if clr is None:
        return
    for tag in ("a:alpha", "a:alphaMod", "a:alphaOff"):
        existing = clr.find(qn(tag))
        if existing is not None:
            clr.remove(existing)
    alpha = OxmlElement("a:alpha")
    alpha.set("val", str(int(round(max(0.0, min(1.0, opacity)) * 100000))))
    clr.append(alpha)


def add_bar(shapes, x, y, width, height, color):
    bar = shapes.add_shape(MSO_SHAPE.RECTANGLE, Inches(x), Inches(y), Inches(width), Inches(height))
    bar.fill.solid()
    bar.fill.fore_color.rgb = RGBColor.from_string(color)
    bar.line.fill.background()
    return bar


def add_label(shapes, text, x, y, width, height, color, size, bold=False, italic=False,
              align=PP_ALIGN.LEFT, font_name=None, middle=False):
    box = shapes.add_textbox(Inches(x), Inches(y), Inches(width), Inches(height))
    frame = box.text_frame
    frame.word_wrap = True
    if middle:
        frame.vertical_anchor = MSO_ANCHOR.MIDDLE
    paragraph = frame.paragraphs[0]
    paragraph.alignment = align
    run = paragraph.add_run()
    run.text = text
    run.font.size = Pt(size)
    run.font.bold = bold
    run.font.italic = italic
    run.font.color.rgb = RGBColor.from_string(color)
    if font_name:
        run.font.name = font_name
    return box


def add_slide_number(shapes, x, y, color, size=10):
    """Text box holding a live slide-number field."""
    box = shapes.add_textbox(Inches(x), Inches(y), Inches(0.6), Inches(0.35))
    p = box.text_frame.paragraphs[0]._p
    field = OxmlElement("a:fld")
    field.set("id", SLIDE_NUMBER_FIELD_ID)
    field.set("type", "slidenum")
    rPr = OxmlElement("a:rPr")
    rPr.set("lang", "en-US")
    rPr.set("sz", str(int(size * 100)))
    solid = OxmlElement("a:solidFill")
    srgb = OxmlElement("a:srgbClr")
    srgb.set("val", color)
    solid.append(srgb)
    rPr.append(solid)
    field.append(rPr)
    t = OxmlElement("a:t")
    t.text = "‹#›"
    field.append(t)
    p.append(field)
    return box


def _blank_layout(prs):
    for layout in prs.slide_layouts:
        if layout.name == BLANK_LAYOUT_NAME:
            return layout
    return prs.slide_layouts[BLANK_LAYOUT_INDEX]


def compose_master(prs, definition):
    """Apply ``definition`` to the presentation's single slide master."""
    master = prs.slide_master
    master.name = definition.get("name") or "MASTER_SLIDE"
    width = prs.slide_width.inches
    height = prs.slide_height.inches

    background = definition.get("background") or {}
    if background.get("color"):
        fill = master.background.fill
        fill.solid()
        fill.fore_color.rgb = RGBColor.from_string(background["color"])
        transparency = background.get("transparency")
        if transparency:
            set_fill_alpha(master._element.cSld.get_or_add_bgPr(), 1 - float(transparency) / 100.0)

    shapes = SlideShapes(master.shapes._spTree, master)
    for bar in definition.get("bars", []):
        bar_width = resolve_length(bar["width"], width)
        bar_height = resolve_length(bar["height"], height)
        add_bar(
            shapes,
            resolve_length(bar["x"], width, bar_width),
            resolve_length(bar["y"], height, bar_height),
            bar_width,
            bar_height,
            bar["color"],
        )

    logo = definition.get("logo")
    if logo:
        box = add_bar(shapes, logo["x"], logo["y"], logo["w"], logo["h"], logo["color"])
        set_fill_alpha(box._element.spPr, 0.2)
        box.line.color.rgb = RGBColor.from_string(logo["color"])
        box.line.width = Pt(1)
        add_label(shapes, "LOGO", logo["x"], logo["y"], logo["w"], logo["h"], logo["color"], 12,
                  align=PP_ALIGN.CENTER, middle=True)

    for text in definition.get("texts", []):
        text_width = resolve_length(text["width"], width)
        text_height = resolve_length(text["height"], height)
        add_label(
            shapes,
            text["text"],
            resolve_length(text["x"], width, text_width),
            resolve_length(text["y"], height, text_height),
            text_width,
            text_height,
            text.get("color", "333333"),
            text.get("fontSize", 12),
            bold=text.get("bold", False),
        )

    number = definition.get("slideNumber")
    if number:
        add_slide_number(
            shapes,
            resolve_length(number["x"], width),
            resolve_length(number["y"], height, 0.35),
            number.get("color", "333333"),
        )

    layout = _blank_layout(prs)
    layout._element.set("showMasterSp", "1")
    return master


def add_master_slide(prs):
    """Instantiate a new slide that inherits the composed master."""
    return prs.slides.add_slide(_blank_layout(prs))


def deck_master(colors):
    """Master for prompt decks: left accent bar, footer bar, page number."""
    return {
        "name": "MASTER_SLIDE",
        "background": {"color": colors["background"]},
        "bars": [
            {"x": 0, "y": 0, "width": ACCENT_BAR_WIDTH, "height": "100%", "color": colors["primary"]},
            {"x": 0, "y": "end", "width": "100%", "height": FOOTER_BAR_HEIGHT, "color": colors["accent"]},
        ],
        "slideNumber": {"x": 0.5, "y": "end", "color": colors["background"]},
    }


def table_master(title):
    return {
        "name": "TABLE_MASTER",
        "background": {"color": "FFFFFF"},
        "bars": [{"x": 0, "y": 0, "width": "100%", "height": HEADER_BAR_HEIGHT, "color": "F1F1F1"}],
        "texts": [{"text": title, "x": 0.5, "y": 0.1, "width": 5.5, "height": 0.6,
                   "fontSize": 20, "bold": True, "color": "333333"}],
        "slideNumber": {"x": 0.5, "y": "95%", "color": "333333"},
    }


def template_master(name, colors, transparency=None, footer_text=None, logo=None):
    """Master for reusable templates: header bar, footer bar, optional extras."""
    definition = {
        "name": name,
        "background": {"color": colors["background"], "transparency": transparency},
        "bars": [
            {"x": 0, "y": 0, "width": "100%", "height": HEADER_BAR_HEIGHT, "color": colors["primary"]},
            {"x": 0, "y": "end", "width": "100%", "height": FOOTER_BAR_HEIGHT, "color": colors["accent"]},
        ],
        "texts": [],
        "slideNumber": {"x": 0.5, "y": "end", "color": colors["background"]},
    }
    if footer_text:
        definition["texts"].append({
            "text": footer_text, "x": 1.2, "y": "end",
            "width": 8.0, "height": FOOTER_BAR_HEIGHT, "fontSize": 12, "color": "FFFFFF",
        })
    if logo is not None:
        placed = dict(LOGO_POSITION)
        placed.update({key: value for key, value in logo.items() if value is not None})
        placed["color"] = colors["secondary"]
        definition["logo"] = placed
    return definition
