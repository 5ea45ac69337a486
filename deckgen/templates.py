"""Reusable master templates with a demonstration slide."""

import base64
import logging

from pptx.dml.color import RGBColor
from pptx.util import Inches, Pt

from .catalogs import DEFAULT_COLORS, DEFAULT_FONTS, LOGO_POSITION
from .document import _number, normalize_color, xml_safe
from .errors import DeckRequestError
from .master import add_label, add_master_slide, compose_master, template_master
from .pipeline import GeneratedDeck, deck_filename
from .renderer import new_presentation, serialize, set_properties

logger = logging.getLogger(__name__)

DEMO_TITLE = "Slide Title"
DEMO_BULLETS = ["Sample Content", "Bullet point 2", "Bullet point 3"]


def template_colors(color_scheme=None, background=None):
    """Per-key colours with defaults; ``background.color`` wins over the scheme."""
    color_scheme = color_scheme if isinstance(color_scheme, dict) else {}
    colors = {
        key: normalize_color(color_scheme.get(key)) or default
        for key, default in DEFAULT_COLORS.items()
    }
    if isinstance(background, dict) and normalize_color(background.get("color")):
        colors["background"] = normalize_color(background["color"])
    return colors


def _transparency(background):
    if not isinstance(background, dict):
        return None
    try:
        value = float(background.get("transparency"))
    except (TypeError, ValueError):
        return None
    return max(0.0, min(100.0, value))


def _logo(logo_path, logo_position):
    if isinstance(logo_position, dict):
        return {key: _number(logo_position.get(key), default) for key, default in LOGO_POSITION.items()}
    if logo_path:
        return {}
    return None


def add_demo_slide(prs, colors, fonts):
    slide = add_master_slide(prs)
    add_label(slide.shapes, DEMO_TITLE, 0.5, 1.0, 9.0, 0.8, colors["text"], 32,
              bold=True, font_name=fonts["title"])

    frame = slide.shapes.add_textbox(Inches(0.5), Inches(2.0), Inches(9.0), Inches(3.0)).text_frame
    frame.word_wrap = True
    for index, point in enumerate(DEMO_BULLETS):
        p = frame.paragraphs[0] if index == 0 else frame.add_paragraph()
        p.text = f"• {point}"
        for run in p.runs:
            run.font.size = Pt(20)
            run.font.name = fonts["body"]
            run.font.color.rgb = RGBColor.from_string(colors["text"])
    return slide


def create_master_template(title, background=None, color_scheme=None, fonts=None,
                           logo_path=None, logo_position=None, footer_text=None):
    """Presentation holding a named master plus one slide that shows it off."""
    if not isinstance(title, str) or not xml_safe(title).strip():
        raise DeckRequestError("Template title is required")
    title = xml_safe(title).strip()
    if isinstance(footer_text, str):
        footer_text = xml_safe(footer_text).strip() or None
    else:
        footer_text = None

    colors = template_colors(color_scheme, background)
    fonts = fonts if isinstance(fonts, dict) else {}
    resolved_fonts = {
        key: fonts[key].strip() if isinstance(fonts.get(key), str) and fonts[key].strip() else default
        for key, default in DEFAULT_FONTS.items()
    }
    logger.info("Creating master template %r", title)

    prs = new_presentation()
    compose_master(prs, template_master(
        title,
        colors,
        transparency=_transparency(background),
        footer_text=footer_text,
        logo=_logo(logo_path, logo_position),
    ))
    add_demo_slide(prs, colors, resolved_fonts)
    set_properties(prs, title=title, subject="Master template")

    content = serialize(prs)
    filename = deck_filename(title, "_Template")
    return GeneratedDeck(content, filename, {
        "template": base64.b64encode(content).decode("ascii"),
        "format": "pptx",
        "filename": filename,
        "masterName": title,
    })
