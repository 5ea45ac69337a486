"""Document defaulting, theme merge, sections and slide-count reconciliation."""

import copy
import json
import logging
import re

from .catalogs import (
    CANVASES,
    DEFAULT_CANVAS,
    DEFAULT_COLORS,
    DEFAULT_FONTS,
    DEFAULT_LAYOUTS,
    DEFAULT_THEME,
    ELEMENT_POSITION_DEFAULTS,
    FALLBACK_POINTS,
    PADDING_TITLES,
    SLIDE_TYPES,
    TEMPLATE_POINTS,
)
from .fallback import visuals_for

logger = logging.getLogger(__name__)

_HEX6 = re.compile(r"^[0-9A-Fa-f]{6}$")
_HEX8 = re.compile(r"^[0-9A-Fa-f]{8}$")
_HEX3 = re.compile(r"^[0-9A-Fa-f]{3}$")
# Characters XML 1.0 cannot carry.
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

POSITION_KEYS = ("x", "y", "width", "height")
STYLE_THEME_KEYS = ("visualStyle", "layoutPrinciple", "backgroundStyle")


def resolve_canvas(layout):
    """Map a caller layout name onto a known canvas key."""
    name = str(layout or "").strip().lower()
    if name in ("wide", "layout_wide"):
        return "wide"
    name = name.replace("layout_", "")
    return name if name in CANVASES else DEFAULT_CANVAS


def normalize_color(value, allow_alpha=False):
    """Return an upper-case hex colour without '#', or None if invalid.

    With ``allow_alpha`` an 8-digit value keeps its trailing alpha byte.
    """
    if not isinstance(value, str):
        return None
    text = value.strip().lstrip("#")
    if _HEX6.match(text):
        return text.upper()
    if _HEX3.match(text):
        return "".join(ch * 2 for ch in text).upper()
    if _HEX8.match(text):
        return text.upper() if allow_alpha else text[:6].upper()
    return None


def _number(value, default):
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number != number or number in (float("inf"), float("-inf")):
        return default
    return number


def xml_safe(text):
    """Drop characters that cannot be stored in the presentation XML."""
    return _XML_ILLEGAL.sub("", text)


def _text(value, default=""):
    if value is None:
        return default
    if isinstance(value, str):
        return xml_safe(value)
    if isinstance(value, (int, float)):
        return str(value)
    return default


def _mapping(value):
    return value if isinstance(value, dict) else {}


def default_theme(theme):
    """Fill every colour/font key; invalid colours fall back per key."""
    theme = _mapping(theme)
    colors = _mapping(theme.get("colorScheme"))
    fonts = _mapping(theme.get("fonts"))
    resolved = {
        "colorScheme": {
            key: normalize_color(colors.get(key)) or default
            for key, default in DEFAULT_COLORS.items()
        },
        "fonts": {
            key: _text(fonts.get(key)).strip() or default
            for key, default in DEFAULT_FONTS.items()
        },
    }
    for key in STYLE_THEME_KEYS:
        resolved[key] = _text(theme.get(key)) or DEFAULT_THEME[key]
    return resolved


def parse_theme_override(payload):
    """Parse a caller theme blob into ``{"colorScheme": {...}, "fonts": {...}}``.

    Returns None for anything that is not a well-formed override; such
    payloads are discarded as a whole.
    """
    if payload is None or payload == "":
        return None
    data = payload
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except (TypeError, ValueError):
            logger.debug("Discarding unparseable theme override")
            return None
    if not isinstance(data, dict):
        logger.debug("Discarding theme override that is not an object")
        return None

    override = {"colorScheme": {}, "fonts": {}}
    colors = data.get("colorScheme", {})
    fonts = data.get("fonts", {})
    if not isinstance(colors, dict) or not isinstance(fonts, dict):
        logger.debug("Discarding theme override with malformed sections")
        return None
    for key, value in colors.items():
        if key not in DEFAULT_COLORS:
            continue
        color = normalize_color(value)
        if color is None:
            logger.debug("Discarding theme override with invalid colour %r", value)
            return None
        override["colorScheme"][key] = color
    for key, value in fonts.items():
        if key not in DEFAULT_FONTS:
            continue
        if not isinstance(value, str) or not value.strip():
            logger.debug("Discarding theme override with invalid font %r", value)
            return None
        override["fonts"][key] = value.strip()
    return override


def merge_theme(theme, override):
    """Shallow-merge a parsed override into colorScheme and fonts."""
    merged = copy.deepcopy(theme)
    if not override:
        return merged
    merged["colorScheme"].update(override.get("colorScheme", {}))
    merged["fonts"].update(override.get("fonts", {}))
    return merged


def _default_block(value, defaults):
    value = _mapping(value)
    block = {}
    for key, default in defaults.items():
        if isinstance(default, bool):
            block[key] = value[key] if isinstance(value.get(key), bool) else default
        elif isinstance(default, (int, float)):
            block[key] = _number(value.get(key), default)
        else:
            block[key] = _text(value.get(key)).strip().lower() or default
    return block


def default_layout(layout, canvas=DEFAULT_CANVAS):
    layout = _mapping(layout)
    defaults = DEFAULT_LAYOUTS[canvas]
    return {
        region: _default_block(layout.get(region), region_defaults)
        for region, region_defaults in defaults.items()
    }


def default_position(position, defaults=ELEMENT_POSITION_DEFAULTS):
    """Numeric x/y/width/height; missing or invalid keys come from ``defaults``."""
    position = _mapping(position)
    return {key: _number(position.get(key), defaults[key]) for key in POSITION_KEYS}


def _default_element(element, colors):
    element = dict(element)
    kind = _text(element.get("type")).strip().lower()
    element["type"] = kind
    element["position"] = default_position(element.get("position"))
    element["color"] = normalize_color(element.get("color"), allow_alpha=True) or colors["primary"]
    if kind == "shape":
        element["opacity"] = min(1.0, max(0.0, _number(element.get("opacity"), 1.0)))
        if "rotate" in element or "rotation" in element:
            element["rotation"] = _number(element.get("rotation", element.get("rotate")), 0.0)
    elif kind == "text":
        element["text"] = _text(element.get("text"))
        element["fontSize"] = _number(element.get("fontSize"), 20)
    elif kind == "chart":
        element["title"] = _text(element.get("title"))
    return element


def _content_list(slide):
    content = slide.get("content")
    if isinstance(content, str):
        content = [content]
    items = [_text(item).strip() for item in content] if isinstance(content, list) else []
    items = [item for item in items if item]
    if not items:
        description = _text(slide.get("description")).strip()
        items = [description or FALLBACK_POINTS[0]]
    return items


def default_slide(slide, index, colors, canvas=DEFAULT_CANVAS):
    slide = _mapping(slide)
    slide_type = _text(slide.get("slideType")).strip().lower()
    elements = slide.get("visualElements")
    elements = elements if isinstance(elements, list) else []

    defaulted = dict(slide)
    defaulted.update({
        "id": _text(slide.get("id")).strip() or f"slide-{index + 1}",
        "slideType": slide_type if slide_type in SLIDE_TYPES else "content",
        "title": _text(slide.get("title")).strip(),
        "description": _text(slide.get("description")),
        "layout": default_layout(slide.get("layout"), canvas),
        "content": _content_list(slide),
        "visualElements": [
            _default_element(element, colors) for element in elements if isinstance(element, dict)
        ],
    })
    section = _text(slide.get("sectionTitle")).strip()
    if section:
        defaulted["sectionTitle"] = section
    else:
        defaulted.pop("sectionTitle", None)
    notes = _text(slide.get("speakerNotes")).strip()
    if notes:
        defaulted["speakerNotes"] = notes
    else:
        defaulted.pop("speakerNotes", None)
    for key in ("chartData", "tableData", "imageData"):
        if not isinstance(slide.get(key), dict):
            defaulted.pop(key, None)
    return defaulted


def default_sections(sections):
    resolved = []
    for index, section in enumerate(sections if isinstance(sections, list) else []):
        if isinstance(section, dict):
            title = _text(section.get("title")).strip()
            order = _number(section.get("order"), index + 1)
        else:
            title, order = _text(section).strip(), index + 1
        if title:
            resolved.append({"title": title, "order": order})
    return sorted(resolved, key=lambda section: section["order"])


def replace_sections(document, section_titles):
    """Caller sections replace the document's own list when given."""
    titles = [_text(title).strip() for title in section_titles or []]
    titles = [title for title in titles if title]
    if titles:
        document["sections"] = [
            {"title": title, "order": order} for order, title in enumerate(titles, start=1)
        ]
    return document


def apply_defaults(document, canvas=DEFAULT_CANVAS, theme_override=None, sections=None):
    """Return a fully defaulted copy of ``document``.

    ``theme_override`` is the raw caller blob; ``sections`` is an optional
    caller list of section titles.
    """
    document = _mapping(document)
    theme = merge_theme(default_theme(document.get("theme")), parse_theme_override(theme_override))
    colors = theme["colorScheme"]
    slides = document.get("slides") if isinstance(document.get("slides"), list) else []

    resolved = {
        "title": _text(document.get("title")).strip() or "Presentation",
        "theme": theme,
        "sections": default_sections(document.get("sections")),
        "slides": [default_slide(slide, index, colors, canvas) for index, slide in enumerate(slides)],
    }
    return replace_sections(resolved, sections)


def _padding_slide(position, colors):
    title = PADDING_TITLES[position % len(PADDING_TITLES)]
    return {
        "slideType": "content",
        "title": title,
        "description": f"Slide about {title.lower()}",
        "content": list(TEMPLATE_POINTS),
        "visualElements": visuals_for("content", colors),
    }


def reconcile_slide_count(document, slide_count):
    """Truncate or pad ``document["slides"]`` to exactly ``slide_count``.

    Longer decks keep their first ``n - 1`` slides plus the closing slide.
    Shorter decks get filler content slides ahead of a closing conclusion,
    or appended when the deck has none.
    """
    target = max(1, int(slide_count))
    slides = list(_mapping(document).get("slides") or [])
    actual = len(slides)

    if actual > target:
        slides = slides[:1] if target == 1 else slides[:target - 1] + [slides[-1]]
    elif actual < target:
        colors = default_theme(document.get("theme"))["colorScheme"]
        padding = [_padding_slide(i, colors) for i in range(target - actual)]
        closing = slides and _text(_mapping(slides[-1]).get("slideType")).strip().lower() == "conclusion"
        slides = slides[:-1] + padding + slides[-1:] if closing else slides + padding

    if actual != target:
        logger.info("Reconciled slide count from %d to %d", actual, target)
        used = {_mapping(slide).get("id") for slide in slides}
        for index, slide in enumerate(slides):
            if isinstance(slide, dict) and not slide.get("id"):
                candidate = f"slide-{index + 1}"
                while candidate in used:
                    candidate += "b"
                slide["id"] = candidate
                used.add(candidate)
    document["slides"] = slides
    return document
