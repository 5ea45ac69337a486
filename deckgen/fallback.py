"""Heuristic document synthesis for when generation output cannot be parsed.

Both entry points always return a complete document: ``synthesize_from_text``
scavenges whatever titles, colours and bullets it can find in raw text, and
``synthesize_from_prompt`` builds a fixed template when the generation
service produced nothing at all.
"""

import copy
import re

from .catalogs import (
    DEFAULT_COLORS,
    DEFAULT_FONTS,
    DEFAULT_LAYOUTS,
    DEFAULT_CANVAS,
    DEFAULT_THEME,
    FALLBACK_FILLER,
    FALLBACK_POINTS,
    FALLBACK_SLIDE_TITLES,
    FALLBACK_THEME_STYLE,
    FALLBACK_TITLE,
    FALLBACK_VISUALS,
    MIN_FALLBACK_POINTS,
    MIN_FALLBACK_SLIDES,
    SAMPLE_CHART_DATA,
    TEMPLATE_POINTS,
    TEMPLATE_SECTIONS,
    TEMPLATE_TABLE,
)

# The same pattern matches the document title and every slide title, so the
# document title usually reappears as the first slide title.
QUOTED_TITLE = re.compile(r"[\"']title[\"']\s*:\s*[\"']([^\"']+)[\"']")
HEX_COLOR = re.compile(r"#([0-9A-Fa-f]{6})")
CONTENT_ARRAY = re.compile(r"[\"']content[\"'][^\[]*\[([\s\S]*?)\]")
ITEM_SEPARATOR = re.compile(r"[\"'],\s*[\"']")
_EDGE_QUOTES = re.compile(r"^[\"']|[\"']$")

COLOR_ROLES = ("primary", "secondary", "accent")


def slide_type_for(index, count):
    if index == 0:
        return "title"
    if index == count - 1:
        return "conclusion"
    if index % 3 == 0:
        return "chart"
    if index % 2 == 0:
        return "comparison"
    return "content"


def extract_title(text):
    match = QUOTED_TITLE.search(text)
    return match.group(1) if match else FALLBACK_TITLE


def extract_colors(text):
    colors = dict(DEFAULT_COLORS)
    for role, match in zip(COLOR_ROLES, HEX_COLOR.finditer(text)):
        colors[role] = match.group(1).upper()
    return colors


def extract_slide_titles(text):
    titles = QUOTED_TITLE.findall(text)
    while len(titles) < MIN_FALLBACK_SLIDES:
        titles.append(FALLBACK_SLIDE_TITLES[len(titles)])
    return titles


def extract_points(text):
    points = []
    for interior in CONTENT_ARRAY.findall(text):
        for item in ITEM_SEPARATOR.split(interior):
            item = _EDGE_QUOTES.sub("", item.strip()).strip()
            if item:
                points.append(item)
    while len(points) < MIN_FALLBACK_POINTS:
        points.append(FALLBACK_POINTS[len(points) % len(FALLBACK_POINTS)])
    return points


def visuals_for(slide_type, colors):
    """Materialize the catalog decorations for ``slide_type`` in ``colors``."""
    elements = copy.deepcopy(FALLBACK_VISUALS.get(slide_type, FALLBACK_VISUALS["content"]))
    for element in elements:
        element["color"] = colors[element["color"]] + element.pop("tint", "")
        outline = element.get("outline")
        if outline:
            outline["color"] = colors[outline["color"]]
    return elements


def _layout():
    return copy.deepcopy(DEFAULT_LAYOUTS[DEFAULT_CANVAS])


def _pick(points, index):
    return points[index] if index < len(points) else FALLBACK_FILLER


def synthesize_from_text(text):
    """Build a schema-complete document from arbitrary (possibly empty) text."""
    text = text or ""
    colors = extract_colors(text)
    titles = extract_slide_titles(text)
    points = extract_points(text)

    slides = []
    for index, title in enumerate(titles):
        slide_type = slide_type_for(index, len(titles))
        slides.append({
            "id": f"slide-{index + 1}",
            "slideType": slide_type,
            "title": title,
            "description": f"Slide about {title.lower()}",
            "layout": _layout(),
            "content": [
                _pick(points, index * 2),
                _pick(points, index * 2 + 1),
                _pick(points, index * 2 + 2),
            ],
            "visualElements": visuals_for(slide_type, colors),
            "speakerNotes": f"Speaker notes for the {title.lower()} slide",
        })

    theme = {"colorScheme": colors, "fonts": dict(DEFAULT_FONTS)}
    theme.update(FALLBACK_THEME_STYLE)
    return {
        "title": extract_title(text),
        "theme": theme,
        "sections": [],
        "slides": slides,
    }


def _template_section(index, count):
    if index == 0:
        return "Introduction"
    if index == count - 1:
        return "Conclusion"
    return "Key Points" if index < count / 2 else "Details"


def _template_title(prompt, index, count):
    if index == 0:
        return prompt
    if index == count - 1:
        return "Conclusion"
    return f"Key Point {index}"


def synthesize_from_prompt(prompt, slide_count):
    """Fixed template used when the generation service call itself failed."""
    count = max(1, int(slide_count))
    theme = copy.deepcopy(DEFAULT_THEME)
    colors = theme["colorScheme"]

    slides = []
    for index in range(count):
        slide_type = slide_type_for(index, count)
        title = _template_title(prompt, index, count)
        if index == 0:
            visuals = visuals_for("title", colors)
        else:
            visuals = visuals_for("content", colors)
            visuals[0]["color"] = colors["primary"] if index % 2 == 0 else colors["secondary"]
        slide = {
            "id": f"slide-{index + 1}",
            "sectionTitle": _template_section(index, count),
            "slideType": slide_type,
            "title": title,
            "description": f"Slide about {title.lower()}",
            "layout": _layout(),
            "content": list(TEMPLATE_POINTS),
            "visualElements": visuals,
            "speakerNotes": f"Speaker notes for slide {index + 1}",
        }
        if index % 3 == 0:
            slide["chartData"] = {
                "chartType": "bar",
                "title": "Data Analysis",
                "data": copy.deepcopy(SAMPLE_CHART_DATA),
            }
        if index % 4 == 2:
            slide["tableData"] = copy.deepcopy(TEMPLATE_TABLE)
        if index % 5 == 3:
            slide["imageData"] = {"placeholder": f"Image related to {prompt}"}
        slides.append(slide)

    return {
        "title": f"Presentation: {prompt}",
        "theme": theme,
        "sections": [
            {"title": name, "order": order}
            for order, name in enumerate(TEMPLATE_SECTIONS, start=1)
        ],
        "slides": slides,
    }
