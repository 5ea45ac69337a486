"""Prompt-to-presentation pipeline: generate, interpret, default, render."""

import base64
import logging
import re
from collections import namedtuple

from .document import apply_defaults, reconcile_slide_count, resolve_canvas, xml_safe
from .errors import DeckRequestError
from .fallback import synthesize_from_prompt
from .interpreter import interpret_response
from .prompts import build_instruction
from .renderer import render_document, serialize, set_properties

logger = logging.getLogger(__name__)

DEFAULT_SLIDE_COUNT = 5
MIN_SLIDES = 1
MAX_SLIDES = 20
PPTX_MIMETYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

GeneratedDeck = namedtuple("GeneratedDeck", ["content", "filename", "data"])

_FALSE_STRINGS = {"false", "0", "no", "off"}


def clamp_slide_count(value):
    try:
        count = int(value)
    except (TypeError, ValueError):
        count = DEFAULT_SLIDE_COUNT
    return max(MIN_SLIDES, min(MAX_SLIDES, count))


def _flag(value, default=True):
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def optional_text(value):
    if isinstance(value, str):
        return xml_safe(value).strip() or None
    return None


def parse_prompt_request(payload):
    """Validate a generate-from-prompt body into normalized options."""
    payload = payload if isinstance(payload, dict) else {}
    prompt = payload.get("prompt")
    if not isinstance(prompt, str) or not xml_safe(prompt).strip():
        raise DeckRequestError("Prompt is required")

    sections = payload.get("sections")
    if sections is not None and not isinstance(sections, list):
        raise DeckRequestError("sections must be a list of strings")

    theme = payload.get("theme")
    if isinstance(theme, dict):
        theme = dict(theme)

    return {
        "prompt": xml_safe(prompt).strip(),
        "slideCount": clamp_slide_count(payload.get("slideCount", DEFAULT_SLIDE_COUNT)),
        "author": optional_text(payload.get("author")),
        "company": optional_text(payload.get("company")),
        "contactEmail": optional_text(payload.get("contactEmail")),
        "layout": optional_text(payload.get("layout")),
        "theme": theme,
        "includeCharts": _flag(payload.get("includeCharts")),
        "includeImages": _flag(payload.get("includeImages")),
        "sections": sections,
    }


def deck_filename(name, suffix=""):
    """Download name: the first 30 characters of ``name`` with non-alphanumerics as ``_``."""
    return re.sub(r"[^a-zA-Z0-9]", "_", name[:30]) + suffix + ".pptx"


def _comments(options):
    parts = []
    if options.get("company"):
        parts.append(f"Company: {options['company']}")
    if options.get("contactEmail"):
        parts.append(f"Contact: {options['contactEmail']}")
    return "; ".join(parts) or None


def draft_document(options, generate_text):
    """Return ``(document, used_fallback)`` for the request's prompt.

    ``generate_text`` is the generation service: instruction text in, raw
    text out. Any error it raises is recovered with the template fallback.
    """
    prompt = options["prompt"]
    count = options["slideCount"]
    instruction = build_instruction(
        prompt, count, options["includeCharts"], options["includeImages"]
    )
    try:
        raw = generate_text(instruction)
    except Exception as exc:
        logger.warning("Generation service failed, using template fallback: %s", exc)
        return synthesize_from_prompt(prompt, count), True

    interpretation = interpret_response(raw)
    return interpretation.document, interpretation.used_fallback


def generate_from_prompt(options, generate_text):
    """Run the whole pipeline; returns a :data:`GeneratedDeck`."""
    logger.info(
        "Generating presentation: prompt of %d chars, %d slides requested",
        len(options["prompt"]), options["slideCount"],
    )
    document, used_fallback = draft_document(options, generate_text)
    reconcile_slide_count(document, options["slideCount"])

    canvas = resolve_canvas(options.get("layout"))
    document = apply_defaults(
        document, canvas, theme_override=options.get("theme"), sections=options.get("sections")
    )
    deck = render_document(
        document, canvas, options["includeCharts"], options["includeImages"]
    )
    set_properties(
        deck.presentation,
        title=document["title"],
        subject=f"Presentation about {options['prompt']}",
        author=options.get("author"),
        comments=_comments(options),
    )
    content = serialize(deck.presentation)
    filename = deck_filename(options["prompt"])
    logger.info("Generated %d slides (fallback: %s)", len(document["slides"]), used_fallback)

    return GeneratedDeck(content, filename, {
        "presentation": base64.b64encode(content).decode("ascii"),
        "format": "pptx",
        "filename": filename,
        "slideCount": len(document["slides"]),
        "theme": document["theme"],
        "usedFallback": used_fallback,
    })
