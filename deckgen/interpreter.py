"""Turn raw generation-service text into a presentation document.

The stages are tried in order and the first one that yields a usable
document wins. When none does, the Fallback Synthesizer builds one from
the raw text, so interpretation never raises.
"""

import json
import logging
import re
from collections import namedtuple

from .fallback import synthesize_from_text

logger = logging.getLogger(__name__)

Interpretation = namedtuple("Interpretation", ["document", "used_fallback", "stage"])

FENCED_JSON = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```")
BRACED_JSON = re.compile(r"(\{[\s\S]*\})")

_ESCAPED_NEWLINE = re.compile(r"\\n")
_WHITESPACE_RUN = re.compile(r"\s+")
_TRAILING_COMMA_OBJECT = re.compile(r",\s*}")
_TRAILING_COMMA_ARRAY = re.compile(r",\s*]")
_LOOSE_KEY = re.compile(r"(['\"])?([a-zA-Z0-9_]+)(['\"])?\s*:")


def is_usable(parsed):
    """A document needs to be an object carrying a non-empty slide list."""
    return (
        isinstance(parsed, dict)
        and isinstance(parsed.get("slides"), list)
        and len(parsed["slides"]) > 0
    )


def _loads(text):
    try:
        return json.loads(text)
    except (TypeError, ValueError, RecursionError):
        return None


def repair_json(candidate):
    """Best-effort cleanup of almost-JSON emitted by language models."""
    cleaned = _ESCAPED_NEWLINE.sub(" ", candidate)
    cleaned = _WHITESPACE_RUN.sub(" ", cleaned)
    cleaned = _TRAILING_COMMA_OBJECT.sub("}", cleaned)
    cleaned = _TRAILING_COMMA_ARRAY.sub("]", cleaned)
    return _LOOSE_KEY.sub(r'"\2":', cleaned)


def parse_whole(text):
    return _loads(text)


def parse_fenced(text):
    match = FENCED_JSON.search(text)
    if match:
        return _loads(match.group(1))
    return None


def parse_repaired(text):
    for candidate in BRACED_JSON.findall(text):
        parsed = _loads(repair_json(candidate))
        if is_usable(parsed):
            return parsed
    return None


PARSE_STAGES = (
    ("direct", parse_whole),
    ("fenced", parse_fenced),
    ("repaired", parse_repaired),
)


def interpret_response(text):
    """Return an :class:`Interpretation` for ``text``; never raises."""
    raw = text if isinstance(text, str) else ""
    for stage, parse in PARSE_STAGES:
        parsed = parse(raw)
        if is_usable(parsed):
            logger.info("Generation response interpreted via %s parse", stage)
            return Interpretation(parsed, False, stage)
        logger.debug("%s parse yielded no usable document", stage)

    logger.warning("Generation response not interpretable, synthesizing fallback document")
    return Interpretation(synthesize_from_text(raw), True, "fallback")
