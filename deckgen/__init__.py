"""Presentation generation core: interpret, synthesize, default and render decks."""

from .errors import DeckRequestError, TableNotFoundError
from .interpreter import interpret_response
from .pipeline import (
    PPTX_MIMETYPE,
    GeneratedDeck,
    generate_from_prompt,
    parse_prompt_request,
)
from .tables import generate_from_table
from .templates import create_master_template

__all__ = [
    "DeckRequestError",
    "GeneratedDeck",
    "PPTX_MIMETYPE",
    "TableNotFoundError",
    "create_master_template",
    "generate_from_prompt",
    "generate_from_table",
    "interpret_response",
    "parse_prompt_request",
]
