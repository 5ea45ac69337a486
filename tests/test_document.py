from __future__ import annotations

import json

import pytest

from deckgen.catalogs import DEFAULT_COLORS, DEFAULT_LAYOUTS, FALLBACK_POINTS
from deckgen.document import (
    apply_defaults,
    normalize_color,
    parse_theme_override,
    reconcile_slide_count,
    resolve_canvas,
    xml_safe,
)


def test_empty_document_gets_full_defaults() -> None:
    document = apply_defaults({})

    assert document["title"] == "Presentation"
    assert document["theme"]["colorScheme"] == DEFAULT_COLORS
    assert document["theme"]["fonts"] == {"title": "Segoe UI", "body": "Calibri"}
    assert document["slides"] == []


def test_layout_fields_are_numeric_after_defaulting() -> None:
    document = apply_defaults({"slides": [{
        "title": "T",
        "layout": {"titlePosition": {"x": "abc", "y": 1}, "contentStyle": {"fontSize": "18"}},
    }]})
    layout = document["slides"][0]["layout"]
    defaults = DEFAULT_LAYOUTS["16x9"]

    assert layout["titlePosition"]["x"] == defaults["titlePosition"]["x"]
    assert layout["titlePosition"]["y"] == 1.0
    assert layout["contentStyle"]["fontSize"] == 18.0
    assert layout["contentStyle"]["bullet"] is True
    for region in ("titlePosition", "contentPosition"):
        for key in ("x", "y", "width", "height"):
            assert isinstance(layout[region][key], (int, float))


def test_wide_canvas_uses_its_own_layout_row() -> None:
    document = apply_defaults({"slides": [{"title": "T"}]}, canvas="wide")

    assert document["slides"][0]["layout"]["titlePosition"]["width"] == 11.7


def test_slide_fields_resolve_to_known_values() -> None:
    document = apply_defaults({"slides": [
        {"slideType": "weird", "content": ["a", "", None, "b"]},
        {"slideType": "CHART", "content": [], "description": "About charts"},
        {"content": "just one"},
        {},
    ]})
    slides = document["slides"]

    assert slides[0]["slideType"] == "content"
    assert slides[0]["content"] == ["a", "b"]
    assert slides[1]["slideType"] == "chart"
    assert slides[1]["content"] == ["About charts"]
    assert slides[2]["content"] == ["just one"]
    assert slides[3]["content"] == [FALLBACK_POINTS[0]]
    assert [slide["id"] for slide in slides] == ["slide-1", "slide-2", "slide-3", "slide-4"]


def test_visual_elements_are_normalized() -> None:
    document = apply_defaults({"slides": [{"visualElements": [
        {"type": "shape", "color": "not-a-colour", "opacity": 5, "rotate": "45"},
        {"type": "TEXT", "text": "Hi", "position": {"x": 2}},
        "not an element",
    ]}]})
    shape, text = document["slides"][0]["visualElements"]

    assert shape["color"] == DEFAULT_COLORS["primary"]
    assert shape["opacity"] == 1.0
    assert shape["rotation"] == 45.0
    assert text["type"] == "text"
    assert text["position"] == {"x": 2.0, "y": 0, "width": 1, "height": 1}
    assert text["fontSize"] == 20


def test_invalid_ai_colours_fall_back_per_key(raw_document: dict) -> None:
    raw_document["theme"]["colorScheme"]["accent"] = "orange"
    theme = apply_defaults(raw_document)["theme"]["colorScheme"]

    assert theme["primary"] == "112233"
    assert theme["accent"] == DEFAULT_COLORS["accent"]


def test_theme_override_is_key_scoped(raw_document: dict) -> None:
    override = json.dumps({"colorScheme": {"primary": "#ABCDEF"}})
    theme = apply_defaults(raw_document, theme_override=override)["theme"]

    assert theme["colorScheme"] == {
        "primary": "ABCDEF",
        "secondary": "445566",
        "accent": "778899",
        "background": "FFFFFF",
        "text": "222222",
    }
    assert theme["fonts"] == {"title": "Georgia", "body": "Arial"}


@pytest.mark.parametrize(
    "override",
    [
        "not json {",
        "[1, 2]",
        json.dumps({"colorScheme": {"primary": "#000000", "secondary": "nope"}}),
        json.dumps({"colorScheme": "red"}),
        json.dumps({"fonts": {"title": 12}}),
    ],
)
def test_bad_theme_override_is_discarded_whole(raw_document: dict, override: str) -> None:
    assert parse_theme_override(override) is None

    theme = apply_defaults(raw_document, theme_override=override)["theme"]
    assert theme["colorScheme"]["primary"] == "112233"
    assert theme["fonts"]["title"] == "Georgia"


def test_theme_override_accepts_mapping() -> None:
    override = parse_theme_override({"fonts": {"body": " Verdana "}, "colorScheme": {"text": "#abc"}})

    assert override == {"colorScheme": {"text": "AABBCC"}, "fonts": {"body": "Verdana"}}


def test_caller_sections_replace_document_sections(raw_document: dict) -> None:
    document = apply_defaults(raw_document, sections=["Alpha", " ", "Beta"])

    assert document["sections"] == [
        {"title": "Alpha", "order": 1},
        {"title": "Beta", "order": 2},
    ]


def test_document_sections_are_kept_without_caller_list(raw_document: dict) -> None:
    document = apply_defaults(raw_document)

    assert [section["title"] for section in document["sections"]] == ["Opening", "Numbers"]


def _deck(count: int, closing: str = "conclusion") -> dict:
    slides = [{"id": "s%d" % i, "slideType": "content", "title": "S%d" % i} for i in range(count)]
    slides[-1]["slideType"] = closing
    return {"slides": slides}


def test_long_deck_keeps_head_and_closing_slide() -> None:
    document = reconcile_slide_count(_deck(10), 4)

    assert [slide["id"] for slide in document["slides"]] == ["s0", "s1", "s2", "s9"]


def test_single_slide_request_keeps_first_slide() -> None:
    document = reconcile_slide_count(_deck(6), 1)

    assert [slide["id"] for slide in document["slides"]] == ["s0"]


def test_short_deck_is_padded_before_conclusion() -> None:
    document = reconcile_slide_count(_deck(3), 5)
    slides = document["slides"]

    assert [slide["title"] for slide in slides] == ["S0", "S1", "Key Concepts", "Use Cases", "S2"]
    assert slides[2]["id"] == "slide-3"
    assert slides[2]["slideType"] == "content"


def test_closing_slide_type_is_matched_case_insensitively() -> None:
    document = reconcile_slide_count(_deck(3, closing=" Conclusion "), 4)

    assert [slide["title"] for slide in document["slides"]] == ["S0", "S1", "Key Concepts", "S2"]


def test_short_deck_without_conclusion_is_appended() -> None:
    document = reconcile_slide_count(_deck(2, closing="content"), 20)

    assert len(document["slides"]) == 20
    assert document["slides"][1]["id"] == "s1"
    assert len({slide["id"] for slide in document["slides"]}) == 20


@pytest.mark.parametrize(
    "layout, expected",
    [("wide", "wide"), ("LAYOUT_WIDE", "wide"), ("4x3", "4x3"), ("LAYOUT_16x10", "16x10"),
     ("bogus", "16x9"), (None, "16x9")],
)
def test_resolve_canvas(layout, expected: str) -> None:
    assert resolve_canvas(layout) == expected


@pytest.mark.parametrize(
    "value, allow_alpha, expected",
    [("#a1b2c3", False, "A1B2C3"), ("fff", False, "FFFFFF"), ("11223344", True, "11223344"),
     ("11223344", False, "112233"), ("#12345", False, None), (123456, False, None)],
)
def test_normalize_color(value, allow_alpha: bool, expected) -> None:
    assert normalize_color(value, allow_alpha) == expected


def test_xml_illegal_characters_are_stripped_from_text() -> None:
    document = apply_defaults({
        "title": "Deck\x00",
        "slides": [{"title": "One\x1b", "content": ["tab\tkept", "bell\x07"]}],
    })

    assert xml_safe("a\x0cb\ufffe\r\n") == "ab\r\n"
    assert document["title"] == "Deck"
    assert document["slides"][0]["title"] == "One"
    assert document["slides"][0]["content"] == ["tab\tkept", "bell"]
