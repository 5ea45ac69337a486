from __future__ import annotations

import json
import os
from io import BytesIO

import pytest
from pptx import Presentation

os.environ.setdefault("GOOGLE_API_KEY", "test-key")


def open_deck(content: bytes):
    return Presentation(BytesIO(content))


def shape_texts(shapes) -> list[str]:
    return [shape.text_frame.text for shape in shapes if shape.has_text_frame]


@pytest.fixture
def raw_document() -> dict:
    return {
        "title": "Quarterly Review",
        "theme": {
            "colorScheme": {
                "primary": "#112233",
                "secondary": "#445566",
                "accent": "#778899",
                "background": "#FFFFFF",
                "text": "#222222",
            },
            "fonts": {"title": "Georgia", "body": "Arial"},
        },
        "sections": [{"title": "Opening", "order": 1}, {"title": "Numbers", "order": 2}],
        "slides": [
            {
                "id": "s1",
                "sectionTitle": "Opening",
                "slideType": "title",
                "title": "Welcome",
                "content": ["Agenda", "Goals"],
                "visualElements": [
                    {"type": "shape", "shape": "rect", "position": {"x": 0, "y": 0, "width": 3, "height": 5.63},
                     "color": "#112233", "opacity": 0.8},
                ],
                "speakerNotes": "Greet the room",
            },
            {
                "id": "s2",
                "slideType": "chart",
                "title": "Revenue",
                "content": ["Revenue grew"],
                "chartData": {
                    "chartType": "line",
                    "title": "Revenue by quarter",
                    "data": {"labels": ["Q1", "Q2", "Q3"], "values": [1, 2, 3]},
                },
            },
            {
                "id": "s3",
                "sectionTitle": "Numbers",
                "slideType": "conclusion",
                "title": "Thanks",
                "content": ["Questions?"],
            },
        ],
    }


@pytest.fixture
def raw_text(raw_document: dict) -> str:
    return json.dumps(raw_document)


@pytest.fixture
def flask_app():
    from app import app

    app.config.update(TESTING=True)
    yield app
    app.config.pop("GENERATE_TEXT", None)


@pytest.fixture
def client(flask_app):
    with flask_app.test_client() as client:
        yield client
