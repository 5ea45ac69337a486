"""Instruction text sent to the generation service."""

import json

SCHEMA_EXAMPLE = {
    "title": "Overall Presentation Title",
    "theme": {
        "colorScheme": {
            "primary": "#hexcode",
            "secondary": "#hexcode",
            "accent": "#hexcode",
            "background": "#hexcode",
            "text": "#hexcode",
        },
        "fonts": {"title": "Font name", "body": "Font name"},
        "visualStyle": "Description",
        "layoutPrinciple": "Description",
        "backgroundStyle": "Description",
    },
    "sections": [{"title": "Section Title", "order": 1}],
    "slides": [
        {
            "id": "slide-1",
            "sectionTitle": "Section Title",
            "slideType": "title",
            "title": "Slide Title",
            "description": "What this slide conveys",
            "layout": {
                "titlePosition": {"x": 0.8, "y": 0.5, "width": 8.4, "height": 1.2, "align": "left"},
                "contentPosition": {"x": 0.8, "y": 2.0, "width": 8.4, "height": 3.2},
                "titleStyle": {"fontSize": 38, "bold": True},
                "contentStyle": {"fontSize": 24, "bullet": True, "lineSpacing": 1.5},
            },
            "content": [
                "First bullet point (make these compelling and insightful)",
                "Second bullet point",
                "Third bullet point",
            ],
            "visualElements": [
                {
                    "type": "shape",
                    "shape": "rect",
                    "position": {"x": 0, "y": 0, "width": 3, "height": 5.63},
                    "color": "#hexcode",
                    "opacity": 0.8,
                }
            ],
            "speakerNotes": "Notes for presenter",
            "tableData": {
                "headers": ["Column 1", "Column 2", "Column 3"],
                "rows": [["Data 1", "Data 2", "Data 3"], ["Data 4", "Data 5", "Data 6"]],
                "colW": [3, 3, 3],
            },
            "chartData": {
                "chartType": "bar",
                "title": "Chart Title",
                "data": {
                    "labels": ["Category A", "Category B", "Category C", "Category D"],
                    "values": [4.3, 2.5, 3.5, 4.5],
                },
                "position": {"x": 5.5, "y": 2.2, "width": 4.0, "height": 3.0},
            },
            "imageData": {
                "placeholder": "Description of image to generate",
                "position": {"x": 5.5, "y": 2.2, "width": 4.0, "height": 3.0},
            },
        }
    ],
}

DESIGN_REQUIREMENTS = [
    "Create a clean, modern design with strategic use of whitespace",
    "Use color accents and shapes to create visual interest",
    "Align content consistently - text should be left-aligned",
    "Use different slide types (title, content, chart, comparison, conclusion)",
    "Include appropriate visual elements on each slide",
    "Maintain visual consistency throughout the presentation",
    "Design for widescreen (16:9) format",
    "Font sizes should be large enough for readability (min 18pt for body text)",
    "Create meaningful sections to organize content effectively",
    "Use scheme colors for consistency and theme compliance",
    "Provide realistic and insightful content related to the prompt",
]


def build_instruction(prompt, slide_count, include_charts=True, include_images=True):
    """Instruction for ``slide_count`` slides about ``prompt``."""
    schema = json.loads(json.dumps(SCHEMA_EXAMPLE))
    example_slide = schema["slides"][0]
    requirements = list(DESIGN_REQUIREMENTS)

    extras = ["tables"]
    if include_charts:
        extras.insert(0, "charts")
    else:
        example_slide.pop("chartData")
        requirements.append("Do not include charts")
    if include_images:
        extras.append("placeholder images")
    else:
        example_slide.pop("imageData")
        requirements.append("Do not include images")
    requirements.append(f"Include {' and '.join(extras)} where appropriate")

    numbered = "\n".join("%d. %s" % (i, line) for i, line in enumerate(requirements, start=1))
    return (
        'Create a visually stunning professional presentation about "%s" with %d slides.\n\n'
        "Your design should follow modern presentation design principles with clear visual "
        "hierarchy, effective use of space, and professional typography.\n\n"
        "Return your design as VALID JSON with this structure:\n%s\n\n"
        "Important design requirements:\n%s\n\n"
        "Return ONLY valid JSON - no explanations or markdown formatting."
    ) % (prompt, slide_count, json.dumps(schema, indent=2), numbered)
