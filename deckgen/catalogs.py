"""Fixed lookup tables shared by synthesis, defaulting and rendering."""

from pptx.enum.chart import XL_CHART_TYPE
from pptx.enum.shapes import MSO_SHAPE

SLIDE_TYPES = ("title", "content", "chart", "comparison", "conclusion")

DEFAULT_COLORS = {
    "primary": "4472C4",
    "secondary": "5B9BD5",
    "accent": "ED7D31",
    "background": "FFFFFF",
    "text": "333333",
}

DEFAULT_FONTS = {"title": "Segoe UI", "body": "Calibri"}

DEFAULT_THEME = {
    "colorScheme": DEFAULT_COLORS,
    "fonts": DEFAULT_FONTS,
    "visualStyle": "Modern and professional",
    "layoutPrinciple": "Clear visual hierarchy with dynamic elements",
    "backgroundStyle": "Clean with accent shapes",
}

FALLBACK_THEME_STYLE = {
    "visualStyle": "Modern and impactful",
    "layoutPrinciple": "Strong visual focus with dynamic elements",
    "backgroundStyle": "Gradient with subtle patterns",
}

# Canvas sizes in inches.
CANVASES = {
    "16x9": (10.0, 5.625),
    "wide": (13.333, 7.5),
    "16x10": (10.0, 6.25),
    "4x3": (10.0, 7.5),
}
DEFAULT_CANVAS = "16x9"

_TITLE_STYLE = {"fontSize": 38, "bold": True}
_CONTENT_STYLE = {"fontSize": 24, "bullet": True, "lineSpacing": 1.5}

DEFAULT_LAYOUTS = {
    "16x9": {
        "titlePosition": {"x": 0.8, "y": 0.5, "width": 8.4, "height": 1.2, "align": "left"},
        "contentPosition": {"x": 0.8, "y": 2.0, "width": 8.4, "height": 3.2},
        "titleStyle": _TITLE_STYLE,
        "contentStyle": _CONTENT_STYLE,
    },
    "wide": {
        "titlePosition": {"x": 0.8, "y": 0.5, "width": 11.7, "height": 1.2, "align": "left"},
        "contentPosition": {"x": 0.8, "y": 2.0, "width": 11.7, "height": 4.8},
        "titleStyle": _TITLE_STYLE,
        "contentStyle": _CONTENT_STYLE,
    },
    "16x10": {
        "titlePosition": {"x": 0.8, "y": 0.5, "width": 8.4, "height": 1.2, "align": "left"},
        "contentPosition": {"x": 0.8, "y": 2.0, "width": 8.4, "height": 3.8},
        "titleStyle": _TITLE_STYLE,
        "contentStyle": _CONTENT_STYLE,
    },
    "4x3": {
        "titlePosition": {"x": 0.8, "y": 0.5, "width": 8.4, "height": 1.2, "align": "left"},
        "contentPosition": {"x": 0.8, "y": 2.0, "width": 8.4, "height": 5.0},
        "titleStyle": _TITLE_STYLE,
        "contentStyle": _CONTENT_STYLE,
    },
}

# Regions used by the dedicated chart/image/table slots when their own
# position is unset. Table y depends on whether the slide has body text.
SLOT_REGIONS = {
    "16x9": {
        "chart": {"x": 5.5, "y": 2.2, "width": 4.0, "height": 3.0},
        "image": {"x": 5.5, "y": 2.2, "width": 4.0, "height": 3.0},
        "table": {"x": 0.8, "y": 2.0, "y_below_content": 3.5, "width": 8.4},
    },
    "wide": {
        "chart": {"x": 7.5, "y": 2.2, "width": 5.0, "height": 4.0},
        "image": {"x": 7.5, "y": 2.2, "width": 5.0, "height": 4.0},
        "table": {"x": 0.8, "y": 2.0, "y_below_content": 4.2, "width": 11.7},
    },
    "16x10": {
        "chart": {"x": 5.5, "y": 2.2, "width": 4.0, "height": 3.5},
        "image": {"x": 5.5, "y": 2.2, "width": 4.0, "height": 3.5},
        "table": {"x": 0.8, "y": 2.0, "y_below_content": 3.8, "width": 8.4},
    },
    "4x3": {
        "chart": {"x": 5.5, "y": 2.5, "width": 4.0, "height": 4.0},
        "image": {"x": 5.5, "y": 2.5, "width": 4.0, "height": 4.0},
        "table": {"x": 0.8, "y": 2.0, "y_below_content": 4.5, "width": 8.4},
    },
}

ELEMENT_POSITION_DEFAULTS = {"x": 0.0, "y": 0.0, "width": 1.0, "height": 1.0}

# Master decoration geometry (inches).
ACCENT_BAR_WIDTH = 0.4
FOOTER_BAR_HEIGHT = 0.4
HEADER_BAR_HEIGHT = 0.75
LOGO_POSITION = {"x": 9.0, "y": 0.1, "w": 1.0, "h": 0.5}

SHAPE_KINDS = {
    "rectangle": MSO_SHAPE.RECTANGLE,
    "ellipse": MSO_SHAPE.OVAL,
    "triangle": MSO_SHAPE.ISOSCELES_TRIANGLE,
    "line": None,  # drawn as a straight connector
    "cloud": MSO_SHAPE.CLOUD,
    "hexagon": MSO_SHAPE.HEXAGON,
    "cube": MSO_SHAPE.CUBE,
    "star": MSO_SHAPE.STAR_5_POINT,
}
SHAPE_ALIASES = {"rect": "rectangle", "oval": "ellipse", "circle": "ellipse"}
DEFAULT_SHAPE = "rectangle"

CHART_KINDS = {
    "bar": XL_CHART_TYPE.COLUMN_CLUSTERED,
    "line": XL_CHART_TYPE.LINE,
    "pie": XL_CHART_TYPE.PIE,
    "area": XL_CHART_TYPE.AREA,
    "doughnut": XL_CHART_TYPE.DOUGHNUT,
    "scatter": XL_CHART_TYPE.XY_SCATTER,
}
DEFAULT_CHART = "bar"
SAMPLE_CHART_DATA = {
    "labels": ["Category A", "Category B", "Category C", "Category D"],
    "values": [4.3, 2.5, 3.5, 4.5],
}

TABLE_HEADER_TEXT = "FFFFFF"
TABLE_BAND_ODD = "F5F5F5"
TABLE_BAND_EVEN = "FFFFFF"
TABLE_ROW_HEIGHT = 0.4

FALLBACK_TITLE = "Presentation"
FALLBACK_SLIDE_TITLES = ["Introduction", "Key Points", "Details", "Analysis", "Conclusion"]
FALLBACK_POINTS = [
    "First important point to consider",
    "Analysis of key factors",
    "Strategic considerations",
    "Implementation approach",
    "Expected outcomes and results",
    "Next steps forward",
]
FALLBACK_FILLER = "Additional considerations"
MIN_FALLBACK_SLIDES = 5
MIN_FALLBACK_POINTS = 12

TEMPLATE_SECTIONS = ["Introduction", "Key Points", "Details", "Conclusion"]
TEMPLATE_POINTS = [
    "Key insight about this topic",
    "Important consideration for stakeholders",
    "Strategic recommendation based on analysis",
]
TEMPLATE_TABLE = {
    "headers": ["Element", "Description", "Impact"],
    "rows": [
        ["Factor 1", "Description of factor 1", "High"],
        ["Factor 2", "Description of factor 2", "Medium"],
        ["Factor 3", "Description of factor 3", "Low"],
    ],
    "colW": [2, 4, 2],
}

PADDING_TITLES = [
    "Key Concepts",
    "Use Cases",
    "Examples",
    "Statistics",
    "Trends",
    "Current Status",
    "Future Outlook",
    "Implementation",
    "Best Practices",
    "Challenges",
]

# Decorations attached to synthesized slides, by slide type. Colours name a
# colorScheme role; an optional "tint" is appended as an alpha suffix.
FALLBACK_VISUALS = {
    "title": [
        {"type": "shape", "shape": "rect", "position": {"x": 0, "y": 0, "width": 3, "height": 5.63},
         "color": "primary", "opacity": 0.8},
        {"type": "shape", "shape": "rect", "position": {"x": 0, "y": 5.63, "width": 10, "height": 0.7},
         "color": "accent", "opacity": 0.9},
    ],
    "chart": [
        {"type": "shape", "shape": "rect", "position": {"x": 0, "y": 0, "width": 0.4, "height": 6.33},
         "color": "primary", "opacity": 0.8},
        {"type": "chart", "chartType": "bar", "position": {"x": 5.5, "y": 2.2, "width": 4.0, "height": 3.5},
         "title": "Data Analysis", "data": SAMPLE_CHART_DATA, "showTitle": False, "showLegend": True,
         "color": "primary"},
    ],
    "comparison": [
        {"type": "shape", "shape": "rect", "position": {"x": 0, "y": 0, "width": 0.4, "height": 6.33},
         "color": "accent", "opacity": 0.8},
        {"type": "shape", "shape": "rect", "position": {"x": 5.5, "y": 2.5, "width": 4.0, "height": 2.5},
         "color": "secondary", "tint": "22", "outline": {"color": "secondary", "width": 2}},
        {"type": "text", "text": "Option A", "position": {"x": 5.5, "y": 2.0, "width": 4.0, "height": 0.5},
         "color": "secondary", "fontSize": 22, "bold": True, "align": "left"},
    ],
    "conclusion": [
        {"type": "shape", "shape": "rect", "position": {"x": 0, "y": 0, "width": 0.4, "height": 6.33},
         "color": "accent", "opacity": 0.8},
        {"type": "shape", "shape": "rect", "position": {"x": 0, "y": 5.63, "width": 10, "height": 0.7},
         "color": "secondary", "opacity": 0.7},
    ],
    "content": [
        {"type": "shape", "shape": "rect", "position": {"x": 0, "y": 0, "width": 0.4, "height": 6.33},
         "color": "secondary", "opacity": 0.8},
    ],
}

PLACEHOLDER_CAPTIONS = {
    "chart": "Chart: {title}",
    "table": "Table: {title}",
    "image": "Image: {title}",
    "shape": "",
    "text": "",
    "title": "",
    "body": "",
}
