from __future__ import annotations

import copy
from typing import Any

DEFAULT_IMAGE_SRC = "https://picsum.photos/400/300"
FALLBACK_ELEMENT_TYPE = "frame"

DEFAULT_CONTENT: dict[str, str] = {
    "text": "Add your text here",
    "button": "Button",
    "link": "Link text",
}

_DEFAULT_ELEMENT_CONFIGS: dict[str, dict[str, Any]] = {
    "page": {
        "size": {"width": 1440, "height": 900},
        "styles": {
            "backgroundColor": "#ffffff",
            "display": "flex",
            "flexDirection": "column",
            "alignItems": "stretch",
            "resizeY": "hug",
        },
    },
    "frame": {
        "size": {"width": 200, "height": 200},
        "styles": {"backgroundColor": "#f3f4f6", "borderRadius": 0, "padding": 0},
    },
    "stack": {
        "size": {"width": 200, "height": 150},
        "styles": {
            "display": "flex",
            "flexDirection": "column",
            "gap": 12,
            "padding": 16,
            "backgroundColor": "#f9fafb",
            "borderRadius": 8,
        },
    },
    "grid": {
        "size": {"width": 300, "height": 200},
        "styles": {
            "display": "grid",
            "gridTemplateColumns": "repeat(2, 1fr)",
            "gap": 0,
            "padding": 0,
        },
    },
    "text": {
        "size": {"width": 200, "height": 40},
        "content": DEFAULT_CONTENT["text"],
        "styles": {
            "fontSize": 16,
            "color": "#1f2937",
            "lineHeight": 1.5,
            "resizeX": "hug",
            "resizeY": "hug",
        },
    },
    "button": {
        "size": {"width": 120, "height": 44},
        "content": DEFAULT_CONTENT["button"],
        "styles": {
            "backgroundColor": "#8b5cf6",
            "color": "#ffffff",
            "fontSize": 14,
            "fontWeight": 500,
            "borderRadius": 8,
            "padding": 12,
            "display": "flex",
            "justifyContent": "center",
            "alignItems": "center",
        },
    },
    "image": {
        "size": {"width": 200, "height": 150},
        "src": DEFAULT_IMAGE_SRC,
        "alt": "Random image",
        "styles": {"borderRadius": 8, "overflow": "hidden"},
    },
    "input": {
        "size": {"width": 250, "height": 44},
        "placeholder": "Enter text...",
        "input_type": "text",
        "styles": {
            "borderWidth": 1,
            "borderColor": "#d1d5db",
            "borderStyle": "solid",
            "borderRadius": 8,
            "padding": 12,
            "fontSize": 14,
        },
    },
    "link": {
        "size": {"width": 100, "height": 24},
        "content": DEFAULT_CONTENT["link"],
        "href": "#",
        "target": "_self",
        "styles": {
            "color": "#8b5cf6",
            "fontSize": 14,
            "textDecoration": "underline",
            "cursor": "pointer",
            "resizeX": "hug",
            "resizeY": "hug",
        },
    },
    "icon": {
        "size": {"width": 24, "height": 24},
        "icon_name": "star",
        "styles": {"color": "#8b5cf6"},
    },
    "video": {
        "size": {"width": 400, "height": 225},
        "video_src": "",
        "autoplay": False,
        "loop": False,
        "muted": True,
        "controls": True,
        "styles": {"borderRadius": 8, "overflow": "hidden", "backgroundColor": "#18181b"},
    },
    "section": {
        "size": {"width": 1200, "height": 400},
        "styles": {
            "display": "flex",
            "flexDirection": "column",
            "alignItems": "center",
            "justifyContent": "center",
            "padding": 64,
            "gap": 24,
            "backgroundColor": "#ffffff",
        },
    },
    "container": {
        "size": {"width": 1140, "height": 200},
        "styles": {
            "display": "flex",
            "flexDirection": "column",
            "padding": 24,
            "gap": 16,
            "backgroundColor": "transparent",
        },
    },
    "row": {
        "size": {"width": 1000, "height": 100},
        "styles": {
            "display": "flex",
            "flexDirection": "row",
            "alignItems": "center",
            "gap": 16,
            "padding": 16,
        },
    },
    "card": {
        "size": {"width": 300, "height": 200},
        "styles": {
            "display": "flex",
            "flexDirection": "column",
            "padding": 16,
            "gap": 12,
            "backgroundColor": "#ffffff",
            "borderRadius": 12,
            "borderWidth": 1,
            "borderColor": "#e5e7eb",
            "borderStyle": "solid",
        },
    },
    "model3d": {
        "size": {"width": 400, "height": 300},
        "model_src": "",
        "styles": {"borderRadius": 12, "overflow": "hidden", "backgroundColor": "#18181b"},
    },
}

_DEFAULT_ELEMENT_NAMES: dict[str, str] = {
    "page": "Page",
    "frame": "Frame",
    "stack": "Stack",
    "grid": "Grid",
    "text": "Text",
    "button": "Button",
    "image": "Image",
    "input": "Input",
    "link": "Link",
    "icon": "Icon",
    "video": "Video",
    "section": "Section",
    "container": "Container",
    "row": "Row",
    "card": "Card",
    "model3d": "3D Model",
}


def default_element_config(element_type: str) -> dict[str, Any]:
    config = _DEFAULT_ELEMENT_CONFIGS.get(element_type)
    if config is None:
        config = _DEFAULT_ELEMENT_CONFIGS[FALLBACK_ELEMENT_TYPE]
    return copy.deepcopy(config)


def default_element_name(element_type: str) -> str:
    normalized = str(element_type or "").strip()
    if not normalized:
        return _DEFAULT_ELEMENT_NAMES[FALLBACK_ELEMENT_TYPE]
    return _DEFAULT_ELEMENT_NAMES.get(normalized, normalized[:1].upper() + normalized[1:])


def display_content(element_type: str, content: str | None) -> str:
    """Text an element renders; text-like types fall back to their placeholder copy."""
    if content:
        return content
    return DEFAULT_CONTENT.get(element_type, "")
