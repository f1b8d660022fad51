from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from domain.element_defaults import display_content
from domain.models import TEXT_LIKE_TYPES, Element, Size
from domain.ports.layout import IntrinsicMeasurer
from domain.styles import as_number, padding_box


class StoredSizeMeasurer(IntrinsicMeasurer):
    def measure(self, element: Element, max_width: Optional[float] = None) -> Size:
        return element.size


@dataclass(frozen=True)
class TextMetricsConfig:
    char_width_ratio: float = 0.55
    default_font_size: float = 16.0
    default_line_height: float = 1.5


class HeuristicTextMeasurer(IntrinsicMeasurer):
    def __init__(self, config: TextMetricsConfig | None = None) -> None:
        self.config = config or TextMetricsConfig()

    def measure(self, element: Element, max_width: Optional[float] = None) -> Size:
        if element.type not in TEXT_LIKE_TYPES:
            return element.size
        font_size = as_number(element.styles.get("fontSize")) or self.config.default_font_size
        line_height = self._line_height_px(element, font_size)
        top, right, bottom, left = padding_box(element.styles)
        lines = display_content(element.type, element.content).split("\n")
        char_width = font_size * self.config.char_width_ratio
        natural_width = max(len(line) for line in lines) * char_width
        available = None
        if max_width is not None and max_width > 0:
            available = max(max_width - left - right, char_width)
        line_count = 0
        width = natural_width
        for line in lines:
            line_width = len(line) * char_width
            if available is not None and line_width > available:
                line_count += math.ceil(line_width / available)
                width = available
            else:
                line_count += 1
        if available is not None:
            width = min(width, available)
        return Size(
            width=round(width + left + right, 2),
            height=round(max(line_count, 1) * line_height + top + bottom, 2),
        )

    def _line_height_px(self, element: Element, font_size: float) -> float:
        raw = element.styles.get("lineHeight")
        number = as_number(raw)
        if number is None:
            return font_size * self.config.default_line_height
        if isinstance(raw, str) and raw.strip().endswith("px"):
            return number
        # Small values are multipliers, larger ones are pixel heights.
        return number * font_size if number <= 4 else number
