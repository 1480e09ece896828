from typing import Optional

from PIL import ImageColor

DEFAULT_TEXT = (31, 41, 55)

# Semantic token -> hex color mapping. Keep tokens descriptive so the layout
# can use readable names instead of raw color values.
TOKEN_MAP: dict[str, str] = {
    # surfaces
    "page_background": "#f1f5f9",
    "card_background": "#ffffff",
    "card_shadow": "#e2e8f0",
    # text
    "text_title": "#0f172a",
    "text_stats": "#334155",
    "text_body": "#1e293b",
    "text_visit": "#111827",
    "text_muted": "#475569",
    "text_default": "#1f2937",
    "text_footer": "#94a3b8",
    # chart
    "chart_axis": "#cbd5f5",
    "chart_bar": "#38bdf8",
    "chart_value": "#0f172a",
    "chart_label": "#334155",
    # gate/hour table
    "table_rule": "#e2e8f0",
    "table_header": "#475569",
    "table_total": "#0f172a",
}


def resolve(color_or_token: Optional[str]) -> Optional[tuple[int, int, int]]:
    if not color_or_token:
        return None
    if color_or_token.startswith("#"):
        return ImageColor.getrgb(color_or_token)[:3]
    value = TOKEN_MAP.get(color_or_token)
    if value is None:
        return None
    return ImageColor.getrgb(value)[:3]


def apply(color: Optional[str], fallback: tuple[int, int, int] = DEFAULT_TEXT) -> tuple[int, int, int]:
    resolved = resolve(color)
    return resolved if resolved is not None else fallback
