from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from colors import apply as apply_color
from config import (
    BOLD_FONT_CANDIDATES,
    CARD_INSET,
    FONT_CANDIDATES,
    LINE_HEIGHT,
    MAX_CANVAS_AREA,
)
from summary_layout import ChartItem, SplitRowItem, SummaryLayout, TableRowItem, TextItem
from text_fit import RenderPlan


logger = logging.getLogger(__name__)

FONT_ENV_VAR = "EXPO_SUMMARY_FONT"
CARD_SHADOW_OFFSET = 24
CHART_VALUE_OFFSET = 32
CHART_LABEL_OFFSET = 12
TABLE_RULE_INSET = 6
# Glyphs can reach past their row (tall fonts, descenders).
TEXT_BLEED = LINE_HEIGHT


def _font_candidates(bold: bool) -> list[str]:
    candidates = list(BOLD_FONT_CANDIDATES if bold else FONT_CANDIDATES)
    override = os.getenv(FONT_ENV_VAR)
    if override:
        candidates.insert(0, override)
    return candidates


@lru_cache(maxsize=None)
def pick_font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Try the configured fonts before falling back to Pillow's default."""
    for name in _font_candidates(bold):
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    if bold:
        return pick_font(size, bold=False)
    logger.warning("No TrueType font found; using Pillow's default font at %dpx", size)
    return ImageFont.load_default(size=size)


def measure_text(text: str, font_size: int) -> float:
    return pick_font(font_size).getlength(text)


def measure_bold_text(text: str, font_size: int) -> float:
    return pick_font(font_size, bold=True).getlength(text)


@dataclass(frozen=True)
class Segment:
    """A contiguous vertical slice ``[start, start + height)`` of the layout."""

    start: int
    height: int

    @property
    def end(self) -> int:
        return self.start + self.height


def max_segment_height(width: int, cap: int = MAX_CANVAS_AREA) -> int:
    return cap // width


def plan_segments(layout: SummaryLayout, cap: int = MAX_CANVAS_AREA) -> list[Segment]:
    """Partition ``[0, layout.height)`` into strips that each fit under ``cap`` pixels.

    A cut that lands inside the list zone is pulled back to the nearest row
    boundary (a multiple of the line height from ``list_start``); cuts
    elsewhere fall wherever the height limit says.
    """
    limit = max_segment_height(layout.width, cap)
    if limit <= 0:
        raise ValueError(f"Canvas cap {cap} cannot fit a single row of width {layout.width}.")
    list_start = layout.offsets.list_start
    list_end = layout.offsets.list_end
    line_height = layout.line_height

    segments: list[Segment] = []
    cursor = 0
    while cursor < layout.height:
        end = min(cursor + limit, layout.height)
        if end < layout.height and list_start < end < list_end:
            aligned = list_start + (end - list_start) // line_height * line_height
            if aligned > cursor:
                end = aligned
        segments.append(Segment(start=cursor, height=end - cursor))
        cursor = end
    return segments


class SegmentCanvas:
    """Drawing surface for one segment.

    Every call takes full-layout coordinates and is shifted up by the segment
    start; anything outside the image is clipped by Pillow.
    """

    def __init__(self, image: Image.Image, offset_y: int = 0):
        self.image = image
        self.draw = ImageDraw.Draw(image)
        self.offset_y = offset_y

    @property
    def height(self) -> int:
        return self.image.height

    def visible(self, top: float, bottom: float) -> bool:
        return bottom > self.offset_y and top < self.offset_y + self.height

    def rect(self, x0: float, y0: float, x1: float, y1: float, color: str) -> None:
        if x1 <= x0 or y1 <= y0 or not self.visible(y0, y1):
            return
        self.draw.rectangle([x0, y0 - self.offset_y, x1, y1 - self.offset_y], fill=apply_color(color))

    def line(self, x0: float, x1: float, y: float, color: str, width: int = 2) -> None:
        if not self.visible(y - width, y + width):
            return
        self.draw.line([(x0, y - self.offset_y), (x1, y - self.offset_y)], fill=apply_color(color), width=width)

    def text(
        self,
        x: float,
        y: float,
        text: str,
        font_size: int,
        color: str,
        *,
        bold: bool = False,
        anchor: str = "la",
    ) -> None:
        if not text or not self.visible(y - TEXT_BLEED, y + LINE_HEIGHT + TEXT_BLEED):
            return
        font = pick_font(font_size, bold=bold)
        self.draw.text((x, y - self.offset_y), text, fill=apply_color(color), font=font, anchor=anchor)


def _draw_plan(canvas: SegmentCanvas, x: float, y: float, plan: RenderPlan, color: str, *, bold: bool = False, anchor: str = "la") -> None:
    first, second = plan.lines
    canvas.text(x, y, first, plan.font_size, color, bold=bold, anchor=anchor)
    if second:
        canvas.text(x, y + LINE_HEIGHT / 2, second, plan.font_size, color, bold=bold, anchor=anchor)


def _draw_chart(canvas: SegmentCanvas, item: ChartItem) -> None:
    canvas.line(item.left, item.right, item.baseline, "chart_axis")
    for bar in item.bars:
        top = item.baseline - bar.height
        center = bar.x + bar.width / 2
        canvas.rect(bar.x, top, bar.x + bar.width, item.baseline, "chart_bar")
        _draw_plan(canvas, center, top - CHART_VALUE_OFFSET, bar.value, "chart_value", anchor="ma")
        _draw_plan(canvas, center, item.baseline + CHART_LABEL_OFFSET, bar.label, "chart_label", anchor="ma")


def _draw_table_row(canvas: SegmentCanvas, item: TableRowItem) -> None:
    for cell in item.cells:
        _draw_plan(canvas, cell.x + cell.width / 2, item.y, cell.plan, cell.color, bold=cell.bold, anchor="ma")
    canvas.line(item.left, item.right, item.y + LINE_HEIGHT - TABLE_RULE_INSET, "table_rule", width=1)


def draw_summary(canvas: SegmentCanvas, layout: SummaryLayout) -> None:
    """Paint the whole layout; the canvas decides which part ends up visible."""
    canvas.rect(0, 0, layout.width, layout.height, "page_background")
    card_right = layout.width - CARD_INSET
    card_bottom = layout.height - CARD_INSET
    canvas.rect(CARD_INSET, CARD_INSET + CARD_SHADOW_OFFSET, card_right, card_bottom + CARD_SHADOW_OFFSET // 2, "card_shadow")
    canvas.rect(CARD_INSET, CARD_INSET, card_right, card_bottom, "card_background")

    for item in layout.items:
        if isinstance(item, TextItem):
            _draw_plan(canvas, item.x, item.y, item.plan, item.color, bold=item.bold)
        elif isinstance(item, SplitRowItem):
            _draw_plan(canvas, item.left_x, item.y, item.left, "text_muted")
            _draw_plan(canvas, item.right_x, item.y, item.right, "text_default")
        elif isinstance(item, ChartItem):
            _draw_chart(canvas, item)
        elif isinstance(item, TableRowItem):
            _draw_table_row(canvas, item)
        else:
            raise TypeError(f"Unsupported layout item: {type(item).__name__}")


def render_segment(layout: SummaryLayout, segment: Segment) -> Image.Image:
    image = Image.new("RGB", (layout.width, segment.height), color=apply_color("page_background"))
    draw_summary(SegmentCanvas(image, offset_y=segment.start), layout)
    return image


def render_segments(layout: SummaryLayout, cap: int = MAX_CANVAS_AREA) -> list[Image.Image]:
    """On-screen preview strips, each within the canvas cap."""
    segments = plan_segments(layout, cap)
    logger.debug("Rendering %d segment(s) for a %dx%d layout", len(segments), layout.width, layout.height)
    return [render_segment(layout, segment) for segment in segments]


def render_full_image(layout: SummaryLayout) -> Image.Image:
    """One image of the whole layout for saving or sharing."""
    return render_segment(layout, Segment(start=0, height=layout.height))


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def save_segment_pngs(layout: SummaryLayout, output_dir: Path, name: str, cap: int = MAX_CANVAS_AREA) -> list[Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    paths: list[Path] = []
    for index, image in enumerate(render_segments(layout, cap), start=1):
        dest = output_dir / f"{name}_part{index:02d}.png"
        image.save(dest)
        paths.append(dest)
    return paths


__all__ = [
    "Segment",
    "SegmentCanvas",
    "pick_font",
    "measure_text",
    "measure_bold_text",
    "max_segment_height",
    "plan_segments",
    "draw_summary",
    "render_segment",
    "render_segments",
    "render_full_image",
    "encode_png",
    "save_segment_pngs",
]
