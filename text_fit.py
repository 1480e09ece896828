"""Fit a string into a pixel width by shrinking, wrapping and truncating.

Everything here works through an injected ``measure(text, font_size)``
callable so it can run against a real font or a fake in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from config import MIN_FONT_SIZE


MeasureFn = Callable[[str, int], float]

ELLIPSIS = "…"
SPLIT_SPACES = (" ", "　")


@dataclass(frozen=True)
class RenderPlan:
    font_size: int
    lines: tuple[str, str]

    @property
    def is_wrapped(self) -> bool:
        return bool(self.lines[1])


def floor_font_size(base_font_size: int) -> int:
    """Half the base size, rounded half up, never below MIN_FONT_SIZE or above the base."""
    return min(base_font_size, max(MIN_FONT_SIZE, int(base_font_size / 2 + 0.5)))


def _split_near_middle(text: str) -> tuple[str, str] | None:
    indices = [index for index, char in enumerate(text) if char in SPLIT_SPACES]
    if not indices:
        return None
    middle = (len(text) - 1) / 2
    best = min(indices, key=lambda index: abs(index - middle))
    first = text[:best].rstrip()
    second = text[best + 1:].lstrip()
    if not first or not second:
        return None
    return first, second


def _greedy_split(text: str, fits: Callable[[str], bool]) -> tuple[str, str]:
    line = ""
    for index, char in enumerate(text):
        if not fits(line + char):
            return line, text[index:]
        line += char
    return line, ""


def truncate_with_ellipsis(text: str, fits: Callable[[str], bool]) -> str:
    """Drop trailing characters until ``text + …`` fits; '' if not even ``…`` does."""
    truncated = text
    while truncated and not fits(truncated + ELLIPSIS):
        truncated = truncated[:-1]
    candidate = truncated + ELLIPSIS
    return candidate if fits(candidate) else ""


def fit_text(text: str, max_width: float, measure: MeasureFn, base_font_size: int) -> RenderPlan:
    """Return at most two lines that each measure within ``max_width``.

    Tries the base size, then each smaller size down to the floor, then a
    two-line split at the floor size: a whitespace split nearest the middle,
    a greedy split, any split point scanning from the end, and finally the
    greedy split with its second line truncated behind an ellipsis.
    """
    max_width = max(0.0, max_width)
    for size in range(base_font_size, floor_font_size(base_font_size) - 1, -1):
        if measure(text, size) <= max_width:
            return RenderPlan(size, (text, ""))

    size = floor_font_size(base_font_size)

    def fits(candidate: str) -> bool:
        return measure(candidate, size) <= max_width

    middle_split = _split_near_middle(text)
    if middle_split and all(fits(part) for part in middle_split):
        return RenderPlan(size, middle_split)

    first, second = _greedy_split(text, fits)
    if fits(second):
        return RenderPlan(size, (first, second))

    for index in range(len(text) - 1, 0, -1):
        head, tail = text[:index], text[index:]
        if fits(head) and fits(tail):
            return RenderPlan(size, (head, tail))

    return RenderPlan(size, (first, truncate_with_ellipsis(second, fits)))


def fit_single_line(text: str, max_width: float, measure: MeasureFn, base_font_size: int) -> RenderPlan:
    """Shrink toward the floor size, then truncate; never wraps."""
    max_width = max(0.0, max_width)
    floor_size = floor_font_size(base_font_size)
    for size in range(base_font_size, floor_size - 1, -1):
        if measure(text, size) <= max_width:
            return RenderPlan(size, (text, ""))
    return RenderPlan(floor_size, (truncate_with_ellipsis(text, lambda value: measure(value, floor_size) <= max_width), ""))


__all__ = [
    "ELLIPSIS",
    "MeasureFn",
    "RenderPlan",
    "fit_text",
    "fit_single_line",
    "floor_font_size",
    "truncate_with_ellipsis",
]
