"""Plan the vertical layout of the shareable visit summary.

Planning is a pure function of the reconciled model and a width measure:
every text run is fitted here, so drawing only has to paint what the plan
says. The four recorded offsets tell the segmenter where the variable
length list zone begins and ends.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Union

from config import (
    AFTER_STATS_SPACING,
    BEFORE_STATS_SPACING,
    BLANK_SPACING,
    CHART_BAR_GAP,
    CHART_BOTTOM_MARGIN,
    CHART_HEIGHT,
    CHART_LABEL_AREA,
    CHART_TOP_MARGIN,
    EVENT_ROW_GAP,
    EVENT_ROW_INDENT,
    FONT_SIZES,
    GATE_COLUMN_LABELS,
    INNER_PADDING_X,
    LEFTOVER_ROW_INDENT,
    LINE_HEIGHT,
    PADDING_BOTTOM,
    PADDING_TOP,
    PAGE_WIDTH,
    SEPARATOR,
    STATIC_LABELS,
    TABLE_DATA_COLUMNS,
    TABLE_LABEL_COLUMNS,
)
from display_utils import (
    LabelTables,
    entrance_line_text,
    event_row_texts,
    leftover_line_text,
    resolve_ticket_name,
    ticket_letter,
)
from itinerary import GateHourRow, GateHourTable, MonthCount, associate, build_gate_hour_table, build_month_histogram
from text_fit import MeasureFn, RenderPlan, fit_single_line, fit_text
from visit_data import Ticket, schedule_key


TABLE_CELL_PADDING = 12


@dataclass
class EntranceLine:
    text: str
    events: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class SummaryModel:
    """Everything the summary shows, already reconciled and labelled."""

    entrance_count: int
    event_count: int
    ticket_lines: list[str]
    entrance_lines: list[EntranceLine]
    leftover_lines: list[str]
    monthly_counts: list[MonthCount]
    gate_table: GateHourTable

    @property
    def stats_label(self) -> str:
        return STATIC_LABELS["stats_template"].format(
            entrances=self.entrance_count, events=self.event_count, sep=SEPARATOR
        )


def build_summary_model(tickets: Sequence[Ticket], labels: LabelTables | None = None) -> SummaryModel:
    letters = [ticket_letter(index) for index in range(len(tickets))]
    ticket_lines = [
        STATIC_LABELS["ticket_line_template"].format(
            label=letter,
            name=resolve_ticket_name(ticket, labels),
            entrances=len(ticket.entrances),
            events=len(ticket.events),
            sep=SEPARATOR,
        )
        for letter, ticket in zip(letters, tickets)
    ]

    association = associate(tickets)
    # Cross-ticket date order; same-day visits keep ticket order.
    ordered = sorted(association.visits, key=lambda item: schedule_key(item.visit)[:8])
    entrance_lines: list[EntranceLine] = []
    for item in ordered:
        text = entrance_line_text(item.visit, letters[item.ticket_position])
        entrance_lines.append(
            EntranceLine(text=text, events=[event_row_texts(event, labels) for event in item.events])
        )

    return SummaryModel(
        entrance_count=sum(len(ticket.entrances) for ticket in tickets),
        event_count=sum(len(ticket.events) for ticket in tickets),
        ticket_lines=ticket_lines,
        entrance_lines=entrance_lines,
        leftover_lines=[leftover_line_text(event) for event in association.leftovers],
        monthly_counts=build_month_histogram(tickets),
        gate_table=build_gate_hour_table(tickets),
    )


@dataclass(frozen=True)
class TextItem:
    y: int
    x: int
    plan: RenderPlan
    color: str
    bold: bool = False


@dataclass(frozen=True)
class SplitRowItem:
    """Pavilion row: status on the left, a possibly two-line name on the right."""

    y: int
    left_x: int
    left: RenderPlan
    right_x: int
    right: RenderPlan


@dataclass(frozen=True)
class BarItem:
    x: int
    width: int
    height: int
    value: RenderPlan
    label: RenderPlan


@dataclass(frozen=True)
class ChartItem:
    top: int
    baseline: int
    left: int
    right: int
    bars: tuple[BarItem, ...]


@dataclass(frozen=True)
class TableCell:
    x: float
    width: float
    plan: RenderPlan
    color: str
    bold: bool = False


@dataclass(frozen=True)
class TableRowItem:
    y: int
    left: int
    right: int
    cells: tuple[TableCell, ...]


LayoutItem = Union[TextItem, SplitRowItem, ChartItem, TableRowItem]


@dataclass(frozen=True)
class LayoutOffsets:
    header_end: int
    list_start: int
    list_end: int
    chart_start: int


@dataclass
class SummaryLayout:
    width: int
    height: int
    line_height: int
    offsets: LayoutOffsets
    items: list[LayoutItem]

    @property
    def section_width(self) -> int:
        return self.width - INNER_PADDING_X * 2


def table_column_width(section_width: float) -> float:
    return section_width / (TABLE_LABEL_COLUMNS + TABLE_DATA_COLUMNS)


class _Planner:
    """Vertical cursor plus the item list it produces."""

    def __init__(self, measure: MeasureFn, bold_measure: MeasureFn | None, width: int):
        self.measure = measure
        self.bold_measure = bold_measure or measure
        self.width = width
        self.start_x = INNER_PADDING_X
        self.section_width = width - INNER_PADDING_X * 2
        self.cursor = PADDING_TOP
        self.items: list[LayoutItem] = []

    def text(self, text: str, role: str, color: str, *, x_offset: int = 0, bold: bool = False) -> None:
        measure = self.bold_measure if bold else self.measure
        plan = fit_single_line(text, self.section_width - x_offset, measure, FONT_SIZES[role])
        self.items.append(TextItem(y=self.cursor, x=self.start_x + x_offset, plan=plan, color=color, bold=bold))
        self.cursor += LINE_HEIGHT

    def heading(self, text: str, role: str = "heading") -> None:
        self.text(text, role, "text_title", bold=True)

    def split_row(self, left: str, right: str) -> None:
        available = self.section_width - EVENT_ROW_INDENT
        left_width = (available - EVENT_ROW_GAP) // 2
        right_width = available - EVENT_ROW_GAP - left_width
        size = FONT_SIZES["event"]
        left_x = self.start_x + EVENT_ROW_INDENT
        self.items.append(
            SplitRowItem(
                y=self.cursor,
                left_x=left_x,
                left=fit_single_line(left, left_width, self.measure, size),
                right_x=left_x + left_width + EVENT_ROW_GAP,
                right=fit_text(right, right_width, self.measure, size),
            )
        )
        self.cursor += LINE_HEIGHT

    def chart(self, monthly_counts: Sequence[MonthCount]) -> None:
        top = self.cursor + CHART_TOP_MARGIN
        baseline = top + CHART_HEIGHT
        count = len(monthly_counts)
        bar_width = (self.section_width - CHART_BAR_GAP * (count - 1)) / count if count else 0
        max_count = max([item.count for item in monthly_counts] + [1])
        bars = []
        for index, item in enumerate(monthly_counts):
            bars.append(
                BarItem(
                    x=round(self.start_x + index * (bar_width + CHART_BAR_GAP)),
                    width=int(bar_width),
                    height=round(item.count / max_count * CHART_HEIGHT),
                    value=fit_single_line(str(item.count), bar_width, self.measure, FONT_SIZES["chart_value"]),
                    label=fit_single_line(
                        STATIC_LABELS["month_label_template"].format(month=item.month),
                        bar_width,
                        self.measure,
                        FONT_SIZES["chart_label"],
                    ),
                )
            )
        self.items.append(
            ChartItem(top=top, baseline=baseline, left=self.start_x, right=self.start_x + self.section_width, bars=tuple(bars))
        )
        self.cursor = baseline + CHART_LABEL_AREA + CHART_BOTTOM_MARGIN

    def table_row(self, values: Sequence[str], color: str, *, bold: bool = False) -> None:
        column_width = table_column_width(self.section_width)
        measure = self.bold_measure if bold else self.measure
        cells = []
        for index, value in enumerate(values):
            plan = fit_single_line(value, column_width - TABLE_CELL_PADDING, measure, FONT_SIZES["table"])
            cells.append(
                TableCell(x=self.start_x + index * column_width, width=column_width, plan=plan, color=color, bold=bold)
            )
        self.items.append(
            TableRowItem(y=self.cursor, left=self.start_x, right=self.start_x + self.section_width, cells=tuple(cells))
        )
        self.cursor += LINE_HEIGHT

    def gate_table(self, table: GateHourTable) -> None:
        def values(label: str, row: GateHourRow) -> list[str]:
            return [label, str(row.east), str(row.west), str(row.total)]

        self.table_row(
            [STATIC_LABELS["table_hour_label"], GATE_COLUMN_LABELS[1], GATE_COLUMN_LABELS[2], STATIC_LABELS["table_total_column"]],
            "table_header",
            bold=True,
        )
        for row in table.rows:
            self.table_row(values(f"{row.label}h", row), "text_body")
        self.table_row(values(STATIC_LABELS["table_total_row"], table.totals), "table_total", bold=True)


def plan_summary(
    model: SummaryModel,
    measure: MeasureFn,
    *,
    show_details: bool = True,
    bold_measure: MeasureFn | None = None,
    width: int = PAGE_WIDTH,
) -> SummaryLayout:
    """Lay the summary out top to bottom.

    Inside the list zone every row, blank separators included, is exactly
    one line height tall, so any multiple of the line height measured from
    ``list_start`` falls between two rows.
    """
    planner = _Planner(measure, bold_measure, width)

    planner.text(STATIC_LABELS["title"], "title", "text_title", bold=True)
    planner.cursor += BEFORE_STATS_SPACING
    planner.text(model.stats_label, "stats", "text_stats")
    planner.cursor += AFTER_STATS_SPACING
    header_end = planner.cursor

    planner.cursor += BLANK_SPACING
    list_start = planner.cursor
    if show_details:
        planner.heading(STATIC_LABELS["ticket_heading"])
        for line in model.ticket_lines:
            planner.text(line, "body", "text_body")
        planner.cursor += LINE_HEIGHT

        planner.heading(STATIC_LABELS["schedule_heading"])
        for entrance in model.entrance_lines:
            planner.text(entrance.text, "body", "text_visit")
            for left, right in entrance.events:
                planner.split_row(left, right)

        if model.leftover_lines:
            planner.cursor += LINE_HEIGHT
            planner.heading(STATIC_LABELS["leftover_heading"], "sub_heading")
            for line in model.leftover_lines:
                planner.text(line, "event", "text_muted", x_offset=LEFTOVER_ROW_INDENT)
    list_end = planner.cursor
    if show_details:
        planner.cursor += BLANK_SPACING

    chart_start = planner.cursor
    planner.heading(STATIC_LABELS["month_heading"])
    planner.chart(model.monthly_counts)

    planner.heading(STATIC_LABELS["table_heading"])
    planner.gate_table(model.gate_table)

    planner.cursor += BLANK_SPACING
    planner.text(STATIC_LABELS["footer"], "footer", "text_footer")

    return SummaryLayout(
        width=width,
        height=planner.cursor + PADDING_BOTTOM,
        line_height=LINE_HEIGHT,
        offsets=LayoutOffsets(header_end=header_end, list_start=list_start, list_end=list_end, chart_start=chart_start),
        items=planner.items,
    )


__all__ = [
    "EntranceLine",
    "SummaryModel",
    "build_summary_model",
    "TextItem",
    "SplitRowItem",
    "BarItem",
    "ChartItem",
    "TableCell",
    "TableRowItem",
    "LayoutOffsets",
    "SummaryLayout",
    "table_column_width",
    "plan_summary",
]
