from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from config import (
    GATE_LABELS,
    REGISTERED_CHANNEL_LABELS,
    SEPARATOR,
    STATIC_LABELS,
    USE_STATE_LABELS,
    WEEKDAY_SHORT_NAMES,
)
from visit_data import EntranceVisit, EventVisit, Ticket, UseState, Visit


EIGHT_DIGIT_DATE_RE = re.compile(r"^\d{8}$")
CHANNEL_CODE_SUFFIX_RE = re.compile(r" \(\d+\)$")
ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


@dataclass
class LabelTables:
    """Externally supplied enum-to-text dictionaries."""

    pavilions: dict[str, str] = field(default_factory=dict)
    ticket_types: dict[str, str] = field(default_factory=dict)


def load_label_tables(path: Path | None) -> LabelTables:
    if path is None:
        return LabelTables()
    with path.open(encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"Label file {path} must contain a JSON object.")
    pavilions = payload.get("pavilions") or {}
    ticket_types = payload.get("ticket_types") or {}
    return LabelTables(
        pavilions={str(key): str(value) for key, value in pavilions.items()},
        ticket_types={str(key): str(value) for key, value in ticket_types.items()},
    )


def format_time(value: str | None) -> str:
    if not value:
        return STATIC_LABELS["not_set"]
    if ":" in value:
        return value
    if len(value) == 4:
        return f"{value[:2]}:{value[2:]}"
    if len(value) == 6:
        return f"{value[:2]}:{value[2:4]}:{value[4:]}"
    return value


def format_summary_date(raw: str | None) -> tuple[str, int | None]:
    """Return the ``YYYY/MM/DD(Www)`` label and month number for a visit date."""
    if not raw or not EIGHT_DIGIT_DATE_RE.match(raw):
        return (raw or STATIC_LABELS["date_not_set"], None)
    try:
        value = date(int(raw[:4]), int(raw[4:6]), int(raw[6:8]))
    except ValueError:
        return (raw, None)
    weekday = WEEKDAY_SHORT_NAMES[value.weekday()]
    return (f"{value.year}/{value.month:02d}/{value.day:02d}({weekday})", value.month)


def resolve_use_state(value: int | None) -> str:
    if value is None:
        return STATIC_LABELS["unknown_state"]
    label = USE_STATE_LABELS.get(value)
    if label:
        return label
    return f"{STATIC_LABELS['unknown_state']} ({value})"


def summary_status_text(visit: Visit) -> str:
    """Admission time for used visits, the state label otherwise, '' if unknown."""
    if visit.use_state is None:
        return ""
    if visit.state is UseState.USED:
        return format_time(visit.admission_time) if visit.admission_time else STATIC_LABELS["entered"]
    if visit.state is None:
        return ""
    return resolve_use_state(visit.use_state)


def resolve_registered_channel(channel: int | None) -> str:
    unknown = STATIC_LABELS["unknown_channel"]
    if channel is None:
        return unknown
    label = REGISTERED_CHANNEL_LABELS.get(channel)
    return f"{label} ({channel})" if label else f"{unknown} ({channel})"


def strip_channel_code(label: str) -> str:
    return CHANNEL_CODE_SUFFIX_RE.sub("", label)


def resolve_gate_label(gate_type: int | None) -> str:
    if not gate_type:
        return ""
    return GATE_LABELS.get(gate_type, f"Gate {gate_type}")


def resolve_ticket_name(ticket: Ticket, labels: LabelTables | None = None) -> str:
    ticket_types = labels.ticket_types if labels else {}
    return ticket_types.get(ticket.ticket_type_id or "") or ticket.item_name or STATIC_LABELS["unknown_ticket"]


def resolve_pavilion_name(event: EventVisit, labels: LabelTables | None = None) -> str:
    pavilions = labels.pavilions if labels else {}
    return pavilions.get(event.program_code or "") or event.event_name or STATIC_LABELS["unnamed"]


def visit_time_label(visit: Visit) -> str:
    """Display name when present, else the formatted start time; '' when neither is set."""
    label = visit.schedule_name or format_time(visit.start_time)
    return "" if label == STATIC_LABELS["not_set"] else label


def ticket_letter(index: int) -> str:
    """Spreadsheet-style letters: 0 -> A, 25 -> Z, 26 -> AA."""
    value = index
    label = ""
    while True:
        label = ALPHABET[value % len(ALPHABET)] + label
        value = value // len(ALPHABET) - 1
        if value < 0:
            return label


def join_parts(parts: list[str]) -> str:
    return SEPARATOR.join(part for part in parts if part)


def entrance_line_text(visit: EntranceVisit, letter: str) -> str:
    date_label, _ = format_summary_date(visit.entrance_date)
    return join_parts([
        date_label,
        letter,
        visit_time_label(visit),
        resolve_gate_label(visit.gate_type),
        summary_status_text(visit),
    ])


def event_row_texts(event: EventVisit, labels: LabelTables | None = None) -> tuple[str, str]:
    """Left column (time, channel, status) and right column (pavilion name)."""
    channel = ""
    if event.registered_channel is not None:
        channel = strip_channel_code(resolve_registered_channel(event.registered_channel))
        if channel == STATIC_LABELS["unknown_channel"]:
            channel = ""
    left = join_parts([visit_time_label(event), channel, summary_status_text(event)])
    left_text = f"- {left}" if left else "-"
    return left_text, resolve_pavilion_name(event, labels)


def leftover_line_text(event: EventVisit) -> str:
    date_label, _ = format_summary_date(event.entrance_date)
    return join_parts([
        date_label,
        event.event_name or STATIC_LABELS["unnamed"],
        visit_time_label(event),
    ])
