from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from config import HOUR_BUCKETS, MONTH_RANGE
from visit_data import DATE_KEY_RE, EntranceVisit, EventVisit, Gate, Ticket, sort_by_schedule


UNKNOWN_DATE_KEY = "unknown"
HOUR_TOKEN_RE = re.compile(r"(\d{1,2})[:：]")


@dataclass
class AttachedVisit:
    """One entrance visit with the pavilion reservations made for the same day."""

    ticket_position: int
    ticket: Ticket
    visit: EntranceVisit
    events: list[EventVisit] = field(default_factory=list)


@dataclass
class Association:
    visits: list[AttachedVisit]
    leftovers: list[EventVisit]

    @property
    def attached_event_count(self) -> int:
        return sum(len(item.events) for item in self.visits)


def _index_key(ticket_key: str, visit_date: str | None) -> tuple[str, str]:
    return (ticket_key, visit_date or UNKNOWN_DATE_KEY)


def associate(tickets: Sequence[Ticket]) -> Association:
    """Attach every event to the same-ticket, same-date entrance visit.

    The index is built and consumed within this call: the first entrance
    visit that matches a key takes all of its events, and whatever is left
    afterwards becomes the leftover list.
    """
    index: dict[tuple[str, str], list[EventVisit]] = {}
    for position, ticket in enumerate(tickets):
        ticket_key = ticket.ticket_key(position)
        for event in ticket.events:
            index.setdefault(_index_key(ticket_key, event.entrance_date), []).append(event)
    for key, events in index.items():
        index[key] = sort_by_schedule(events)

    visits: list[AttachedVisit] = []
    for position, ticket in enumerate(tickets):
        ticket_key = ticket.ticket_key(position)
        for entrance in ticket.entrances:
            events = index.pop(_index_key(ticket_key, entrance.entrance_date), [])
            visits.append(AttachedVisit(ticket_position=position, ticket=ticket, visit=entrance, events=events))

    leftovers = sort_by_schedule([event for events in index.values() for event in events])
    return Association(visits=visits, leftovers=leftovers)


def extract_hour(name: str | None) -> str | None:
    """First ``H:``/``HH:`` token in a display name, zero-padded."""
    match = HOUR_TOKEN_RE.search(name or "")
    if not match:
        return None
    return match.group(1).zfill(2)


@dataclass
class GateHourRow:
    label: str
    east: int = 0
    west: int = 0

    @property
    def total(self) -> int:
        return self.east + self.west

    def add(self, gate: Gate) -> None:
        if gate is Gate.EAST:
            self.east += 1
        elif gate is Gate.WEST:
            self.west += 1


@dataclass
class GateHourTable:
    rows: list[GateHourRow]
    totals: GateHourRow


@dataclass
class MonthCount:
    month: int
    count: int


def iter_entrances(tickets: Iterable[Ticket]) -> Iterable[EntranceVisit]:
    for ticket in tickets:
        yield from ticket.entrances


def build_gate_hour_table(tickets: Iterable[Ticket], hours: Sequence[str] = HOUR_BUCKETS) -> GateHourTable:
    rows = {hour: GateHourRow(label=hour) for hour in hours}
    totals = GateHourRow(label="total")
    for entrance in iter_entrances(tickets):
        gate = entrance.gate
        if gate is None:
            continue
        totals.add(gate)
        hour = extract_hour(entrance.schedule_name)
        if hour in rows:
            rows[hour].add(gate)
    return GateHourTable(rows=[rows[hour] for hour in hours], totals=totals)


def build_month_histogram(tickets: Iterable[Ticket], months: Sequence[int] = MONTH_RANGE) -> list[MonthCount]:
    counts: Counter = Counter()
    for entrance in iter_entrances(tickets):
        if entrance.entrance_date and DATE_KEY_RE.fullmatch(entrance.entrance_date):
            counts[int(entrance.entrance_date[4:6])] += 1
    return [MonthCount(month=month, count=counts.get(month, 0)) for month in months]


__all__ = [
    "AttachedVisit",
    "Association",
    "associate",
    "extract_hour",
    "GateHourRow",
    "GateHourTable",
    "MonthCount",
    "build_gate_hour_table",
    "build_month_histogram",
]
