from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, ClassVar


DATE_SENTINEL = "99999999"
TIME_SENTINEL = "9999"
DATE_KEY_RE = re.compile(r"\d{8}")
TIME_KEY_RE = re.compile(r"\d{4}")
NON_DIGIT_RE = re.compile(r"\D")


class Gate(IntEnum):
    EAST = 1
    WEST = 2


class UseState(IntEnum):
    UNUSED = 0
    USED = 1
    CANCELLED = 2
    CANCEL_PENDING = 3
    CHANGE_PENDING = 4
    OTHER = 9


class RegisteredChannel(IntEnum):
    SAME_DAY_TERMINAL = 0
    SUPER_EARLY_LOTTERY = 1
    TWO_MONTH_LOTTERY = 2
    SEVEN_DAY_LOTTERY = 3
    THREE_DAY_FIRST_COME = 4
    SAME_DAY_BOOKING = 5


class VisitKind(Enum):
    ENTRANCE = "entrance"
    EVENT = "event"


@dataclass
class Visit:
    """Fields shared by gate admissions and pavilion reservations.

    ``use_state`` keeps the raw integer so values outside :class:`UseState`
    survive parsing and can be reported as unknown.
    """

    kind: ClassVar[VisitKind]

    id: int | None = None
    schedule_name: str | None = None
    entrance_date: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    use_state: int | None = None
    admission_time: str | None = None
    on_the_day: bool = False

    @property
    def state(self) -> UseState | None:
        if self.use_state is None:
            return None
        try:
            return UseState(self.use_state)
        except ValueError:
            return None


@dataclass
class EntranceVisit(Visit):
    kind: ClassVar[VisitKind] = VisitKind.ENTRANCE

    gate_type: int | None = None
    reservation_id: int | None = None

    @property
    def gate(self) -> Gate | None:
        if self.gate_type is None:
            return None
        try:
            return Gate(self.gate_type)
        except ValueError:
            return None


@dataclass
class EventVisit(Visit):
    kind: ClassVar[VisitKind] = VisitKind.EVENT

    program_code: str | None = None
    event_name: str | None = None
    event_summary: str | None = None
    registered_channel: int | None = None
    virtual_url: str | None = None
    virtual_url_desc: str | None = None
    portal_url: str | None = None
    portal_url_desc: str | None = None


@dataclass
class Ticket:
    id: int | None = None
    ticket_id: str | None = None
    item_name: str | None = None
    item_group_name: str | None = None
    item_summary: str | None = None
    image_large_path: str | None = None
    ticket_type_id: str | None = None
    entrances: list[EntranceVisit] = field(default_factory=list)
    events: list[EventVisit] = field(default_factory=list)
    is_sample: bool = False

    @property
    def external_id(self) -> str | None:
        """Trimmed external ticket id, or None when absent or blank."""
        if self.ticket_id is None:
            return None
        trimmed = self.ticket_id.strip()
        return trimmed or None

    def ticket_key(self, position: int) -> str:
        """Stable key used to group this ticket's visits.

        Tickets without an external id get a synthetic key from their
        position, plus the numeric id when there is one.
        """
        external = self.external_id
        if external is not None:
            return external
        if self.id is None:
            return f"ticket-{position}"
        return f"ticket-{position}-{self.id}"


@dataclass
class Payload:
    tickets: list[Ticket] = field(default_factory=list)
    is_sample: bool = False

    @property
    def entrance_count(self) -> int:
        return sum(len(ticket.entrances) for ticket in self.tickets)

    @property
    def event_count(self) -> int:
        return sum(len(ticket.events) for ticket in self.tickets)


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _base_fields(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": _as_int(raw.get("id")),
        "schedule_name": _as_str(raw.get("schedule_name")),
        "entrance_date": _as_str(raw.get("entrance_date")),
        "start_time": _as_str(raw.get("start_time")),
        "end_time": _as_str(raw.get("end_time")),
        "use_state": _as_int(raw.get("use_state")),
        "admission_time": _as_str(raw.get("admission_time")),
        "on_the_day": raw.get("on_the_day") is True,
    }


def entrance_from_dict(raw: dict[str, Any]) -> EntranceVisit:
    return EntranceVisit(
        **_base_fields(raw),
        gate_type=_as_int(raw.get("gate_type")),
        reservation_id=_as_int(raw.get("user_visiting_reservation_id")),
    )


def event_from_dict(raw: dict[str, Any]) -> EventVisit:
    return EventVisit(
        **_base_fields(raw),
        program_code=_as_str(raw.get("program_code")),
        event_name=_as_str(raw.get("event_name")),
        event_summary=_as_str(raw.get("event_summary")),
        registered_channel=_as_int(raw.get("registered_channel")),
        virtual_url=_as_str(raw.get("virtual_url")),
        virtual_url_desc=_as_str(raw.get("virtual_url_desc")),
        portal_url=_as_str(raw.get("portal_url")),
        portal_url_desc=_as_str(raw.get("portal_url_desc")),
    )


def _dict_items(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def ticket_from_dict(raw: dict[str, Any]) -> Ticket:
    return Ticket(
        id=_as_int(raw.get("id")),
        ticket_id=_as_str(raw.get("ticket_id")),
        item_name=_as_str(raw.get("item_name")),
        item_group_name=_as_str(raw.get("item_group_name")),
        item_summary=_as_str(raw.get("item_summary")),
        image_large_path=_as_str(raw.get("image_large_path")),
        ticket_type_id=_as_str(raw.get("ticket_type_id")),
        entrances=[entrance_from_dict(item) for item in _dict_items(raw.get("schedules"))],
        events=[event_from_dict(item) for item in _dict_items(raw.get("event_schedules"))],
        is_sample=raw.get("is_sample") is True,
    )


def payload_from_dict(raw: dict[str, Any]) -> Payload:
    """Build a Payload from an already shape-checked ``{"list": [...]}`` dict."""
    return Payload(
        tickets=[ticket_from_dict(item) for item in raw["list"]],
        is_sample=raw.get("is_sample") is True,
    )


def schedule_key(visit: Visit) -> str:
    """Fixed-width ``YYYYMMDDHHMM`` key; malformed parts sort last."""
    date_part = visit.entrance_date if visit.entrance_date and DATE_KEY_RE.fullmatch(visit.entrance_date) else DATE_SENTINEL
    time_match = TIME_KEY_RE.match(visit.start_time or "")
    if time_match:
        time_part = time_match.group(0)
    else:
        time_part = NON_DIGIT_RE.sub("", visit.schedule_name or "")[:4] or TIME_SENTINEL
    return f"{date_part}{time_part.ljust(4, '9')}"


def sort_by_schedule(visits: list[Visit]) -> list[Visit]:
    """Stable chronological ordering; equal keys keep discovery order."""
    return sorted(visits, key=schedule_key)


__all__ = [
    "DATE_SENTINEL",
    "TIME_SENTINEL",
    "Gate",
    "UseState",
    "RegisteredChannel",
    "VisitKind",
    "Visit",
    "EntranceVisit",
    "EventVisit",
    "Ticket",
    "Payload",
    "entrance_from_dict",
    "event_from_dict",
    "ticket_from_dict",
    "payload_from_dict",
    "schedule_key",
    "sort_by_schedule",
]
