from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable

from config import EXPORT_FILENAME_PREFIX, SEPARATOR, SHARE_URL, STATIC_LABELS
from display_utils import LabelTables
from payload_merge import merge_payloads
from payload_parser import PayloadParseError, parse_payload_bytes, parse_payload_text
from png_utils import encode_png, measure_bold_text, measure_text, render_full_image
from summary_layout import SummaryLayout, SummaryModel, build_summary_model, plan_summary
from text_fit import MeasureFn
from visit_data import Payload, Ticket


logger = logging.getLogger(__name__)


class ItinerarySession:
    """In-memory state for one viewing session.

    A failed parse never touches the accumulated payload; it only replaces
    ``last_error`` with a message for the user.
    """

    def __init__(self, labels: LabelTables | None = None):
        self.labels = labels or LabelTables()
        self.payload: Payload | None = None
        self.last_error = ""
        self.show_details = True
        self.excluded: set[str] = set()

    def _commit(self, parse: Callable[[], Payload], *, merge: bool) -> bool:
        try:
            incoming = parse()
        except PayloadParseError as error:
            self.last_error = error.message
            logger.warning("Import rejected (%s): %s", type(error).__name__, error.message)
            return False
        self.payload = merge_payloads(self.payload if merge else None, incoming)
        self.last_error = ""
        logger.info(
            "Imported %d ticket(s); session now holds %d", len(incoming.tickets), len(self.payload.tickets)
        )
        return True

    def ingest_text(self, raw_text: str, *, merge: bool = True) -> bool:
        return self._commit(lambda: parse_payload_text(raw_text), merge=merge)

    def ingest_bytes(self, data: bytes, *, merge: bool = True) -> bool:
        return self._commit(lambda: parse_payload_bytes(data), merge=merge)

    def clear(self) -> None:
        self.payload = None
        self.last_error = ""
        self.excluded.clear()

    def set_included(self, ticket_key: str, included: bool) -> None:
        if included:
            self.excluded.discard(ticket_key)
        else:
            self.excluded.add(ticket_key)

    def included_tickets(self) -> list[Ticket]:
        if self.payload is None:
            return []
        return [
            ticket
            for position, ticket in enumerate(self.payload.tickets)
            if ticket.ticket_key(position) not in self.excluded
        ]

    def summary_model(self) -> SummaryModel | None:
        tickets = self.included_tickets()
        if not tickets:
            return None
        return build_summary_model(tickets, self.labels)

    def plan_layout(
        self,
        measure: MeasureFn = measure_text,
        bold_measure: MeasureFn | None = measure_bold_text,
    ) -> SummaryLayout | None:
        model = self.summary_model()
        if model is None:
            return None
        return plan_summary(model, measure, show_details=self.show_details, bold_measure=bold_measure)

    @property
    def share_text(self) -> str:
        tickets = self.included_tickets()
        return STATIC_LABELS["share_template"].format(
            entrances=sum(len(ticket.entrances) for ticket in tickets),
            events=sum(len(ticket.events) for ticket in tickets),
            sep=SEPARATOR,
            url=SHARE_URL,
        )


def export_filename(now: datetime | None = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M")
    return f"{EXPORT_FILENAME_PREFIX}_{stamp}.png"


@dataclass(frozen=True)
class SharePayload:
    title: str
    text: str
    filename: str
    data: bytes


ShareHandler = Callable[[SharePayload], Awaitable[None]]


def _render_png(layout: SummaryLayout) -> bytes:
    return encode_png(render_full_image(layout))


class SummaryExporter:
    """Save and share the full-resolution summary image.

    Each action has its own busy flag: a request made while the same kind of
    request is still running returns None without doing anything.
    """

    def __init__(self, session: ItinerarySession):
        self.session = session
        self.is_saving = False
        self.is_sharing = False

    def _layout(self) -> SummaryLayout:
        layout = self.session.plan_layout()
        if layout is None:
            raise ValueError("There are no included tickets to render.")
        return layout

    async def save(self, output_dir: Path, now: datetime | None = None) -> Path | None:
        if self.is_saving:
            logger.debug("Save already in progress; ignoring request")
            return None
        self.is_saving = True
        try:
            data = await asyncio.to_thread(_render_png, self._layout())
            output_dir.mkdir(parents=True, exist_ok=True)
            dest = output_dir / export_filename(now)
            await asyncio.to_thread(dest.write_bytes, data)
            logger.info("Saved summary image to %s", dest)
            return dest
        finally:
            self.is_saving = False

    async def share(self, handler: ShareHandler) -> SharePayload | None:
        if self.is_sharing:
            logger.debug("Share already in progress; ignoring request")
            return None
        self.is_sharing = True
        try:
            data = await asyncio.to_thread(_render_png, self._layout())
            payload = SharePayload(
                title=STATIC_LABELS["share_title"],
                text=self.session.share_text,
                filename=f"{EXPORT_FILENAME_PREFIX}.png",
                data=data,
            )
            await handler(payload)
            return payload
        finally:
            self.is_sharing = False


__all__ = [
    "ItinerarySession",
    "SummaryExporter",
    "SharePayload",
    "export_filename",
]
