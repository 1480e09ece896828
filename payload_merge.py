from __future__ import annotations

import logging
from typing import Iterable

from visit_data import Payload, Ticket


logger = logging.getLogger(__name__)


def _keep_ticket(ticket: Ticket, *, allow_samples: bool) -> bool:
    return allow_samples or not ticket.is_sample


def merge_payloads(existing: Payload | None, incoming: Payload) -> Payload:
    """Union of two imports without duplicating tickets.

    Existing tickets come first. The first ticket seen with a given trimmed
    external id wins; tickets without one are always kept. Sample tickets are
    dropped unless the incoming batch is itself a sample.
    """
    allow_samples = incoming.is_sample
    seen_ids: set[str] = set()
    merged: list[Ticket] = []
    dropped_samples = 0
    dropped_duplicates = 0

    sources: Iterable[Ticket] = [*(existing.tickets if existing else []), *incoming.tickets]
    for ticket in sources:
        if not _keep_ticket(ticket, allow_samples=allow_samples):
            dropped_samples += 1
            continue
        external_id = ticket.external_id
        if external_id is not None:
            if external_id in seen_ids:
                dropped_duplicates += 1
                continue
            seen_ids.add(external_id)
        merged.append(ticket)

    if dropped_samples or dropped_duplicates:
        logger.debug(
            "Merge kept %d tickets (dropped %d sample, %d duplicate)",
            len(merged),
            dropped_samples,
            dropped_duplicates,
        )
    return Payload(tickets=merged, is_sample=allow_samples)


__all__ = ["merge_payloads"]
