"""Turn pasted text, saved files or web archives into a :class:`Payload`.

Three outcomes are reported separately so the caller can tell the user what
went wrong: blank input, an authentication-failure response from the ticket
service, and anything that does not look like a ticket list.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from config import PARSE_MESSAGES
from visit_data import Payload, payload_from_dict


logger = logging.getLogger(__name__)

PAYLOAD_MARKER = '{"list"'
UNAUTHORIZED_RE = re.compile(r'"message"\s*:\s*"Unauthorized"', re.IGNORECASE)


class PayloadParseError(Exception):
    """Base class for input that could not be turned into a payload."""

    kind = "invalid"

    def __init__(self, message: str | None = None):
        super().__init__(message or PARSE_MESSAGES[self.kind])

    @property
    def message(self) -> str:
        return str(self)


class EmptyPayloadError(PayloadParseError):
    kind = "empty"


class UnauthorizedPayloadError(PayloadParseError):
    kind = "unauthorized"


class InvalidPayloadError(PayloadParseError):
    kind = "invalid"


def extract_embedded_payload(source: str) -> str | None:
    """Cut the ``{"list": ...}`` object out of a larger document.

    Braces are depth-counted from the marker; None when the marker is
    missing or the braces never balance.
    """
    cleaned = source.replace("\x00", "")
    start = cleaned.find(PAYLOAD_MARKER)
    if start == -1:
        return None
    depth = 0
    for index in range(start, len(cleaned)):
        char = cleaned[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return cleaned[start:index + 1]
    return None


def _is_ticket_payload(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("list"), list)


def _try_load(text: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        # ValueError covers JSONDecodeError and oversized integer literals.
        return None
    return parsed if _is_ticket_payload(parsed) else None


def _validate(raw: dict[str, Any]) -> Payload:
    if not all(isinstance(item, dict) for item in raw["list"]):
        raise InvalidPayloadError(PARSE_MESSAGES["missing_list"])
    return payload_from_dict(raw)


def parse_payload_text(raw_text: str) -> Payload:
    """Parse pasted or loaded text; raise a :class:`PayloadParseError` subclass on failure."""
    trimmed = raw_text.strip() if raw_text else ""
    if not trimmed:
        raise EmptyPayloadError()

    if UNAUTHORIZED_RE.search(trimmed):
        raise UnauthorizedPayloadError()

    direct = _try_load(trimmed)
    if direct is not None:
        return _validate(direct)

    embedded = extract_embedded_payload(raw_text)
    if embedded is not None:
        fallback = _try_load(embedded)
        if fallback is not None:
            logger.debug("Recovered embedded payload of %d characters", len(embedded))
            return _validate(fallback)
        logger.debug("Embedded payload found but it is not valid JSON")

    try:
        json.loads(trimmed)
    except (ValueError, RecursionError):
        raise InvalidPayloadError() from None
    raise InvalidPayloadError(PARSE_MESSAGES["missing_list"])


def parse_payload_bytes(data: bytes) -> Payload:
    """Decode a saved file (JSON, HTML or web archive) and parse it."""
    return parse_payload_text(data.decode("utf-8", errors="replace"))


__all__ = [
    "PayloadParseError",
    "EmptyPayloadError",
    "UnauthorizedPayloadError",
    "InvalidPayloadError",
    "extract_embedded_payload",
    "parse_payload_text",
    "parse_payload_bytes",
]
