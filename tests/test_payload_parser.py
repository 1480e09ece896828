import json

import pytest

from config import PARSE_MESSAGES
from factories import make_entrance, make_ticket
from payload_parser import (
    EmptyPayloadError,
    InvalidPayloadError,
    PayloadParseError,
    UnauthorizedPayloadError,
    extract_embedded_payload,
    parse_payload_bytes,
    parse_payload_text,
)


def _payload_json(**extra):
    return json.dumps({"list": [make_ticket("T1", entrances=[make_entrance()])], **extra})


class TestParsePayloadText:
    def test_direct_json(self):
        payload = parse_payload_text(_payload_json())
        assert [ticket.external_id for ticket in payload.tickets] == ["T1"]
        assert len(payload.tickets[0].entrances) == 1

    @pytest.mark.parametrize("raw", ["", "   \n\t"])
    def test_blank_input(self, raw):
        with pytest.raises(EmptyPayloadError) as info:
            parse_payload_text(raw)
        assert info.value.message == PARSE_MESSAGES["empty"]

    def test_unauthorized_signal(self):
        with pytest.raises(UnauthorizedPayloadError) as info:
            parse_payload_text('{"message" : "unauthorized"}')
        assert info.value.message == PARSE_MESSAGES["unauthorized"]

    def test_unauthorized_is_distinct_from_invalid(self):
        assert not issubclass(UnauthorizedPayloadError, InvalidPayloadError)
        assert issubclass(UnauthorizedPayloadError, PayloadParseError)

    def test_not_json(self):
        with pytest.raises(InvalidPayloadError) as info:
            parse_payload_text("hello there")
        assert info.value.message == PARSE_MESSAGES["invalid"]

    def test_json_without_list(self):
        with pytest.raises(InvalidPayloadError) as info:
            parse_payload_text('{"items": []}')
        assert info.value.message == PARSE_MESSAGES["missing_list"]

    def test_list_with_non_object_tickets(self):
        with pytest.raises(InvalidPayloadError):
            parse_payload_text('{"list": [1, 2]}')

    def test_embedded_in_html(self):
        html = f"<html><body><pre>{_payload_json(is_sample=True)}</pre></body></html>"
        payload = parse_payload_text(html)
        assert payload.is_sample
        assert payload.tickets[0].external_id == "T1"

    def test_unbalanced_embedded_payload(self):
        with pytest.raises(InvalidPayloadError):
            parse_payload_text('<pre>{"list": [{"ticket_id": "T1"}</pre>')

    def test_deeply_nested_input_is_invalid(self):
        with pytest.raises(InvalidPayloadError) as info:
            parse_payload_text("[" * 100000 + "]" * 100000)
        assert info.value.message == PARSE_MESSAGES["invalid"]

    def test_non_ascii_digit_id_is_ignored(self):
        payload = parse_payload_text(json.dumps({"list": [{"ticket_id": "T1", "id": "\u00b2"}]}))
        assert payload.tickets[0].id is None
        assert payload.tickets[0].external_id == "T1"

    def test_bytes_with_nul_padding(self):
        data = b"bplist00\x00\x00" + _payload_json().encode("utf-8") + b"\x00\xff"
        payload = parse_payload_bytes(data)
        assert payload.tickets[0].external_id == "T1"


class TestExtractEmbeddedPayload:
    def test_nested_braces(self):
        source = 'junk {"list": [{"a": {"b": 1}}]} trailing }'
        assert extract_embedded_payload(source) == '{"list": [{"a": {"b": 1}}]}'

    def test_marker_missing(self):
        assert extract_embedded_payload('{"items": []}') is None

    def test_nul_characters_removed_before_search(self):
        source = '{"li\x00st": []}'
        assert extract_embedded_payload(source) == '{"list": []}'
