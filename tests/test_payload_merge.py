from factories import make_payload, make_ticket
from payload_merge import merge_payloads


def _ids(payload):
    return [ticket.ticket_id for ticket in payload.tickets]


class TestMergePayloads:
    def test_first_import(self):
        incoming = make_payload(make_ticket("A"), make_ticket("B"))
        assert _ids(merge_payloads(None, incoming)) == ["A", "B"]

    def test_reimport_is_idempotent(self):
        payload = make_payload(make_ticket("A"), make_ticket("B"), make_ticket("C"))
        once = merge_payloads(None, payload)
        twice = merge_payloads(once, payload)
        assert _ids(twice) == _ids(once) == ["A", "B", "C"]

    def test_existing_ticket_wins(self):
        existing = make_payload(make_ticket("A", item_name="old name"))
        incoming = make_payload(make_ticket(" A ", item_name="new name"), make_ticket("B"))
        merged = merge_payloads(existing, incoming)
        assert [ticket.item_name for ticket in merged.tickets] == ["old name", "Ticket B"]

    def test_tickets_without_id_are_never_deduplicated(self):
        existing = make_payload(make_ticket(None, item_name="x"))
        incoming = make_payload(make_ticket(None, item_name="x"), make_ticket("", item_name="y"))
        merged = merge_payloads(existing, incoming)
        assert [ticket.item_name for ticket in merged.tickets] == ["x", "x", "y"]

    def test_existing_then_incoming_order(self):
        existing = make_payload(make_ticket("B"), make_ticket("A"))
        incoming = make_payload(make_ticket("C"), make_ticket("A"), make_ticket("D"))
        assert _ids(merge_payloads(existing, incoming)) == ["B", "A", "C", "D"]

    def test_samples_dropped_when_incoming_is_real(self):
        existing = make_payload(make_ticket("S1", is_sample=True), make_ticket("A"), is_sample=True)
        incoming = make_payload(make_ticket("S2", is_sample=True), make_ticket("B"))
        merged = merge_payloads(existing, incoming)
        assert _ids(merged) == ["A", "B"]
        assert not merged.is_sample

    def test_samples_kept_when_incoming_is_sample(self):
        existing = make_payload(make_ticket("S1", is_sample=True))
        incoming = make_payload(make_ticket("S2", is_sample=True), is_sample=True)
        merged = merge_payloads(existing, incoming)
        assert _ids(merged) == ["S1", "S2"]
        assert merged.is_sample

    def test_inputs_are_not_mutated(self):
        existing = make_payload(make_ticket("A"))
        incoming = make_payload(make_ticket("A"), make_ticket("B"))
        merge_payloads(existing, incoming)
        assert _ids(existing) == ["A"]
        assert _ids(incoming) == ["A", "B"]
