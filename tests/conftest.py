import pytest

from factories import fake_measure, make_entrance, make_event, make_payload, make_ticket


@pytest.fixture(name="measure")
def measure_fixture():
    return fake_measure


@pytest.fixture(name="two_ticket_payload")
def two_ticket_payload_fixture():
    return make_payload(
        make_ticket(
            "T1",
            entrances=[make_entrance("20250420", "9:00-", 1), make_entrance("20250601", "10:00-", 2)],
            events=[
                make_event("20250420", "P1", "Gas Pavilion", "1400"),
                make_event("20250420", "P2", "Japan Pavilion", "1030"),
                make_event("20250505", "P3", "Orphan Pavilion", "1100"),
            ],
        ),
        make_ticket(
            "T2",
            entrances=[make_entrance("20250420", "17:00-", 2)],
            events=[make_event("20250420", "P4", "Night Show", "1900")],
        ),
    )
