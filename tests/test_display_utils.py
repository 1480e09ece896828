import json

import pytest

from colors import apply, resolve
from display_utils import (
    format_summary_date,
    format_time,
    load_label_tables,
    resolve_registered_channel,
    resolve_use_state,
    strip_channel_code,
    ticket_letter,
)


@pytest.mark.parametrize("index, expected", [(0, "A"), (25, "Z"), (26, "AA"), (27, "AB"), (701, "ZZ"), (702, "AAA")])
def test_ticket_letter(index, expected):
    assert ticket_letter(index) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("20250420", ("2025/04/20(Sun)", 4)),
        ("2025-04-20", ("2025-04-20", None)),
        ("20251340", ("20251340", None)),
        (None, ("No date", None)),
    ],
)
def test_format_summary_date(raw, expected):
    assert format_summary_date(raw) == expected


@pytest.mark.parametrize("raw, expected", [("0930", "09:30"), ("093015", "09:30:15"), ("9:30", "9:30"), ("", "Not set")])
def test_format_time(raw, expected):
    assert format_time(raw) == expected


def test_use_state_labels():
    assert resolve_use_state(1) == "Used"
    assert resolve_use_state(None) == "Unknown state"
    assert resolve_use_state(42) == "Unknown state (42)"


def test_registered_channel_labels():
    assert resolve_registered_channel(3) == "Seven-day lottery (3)"
    assert resolve_registered_channel(99) == "Unknown (99)"
    assert strip_channel_code("Seven-day lottery (3)") == "Seven-day lottery"


def test_load_label_tables(tmp_path):
    path = tmp_path / "labels.json"
    path.write_text(json.dumps({"pavilions": {"P1": "Gas"}, "ticket_types": {"7": "Season pass"}}), encoding="utf-8")
    labels = load_label_tables(path)
    assert labels.pavilions == {"P1": "Gas"}
    assert labels.ticket_types == {"7": "Season pass"}
    assert load_label_tables(None).pavilions == {}


def test_load_label_tables_rejects_non_object(tmp_path):
    path = tmp_path / "labels.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_label_tables(path)


def test_color_tokens():
    assert resolve("#ffffff") == (255, 255, 255)
    assert resolve("card_background") == (255, 255, 255)
    assert resolve("no_such_token") is None
    assert apply(None) == apply("no_such_token")
