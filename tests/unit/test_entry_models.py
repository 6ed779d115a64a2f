"""Tests for the entry record and its JSON codec."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from backend.app.domain.entrystore import Entry, dump_entries, parse_entries
from backend.app.domain.errors import CorruptDataError, InvalidEntryError

pytestmark = [pytest.mark.entrystore]


def test_round_trip_preserves_absent_and_empty_fields():
    entries = [
        Entry(link="https://a", description="A", date_time="2023-01-01 9:00 AM"),
        Entry(
            link="https://b",
            description="B",
            date_time="2023-01-02 9:00 AM",
            city="",
            state="",
            latitude="33.1",
            longitude="-96.9",
        ),
    ]

    blob = dump_entries(entries)
    restored = parse_entries(blob)

    assert restored == entries
    assert json.loads(blob)[0] == {
        "link": "https://a",
        "description": "A",
        "dateTime": "2023-01-01 9:00 AM",
    }
    assert json.loads(blob)[1]["city"] == ""


def test_numeric_coordinates_are_read_as_strings():
    blob = json.dumps(
        [
            {
                "link": "https://a",
                "description": "A",
                "dateTime": "2023-01-01",
                "latitude": 33.5,
                "longitude": -97,
            }
        ]
    )

    (entry,) = parse_entries(blob)

    assert entry.latitude == "33.5"
    assert entry.longitude == "-97"


@pytest.mark.parametrize(
    "blob",
    [
        "not json",
        '{"link": "x"}',
        '["plain string"]',
        '[{"link": "x", "description": "y"}]',
        '[{"link": "x", "description": "y", "dateTime": "z", "city": ["list"]}]',
        '[{"link": "x", "description": "y", "dateTime": true}]',
    ],
)
def test_malformed_blobs_raise_corrupt_data(blob):
    with pytest.raises(CorruptDataError):
        parse_entries(blob)


def test_new_entry_is_stamped_and_trimmed():
    ts = datetime(2026, 10, 19, 18, 30, tzinfo=timezone.utc)

    entry = Entry.new(
        link="  https://example.com/live  ",
        description=" Finals ",
        city=" Aspen ",
        state="CO",
        latitude="39.161113",
        longitude="-106.753560",
        timestamp=ts,
    )

    assert entry.link == "https://example.com/live"
    assert entry.description == "Finals"
    assert entry.city == "Aspen"
    assert entry.created_at == "2026-10-19T18:30:00+00:00"
    assert entry.date_time == ts.astimezone().strftime("%Y-%m-%d %I:%M %p")


@pytest.mark.parametrize("link, description", [("", "Finals"), ("https://x", "   ")])
def test_new_entry_requires_link_and_description(link, description):
    with pytest.raises(InvalidEntryError):
        Entry.new(link=link, description=description)


def test_value_of_reads_absent_fields_as_empty():
    entry = Entry(link="https://a", description="A", date_time="2023")

    assert entry.value_of("city") == ""
    assert entry.value_of("dateTime") == "2023"
    assert not entry.has_coordinates
    with pytest.raises(KeyError):
        entry.value_of("venue")


def test_field_values_skip_absent_fields():
    entry = Entry(link="https://a", description="A", date_time="2023", city="")

    assert entry.field_values() == ["https://a", "A", "2023", ""]
