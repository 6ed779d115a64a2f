"""Tests for the entry-creation flow driven through the input controller."""

# Coverage: manual path, device path, reverse enrichment, persistence warnings

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from backend.app.domain.errors import (
    GeoLookupFailedError,
    GeolocationDeniedError,
    InvalidEntryError,
    PersistenceFailedError,
    ReverseLookupFailedError,
)
from backend.app.domain.intake import EntryForm, FlowState
from backend.app.domain.projection import collation_key
from backend.app.domain.intake import controller as controller_module
from backend.app.infra.blobstore import BlobStorageError, InMemoryBlobStorage
from backend.app.infra.geocoding.device import ReportedDeviceLocator
from backend.app.infra.geocoding.nominatim import NominatimGeocodingClient
from tests.helpers.context import FIXED_NOW, make_context
from tests.helpers.logging import RecordingLogger, find_log

pytestmark = [pytest.mark.intake]


class ReadOnlyStorage(InMemoryBlobStorage):
    def set(self, name: str, value: str) -> None:
        raise BlobStorageError("quota", code="quota_exceeded")


def _states(outcome):
    return [state for state, _ in outcome.flow.history]


def test_manual_submission_persists_and_clears_form():
    context = make_context()
    form = EntryForm(
        link="https://streams.test/finals",
        description="Beach Finals",
        city="Hermosa Beach",
        state="CA",
    )

    outcome = asyncio.run(context.controller.submit(form))

    assert outcome.ok
    assert outcome.entry.latitude == "33.862237"
    assert outcome.entry.longitude == "-118.399519"
    assert outcome.entry.city == "Hermosa Beach"
    assert outcome.entry.created_at == FIXED_NOW.isoformat(timespec="seconds")
    assert _states(outcome) == [
        FlowState.IDLE,
        FlowState.AWAITING_LOCATION,
        FlowState.RESOLVED,
        FlowState.PERSISTED,
    ]
    assert (form.link, form.description, form.city, form.state) == ("", "", "", "")
    assert context.store.all() == (outcome.entry,)
    assert outcome.render.marker_count == 1
    assert context.events.topics() == ["entry_created"]
    assert context.metrics.counters["entry_submission_success_total"] == 1


def test_failed_lookup_adds_nothing_and_keeps_form(monkeypatch):
    recorder = RecordingLogger()
    monkeypatch.setattr(controller_module, "logger", recorder)
    context = make_context()
    form = EntryForm(
        link="https://streams.test/x", description="X", city="Nowhereville", state="ZZ"
    )

    outcome = asyncio.run(context.controller.submit(form))

    assert not outcome.ok
    assert isinstance(outcome.error, GeoLookupFailedError)
    assert outcome.flow.state is FlowState.IDLE
    assert outcome.messages == [
        "Error fetching latitude and longitude. Please check your city and state."
    ]
    assert len(context.store) == 0
    assert form.city == "Nowhereville"
    assert form.description == "X"
    log = find_log(recorder.records, level="warning", message="entry_submission_failed")
    assert log["extra"]["error_code"] == "geo_lookup_failed"
    assert context.metrics.counters["entry_submission_failed_geo_lookup_failed_total"] == 1


def test_blank_link_is_rejected_before_lookup():
    context = make_context()

    outcome = asyncio.run(
        context.controller.submit(EntryForm(link=" ", description="X", city="Lewisville", state="TX"))
    )

    assert isinstance(outcome.error, InvalidEntryError)
    assert _states(outcome) == [FlowState.IDLE]


def test_device_submission_enriches_place_labels():
    context = make_context()
    form = EntryForm(link="https://s/live", description="Live", use_device_location=True)
    locator = ReportedDeviceLocator(latitude=33.8622, longitude=-118.3995)

    outcome = asyncio.run(context.controller.submit(form, device_locator=locator))

    assert outcome.ok
    assert (outcome.entry.city, outcome.entry.state) == ("Hermosa Beach", "CA")
    assert (outcome.entry.latitude, outcome.entry.longitude) == ("33.862200", "-118.399500")
    assert FlowState.AWAITING_REVERSE_LOOKUP in _states(outcome)
    assert form.use_device_location is True
    assert form.link == ""


def test_device_submission_survives_reverse_lookup_failure():
    context = make_context()
    form = EntryForm(link="https://s/sea", description="Offshore", use_device_location=True)
    locator = ReportedDeviceLocator(latitude=0.0, longitude=0.0)

    outcome = asyncio.run(context.controller.submit(form, device_locator=locator))

    assert outcome.ok
    assert (outcome.entry.city, outcome.entry.state) == ("", "")
    assert [type(w) for w in outcome.warnings] == [ReverseLookupFailedError]
    assert len(context.store) == 1
    persisted = json.loads(context.store._storage.get("streamEntries"))
    assert persisted[0]["city"] == "" and persisted[0]["state"] == ""


def test_malformed_reverse_payload_still_keeps_device_entry():
    geocoder = NominatimGeocodingClient(
        base_url="https://geo.test",
        user_agent="StreamAtlasTests/1.0",
        transport=httpx.MockTransport(
            lambda request: httpx.Response(200, json={"address": ["Hermosa Beach"]})
        ),
    )
    context = make_context(geocoder=geocoder)
    form = EntryForm(link="https://s/live", description="Live", use_device_location=True)
    locator = ReportedDeviceLocator(latitude=33.8622, longitude=-118.3995)

    outcome = asyncio.run(context.controller.submit(form, device_locator=locator))

    assert outcome.ok
    assert (outcome.entry.city, outcome.entry.state) == ("", "")
    assert [w.code for w in outcome.warnings] == ["reverse_lookup_failed"]
    assert len(context.store) == 1


def test_device_submission_without_reverse_lookup_skips_that_state():
    context = make_context(reverse_lookup=False)
    form = EntryForm(link="https://s/live", description="Live", use_device_location=True)
    locator = ReportedDeviceLocator(latitude=33.8622, longitude=-118.3995)

    outcome = asyncio.run(context.controller.submit(form, device_locator=locator))

    assert _states(outcome) == [
        FlowState.IDLE,
        FlowState.AWAITING_DEVICE_FIX,
        FlowState.PERSISTED,
    ]
    assert outcome.entry.city == ""


def test_device_denied_adds_nothing():
    context = make_context()
    form = EntryForm(link="https://s/live", description="Live", use_device_location=True)

    outcome = asyncio.run(
        context.controller.submit(form, device_locator=ReportedDeviceLocator(error="denied"))
    )

    assert isinstance(outcome.error, GeolocationDeniedError)
    assert len(context.store) == 0
    assert form.link == "https://s/live"


def test_persistence_failure_is_a_warning_not_an_error():
    context = make_context(storage=ReadOnlyStorage())
    form = EntryForm(link="https://s/a", description="A", city="Lewisville", state="TX")

    outcome = asyncio.run(context.controller.submit(form))

    assert outcome.ok
    assert [type(w) for w in outcome.warnings] == [PersistenceFailedError]
    assert outcome.warnings[0].retryable is False
    assert len(context.store) == 1
    assert context.metrics.counters["entry_persist_failed_total"] == 1


def test_user_submission_may_repeat_a_seed_description():
    context = make_context()
    context.bootstrap()
    seeded = context.store.all()[0]
    form = EntryForm(
        link="https://s/again", description=seeded.description, city="Lewisville", state="TX"
    )

    outcome = asyncio.run(context.controller.submit(form))

    assert outcome.ok
    assert len(context.store) == 10


def test_concurrent_submissions_keep_separate_flows():
    context = make_context()
    forms = [
        EntryForm(link="https://s/a", description="A", city="Lewisville", state="TX"),
        EntryForm(link="https://s/b", description="B", city="Nowhereville", state="ZZ"),
        EntryForm(link="https://s/c", description="C", city="Hermosa Beach", state="CA"),
    ]

    async def run_all():
        return await asyncio.gather(*(context.controller.submit(form) for form in forms))

    outcomes = asyncio.run(run_all())

    assert [outcome.ok for outcome in outcomes] == [True, False, True]
    assert len({outcome.flow.flow_id for outcome in outcomes}) == 3
    assert sorted(entry.description for entry in context.store.all()) == ["A", "C"]


def test_sort_and_search_redraw_both_views():
    context = make_context()
    context.bootstrap()

    render = context.controller.search("motherlode")
    assert len(render.rows) == 3
    assert render.marker_count == 3
    assert len(context.map_layer.markers) == 3

    render = context.controller.toggle_sort("description")
    descriptions = [row.label for row in render.rows]
    assert descriptions == sorted(descriptions, key=collation_key, reverse=True)

    render = context.controller.search("")
    assert len(context.table.rows) == 9
