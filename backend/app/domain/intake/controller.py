"""InputController: turns page actions into resolver, store and view calls."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, List, Optional

from ...infra.events import EventEmitter, get_event_emitter
from ...infra.geocoding.device import DeviceLocator
from ...infra.logging import get_logger
from ...infra.metrics import MetricsClient, get_metrics_client
from ..entrystore.models import Entry, utcnow
from ..entrystore.store import EntryStore
from ..errors import (
    CatalogError,
    InvalidEntryError,
    PersistenceFailedError,
    ReverseLookupFailedError,
)
from ..geo import Coordinates, GeoResolver
from ..rendering import RenderPass, ViewSync
from .flow import EntryCreationFlow, EntryForm, FlowState

__all__ = ["InputController", "SubmissionOutcome"]

logger = get_logger(__name__)


@dataclass
class SubmissionOutcome:
    flow: EntryCreationFlow
    entry: Optional[Entry] = None
    warnings: List[CatalogError] = field(default_factory=list)
    render: Optional[RenderPass] = None

    @property
    def ok(self) -> bool:
        return self.flow.state is FlowState.PERSISTED

    @property
    def error(self) -> Optional[CatalogError]:
        return self.flow.error

    @property
    def messages(self) -> List[str]:
        found = [self.error] if self.error is not None else []
        return [item.user_message for item in found + self.warnings]


class InputController:
    def __init__(
        self,
        *,
        store: EntryStore,
        resolver: GeoResolver,
        view_sync: ViewSync,
        reverse_lookup: bool = False,
        datetime_format: str = "%Y-%m-%d %I:%M %p",
        clock: Callable[[], datetime] = utcnow,
        metrics: MetricsClient | None = None,
        event_emitter: EventEmitter | None = None,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._view_sync = view_sync
        self._reverse_lookup = reverse_lookup
        self._datetime_format = datetime_format
        self._clock = clock
        self._metrics = metrics or get_metrics_client()
        self._events = event_emitter or get_event_emitter()

    # ------------------------------------------------------------------
    # View actions
    # ------------------------------------------------------------------
    def toggle_sort(self, column: str) -> RenderPass:
        return self._view_sync.update(lambda projector: projector.toggle_sort(column))

    def search(self, text: str) -> RenderPass:
        return self._view_sync.update(lambda projector: projector.set_filter(text))

    # ------------------------------------------------------------------
    # Entry creation
    # ------------------------------------------------------------------
    async def submit(
        self,
        form: EntryForm,
        *,
        device_locator: Optional[DeviceLocator] = None,
    ) -> SubmissionOutcome:
        """Run one entry-creation flow; the form is cleared only on success."""

        flow = EntryCreationFlow(form=form.snapshot())
        outcome = SubmissionOutcome(flow=flow)
        self._metrics.increment("entry_submission_attempt_total")
        try:
            if not flow.form.link.strip() or not flow.form.description.strip():
                raise InvalidEntryError("link and description must not be empty")
            if flow.is_device_path:
                entry = await self._run_device_path(flow, device_locator, outcome)
            else:
                entry = await self._run_manual_path(flow)
        except CatalogError as exc:
            flow.fail(exc)
            self._metrics.increment("entry_submission_failed_total")
            self._metrics.increment(f"entry_submission_failed_{exc.code}_total")
            logger.warning(
                "entry_submission_failed",
                extra={"flow_id": flow.flow_id, "error_code": exc.code, "detail": exc.message},
            )
            return outcome

        try:
            await asyncio.to_thread(self._store.add, entry)
        except PersistenceFailedError as exc:
            outcome.warnings.append(exc)
            self._metrics.increment("entry_persist_failed_total")
        flow.advance(FlowState.PERSISTED)
        form.clear()
        outcome.entry = entry
        outcome.render = self._view_sync.refresh()

        self._metrics.increment("entry_submission_success_total")
        self._metrics.gauge("entry_store_size", len(self._store))
        self._events.emit(
            "entry_created",
            {
                "flow_id": flow.flow_id,
                "description": entry.description,
                "device_path": flow.is_device_path,
                "has_place_label": bool(entry.city or entry.state),
            },
        )
        logger.info(
            "entry_submission_persisted",
            extra={
                "flow_id": flow.flow_id,
                "device_path": flow.is_device_path,
                "warnings": [warning.code for warning in outcome.warnings],
            },
        )
        return outcome

    async def _run_manual_path(self, flow: EntryCreationFlow) -> Entry:
        flow.advance(FlowState.AWAITING_LOCATION)
        coordinates = await self._resolver.resolve(flow.form.city, flow.form.state)
        flow.advance(FlowState.RESOLVED)
        return self._build_entry(flow, coordinates, city=flow.form.city, state=flow.form.state)

    async def _run_device_path(
        self,
        flow: EntryCreationFlow,
        locator: Optional[DeviceLocator],
        outcome: SubmissionOutcome,
    ) -> Entry:
        flow.advance(FlowState.AWAITING_DEVICE_FIX)
        coordinates = await self._resolver.current_position(locator)
        # place labels are best-effort enrichment on an already valid entry
        entry = self._build_entry(flow, coordinates, city="", state="")
        if not self._reverse_lookup:
            return entry
        flow.advance(FlowState.AWAITING_REVERSE_LOOKUP)
        try:
            place = await self._resolver.reverse_resolve(
                float(coordinates.latitude), float(coordinates.longitude)
            )
        except ReverseLookupFailedError as exc:
            outcome.warnings.append(exc)
            return entry
        return replace(entry, city=place.city, state=place.state)

    def _build_entry(
        self,
        flow: EntryCreationFlow,
        coordinates: Coordinates,
        *,
        city: str,
        state: str,
    ) -> Entry:
        return Entry.new(
            link=flow.form.link,
            description=flow.form.description,
            city=city,
            state=state,
            latitude=coordinates.latitude,
            longitude=coordinates.longitude,
            timestamp=self._clock(),
            datetime_format=self._datetime_format,
        )
