"""Application context: owns the store, view state, renderers and controller."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .config import Settings, load_settings
from .domain.entrystore import EntryStore, SeedReport, seed_store
from .domain.entrystore.models import utcnow
from .domain.errors import CorruptDataError
from .domain.geo import GeoResolver
from .domain.intake import InputController
from .domain.projection import ViewProjector
from .domain.rendering import (
    MapRenderer,
    MarkerLayer,
    RenderPass,
    TableBuffer,
    TableRenderer,
    ViewSync,
)
from .infra.blobstore import BlobStorage, build_blob_storage
from .infra.events import EventEmitter, get_event_emitter
from .infra.geocoding import GeocodingClient, build_geocoding_client
from .infra.logging import get_logger
from .infra.metrics import MetricsClient, get_metrics_client

__all__ = ["AppContext", "BootstrapReport", "build_app_context"]

logger = get_logger(__name__)


@dataclass(frozen=True)
class BootstrapReport:
    loaded: int
    seed: Optional[SeedReport]
    corrupt: Optional[CorruptDataError]
    render: RenderPass


@dataclass
class AppContext:
    settings: Settings
    store: EntryStore
    projector: ViewProjector
    table: TableBuffer
    map_layer: MarkerLayer
    view_sync: ViewSync
    resolver: GeoResolver
    controller: InputController
    metrics: MetricsClient
    events: EventEmitter

    def bootstrap(self) -> BootstrapReport:
        """Load persisted entries, seed on first run, and draw both views."""

        map_cfg = self.settings.map
        self.map_layer.set_view(map_cfg.center, map_cfg.zoom)
        result = self.store.load()
        seed_report: Optional[SeedReport] = None
        if result.needs_seeding:
            seed_report = seed_store(
                self.store, on_added=lambda _entry: self.view_sync.refresh()
            )
            self.metrics.increment("entry_store_seeded_total", len(seed_report.added))
            self.events.emit(
                "store_seeded",
                {"added": len(seed_report.added), "skipped": len(seed_report.skipped)},
            )
        if result.error is not None:
            self.metrics.increment("entry_store_corrupt_total")
        render = self.view_sync.refresh()
        self.metrics.gauge("entry_store_size", len(self.store))
        logger.info(
            "app_context_bootstrapped",
            extra={
                "loaded": len(result.entries),
                "seeded": len(seed_report.added) if seed_report else 0,
                "corrupt": result.error is not None,
            },
        )
        return BootstrapReport(
            loaded=len(result.entries),
            seed=seed_report,
            corrupt=result.error,
            render=render,
        )


def build_app_context(
    settings: Optional[Settings] = None,
    *,
    storage: Optional[BlobStorage] = None,
    geocoder: Optional[GeocodingClient] = None,
    metrics: Optional[MetricsClient] = None,
    events: Optional[EventEmitter] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> AppContext:
    """Wire every component from settings; explicit arguments win."""

    settings = settings or load_settings()
    metrics = metrics or get_metrics_client()
    events = events or get_event_emitter()
    store = EntryStore(
        storage or build_blob_storage(settings),
        blob_name=settings.storage.blob_name,
    )
    projector = ViewProjector(store)
    table = TableBuffer()
    map_layer = MarkerLayer()
    view_sync = ViewSync(projector, TableRenderer(table), MapRenderer(map_layer))
    resolver = GeoResolver(
        geocoder or build_geocoding_client(settings.geo),
        precision=settings.geo.precision,
        device_timeout_seconds=settings.geo.timeout_seconds,
    )
    controller = InputController(
        store=store,
        resolver=resolver,
        view_sync=view_sync,
        reverse_lookup=settings.geo.reverse_lookup,
        datetime_format=settings.datetime_format,
        metrics=metrics,
        event_emitter=events,
        clock=clock or utcnow,
    )
    return AppContext(
        settings=settings,
        store=store,
        projector=projector,
        table=table,
        map_layer=map_layer,
        view_sync=view_sync,
        resolver=resolver,
        controller=controller,
        metrics=metrics,
        events=events,
    )
