"""Built-in example streams offered on first run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ...infra.logging import get_logger
from ..errors import PersistenceFailedError
from .models import Entry
from .store import EntryStore

__all__ = ["SEED_ENTRIES", "SeedReport", "seed_store"]

logger = get_logger(__name__)

SEED_ENTRIES: tuple[Entry, ...] = (
    Entry(
        link="https://www.youtube.com/watch?v=Zz5IPOjSZMY&t=1322s",
        description="2023 BlackRabbit AVP Open Malone/Young vs Klentzman/Liu",
        date_time="2023-03-25 8:00 AM",
        city="Lewisville",
        state="TX",
        latitude="33.015576",
        longitude="-96.997158",
    ),
    Entry(
        link="https://www.youtube.com/watch?v=32UHRVx5GhA",
        description=(
            "Amazing ICN (It's Called Normal) 3-on-3 Exhibition with Randy "
            "Stoklos and NYVarsity"
        ),
        date_time="2023-09-4 12:00 PM",
        city="Aspen",
        state="CO",
        latitude="39.161113",
        longitude="-106.753560",
    ),
    Entry(
        link="https://www.youtube.com/watch?v=PiiBVZYQXfU",
        description="2023 NCAA Championships FAU vs LSU",
        date_time="2023-05-05 2:00 PM",
        city="Gulf Shores",
        state="AL",
        latitude="30.2444009",
        longitude="-87.7563601",
    ),
    Entry(
        link=(
            "https://www.youtube.com/watch?v=113Pc5FMzog"
            "&pp=ygUbZXhoaWJpdGlvbiB0aHJlZXMgbnl2YXJzaXR5"
        ),
        description="2023 AVP MBO TaCrabb/Sander vs Budinger/Evans (8/19)",
        date_time="2023-08-19 10:00 AM",
        city="Manhattan Beach",
        state="CA",
        latitude="33.891599",
        longitude="-118.395124",
    ),
    Entry(
        link="https://www.youtube.com/watch?v=mUoJU1JWn1w",
        description="2023 Motherlode: Couts/G.Basey vs Del Sol/Hoover",
        date_time="2023-09-4 3:00 PM",
        city="Aspen",
        state="CO",
        latitude="39.191113",
        longitude="-106.823560",
    ),
    Entry(
        link="https://www.youtube.com/watch?v=jBqZ3RqQCDc",
        description="2023 Motherlode 45s Griffith/Young vs Sadler/Sass",
        date_time="2023-08-31 2:00 PM",
        city="Aspen",
        state="CO",
        latitude="39.1888327",
        longitude="-106.8268543",
    ),
    Entry(
        link="https://www.youtube.com/live/E2OgcoMcBpg?si=TQj1KFHXZIDcDrKI",
        description="2023 Motherlode Finals 50s Griffith/Young vs Lentin/Meador",
        date_time="2023-08-30 4:00 PM",
        city="Aspen",
        state="CO",
        latitude="39.1888327",
        longitude="-106.8268543",
    ),
    Entry(
        link="https://www.youtube.com/watch?v=hc_N3PCBEs4&t=676s",
        description="TAMU-CC vs TCU 1s",
        date_time="2019-03-23 3:15 PM",
        city="Ft. Worth",
        state="TX",
        latitude="32.708327",
        longitude="-97.3662645",
    ),
    Entry(
        link="https://www.youtube.com/watch?v=YDyWzEuZdAg",
        description="2023 CUSA Championship FAU vs FIU",
        date_time="2023-04-29 3:00 PM",
        city="Ft. Lauderdale",
        state="FL",
        latitude="26.1092371",
        longitude="-80.1097871",
    ),
)


@dataclass
class SeedReport:
    added: List[Entry] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    persist_failures: int = 0


def seed_store(
    store: EntryStore,
    seeds: Sequence[Entry] = SEED_ENTRIES,
    *,
    on_added: Optional[Callable[[Entry], None]] = None,
) -> SeedReport:
    """Add every seed whose description is not already in the store.

    Seeds are added one at a time; ``on_added`` runs after each add so the
    views can re-render. Running this twice adds nothing the second time.
    """

    report = SeedReport()
    for seed in seeds:
        if store.contains_description(seed.description):
            report.skipped.append(seed.description)
            continue
        try:
            store.add(seed)
        except PersistenceFailedError:
            report.persist_failures += 1
        report.added.append(seed)
        if on_added is not None:
            on_added(seed)
    logger.info(
        "entry_store_seeded",
        extra={
            "added": len(report.added),
            "skipped": len(report.skipped),
            "persist_failures": report.persist_failures,
        },
    )
    return report
