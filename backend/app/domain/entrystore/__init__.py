"""Entry store package."""

from .models import ENTRY_KEYS, Entry, dump_entries, parse_entries
from .seeding import SEED_ENTRIES, SeedReport, seed_store
from .store import EntryStore, LoadResult

__all__ = [
    "ENTRY_KEYS",
    "Entry",
    "EntryStore",
    "LoadResult",
    "SEED_ENTRIES",
    "SeedReport",
    "dump_entries",
    "parse_entries",
    "seed_store",
]
