"""Load the configured catalog blob and add the built-in example streams.

Safe to run repeatedly: seeds whose description is already stored are
skipped.
"""

from __future__ import annotations

import argparse

from backend.app.config import load_settings
from backend.app.domain.entrystore import EntryStore, seed_store
from backend.app.infra.blobstore import build_blob_storage


def seed_catalog(profile: str | None = None, *, force: bool = False) -> int:
    """Seed the configured store; returns the number of entries added."""

    settings = load_settings(profile)
    store = EntryStore(
        build_blob_storage(settings), blob_name=settings.storage.blob_name
    )
    result = store.load()
    if result.error is not None:
        print(f"Stored catalog was unreadable ({result.error.message}); reseeding.")
    if not result.needs_seeding and not force:
        print(f"Catalog already holds {len(result.entries)} entries; use --force to top up.")
        return 0
    report = seed_store(store)
    if report.persist_failures:
        print(f"Warning: {report.persist_failures} seed writes were not persisted.")
    return len(report.added)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--profile", help="settings profile name (default: env or dev)")
    parser.add_argument(
        "--force",
        action="store_true",
        help="offer the seeds even when the catalog is not empty",
    )
    args = parser.parse_args()
    added = seed_catalog(args.profile, force=args.force)
    print(f"Seeded {added} entries into the catalog.")


if __name__ == "__main__":
    main()
