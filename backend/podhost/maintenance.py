#!/usr/bin/env python3
"""
Operator tool to audit the catalog against the content tree.

Usage:
    podhost-reconcile --check     # Dry run - only report stale rows and untracked files
    podhost-reconcile --clean     # Delete stale catalog rows

Reads run the same repair lazily; this tool is for inspecting a root
without going through the HTTP API.
"""
import argparse
from typing import Dict, List

import structlog

from podhost.core.config import Settings, get_settings
from podhost.db.session import create_catalog_engine, create_session_factory
from podhost.db.store import CatalogStore
from podhost.services.content_tree import COVER_DIR_NAME, ContentTree
from podhost.services.reconciler import live_channels, live_podcasts

logger = structlog.get_logger()


class CatalogAuditor:
    def __init__(self, settings: Settings, dry_run: bool = True):
        self.engine = create_catalog_engine(settings.catalog_url)
        self.db = create_session_factory(self.engine)()
        self.store = CatalogStore(self.db)
        self.tree = ContentTree(settings.content_root)
        self.dry_run = dry_run
        self.stats = {
            "stale_channels": 0,
            "stale_podcasts": 0,
            "untracked_files": 0,
        }

    def find_stale_channels(self) -> List[int]:
        """Channels whose directory is gone"""
        print("\n" + "=" * 60)
        print("Checking channel directories...")
        print("=" * 60)

        channels = self.store.list_channels()
        stale = [c.id for c in channels if not self.tree.dir_exists(c.alias)]
        for c in channels:
            if c.id in stale:
                print(f"  - channel {c.id} ({c.alias or '<no alias>'}): directory missing")

        self.stats["stale_channels"] = len(stale)
        if not self.dry_run:
            live_channels(self.store, self.tree, channels)
        return stale

    def find_stale_podcasts(self) -> Dict[str, List[int]]:
        """Podcasts whose file is gone, grouped by channel alias"""
        print("\n" + "=" * 60)
        print("Checking episode files...")
        print("=" * 60)

        stale = {}
        for channel in self.store.list_channels():
            if not self.tree.dir_exists(channel.alias):
                continue
            podcasts = self.store.list_podcasts(channel.id)
            missing = [p.id for p in podcasts if not self.tree.file_exists(channel.alias, p.filename)]
            if missing:
                stale[channel.alias] = missing
                print(f"  - {channel.alias}: {len(missing)} episode(s) without a file: {missing}")
                self.stats["stale_podcasts"] += len(missing)
            if not self.dry_run:
                live_podcasts(self.store, self.tree, channel.alias, podcasts)
        return stale

    def find_untracked_files(self) -> List[str]:
        """Files in channel directories that no catalog row points to (reported only)"""
        print("\n" + "=" * 60)
        print("Checking for untracked files...")
        print("=" * 60)

        untracked = []
        for channel in self.store.list_channels():
            if not self.tree.dir_exists(channel.alias):
                continue
            known = {p.filename for p in self.store.list_podcasts(channel.id)}
            for path in sorted((self.tree.root / channel.alias).iterdir()):
                if path.name == COVER_DIR_NAME or not path.is_file():
                    continue
                if path.name not in known:
                    untracked.append(f"{channel.alias}/{path.name}")
                    print(f"  - {channel.alias}/{path.name}")

        self.stats["untracked_files"] = len(untracked)
        return untracked

    def run(self) -> Dict[str, int]:
        self.find_stale_channels()
        self.find_stale_podcasts()
        self.find_untracked_files()

        print("\n" + "=" * 60)
        print("Summary")
        print("=" * 60)
        for key, value in self.stats.items():
            print(f"  {key}: {value}")

        logger.info("Catalog audit complete", dry_run=self.dry_run, **self.stats)
        return self.stats

    def close(self):
        self.db.close()
        self.engine.dispose()


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Audit the podcast catalog against the content directory"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Dry run - only report, do not delete anything",
    )
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Delete catalog rows whose content is gone",
    )

    args = parser.parse_args(argv)

    if not (args.check or args.clean):
        parser.print_help()
        return

    dry_run = not args.clean
    print("Mode: DRY RUN (no changes will be made)" if dry_run else "Mode: LIVE (stale rows will be deleted)")

    auditor = CatalogAuditor(get_settings(), dry_run=dry_run)
    try:
        auditor.run()
    finally:
        auditor.close()


if __name__ == "__main__":
    main()
