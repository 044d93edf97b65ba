"""Unit tests for the catalog audit tool."""

import pytest

from podhost.core.config import Settings
from podhost.db.store import CatalogStore
from podhost.maintenance import CatalogAuditor
from podhost.services.content_tree import ContentTree


@pytest.fixture
def populated(store: CatalogStore, tree: ContentTree, make_channel, make_podcast) -> dict:
    """Two channels: one intact with a missing episode and a stray file, one without a directory."""
    kept = make_channel("kept")
    make_podcast(kept, "kept", "a.mp3")
    make_podcast(kept, "kept", "b.mp3")
    (tree.root / "kept" / "b.mp3").unlink()
    (tree.root / "kept" / "stray.mp3").write_bytes(b"x")

    lost = make_channel("lost")
    (tree.root / "lost" / "cover").rmdir()
    (tree.root / "lost").rmdir()
    return {"kept": kept, "lost": lost}


def test_check_reports_without_deleting(settings: Settings, store: CatalogStore, populated: dict) -> None:
    auditor = CatalogAuditor(settings, dry_run=True)
    try:
        stats = auditor.run()
    finally:
        auditor.close()

    assert stats == {"stale_channels": 1, "stale_podcasts": 1, "untracked_files": 1}
    assert store.count_channels() == 2
    assert len(store.list_podcasts(populated["kept"])) == 2


def test_clean_deletes_stale_rows(settings: Settings, store: CatalogStore, populated: dict) -> None:
    auditor = CatalogAuditor(settings, dry_run=False)
    try:
        auditor.run()
    finally:
        auditor.close()

    store.db.expire_all()
    assert [c.alias for c in store.list_channels()] == ["kept"]
    assert [p.filename for p in store.list_podcasts(populated["kept"])] == ["a.mp3"]
