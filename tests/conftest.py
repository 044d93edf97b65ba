"""Shared fixtures: a temporary root holding a SQLite catalog and a content tree."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from podhost.core.config import Settings
from podhost.db.session import create_catalog_engine, create_session_factory
from podhost.db.store import CatalogStore
from podhost.main import create_app
from podhost.services.content_tree import ContentTree
from podhost.services.publishing import PublishingService

HOST = "https://podcasts.test"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temporary directory."""
    return Settings(host=HOST, root=str(tmp_path))


@pytest.fixture
def db(settings: Settings) -> Session:
    """Session on a fresh catalog."""
    settings.content_root.mkdir(parents=True, exist_ok=True)
    engine = create_catalog_engine(settings.catalog_url)
    session = create_session_factory(engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def store(db: Session) -> CatalogStore:
    return CatalogStore(db)


@pytest.fixture
def tree(settings: Settings) -> ContentTree:
    tree = ContentTree(settings.content_root)
    tree.ensure_root()
    return tree


@pytest.fixture
def service(store: CatalogStore, tree: ContentTree) -> PublishingService:
    return PublishingService(store, tree, HOST)


@pytest.fixture
def client(settings: Settings) -> TestClient:
    """API client without authentication."""
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def make_channel(store: CatalogStore, tree: ContentTree):
    """Factory creating a channel row with its directory under the given alias."""

    def make(alias: str, title: str = "") -> int:
        channel_id = store.add_channel()
        tree.create_channel_dir(channel_id)
        channel = store.channel_info(channel_id)
        channel.alias = alias
        channel.title = title or f"Channel {alias}"
        if alias != str(channel_id):
            tree.rename_channel_dir(str(channel_id), alias)
        store.update_channel(channel)
        return channel_id

    return make


@pytest.fixture
def make_podcast(store: CatalogStore, tree: ContentTree):
    """Factory writing an episode file and registering it in the catalog."""

    def make(channel_id: int, alias: str, filename: str) -> int:
        with tree.open_for_write(alias, filename) as fh:
            fh.write(b"audio")
        return store.add_podcast(channel_id, filename, filename.rsplit(".", 1)[0], "5").id

    return make
