"""
Lazy reconciliation of catalog listings against the content tree.

Listings are filtered at read time: entries whose directory or file is gone
are dropped from the result and their catalog rows deleted. A failed delete
does not fail the read; the row is simply picked up again next time.
"""
from typing import Callable, List

import structlog

from podhost.core.errors import PodhostError
from podhost.db.store import CatalogStore
from podhost.schemas import Channel, Podcast
from podhost.services.content_tree import ContentTree

logger = structlog.get_logger()


def _repair(delete: Callable[[int], None], kind: str, entity_id: int) -> None:
    try:
        delete(entity_id)
        logger.info("Removed stale catalog entry", kind=kind, id=entity_id)
    except PodhostError as e:
        logger.warning("Failed to remove stale catalog entry", kind=kind, id=entity_id, error=str(e))


def live_channels(store: CatalogStore, tree: ContentTree, channels: List[Channel]) -> List[Channel]:
    """Channels whose directory exists, in their original order"""
    live = []
    for channel in channels:
        if tree.dir_exists(channel.alias):
            live.append(channel)
            continue
        _repair(store.delete_channel, "channel", channel.id)
    return live


def live_podcasts(
    store: CatalogStore, tree: ContentTree, alias: str, podcasts: List[Podcast]
) -> List[Podcast]:
    """Podcasts whose file exists in the channel directory, in their original order"""
    live = []
    for podcast in podcasts:
        if tree.file_exists(alias, podcast.filename):
            live.append(podcast)
            continue
        _repair(store.delete_podcast, "podcast", podcast.id)
    return live
