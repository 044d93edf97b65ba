import shutil
import time
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import BinaryIO, List, NamedTuple

import structlog

from podhost.core.errors import PodhostError
from podhost.db.store import CatalogStore, ListForm
from podhost.schemas import Channel, ChannelOverview, Podcast
from podhost.services.addressing import Addressing
from podhost.services.content_tree import ContentTree, split_extension
from podhost.services.feed import build_feed, cover_url, render_feed
from podhost.services.reconciler import live_channels, live_podcasts

logger = structlog.get_logger()


class ChannelUpdateResult(NamedTuple):
    cover: str
    alias_conflict: bool


def disambiguate(filename: str, now: float) -> str:
    """Insert a hex timestamp before the extension: "ep.mp3" -> "ep-65f1a2b3.mp3" """
    suffix = f"{int(now):x}"
    name, ext = split_extension(filename)
    if not ext:
        return f"{filename}-{suffix}"
    return f"{name}-{suffix}.{ext}"


class PublishingService:
    """Channel, episode, cover and feed workflows over the catalog and the content tree"""

    def __init__(self, store: CatalogStore, tree: ContentTree, host: str):
        self.store = store
        self.tree = tree
        self.host = host
        self.addressing = Addressing(store, tree)

    def _with_public_fields(self, channel: Channel) -> Channel:
        return channel.model_copy(
            update={
                "host": self.host,
                "cover": cover_url(self.host, channel.alias, channel.cover),
            }
        )

    # Channels

    def create_channel(self) -> Channel:
        channel_id = self.store.add_channel()
        self.tree.create_channel_dir(channel_id)

        channel = self.store.channel_info(channel_id)
        channel.alias = str(channel_id)
        channel.title = f"New channel {channel_id}"
        self.store.update_channel(channel)

        logger.info("Channel created", channel_id=channel_id)
        return channel

    def list_channels(self) -> List[Channel]:
        return live_channels(self.store, self.tree, self.store.list_channels())

    def overview(self, channel_id: int) -> ChannelOverview:
        info = self.store.channel_info(channel_id)
        podcasts = self.store.list_podcasts(channel_id, ListForm.SUMMARY)
        podcasts = live_podcasts(self.store, self.tree, info.alias, podcasts)
        return ChannelOverview(info=self._with_public_fields(info), podcasts=podcasts)

    def update_channel(self, channel: Channel) -> ChannelUpdateResult:
        # Clients echo back the cover URL they were given
        channel = channel.model_copy(update={"cover": channel.cover.rsplit("/", 1)[-1]})
        result = self.addressing.apply_channel_update(channel)
        updated = result.channel
        return ChannelUpdateResult(
            cover=cover_url(self.host, updated.alias, updated.cover),
            alias_conflict=result.alias_conflict,
        )

    def delete_channel(self, channel_id: int) -> None:
        alias = self.addressing.alias_for_channel_id(channel_id)
        self.store.delete_channel(channel_id)
        self.tree.remove_channel_dir(alias)
        logger.info("Channel deleted", channel_id=channel_id, alias=alias)

    # Podcasts

    def upload_podcast(self, channel_id: int, filename: str, stream: BinaryIO, length: str) -> Podcast:
        alias = self.addressing.alias_for_channel_id(channel_id)

        if self.tree.file_exists(alias, filename):
            original = filename
            filename = disambiguate(filename, time.time())
            logger.info("Upload renamed to avoid collision", original=original, filename=filename)

        with self.tree.open_for_write(alias, filename) as holder:
            shutil.copyfileobj(stream, holder)

        title, _ = split_extension(filename)
        try:
            podcast = self.store.add_podcast(channel_id, filename, title, length)
        except PodhostError:
            self.tree.remove_file(alias, filename)
            raise

        logger.info("Podcast uploaded", channel_id=channel_id, podcast_id=podcast.id, filename=filename)
        return podcast

    def podcast_info(self, podcast_id: int) -> Podcast:
        return self.store.podcast_info(podcast_id)

    def update_podcast(self, podcast: Podcast) -> None:
        if not podcast.guid:
            now = datetime.now(timezone.utc)
            podcast = podcast.model_copy(
                update={
                    "guid": f"{int(now.timestamp()):x}",
                    "pub_date": format_datetime(now, usegmt=True),
                }
            )
        self.store.update_podcast(podcast)

    def delete_podcast(self, channel_id: int, podcast_id: int) -> None:
        alias = self.addressing.alias_for_channel_id(channel_id)
        filename = self.addressing.filename_for_podcast(podcast_id)
        self.store.delete_podcast(podcast_id)
        self.tree.remove_file(alias, filename)
        logger.info("Podcast deleted", channel_id=channel_id, podcast_id=podcast_id)

    # Covers

    def upload_cover(self, channel_id: int, filename: str, stream: BinaryIO) -> str:
        alias = self.addressing.alias_for_channel_id(channel_id)

        with self.tree.open_cover_for_write(alias, filename) as holder:
            shutil.copyfileobj(stream, holder)

        channel = self.store.channel_info(channel_id)
        channel.cover = filename
        self.store.update_channel(channel)
        return cover_url(self.host, channel.alias, channel.cover)

    def delete_cover(self, channel_id: int, filename: str) -> None:
        channel = self.store.channel_info(channel_id)
        channel.cover = ""
        self.store.update_channel(channel)
        self.tree.remove_cover_file(channel.alias, filename)

    # Feed

    def feed(self, alias: str) -> bytes:
        channel_id = self.addressing.channel_id_for_alias(alias)
        channel = self.store.channel_info(channel_id)
        podcasts = self.store.list_podcasts(channel_id, ListForm.FULL)
        podcasts = live_podcasts(self.store, self.tree, channel.alias, podcasts)
        return render_feed(build_feed(channel, podcasts, self.host))
