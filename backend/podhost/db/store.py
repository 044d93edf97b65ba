"""
Catalog store: channel and podcast rows plus the id/alias/filename lookups.

Every method runs against a single SQLAlchemy session and commits its own
work. Engine failures are re-raised as StoreError, missing rows as
NotFoundError.
"""
import enum
from typing import List

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from podhost.core.errors import InvalidInputError, NotFoundError, StoreError
from podhost.db.models import Channel as ChannelRow
from podhost.db.models import Podcast as PodcastRow
from podhost.schemas import Channel, Podcast

logger = structlog.get_logger()


class ListForm(str, enum.Enum):
    SUMMARY = "summary"
    FULL = "full"


SUMMARY_COLUMNS = ("id", "filename", "title")


class CatalogStore:
    """Relational catalog for channels and podcasts"""

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise InvalidInputError(f"{action}: constraint violated", cause=e)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Catalog write failed", action=action, error=str(e))
            raise StoreError(f"{action} failed", cause=e)

    def _one(self, query, what: str):
        try:
            row = query.first()
        except SQLAlchemyError as e:
            raise StoreError(f"lookup of {what} failed", cause=e)
        if row is None:
            raise NotFoundError(f"{what} not found")
        return row

    # Channels

    def add_channel(self) -> int:
        row = ChannelRow(title="")
        self.db.add(row)
        self._commit("add channel")
        return row.id

    def channel_info(self, channel_id: int) -> Channel:
        row = self._one(
            self.db.query(ChannelRow).filter(ChannelRow.id == channel_id),
            f"channel {channel_id}",
        )
        return Channel.model_validate(row)

    def update_channel(self, channel: Channel) -> None:
        row = self._one(
            self.db.query(ChannelRow).filter(ChannelRow.id == channel.id),
            f"channel {channel.id}",
        )
        row.alias = channel.alias or None
        row.title = channel.title
        row.description = channel.description
        row.cover = channel.cover
        row.author = channel.author
        self._commit("update channel")

    def delete_channel(self, channel_id: int) -> None:
        """Delete a channel together with all of its podcasts"""
        try:
            self.db.query(ChannelRow).filter(ChannelRow.id == channel_id).delete(
                synchronize_session=False
            )
            self.db.query(PodcastRow).filter(PodcastRow.channel == channel_id).delete(
                synchronize_session=False
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to delete channel", channel_id=channel_id, error=str(e))
            raise StoreError(f"delete of channel {channel_id} failed", cause=e)
        self._commit("delete channel")

    def list_channels(self) -> List[Channel]:
        try:
            rows = (
                self.db.query(ChannelRow.id, ChannelRow.alias, ChannelRow.title)
                .order_by(ChannelRow.id)
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError("listing channels failed", cause=e)
        return [Channel(id=r.id, alias=r.alias, title=r.title) for r in rows]

    def swap_alias_for_id(self, alias: str) -> int:
        row = self._one(
            self.db.query(ChannelRow.id).filter(ChannelRow.alias == alias),
            f"channel with alias {alias!r}",
        )
        return row.id

    def swap_id_for_alias(self, channel_id: int) -> str:
        row = self._one(
            self.db.query(ChannelRow.alias).filter(ChannelRow.id == channel_id),
            f"channel {channel_id}",
        )
        return row.alias or ""

    # Podcasts

    def add_podcast(self, channel_id: int, filename: str, title: str, length: str) -> Podcast:
        """Insert a podcast; length is the decimal byte size sent by the uploader"""
        text = str(length).strip()
        if not text.lstrip("+-").isdigit():
            raise InvalidInputError(f"length must be a decimal integer, got {length!r}")
        try:
            size = int(text)
        except ValueError as e:
            raise InvalidInputError(f"length must be a decimal integer, got {length!r}", cause=e)

        row = PodcastRow(channel=channel_id, filename=filename, title=title, length=size)
        self.db.add(row)
        self._commit("add podcast")
        return Podcast.model_validate(row)

    def podcast_info(self, podcast_id: int) -> Podcast:
        row = self._one(
            self.db.query(PodcastRow).filter(PodcastRow.id == podcast_id),
            f"podcast {podcast_id}",
        )
        return Podcast.model_validate(row)

    def list_podcasts(self, channel_id: int, form: ListForm = ListForm.SUMMARY) -> List[Podcast]:
        """Podcasts of a channel, newest first"""
        try:
            if form == ListForm.FULL:
                rows = (
                    self.db.query(PodcastRow)
                    .filter(PodcastRow.channel == channel_id)
                    .order_by(PodcastRow.id.desc())
                    .all()
                )
                return [Podcast.model_validate(r) for r in rows]

            rows = (
                self.db.query(*(getattr(PodcastRow, c) for c in SUMMARY_COLUMNS))
                .filter(PodcastRow.channel == channel_id)
                .order_by(PodcastRow.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError(f"listing podcasts of channel {channel_id} failed", cause=e)
        return [Podcast(**dict(zip(SUMMARY_COLUMNS, r))) for r in rows]

    def update_podcast(self, podcast: Podcast) -> None:
        row = self._one(
            self.db.query(PodcastRow).filter(PodcastRow.id == podcast.id),
            f"podcast {podcast.id}",
        )
        row.published = podcast.published
        row.title = podcast.title
        row.length = podcast.length
        row.guid = podcast.guid
        row.pub_date = podcast.pub_date
        row.description = podcast.description
        row.duration = podcast.duration
        row.artwork = podcast.artwork
        row.explicit = podcast.explicit
        row.season = podcast.season
        row.episode = podcast.episode
        self._commit("update podcast")

    def delete_podcast(self, podcast_id: int) -> None:
        """Delete a podcast row; deleting a row that is already gone is a no-op"""
        try:
            deleted = (
                self.db.query(PodcastRow)
                .filter(PodcastRow.id == podcast_id)
                .delete(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"delete of podcast {podcast_id} failed", cause=e)
        self._commit("delete podcast")
        if not deleted:
            logger.debug("Podcast already deleted", podcast_id=podcast_id)

    def swap_id_for_filename(self, podcast_id: int) -> str:
        row = self._one(
            self.db.query(PodcastRow.filename).filter(PodcastRow.id == podcast_id),
            f"podcast {podcast_id}",
        )
        return row.filename

    def count_channels(self) -> int:
        try:
            return self.db.query(ChannelRow).count()
        except SQLAlchemyError as e:
            raise StoreError("counting channels failed", cause=e)
