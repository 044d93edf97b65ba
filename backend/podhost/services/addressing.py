"""
Mapping between internal ids and public names.

Channels are stored under a numeric id but addressed publicly (feed URLs,
directory names) by their alias. Any code that touches the content tree
resolves the alias here first.
"""
from typing import NamedTuple

import structlog

from podhost.core.errors import ContentError, InvalidInputError, PodhostError
from podhost.db.store import CatalogStore
from podhost.schemas import Channel
from podhost.services.content_tree import ContentTree

logger = structlog.get_logger()


class AliasUpdate(NamedTuple):
    channel: Channel
    alias_conflict: bool


class Addressing:
    def __init__(self, store: CatalogStore, tree: ContentTree):
        self.store = store
        self.tree = tree

    def channel_id_for_alias(self, alias: str) -> int:
        return self.store.swap_alias_for_id(alias)

    def alias_for_channel_id(self, channel_id: int) -> str:
        return self.store.swap_id_for_alias(channel_id)

    def filename_for_podcast(self, podcast_id: int) -> str:
        return self.store.swap_id_for_filename(podcast_id)

    def apply_channel_update(self, channel: Channel) -> AliasUpdate:
        """
        Persist a channel update, renaming its directory when the alias changed.

        The current alias is read from the catalog. A rename that fails, or
        whose catalog write is then rejected, keeps the old alias and flags
        the conflict; the other fields are written regardless. A crash between
        a successful rename and the catalog write leaves the directory under
        the new name while the catalog still holds the old one.
        """
        old_alias = self.alias_for_channel_id(channel.id)
        conflict = False
        renamed = False
        channel = channel.model_copy()

        if channel.alias != old_alias:
            try:
                self.tree.rename_channel_dir(old_alias, channel.alias)
                renamed = True
            except (ContentError, InvalidInputError) as e:
                self._reject_alias(channel, old_alias, e)
                conflict = True

        try:
            self.store.update_channel(channel)
        except InvalidInputError as e:
            if not renamed:
                raise
            self.tree.rename_channel_dir(channel.alias, old_alias)
            self._reject_alias(channel, old_alias, e)
            conflict = True
            self.store.update_channel(channel)
        except PodhostError:
            if renamed:
                self.tree.rename_channel_dir(channel.alias, old_alias)
            raise

        return AliasUpdate(channel=channel, alias_conflict=conflict)

    def _reject_alias(self, channel: Channel, old_alias: str, error: Exception) -> None:
        logger.warning(
            "Alias change rejected",
            channel_id=channel.id,
            old_alias=old_alias,
            new_alias=channel.alias,
            error=str(error),
        )
        channel.alias = old_alias
