"""Unit tests for the publishing workflows."""

import io

import pytest

from podhost.core.errors import InvalidInputError, NotFoundError
from podhost.db.store import CatalogStore
from podhost.schemas import Channel, Podcast
from podhost.services.content_tree import ContentTree
from podhost.services.publishing import PublishingService, disambiguate

HOST = "https://podcasts.test"


class TestDisambiguate:
    def test_suffix_before_extension(self) -> None:
        assert disambiguate("episode.mp3", 0x65F1A2B3) == "episode-65f1a2b3.mp3"

    def test_suffix_before_last_extension_only(self) -> None:
        assert disambiguate("show.part.m4a", 255) == "show.part-ff.m4a"

    def test_no_extension(self) -> None:
        assert disambiguate("episode", 16) == "episode-10"


class TestChannels:
    def test_create_channel(self, service: PublishingService, tree: ContentTree) -> None:
        channel = service.create_channel()

        assert channel.alias == str(channel.id)
        assert channel.title == f"New channel {channel.id}"
        assert tree.dir_exists(channel.alias)
        assert [c.id for c in service.list_channels()] == [channel.id]

    def test_overview_sets_host_and_cover_url(
        self, service: PublishingService, store: CatalogStore, make_channel, make_podcast
    ) -> None:
        cid = make_channel("weekly")
        channel = store.channel_info(cid)
        channel.cover = "art.png"
        store.update_channel(channel)
        first = make_podcast(cid, "weekly", "a.mp3")
        second = make_podcast(cid, "weekly", "b.mp3")

        overview = service.overview(cid)

        assert overview.info.host == HOST
        assert overview.info.cover == f"{HOST}/files/weekly/cover/art.png"
        assert [p.id for p in overview.podcasts] == [second, first]

    def test_update_channel_reports_conflict(
        self, service: PublishingService, store: CatalogStore, make_channel
    ) -> None:
        cid = make_channel("mine")
        make_channel("taken")
        channel = store.channel_info(cid)
        channel.alias = "taken"
        channel.title = "Still saved"

        result = service.update_channel(channel)

        assert result.alias_conflict is True
        assert store.channel_info(cid).alias == "mine"
        assert store.channel_info(cid).title == "Still saved"

    def test_update_channel_accepts_cover_url(
        self, service: PublishingService, store: CatalogStore, make_channel
    ) -> None:
        cid = make_channel("weekly")
        channel = Channel(id=cid, alias="weekly", title="T", cover=f"{HOST}/files/weekly/cover/art.png")

        result = service.update_channel(channel)

        assert store.channel_info(cid).cover == "art.png"
        assert result.cover == f"{HOST}/files/weekly/cover/art.png"

    def test_delete_channel_removes_rows_and_directory(
        self, service: PublishingService, store: CatalogStore, tree: ContentTree, make_channel, make_podcast
    ) -> None:
        cid = make_channel("gone")
        make_podcast(cid, "gone", "a.mp3")
        make_podcast(cid, "gone", "b.mp3")
        (tree.root / "gone" / "a.mp3").unlink()

        service.delete_channel(cid)

        assert store.list_podcasts(cid) == []
        assert not tree.dir_exists("gone")
        with pytest.raises(NotFoundError):
            service.overview(cid)


class TestPodcasts:
    def test_upload(self, service: PublishingService, store: CatalogStore, tree: ContentTree, make_channel) -> None:
        cid = make_channel("weekly")

        podcast = service.upload_podcast(cid, "Episode 1.mp3", io.BytesIO(b"abc"), "3")

        assert podcast.filename == "Episode 1.mp3"
        assert podcast.title == "Episode 1"
        assert podcast.length == 3
        assert (tree.root / "weekly" / "Episode 1.mp3").read_bytes() == b"abc"

    def test_upload_collision_gets_distinct_name(
        self, service: PublishingService, store: CatalogStore, tree: ContentTree, make_channel
    ) -> None:
        cid = make_channel("weekly")
        first = service.upload_podcast(cid, "ep.mp3", io.BytesIO(b"one"), "3")
        second = service.upload_podcast(cid, "ep.mp3", io.BytesIO(b"two"), "3")

        assert first.filename == "ep.mp3"
        assert second.filename != "ep.mp3"
        assert second.filename.startswith("ep-")
        assert second.filename.endswith(".mp3")
        assert store.podcast_info(second.id).filename == second.filename
        assert (tree.root / "weekly" / "ep.mp3").read_bytes() == b"one"
        assert (tree.root / "weekly" / second.filename).read_bytes() == b"two"

    def test_upload_bad_length_leaves_nothing_behind(
        self, service: PublishingService, store: CatalogStore, tree: ContentTree, make_channel
    ) -> None:
        cid = make_channel("weekly")

        with pytest.raises(InvalidInputError):
            service.upload_podcast(cid, "ep.mp3", io.BytesIO(b"abc"), "three")

        assert not tree.file_exists("weekly", "ep.mp3")
        assert store.list_podcasts(cid) == []

    def test_upload_to_unknown_channel(self, service: PublishingService) -> None:
        with pytest.raises(NotFoundError):
            service.upload_podcast(0, "ep.mp3", io.BytesIO(b"abc"), "3")

    def test_update_podcast_assigns_guid(
        self, service: PublishingService, store: CatalogStore, make_channel, make_podcast
    ) -> None:
        cid = make_channel("weekly")
        pid = make_podcast(cid, "weekly", "ep.mp3")

        service.update_podcast(Podcast(id=pid, title="Published", published=1))

        saved = store.podcast_info(pid)
        assert saved.title == "Published"
        assert saved.guid != ""
        int(saved.guid, 16)
        assert saved.pub_date.endswith("GMT")

    def test_update_podcast_keeps_existing_guid(
        self, service: PublishingService, store: CatalogStore, make_channel, make_podcast
    ) -> None:
        cid = make_channel("weekly")
        pid = make_podcast(cid, "weekly", "ep.mp3")

        service.update_podcast(Podcast(id=pid, title="T", guid="fixed", pub_date="then"))

        saved = store.podcast_info(pid)
        assert (saved.guid, saved.pub_date) == ("fixed", "then")

    def test_delete_podcast(
        self, service: PublishingService, store: CatalogStore, tree: ContentTree, make_channel, make_podcast
    ) -> None:
        cid = make_channel("weekly")
        pid = make_podcast(cid, "weekly", "ep.mp3")

        service.delete_podcast(cid, pid)

        assert not tree.file_exists("weekly", "ep.mp3")
        with pytest.raises(NotFoundError):
            store.podcast_info(pid)


class TestCoversAndFeed:
    def test_cover_upload_and_delete(
        self, service: PublishingService, store: CatalogStore, tree: ContentTree, make_channel
    ) -> None:
        cid = make_channel("weekly")

        url = service.upload_cover(cid, "art.png", io.BytesIO(b"png"))

        assert url == f"{HOST}/files/weekly/cover/art.png"
        assert store.channel_info(cid).cover == "art.png"
        assert (tree.root / "weekly" / "cover" / "art.png").exists()

        service.delete_cover(cid, "art.png")

        assert store.channel_info(cid).cover == ""
        assert not (tree.root / "weekly" / "cover" / "art.png").exists()

    def test_feed_excludes_missing_files(
        self, service: PublishingService, store: CatalogStore, tree: ContentTree, make_channel, make_podcast
    ) -> None:
        cid = make_channel("weekly", title="Weekly")
        make_podcast(cid, "weekly", "kept.mp3")
        gone = make_podcast(cid, "weekly", "gone.mp3")
        (tree.root / "weekly" / "gone.mp3").unlink()

        document = service.feed("weekly")

        assert b"<title>Weekly</title>" in document
        assert f"{HOST}/files/weekly/kept.mp3".encode() in document
        assert b"gone.mp3" not in document
        with pytest.raises(NotFoundError):
            store.podcast_info(gone)

    def test_feed_unknown_alias(self, service: PublishingService) -> None:
        with pytest.raises(NotFoundError):
            service.feed("missing")
