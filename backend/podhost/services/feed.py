"""
RSS 2.0 / iTunes feed projection.

build_feed() turns a channel and its live podcasts into a feed model without
touching any store; render_feed() serializes that model to XML bytes. Fields
that are empty or zero are left out of the document.
"""
import xml.etree.ElementTree as ET
from typing import List

from pydantic import BaseModel, Field

from podhost.schemas import Channel, Podcast
from podhost.services.content_tree import COVER_DIR_NAME, split_extension

ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"
CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"
XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'

# mp3 (*.mp3): audio/mpeg
# aac (*.m4a): audio/x-m4a
DEFAULT_MIME_TYPE = "audio/mpeg"
M4A_MIME_TYPE = "audio/x-m4a"


class Enclosure(BaseModel):
    url: str
    length: int = 0
    type: str = ""


class Item(BaseModel):
    title: str
    enclosure: Enclosure
    guid: str = ""
    pub_date: str = ""
    description: str = ""
    duration: int = 0
    link: str = ""
    explicit: bool = False
    season: int = 0
    episode: int = 0


class FeedChannel(BaseModel):
    title: str
    link: str = ""
    copyright: str = ""
    author: str = ""
    description: str = ""
    type: str = ""
    image_href: str = ""
    items: List[Item] = Field(default_factory=list)


class RSS(BaseModel):
    version: str = "2.0"
    itunes: str = ITUNES_NS
    content: str = CONTENT_NS
    channel: FeedChannel


def files_url(host: str, *parts: str) -> str:
    return "/".join([host, "files", *parts])


def cover_url(host: str, alias: str, cover: str) -> str:
    """Public URL of a channel cover, or "" when the channel has none"""
    if not cover:
        return ""
    return files_url(host, alias, COVER_DIR_NAME, cover)


def mime_type_for(filename: str) -> str:
    _, ext = split_extension(filename)
    if ext == "m4a":
        return M4A_MIME_TYPE
    return DEFAULT_MIME_TYPE


def build_feed(channel: Channel, podcasts: List[Podcast], host: str) -> RSS:
    """
    Project a channel and its podcasts onto a feed.

    `channel.cover` is expected to be a bare filename; the image URL is
    derived here. Podcasts are emitted in the order given.
    """
    items = []
    for p in podcasts:
        items.append(
            Item(
                title=p.title,
                enclosure=Enclosure(
                    url=files_url(host, channel.alias, p.filename),
                    length=p.length,
                    type=mime_type_for(p.filename),
                ),
                guid=p.guid,
                pub_date=p.pub_date,
                description=p.description,
                duration=p.duration,
                explicit=p.explicit == 1,
                season=p.season,
                episode=p.episode,
            )
        )

    return RSS(
        channel=FeedChannel(
            title=channel.title,
            author=channel.author,
            description=channel.description,
            image_href=cover_url(host, channel.alias, channel.cover),
            items=items,
        )
    )


def _text(parent: ET.Element, tag: str, value, optional: bool = True) -> None:
    if optional and not value:
        return
    ET.SubElement(parent, tag).text = str(value)


def render_feed(rss: RSS) -> bytes:
    root = ET.Element(
        "rss",
        attrib={
            "version": rss.version,
            "xmlns:itunes": rss.itunes,
            "xmlns:content": rss.content,
        },
    )
    ch = rss.channel
    channel = ET.SubElement(root, "channel")
    _text(channel, "title", ch.title, optional=False)
    _text(channel, "link", ch.link)
    _text(channel, "copyright", ch.copyright)
    _text(channel, "itunes:author", ch.author)
    _text(channel, "description", ch.description)
    _text(channel, "itunes:type", ch.type)
    image = ET.SubElement(channel, "itunes:image")
    if ch.image_href:
        image.set("href", ch.image_href)

    for it in ch.items:
        item = ET.SubElement(channel, "item")
        _text(item, "title", it.title, optional=False)
        enclosure = ET.SubElement(item, "enclosure", attrib={"url": it.enclosure.url})
        if it.enclosure.length:
            enclosure.set("length", str(it.enclosure.length))
        if it.enclosure.type:
            enclosure.set("type", it.enclosure.type)
        _text(item, "guid", it.guid)
        _text(item, "pubDate", it.pub_date, optional=False)
        _text(item, "description", it.description)
        _text(item, "itunes:duration", it.duration, optional=False)
        _text(item, "link", it.link)
        if it.explicit:
            _text(item, "itunes:explicit", "true")
        _text(item, "itunes:season", it.season)
        _text(item, "itunes:episode", it.episode)

    return (XML_HEADER + ET.tostring(root, encoding="unicode")).encode("utf-8")
