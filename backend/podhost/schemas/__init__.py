from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


# Channel Schemas
class Channel(BaseModel):
    id: int = 0
    alias: str = ""
    title: str = ""
    description: str = ""
    cover: str = ""
    author: str = ""
    host: str = ""

    @field_validator("alias", "title", "description", "cover", "author", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return "" if value is None else value

    class Config:
        from_attributes = True


class ChannelUpdate(BaseModel):
    channel: Channel
    old_alias: str = ""  # sent by clients, the stored alias is authoritative


class ChannelUpdateResponse(BaseModel):
    cover: str = ""
    error: bool = False  # set when the alias could not be changed


class CoverResponse(BaseModel):
    cover: str


# Podcast Schemas
class Podcast(BaseModel):
    id: int = 0
    filename: str = ""
    published: int = 0
    title: str = ""
    length: int = 0
    guid: str = ""
    pub_date: str = ""
    description: str = ""
    duration: int = 0
    artwork: str = ""
    explicit: int = 0
    season: int = 0
    episode: int = 0

    @field_validator("filename", "title", "guid", "pub_date", "description", "artwork", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("published", "length", "duration", "explicit", "season", "episode", mode="before")
    @classmethod
    def none_as_zero(cls, value):
        return 0 if value is None else value

    class Config:
        from_attributes = True


class ChannelOverview(BaseModel):
    info: Channel
    podcasts: List[Podcast] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    database: str
    content: str
    detail: Optional[str] = None
