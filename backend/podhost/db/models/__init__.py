from podhost.db.models.channel import Channel
from podhost.db.models.podcast import Podcast

__all__ = [
    "Channel",
    "Podcast",
]
