# Services module
from podhost.services.content_tree import ContentTree
from podhost.services.addressing import Addressing
from podhost.services.publishing import PublishingService

__all__ = [
    "ContentTree",
    "Addressing",
    "PublishingService",
]
