"""
Request-scoped dependencies shared by the endpoints.
"""
import re

import structlog
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from podhost.db.session import get_db
from podhost.db.store import CatalogStore
from podhost.services.content_tree import ContentTree
from podhost.services.publishing import PublishingService

logger = structlog.get_logger()

# Id used for path segments that are not signed 64-bit integers; no row ever has it
INVALID_ID = 0

ID_PATTERN = re.compile(r"[+-]?[0-9]+")
ID_MIN, ID_MAX = -(2**63), 2**63 - 1


def parse_id(raw: str, name: str) -> int:
    if ID_PATTERN.fullmatch(raw):
        value = int(raw)
        if ID_MIN <= value <= ID_MAX:
            return value
    logger.warning("Malformed id in path", param=name, value=raw)
    return INVALID_ID


def channel_id(channel: str) -> int:
    return parse_id(channel, "channel")


def podcast_id(podcast: str) -> int:
    return parse_id(podcast, "podcast")


def get_publishing(request: Request, db: Session = Depends(get_db)) -> PublishingService:
    tree: ContentTree = request.app.state.content_tree
    return PublishingService(CatalogStore(db), tree, request.app.state.settings.host)
