"""
Public feed endpoint - no authentication required
"""
from fastapi import APIRouter, Depends, Response
from podhost.api.deps import get_publishing
from podhost.services.publishing import PublishingService

router = APIRouter()


@router.get("/{alias}")
async def channel_feed(
    alias: str,
    service: PublishingService = Depends(get_publishing),
):
    """RSS feed of a channel, addressed by its alias"""
    return Response(content=service.feed(alias), media_type="application/rss+xml")
