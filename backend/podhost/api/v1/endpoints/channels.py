from typing import List
from fastapi import APIRouter, Depends
from podhost.api.deps import channel_id, get_publishing
from podhost.schemas import Channel, ChannelOverview, ChannelUpdate, ChannelUpdateResponse
from podhost.services.publishing import PublishingService

router = APIRouter()


@router.get("/list", response_model=List[Channel])
async def list_channels(service: PublishingService = Depends(get_publishing)):
    """List channels that still have a content directory"""
    return service.list_channels()


@router.post("/channel", response_model=Channel)
async def create_channel(service: PublishingService = Depends(get_publishing)):
    """Create an empty channel named after its id"""
    return service.create_channel()


@router.get("/channel/{channel}", response_model=ChannelOverview)
async def channel_overview(
    cid: int = Depends(channel_id),
    service: PublishingService = Depends(get_publishing),
):
    """Channel details with its live episodes, newest first"""
    return service.overview(cid)


@router.put("/channel/{channel}", response_model=ChannelUpdateResponse)
async def update_channel(
    update: ChannelUpdate,
    cid: int = Depends(channel_id),
    service: PublishingService = Depends(get_publishing),
):
    """
    Update channel metadata.

    The rename starts from the alias stored for this id; `old_alias` in the
    body is not used. An alias that cannot be applied (its directory or name
    is taken) is kept at its old value and reported with `error: true`;
    other fields are saved.
    """
    channel = update.channel.model_copy(update={"id": cid})
    result = service.update_channel(channel)
    return ChannelUpdateResponse(cover=result.cover, error=result.alias_conflict)


@router.delete("/channel/{channel}")
async def delete_channel(
    cid: int = Depends(channel_id),
    service: PublishingService = Depends(get_publishing),
):
    """Delete a channel, its episodes and its directory"""
    service.delete_channel(cid)
    return {"status": "deleted"}
