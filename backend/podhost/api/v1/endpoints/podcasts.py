from fastapi import APIRouter, Depends, File, Form, UploadFile
from podhost.api.deps import channel_id, get_publishing, podcast_id
from podhost.core.errors import InvalidInputError
from podhost.schemas import Podcast
from podhost.services.publishing import PublishingService

router = APIRouter()


@router.post("/channel/{channel}/upload", response_model=Podcast)
def upload_podcast(
    file: UploadFile = File(...),
    length: str = Form(""),
    cid: int = Depends(channel_id),
    service: PublishingService = Depends(get_publishing),
):
    """Store an uploaded episode; a clashing filename gets a timestamp suffix"""
    if not file.filename:
        raise InvalidInputError("uploaded file has no name")
    return service.upload_podcast(cid, file.filename, file.file, length)


@router.get("/channel/{channel}/podcast/{podcast}", response_model=Podcast)
async def podcast_info(
    pid: int = Depends(podcast_id),
    service: PublishingService = Depends(get_publishing),
):
    return service.podcast_info(pid)


@router.put("/channel/{channel}/podcast/{podcast}")
async def update_podcast(
    payload: Podcast,
    pid: int = Depends(podcast_id),
    service: PublishingService = Depends(get_publishing),
):
    """Update episode metadata; an episode without a guid gets one plus a pub date"""
    service.update_podcast(payload.model_copy(update={"id": pid}))
    return {"status": "updated"}


@router.delete("/channel/{channel}/podcast/{podcast}")
async def delete_podcast(
    cid: int = Depends(channel_id),
    pid: int = Depends(podcast_id),
    service: PublishingService = Depends(get_publishing),
):
    service.delete_podcast(cid, pid)
    return {"status": "deleted"}
