from fastapi import APIRouter, Depends, File, UploadFile
from podhost.api.deps import channel_id, get_publishing
from podhost.core.errors import InvalidInputError
from podhost.schemas import CoverResponse
from podhost.services.publishing import PublishingService

router = APIRouter()


@router.post("/channel/{channel}/cover/upload", response_model=CoverResponse)
def upload_cover(
    file: UploadFile = File(...),
    cid: int = Depends(channel_id),
    service: PublishingService = Depends(get_publishing),
):
    """Store a cover image and make it the channel cover"""
    if not file.filename:
        raise InvalidInputError("uploaded file has no name")
    return CoverResponse(cover=service.upload_cover(cid, file.filename, file.file))


@router.delete("/channel/{channel}/cover/{cover}")
async def delete_cover(
    cover: str,
    cid: int = Depends(channel_id),
    service: PublishingService = Depends(get_publishing),
):
    service.delete_cover(cid, cover)
    return {"status": "deleted"}
