from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from content_api.dependencies import get_media_store
from content_api.errors import ValidationError
from content_api.schemas import DeleteUploadResponse, ErrorResponse, UploadResponse
from content_api.services.media_store import MediaStore

router = APIRouter()

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@router.post("/upload", response_model=UploadResponse, responses=ERROR_RESPONSES)
async def upload_media(
    file: Optional[UploadFile] = File(None),
    media_store: MediaStore = Depends(get_media_store),
) -> UploadResponse:
    """
    Store an uploaded image or video.

    Goes to the cloud bucket when a storage credential is configured, otherwise to the
    local uploads directory. A read-only local filesystem is reported with
    `code: READ_ONLY_FS`.
    """
    if file is None:
        raise ValidationError("File not found in request")

    content_type = file.content_type or ""
    # Check the declared size before pulling the body into memory.
    if file.size is not None:
        media_store.validate_upload(file.size, content_type)

    content = await file.read()
    asset = media_store.put(
        content=content,
        original_name=file.filename or "",
        content_type=content_type,
        size=len(content),
    )
    return UploadResponse(
        url=asset.url,
        fileName=asset.file_name,
        size=asset.size,
        type=asset.content_type,
    )


@router.delete(
    "/upload",
    response_model=DeleteUploadResponse,
    responses={**ERROR_RESPONSES, status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def delete_media(
    file_name: Optional[str] = Query(None, alias="fileName"),
    url: Optional[str] = Query(None),
    media_store: MediaStore = Depends(get_media_store),
) -> DeleteUploadResponse:
    """Delete an uploaded file by `fileName` (local) or `url` (cloud)."""
    media_store.delete(file_name=file_name, url=url)
    return DeleteUploadResponse()
