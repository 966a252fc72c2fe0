"""Media upload endpoint."""

from __future__ import annotations

from fastapi import APIRouter, File, UploadFile

from pulse_chat.api.v1.dependencies import CurrentUserDep, MediaStorageDep
from pulse_chat.schemas.upload import UploadResponse
from pulse_chat.services.storage import check_upload_size, save_upload

router = APIRouter(tags=["upload"])

READ_CHUNK_BYTES = 1024 * 1024


async def read_upload(file: UploadFile) -> bytes:
    """Read ``file`` chunk by chunk, stopping once it passes ``MAX_UPLOAD_MB``.

    Raises:
        FileTooLarge: As soon as the declared or read size exceeds the limit.
    """
    if file.size is not None:
        check_upload_size(file.size)

    chunks: list[bytes] = []
    total = 0
    while chunk := await file.read(READ_CHUNK_BYTES):
        total += len(chunk)
        check_upload_size(total)
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/upload", response_model=UploadResponse)
async def upload_media(
    current_user: CurrentUserDep,
    storage: MediaStorageDep,
    file: UploadFile = File(...),
) -> UploadResponse:
    """Store an image or video and return the URL to attach to a message."""
    data = await read_upload(file)
    stored = save_upload(file.filename, file.content_type, data, storage)
    return UploadResponse(url=stored.url, type=stored.type, size=stored.size, name=stored.name)
