"""Upload response schema."""

from .common import CamelModel


class UploadResponse(CamelModel):
    """Where an uploaded file can be fetched from."""

    url: str
    type: str
    size: int
    name: str
