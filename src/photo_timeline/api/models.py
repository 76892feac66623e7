"""Pydantic models for API payloads."""

from pydantic import BaseModel


class CredentialsPayload(BaseModel):
    """Admin email and password, used for setup and login."""

    email: str
    password: str


class PhotoMetadataModel(BaseModel):
    """Stored properties of an original upload."""

    width: int
    height: int
    size: int
    mimeType: str  # noqa: N815


class PhotoModel(BaseModel):
    """A photo as returned to clients."""

    id: str
    filename: str
    originalUrl: str  # noqa: N815
    thumbnailUrl: str  # noqa: N815
    thumbhash: str
    description: str
    tags: list[str]
    uploadedAt: str  # noqa: N815
    metadata: PhotoMetadataModel


class PhotosResponse(BaseModel):
    """A page of photos and the cursor to continue from."""

    photos: list[PhotoModel]
    nextCursor: str | None = None  # noqa: N815
    hasMore: bool = False  # noqa: N815
