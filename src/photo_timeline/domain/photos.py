"""Domain models for photo records and feed pages."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PhotoMetadata:
    """Pixel dimensions, byte size and MIME type of an uploaded original."""

    width: int
    height: int
    size: int
    mime_type: str


@dataclass(frozen=True)
class PhotoRecord:
    """Represents a photo stored in the timeline."""

    id: str
    filename: str
    original_url: str
    thumbnail_url: str
    thumbhash: str
    description: str
    tags: list[str]
    uploaded_at: str
    metadata: PhotoMetadata

    def to_payload(self) -> dict[str, object]:
        """Serialize into the camelCase shape used in storage and responses."""
        return {
            "id": self.id,
            "filename": self.filename,
            "originalUrl": self.original_url,
            "thumbnailUrl": self.thumbnail_url,
            "thumbhash": self.thumbhash,
            "description": self.description,
            "tags": list(self.tags),
            "uploadedAt": self.uploaded_at,
            "metadata": {
                "width": self.metadata.width,
                "height": self.metadata.height,
                "size": self.metadata.size,
                "mimeType": self.metadata.mime_type,
            },
        }

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "PhotoRecord":
        """Parse a stored payload into a domain model."""
        raw_metadata = payload.get("metadata")
        metadata = raw_metadata if isinstance(raw_metadata, dict) else {}
        raw_tags = payload.get("tags")
        return cls(
            id=str(payload["id"]),
            filename=str(payload.get("filename", "")),
            original_url=str(payload.get("originalUrl", "")),
            thumbnail_url=str(payload.get("thumbnailUrl", "")),
            thumbhash=str(payload.get("thumbhash", "")),
            description=str(payload.get("description", "")),
            tags=[str(tag) for tag in raw_tags] if isinstance(raw_tags, list) else [],
            uploaded_at=str(payload.get("uploadedAt", "")),
            metadata=PhotoMetadata(
                width=int(metadata.get("width", 0)),
                height=int(metadata.get("height", 0)),
                size=int(metadata.get("size", 0)),
                mime_type=str(metadata.get("mimeType", "")),
            ),
        )


@dataclass(frozen=True)
class PhotoPage:
    """One page of the feed plus the cursor to continue from."""

    photos: list[PhotoRecord] = field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False
