"""Upload and delete orchestration across the blob store and photo index."""

import logging
import mimetypes
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import PurePosixPath
from uuid import uuid4

from photo_timeline.domain.errors import StoreError
from photo_timeline.domain.photos import PhotoMetadata, PhotoPage, PhotoRecord
from photo_timeline.services.images import ImageProcessor
from photo_timeline.services.photo_index import PhotoIndex
from photo_timeline.services.storage import (
    BlobStore,
    blob_prefix,
    original_blob_key,
    thumbnail_blob_key,
)

logger = logging.getLogger(__name__)

_DEFAULT_EXTENSION = "jpg"


def _new_photo_id() -> str:
    return str(uuid4())


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class PhotoService:
    """Application service for the photo feed."""

    index: PhotoIndex
    blob_store: BlobStore
    image_processor: ImageProcessor
    id_factory: Callable[[], str] = field(default=_new_photo_id)
    clock: Callable[[], datetime] = field(default=_utc_now)

    def upload(  # noqa: PLR0913
        self,
        data: bytes,
        filename: str,
        content_type: str | None,
        description: str,
        tags: list[str],
    ) -> PhotoRecord:
        """Store the original and thumbnail, then index the new record."""
        photo_id = self.id_factory()
        uploaded_at = self.clock().isoformat()
        mime_type = content_type or "application/octet-stream"
        processed = self.image_processor.process(data)

        original_key = original_blob_key(photo_id, _extension_for(filename, mime_type))
        thumbnail_key = thumbnail_blob_key(photo_id)
        self.blob_store.put(original_key, data, mime_type)
        self.blob_store.put(thumbnail_key, processed.thumbnail, "image/jpeg")

        record = PhotoRecord(
            id=photo_id,
            filename=filename,
            original_url=self.blob_store.public_url(original_key),
            thumbnail_url=self.blob_store.public_url(thumbnail_key),
            thumbhash=processed.thumbhash,
            description=description,
            tags=list(tags),
            uploaded_at=uploaded_at,
            metadata=PhotoMetadata(
                width=processed.width,
                height=processed.height,
                size=len(data),
                mime_type=mime_type,
            ),
        )
        self.index.insert(record)
        logger.info("Photo uploaded", extra={"photo_id": photo_id, "size": len(data)})
        return record

    def get(self, photo_id: str) -> PhotoRecord | None:
        """Return a photo by id, including ones missing from the feed."""
        return self.index.get(photo_id)

    def list_page(self, cursor: str | None, limit: int) -> PhotoPage:
        """Return a page of the feed."""
        return self.index.list_page(cursor, limit)

    def search(
        self, query: str | None, tags: list[str] | None, limit: int
    ) -> list[PhotoRecord]:
        """Search the feed by text and tags."""
        return self.index.search(query, tags, limit)

    def delete(self, photo_id: str) -> bool:
        """Remove a photo's blobs, record and feed entry.

        Blob failures are logged and tolerated so the record never outlives
        a failed cleanup. Without a record, whatever is stored under the
        photo's blob folder is removed. Returns whether a record existed.
        """
        record = self.index.get(photo_id)
        for key in self._blob_keys(photo_id, record):
            self._delete_blob(photo_id, key)
        self.index.remove(photo_id)
        if record is not None:
            logger.info("Photo deleted", extra={"photo_id": photo_id})
        return record is not None

    def _blob_keys(self, photo_id: str, record: PhotoRecord | None) -> list[str]:
        if record is not None:
            keys = []
            for url in (record.original_url, record.thumbnail_url):
                key = self.blob_store.key_from_url(url)
                if key is None:
                    logger.warning(
                        "Unrecognised blob locator",
                        extra={"photo_id": photo_id, "url": url},
                    )
                    continue
                keys.append(key)
            return keys
        if not photo_id or photo_id in {".", ".."} or "/" in photo_id:
            return []
        try:
            return self.blob_store.list_keys(blob_prefix(photo_id))
        except StoreError:
            logger.exception(
                "Failed to list blobs, trying default keys",
                extra={"photo_id": photo_id},
            )
            return [
                original_blob_key(photo_id, _DEFAULT_EXTENSION),
                thumbnail_blob_key(photo_id),
            ]

    def _delete_blob(self, photo_id: str, key: str) -> None:
        try:
            self.blob_store.delete(key)
        except StoreError:
            logger.exception(
                "Failed to delete blob, leaving it orphaned",
                extra={"photo_id": photo_id, "key": key},
            )


def _extension_for(filename: str, mime_type: str) -> str:
    suffix = PurePosixPath(filename).suffix.lstrip(".").lower()
    if suffix and suffix.isalnum():
        return suffix
    guessed = mimetypes.guess_extension(mime_type)
    if guessed:
        return guessed.lstrip(".")
    return _DEFAULT_EXTENSION
