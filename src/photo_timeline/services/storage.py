"""Storage ports used by the photo index and the auth manager."""

from typing import Protocol

ADMIN_CREDENTIALS_KEY = "admin:credentials"
PHOTO_LIST_KEY = "photos:list"
PHOTO_PREFIX = "photo:"
SESSION_PREFIX = "session:"


class KeyValueStore(Protocol):
    """Mapping from string keys to string values, no multi-key atomicity."""

    def get(self, key: str) -> str | None:
        """Return the value stored under a key, if present."""

    def put(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous value."""

    def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""


class BlobStore(Protocol):
    """Binary object storage addressed by string keys."""

    def put(self, key: str, data: bytes, content_type: str) -> None:
        """Store an object under a key."""

    def get(self, key: str) -> bytes | None:
        """Return object bytes, if present."""

    def delete(self, key: str) -> None:
        """Remove an object. Removing an absent object is not an error."""

    def public_url(self, key: str) -> str:
        """Return the public locator for an object key."""

    def key_from_url(self, url: str) -> str | None:
        """Return the object key behind a locator produced by public_url."""

    def list_keys(self, prefix: str) -> list[str]:
        """Return the keys of objects stored directly under a folder prefix."""


def photo_key(photo_id: str) -> str:
    return f"{PHOTO_PREFIX}{photo_id}"


def session_key(token: str) -> str:
    return f"{SESSION_PREFIX}{token}"


def blob_prefix(photo_id: str) -> str:
    return f"photos/{photo_id}/"


def original_blob_key(photo_id: str, extension: str) -> str:
    return f"photos/{photo_id}/original.{extension}"


def thumbnail_blob_key(photo_id: str) -> str:
    return f"photos/{photo_id}/thumbnail.jpg"
