"""Supabase Storage-backed blob store."""

from dataclasses import dataclass

from storage3.utils import StorageException
from supabase import Client

from photo_timeline.domain.errors import StoreError
from photo_timeline.services.storage import BlobStore

_NOT_FOUND_STATUSES = {"404", 404}


@dataclass
class SupabaseBlobStore(BlobStore):
    """Stores photo objects in a Supabase Storage bucket."""

    client: Client
    bucket: str
    public_base_url: str

    def put(self, key: str, data: bytes, content_type: str) -> None:
        """Upload an object, overwriting any existing one."""
        try:
            self.client.storage.from_(self.bucket).upload(
                path=key,
                file=data,
                file_options={"content-type": content_type, "upsert": "true"},
            )
        except Exception as exc:
            raise StoreError(f"Failed to upload blob {key!r}") from exc

    def get(self, key: str) -> bytes | None:
        """Download an object, returning None when it does not exist."""
        try:
            return self.client.storage.from_(self.bucket).download(key)
        except StorageException as exc:
            if _is_not_found(exc):
                return None
            raise StoreError(f"Failed to download blob {key!r}") from exc
        except Exception as exc:
            raise StoreError(f"Failed to download blob {key!r}") from exc

    def delete(self, key: str) -> None:
        """Remove an object."""
        try:
            self.client.storage.from_(self.bucket).remove([key])
        except Exception as exc:
            raise StoreError(f"Failed to delete blob {key!r}") from exc

    def public_url(self, key: str) -> str:
        """Return the public URL for an object key."""
        return f"{self.public_base_url.rstrip('/')}/{key}"

    def key_from_url(self, url: str) -> str | None:
        """Return the object key for a URL built by ``public_url``."""
        prefix = f"{self.public_base_url.rstrip('/')}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix) :] or None

    def list_keys(self, prefix: str) -> list[str]:
        """Return keys of the files stored directly under a folder prefix."""
        folder = prefix.rstrip("/")
        try:
            entries = self.client.storage.from_(self.bucket).list(folder)
        except Exception as exc:
            raise StoreError(f"Failed to list blobs under {prefix!r}") from exc
        return [
            f"{folder}/{entry['name']}"
            for entry in entries or []
            if entry.get("name") and entry.get("id") is not None
        ]


def _is_not_found(exc: StorageException) -> bool:
    details = exc.args[0] if exc.args else None
    if isinstance(details, dict):
        status = details.get("statusCode") or details.get("status")
        if status in _NOT_FOUND_STATUSES:
            return True
        message = str(details.get("message", ""))
    else:
        message = str(exc)
    return "not found" in message.lower()
