"""Shared test fixtures."""

import io
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest
from PIL import Image

from photo_timeline.config import Settings
from photo_timeline.containers import AppContainer
from photo_timeline.domain.errors import StoreError
from photo_timeline.domain.photos import PhotoMetadata, PhotoRecord
from photo_timeline.services.auth import AuthService
from photo_timeline.services.images import ImageProcessor
from photo_timeline.services.photo_index import PhotoIndex
from photo_timeline.services.photos import PhotoService
from photo_timeline.services.storage import BlobStore, KeyValueStore

CDN_URL = "https://cdn.example.com"


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """In-memory key-value store for tests."""

    values: dict[str, str] = field(default_factory=dict)
    failing_puts: set[str] = field(default_factory=set)
    failing_deletes: set[str] = field(default_factory=set)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def put(self, key: str, value: str) -> None:
        if key in self.failing_puts:
            raise StoreError(f"put failed for {key}")
        self.values[key] = value

    def delete(self, key: str) -> None:
        if key in self.failing_deletes:
            raise StoreError(f"delete failed for {key}")
        self.values.pop(key, None)


@dataclass
class InMemoryBlobStore(BlobStore):
    """In-memory blob store for tests."""

    objects: dict[str, tuple[bytes, str]] = field(default_factory=dict)
    base_url: str = CDN_URL
    fail_deletes: bool = False
    fail_lists: bool = False

    def put(self, key: str, data: bytes, content_type: str) -> None:
        self.objects[key] = (data, content_type)

    def get(self, key: str) -> bytes | None:
        entry = self.objects.get(key)
        return entry[0] if entry else None

    def delete(self, key: str) -> None:
        if self.fail_deletes:
            raise StoreError(f"delete failed for {key}")
        self.objects.pop(key, None)

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    def key_from_url(self, url: str) -> str | None:
        prefix = f"{self.base_url}/"
        return url[len(prefix) :] if url.startswith(prefix) else None

    def list_keys(self, prefix: str) -> list[str]:
        if self.fail_lists:
            raise StoreError(f"list failed for {prefix}")
        return [
            key
            for key in self.objects
            if key.startswith(prefix) and "/" not in key[len(prefix) :]
        ]


@dataclass
class FakeClock:
    """Manually advanced clock."""

    now: datetime = field(
        default_factory=lambda: datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


def make_record(
    photo_id: str,
    description: str = "",
    tags: list[str] | None = None,
) -> PhotoRecord:
    """Build a photo record with fixed storage locators."""
    return PhotoRecord(
        id=photo_id,
        filename=f"{photo_id}.jpg",
        original_url=f"{CDN_URL}/photos/{photo_id}/original.jpg",
        thumbnail_url=f"{CDN_URL}/photos/{photo_id}/thumbnail.jpg",
        thumbhash="",
        description=description,
        tags=tags or [],
        uploaded_at="2024-05-01T12:00:00+00:00",
        metadata=PhotoMetadata(width=10, height=10, size=100, mime_type="image/jpeg"),
    )


def make_png(width: int = 800, height: int = 600) -> bytes:
    """Return PNG bytes of a solid-colour image."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 120, 40)).save(buffer, "PNG")
    return buffer.getvalue()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        cdn_url=CDN_URL,
        cookie_secure=False,
    )


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def photo_index(kv_store: InMemoryKeyValueStore) -> PhotoIndex:
    return PhotoIndex(kv_store)


@pytest.fixture
def photo_service(
    photo_index: PhotoIndex, blob_store: InMemoryBlobStore
) -> PhotoService:
    return PhotoService(
        index=photo_index,
        blob_store=blob_store,
        image_processor=ImageProcessor(max_width=400),
    )


@pytest.fixture
def auth_service(kv_store: InMemoryKeyValueStore, clock: FakeClock) -> AuthService:
    return AuthService(store=kv_store, clock=clock)


@pytest.fixture
def container(
    settings: Settings,
    photo_service: PhotoService,
    auth_service: AuthService,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        photo_service=photo_service,
        auth_service=auth_service,
    )
