"""Dependency container wiring for the application."""

from dataclasses import dataclass
from datetime import timedelta

from supabase import create_client

from photo_timeline.adapters.supabase_blob_store import SupabaseBlobStore
from photo_timeline.adapters.supabase_kv_store import SupabaseKeyValueStore
from photo_timeline.config import Settings
from photo_timeline.services.auth import AuthService
from photo_timeline.services.images import ImageProcessor
from photo_timeline.services.photo_index import PhotoIndex
from photo_timeline.services.photos import PhotoService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    photo_service: PhotoService
    auth_service: AuthService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    kv_store = SupabaseKeyValueStore(supabase_client, table=resolved_settings.kv_table)
    blob_store = SupabaseBlobStore(
        supabase_client,
        bucket=resolved_settings.blob_bucket,
        public_base_url=public_base_url(resolved_settings),
    )
    photo_service = PhotoService(
        index=PhotoIndex(kv_store),
        blob_store=blob_store,
        image_processor=ImageProcessor(
            max_width=resolved_settings.thumbnail_max_width
        ),
    )
    auth_service = AuthService(
        store=kv_store,
        session_ttl=timedelta(hours=resolved_settings.session_ttl_hours),
    )
    return AppContainer(
        settings=resolved_settings,
        photo_service=photo_service,
        auth_service=auth_service,
    )


def public_base_url(settings: Settings) -> str:
    """Return the URL prefix for blob locators."""
    if settings.cdn_url:
        return settings.cdn_url.rstrip("/")
    return (
        f"{settings.supabase_url.rstrip('/')}/storage/v1/object/public/"
        f"{settings.blob_bucket}"
    )
