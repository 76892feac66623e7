"""FastAPI application factory."""

import logging

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from photo_timeline.api.admin import router as admin_router
from photo_timeline.api.models import PhotoModel, PhotosResponse
from photo_timeline.app_logging import configure_logging
from photo_timeline.config import parse_tags
from photo_timeline.containers import AppContainer
from photo_timeline.domain.errors import StoreError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    settings = container.settings

    app = FastAPI()
    app.state.container = container

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error(
            "Storage failure while handling request",
            exc_info=exc,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Storage unavailable"},
        )

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/photos", response_model=PhotosResponse)
    async def list_photos(
        request: Request,
        cursor: str | None = None,
        limit: int = Query(
            default=settings.default_page_size, ge=1, le=settings.max_page_size
        ),
        q: str | None = None,
        tags: str | None = None,
    ) -> dict[str, object]:
        """Return a feed page, or search results when a query or tags are given."""
        state_container: AppContainer = request.app.state.container
        tag_filter = parse_tags(tags)
        if (q and q.strip()) or tag_filter:
            photos = state_container.photo_service.search(q, tag_filter, limit)
            return {
                "photos": [photo.to_payload() for photo in photos],
                "nextCursor": None,
                "hasMore": False,
            }
        page = state_container.photo_service.list_page(cursor, limit)
        return {
            "photos": [photo.to_payload() for photo in page.photos],
            "nextCursor": page.next_cursor,
            "hasMore": page.has_more,
        }

    @app.get("/api/photos/{photo_id}", response_model=PhotoModel)
    async def get_photo(photo_id: str, request: Request) -> dict[str, object]:
        """Return a single photo by id."""
        state_container: AppContainer = request.app.state.container
        photo = state_container.photo_service.get(photo_id)
        if photo is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return photo.to_payload()

    return app
