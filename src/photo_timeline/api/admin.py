"""Auth endpoints and session-gated photo mutations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Request,
    Response,
    UploadFile,
    status,
)

from photo_timeline.api.models import CredentialsPayload, PhotoModel
from photo_timeline.config import parse_tags
from photo_timeline.domain.auth import AuthSession  # noqa: TC001
from photo_timeline.domain.errors import AdminAlreadyInitializedError

if TYPE_CHECKING:
    from photo_timeline.containers import AppContainer

router = APIRouter(prefix="/api", tags=["admin"])
logger = logging.getLogger(__name__)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _session_token(request: Request) -> str | None:
    container = _container(request)
    return request.cookies.get(container.settings.session_cookie_name)


async def require_session(request: Request) -> AuthSession:
    """Ensure requests carry a valid session cookie."""
    token = _session_token(request)
    session = _container(request).auth_service.validate_session(token) if token else None
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return session


@router.post("/auth/init")
async def initialize_admin(
    payload: CredentialsPayload, request: Request
) -> dict[str, bool]:
    """Create the admin credential on first run."""
    try:
        _container(request).auth_service.initialize_admin(
            payload.email, payload.password
        )
    except AdminAlreadyInitializedError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return {"success": True}


@router.post("/auth/login")
async def login(
    payload: CredentialsPayload, request: Request, response: Response
) -> dict[str, bool]:
    """Verify credentials and issue a session cookie."""
    container = _container(request)
    if not container.auth_service.authenticate(payload.email, payload.password):
        logger.info("Rejected admin login")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        )
    token = container.auth_service.create_session(payload.email)
    response.set_cookie(
        key=container.settings.session_cookie_name,
        value=token,
        max_age=int(container.auth_service.session_ttl.total_seconds()),
        path="/",
        httponly=True,
        secure=container.settings.cookie_secure,
        samesite="strict",
    )
    return {"success": True}


@router.post("/auth/logout")
async def logout(request: Request, response: Response) -> dict[str, bool]:
    """Revoke the current session and clear its cookie."""
    container = _container(request)
    token = _session_token(request)
    if token:
        container.auth_service.delete_session(token)
    response.delete_cookie(
        key=container.settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=container.settings.cookie_secure,
        samesite="strict",
    )
    return {"success": True}


@router.get("/auth/status")
async def auth_status(request: Request) -> dict[str, bool]:
    """Report whether setup has run and whether the caller is logged in."""
    container = _container(request)
    token = _session_token(request)
    authenticated = bool(token) and (
        container.auth_service.validate_session(token) is not None
    )
    return {
        "initialized": container.auth_service.is_initialized(),
        "authenticated": authenticated,
    }


@router.post(
    "/photos/upload",
    response_model=PhotoModel,
    dependencies=[Depends(require_session)],
)
async def upload_photo(
    request: Request,
    file: UploadFile | None = File(default=None),
    description: str = Form(default=""),
    tags: str = Form(default=""),
) -> dict[str, object]:
    """Store an uploaded photo and add it to the head of the feed."""
    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided"
        )
    data = await file.read()
    record = _container(request).photo_service.upload(
        data=data,
        filename=file.filename or "upload",
        content_type=file.content_type,
        description=description,
        tags=parse_tags(tags),
    )
    return record.to_payload()


@router.delete("/photos/{photo_id}", dependencies=[Depends(require_session)])
async def delete_photo(photo_id: str, request: Request) -> dict[str, bool]:
    """Delete a photo; deleting an unknown id succeeds."""
    _container(request).photo_service.delete(photo_id)
    return {"success": True}
