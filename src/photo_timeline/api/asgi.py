"""Module-level ASGI app for ``uvicorn photo_timeline.api.asgi:app``."""

from photo_timeline.api.app import create_app
from photo_timeline.config import Settings
from photo_timeline.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
