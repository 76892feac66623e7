"""Error types shared across the photo timeline."""


class PhotoTimelineError(Exception):
    """Base class for photo timeline errors."""


class StoreError(PhotoTimelineError):
    """Raised when the metadata or blob store fails a call."""


class AdminAlreadyInitializedError(PhotoTimelineError):
    """Raised when setup is attempted while an admin credential exists."""
