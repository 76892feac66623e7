"""Single-admin credentials and cookie sessions backed by the key-value store."""

import hmac
import json
import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import bcrypt

from photo_timeline.domain.auth import AdminCredential, AuthSession
from photo_timeline.domain.errors import AdminAlreadyInitializedError
from photo_timeline.services.storage import (
    ADMIN_CREDENTIALS_KEY,
    KeyValueStore,
    session_key,
)

logger = logging.getLogger(__name__)

_BCRYPT_ROUNDS = 10
# bcrypt only reads the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = _BCRYPT_ROUNDS) -> str:
    """Return a salted bcrypt verifier for ``password``."""
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("ascii")


def verify_password(password: str, verifier: str) -> bool:
    """Check ``password`` against a verifier; malformed verifiers never match."""
    try:
        return bcrypt.checkpw(_password_bytes(password), verifier.encode("ascii"))
    except ValueError:
        return False


@dataclass
class AuthService:
    """Admin setup, login and session validation.

    Sessions move from issued to absent either on logout or once their
    absolute expiry passes; expired sessions are purged when next read.
    """

    store: KeyValueStore
    session_ttl: timedelta = timedelta(hours=24)
    clock: Callable[[], datetime] = field(default=_utc_now)

    def is_initialized(self) -> bool:
        """Return true when an admin credential exists."""
        return self.store.get(ADMIN_CREDENTIALS_KEY) is not None

    def initialize_admin(self, email: str, password: str) -> None:
        """Create the admin credential; refuses if one already exists."""
        if self.is_initialized():
            raise AdminAlreadyInitializedError("Admin already initialized")
        credential = AdminCredential(email=email, verifier=hash_password(password))
        self.store.put(ADMIN_CREDENTIALS_KEY, json.dumps(credential.to_payload()))
        logger.info("Admin credential initialized")

    def authenticate(self, email: str, password: str) -> bool:
        """Return true when the identity and password match the stored admin."""
        raw = self.store.get(ADMIN_CREDENTIALS_KEY)
        if raw is None:
            return False
        credential = AdminCredential.from_payload(json.loads(raw))
        if not hmac.compare_digest(credential.email.encode(), email.encode()):
            return False
        return verify_password(password, credential.verifier)

    def create_session(self, email: str) -> str:
        """Issue a fresh bearer token valid for the session TTL."""
        token = secrets.token_urlsafe(32)
        session = AuthSession(email=email, expires_at=self.clock() + self.session_ttl)
        self.store.put(session_key(token), json.dumps(session.to_payload()))
        return token

    def validate_session(self, token: str) -> AuthSession | None:
        """Return the session for a token, or None when absent or expired."""
        if not token:
            return None
        raw = self.store.get(session_key(token))
        if raw is None:
            return None
        session = AuthSession.from_payload(json.loads(raw))
        if session.is_expired(self.clock()):
            self.store.delete(session_key(token))
            return None
        return session

    def delete_session(self, token: str) -> None:
        """Revoke a session; unknown tokens are ignored."""
        if token:
            self.store.delete(session_key(token))
