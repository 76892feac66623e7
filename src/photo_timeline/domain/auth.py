"""Domain models for admin credentials and sessions."""

from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True)
class AdminCredential:
    """The single administrator identity and its password verifier."""

    email: str
    verifier: str

    def to_payload(self) -> dict[str, object]:
        return {"email": self.email, "password": self.verifier}

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "AdminCredential":
        return cls(email=str(payload["email"]), verifier=str(payload["password"]))


@dataclass(frozen=True)
class AuthSession:
    """An issued session: who it belongs to and when it stops being valid."""

    email: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Return true once the absolute expiry has been reached."""
        return now >= self.expires_at

    def to_payload(self) -> dict[str, object]:
        return {
            "email": self.email,
            "expiresAt": int(self.expires_at.timestamp() * 1000),
        }

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "AuthSession":
        expires_ms = int(payload["expiresAt"])
        return cls(
            email=str(payload["email"]),
            expires_at=datetime.fromtimestamp(expires_ms / 1000, tz=UTC),
        )
