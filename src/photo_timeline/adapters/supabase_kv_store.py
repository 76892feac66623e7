"""Supabase-backed key-value store."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from photo_timeline.domain.errors import StoreError
from photo_timeline.services.storage import KeyValueStore


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Stores string values in a two-column ``key``/``value`` table."""

    client: Client
    table: str = "kv_store"

    def get(self, key: str) -> str | None:
        """Return the value for a key, if present."""
        try:
            response = (
                self.client.table(self.table)
                .select("value")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except Exception as exc:
            raise StoreError(f"Failed to read key {key!r}") from exc
        if not response.data:
            return None
        value = response.data[0].get("value")
        return None if value is None else str(value)

    def put(self, key: str, value: str) -> None:
        """Insert or replace the value for a key."""
        try:
            self.client.table(self.table).upsert(
                {
                    "key": key,
                    "value": value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            ).execute()
        except Exception as exc:
            raise StoreError(f"Failed to write key {key!r}") from exc

    def delete(self, key: str) -> None:
        """Delete a key."""
        try:
            self.client.table(self.table).delete().eq("key", key).execute()
        except Exception as exc:
            raise StoreError(f"Failed to delete key {key!r}") from exc
