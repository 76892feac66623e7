"""Photo index: the feed order list and per-photo records in the key-value store.

The order list lives under a single key as a JSON array of ids, newest first.
It is the only source of feed order; records are never sorted by timestamp at
read time. Mutations are read-modify-write with no locking, so two concurrent
inserts can drop one list entry (last writer wins). Readers tolerate ids whose
record is missing by skipping them.
"""

import json
import logging
from dataclasses import dataclass

from photo_timeline.domain.errors import StoreError
from photo_timeline.domain.photos import PhotoPage, PhotoRecord
from photo_timeline.services.storage import PHOTO_LIST_KEY, KeyValueStore, photo_key

logger = logging.getLogger(__name__)


@dataclass
class PhotoIndex:
    """List, paginate, search, insert and remove photo records."""

    store: KeyValueStore

    def insert(self, record: PhotoRecord) -> None:
        """Persist a record and make it the head of the order list.

        The id must be fresh. If the record write succeeds and the list
        write fails, the record is left orphaned and the error propagates.
        """
        self.store.put(photo_key(record.id), json.dumps(record.to_payload()))
        order = self.load_order()
        order.insert(0, record.id)
        self._save_order(order)

    def get(self, photo_id: str) -> PhotoRecord | None:
        """Return a record by id, if present."""
        raw = self.store.get(photo_key(photo_id))
        if raw is None:
            return None
        return PhotoRecord.from_payload(json.loads(raw))

    def load_order(self) -> list[str]:
        """Return the current order list, newest first."""
        raw = self.store.get(PHOTO_LIST_KEY)
        if not raw:
            return []
        ids = json.loads(raw)
        return [str(photo_id) for photo_id in ids] if isinstance(ids, list) else []

    def list_page(self, cursor: str | None, limit: int) -> PhotoPage:
        """Return up to ``limit`` records following ``cursor``.

        An unknown cursor restarts from the head of the list.
        """
        if limit < 1:
            raise ValueError("limit must be positive")
        order = self.load_order()
        start = 0
        if cursor:
            try:
                start = order.index(cursor) + 1
            except ValueError:
                logger.info("Cursor not found, restarting feed", extra={"cursor": cursor})
                start = 0
        end = start + limit
        taken = order[start:end]
        photos = [record for record in map(self.get, taken) if record is not None]
        has_more = end < len(order)
        next_cursor = taken[-1] if has_more and taken else None
        return PhotoPage(photos=photos, next_cursor=next_cursor, has_more=has_more)

    def search(
        self, query: str | None, tags: list[str] | None, limit: int
    ) -> list[PhotoRecord]:
        """Scan the feed from the head and return up to ``limit`` matches.

        This is a linear scan over the full history with no secondary index.
        """
        if limit < 1:
            raise ValueError("limit must be positive")
        raw_query = query or ""
        needle = raw_query.lower() if raw_query.strip() else ""
        wanted = list(tags or [])
        matches: list[PhotoRecord] = []
        for photo_id in self.load_order():
            if len(matches) >= limit:
                break
            record = self.get(photo_id)
            if record is None:
                continue
            if _matches_query(record, needle) and _matches_tags(record, wanted):
                matches.append(record)
        return matches

    def remove(self, photo_id: str) -> None:
        """Delete a record and splice its id out of the order list.

        Both steps are attempted; the first store failure is re-raised after.
        Removing an unknown id is a no-op.
        """
        failure: StoreError | None = None
        try:
            self.store.delete(photo_key(photo_id))
        except StoreError as exc:
            logger.exception("Failed to delete photo record", extra={"photo_id": photo_id})
            failure = exc
        try:
            order = self.load_order()
            if photo_id in order:
                self._save_order([item for item in order if item != photo_id])
        except StoreError as exc:
            logger.exception(
                "Failed to splice photo from order list", extra={"photo_id": photo_id}
            )
            failure = failure or exc
        if failure is not None:
            raise failure

    def _save_order(self, order: list[str]) -> None:
        self.store.put(PHOTO_LIST_KEY, json.dumps(order))


def _matches_query(record: PhotoRecord, needle: str) -> bool:
    if not needle:
        return True
    if needle in record.description.lower():
        return True
    return any(needle in tag.lower() for tag in record.tags)


def _matches_tags(record: PhotoRecord, wanted: list[str]) -> bool:
    if not wanted:
        return True
    return any(tag in record.tags for tag in wanted)
