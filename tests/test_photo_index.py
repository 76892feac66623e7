"""Tests for the photo index."""

import json

import pytest

from photo_timeline.domain.errors import StoreError
from photo_timeline.services.photo_index import PhotoIndex
from photo_timeline.services.storage import PHOTO_LIST_KEY
from tests.conftest import InMemoryKeyValueStore, make_record


def _insert_all(index: PhotoIndex, ids: list[str]) -> None:
    for photo_id in ids:
        index.insert(make_record(photo_id))


def test_insert_prepends_to_order_list(photo_index, kv_store) -> None:
    _insert_all(photo_index, ["A", "B", "C"])

    assert json.loads(kv_store.values[PHOTO_LIST_KEY]) == ["C", "B", "A"]
    assert photo_index.get("B") == make_record("B")


def test_list_page_scenario(photo_index) -> None:
    _insert_all(photo_index, ["A", "B", "C"])

    first = photo_index.list_page(None, 2)

    assert [photo.id for photo in first.photos] == ["C", "B"]
    assert first.next_cursor == "B"
    assert first.has_more is True

    second = photo_index.list_page(first.next_cursor, 2)

    assert [photo.id for photo in second.photos] == ["A"]
    assert second.has_more is False
    assert second.next_cursor is None


def test_chained_pages_enumerate_every_id_once(photo_index) -> None:
    ids = [f"p{number:02d}" for number in range(23)]
    _insert_all(photo_index, ids)

    seen: list[str] = []
    cursor = None
    while True:
        page = photo_index.list_page(cursor, 5)
        seen.extend(photo.id for photo in page.photos)
        if not page.has_more:
            break
        cursor = page.next_cursor

    assert seen == list(reversed(ids))


def test_exact_fit_page_reports_no_more(photo_index) -> None:
    _insert_all(photo_index, ["A", "B"])

    page = photo_index.list_page(None, 2)

    assert [photo.id for photo in page.photos] == ["B", "A"]
    assert page.has_more is False
    assert page.next_cursor is None


def test_empty_index_returns_empty_page(photo_index) -> None:
    page = photo_index.list_page(None, 10)

    assert page.photos == []
    assert page.has_more is False
    assert page.next_cursor is None


def test_unknown_cursor_restarts_from_head(photo_index) -> None:
    _insert_all(photo_index, ["A", "B", "C"])
    page = photo_index.list_page(None, 1)
    photo_index.remove(page.next_cursor)

    resumed = photo_index.list_page(page.next_cursor, 2)

    assert [photo.id for photo in resumed.photos] == ["B", "A"]


def test_missing_record_is_skipped_but_cursor_advances(photo_index, kv_store) -> None:
    _insert_all(photo_index, ["A", "B", "C"])
    del kv_store.values["photo:B"]

    page = photo_index.list_page(None, 2)

    assert [photo.id for photo in page.photos] == ["C"]
    assert page.next_cursor == "B"
    assert page.has_more is True


def test_list_page_rejects_non_positive_limit(photo_index) -> None:
    with pytest.raises(ValueError):
        photo_index.list_page(None, 0)


def test_remove_is_idempotent(photo_index, kv_store) -> None:
    _insert_all(photo_index, ["A", "B"])

    photo_index.remove("A")
    photo_index.remove("A")

    assert photo_index.get("A") is None
    assert json.loads(kv_store.values[PHOTO_LIST_KEY]) == ["B"]
    assert [photo.id for photo in photo_index.list_page(None, 10).photos] == ["B"]


def test_remove_splices_list_even_when_record_delete_fails(photo_index, kv_store) -> None:
    _insert_all(photo_index, ["A", "B"])
    kv_store.failing_deletes.add("photo:A")

    with pytest.raises(StoreError):
        photo_index.remove("A")

    assert json.loads(kv_store.values[PHOTO_LIST_KEY]) == ["B"]


def test_failed_list_write_leaves_orphaned_record() -> None:
    store = InMemoryKeyValueStore(failing_puts={PHOTO_LIST_KEY})
    index = PhotoIndex(store)

    with pytest.raises(StoreError):
        index.insert(make_record("A"))

    assert index.get("A") is not None
    assert index.list_page(None, 10).photos == []


def test_search_matches_description_and_tags_case_insensitively(photo_index) -> None:
    photo_index.insert(make_record("A", description="Sunset over the bay"))
    photo_index.insert(make_record("B", description="Breakfast", tags=["Food"]))
    photo_index.insert(make_record("C", description="Mountains", tags=["hiking"]))

    assert [p.id for p in photo_index.search("SUNSET", None, 10)] == ["A"]
    assert [p.id for p in photo_index.search("foo", None, 10)] == ["B"]
    assert photo_index.search("nothing", None, 10) == []


def test_search_tag_filter_is_match_any_and_case_sensitive(photo_index) -> None:
    photo_index.insert(make_record("A", tags=["travel", "beach"]))
    photo_index.insert(make_record("B", tags=["food"]))
    photo_index.insert(make_record("C", tags=["Travel"]))

    results = photo_index.search(None, ["travel", "food"], 10)

    assert [photo.id for photo in results] == ["B", "A"]


def test_search_requires_both_query_and_tags(photo_index) -> None:
    photo_index.insert(make_record("A", description="beach day", tags=["travel"]))
    photo_index.insert(make_record("B", description="beach bar", tags=["food"]))

    results = photo_index.search("beach", ["travel"], 10)

    assert [photo.id for photo in results] == ["A"]


def test_search_stops_at_limit_in_feed_order(photo_index) -> None:
    for number in range(6):
        photo_index.insert(make_record(f"p{number}", tags=["cat"]))

    results = photo_index.search("cat", [], 3)

    assert [photo.id for photo in results] == ["p5", "p4", "p3"]


def test_blank_search_matches_list_prefix(photo_index) -> None:
    _insert_all(photo_index, ["A", "B", "C", "D"])

    searched = photo_index.search("", [], 3)
    listed = photo_index.list_page(None, 3).photos

    assert searched == listed


def test_search_skips_missing_records(photo_index, kv_store) -> None:
    _insert_all(photo_index, ["A", "B"])
    del kv_store.values["photo:B"]

    assert [photo.id for photo in photo_index.search(None, None, 10)] == ["A"]


def test_search_keeps_surrounding_whitespace_in_query(photo_index) -> None:
    photo_index.insert(make_record("A", description="concatenate"))
    photo_index.insert(make_record("B", description="a black cat"))

    assert [p.id for p in photo_index.search(" cat", None, 10)] == ["B"]
    assert [p.id for p in photo_index.search("   ", None, 10)] == ["B", "A"]
