"""
Bookmark persistence.

The whole bookmark list is stored as one JSON array under a versioned key;
every change rewrites the full list.
"""

import json
from typing import Any, List, Mapping, Sequence

from .errors import PersistenceError
from .logger import get_logger
from .storage import KeyValueStore

# Bump the suffix for an incompatible format instead of migrating in place
BOOKMARKS_KEY = "@JobApp:bookmarks_v1"


def contains(bookmarks: Sequence[Mapping[str, Any]], job_id: Any) -> bool:
    return any(isinstance(b, Mapping) and b.get("id") == job_id for b in bookmarks)


def without(bookmarks: Sequence[Mapping[str, Any]], job_id: Any) -> List[dict]:
    return [b for b in bookmarks if not (isinstance(b, Mapping) and b.get("id") == job_id)]


def toggled(bookmarks: Sequence[Mapping[str, Any]], job: Mapping[str, Any]) -> List[dict]:
    """Return a new list with the job removed if present by id, appended otherwise."""
    job_id = job.get("id")
    if contains(bookmarks, job_id):
        return without(bookmarks, job_id)
    return [*bookmarks, job]


class BookmarkStore:
    def __init__(self, store: KeyValueStore, key: str = BOOKMARKS_KEY):
        self.store = store
        self.key = key

    def load(self) -> List[dict]:
        """
        Read the saved bookmarks.

        Returns an empty list when nothing is stored or the stored value cannot
        be decoded into a list. Errors are logged, never raised.
        """
        logger = get_logger()
        try:
            raw = self.store.get_item(self.key)
            if raw is None:
                return []
            bookmarks = json.loads(raw)
        except (PersistenceError, json.JSONDecodeError, TypeError) as e:
            logger.error("Failed to load bookmarks", key=self.key, error=str(e))
            return []
        if not isinstance(bookmarks, list):
            logger.error(
                "Stored bookmarks are not a list",
                key=self.key,
                type=type(bookmarks).__name__,
            )
            return []
        return bookmarks

    def save(self, bookmarks: Sequence[Mapping[str, Any]]) -> bool:
        """
        Persist the full bookmark list, overwriting the previous value.

        Returns:
            True if the write went through, False otherwise (the reason is logged)
        """
        logger = get_logger()
        if not isinstance(bookmarks, list):
            logger.error("save_bookmarks: input must be a list", type=type(bookmarks).__name__)
            logger.record_bookmark_save(False)
            return False
        try:
            self.store.set_item(self.key, json.dumps(bookmarks, ensure_ascii=False))
        except (TypeError, ValueError, OSError, PersistenceError) as e:
            logger.error("Failed to save bookmarks", key=self.key, count=len(bookmarks), error=str(e))
            logger.record_bookmark_save(False)
            return False
        logger.debug("Bookmarks saved", key=self.key, count=len(bookmarks))
        logger.record_bookmark_save(True)
        return True
