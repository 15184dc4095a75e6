"""
Job feed controller.

Holds the paginated job list and the in-memory bookmark list for one view,
and exposes the operations the presentation layer triggers: initial load,
load more, pull-to-refresh and bookmark toggling.

All operations run on one event loop. Blocking HTTP and storage calls are
pushed to worker threads so the loop keeps serving other operations while a
page is in flight. Every request takes a new generation number; a response
that arrives after a newer request was issued is dropped.
"""

import asyncio
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Tuple

from .bookmarks import BookmarkStore, contains, toggled, without
from .client import JobsApiClient
from .errors import JobFeedError, ValidationError
from .logger import get_logger
from .schema import filter_valid_jobs, require_valid_job, validate_job

AlertCallback = Callable[[str, str], None]


@dataclass
class FeedState:
    page: int = 1
    jobs: List[dict] = field(default_factory=list)
    has_more: bool = True
    error: Optional[str] = None
    is_loading: bool = False
    is_loading_more: bool = False
    generation: int = 0


def _log_alert(title: str, message: str) -> None:
    get_logger().warning(f"{title}: {message}")


class JobFeedController:
    def __init__(
        self,
        client: JobsApiClient,
        bookmark_store: BookmarkStore,
        on_alert: Optional[AlertCallback] = None,
    ):
        self.client = client
        self.bookmark_store = bookmark_store
        self.on_alert = on_alert or _log_alert
        self.state = FeedState()
        self._bookmarks: List[dict] = []

    # Feed

    @property
    def is_busy(self) -> bool:
        return self.state.is_loading or self.state.is_loading_more

    @contextmanager
    def _in_flight(self, page_number: int, generation: int):
        if page_number > 1:
            self.state.is_loading_more = True
        else:
            self.state.is_loading = True
        try:
            yield
        finally:
            # a superseded request leaves the flags to the latest one
            if generation == self.state.generation:
                self.state.is_loading = False
                self.state.is_loading_more = False

    async def fetch_page(self, page_number: int, is_refresh: bool = False) -> None:
        """
        Fetch one page and merge it into the accumulated list.

        Page 1 and refreshes replace the list; later pages append to it.
        A page with no raw results ends pagination. Errors are stored in
        ``state.error`` and leave the list untouched.
        """
        logger = get_logger()
        state = self.state
        if self.is_busy and not is_refresh:
            return
        if not state.has_more and page_number > 1 and not is_refresh:
            logger.info("No more jobs to load", page=page_number)
            return

        replace = page_number == 1 or is_refresh
        state.generation += 1
        generation = state.generation
        if replace:
            state.error = None

        logger.info(f"Fetching page {page_number}", refresh=is_refresh, generation=generation)
        with self._in_flight(page_number, generation):
            try:
                results = await asyncio.to_thread(self.client.fetch_page, page_number)
            except JobFeedError as e:
                if generation != state.generation:
                    logger.info("Dropping error from superseded request", page=page_number)
                    return
                logger.error("Failed to fetch jobs", page=page_number, error=str(e))
                logger.record_page_failure(type(e).__name__)
                state.error = str(e) or "Failed to fetch jobs. Please check connection and try again."
                state.has_more = True
                return

            if generation != state.generation:
                logger.info("Dropping superseded response", page=page_number, generation=generation)
                return

            logger.record_page_fetched()
            fetched = filter_valid_jobs(results)
            logger.info(
                f"API returned {len(results)} items, {len(fetched)} valid jobs",
                page=page_number,
            )
            for job in fetched:
                problems = validate_job(job)
                if problems:
                    logger.warning("Job record has unexpected field types", id=job["id"], problems=problems)

            if fetched:
                state.jobs = fetched if replace else [*state.jobs, *fetched]
                state.page = page_number
                state.has_more = True
                return

            if not results:
                state.has_more = False
                logger.info("No more items found from API", page=page_number)
            else:
                logger.warning(
                    "Page had items but no valid jobs; next page can still be requested",
                    page=page_number,
                )
            if replace:
                state.jobs = []
                state.page = 1

    async def load_more(self) -> None:
        if not self.is_busy and self.state.has_more:
            await self.fetch_page(self.state.page + 1)

    async def refresh(self) -> None:
        get_logger().info("Refreshing jobs list")
        self.state.has_more = True
        await self.fetch_page(1, is_refresh=True)

    async def start(self) -> None:
        """Load saved bookmarks, then the first page."""
        await self.load_bookmarks()
        await self.fetch_page(1, is_refresh=True)

    # Bookmarks

    @property
    def bookmarks(self) -> Tuple[dict, ...]:
        return tuple(self._bookmarks)

    def is_bookmarked(self, job_id: Any) -> bool:
        return contains(self._bookmarks, job_id)

    async def load_bookmarks(self) -> List[dict]:
        self._bookmarks = await asyncio.to_thread(self.bookmark_store.load)
        return list(self._bookmarks)

    async def _commit_bookmarks(self, updated: List[dict]) -> bool:
        previous = self._bookmarks
        self._bookmarks = updated
        saved = await asyncio.to_thread(self.bookmark_store.save, updated)
        if not saved and self._bookmarks is updated:
            self._bookmarks = previous
            get_logger().warning("Bookmark change reverted after failed save", count=len(previous))
        return saved

    async def toggle_bookmark(self, job: Mapping[str, Any]) -> bool:
        """
        Add the job to the bookmarks, or remove it if its id is already saved.

        Returns False when the job is invalid or the change could not be
        persisted; in the latter case the in-memory list is restored.
        """
        try:
            require_valid_job(job)
        except ValidationError as e:
            get_logger().error("Cannot bookmark invalid item", error=str(e))
            self.on_alert("Error", "Cannot save this item.")
            return False
        return await self._commit_bookmarks(toggled(self._bookmarks, job))

    async def remove_bookmark(self, job_id: Any) -> bool:
        return await self._commit_bookmarks(without(self._bookmarks, job_id))

    # Presentation helpers

    def find_job(self, job_id: Any) -> Optional[dict]:
        """Look a job up in the feed first, then in the bookmarks."""
        for job in self.state.jobs:
            if job.get("id") == job_id:
                return job
        for job in self._bookmarks:
            if isinstance(job, Mapping) and job.get("id") == job_id:
                return job
        return None

    def view_state(self) -> str:
        state = self.state
        if state.is_loading and state.page == 1 and not state.is_loading_more:
            return "loading"
        if state.error and not state.jobs:
            return "error"
        if not state.is_loading and not state.jobs:
            return "empty"
        return "list"

    def banner(self) -> Optional[str]:
        if self.state.error and self.state.jobs:
            return f"Could not load more jobs: {self.state.error}"
        return None
