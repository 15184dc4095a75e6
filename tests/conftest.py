"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Any, Dict, List

import requests

from jobfeed.bookmarks import BookmarkStore
from jobfeed.client import JobsApiClient
from jobfeed.feed import JobFeedController
from jobfeed.logger import get_logger, reset_logger
from jobfeed.storage import MemoryStore


@pytest.fixture(autouse=True)
def quiet_logger(tmp_path):
    """Route the global logger to a temp dir for every test."""
    reset_logger()
    logger = get_logger(level="DEBUG", log_dir=tmp_path / "logs", enable_console=False)
    yield logger
    for handler in list(logger.logger.handlers):
        handler.close()
        logger.logger.removeHandler(handler)
    reset_logger()


def make_job(job_id: Any, **fields) -> Dict[str, Any]:
    job = {
        "id": job_id,
        "title": f"Job {job_id}",
        "company_name": "Acme Logistics",
        "primary_details": {
            "Place": "Hyderabad",
            "Salary": "₹12000 - ₹18000",
            "Experience": "1 year",
            "Qualification": "12th Pass",
        },
    }
    job.update(fields)
    return job


@pytest.fixture
def job_factory():
    return make_job


@pytest.fixture
def full_job() -> Dict[str, Any]:
    """A job carrying every field the display layer reads."""
    return {
        "id": 4242,
        "title": "Delivery Executive",
        "company_name": "Swift Couriers",
        "job_role": "Delivery",
        "other_details": "<p>Deliver parcels across the city.</p><p>Bike   required.</p>",
        "primary_details": {
            "Place": "Bengaluru",
            "Salary": "₹15000 - ₹20000",
            "Experience": "Fresher",
            "Qualification": "10th Pass",
        },
        "job_location_slug": "bengaluru",
        "salary_min": 15000,
        "salary_max": 20000,
        "custom_link": "tel:9876543210",
        "whatsapp_no": "9123456780",
        "button_text": "Call HR",
        "creatives": [{"thumb_url": "https://cdn.example.com/t.png", "file": "https://cdn.example.com/f.png"}],
        "contact_preference": {"whatsapp_link": "https://wa.me/919123456780"},
    }


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, body_error: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._body_error = body_error

    def json(self):
        if self._body_error:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; serves queued responses per page."""

    def __init__(self, pages: Dict[int, Any] = None):
        self.pages = pages or {}
        self.calls: List[Dict[str, Any]] = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        page = params["page"]
        response = self.pages.get(page, FakeResponse(200, {"results": []}))
        if isinstance(response, list):
            response = response.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def requested_pages(self) -> List[int]:
        return [c["params"]["page"] for c in self.calls]


def page_of(jobs: List[Any]) -> FakeResponse:
    return FakeResponse(200, {"results": jobs})


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def controller(fake_session, memory_store):
    client = JobsApiClient("https://jobs.example.com/common/jobs", session=fake_session)
    alerts = []
    ctrl = JobFeedController(client, BookmarkStore(memory_store), on_alert=lambda t, m: alerts.append((t, m)))
    ctrl.alerts = alerts
    return ctrl


@pytest.fixture
def connection_error():
    return requests.exceptions.ConnectionError("Failed to establish a new connection")
