"""HTTP access to the paginated jobs API."""

from typing import Any, List, Optional

import requests

from .config import DEFAULT_API_ENDPOINT
from .errors import HttpStatusError, NetworkError, ParseError
from .logger import get_logger


def classify_status(status: int) -> HttpStatusError:
    """Map a non-success status code to the error shown to the user."""
    if status == 404:
        return HttpStatusError(404, "Jobs API endpoint not found (404).")
    if status >= 500:
        return HttpStatusError(status, f"Server error ({status}). Please try again later.")
    return HttpStatusError(status, f"HTTP error! status: {status}")


class JobsApiClient:
    """
    Fetches raw job pages from ``GET <endpoint>?page=<n>``.

    One call is one request: there is no retry, and no timeout unless one is
    configured.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_API_ENDPOINT,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.endpoint = endpoint
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch_page(self, page: int) -> List[Any]:
        """
        Return the raw ``results`` list of one page.

        Raises:
            NetworkError: connection failure or timeout
            HttpStatusError: non-2xx response
            ParseError: body is not a JSON object or ``results`` is not a list
        """
        logger = get_logger()
        logger.record_api_call()
        try:
            resp = self.session.get(self.endpoint, params={"page": page}, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.warning("Jobs request timed out", url=self.endpoint, page=page)
            raise NetworkError("Jobs request timed out. Try again later.") from e
        except requests.exceptions.RequestException as e:
            logger.error("Jobs request error", url=self.endpoint, page=page, error=str(e))
            raise NetworkError(f"Jobs request error: {e}") from e

        if not 200 <= resp.status_code < 300:
            logger.error("Jobs request failed", url=self.endpoint, page=page, status=resp.status_code)
            raise classify_status(resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise ParseError(f"Jobs response is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ParseError(f"Jobs response must be an object, got {type(data).__name__}")
        results = data.get("results")
        if results is None:
            return []
        if not isinstance(results, list):
            raise ParseError(f"Field 'results' must be a list, got {type(results).__name__}")
        return results
