"""
Course store: the full list of course records, fetched once from the catalog
JSON endpoint when the view mounts.

Loading is a small state machine:

    IDLE ──load()──▶ LOADING ──▶ LOADED
                        │
                        └──────▶ FAILED(reason) ──retry()──▶ LOADING ...

A failed fetch (transport error, timeout, non-2xx status, or a body that is
not a JSON array of course records) is logged and leaves the store empty.
Nothing retries automatically; retry() is the only way back to LOADING.

Public API:
    CourseStore(url, session, timeout)
    CourseStore.load()  / CourseStore.retry()  → list[Course]
    CourseStore.courses, .state, .error, .loading
"""

import logging
from enum import Enum

import requests

from catalog.models import Course

FETCH_TIMEOUT = 15.0  # seconds

log = logging.getLogger(__name__)

SESSION = requests.Session()
SESSION.headers["User-Agent"] = "School-Catalog/1.0"


class LoadState(str, Enum):
    IDLE    = "idle"
    LOADING = "loading"
    LOADED  = "loaded"
    FAILED  = "failed"


class CourseStore:
    def __init__(
        self,
        url: str,
        session: requests.Session | None = None,
        timeout: float = FETCH_TIMEOUT,
    ):
        self.url     = url
        self.timeout = timeout
        self.courses: list[Course] = []
        self.state   = LoadState.IDLE
        self.error: str | None = None
        self._session = session or SESSION

    @property
    def loading(self) -> bool:
        return self.state is LoadState.LOADING

    def load(self) -> list[Course]:
        """Fetch the course list if it has never been requested; otherwise a no-op."""
        if self.state is not LoadState.IDLE:
            return self.courses

        self.state = LoadState.LOADING
        self.error = None
        try:
            courses = self._fetch()
        except (requests.RequestException, ValueError) as exc:
            log.error("Error fetching courses from %s: %s", self.url, exc)
            self.error = str(exc)
            self.state = LoadState.FAILED
            return self.courses

        self.courses = courses
        self.state = LoadState.LOADED
        log.info("Loaded %d courses from %s", len(courses), self.url)
        return self.courses

    def retry(self) -> list[Course]:
        """Run the fetch again after a failure. Ignored in any other state."""
        if self.state is not LoadState.FAILED:
            return self.courses
        log.info("Retrying course fetch from %s", self.url)
        self.state = LoadState.IDLE
        return self.load()

    def _fetch(self) -> list[Course]:
        resp = self._session.get(self.url, timeout=self.timeout)
        resp.raise_for_status()
        payload = resp.json()
        if not isinstance(payload, list):
            raise ValueError("Expected a JSON array of courses")
        return [Course.model_validate(item) for item in payload]
