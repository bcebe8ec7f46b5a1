"""Query lifecycle: idle -> loading -> idle, or loading -> error.

Each run takes a ticket from a counter. Only the newest ticket may land a
result or an error; anything finishing under an older ticket is dropped, so
when queries overlap the last one started wins.
"""

import logging
from enum import Enum

import httpx

from .client import ProxyClient, ProxyError
from .models import (
    Mode,
    QueryResult,
    TranscriptFailed,
    TranscriptProcessing,
)

logger = logging.getLogger(__name__)


class TranscriptUnavailable(RuntimeError):
    """The transcript job is still running or has failed upstream."""


class QueryState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


class QuerySession:
    def __init__(self, client: ProxyClient):
        self.client = client
        self.state = QueryState.IDLE
        self.result: QueryResult | None = None
        self.error = ""
        self._ticket = 0

    def begin(self) -> int:
        """Enter loading, clearing any previous result and error."""
        self._ticket += 1
        self.state = QueryState.LOADING
        self.result = None
        self.error = ""
        return self._ticket

    def is_current(self, ticket: int) -> bool:
        return ticket == self._ticket

    def finish(self, ticket: int, result: QueryResult) -> bool:
        if not self.is_current(ticket):
            logger.debug("Dropping stale result for ticket %d", ticket)
            return False
        self.result = result
        self.state = QueryState.IDLE
        return True

    def fail(self, ticket: int, message: str) -> bool:
        if not self.is_current(ticket):
            logger.debug("Dropping stale error for ticket %d", ticket)
            return False
        self.error = message or "Unknown error"
        self.state = QueryState.ERROR
        return True

    def run(self, url: str, mode: Mode) -> QueryResult | None:
        """Run one query; on failure the message is left in ``error``."""
        ticket = self.begin()
        url = (url or "").strip()
        if not url:
            self.fail(ticket, "Enter a URL")
            return None

        try:
            result = self._fetch(url, mode)
        except (ProxyError, TranscriptUnavailable, httpx.HTTPError) as e:
            logger.warning("Query for %s failed: %s", url, e)
            self.fail(ticket, str(e))
            return None

        self.finish(ticket, result)
        return self.result

    def _fetch(self, url: str, mode: Mode) -> QueryResult:
        if mode is Mode.SCRAPE:
            scraped = self.client.fetch_scrape(url)
            return QueryResult(
                mode=mode,
                url=url,
                content=scraped.content,
                title=scraped.name,
                description=scraped.description,
                urls=scraped.urls,
            )

        transcript = self.client.fetch_transcript(url, mode="native", text=True)
        if isinstance(transcript, TranscriptProcessing):
            raise TranscriptUnavailable(
                f"Transcript job {transcript.job_id} is still processing. "
                "Try again in a moment."
            )
        if isinstance(transcript, TranscriptFailed):
            raise TranscriptUnavailable(transcript.error)
        return QueryResult(
            mode=mode,
            url=url,
            content=transcript.content,
            lang=transcript.lang,
        )
