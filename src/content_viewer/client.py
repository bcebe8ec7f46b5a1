"""HTTP client for the content proxy (see proxy.py).

The proxy forwards to the Supadata API and answers with loosely shaped JSON:
a transcript may come back finished, still processing (202 with a jobId), or
as a list of timed segments instead of plain text. Everything is normalized
here into the result types in models.py.

The proxy URL defaults to http://localhost:3000; the CLI reads it from the
config file or the CONTENT_VIEWER_SERVER_URL environment variable.
"""

import logging

import httpx

from .models import (
    ScrapeResult,
    TranscriptCompleted,
    TranscriptFailed,
    TranscriptProcessing,
    TranscriptResult,
)

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "http://localhost:3000"

# The proxy may spend a while polling a transcript job before answering
DEFAULT_TIMEOUT = 120.0


class ProxyError(RuntimeError):
    """The proxy answered with a non-success status."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code} - {body}")


def _segments_to_text(segments: list) -> str:
    """Join timed transcript segments into newline-separated text."""
    texts = []
    for segment in segments:
        if isinstance(segment, dict):
            texts.append(str(segment.get("text", "")))
        else:
            texts.append(str(segment))
    return "\n".join(texts)


def normalize_transcript(data: dict) -> TranscriptResult:
    """Map a raw transcript response onto the TranscriptResult union."""
    status = data.get("status")
    if status == "processing":
        return TranscriptProcessing(job_id=str(data.get("jobId", "")))
    if status == "failed":
        return TranscriptFailed(error=data.get("error") or "Job failed")

    content = data.get("content", "")
    if isinstance(content, list):
        content = _segments_to_text(content)
    return TranscriptCompleted(
        content=str(content or ""),
        lang=data.get("lang"),
        available_langs=list(data.get("availableLangs") or []),
    )


def normalize_scrape(data: dict) -> ScrapeResult:
    urls = data.get("urls") or []
    return ScrapeResult(
        content=str(data.get("content") or ""),
        name=data.get("name") or "",
        description=data.get("description") or "",
        urls=[str(u) for u in urls] if isinstance(urls, list) else [],
    )


class ProxyClient:
    """Client for the proxy's /api/transcript and /api/scrape endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = (base_url or DEFAULT_SERVER_URL).rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={"accept": "application/json"},
            timeout=timeout,
            follow_redirects=True,
        )

    def _get(self, path: str, params: dict) -> dict:
        logger.debug("GET %s%s %s", self.base_url, path, params)
        response = self._client.get(path, params=params)
        if not response.is_success:
            raise ProxyError(response.status_code, response.text)
        try:
            data = response.json()
        except ValueError:
            raise ProxyError(response.status_code, "response is not JSON")
        if not isinstance(data, dict):
            raise ProxyError(response.status_code, "unexpected response shape")
        return data

    def fetch_transcript(
        self, url: str, mode: str = "native", text: bool = True
    ) -> TranscriptResult:
        """Fetch a video transcript through the proxy."""
        data = self._get(
            "/api/transcript",
            {"url": url, "mode": mode, "text": "true" if text else "false"},
        )
        result = normalize_transcript(data)
        logger.info("Transcript for %s: %s", url, type(result).__name__)
        return result

    def fetch_scrape(self, url: str) -> ScrapeResult:
        """Fetch a web page as markdown through the proxy."""
        result = normalize_scrape(self._get("/api/scrape", {"url": url}))
        logger.info("Scraped %s (%d chars)", url, len(result.content))
        return result

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
