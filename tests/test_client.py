"""Tests for the proxy API client."""

import httpx
import pytest
import respx

from content_viewer.client import (
    ProxyClient,
    ProxyError,
    normalize_scrape,
    normalize_transcript,
)
from content_viewer.models import (
    TranscriptCompleted,
    TranscriptFailed,
    TranscriptProcessing,
)

SERVER = "http://proxy.test"
TRANSCRIPT_URL = f"{SERVER}/api/transcript"
SCRAPE_URL = f"{SERVER}/api/scrape"


class TestNormalize:
    def test_completed_text(self):
        result = normalize_transcript({"content": "a\nb", "lang": "en", "availableLangs": ["en", "es"]})
        assert result == TranscriptCompleted(content="a\nb", lang="en", available_langs=["en", "es"])

    def test_completed_job_body(self):
        result = normalize_transcript({"status": "completed", "content": "done"})
        assert result == TranscriptCompleted(content="done")

    def test_segments_joined(self):
        result = normalize_transcript(
            {"content": [{"text": "one", "offset": 0}, {"text": "two", "offset": 1200}]}
        )
        assert result.content == "one\ntwo"

    def test_processing(self):
        assert normalize_transcript({"status": "processing", "jobId": "j1"}) == TranscriptProcessing("j1")

    def test_failed(self):
        assert normalize_transcript({"status": "failed"}) == TranscriptFailed("Job failed")
        assert normalize_transcript({"status": "failed", "error": "no captions"}) == TranscriptFailed("no captions")

    def test_scrape_defaults(self):
        result = normalize_scrape({"content": "# Hi", "urls": None})
        assert result.content == "# Hi"
        assert result.name == ""
        assert result.urls == []


class TestProxyClient:
    @respx.mock
    def test_fetch_transcript(self):
        route = respx.get(TRANSCRIPT_URL).mock(
            return_value=httpx.Response(200, json={"content": "line one\nAPI line", "lang": "en"})
        )

        with ProxyClient(SERVER) as client:
            result = client.fetch_transcript("https://video.example/v1")

        assert isinstance(result, TranscriptCompleted)
        assert result.content == "line one\nAPI line"
        params = route.calls.last.request.url.params
        assert params["url"] == "https://video.example/v1"
        assert params["mode"] == "native"
        assert params["text"] == "true"

    @respx.mock
    def test_transcript_still_processing(self):
        respx.get(TRANSCRIPT_URL).mock(
            return_value=httpx.Response(202, json={"status": "processing", "jobId": "abc"})
        )

        with ProxyClient(SERVER) as client:
            result = client.fetch_transcript("https://video.example/v1")

        assert result == TranscriptProcessing(job_id="abc")

    @respx.mock
    def test_fetch_scrape(self):
        route = respx.get(SCRAPE_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "content": "# Page\n![pic](pic.jpg)",
                    "name": "Page",
                    "description": "A page",
                    "urls": ["https://site.example/x", "/rel"],
                },
            )
        )

        with ProxyClient(SERVER) as client:
            result = client.fetch_scrape("https://site.example/articles/a")

        assert result.name == "Page"
        assert result.urls == ["https://site.example/x", "/rel"]
        assert route.calls.last.request.url.params["url"] == "https://site.example/articles/a"

    @respx.mock
    def test_error_status_raises(self):
        respx.get(SCRAPE_URL).mock(
            return_value=httpx.Response(502, json={"error": "Upstream 500: boom"})
        )

        with ProxyClient(SERVER) as client:
            with pytest.raises(ProxyError, match="HTTP 502") as exc_info:
                client.fetch_scrape("https://site.example/")

        assert exc_info.value.status_code == 502
        assert "boom" in str(exc_info.value)

    @respx.mock
    def test_missing_url_is_400(self):
        respx.get(TRANSCRIPT_URL).mock(
            return_value=httpx.Response(400, json={"error": "Missing ?url="})
        )

        with ProxyClient(SERVER) as client:
            with pytest.raises(ProxyError, match="HTTP 400"):
                client.fetch_transcript("")

    @respx.mock
    def test_non_json_body_raises(self):
        respx.get(SCRAPE_URL).mock(return_value=httpx.Response(200, text="<html>"))

        with ProxyClient(SERVER) as client:
            with pytest.raises(ProxyError, match="not JSON"):
                client.fetch_scrape("https://site.example/")

    def test_trailing_slash_trimmed(self):
        with ProxyClient("http://proxy.test/") as client:
            assert client.base_url == "http://proxy.test"
