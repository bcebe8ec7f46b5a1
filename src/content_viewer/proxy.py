"""Proxy server in front of the Supadata API.

Injects the API key, waits on transcript jobs and maps upstream failures to
HTTP statuses, so the client never holds credentials.

Endpoints:
    GET /api/transcript?url=...&mode=native&text=true
    GET /api/scrape?url=...
    GET /health
    GET /

Configuration comes from the environment (or .env):
    SUPADATA_API_KEY, SUPADATA_API_BASE, HOST, PORT,
    POLL_ATTEMPTS, POLL_INTERVAL, LOG_LEVEL
"""

import asyncio
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class ProxySettings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore"}

    supadata_api_key: str = ""
    supadata_api_base: str = "https://api.supadata.ai/v1"

    host: str = "127.0.0.1"
    port: int = 3000

    # Transcript jobs: up to poll_attempts checks, poll_interval seconds apart
    poll_attempts: int = 12
    poll_interval: float = 1.0
    upstream_timeout: float = 30.0

    log_level: str = "INFO"


class UpstreamError(RuntimeError):
    """The Supadata API answered with a non-success status."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        super().__init__(f"Upstream {status_code}: {body}")


class SupadataClient:
    """Async client for the Supadata API using key auth."""

    def __init__(self, settings: ProxySettings, transport: httpx.AsyncBaseTransport | None = None):
        self._client = httpx.AsyncClient(
            base_url=settings.supadata_api_base,
            headers={"x-api-key": settings.supadata_api_key},
            timeout=settings.upstream_timeout,
            transport=transport,
        )

    async def get(self, path: str, params: dict | None = None):
        """GET a path; returns parsed JSON, or text for non-JSON bodies."""
        response = await self._client.get(path, params=params)
        if not response.is_success:
            raise UpstreamError(response.status_code, response.text)
        if "application/json" in response.headers.get("content-type", ""):
            return response.json()
        return response.text

    async def aclose(self) -> None:
        await self._client.aclose()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _error_status(exc: UpstreamError) -> int:
    return exc.status_code if exc.status_code >= 400 else 500


async def wait_for_job(upstream: SupadataClient, job_id: str, settings: ProxySettings) -> JSONResponse:
    """Poll a transcript job until it completes, fails, or attempts run out."""
    for attempt in range(settings.poll_attempts):
        await asyncio.sleep(settings.poll_interval)
        job = await upstream.get(f"/transcript/{job_id}")
        status = job.get("status") if isinstance(job, dict) else None
        logger.debug("Job %s attempt %d: %s", job_id, attempt + 1, status)
        if status == "completed":
            return JSONResponse(content=job)
        if status == "failed":
            logger.warning("Transcript job %s failed: %s", job_id, job.get("error"))
            return _error(502, job.get("error") or "Job failed")

    logger.info("Transcript job %s still processing after %d polls", job_id, settings.poll_attempts)
    return JSONResponse(status_code=202, content={"status": "processing", "jobId": job_id})


def create_app(
    settings: ProxySettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the proxy app. ``transport`` lets tests stub the upstream."""
    settings = settings or ProxySettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not settings.supadata_api_key:
            logger.warning("SUPADATA_API_KEY is not set; upstream calls will be rejected")
        app.state.settings = settings
        app.state.upstream = SupadataClient(settings, transport=transport)
        logger.info("Proxy ready, forwarding to %s", settings.supadata_api_base)

        yield

        await app.state.upstream.aclose()

    app = FastAPI(title="Supadata Proxy", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/transcript")
    async def transcript(
        request: Request,
        url: str = "",
        mode: str = "native",
        text: str = "true",
    ):
        if not url:
            return _error(400, "Missing ?url=")
        upstream: SupadataClient = request.app.state.upstream
        try:
            first = await upstream.get(
                "/transcript", params={"url": url, "mode": mode, "text": text}
            )
            if isinstance(first, dict) and first.get("jobId"):
                logger.info("Transcript for %s queued as job %s", url, first["jobId"])
                return await wait_for_job(upstream, str(first["jobId"]), settings)
            return JSONResponse(content=first)
        except UpstreamError as e:
            logger.warning("Transcript upstream error for %s: %s", url, e)
            return _error(_error_status(e), str(e))
        except httpx.HTTPError as e:
            logger.warning("Transcript request for %s failed: %s", url, e)
            return _error(502, str(e) or type(e).__name__)
        except ValueError as e:
            logger.warning("Unreadable upstream body for %s: %s", url, e)
            return _error(500, str(e))

    @app.get("/api/scrape")
    async def scrape(request: Request, url: str = ""):
        if not url:
            return _error(400, "Missing ?url=")
        upstream: SupadataClient = request.app.state.upstream
        try:
            data = await upstream.get("/web/scrape", params={"url": url})
            return JSONResponse(content=data)
        except UpstreamError as e:
            logger.warning("Scrape upstream error for %s: %s", url, e)
            return _error(_error_status(e), str(e))
        except httpx.HTTPError as e:
            logger.warning("Scrape request for %s failed: %s", url, e)
            return _error(502, str(e) or type(e).__name__)
        except ValueError as e:
            logger.warning("Unreadable upstream body for %s: %s", url, e)
            return _error(500, str(e))

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Supadata proxy running"

    return app
