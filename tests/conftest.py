"""Shared test fixtures."""

from datetime import datetime, timezone

import pytest

from content_viewer.favorites import FavoritesStore
from content_viewer.models import FavoriteItem, FavoriteKind, Mode, QueryResult
from content_viewer.storage import LocalStorage

SCRAPE_MARKDOWN = """# Articles

Intro paragraph about the API.

![A picture](pic.jpg)

See [the docs](/docs/start) and [elsewhere](https://other.example/page).

![Logo](https://cdn.example/logo.png "Site logo")
"""


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / ".state" / "storage.json")


@pytest.fixture
def clipboard() -> list[str]:
    """Collects whatever the store copies."""
    return []


@pytest.fixture
def store(storage, clipboard) -> FavoritesStore:
    return FavoritesStore(storage, clipboard=clipboard.append)


@pytest.fixture
def transcript_result() -> QueryResult:
    return QueryResult(
        mode=Mode.TRANSCRIPT,
        url="https://video.example/v1",
        content="line one\nline two\nAPI line",
    )


@pytest.fixture
def scrape_result() -> QueryResult:
    return QueryResult(
        mode=Mode.SCRAPE,
        url="https://site.example/articles/a",
        content=SCRAPE_MARKDOWN,
        title="Articles",
        description="All the articles",
        urls=[f"https://site.example/p/{n}" for n in range(12)],
    )


@pytest.fixture
def sample_favorites() -> list[FavoriteItem]:
    return [
        FavoriteItem(
            id="aaaa1111",
            kind=FavoriteKind.TEXT,
            text="A saved sentence",
            source_url="https://video.example/v1",
            source_mode=Mode.TRANSCRIPT,
            created_at=datetime(2025, 2, 10, 18, 30, 0, tzinfo=timezone.utc),
        ),
        FavoriteItem(
            id="bbbb2222",
            kind=FavoriteKind.IMAGE,
            image_url="https://site.example/articles/pic.jpg",
            alt="A picture",
            source_url="https://site.example/articles/a",
            source_mode=Mode.SCRAPE,
            created_at=datetime(2025, 2, 9, 12, 0, 0, tzinfo=timezone.utc),
        ),
    ]
