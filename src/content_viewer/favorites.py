"""Saved text snippets and images, persisted on every change.

Favorites are stored newest first under FAVORITES_KEY in LocalStorage:
    [
        {"id": "...", "kind": "text", "text": "...", "source_url": "...",
         "source_mode": "transcript", "created_at": "2025-01-15T14:30:00+00:00"},
        {"id": "...", "kind": "image", "image_url": "https://...", "alt": "...",
         "source_url": "...", "source_mode": "scrape", "created_at": "..."}
    ]
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterator

import pyperclip

from .models import FavoriteItem, FavoriteKind, Mode
from .storage import LocalStorage

logger = logging.getLogger(__name__)

FAVORITES_KEY = "supadata:favorites"


class EmptySelectionError(ValueError):
    """Raised when asked to save a blank text selection."""

    def __init__(self, message: str = "Select text inside the content to save it."):
        super().__init__(message)


class FavoritesStore:
    def __init__(
        self,
        storage: LocalStorage,
        clipboard: Callable[[str], None] | None = None,
    ):
        self.storage = storage
        self._clipboard = clipboard or pyperclip.copy
        self._items: list[FavoriteItem] = []
        self._image_urls: set[str] = set()
        self._load()

    def _load(self) -> None:
        """Load favorites from storage. Bad data loads as an empty list."""
        raw = self.storage.get_item(FAVORITES_KEY)
        if raw is None:
            logger.debug("No saved favorites found.")
            return
        try:
            items = [FavoriteItem.from_dict(entry) for entry in raw]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Discarding corrupt favorites: %s", e)
            return
        self._set_items(items)
        logger.info("Loaded %d favorites", len(self._items))

    def _set_items(self, items: list[FavoriteItem]) -> None:
        self._items = items
        self._image_urls = {
            f.image_url for f in items if f.kind is FavoriteKind.IMAGE
        }

    def save(self) -> None:
        """Persist the whole collection."""
        self.storage.set_item(FAVORITES_KEY, [f.to_dict() for f in self._items])

    def _prepend(self, item: FavoriteItem) -> FavoriteItem:
        self._set_items([item, *self._items])
        self.save()
        return item

    def add_text(self, text: str | None, source_url: str, source_mode: Mode) -> FavoriteItem:
        clean = (text or "").strip()
        if not clean:
            raise EmptySelectionError()
        item = FavoriteItem(
            id=uuid.uuid4().hex,
            kind=FavoriteKind.TEXT,
            text=clean,
            source_url=source_url,
            source_mode=source_mode,
            created_at=datetime.now(timezone.utc),
        )
        logger.info("Saved text favorite %s (%d chars)", item.id, len(clean))
        return self._prepend(item)

    def add_image(
        self, image_url: str, alt: str, source_url: str, source_mode: Mode
    ) -> FavoriteItem | None:
        """Save an image. Returns None if the URL is empty or already saved."""
        if not image_url or image_url in self._image_urls:
            return None
        item = FavoriteItem(
            id=uuid.uuid4().hex,
            kind=FavoriteKind.IMAGE,
            image_url=image_url,
            alt=alt or "",
            source_url=source_url,
            source_mode=source_mode,
            created_at=datetime.now(timezone.utc),
        )
        logger.info("Saved image favorite %s: %s", item.id, image_url)
        return self._prepend(item)

    def remove(self, favorite_id: str) -> None:
        remaining = [f for f in self._items if f.id != favorite_id]
        if len(remaining) == len(self._items):
            return
        self._set_items(remaining)
        self.save()
        logger.info("Removed favorite %s", favorite_id)

    def get(self, favorite_id: str) -> FavoriteItem | None:
        for f in self._items:
            if f.id == favorite_id:
                return f
        return None

    def find(self, id_prefix: str) -> FavoriteItem | None:
        """Look up by full id or unique id prefix."""
        if not id_prefix:
            return None
        exact = self.get(id_prefix)
        if exact:
            return exact
        candidates = [f for f in self._items if f.id.startswith(id_prefix)]
        return candidates[0] if len(candidates) == 1 else None

    def copy_to_clipboard(self, item: FavoriteItem) -> bool:
        """Copy the item's payload. Clipboard failures are not errors."""
        try:
            self._clipboard(item.payload)
        except (pyperclip.PyperclipException, OSError) as e:
            logger.debug("Clipboard unavailable: %s", e)
            return False
        return True

    @property
    def items(self) -> list[FavoriteItem]:
        return list(self._items)

    @property
    def image_urls(self) -> frozenset[str]:
        return frozenset(self._image_urls)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[FavoriteItem]:
        return iter(list(self._items))
