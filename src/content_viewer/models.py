"""Data models for query results and saved favorites."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Mode(str, Enum):
    TRANSCRIPT = "transcript"  # video -> text
    SCRAPE = "scrape"  # web page -> markdown


class FavoriteKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class FavoriteItem:
    id: str
    kind: FavoriteKind
    source_url: str  # URL queried when the favorite was saved
    source_mode: Mode
    created_at: datetime
    text: str = ""  # TEXT only, trimmed and non-empty
    image_url: str = ""  # IMAGE only, absolute when resolvable
    alt: str = ""

    @property
    def payload(self) -> str:
        """The value a user copies: image URL or text."""
        return self.image_url if self.kind is FavoriteKind.IMAGE else self.text

    def to_dict(self) -> dict:
        data: dict = {
            "id": self.id,
            "kind": self.kind.value,
            "source_url": self.source_url,
            "source_mode": self.source_mode.value,
            "created_at": self.created_at.isoformat(),
        }
        if self.kind is FavoriteKind.IMAGE:
            data["image_url"] = self.image_url
            data["alt"] = self.alt
        else:
            data["text"] = self.text
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "FavoriteItem":
        """Build an item from its stored form.

        Raises KeyError, TypeError or ValueError on malformed input.
        """
        kind = FavoriteKind(data["kind"])
        text = data.get("text", "")
        image_url = data.get("image_url", "")
        alt = data.get("alt") or ""
        if not all(isinstance(value, str) for value in (text, image_url, alt)):
            raise TypeError("text, image_url and alt must be strings")
        if kind is FavoriteKind.TEXT and not text.strip():
            raise ValueError("text favorite without text")
        if kind is FavoriteKind.IMAGE and not image_url:
            raise ValueError("image favorite without image_url")

        return cls(
            id=str(data["id"]),
            kind=kind,
            source_url=data.get("source_url", ""),
            source_mode=Mode(data["source_mode"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            text=text,
            image_url=image_url,
            alt=alt,
        )


# ── Collaborator results ────────────────────────────────────────


@dataclass
class TranscriptCompleted:
    content: str
    lang: str | None = None
    available_langs: list[str] = field(default_factory=list)


@dataclass
class TranscriptProcessing:
    job_id: str


@dataclass
class TranscriptFailed:
    error: str


TranscriptResult = TranscriptCompleted | TranscriptProcessing | TranscriptFailed


@dataclass
class ScrapeResult:
    content: str  # markdown
    name: str = ""
    description: str = ""
    urls: list[str] = field(default_factory=list)


@dataclass
class QueryResult:
    """What the active query produced; replaced wholesale on each run."""

    mode: Mode
    url: str
    content: str
    title: str = ""
    description: str = ""
    urls: list[str] = field(default_factory=list)
    lang: str | None = None
