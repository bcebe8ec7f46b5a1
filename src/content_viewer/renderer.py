"""Turn a query result into a view for the terminal.

render_content() is pure: the same result, filter, favorites and base URL
always give the same ContentView. format_view() lays the view out as text.

Scraped markdown has every link and image URL made absolute before display,
so what is shown, opened and saved is the same URL.
"""

import re
from dataclasses import dataclass, field

from .filtering import FilteredLines, apply_filter, get_lines
from .models import Mode, QueryResult
from .selection import Region
from .urls import resolve

# ![alt](src "optional title")
IMAGE_RE = re.compile(r'!\[([^\]]*)\]\(\s*([^()\s]+)(\s+"[^"]*")?\s*\)')
# [text](href "optional title"); text may hold one level of brackets,
# e.g. a linked image [![alt](src)](href)
LINK_RE = re.compile(
    r'(?<!!)\[((?:[^\[\]]|\[[^\[\]]*\])*)\]\(\s*([^()\s]+)(\s+"[^"]*")?\s*\)'
)

MAX_LISTED_URLS = 10

HEADINGS = {
    Mode.TRANSCRIPT: "Transcript",
    Mode.SCRAPE: "Web content (Markdown)",
}


@dataclass
class ImageSlot:
    index: int  # 1-based, in document order
    src: str  # resolved URL
    alt: str = ""
    saved: bool = False
    end: int = 0  # offset just past the image in the rewritten markdown

    @property
    def badge(self) -> str:
        if self.saved:
            return "[✓ saved]"
        return f"[★ save: --save-image {self.index}]"


@dataclass
class ContentView:
    mode: Mode
    heading: str
    filtered: FilteredLines
    markdown: str = ""
    images: list[ImageSlot] = field(default_factory=list)
    title: str = ""
    description: str = ""
    urls: list[str] = field(default_factory=list)

    @property
    def panels(self) -> dict[Region, list[str]]:
        """Lines displayed by each selectable content panel."""
        panels = {Region.RAW: self.filtered.shown}
        if self.mode is Mode.SCRAPE:
            panels[Region.MARKDOWN] = get_lines(self.markdown)
        return panels

    def image(self, index: int) -> ImageSlot | None:
        if 1 <= index <= len(self.images):
            return self.images[index - 1]
        return None


def rewrite_markdown(
    content: str,
    base: str | None,
    favorite_images: frozenset[str] | set[str] = frozenset(),
) -> tuple[str, list[ImageSlot]]:
    """Resolve image and link URLs in ``content`` and collect its images.

    Links are rewritten first, then images, so each slot's ``end`` offset
    points into the returned markdown. Resolved URLs may hold characters
    the patterns reject, so the output is never matched again.
    """

    def _link(m: re.Match) -> str:
        text, href, title = m.group(1), m.group(2), m.group(3) or ""
        return f"[{text}]({resolve(href, base)}{title})"

    linked = LINK_RE.sub(_link, content)

    slots: list[ImageSlot] = []
    parts: list[str] = []
    size = last = 0
    for m in IMAGE_RE.finditer(linked):
        alt, src, title = m.group(1), m.group(2), m.group(3) or ""
        final = resolve(src, base)
        image = f"![{alt}]({final}{title})"
        parts += [linked[last:m.start()], image]
        size += m.start() - last + len(image)
        last = m.end()
        slots.append(
            ImageSlot(
                index=len(slots) + 1,
                src=final,
                alt=alt,
                saved=final in favorite_images,
                end=size,
            )
        )
    parts.append(linked[last:])
    return "".join(parts), slots


def render_content(
    result: QueryResult,
    query: str = "",
    only_matches: bool = True,
    favorite_images: frozenset[str] | set[str] = frozenset(),
    base: str | None = None,
) -> ContentView:
    filtered = apply_filter(result.content, query, only_matches)
    view = ContentView(
        mode=result.mode,
        heading=HEADINGS[result.mode],
        filtered=filtered,
    )
    if result.mode is Mode.SCRAPE:
        view.markdown, view.images = rewrite_markdown(
            result.content or "", base, favorite_images
        )
        view.title = result.title
        view.description = result.description
        view.urls = list(result.urls[:MAX_LISTED_URLS])
    return view


def annotate_images(markdown: str, images: list[ImageSlot]) -> str:
    """Put each image's save badge right after it.

    ``markdown`` must be the text the slots were collected from.
    """
    annotated = markdown
    for slot in sorted(images, key=lambda s: s.end, reverse=True):
        annotated = f"{annotated[:slot.end]} {slot.badge}{annotated[slot.end:]}"
    return annotated


def format_view(view: ContentView, show_markdown: bool = True) -> str:
    """Render a ContentView as terminal text."""
    lines: list[str] = []

    lines.append(f"## {view.heading}")
    lines.append(view.filtered.summary)
    lines.append("")

    raw_label = (
        "Plain text (RAW)"
        if view.mode is Mode.TRANSCRIPT
        else "Filtered plain text (RAW)"
    )
    lines.append(f"--- {raw_label} ---")
    for number, text in enumerate(view.filtered.shown, start=1):
        lines.append(f"{number:>4} | {text}")

    if view.mode is Mode.SCRAPE:
        if show_markdown:
            lines.append("")
            lines.append("--- Rendered content (Markdown) ---")
            annotated = annotate_images(view.markdown, view.images)
            for number, text in enumerate(get_lines(annotated), start=1):
                lines.append(f"{number:>4} | {text}")

        if view.images:
            lines.append("")
            lines.append("Images:")
            for slot in view.images:
                alt = f" ({slot.alt})" if slot.alt else ""
                lines.append(f"  {slot.index}. {slot.src}{alt} {slot.badge}")

        if view.title:
            lines.append("")
            lines.append(f"Title: {view.title}")
        if view.description:
            lines.append(f"Description: {view.description}")
        if view.urls:
            lines.append("")
            lines.append("Links found:")
            for url in view.urls:
                lines.append(f"  - {url}")

    return "\n".join(lines)
