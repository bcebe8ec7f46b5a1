"""Capture user-selected text from the content panels.

Only selections inside a content panel (raw text or rendered markdown) count;
anything else, such as headings or help text, is UI chrome and yields "".
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .favorites import FavoritesStore
from .models import FavoriteItem, Mode

logger = logging.getLogger(__name__)


class Region(str, Enum):
    RAW = "raw"
    MARKDOWN = "markdown"
    CHROME = "chrome"


CONTENT_REGIONS = frozenset({Region.RAW, Region.MARKDOWN})


@dataclass
class TextSelection:
    text: str
    region: Region | None  # region holding the selection's common ancestor

    @property
    def collapsed(self) -> bool:
        return not self.text


class SelectionReader(Protocol):
    def capture_selection(self, allowed_regions: frozenset[Region] = CONTENT_REGIONS) -> str: ...

    def clear(self) -> None: ...


def selected_text(
    selection: TextSelection | None,
    allowed_regions: frozenset[Region] = CONTENT_REGIONS,
) -> str:
    """Return the selection's text verbatim, or "" if it doesn't qualify."""
    if selection is None or selection.collapsed:
        return ""
    if selection.region not in allowed_regions:
        return ""
    return selection.text


_RANGE_RE = re.compile(r"^\s*(\d+)\s*(?:-\s*(\d+)\s*)?$")


class LineRangeSelectionReader:
    """Selects a 1-based inclusive line range ("3" or "2-5") of a panel.

    ``panels`` maps each region to the lines it currently displays. An
    unparsable range, or one outside the panel, selects nothing.
    """

    def __init__(
        self,
        panels: dict[Region, list[str]],
        line_range: str | None,
        region: Region = Region.RAW,
    ):
        self.panels = panels
        self.region = region
        self._selection = self._select(line_range)

    def _select(self, line_range: str | None) -> TextSelection | None:
        if not line_range:
            return None
        match = _RANGE_RE.match(line_range)
        if not match:
            logger.debug("Unparsable line range %r", line_range)
            return None
        start = int(match.group(1))
        end = int(match.group(2) or start)
        lines = self.panels.get(self.region, [])
        if start < 1 or end < start or end > len(lines):
            logger.debug(
                "Line range %s outside %s panel (%d lines)",
                line_range,
                self.region.value,
                len(lines),
            )
            return None
        return TextSelection("\n".join(lines[start - 1 : end]), self.region)

    def capture_selection(self, allowed_regions: frozenset[Region] = CONTENT_REGIONS) -> str:
        return selected_text(self._selection, allowed_regions)

    def clear(self) -> None:
        self._selection = None


def save_selection(
    reader: SelectionReader,
    store: FavoritesStore,
    source_url: str,
    source_mode: Mode,
) -> FavoriteItem:
    """Save the current selection as a text favorite.

    The selection is cleared whether or not saving succeeds. Raises
    EmptySelectionError when nothing usable is selected.
    """
    try:
        text = reader.capture_selection(CONTENT_REGIONS)
    finally:
        reader.clear()
    return store.add_text(text, source_url, source_mode)
