"""Split raw content into lines and filter them by a keyword.

Matching is plain substring search on ``str.lower()``, not ``casefold()``:
"STRASSE" does not match "straße".
"""

import re
from dataclasses import dataclass

_LINE_BREAK_RE = re.compile(r"\r?\n")


def get_lines(text: str | None) -> list[str]:
    """Split text on LF or CRLF. ``None`` counts as empty text."""
    return _LINE_BREAK_RE.split(str(text if text is not None else ""))


def filter_lines(lines: list[str], query: str) -> list[str]:
    """Return the lines containing ``query``, case-insensitively, in order.

    An empty query returns ``lines`` itself.
    """
    if not query:
        return lines
    needle = query.lower()
    return [line for line in lines if needle in line.lower()]


@dataclass
class FilteredLines:
    lines: list[str]
    matches: list[str]
    shown: list[str]
    query: str = ""

    @property
    def match_count(self) -> int:
        return len(self.matches)

    @property
    def summary(self) -> str:
        if self.query:
            return f"Matches: {self.match_count}"
        return f"Total lines: {len(self.lines)}"


def apply_filter(text: str | None, query: str = "", only_matches: bool = True) -> FilteredLines:
    """Filter ``text`` for display.

    With ``only_matches`` off every line is shown, but matches are still
    counted for the summary.
    """
    lines = get_lines(text)
    matches = filter_lines(lines, query)
    return FilteredLines(
        lines=lines,
        matches=matches,
        shown=matches if only_matches else lines,
        query=query,
    )
