"""ANSI-aware width measurement, clipping, and padding for table cells.

Escape sequences pass through untouched and never count toward width, so
styled cells and highlighted source lines stay column-aligned.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
ELLIPSIS = "…"


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Visible columns of ``text`` once escape sequences are stripped."""
    col = 0
    for ch in ANSI_ESCAPE_RE.sub("", text):
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Tabs are expanded into spaces so clipping aligns with rendered cells.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)


def fit_cell(text: str, width: int) -> str:
    """Clip plain ``text`` to ``width`` columns, marking truncation with an ellipsis."""
    if width <= 0:
        return ""
    if display_width(text) <= width:
        return pad_ansi_line(text, width)
    return clip_ansi_line(text, width - 1) + ELLIPSIS


def pad_ansi_line(text: str, width: int) -> str:
    """Right-pad a styled line with spaces to exactly ``width`` columns."""
    clipped = clip_ansi_line(text, width)
    return clipped + " " * max(0, width - display_width(clipped))


def selected_with_ansi(text: str, sgr: str, reset: str) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text or not sgr:
        return text
    # Re-apply the selection after every internal reset.
    return sgr + text.replace("\033[0m", "\033[0m" + sgr) + reset
