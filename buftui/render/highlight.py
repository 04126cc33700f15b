"""Syntax highlighting for downloaded file contents.

Lexers are picked from the file path (``.proto``, ``buf.yaml``, ``README.md``
...); unknown types fall back to plain text. Terminal control bytes are
neutralized before anything reaches the screen.
"""

from __future__ import annotations

import re

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from ..runtime.config import DEFAULT_STYLE

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

_FORMATTERS: dict[str, Terminal256Formatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def normalize_style(style: str | None) -> str:
    """Return ``style`` if Pygments knows it, else the default style."""
    if not style:
        return DEFAULT_STYLE
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def lexer_for_path(path: str, source: str) -> Lexer:
    try:
        return get_lexer_for_filename(path.rsplit("/", 1)[-1], source, stripnl=False)
    except ClassNotFound:
        return TextLexer(stripnl=False)


def highlight_source(source: str, path: str, style: str | None = DEFAULT_STYLE, *, color: bool = True) -> list[str]:
    """Return the display lines of ``source``, highlighted when ``color`` is set."""
    clean = sanitize_terminal_text(source.expandtabs())
    if not color or not clean:
        return clean.splitlines()
    formatter = _formatter_for_style(normalize_style(style))
    rendered = pygments_highlight(clean, lexer_for_path(path, clean), formatter)
    return rendered.splitlines()
