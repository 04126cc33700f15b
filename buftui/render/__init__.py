"""Frame rendering for the navigator.

Composes one full ANSI frame per pass from the machine's state and writes it
in a single ``os.write``. Nothing here mutates the machine.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from datetime import datetime, timezone

from ..navigator.machine import NavigationMachine
from ..navigator.states import NavState
from ..reference import LOCATOR_FORM
from ..runtime.config import NavigatorConfig
from .ansi import clip_ansi_line, display_width, pad_ansi_line, selected_with_ansi
from .help import help_lines
from .highlight import highlight_source
from .tables import (
    COMMIT_COLUMNS,
    FILE_COLUMNS,
    MODULE_COLUMNS,
    Column,
    commit_row,
    file_row,
    format_heading,
    format_row,
    module_row,
    table_width,
    window_start,
)

SPINNER_FRAMES: tuple[str, ...] = ("⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷")
PROMPT_TITLE = "Navigate to owner"
CURSOR = "█"
REVERSE_VIDEO = "\033[7m"

LOADING_TEXT: dict[NavState, str] = {
    NavState.LOADING_RESOURCE: "Loading reference",
    NavState.LOADING_OWNER_MODULES: "Loading modules",
    NavState.LOADING_COMMITS: "Loading commits",
    NavState.LOADING_COMMIT_CONTENTS: "Loading commit file contents",
}

EMPTY_MODULES_TEXT = "No modules found for owner; use s to search for another owner"
EMPTY_COMMITS_TEXT = "No commits found for module"
EMPTY_FILES_TEXT = "No files found for commit"


class Renderer:
    """Builds frames for a ``NavigationMachine`` and writes them to a file descriptor."""

    def __init__(
        self,
        config: NavigatorConfig,
        *,
        fd: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.theme = config.theme
        self.fd = fd
        self.clock = clock if clock is not None else (lambda: datetime.now(timezone.utc))
        self.spinner_frame = 0
        self._highlight_key: tuple[str, str, str] | None = None
        self._highlight_lines: list[str] = []

    def render(self, machine: NavigationMachine) -> None:
        frame = self.build_frame(machine)
        fd = self.fd if self.fd is not None else sys.stdout.fileno()
        os.write(fd, frame.encode("utf-8", errors="replace"))
        if machine.state.is_loading:
            self.spinner_frame = (self.spinner_frame + 1) % len(SPINNER_FRAMES)

    def build_frame(self, machine: NavigationMachine) -> str:
        width = machine.width
        help_rows = help_lines(machine, self.theme)
        body_rows = max(1, machine.content_rows - (len(help_rows) - 1))

        lines = self._body(machine, body_rows)
        body_height = 2 + body_rows
        lines = lines[:body_height]
        while len(lines) < body_height:
            lines.append("")
        lines.extend(help_rows)
        lines.append(self._status_line(machine))

        out = ["\033[H\033[J"]
        out.append("\r\n".join(clip_ansi_line(line, width) for line in lines[: machine.height]))
        return "".join(out)

    # -- sections ----------------------------------------------------------

    def _body(self, machine: NavigationMachine, rows: int) -> list[str]:
        """Header, a blank row, then up to ``rows`` content rows."""
        theme = self.theme
        state = machine.state
        if state is NavState.ERRORED:
            return [f"{theme.error}error: {machine.error}{theme.reset}", ""]
        if state is NavState.NAVIGATING:
            return self._prompt(machine)
        if state.is_loading:
            frame = SPINNER_FRAMES[self.spinner_frame % len(SPINNER_FRAMES)]
            return [f"{theme.spinner}{frame}{theme.reset} {LOADING_TEXT[state]}...", ""]

        ctx = machine.context
        full_name = f"{ctx.owner}/{ctx.module}"
        if state is NavState.BROWSING_MODULES:
            header = f"Modules (Owner: {ctx.owner})"
            now = self.clock()
            rows_text = [module_row(m, machine.time_view, now) for m in machine.modules]
            content = self._table(MODULE_COLUMNS, rows_text, machine.module_index, rows, EMPTY_MODULES_TEXT)
        elif state is NavState.BROWSING_COMMITS:
            header = f"Commits (Module: {full_name})"
            now = self.clock()
            rows_text = [commit_row(c, machine.time_view, now) for c in machine.commits]
            content = self._table(COMMIT_COLUMNS, rows_text, machine.commit_index, rows, EMPTY_COMMITS_TEXT)
        else:
            header = f"Commit {ctx.commit_id} (Module: {full_name})"
            content = self._contents(machine, rows)
        return [f"{theme.header}{header}{theme.reset}", "", *content]

    def _prompt(self, machine: NavigationMachine) -> list[str]:
        theme = self.theme
        lines = [
            f"{theme.prompt}{PROMPT_TITLE}{theme.reset}",
            "",
            f"{theme.prompt}>{theme.reset} {machine.input_text}{CURSOR}",
            f"{theme.help_dim}owner or {LOCATOR_FORM} on {machine.context.remote}{theme.reset}",
        ]
        if machine.prompt_message:
            lines.append("")
            lines.append(f"{theme.prompt_error}{machine.prompt_message}{theme.reset}")
        return lines

    def _table(
        self,
        columns: tuple[Column, ...],
        rows: list[tuple[str, ...]],
        selected: int,
        max_rows: int,
        empty_text: str,
    ) -> list[str]:
        theme = self.theme
        if not rows:
            return [empty_text]
        rule = f"{theme.table_rule}{'─' * table_width(columns)}{theme.reset}"
        lines = [f"{theme.table_heading}{format_heading(columns)}{theme.reset}", rule]
        visible = max(1, max_rows - len(lines))
        start = window_start(selected, len(rows), visible)
        for idx in range(start, min(len(rows), start + visible)):
            line = format_row(columns, rows[idx])
            if idx == selected:
                line = self._selected(line)
            lines.append(line)
        return lines

    def _selected(self, line: str) -> str:
        sgr = self.theme.table_selected or REVERSE_VIDEO
        return selected_with_ansi(line, sgr, "\033[0m")

    def _contents(self, machine: NavigationMachine, rows: int) -> list[str]:
        theme = self.theme
        files_rows = [file_row(f) for f in machine.files]
        left = self._table(FILE_COLUMNS, files_rows, machine.file_index, rows, EMPTY_FILES_TEXT)
        selected = machine.selected_file
        if selected is None:
            return left

        left_width = table_width(FILE_COLUMNS)
        right_width = machine.width - left_width - 3
        if right_width < 10:
            return left

        focused = machine.state is NavState.BROWSING_COMMIT_FILE
        border_color = theme.viewport_border if focused else theme.help_dim
        border = f"{border_color}│{theme.reset}" if focused else f"{border_color}┊{theme.reset}"
        source_lines = self._highlighted(machine.context.commit_id, selected.path, selected.text)
        window = source_lines[machine.file_scroll : machine.file_scroll + rows]

        out: list[str] = []
        for row in range(max(len(left), len(window))):
            left_text = left[row] if row < len(left) else ""
            right_text = window[row] if row < len(window) else ""
            if right_text:
                right_text = clip_ansi_line(right_text, right_width) + theme.reset
            out.append(f"{pad_ansi_line(left_text, left_width)} {border} {right_text}")
        return out

    def _highlighted(self, commit_id: str, path: str, text: str) -> list[str]:
        key = (commit_id, path, self.config.style)
        if key != self._highlight_key:
            self._highlight_lines = highlight_source(
                text,
                path,
                self.config.style,
                color=not self.config.no_color,
            )
            self._highlight_key = key
        return self._highlight_lines

    def _status_line(self, machine: NavigationMachine) -> str:
        theme = self.theme
        if not machine.status_message:
            return ""
        text = f" {machine.status_message} "
        padding = " " * max(0, machine.width - display_width(text))
        return f"{theme.status}{text}{padding}{theme.reset}"


__all__ = [
    "EMPTY_COMMITS_TEXT",
    "EMPTY_FILES_TEXT",
    "EMPTY_MODULES_TEXT",
    "LOADING_TEXT",
    "PROMPT_TITLE",
    "Renderer",
    "SPINNER_FRAMES",
]
