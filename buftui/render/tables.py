"""Presentation adapter: collections to fixed-width table rows."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from ..registry.types import Commit, File, Module
from ..timefmt import TimeView, format_timestamp
from .ansi import fit_cell

# Registry IDs are dashless UUIDs.
ID_WIDTH = 32
TIME_WIDTH = 19
DIGEST_WIDTH = 9
COLUMN_GAP = "  "


@dataclass(frozen=True)
class Column:
    title: str
    width: int


MODULE_COLUMNS: tuple[Column, ...] = (
    Column("ID", ID_WIDTH),
    Column("Name", 20),
    Column("Create Time", TIME_WIDTH),
    Column("Visibility", 10),
    Column("State", 10),
)

COMMIT_COLUMNS: tuple[Column, ...] = (
    Column("ID", ID_WIDTH),
    Column("Create Time", TIME_WIDTH),
    Column("b5 Digest", DIGEST_WIDTH),
)

FILE_COLUMNS: tuple[Column, ...] = (Column("Path", 50),)


def module_row(module: Module, time_view: TimeView, now: datetime | None = None) -> tuple[str, ...]:
    return (
        module.id,
        module.name,
        format_timestamp(module.create_time, time_view, now),
        module.visibility_label,
        module.state_label,
    )


def commit_row(commit: Commit, time_view: TimeView, now: datetime | None = None) -> tuple[str, ...]:
    return (
        commit.id,
        format_timestamp(commit.create_time, time_view, now),
        commit.digest.hex[:DIGEST_WIDTH],
    )


def file_row(file: File) -> tuple[str, ...]:
    return (file.path,)


def format_row(columns: Sequence[Column], cells: Sequence[str]) -> str:
    return COLUMN_GAP.join(fit_cell(cell, column.width) for column, cell in zip(columns, cells))


def format_heading(columns: Sequence[Column]) -> str:
    return format_row(columns, [column.title for column in columns])


def table_width(columns: Sequence[Column]) -> int:
    return sum(column.width for column in columns) + len(COLUMN_GAP) * (len(columns) - 1)


def window_start(selected: int, total: int, rows: int) -> int:
    """First visible row index so ``selected`` stays inside a ``rows``-tall window."""
    if rows <= 0 or total <= rows:
        return 0
    start = selected - rows + 1 if selected >= rows else 0
    return max(0, min(start, total - rows))
