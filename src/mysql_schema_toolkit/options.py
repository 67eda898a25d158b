"""
Per-statement configuration.

Each statement kind that takes options has exactly one immutable options
value with documented defaults. Generators never merge ad-hoc dictionaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .models import UniqueKey


@dataclass(frozen=True)
class CreateTableOptions:
    """
    Table modifiers for ``CREATE TABLE``.

    Attributes:
        engine: Storage engine, always emitted.
        comment: Table comment.
        charset: ``DEFAULT CHARSET``.
        collate: ``COLLATE``.
        initial_auto_increment: Seed for ``AUTO_INCREMENT``.
        row_format: ``ROW_FORMAT``.
        unique_keys: Composite unique keys emitted after the columns.
    """

    engine: str = "InnoDB"
    comment: str | None = None
    charset: str | None = None
    collate: str | None = None
    initial_auto_increment: int | None = None
    row_format: str | None = None
    unique_keys: tuple[UniqueKey, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DeleteOptions:
    limit: int | None = None


@dataclass(frozen=True)
class ShowIndexesOptions:
    database: str | None = None


@dataclass(frozen=True)
class InsertOptions:
    """
    Attributes:
        ignore_duplicates: Emit ``INSERT IGNORE``.
        on_duplicate: Fragment appended after ``ON DUPLICATE KEY``.
    """

    ignore_duplicates: bool = False
    on_duplicate: str | None = None


__all__ = [
    "CreateTableOptions",
    "DeleteOptions",
    "InsertOptions",
    "ShowIndexesOptions",
]
