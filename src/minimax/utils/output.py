"""Output formatting for CLI commands (table to stderr, JSON/CSV to stdout)."""

from __future__ import annotations

import csv
import json
import sys
from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

console = Console(stderr=True)

Rows = list[dict[str, Any]] | dict[str, Any]


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def to_rows(items: Iterable[BaseModel] | BaseModel) -> Rows:
    """Dump API models to plain dicts, dropping unset fields."""
    if isinstance(items, BaseModel):
        return items.model_dump(mode="json", exclude_none=True)
    return [item.model_dump(mode="json", exclude_none=True) for item in items]


def print_output(
    data: Rows,
    fmt: OutputFormat = OutputFormat.TABLE,
    columns: list[str] | None = None,
    title: str | None = None,
) -> None:
    """Print data in the requested format.

    Args:
        data: A dict or a list of dicts.
        fmt: table, json or csv.
        columns: Columns to show in table/csv mode. None = all keys of the first row.
        title: Optional table title.
    """
    if fmt == OutputFormat.JSON:
        print_json(data)
    elif fmt == OutputFormat.CSV:
        print_csv(data, columns)
    else:
        print_table(data, columns, title)


def print_json(data: Any) -> None:
    json.dump(data, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


def print_table(data: Rows, columns: list[str] | None = None, title: str | None = None) -> None:
    if isinstance(data, dict):
        data = [data]

    if not data:
        console.print("[dim]No results.[/dim]")
        return

    if columns is None:
        columns = list(data[0].keys())

    table = Table(title=title, show_lines=False)
    for col in columns:
        table.add_column(col, overflow="fold")
    for row in data:
        table.add_row(*[str(row.get(col, "")) for col in columns])

    console.print(table)


def print_csv(data: Rows, columns: list[str] | None = None) -> None:
    if isinstance(data, dict):
        data = [data]
    if not data:
        return

    if columns is None:
        columns = list(data[0].keys())

    writer = csv.DictWriter(sys.stdout, fieldnames=columns, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in data:
        writer.writerow({k: row.get(k, "") for k in columns})
