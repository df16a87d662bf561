import asyncio
import csv
from pathlib import Path
from typing import Iterable

from usage_export.models import UsageRecord

# (record attribute, column title) in output order
COLUMNS: "list[tuple[str, str]]" = [
    ("account_sid", "Account SID"),
    ("category", "Category"),
    ("description", "Description"),
    ("start_date", "Start Date"),
    ("end_date", "End Date"),
    ("count", "Count"),
    ("count_unit", "Count Unit"),
    ("usage", "Usage"),
    ("usage_unit", "Usage Unit"),
    ("price", "Price"),
    ("price_unit", "Price Unit"),
]


def output_path_for(output_dir: "Path", account_sid: "str") -> "Path":
    return output_dir / f"{account_sid}.csv"


def _to_row(record: "UsageRecord") -> "list[object]":
    return [getattr(record, attr) for attr, _ in COLUMNS]


class UsageCsvWriter:
    """
    UsageCsvWriter writes usage records to a single CSV file in two
    phases: create() truncates the file and writes the header, then
    append() adds rows for each batch in the order received.

    Each call opens and closes the file so rows already written stay
    on disk if a later batch fails.
    """

    def __init__(self, path: "Path") -> "None":
        self._path = path
        self._created = False

    @property
    def path(self) -> "Path":
        return self._path

    async def create(self) -> "None":
        await asyncio.to_thread(self._write, "w", [[title for _, title in COLUMNS]])
        self._created = True

    async def append(self, records: "Iterable[UsageRecord]") -> "int":
        """
        appends one row per record and returns how many were written.
        """
        if not self._created:
            raise RuntimeError(f"append() called before create() for {self._path}")

        rows = [_to_row(record) for record in records]
        if rows:
            await asyncio.to_thread(self._write, "a", rows)
        return len(rows)

    def _write(self, mode: "str", rows: "list[list[object]]") -> "None":
        with open(self._path, mode, newline="", encoding="utf-8") as f:
            csv.writer(f, lineterminator="\n").writerows(rows)
