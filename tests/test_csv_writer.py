import csv
from pathlib import Path
from typing import Callable

import pytest

from usage_export.csv_writer import COLUMNS, UsageCsvWriter, output_path_for
from usage_export.models import UsageRecord

HEADER = (
    "Account SID,Category,Description,Start Date,End Date,"
    "Count,Count Unit,Usage,Usage Unit,Price,Price Unit"
)


def _read_rows(path: "Path") -> "list[list[str]]":
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


class TestUsageCsvWriter:
    @pytest.mark.asyncio
    async def test_create_writes_header_only(self, tmp_path: "Path") -> "None":
        writer = UsageCsvWriter(tmp_path / "AC123.csv")
        await writer.create()

        assert (tmp_path / "AC123.csv").read_text(encoding="utf-8") == HEADER + "\n"

    @pytest.mark.asyncio
    async def test_appends_rows_in_column_order(
        self,
        tmp_path: "Path",
        make_record: "Callable[..., UsageRecord]",
    ) -> "None":
        writer = UsageCsvWriter(tmp_path / "AC123.csv")
        await writer.create()
        written = await writer.append(
            [make_record("2024-01-15", end_date="2024-01-31", count="12")]
        )

        assert written == 1
        rows = _read_rows(writer.path)
        assert rows[1] == [
            "AC123",
            "sms",
            "SMS Messages",
            "2024-01-15",
            "2024-01-31",
            "12",
            "messages",
            "12",
            "messages",
            "0.0079",
            "usd",
        ]

    @pytest.mark.asyncio
    async def test_batches_accumulate_in_order(
        self,
        tmp_path: "Path",
        make_record: "Callable[..., UsageRecord]",
    ) -> "None":
        writer = UsageCsvWriter(tmp_path / "AC123.csv")
        await writer.create()
        await writer.append([make_record("2024-01-01"), make_record("2024-01-02")])
        await writer.append([make_record("2024-02-01")])

        rows = _read_rows(writer.path)
        assert [row[3] for row in rows[1:]] == [
            "2024-01-01",
            "2024-01-02",
            "2024-02-01",
        ]

    @pytest.mark.asyncio
    async def test_rerun_truncates_previous_file(
        self,
        tmp_path: "Path",
        make_record: "Callable[..., UsageRecord]",
    ) -> "None":
        path = tmp_path / "AC123.csv"
        first = UsageCsvWriter(path)
        await first.create()
        await first.append([make_record("2023-01-01"), make_record("2023-01-02")])

        second = UsageCsvWriter(path)
        await second.create()
        await second.append([make_record("2024-06-01")])

        rows = _read_rows(path)
        assert rows[0] == [title for _, title in COLUMNS]
        assert [row[3] for row in rows[1:]] == ["2024-06-01"]

    @pytest.mark.asyncio
    async def test_none_fields_are_written_empty(
        self,
        tmp_path: "Path",
        make_record: "Callable[..., UsageRecord]",
    ) -> "None":
        record = make_record("2024-01-01")
        record = UsageRecord(
            **{**{attr: getattr(record, attr) for attr, _ in COLUMNS}, "price": None}
        )
        writer = UsageCsvWriter(tmp_path / "AC123.csv")
        await writer.create()
        await writer.append([record])

        assert _read_rows(writer.path)[1][9] == ""

    @pytest.mark.asyncio
    async def test_append_before_create_raises(
        self,
        tmp_path: "Path",
        make_record: "Callable[..., UsageRecord]",
    ) -> "None":
        writer = UsageCsvWriter(tmp_path / "AC123.csv")
        with pytest.raises(RuntimeError):
            await writer.append([make_record("2024-01-01")])
        assert not writer.path.exists()


class TestOutputPathFor:
    def test_uses_account_sid_as_file_name(self, tmp_path: "Path") -> "None":
        assert output_path_for(tmp_path, "AC123") == tmp_path / "AC123.csv"
