from typing import AsyncIterable, AsyncIterator

from usage_export.models import MonthBatch, UsageRecord


async def group_by_month(
    records: "AsyncIterable[UsageRecord]",
) -> "AsyncIterator[MonthBatch]":
    """
    partitions a record stream into contiguous runs sharing the same
    (year, month) of their start date. A batch is emitted as soon as
    a record with a different key arrives, and the last one when the
    stream ends.

    The stream is never sorted: an out-of-order source produces more
    than one batch for the same month. At most one month of records
    is held in memory.
    """
    current_key: "tuple[int, int] | None" = None
    pending: "list[UsageRecord]" = []

    async for record in records:
        key = record.month_key

        if current_key is None:
            current_key = key
        elif key != current_key:
            yield MonthBatch(current_key[0], current_key[1], tuple(pending))
            pending = []
            current_key = key

        pending.append(record)

    if pending and current_key is not None:
        yield MonthBatch(current_key[0], current_key[1], tuple(pending))
