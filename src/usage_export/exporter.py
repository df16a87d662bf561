import asyncio
import time
from pathlib import Path
from typing import AsyncIterator, Iterable, Iterator

import structlog

from usage_export.csv_writer import UsageCsvWriter, output_path_for
from usage_export.grouping import group_by_month
from usage_export.metrics import ExportMetrics
from usage_export.models import AccountCredential, ExportOutcome, UsageRecord
from usage_export.provider.base import UsageSource, UsageSourceFactory

logger = structlog.get_logger()

# characters of the account SID shown in the summary
_MASK_LENGTH = 10


class Exporter:
    """
    Exporter orchestrates one export pipeline per account: it streams
    the account's usage records, groups them by month and writes each
    month to the account's CSV file. Pipelines run concurrently and a
    failure in one is recorded as that account's outcome without
    affecting the others.
    """

    def __init__(
        self,
        output_dir: "Path",
        source_factory: "UsageSourceFactory",
        metrics: "ExportMetrics | None" = None,
    ) -> "None":
        self._output_dir = output_dir
        self._source_factory = source_factory
        self._metrics = metrics or ExportMetrics()

    def ensure_output_dir(self) -> "None":
        if not self._output_dir.exists():
            self._output_dir.mkdir(parents=True, exist_ok=True)
            logger.info("output_dir_created", path=str(self._output_dir))

    async def run(
        self,
        accounts: "list[AccountCredential]",
    ) -> "list[ExportOutcome]":
        """
        exports all accounts concurrently and returns one outcome
        per account, in the same order as the given accounts.
        """
        tasks = [self._export_with_outcome(account) for account in accounts]
        return list(await asyncio.gather(*tasks))

    async def _export_with_outcome(
        self,
        account: "AccountCredential",
    ) -> "ExportOutcome":
        sid = account.account_sid
        start = time.monotonic()

        try:
            total = await self.export_account(account)
        except Exception as exc:
            logger.exception("account_export_failed", account=sid)
            self._metrics.inc_error(sid)
            return ExportOutcome(
                account_sid=sid,
                success=False,
                error=str(exc) or type(exc).__name__,
            )
        finally:
            self._metrics.observe_duration(sid, time.monotonic() - start)

        self._metrics.set_last_success(sid, time.time())
        return ExportOutcome(account_sid=sid, success=True, total_records=total)

    async def export_account(self, account: "AccountCredential") -> "int":
        """
        runs the read, group and write pipeline for one account and
        returns the total number of records written. Rows written
        before a failure are left in place.
        """
        sid = account.account_sid
        writer = UsageCsvWriter(output_path_for(self._output_dir, sid))
        logger.info("account_export_start", account=sid, path=str(writer.path))

        source = self._source_factory(account)
        total = 0
        try:
            await writer.create()
            records = _announce_first(source, sid)

            async for batch in group_by_month(records):
                written = await writer.append(batch.records)
                total += written
                self._metrics.add_batch(sid, written)

                # single-record months are written but not announced
                if written > 1:
                    logger.info(
                        "month_written",
                        account=sid,
                        month=batch.label,
                        records=written,
                        msg=f"Wrote {written} records for {batch.label}",
                    )
        finally:
            await source.close()

        logger.info(
            "account_export_done",
            account=sid,
            total_records=total,
            path=str(writer.path),
        )
        return total


async def _announce_first(
    source: "UsageSource",
    account_sid: "str",
) -> "AsyncIterator[UsageRecord]":
    """
    passes records through, logging once when the first one arrives.
    """
    first = True
    async for record in source.iter_monthly_records():
        if first:
            logger.info("first_record_received", account=account_sid)
            first = False
        yield record


def mask_account_sid(account_sid: "str") -> "str":
    return f"{account_sid[:_MASK_LENGTH]}..."


def format_summary(outcomes: "Iterable[ExportOutcome]") -> "Iterator[str]":
    for outcome in outcomes:
        masked = mask_account_sid(outcome.account_sid)
        if outcome.success:
            yield f"✅ Account {masked}: {outcome.total_records} records"
        else:
            yield f"❌ Account {masked}: Failed - {outcome.error}"
