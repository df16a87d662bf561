from typing import Callable

import pytest
from prometheus_client import CollectorRegistry

from usage_export.models import UsageRecord


@pytest.fixture()
def registry() -> "CollectorRegistry":
    """
    fresh Prometheus registry to avoid cross-test state.
    """
    return CollectorRegistry()


@pytest.fixture()
def make_record() -> "Callable[..., UsageRecord]":
    """
    builds a usage record with sensible defaults; only the start
    date usually matters.
    """

    def _make(
        start_date: "str",
        account_sid: "str" = "AC123",
        category: "str" = "sms",
        end_date: "str | None" = None,
        count: "str" = "1",
        price: "str" = "0.0079",
    ) -> "UsageRecord":
        return UsageRecord(
            account_sid=account_sid,
            category=category,
            description="SMS Messages",
            start_date=start_date,
            end_date=end_date or start_date,
            count=count,
            count_unit="messages",
            usage=count,
            usage_unit="messages",
            price=price,
            price_unit="usd",
        )

    return _make
