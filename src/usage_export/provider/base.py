from typing import AsyncIterator, Callable, Protocol

from usage_export.models import AccountCredential, UsageRecord


class UsageSource(Protocol):
    """
    UsageSource stands as the common protocol for anything that
    can stream one account's usage records.

    Sources yield records lazily in the API's natural order and
    surface any failure as a single TransportError. Iteration is
    restartable only by calling iter_monthly_records() again.
    """

    def iter_monthly_records(self) -> "AsyncIterator[UsageRecord]": ...

    async def close(self) -> "None": ...


UsageSourceFactory = Callable[[AccountCredential], UsageSource]
