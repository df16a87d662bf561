from datetime import date, datetime, timezone
from decimal import Decimal
from email.utils import parsedate_to_datetime
from typing import Any, AsyncIterator

import httpx
import structlog

from usage_export.errors import TransportError
from usage_export.models import AccountCredential, UsageRecord

logger = structlog.get_logger()

TWILIO_BASE_URL = "https://api.twilio.com"
MONTHLY_RECORDS_PATH = "/2010-04-01/Accounts/{account_sid}/Usage/Records/Monthly.json"

# Twilio caps PageSize at 1000
DEFAULT_PAGE_SIZE = 1000


def normalize_date(value: "Any") -> "str":
    """
    normalizes an API date to YYYY-MM-DD. Accepts plain dates,
    ISO 8601 strings and RFC 2822 strings; timezone-aware values
    are converted to UTC first.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return value.isoformat()
    else:
        text = str(value).strip()
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            parsed = parsedate_to_datetime(text)

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def _parse_record(item: "dict[str, Any]") -> "UsageRecord":
    return UsageRecord(
        account_sid=item.get("account_sid", ""),
        category=item.get("category", ""),
        description=item.get("description", ""),
        start_date=normalize_date(item["start_date"]),
        end_date=normalize_date(item["end_date"]),
        count=item.get("count"),
        count_unit=item.get("count_unit"),
        usage=item.get("usage"),
        usage_unit=item.get("usage_unit"),
        price=item.get("price"),
        price_unit=item.get("price_unit"),
    )


def _error_message(resp: "httpx.Response") -> "str":
    """
    prefers the message from Twilio's JSON error body, falling back
    to the HTTP status line.
    """
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("message"):
        return f"HTTP {resp.status_code}: {body['message']}"
    return f"HTTP {resp.status_code}: {resp.reason_phrase}"


class TwilioUsageSource:
    """
    TwilioUsageSource implements the UsageSource protocol for the
    Twilio REST API. It walks the monthly usage records collection
    page by page, following next_page_uri until the API stops
    returning one.
    """

    def __init__(
        self,
        account_sid: "str",
        auth_token: "str",
        base_url: "str" = TWILIO_BASE_URL,
        page_size: "int" = DEFAULT_PAGE_SIZE,
        timeout: "float" = 30.0,
    ) -> "None":
        self._account_sid = account_sid
        self._base_url = base_url.rstrip("/")
        self._page_size = page_size
        self._client: "httpx.AsyncClient" = httpx.AsyncClient(
            base_url=self._base_url,
            auth=(account_sid, auth_token),
            timeout=timeout,
        )

    @classmethod
    def from_credential(
        cls,
        account: "AccountCredential",
        **kwargs: "Any",
    ) -> "TwilioUsageSource":
        return cls(account.account_sid, account.auth_token, **kwargs)

    async def close(self) -> "None":
        """
        closes the underlying HTTP client.
        """
        await self._client.aclose()

    async def iter_monthly_records(self) -> "AsyncIterator[UsageRecord]":
        """
        yields usage records one at a time, fetching the next page
        only once the current one has been consumed.
        """
        url: "str | None" = MONTHLY_RECORDS_PATH.format(account_sid=self._account_sid)
        params: "dict[str, int] | None" = {"PageSize": self._page_size}
        page = 0

        # next_page_uri already carries the paging params
        while url:
            data = await self._fetch_page(url, params)
            page += 1
            items = data.get("usage_records") or []
            logger.debug(
                "twilio_page_fetched",
                account=self._account_sid,
                page=page,
                record_count=len(items),
            )

            for item in items:
                yield _parse_record(item)

            url = data.get("next_page_uri")
            params = None

    async def _fetch_page(
        self,
        url: "str",
        params: "dict[str, int] | None",
    ) -> "dict[str, Any]":
        try:
            resp = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc

        if resp.is_error:
            raise TransportError(_error_message(resp))

        try:
            # JSON numbers stay exact as Decimal
            return resp.json(parse_float=Decimal)
        except ValueError as exc:
            raise TransportError(f"Invalid JSON in usage response: {exc}") from exc
