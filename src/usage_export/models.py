from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class AccountCredential:
    """
    AccountCredential is one configured account SID and auth
    token pair, discovered from the environment at startup.
    """

    account_sid: "str"
    auth_token: "str" = field(repr=False)
    # the "<suffix>" part of the env var pair that produced it
    suffix: "str" = ""


@dataclass(frozen=True, slots=True)
class UsageRecord:
    """
    UsageRecord represents a single monthly usage line item
    for an account. Every field except the dates is passed
    through as the API returned it.
    """

    account_sid: "str"
    category: "str"
    description: "str"
    # YYYY-MM-DD
    start_date: "str"
    # YYYY-MM-DD
    end_date: "str"
    count: "str | int | Decimal | None"
    count_unit: "str | None"
    usage: "str | int | Decimal | None"
    usage_unit: "str | None"
    price: "str | int | Decimal | None"
    price_unit: "str | None"

    @property
    def month_key(self) -> "tuple[int, int]":
        return (int(self.start_date[0:4]), int(self.start_date[5:7]))


@dataclass(frozen=True, slots=True)
class MonthBatch:
    """
    MonthBatch is a contiguous run of usage records that share
    the same (year, month) of their start date.
    """

    year: "int"
    month: "int"
    records: "tuple[UsageRecord, ...]"

    @property
    def label(self) -> "str":
        return f"{self.year:04d}-{self.month:02d}"

    def __len__(self) -> "int":
        return len(self.records)


@dataclass(frozen=True, slots=True)
class ExportOutcome:
    account_sid: "str"
    success: "bool"
    total_records: "int" = 0
    error: "str | None" = None
