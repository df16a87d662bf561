import re
from typing import Mapping

from usage_export.errors import ConfigurationError
from usage_export.models import AccountCredential

DEFAULT_PREFIX = "TWILIO"


def discover_accounts(
    environ: "Mapping[str, str]",
    prefix: "str" = DEFAULT_PREFIX,
) -> "list[AccountCredential]":
    """
    scans the given mapping for <PREFIX>_ACCOUNT_SID_<suffix> keys
    and pairs each one with <PREFIX>_AUTH_TOKEN_<suffix>. Pairs
    where either value is empty are skipped. The order of the
    result follows the mapping's iteration order.
    """
    sid_pattern = re.compile(rf"{re.escape(prefix)}_ACCOUNT_SID_(\w+)", re.ASCII)
    accounts: "list[AccountCredential]" = []

    for key, account_sid in environ.items():
        match = sid_pattern.fullmatch(key)
        if match is None:
            continue

        suffix = match.group(1)
        auth_token = environ.get(f"{prefix}_AUTH_TOKEN_{suffix}", "")
        if not account_sid or not auth_token:
            continue

        accounts.append(
            AccountCredential(
                account_sid=account_sid,
                auth_token=auth_token,
                suffix=suffix,
            )
        )

    return accounts


def require_accounts(
    accounts: "list[AccountCredential]",
    prefix: "str" = DEFAULT_PREFIX,
) -> "list[AccountCredential]":
    if not accounts:
        raise ConfigurationError(
            f"No accounts found. Set {prefix}_ACCOUNT_SID_<n> and "
            f"{prefix}_AUTH_TOKEN_<n> environment variables."
        )
    return accounts
