import asyncio
import os
from functools import partial

import structlog
from dotenv import find_dotenv, load_dotenv

from usage_export.accounts import discover_accounts, require_accounts
from usage_export.cli import parse_args
from usage_export.errors import ConfigurationError
from usage_export.exporter import Exporter, format_summary
from usage_export.logging import setup_logging
from usage_export.metrics import ExportMetrics
from usage_export.provider.twilio import TwilioUsageSource

logger = structlog.get_logger()


def main(argv: "list[str] | None" = None) -> "None":
    # real environment variables win over .env entries
    load_dotenv(find_dotenv(usecwd=True))
    config = parse_args(argv)
    setup_logging(config.log_level, config.log_format)

    metrics = ExportMetrics()
    source_factory = partial(
        TwilioUsageSource.from_credential,
        base_url=config.api_base_url,
        page_size=config.page_size,
        timeout=config.request_timeout,
    )
    exporter = Exporter(config.output_dir, source_factory, metrics)
    exporter.ensure_output_dir()

    try:
        accounts = require_accounts(
            discover_accounts(os.environ, config.env_prefix),
            config.env_prefix,
        )
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc

    logger.info("accounts_discovered", count=len(accounts))
    outcomes = asyncio.run(exporter.run(accounts))

    if config.metrics_textfile is not None:
        metrics.write_textfile(config.metrics_textfile)
        logger.info("metrics_written", path=str(config.metrics_textfile))

    print("\nSummary of processing:")
    for line in format_summary(outcomes):
        print(line)


if __name__ == "__main__":
    main()
