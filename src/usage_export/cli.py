import argparse
import os
from pathlib import Path
from typing import Mapping

from usage_export.config import Config
from usage_export.logging import LOG_FORMATS


def parse_args(
    argv: "list[str] | None" = None,
    environ: "Mapping[str, str] | None" = None,
) -> "Config":
    config = Config.from_env(os.environ if environ is None else environ)

    parser = argparse.ArgumentParser(
        prog="usage-export",
        description="Export Twilio usage records to per-account CSV files",
    )
    parser.add_argument(
        "--output.dir",
        dest="output_dir",
        type=Path,
        default=config.output_dir,
        help=f"Directory for the CSV files (default: {config.output_dir})",
    )
    parser.add_argument(
        "--env.prefix",
        dest="env_prefix",
        default=config.env_prefix,
        help=(
            "Prefix of the <PREFIX>_ACCOUNT_SID_<n>/<PREFIX>_AUTH_TOKEN_<n> "
            f"variables (default: {config.env_prefix})"
        ),
    )
    parser.add_argument(
        "--api.base-url",
        dest="api_base_url",
        default=config.api_base_url,
        help=f"Usage API base URL (default: {config.api_base_url})",
    )
    parser.add_argument(
        "--api.page-size",
        dest="page_size",
        type=int,
        default=config.page_size,
        help=f"Records requested per page (default: {config.page_size})",
    )
    parser.add_argument(
        "--api.timeout",
        dest="request_timeout",
        type=float,
        default=config.request_timeout,
        help=f"HTTP timeout in seconds (default: {config.request_timeout:g})",
    )
    parser.add_argument(
        "--metrics.textfile",
        dest="metrics_textfile",
        type=Path,
        default=None,
        help="Write export metrics to this file in Prometheus text format",
    )
    parser.add_argument(
        "--log.level",
        dest="log_level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Log level (default: info)",
    )
    parser.add_argument(
        "--log.format",
        dest="log_format",
        default="console",
        choices=list(LOG_FORMATS),
        help="Log output format (default: console)",
    )

    args = parser.parse_args(argv)
    config.output_dir = args.output_dir
    config.env_prefix = args.env_prefix
    config.api_base_url = args.api_base_url
    config.page_size = args.page_size
    config.request_timeout = args.request_timeout
    config.metrics_textfile = args.metrics_textfile
    config.log_level = args.log_level
    config.log_format = args.log_format
    return config
