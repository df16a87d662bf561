from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from usage_export.accounts import DEFAULT_PREFIX
from usage_export.provider.twilio import DEFAULT_PAGE_SIZE, TWILIO_BASE_URL


@dataclass
class Config:
    # where <account_sid>.csv files are written
    output_dir: "Path" = Path("local")
    # env var prefix for <PREFIX>_ACCOUNT_SID_<n> pairs
    env_prefix: "str" = DEFAULT_PREFIX
    api_base_url: "str" = TWILIO_BASE_URL
    page_size: "int" = DEFAULT_PAGE_SIZE
    # HTTP timeout in seconds
    request_timeout: "float" = 30.0
    # optional node_exporter textfile to dump metrics into
    metrics_textfile: "Path | None" = None
    log_level: "str" = "info"
    # "console" or "json"
    log_format: "str" = "console"

    @classmethod
    def from_env(cls, environ: "Mapping[str, str]") -> "Config":
        return cls(
            output_dir=Path(environ.get("USAGE_EXPORT_OUTPUT_DIR") or "local"),
            env_prefix=environ.get("USAGE_EXPORT_PREFIX") or DEFAULT_PREFIX,
            api_base_url=environ.get("TWILIO_API_BASE_URL") or TWILIO_BASE_URL,
        )
