from pathlib import Path

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, write_to_textfile


class ExportMetrics:
    """
    ExportMetrics tracks per-account export results in its own
    registry, so a finished run can be dumped for node_exporter's
    textfile collector.
    """

    def __init__(self, registry: "CollectorRegistry | None" = None) -> "None":
        self.registry: "CollectorRegistry" = registry or CollectorRegistry()
        self._records: "Counter" = Counter(
            "usage_export_records_total",
            "Total usage records written per account",
            ["account"],
            registry=self.registry,
        )
        self._months: "Counter" = Counter(
            "usage_export_months_total",
            "Total month batches written per account",
            ["account"],
            registry=self.registry,
        )
        self._errors: "Counter" = Counter(
            "usage_export_errors_total",
            "Total failed account exports",
            ["account"],
            registry=self.registry,
        )
        self._duration: "Histogram" = Histogram(
            "usage_export_duration_seconds",
            "Duration of one account export",
            ["account"],
            registry=self.registry,
        )
        self._last_success: "Gauge" = Gauge(
            "usage_export_last_success_timestamp_seconds",
            "Unix timestamp of the last successful export per account",
            ["account"],
            registry=self.registry,
        )

    def add_batch(self, account: "str", record_count: "int") -> "None":
        self._months.labels(account=account).inc()
        self._records.labels(account=account).inc(record_count)

    def inc_error(self, account: "str") -> "None":
        self._errors.labels(account=account).inc()

    def observe_duration(self, account: "str", duration_seconds: "float") -> "None":
        self._duration.labels(account=account).observe(duration_seconds)

    def set_last_success(self, account: "str", timestamp: "float") -> "None":
        self._last_success.labels(account=account).set(timestamp)

    def write_textfile(self, path: "Path") -> "None":
        write_to_textfile(str(path), self.registry)
