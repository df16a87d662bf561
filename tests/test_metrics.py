from pathlib import Path

from prometheus_client import CollectorRegistry

from usage_export.metrics import ExportMetrics


class TestExportMetrics:
    def test_metric_families_are_created(
        self,
        registry: "CollectorRegistry",
    ) -> "None":
        ExportMetrics(registry=registry)
        # prometheus_client strips _total suffix from Counter family names
        metric_names = [m.name for m in registry.collect()]
        assert "usage_export_records" in metric_names
        assert "usage_export_months" in metric_names
        assert "usage_export_errors" in metric_names
        assert "usage_export_duration_seconds" in metric_names
        assert "usage_export_last_success_timestamp_seconds" in metric_names

    def test_add_batch_counts_months_and_records(
        self,
        registry: "CollectorRegistry",
    ) -> "None":
        metrics = ExportMetrics(registry=registry)
        metrics.add_batch("AC123", 4)
        metrics.add_batch("AC123", 1)

        assert (
            registry.get_sample_value("usage_export_records_total", {"account": "AC123"})
            == 5.0
        )
        assert (
            registry.get_sample_value("usage_export_months_total", {"account": "AC123"})
            == 2.0
        )

    def test_error_duration_and_success(
        self,
        registry: "CollectorRegistry",
    ) -> "None":
        metrics = ExportMetrics(registry=registry)
        metrics.inc_error("AC123")
        metrics.observe_duration("AC123", 0.5)
        metrics.set_last_success("AC456", 1000.0)

        assert (
            registry.get_sample_value("usage_export_errors_total", {"account": "AC123"})
            == 1.0
        )
        assert (
            registry.get_sample_value(
                "usage_export_duration_seconds_count", {"account": "AC123"}
            )
            == 1.0
        )
        assert (
            registry.get_sample_value(
                "usage_export_last_success_timestamp_seconds", {"account": "AC456"}
            )
            == 1000.0
        )

    def test_default_registry_is_private(self) -> "None":
        # two instances must not collide on metric names
        first = ExportMetrics()
        second = ExportMetrics()
        assert first.registry is not second.registry

    def test_write_textfile(
        self,
        tmp_path: "Path",
        registry: "CollectorRegistry",
    ) -> "None":
        metrics = ExportMetrics(registry=registry)
        metrics.add_batch("AC123", 3)
        path = tmp_path / "usage_export.prom"

        metrics.write_textfile(path)

        assert 'usage_export_records_total{account="AC123"} 3.0' in path.read_text()
