"""Tests for report rendering."""

import json

import pytest
from promusage.usage.registry import MetricRegistry
from promusage.usage.report import (
    OutputFormat,
    format_metrics,
    format_provenance,
    format_tally,
    render_report,
)
from promusage.usage.results import Diagnostic, ScanResult, Tally


@pytest.fixture
def registry():
    registry = MetricRegistry()
    registry.add("dashboards/b", "zeta", ["b", "a"])
    registry.add("monitors/m", "alpha", [])
    registry.add("slos/s", "zeta", ["c"])
    return registry


@pytest.fixture
def result():
    result = ScanResult(tally=Tally(skipped=1, succeeded=3, failed=1))
    result.diagnostics.append(
        Diagnostic(
            location="dashboards/b",
            source="Dashboard 'b', Panel '2'",
            error="unexpected token",
            original="sum(",
            normalized="sum(",
        )
    )
    return result


class TestTextReports:
    """Tests for the line oriented formats."""

    def test_metrics_sorted(self, registry):
        assert format_metrics(registry) == "alpha\nzeta a b c"

    def test_empty_registry(self):
        assert format_metrics(MetricRegistry()) == ""

    def test_provenance_in_observation_order(self, registry):
        assert format_provenance(registry) == (
            "dashboards/b zeta b a\nmonitors/m alpha\nslos/s zeta c"
        )

    def test_tally(self):
        assert format_tally(Tally(skipped=2, succeeded=10, failed=0)) == (
            "Skipped:    2\nSucceeded:  10\nFailed:     0"
        )


class TestRenderReport:
    """Tests for render_report."""

    def test_text(self, registry, result):
        assert render_report(registry, result) == format_metrics(registry)

    def test_text_provenance(self, registry, result):
        assert render_report(registry, result, "text", provenance=True) == (
            format_provenance(registry)
        )

    def test_json(self, registry, result):
        output = json.loads(render_report(registry, result, OutputFormat.JSON))

        assert output["metrics"] == {"alpha": [], "zeta": ["a", "b", "c"]}
        assert output["summary"] == {"skipped": 1, "succeeded": 3, "failed": 1}
        assert output["failures"][0]["source"] == "Dashboard 'b', Panel '2'"
        assert output["version"] == "1.0"
        assert "provenance" not in output

    def test_json_provenance(self, registry, result):
        output = json.loads(render_report(registry, result, "json", provenance=True))

        assert output["provenance"][0] == {
            "location": "dashboards/b",
            "metric": "zeta",
            "labels": ["b", "a"],
        }

    def test_unknown_format(self, registry, result):
        with pytest.raises(ValueError):
            render_report(registry, result, "yaml")
