"""Root test configuration."""

import json
import logging
from pathlib import Path

import pytest
import structlog


def quiet_logging():
    """Route structlog through stdlib logging at WARNING, as for the whole session."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    quiet_logging()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user and project config files out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for name in ("IGNORED_PANEL_TYPES", "WORKERS", "LOG_LEVEL", "LOG_JSON"):
        monkeypatch.delenv(f"PROMUSAGE_{name}", raising=False)


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def backup_dir(tmp_path):
    """A backup with one dashboard, two monitors and one SLO."""
    root = tmp_path / "backup"
    write_json(
        root / "dashboards" / "api.json",
        {
            "dashboard": {
                "uid": "api-overview",
                "templating": {
                    "list": [
                        {"name": "ns", "current": {"value": ["prod", "staging"]}, "query": ""},
                        {"name": "grp", "current": {"value": '"cluster"'}, "query": ""},
                    ]
                },
                "panels": [
                    {
                        "id": 1,
                        "type": "timeseries",
                        "targets": [
                            {"expr": 'sum(rate(http_requests_total{ns="$ns"}[5m])) by ($grp)'},
                            {"expr": ""},
                        ],
                    },
                    {"id": 2, "type": "text", "targets": [{"expr": "ignored_metric"}]},
                    {
                        "id": 3,
                        "type": "row",
                        "panels": [
                            {
                                "id": 4,
                                "type": "stat",
                                "targets": [{"expr": "sum(rate(foo[5m])"}],
                            }
                        ],
                    },
                ],
            }
        },
    )
    write_json(
        root / "monitors" / "m1.json",
        {"id": "m1", "expression": "xrate(errors_total{code=~\"5..\"}[$__rate_interval]) > 0"},
    )
    write_json(root / "monitors" / "m2.json", {"id": "m2", "expression": "  "})
    write_json(
        root / "slos" / "s1.json",
        {
            "id": "s1",
            "sliMetrics": [
                {"metricName": "http_requests_total", "filters": [{"key": "service"}]},
            ],
        },
    )
    (root / "slos" / "README.md").write_text("not a document")
    return root
