"""Tests for backup directory loading."""

import pytest
from conftest import write_json
from promusage.core.errors import DocumentLoadError
from promusage.usage.documents import (
    DashboardDocument,
    DocumentKind,
    MonitorDocument,
    SLODocument,
)
from promusage.usage.loader import list_documents, load_backup, load_document


class TestListDocuments:
    """Tests for list_documents."""

    def test_sorted_json_only(self, tmp_path):
        write_json(tmp_path / "b.json", {})
        write_json(tmp_path / "a.json", {})
        (tmp_path / "notes.txt").write_text("x")
        (tmp_path / "nested.json").mkdir()

        assert [p.name for p in list_documents(tmp_path)] == ["a.json", "b.json"]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(DocumentLoadError) as exc_info:
            list_documents(tmp_path / "missing")

        assert "Cannot read directory" in exc_info.value.message


class TestLoadDocument:
    """Tests for load_document."""

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(DocumentLoadError) as exc_info:
            load_document(path, DocumentKind.MONITOR)

        assert "Invalid JSON" in exc_info.value.message

    def test_non_object_includes_path(self, tmp_path):
        path = write_json(tmp_path / "list.json", [1, 2])

        with pytest.raises(DocumentLoadError) as exc_info:
            load_document(path, DocumentKind.SLO)

        assert exc_info.value.details["path"] == str(path)

    def test_location_template(self, tmp_path):
        path = write_json(tmp_path / "m.json", {"id": "m7", "expression": "up"})

        document = load_document(path, DocumentKind.MONITOR, "https://monitors.example.com/{id}")

        assert document.location == "https://monitors.example.com/m7"


class TestLoadBackup:
    """Tests for load_backup."""

    def test_loads_all_kinds_in_order(self, backup_dir):
        documents = load_backup(backup_dir)

        assert [type(d) for d in documents] == [
            DashboardDocument,
            MonitorDocument,
            MonitorDocument,
            SLODocument,
        ]
        assert [d.location for d in documents] == [
            "dashboards/api-overview",
            "monitors/m1",
            "monitors/m2",
            "slos/s1",
        ]

    def test_custom_locations(self, backup_dir):
        documents = load_backup(backup_dir, {DocumentKind.SLO: "slo://{id}"})

        assert documents[-1].location == "slo://s1"
        assert documents[0].location == "dashboards/api-overview"

    def test_missing_subdirectory_is_fatal(self, backup_dir):
        for path in (backup_dir / "slos").iterdir():
            path.unlink()
        (backup_dir / "slos").rmdir()

        with pytest.raises(DocumentLoadError):
            load_backup(backup_dir)

    def test_malformed_file_is_fatal(self, backup_dir):
        (backup_dir / "monitors" / "m3.json").write_text("[")

        with pytest.raises(DocumentLoadError):
            load_backup(backup_dir)
