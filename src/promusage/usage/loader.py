"""
Backup directory loading.

A backup directory holds one JSON file per resource:

    BACKUP_DIR/
      dashboards/*.json
      monitors/*.json
      slos/*.json

Any failure to read or decode a file aborts the run.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

import structlog

from promusage.core.errors import DocumentLoadError
from promusage.usage.documents import Document, DocumentKind, decode_document

logger = structlog.get_logger()


def list_documents(directory: Path) -> List[Path]:
    """List the JSON files of one backup sub-directory, sorted by name."""
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        raise DocumentLoadError(
            f"Cannot read directory: {directory}", details={"error": str(e)}
        ) from e

    files = []
    for entry in entries:
        if entry.suffix != ".json" or not entry.is_file():
            logger.debug("document_ignored", path=str(entry))
            continue
        files.append(entry)
    return files


def load_document(
    path: Path, kind: DocumentKind, location: Optional[str] = None
) -> Document:
    """Read and decode a single document."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise DocumentLoadError(f"Cannot read {path}", details={"error": str(e)}) from e
    except ValueError as e:
        raise DocumentLoadError(f"Invalid JSON in {path}", details={"error": str(e)}) from e

    try:
        document = decode_document(kind, data, location)
    except DocumentLoadError as e:
        e.details.setdefault("path", str(path))
        raise

    logger.debug("document_loaded", path=str(path), kind=kind.value, location=document.location)
    return document


def load_backup(
    backup_dir: str | Path,
    locations: Optional[Dict[DocumentKind, str]] = None,
) -> List[Document]:
    """
    Load every document of a backup directory.

    Dashboards come first, then monitors, then SLOs.

    Args:
        backup_dir: Root of the backup
        locations: Location templates per document kind

    Raises:
        DocumentLoadError: If a sub-directory or file cannot be loaded
    """
    root = Path(backup_dir)
    locations = locations or {}
    documents: List[Document] = []

    for kind in DocumentKind:
        for path in list_documents(root / kind.value):
            documents.append(load_document(path, kind, locations.get(kind)))

    logger.info("backup_loaded", backup_dir=str(root), documents=len(documents))
    return documents
