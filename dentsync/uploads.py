"""
File attachments for DentSync.

Files are stored inline as data URLs. Each file read completes by
dispatching its own action, so several uploads to the same patient append
independently of each other.
"""

from __future__ import annotations

import base64
import logging
import mimetypes
from datetime import datetime
from pathlib import Path

from dentsync.models import Document, generate_id
from dentsync.state import AddDocument, Store, UpdateSettings

logger = logging.getLogger(__name__)

FALLBACK_MIME_TYPE = "application/octet-stream"


def guess_mime_type(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type or FALLBACK_MIME_TYPE


def read_data_url(path: Path) -> str:
    """Read a file into a base64 data URL."""
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{guess_mime_type(path)};base64,{encoded}"


def document_from_file(path: Path, uploaded_at: datetime | None = None) -> Document:
    """Build a Document record from a file on disk."""
    data_url = read_data_url(path)
    return Document(
        id=f"{generate_id()}-{path.name}",
        name=path.name,
        type=guess_mime_type(path),
        size=path.stat().st_size,
        url=data_url,
        uploaded_at=(uploaded_at or datetime.now()).isoformat(),
    )


def attach_documents(store: Store, patient_id: str, paths: list[Path]) -> list[Document]:
    """
    Attach files to a patient's record.

    Unreadable files are logged and skipped; the others are still attached.

    Returns:
        The documents that were attached
    """
    attached = []
    for path in paths:
        try:
            document = document_from_file(Path(path))
        except OSError:
            logger.exception("Error reading file %s", path)
            continue
        store.dispatch(AddDocument(patient_id=patient_id, document=document))
        attached.append(document)
    return attached


def set_clinic_logo(store: Store, path: Path) -> str:
    """Load an image file as the clinic logo. Returns the stored data URL."""
    data_url = read_data_url(Path(path))
    store.dispatch(UpdateSettings(clinic_logo=data_url))
    return data_url
