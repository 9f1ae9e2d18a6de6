import logging
import secrets
import time
from pathlib import Path
from typing import Iterable, List

from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)


class ReportUploadError(Exception):
    """Raised when an evidence photo cannot be stored."""


def report_photo_name(event_id: int, filename: str) -> str:
    """Storage path for an evidence photo: ``events/<id>/reports/<ms>-<random>.<ext>``."""
    ext = Path(filename or "").suffix.lower().lstrip(".") or "jpg"
    stamp = int(time.time() * 1000)
    return f"events/{event_id}/reports/{stamp}-{secrets.token_hex(4)}.{ext}"


def store_report_photos(event, uploads: Iterable) -> List[str]:
    """Save each upload and return the public URLs in upload order."""
    urls: List[str] = []
    for upload in uploads:
        try:
            saved = default_storage.save(report_photo_name(event.id, upload.name), upload)
        except OSError as exc:
            logger.error("Image upload failed for %s: %s", upload.name, exc)
            raise ReportUploadError(f"Image upload failed for {upload.name}: {exc}") from exc
        urls.append(default_storage.url(saved))
        logger.info("Stored evidence photo %s for event %s", saved, event.id)
    return urls
