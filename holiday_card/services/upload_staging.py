"""
Upload staging.

Writes an uploaded file into the upload directory for the duration of a
single request and removes it on every exit path.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


def _staged_filename(suffix: str) -> str:
    timestamp = int(time.time() * 1000)
    return f"upload_{timestamp}_{uuid.uuid4().hex[:8]}{suffix}"


@contextmanager
def staged_upload(data: bytes, upload_dir: Path, suffix: str = ".jpg") -> Iterator[Path]:
    """
    Stage upload bytes on disk.

    Args:
        data: Raw uploaded bytes
        upload_dir: Directory for staged files (created if missing)
        suffix: File extension for the staged file

    Yields:
        Path of the staged file; it is deleted when the block exits
    """
    upload_dir = Path(upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / _staged_filename(suffix)
    try:
        path.write_bytes(data)
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"⚠️ Failed to remove staged upload {path}: {e}")
