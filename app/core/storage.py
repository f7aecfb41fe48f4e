# app/core/storage.py

import logging
import os
import shutil
import time
import uuid

from fastapi import UploadFile

from app.core.config import settings

logger = logging.getLogger("app")

UPLOAD_URL_PREFIX = "/uploads"


def ensure_upload_dir() -> str:
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    return settings.UPLOAD_DIR


def save_upload(upload: UploadFile) -> str:
    """Write an uploaded file to the upload folder and return its public path.

    The bytes are never inspected; only the extension of the original
    filename is kept.
    """
    upload_dir = ensure_upload_dir()

    _, extension = os.path.splitext(upload.filename or "")
    filename = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{extension.lower()}"

    destination = os.path.join(upload_dir, filename)
    with open(destination, "wb") as buffer:
        shutil.copyfileobj(upload.file, buffer)

    logger.info(f"Stored upload {upload.filename!r} as {filename}")

    return f"{UPLOAD_URL_PREFIX}/{filename}"
