import logging
import os
import shutil
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import UploadFile

from blogapi.core.config import Settings
from blogapi.core.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


@contextmanager
def staged_upload(upload: Optional[UploadFile], settings: Settings) -> Iterator[str]:
    """Write a multipart image to ``settings.upload_dir`` and yield its path.

    The file is removed when the block exits, whatever happened inside it.
    """
    if upload is None or not upload.filename:
        raise ValidationError("no image provided")
    if upload.content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError("Invalid image format")

    os.makedirs(settings.upload_dir, exist_ok=True)
    path = os.path.join(
        settings.upload_dir,
        f"{uuid.uuid4().hex}{ALLOWED_CONTENT_TYPES[upload.content_type]}",
    )
    try:
        upload.file.seek(0)
        with open(path, "wb") as fh:
            shutil.copyfileobj(upload.file, fh)
        limit = settings.max_upload_bytes
        if os.path.getsize(path) > limit:
            readable = f"{limit // (1024 * 1024)}MB" if limit >= 1024 * 1024 else f"{limit} bytes"
            raise ValidationError(f"File too large (max {readable})")
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to remove staged upload {path}: {e}")
