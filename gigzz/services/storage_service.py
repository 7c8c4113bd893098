"""
File storage in local bucket directories under MEDIA_ROOT, served at MEDIA_URL.
"""
import logging
import secrets
import time
from pathlib import Path
from typing import Iterable, Optional

from fastapi import UploadFile

from gigzz.core import config
from gigzz.core.errors import ValidationFailedError

logger = logging.getLogger(__name__)

BUCKETS = ("avatars", "attachments", "news", "projects", "id_cards")

IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/svg+xml": "svg",
    "image/webp": "webp",
}
ATTACHMENT_TYPES = {
    **IMAGE_TYPES,
    "application/pdf": "pdf",
}
ID_CARD_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
}


def bucket_path(bucket: str) -> Path:
    if bucket not in BUCKETS:
        raise ValueError(f"Unknown storage bucket: {bucket}")
    path = Path(config.MEDIA_ROOT) / bucket
    path.mkdir(parents=True, exist_ok=True)
    return path


def public_url(bucket: str, name: str) -> str:
    return f"{config.MEDIA_URL.rstrip('/')}/{bucket}/{name}"


def save_upload(
    upload: UploadFile,
    bucket: str,
    owner_id: int,
    allowed_types: Optional[dict] = None,
    max_bytes: Optional[int] = None,
) -> str:
    """
    Store an uploaded file and return its public URL.

    Raises:
        ValidationFailedError: disallowed content type, empty or oversized file
    """
    allowed_types = allowed_types or IMAGE_TYPES
    max_bytes = max_bytes or config.MAX_UPLOAD_BYTES

    extension = allowed_types.get(upload.content_type or "")
    if extension is None:
        raise ValidationFailedError(
            "Invalid file type.",
            {"allowed": sorted(set(allowed_types.values()))},
        )

    data = upload.file.read(max_bytes + 1)
    if not data:
        raise ValidationFailedError("Uploaded file is empty")
    if len(data) > max_bytes:
        raise ValidationFailedError("File is too large.", {"max_bytes": max_bytes})

    name = f"{owner_id}-{int(time.time() * 1000)}-{secrets.token_hex(4)}.{extension}"
    (bucket_path(bucket) / name).write_bytes(data)

    logger.info(f"File stored: bucket={bucket}, name={name}, bytes={len(data)}")
    return public_url(bucket, name)


def save_uploads(uploads: Iterable[UploadFile], bucket: str, owner_id: int, allowed_types: dict) -> list:
    """Store several uploads. Nothing is kept if any one of them is rejected."""
    urls = []
    try:
        for upload in uploads:
            if upload and upload.filename:
                urls.append(save_upload(upload, bucket, owner_id, allowed_types))
    except ValidationFailedError:
        delete_uploads(urls)
        raise
    return urls


def delete_uploads(urls: Iterable[str]) -> None:
    """Remove stored files by the public URLs save_upload returned."""
    prefix = config.MEDIA_URL.rstrip("/") + "/"
    for url in urls:
        if not url.startswith(prefix):
            continue
        bucket, _, name = url[len(prefix):].partition("/")
        if bucket not in BUCKETS or not name or "/" in name:
            continue
        (Path(config.MEDIA_ROOT) / bucket / name).unlink(missing_ok=True)
        logger.info(f"File removed: bucket={bucket}, name={name}")
