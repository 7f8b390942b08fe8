"""
Upload receiver.

Accepts one image per request, checks its MIME type and size before anything
touches the database, and stores it in ``config.UPLOAD_DIR`` under a random
name.
"""

import logging
import os
import uuid
from pathlib import Path

from werkzeug.utils import secure_filename

import config
from errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


def has_file(upload):
    # Browsers send an empty part with no filename when no file was picked
    return upload is not None and bool(getattr(upload, "filename", None))


def upload_dir():
    path = Path(config.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def validate_image(upload):
    """Return the upload's bytes, or raise ValidationError if it isn't an acceptable image."""
    if upload.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Only JPEG, PNG, or WebP allowed")

    data = upload.file.read(config.MAX_UPLOAD_BYTES + 1)
    if len(data) > config.MAX_UPLOAD_BYTES:
        raise ValidationError("File too large (max %d bytes)" % config.MAX_UPLOAD_BYTES)
    if not data:
        raise ValidationError("Uploaded file is empty")
    return data


def _stored_name(upload):
    ext = os.path.splitext(secure_filename(upload.filename or ""))[1].lower()
    if not ext:
        ext = ALLOWED_IMAGE_TYPES[upload.content_type]
    return uuid.uuid4().hex + ext


def save_image(upload, data=None):
    """Validate (unless ``data`` was already read) and store the upload; returns the stored name."""
    if data is None:
        data = validate_image(upload)
    name = _stored_name(upload)
    path = upload_dir() / name
    with open(path, "xb") as fh:
        fh.write(data)
    logger.info("Stored upload %s as %s (%d bytes)", upload.filename, name, len(data))
    return name


def discard(filename):
    """Remove a stored upload whose database row was never written."""
    if not filename:
        return
    try:
        (upload_dir() / filename).unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove orphaned upload %s: %s", filename, exc)


def resolve_upload(filename):
    """Path of a stored upload. Names that are not plain file names inside the upload dir are treated as missing."""
    if not filename or secure_filename(filename) != filename:
        raise NotFoundError("File not found")

    root = upload_dir().resolve()
    path = (root / filename).resolve()
    if path.parent != root or not path.is_file():
        raise NotFoundError("File not found")
    return path
