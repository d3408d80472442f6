import os
import secrets
import time

from flask import current_app
from werkzeug.utils import secure_filename


class UploadError(Exception):
    """Raised when an uploaded file is refused before it reaches the disk."""

    def __init__(self, message, status_code=400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def stream_size(file) -> int:
    stream = file.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def stored_filename(original_name: str) -> str:
    """``file-<epoch millis>-<random suffix><ext>``, keeping the original extension."""
    ext = os.path.splitext(secure_filename(original_name or ""))[1].lower()
    return f"file-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"


def check_upload(file) -> int:
    """Validate type and size of an incoming file and return its size in bytes."""
    allowed = current_app.config["ALLOWED_UPLOAD_TYPES"]
    if file.mimetype not in allowed:
        raise UploadError("Invalid file type. Only PDF, JPG, and PNG files are allowed.")

    size = stream_size(file)
    limit = current_app.config["MAX_UPLOAD_SIZE"]
    if size > limit:
        raise UploadError(f"File too large. Maximum size is {limit} bytes.", 413)
    return size


def save_upload(file):
    """Check and write the file into the shared upload folder.

    Returns ``(path, size)``. Nothing is written when the check fails.
    """
    size = check_upload(file)

    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)
    path = os.path.join(folder, stored_filename(file.filename))
    file.save(path)
    current_app.logger.info(f"Stored upload '{file.filename}' as {path} ({size} bytes)")
    return path, size


def discard_upload(path):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
