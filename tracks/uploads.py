# backend/tracks/uploads.py
"""
Placement of uploaded files on disk.

Each multipart field has its own whitelist of extensions. Files are written to
settings.UPLOAD_DIR as "<epoch ms>-<sanitized name>" and exposed under
settings.UPLOAD_URL_PREFIX by the static mount in main.py.
"""
from fastapi import UploadFile
from config import settings
from typing import Dict, Iterable, Optional
import logging
import os
import re
import time
import uuid

logger = logging.getLogger("tracks.uploads")

CHUNK_SIZE = 1024 * 1024

ALLOWED_EXTENSIONS = {
    "audio": {".mp3", ".wav", ".ogg", ".mpeg"},
    "cover": {".jpeg", ".jpg", ".png", ".gif"},
}

FIELD_LABELS = {
    "audio": "Only audio files are allowed (MP3, WAV, OGG)",
    "cover": "Only image files are allowed (JPEG, PNG, GIF)",
}


class UploadRejected(ValueError):
    """The uploaded file cannot be accepted (bad field, extension or size)."""


# ============================================================
# 🔹 Validation helpers
# ============================================================
def validate_extension(field: str, filename: str) -> str:
    """Returns the lowercased extension, or raises UploadRejected."""
    allowed = ALLOWED_EXTENSIONS.get(field)
    if allowed is None:
        raise UploadRejected(f"Unexpected file field: {field}")
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in allowed:
        logger.warning(f"⚠️ Rejected '{filename}' for field '{field}'")
        raise UploadRejected(FIELD_LABELS[field])
    return ext


def build_stored_filename(original: str, suffix: Optional[str] = None) -> str:
    """'<epoch ms>-<name>' with path parts and unsafe characters removed.

    A suffix goes right after the timestamp: '<epoch ms>-<suffix>-<name>'.
    """
    base = os.path.basename((original or "").replace("\\", "/"))
    name, ext = os.path.splitext(base)
    safe_name = re.sub(r"[^\w\s.-]", "", name).strip().replace(" ", "_") or "file"
    prefix = str(int(time.time() * 1000))
    if suffix:
        prefix = f"{prefix}-{suffix}"
    return f"{prefix}-{safe_name}{ext.lower()}"


def _create_unique(upload_dir: str, original: str):
    """Creates the target file exclusively. Returns (filename, path, handle)."""
    filename = build_stored_filename(original)
    file_path = os.path.join(upload_dir, filename)
    try:
        return filename, file_path, open(file_path, "xb")
    except FileExistsError:
        filename = build_stored_filename(original, uuid.uuid4().hex[:8])
        file_path = os.path.join(upload_dir, filename)
        return filename, file_path, open(file_path, "xb")


# ============================================================
# 💾 Save / remove
# ============================================================
def save_upload(
    field: str,
    upload: UploadFile,
    upload_dir: Optional[str] = None,
    max_size: Optional[int] = None,
) -> Dict[str, str]:
    """
    Validates and writes one uploaded file.
    Returns {"path": <filesystem path>, "url": <public URL>}.
    """
    upload_dir = upload_dir or settings.UPLOAD_DIR
    max_size = max_size or settings.MAX_UPLOAD_SIZE

    validate_extension(field, upload.filename)

    os.makedirs(upload_dir, exist_ok=True)
    filename, file_path, handle = _create_unique(upload_dir, upload.filename)

    written = 0
    try:
        with handle as out:
            while True:
                chunk = upload.file.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_size:
                    raise UploadRejected(
                        f"File '{upload.filename}' exceeds the {max_size / (1024 * 1024):g}MB limit"
                    )
                out.write(chunk)
    except BaseException:
        # partial files never outlive a failed write
        remove_files([file_path])
        raise

    logger.info(f"📁 Stored {field} file '{upload.filename}' as {filename} ({written} bytes)")
    return {
        "path": file_path,
        "url": f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{filename}",
    }


def remove_files(paths: Iterable[str]) -> None:
    """Best effort cleanup for files of a rejected request."""
    for path in paths:
        try:
            os.remove(path)
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.warning(f"⚠️ Could not remove {path}: {e}")
