import os
import uuid
from urllib.parse import quote
import logging
from typing import Optional
from fastapi import UploadFile

from imagedb.storage.disk import DiskStorageService
from imagedb.storage_service.models import StoredFile
from imagedb.exceptions import (
    BadRequestException,
    FileNotFoundException,
    FileStorageException,
    MissingUploadException,
)
from imagedb.settings import settings

log = logging.getLogger(__name__)

FILES_PREFIX = "/api/files/images"

def sanitize_filename(name: Optional[str]) -> str:
    """Reduces a client supplied name to its base name, rejecting empty and dot names."""
    base = os.path.basename((name or "").replace("\\", "/"))
    if base in ("", ".", ".."):
        raise BadRequestException(f"Invalid file name: {name!r}")
    return base

def file_id_key() -> str:
    """Generates a time-based unique file ID."""
    return str(uuid.uuid1())

def make_file_name(original: Optional[str], keep_original: bool = False) -> str:
    """Picks the on-disk name for an upload, preserving its extension."""
    if keep_original:
        return sanitize_filename(original)
    _, ext = os.path.splitext(os.path.basename(original or ""))
    return file_id_key() + ext

def public_url(filename: str) -> str:
    return f"{settings.public_host.rstrip('/')}{FILES_PREFIX}/{quote(filename)}"

async def store_upload(disk: DiskStorageService, upload: Optional[UploadFile]) -> StoredFile:
    """Streams an uploaded file into the storage directory."""
    if upload is None or not upload.filename:
        raise MissingUploadException()

    filename = make_file_name(upload.filename, keep_original=settings.keep_original_filename)
    try:
        size = await disk.save(upload, filename)
    except OSError as e:
        log.error(f"Disk save failed: {e}")
        raise FileStorageException(f"Failed to store file: {e}")
    finally:
        await upload.close()

    log.info("Uploading File [%s] Finished, saved as %s", upload.filename, filename)
    return StoredFile(url=public_url(filename), filename=filename, size=size)

def remove_file(disk: DiskStorageService, name: Optional[str]) -> str:
    """Deletes a stored file by base name."""
    filename = sanitize_filename(name)
    try:
        disk.delete(filename)
    except FileNotFoundError:
        raise FileNotFoundException(filename)
    except OSError as e:
        log.error(f"Disk delete failed: {e}")
        raise FileStorageException(f"Failed to delete file: {e}")
    log.info("Deleted File - %s", filename)
    return filename
