import os
import aiofiles
from pathlib import Path
from typing import Optional
from fastapi import UploadFile
from imagedb.settings import settings
import logging

log = logging.getLogger(__name__)

# -------------------------
# Local Disk Storage Service
# -------------------------
class DiskStorageService:
    def __init__(self, root: Optional[str] = None, chunk_size: Optional[int] = None):
        self.root = Path(root or settings.storage_dir).resolve()
        self.chunk_size = chunk_size or settings.upload_chunk_size
        log.info("Initialized disk storage at %s", self.root)

        # Ensure directory exists at initialization
        self.ensure_directory()

    def ensure_directory(self):
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        return self.root / name

    async def save(self, upload: UploadFile, name: str) -> int:
        """Streams the upload to disk chunk by chunk, returns bytes written."""
        target = self.path_for(name)
        written = 0
        try:
            async with aiofiles.open(target, "wb") as out:
                while True:
                    chunk = await upload.read(self.chunk_size)
                    if not chunk:
                        break
                    await out.write(chunk)
                    written += len(chunk)
                    log.debug("Uploading file [%s] got %d bytes", upload.filename, written)
        except BaseException:
            # never leave a truncated file behind the static mount
            target.unlink(missing_ok=True)
            log.warning("Removed partial upload %s after %d bytes", target, written)
            raise
        log.info("Saved %s (%d bytes) to %s", upload.filename, written, target)
        return written

    def delete(self, name: str):
        os.remove(self.path_for(name))
        log.debug("Deleted %s", name)

    def close(self):
        log.info("Closed disk storage")
