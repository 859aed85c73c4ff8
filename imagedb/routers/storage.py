from fastapi import APIRouter, Depends, File, Query, UploadFile
from typing import Optional

from imagedb.storage.disk import DiskStorageService
from imagedb.dependencies.dependencies import get_disk_storage, require_user
from imagedb.storage_service.service import remove_file, store_upload
from imagedb.models import Envelope, ok

router = APIRouter(
    prefix="/image/storage",
    tags=["storage"],
    dependencies=[Depends(require_user)],
)

@router.post("", response_model=Envelope)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    disk: DiskStorageService = Depends(get_disk_storage),
):
    """Stores one uploaded file and returns the URL to record on the image document."""
    stored = await store_upload(disk, file)
    return ok(stored.model_dump(), msg="Uploaded")

@router.delete("", response_model=Envelope)
def delete_file(
    file: Optional[str] = Query(None),
    disk: DiskStorageService = Depends(get_disk_storage),
):
    filename = remove_file(disk, file)
    return ok({"filename": filename}, msg="Deleted")
