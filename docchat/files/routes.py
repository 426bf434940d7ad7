import logging
from fastapi import APIRouter, UploadFile, File, Depends
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from docchat.auth.deps import get_db, get_current_user, get_blob_store
from docchat.errors import NotFound, ValidationError
from docchat.files.blob_store import BlobStore, safe_extension
from docchat.files.registry import FileRegistry
from docchat.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["files"])

DOWNLOAD_PREFIX = "/uploads"

@router.post("")
async def upload_file(
    file: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    blobs: BlobStore = Depends(get_blob_store),
):
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")

    content_type = (file.content_type or "").split(";")[0].strip().lower()
    blobs.validate_type(content_type)
    data = await file.read(blobs.max_bytes + 1)
    blobs.validate_size(len(data))

    stored_name = await run_in_threadpool(blobs.save, data, safe_extension(file.filename))
    registry = FileRegistry(db)
    try:
        record = registry.register(user.id, stored_name, file.filename, content_type, len(data))
    except Exception:
        await run_in_threadpool(blobs.delete, stored_name)
        raise

    logger.info("file uploaded id=%s owner=%s", record.id, user.id)
    return {
        "success": True,
        "file": record.to_dict(),
        "downloadUrl": f"{DOWNLOAD_PREFIX}/{record.stored_name}",
    }

@router.get("")
def list_files(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    files = FileRegistry(db).list_by_owner(user.id)
    return {"success": True, "files": [f.to_dict() for f in files]}

@router.delete("/{file_id}")
async def delete_file(
    file_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    blobs: BlobStore = Depends(get_blob_store),
):
    registry = FileRegistry(db)
    record = registry.find_owned(file_id, user.id)
    if record is None:
        raise NotFound()

    # blob first: a crash in between leaves a row whose blob is gone, which
    # chat reports and a repeated delete clears
    await run_in_threadpool(blobs.delete, record.stored_name)
    if not registry.remove(record.id, user.id):
        raise NotFound()

    logger.info("file deleted id=%s owner=%s", file_id, user.id)
    return {"success": True}
