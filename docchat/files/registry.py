
from sqlalchemy.orm import Session
from docchat.models.uploaded_file import UploadedFile


class FileRegistry:
    """Upload metadata, always scoped to one owner."""

    def __init__(self, db: Session):
        self.db = db

    def _owned(self, owner_id: int):
        return self.db.query(UploadedFile).filter(UploadedFile.owner_id == owner_id)

    def register(self, owner_id: int, stored_name: str, original_name: str,
                 content_type: str, size: int) -> UploadedFile:
        record = UploadedFile(
            owner_id=owner_id,
            stored_name=stored_name,
            original_name=original_name,
            content_type=content_type,
            size=size,
        )
        self.db.add(record); self.db.commit(); self.db.refresh(record)
        return record

    def list_by_owner(self, owner_id: int) -> list[UploadedFile]:
        return (self._owned(owner_id)
                .order_by(UploadedFile.uploaded_at.desc(), UploadedFile.id.desc())
                .all())

    def most_recent(self, owner_id: int) -> UploadedFile | None:
        return (self._owned(owner_id)
                .order_by(UploadedFile.uploaded_at.desc(), UploadedFile.id.desc())
                .first())

    def find_owned(self, file_id: int, owner_id: int) -> UploadedFile | None:
        return self._owned(owner_id).filter(UploadedFile.id == file_id).first()

    def remove(self, file_id: int, owner_id: int) -> bool:
        deleted = self._owned(owner_id).filter(UploadedFile.id == file_id).delete(synchronize_session="fetch")
        self.db.commit()
        return deleted > 0
