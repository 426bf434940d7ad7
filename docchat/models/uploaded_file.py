from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from docchat.db.session import Base

def _utcnow():
    return datetime.now(timezone.utc)

class UploadedFile(Base):
    __tablename__ = "uploaded_files"
    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    stored_name = Column(String(255), unique=True, nullable=False)
    original_name = Column(String(255), nullable=False)
    content_type = Column(String(120), nullable=False)
    size = Column(Integer, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)

    owner = relationship("User", back_populates="files")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "storedName": self.stored_name,
            "originalName": self.original_name,
            "contentType": self.content_type,
            "size": self.size,
            "uploadedAt": self.uploaded_at.isoformat() if self.uploaded_at else None,
        }
