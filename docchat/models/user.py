
from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from docchat.db.session import Base

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    files = relationship("UploadedFile", back_populates="owner")
