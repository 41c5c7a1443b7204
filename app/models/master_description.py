"""Master description catalog and upload ledger models."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Float
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class UploadMetadata(Base):
    """Ledger entry for one bulk upload of master descriptions."""
    __tablename__ = "upload_metadata"

    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String(255), nullable=True, index=True)
    upload_date = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    total_received = Column(Integer, default=0, nullable=False)
    record_count = Column(Integer, default=0, nullable=False)
    uploaded_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    uploaded_by_email = Column(String(100), nullable=True)

    # Relationships
    records = relationship("MasterDescription", back_populates="upload")
    uploaded_by = relationship("User")


class MasterDescription(Base):
    """Catalog entry for a part number.

    part_no is not unique: repeated uploads add rows. Rows from before the
    ledger existed have no file_id and are linked by upload_batch only.
    """
    __tablename__ = "master_descriptions"

    id = Column(Integer, primary_key=True, index=True)
    part_no = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    ndp = Column(Float, default=0, nullable=False)
    mrp = Column(Float, default=0, nullable=False)
    upload_batch = Column(String(255), nullable=True, index=True)
    file_id = Column(Integer, ForeignKey("upload_metadata.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    upload = relationship("UploadMetadata", back_populates="records")
