"""Master description bulk upload and the upload ledger.

An upload writes one ledger row, every catalog row and the final record
count in a single transaction. Deleting a ledger row removes its catalog
rows in the same transaction.
"""
import math
from typing import Any, List, Optional

import structlog
from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.errors import NotFound, StoreFailure
from app.models.master_description import MasterDescription, UploadMetadata
from app.models.user import User
from app.schemas.master_description import MasterEntry

logger = structlog.get_logger(__name__)


def coerce_number(value: Any) -> float:
    """Parse a price field; anything missing or non-numeric becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return number


def upload_master_descriptions(
    db: Session,
    entries: List[MasterEntry],
    filename: Optional[str],
    uploader: User,
) -> UploadMetadata:
    """Insert a batch of catalog rows under a new ledger entry, atomically."""
    try:
        meta = UploadMetadata(
            filename=filename,
            total_received=len(entries),
            record_count=0,
            uploaded_by_id=uploader.id,
            uploaded_by_email=uploader.email,
        )
        db.add(meta)
        db.flush()  # Get the ID

        rows = [
            MasterDescription(
                part_no=entry.part_no,
                description=entry.description,
                ndp=coerce_number(entry.ndp),
                mrp=coerce_number(entry.mrp),
                upload_batch=filename,
                file_id=meta.id,
            )
            for entry in entries
        ]
        db.add_all(rows)
        db.flush()

        meta.record_count = len(rows)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("master_upload_failed", filename=filename, error=str(exc))
        raise StoreFailure("Server error uploading master descriptions") from exc

    db.refresh(meta)
    logger.info("master_upload_committed", file_id=meta.id, filename=filename, record_count=meta.record_count)
    return meta


def linked_records_query(db: Session, meta: UploadMetadata) -> Query:
    """Catalog rows owned by a ledger entry.

    Rows carry the ledger id; legacy rows without one are matched by filename.
    """
    linkage = MasterDescription.file_id == meta.id
    if meta.filename:
        linkage = or_(
            linkage,
            and_(MasterDescription.file_id.is_(None), MasterDescription.upload_batch == meta.filename),
        )
    return db.query(MasterDescription).filter(linkage)


def delete_upload(db: Session, upload_id: int) -> int:
    """Delete a ledger entry and its catalog rows; returns the row count."""
    meta = db.query(UploadMetadata).filter(UploadMetadata.id == upload_id).first()
    if not meta:
        raise NotFound("File metadata not found")

    try:
        deleted = linked_records_query(db, meta).delete(synchronize_session=False)
        db.query(UploadMetadata).filter(UploadMetadata.id == upload_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("master_upload_delete_failed", file_id=upload_id, error=str(exc))
        raise StoreFailure("Server error deleting uploaded file") from exc

    logger.info("master_upload_deleted", file_id=upload_id, deleted_records=deleted)
    return deleted
