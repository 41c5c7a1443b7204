"""Master description catalog and upload ledger routes."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth import require_admin, require_any_role, require_leader
from app.database import get_db
from app.errors import ValidationError, parse_id
from app.models.master_description import MasterDescription, UploadMetadata
from app.models.user import User
from app.schemas.master_description import (
    MasterDescriptionListEnvelope,
    MasterUploadRequest,
    MasterUploadResult,
    UploadDeleteResult,
    UploadListEnvelope,
)
from app.services.master_upload import delete_upload, upload_master_descriptions

router = APIRouter(prefix="/masterdesc", tags=["Master Descriptions"])


@router.post("/upload", response_model=MasterUploadResult, status_code=status.HTTP_201_CREATED)
async def upload_master_file(
    upload: MasterUploadRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Upload a batch of master descriptions (admin only)."""
    if not upload.entries:
        raise ValidationError("No data provided")

    meta = upload_master_descriptions(db, upload.entries, upload.filename, current_user)
    return {
        "success": True,
        "file_id": meta.id,
        "inserted_count": meta.record_count,
        "message": "File uploaded successfully",
    }


@router.get("/files", response_model=UploadListEnvelope)
async def list_uploaded_files(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_leader)
):
    """List upload ledger entries, newest first."""
    files = (
        db.query(UploadMetadata)
        .order_by(UploadMetadata.upload_date.desc(), UploadMetadata.id.desc())
        .all()
    )
    return {"success": True, "count": len(files), "data": files}


@router.delete("/files/{file_id}", response_model=UploadDeleteResult)
async def delete_uploaded_file(
    file_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Delete an upload and every catalog row it produced (admin only)."""
    deleted = delete_upload(db, parse_id(file_id, "File metadata"))
    return {
        "success": True,
        "message": f"Deleted {deleted} records and metadata entry.",
        "deleted_records_count": deleted,
    }


@router.get("/", response_model=MasterDescriptionListEnvelope)
async def list_master_descriptions(
    part_no: Optional[str] = Query(None, alias="partNo", description="Filter by part number"),
    skip: int = 0,
    limit: int = Query(100, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    """Look up catalog rows, newest first."""
    query = db.query(MasterDescription)
    if part_no:
        query = query.filter(MasterDescription.part_no == part_no)
    rows = query.order_by(MasterDescription.id.desc()).offset(skip).limit(limit).all()
    return {"success": True, "count": len(rows), "data": rows}
