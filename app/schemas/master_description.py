"""Master description and upload ledger schemas."""
from datetime import datetime
from typing import Any, Optional, List
from pydantic import Field

from app.schemas.common import CamelModel


class MasterEntry(CamelModel):
    """One uploaded catalog row; ndp/mrp are coerced later, never rejected."""
    part_no: str = Field(min_length=1)
    description: Optional[str] = None
    ndp: Any = None
    mrp: Any = None


class MasterUploadRequest(CamelModel):
    entries: List[MasterEntry] = []
    filename: Optional[str] = None


class MasterUploadResult(CamelModel):
    success: bool = True
    file_id: int
    inserted_count: int
    message: str


class UploadMetadataResponse(CamelModel):
    id: int
    filename: Optional[str] = None
    upload_date: Optional[datetime] = None
    total_received: int
    record_count: int
    uploaded_by_id: Optional[int] = None
    uploaded_by_email: Optional[str] = None


class UploadListEnvelope(CamelModel):
    success: bool = True
    count: int
    data: List[UploadMetadataResponse]


class UploadDeleteResult(CamelModel):
    success: bool = True
    message: str
    deleted_records_count: int


class MasterDescriptionResponse(CamelModel):
    id: int
    part_no: str
    description: Optional[str] = None
    ndp: float
    mrp: float
    upload_batch: Optional[str] = None
    file_id: Optional[int] = None
    created_at: Optional[datetime] = None


class MasterDescriptionListEnvelope(CamelModel):
    success: bool = True
    count: int
    data: List[MasterDescriptionResponse]
