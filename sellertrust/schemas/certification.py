"""Certification schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from sellertrust.models.certification import CertificationStatus


class DocumentUpload(BaseModel):
    """A credential document as received from the caller."""

    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def extension(self) -> str:
        _, dot, ext = self.filename.rpartition(".")
        return f".{ext.lower()}" if dot and ext else ""


class CertificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    certification_id: str
    seller_id: str
    name: str
    status: CertificationStatus
    document_ref: str
    submitted_at: datetime
    reviewed_at: datetime | None = None
    admin_notes: str | None = None
