"""Certification model."""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from sellertrust.database import Base


class CertificationStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class Certification(Base):
    """Seller-submitted credential - reviewed once, never deleted."""

    __tablename__ = "certifications"

    certification_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    seller_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("seller_profiles.seller_id"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    document_ref: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CertificationStatus.PENDING.value, index=True
    )  # Pending|Approved|Rejected
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
