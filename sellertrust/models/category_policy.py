"""Category badge policy model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from sellertrust.database import Base, JSONDocument


class CategoryBadgePolicy(Base):
    """Verified-badge rules for one product category."""

    __tablename__ = "category_badge_policies"

    policy_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    category_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("product_categories.category_id"),
        nullable=False,
        unique=True,
    )
    allows_badge: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    min_certifications: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    required_certifications: Mapped[list] = mapped_column(
        JSONDocument, nullable=False, default=list
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
