"""Product category and seller profile models."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from sellertrust.database import Base


class ProductCategory(Base):
    """Product category - only the identity matters to badge policies."""

    __tablename__ = "product_categories"

    category_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class SellerProfile(Base):
    """Seller profile with the embedded trust state.

    is_verified and has_verified_badge are written only by the verification
    engine. version guards against writers in other processes.
    """

    __tablename__ = "seller_profiles"

    seller_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    company_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    tax_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    primary_category_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("product_categories.category_id"),
        nullable=True,
        index=True,
    )
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_verified_badge: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verification_override: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    premium_since: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
