"""Premium subscription model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from sellertrust.database import Base


class PremiumSubscription(Base):
    """Paid seller entitlement. At most one active row per seller (app-enforced)."""

    __tablename__ = "premium_subscriptions"

    subscription_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    seller_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("seller_profiles.seller_id"),
        nullable=False,
        index=True,
    )
    payment_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    plan_type: Mapped[str] = mapped_column(String(50), nullable=False, default="Premium")
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    auto_renew: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    deactivation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
