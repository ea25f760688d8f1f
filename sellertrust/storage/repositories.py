"""Repository functions for sellers, certifications, policies, subscriptions, audit."""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sellertrust.models import (
    AuditEntry,
    CategoryBadgePolicy,
    Certification,
    CertificationStatus,
    PremiumSubscription,
    ProductCategory,
    SellerProfile,
)


async def get_seller(db: AsyncSession, seller_id: str) -> SellerProfile | None:
    return await db.get(SellerProfile, seller_id)


async def list_seller_ids_in_category(db: AsyncSession, category_id: str) -> list[str]:
    """Sellers whose primary category is category_id."""
    result = await db.execute(
        select(SellerProfile.seller_id)
        .where(SellerProfile.primary_category_id == category_id)
        .order_by(SellerProfile.seller_id)
    )
    return list(result.scalars().all())


async def get_category(db: AsyncSession, category_id: str) -> ProductCategory | None:
    return await db.get(ProductCategory, category_id)


async def get_certification(db: AsyncSession, certification_id: str) -> Certification | None:
    return await db.get(Certification, certification_id)


async def list_certifications_by_seller(
    db: AsyncSession, seller_id: str
) -> list[Certification]:
    result = await db.execute(
        select(Certification)
        .where(Certification.seller_id == seller_id)
        .order_by(Certification.submitted_at.desc())
    )
    return list(result.scalars().all())


async def list_certifications_by_status(
    db: AsyncSession, status: CertificationStatus
) -> list[Certification]:
    """Admin review queue - oldest submission first."""
    result = await db.execute(
        select(Certification)
        .where(Certification.status == status.value)
        .order_by(Certification.submitted_at.asc())
    )
    return list(result.scalars().all())


async def list_approved_certification_names(db: AsyncSession, seller_id: str) -> list[str]:
    result = await db.execute(
        select(Certification.name).where(
            Certification.seller_id == seller_id,
            Certification.status == CertificationStatus.APPROVED.value,
        )
    )
    return list(result.scalars().all())


async def get_policy_by_category(
    db: AsyncSession, category_id: str
) -> CategoryBadgePolicy | None:
    result = await db.execute(
        select(CategoryBadgePolicy).where(CategoryBadgePolicy.category_id == category_id)
    )
    return result.scalar_one_or_none()


async def get_subscription(
    db: AsyncSession, subscription_id: str
) -> PremiumSubscription | None:
    return await db.get(PremiumSubscription, subscription_id)


async def get_active_subscription(
    db: AsyncSession, seller_id: str
) -> PremiumSubscription | None:
    """Most recent active subscription for a seller."""
    result = await db.execute(
        select(PremiumSubscription)
        .where(
            PremiumSubscription.seller_id == seller_id,
            PremiumSubscription.is_active.is_(True),
        )
        .order_by(PremiumSubscription.start_date.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def list_expired_active_subscriptions(
    db: AsyncSession, now: datetime
) -> list[PremiumSubscription]:
    result = await db.execute(
        select(PremiumSubscription).where(
            PremiumSubscription.is_active.is_(True),
            PremiumSubscription.end_date.is_not(None),
            PremiumSubscription.end_date <= now,
        )
    )
    return list(result.scalars().all())


async def add_audit_entry(db: AsyncSession, entry: AuditEntry) -> AuditEntry:
    db.add(entry)
    await db.flush()
    return entry


async def query_audit_by_subject(
    db: AsyncSession, subject_id: str, offset: int, limit: int
) -> tuple[list[AuditEntry], int]:
    """Newest first. Returns (page, total)."""
    total = await db.scalar(
        select(func.count()).select_from(AuditEntry).where(AuditEntry.subject_id == subject_id)
    )
    result = await db.execute(
        select(AuditEntry)
        .where(AuditEntry.subject_id == subject_id)
        .order_by(AuditEntry.created_at.desc(), AuditEntry.entry_id.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def query_audit_by_date_range(
    db: AsyncSession,
    start: datetime,
    end: datetime,
    offset: int,
    limit: int,
    action: str | None = None,
) -> tuple[list[AuditEntry], int]:
    """Entries with start <= created_at < end, newest first."""
    conditions = [AuditEntry.created_at >= start, AuditEntry.created_at < end]
    if action is not None:
        conditions.append(AuditEntry.action == action)
    total = await db.scalar(select(func.count()).select_from(AuditEntry).where(*conditions))
    result = await db.execute(
        select(AuditEntry)
        .where(*conditions)
        .order_by(AuditEntry.created_at.desc(), AuditEntry.entry_id.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0
