"""Database models."""

from sellertrust.models.audit import AuditEntry
from sellertrust.models.category_policy import CategoryBadgePolicy
from sellertrust.models.certification import Certification, CertificationStatus
from sellertrust.models.seller import ProductCategory, SellerProfile
from sellertrust.models.subscription import PremiumSubscription

__all__ = [
    "AuditEntry",
    "CategoryBadgePolicy",
    "Certification",
    "CertificationStatus",
    "PremiumSubscription",
    "ProductCategory",
    "SellerProfile",
]
