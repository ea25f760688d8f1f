"""Derived trust state and recomputation results."""

from pydantic import BaseModel

from sellertrust.utils.canonical import dump_snapshot


class TrustState(BaseModel):
    """The part of a seller profile owned by the verification engine."""

    is_verified: bool
    has_verified_badge: bool
    primary_category_id: str | None = None
    verification_override: bool | None = None

    @classmethod
    def of(cls, seller) -> "TrustState":
        return cls(
            is_verified=seller.is_verified,
            has_verified_badge=seller.has_verified_badge,
            primary_category_id=seller.primary_category_id,
            verification_override=seller.verification_override,
        )

    def snapshot(self) -> str:
        return dump_snapshot("seller-trust", self.model_dump())


class RecomputeOutcome(BaseModel):
    seller_id: str
    changed: bool
    before: TrustState
    after: TrustState
    audit_entry_id: int | None = None
