"""Verification engine - the only writer of a seller's derived trust flags."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sellertrust.audit import AuditTrail
from sellertrust.collaborators import NotificationSink, notify_quietly
from sellertrust.database import session_scope
from sellertrust.engine.locks import SellerLocks
from sellertrust.engine.rules import BadgeRequirements, compute_has_badge, compute_is_verified
from sellertrust.errors import CategoryNotFound, SellerNotFound, ValidationFailed
from sellertrust.schemas.audit import AuditEntryCreate
from sellertrust.schemas.common import Actor, RequestMetadata
from sellertrust.schemas.trust import RecomputeOutcome, TrustState
from sellertrust.storage import repositories as repo
from sellertrust.utils.clock import utcnow

logger = logging.getLogger(__name__)

RECOMPUTE_ACTION = "Recompute"
OVERRIDE_ACTION = "ManualOverride"


class VerificationEngine:
    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        audit: AuditTrail,
        locks: SellerLocks,
        notifier: NotificationSink,
    ):
        self._session_maker = session_maker
        self._audit = audit
        self._locks = locks
        self._notifier = notifier

    async def recompute(
        self,
        seller_id: str,
        *,
        reason: str | None = None,
        actor: Actor | None = None,
        metadata: RequestMetadata | None = None,
    ) -> RecomputeOutcome:
        """Re-derive the seller's flags in its own unit of work."""
        async with self._locks.hold(seller_id):
            async with session_scope(self._session_maker) as db:
                outcome = await self.apply(
                    db, seller_id, reason=reason, actor=actor, metadata=metadata
                )
        await self.announce(outcome)
        return outcome

    async def apply(
        self,
        db: AsyncSession,
        seller_id: str,
        *,
        reason: str | None = None,
        actor: Actor | None = None,
        metadata: RequestMetadata | None = None,
    ) -> RecomputeOutcome:
        """
        Read current facts, derive both flags, and write them if either differs.

        The caller must hold the seller's lock and owns the transaction, so the
        flag write and its audit entry commit or roll back together. The
        triggering write has to be flushed before this runs.
        """
        seller = await repo.get_seller(db, seller_id)
        if seller is None:
            raise SellerNotFound(seller_id)

        approved_names = await repo.list_approved_certification_names(db, seller_id)
        has_premium = await repo.get_active_subscription(db, seller_id) is not None
        requirements = None
        if seller.primary_category_id is not None:
            policy = await repo.get_policy_by_category(db, seller.primary_category_id)
            if policy is not None:
                requirements = BadgeRequirements.from_policy(policy)

        is_verified = compute_is_verified(len(approved_names), has_premium)
        if seller.verification_override is not None:
            is_verified = seller.verification_override
        has_badge = compute_has_badge(requirements, approved_names)

        before = TrustState.of(seller)
        after = before.model_copy(
            update={"is_verified": is_verified, "has_verified_badge": has_badge}
        )
        if after == before:
            logger.debug("Recompute for seller %s: no change", seller_id)
            return RecomputeOutcome(seller_id=seller_id, changed=False, before=before, after=after)

        seller.is_verified = is_verified
        seller.has_verified_badge = has_badge
        seller.updated_at = utcnow()
        # Flags must be persisted before an audit row can describe them.
        await db.flush()

        entry = await self._audit.append(
            db,
            AuditEntryCreate(
                subject_id=seller_id,
                entity_name="SellerProfile",
                action=RECOMPUTE_ACTION,
                actor=actor,
                reason=reason,
                before_snapshot=before.snapshot(),
                after_snapshot=after.snapshot(),
                metadata=metadata,
            ),
        )
        logger.info(
            "Seller %s trust changed: verified %s->%s, badge %s->%s",
            seller_id,
            before.is_verified,
            after.is_verified,
            before.has_verified_badge,
            after.has_verified_badge,
        )
        return RecomputeOutcome(
            seller_id=seller_id,
            changed=True,
            before=before,
            after=after,
            audit_entry_id=entry.entry_id,
        )

    async def manual_override(
        self,
        seller_id: str,
        is_verified: bool | None,
        reason: str,
        *,
        actor: Actor | None = None,
        metadata: RequestMetadata | None = None,
    ) -> RecomputeOutcome:
        """Pin IsVerified (or clear the pin with None) and recompute.

        The override is stored as a fact; the flag itself is still written by
        apply(), tagged with the override reason.
        """
        if not reason or not reason.strip():
            raise ValidationFailed("A manual override needs a reason")
        async with self._locks.hold(seller_id):
            async with session_scope(self._session_maker) as db:
                seller = await repo.get_seller(db, seller_id)
                if seller is None:
                    raise SellerNotFound(seller_id)
                if seller.verification_override != is_verified:
                    before = TrustState.of(seller)
                    seller.verification_override = is_verified
                    seller.updated_at = utcnow()
                    await db.flush()
                    await self._audit.append(
                        db,
                        AuditEntryCreate(
                            subject_id=seller_id,
                            entity_name="SellerProfile",
                            action=OVERRIDE_ACTION,
                            actor=actor,
                            reason=reason,
                            before_snapshot=before.snapshot(),
                            after_snapshot=TrustState.of(seller).snapshot(),
                            metadata=metadata,
                        ),
                    )
                outcome = await self.apply(
                    db,
                    seller_id,
                    reason=f"manual override: {reason}",
                    actor=actor,
                    metadata=metadata,
                )
        await self.announce(outcome)
        return outcome

    async def recompute_category(
        self, category_id: str, *, actor: Actor | None = None
    ) -> list[RecomputeOutcome]:
        """Bulk recompute for every seller whose primary category is category_id.

        Each seller gets its own lock and transaction; a failure stops the sweep
        and leaves earlier sellers committed.
        """
        async with session_scope(self._session_maker) as db:
            if await repo.get_category(db, category_id) is None:
                raise CategoryNotFound(category_id)
            seller_ids = await repo.list_seller_ids_in_category(db, category_id)
        outcomes = []
        for seller_id in seller_ids:
            outcomes.append(
                await self.recompute(
                    seller_id,
                    reason=f"badge policy review for category {category_id}",
                    actor=actor,
                )
            )
        logger.info(
            "Recomputed %d sellers in category %s, %d changed",
            len(outcomes),
            category_id,
            sum(o.changed for o in outcomes),
        )
        return outcomes

    async def announce(self, outcome: RecomputeOutcome) -> None:
        """Tell the seller about a committed change. Call only after commit."""
        if not outcome.changed:
            return
        after = outcome.after
        message = (
            f"Your verification status is now "
            f"{'verified' if after.is_verified else 'unverified'}; verified badge "
            f"{'granted' if after.has_verified_badge else 'not held'}."
        )
        await notify_quietly(self._notifier, outcome.seller_id, "verification_status", message)
