"""Category badge policy ledger.

Policy edits never recompute sellers themselves; admin workflows call
VerificationEngine.recompute_category when they want the fan-out.
"""

import logging
from uuid import uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sellertrust.audit import AuditTrail
from sellertrust.database import session_scope
from sellertrust.errors import (
    CategoryNotFound,
    DuplicatePolicy,
    PersistenceFailure,
    PolicyNotFound,
)
from sellertrust.models import CategoryBadgePolicy
from sellertrust.schemas.audit import AuditEntryCreate
from sellertrust.schemas.category_policy import BadgePolicyIn, BadgePolicyOut
from sellertrust.schemas.common import Actor, RequestMetadata
from sellertrust.storage import repositories as repo
from sellertrust.utils.canonical import dump_snapshot
from sellertrust.utils.clock import utcnow

logger = logging.getLogger(__name__)


def policy_snapshot(policy: CategoryBadgePolicy) -> str:
    return dump_snapshot(
        "category-policy",
        {
            "category_id": policy.category_id,
            "allows_badge": policy.allows_badge,
            "min_certifications": policy.min_certifications,
            "required_certifications": sorted(policy.required_certifications or []),
        },
    )


class CategoryPolicyLedger:
    def __init__(self, session_maker: async_sessionmaker[AsyncSession], audit: AuditTrail):
        self._session_maker = session_maker
        self._audit = audit

    async def get(self, category_id: str) -> BadgePolicyOut | None:
        async with session_scope(self._session_maker) as db:
            policy = await repo.get_policy_by_category(db, category_id)
            return BadgePolicyOut.model_validate(policy) if policy else None

    async def create(
        self,
        category_id: str,
        body: BadgePolicyIn,
        *,
        actor: Actor | None = None,
        metadata: RequestMetadata | None = None,
    ) -> BadgePolicyOut:
        try:
            async with session_scope(self._session_maker) as db:
                if await repo.get_category(db, category_id) is None:
                    raise CategoryNotFound(category_id)
                if await repo.get_policy_by_category(db, category_id) is not None:
                    raise DuplicatePolicy(category_id)
                policy = CategoryBadgePolicy(
                    policy_id=str(uuid4()),
                    category_id=category_id,
                    allows_badge=body.allows_badge,
                    min_certifications=body.min_certifications,
                    required_certifications=sorted(body.required_certifications),
                    created_at=utcnow(),
                )
                db.add(policy)
                await db.flush()
                await self._record(
                    db, category_id, "PolicyCreated", None, policy_snapshot(policy), actor, metadata
                )
                result = BadgePolicyOut.model_validate(policy)
        except PersistenceFailure as exc:
            # Lost a race with a concurrent create on the unique category_id.
            if isinstance(exc.__cause__, IntegrityError):
                raise DuplicatePolicy(category_id) from exc
            raise
        logger.info("Badge policy created for category %s", category_id)
        return result

    async def update(
        self,
        category_id: str,
        body: BadgePolicyIn,
        *,
        actor: Actor | None = None,
        metadata: RequestMetadata | None = None,
    ) -> BadgePolicyOut:
        """Replace allows-badge, minimum count and required names."""
        async with session_scope(self._session_maker) as db:
            policy = await repo.get_policy_by_category(db, category_id)
            if policy is None:
                raise PolicyNotFound(category_id)
            before = policy_snapshot(policy)
            policy.allows_badge = body.allows_badge
            policy.min_certifications = body.min_certifications
            policy.required_certifications = sorted(body.required_certifications)
            policy.updated_at = utcnow()
            await db.flush()
            await self._record(
                db, category_id, "PolicyUpdated", before, policy_snapshot(policy), actor, metadata
            )
            result = BadgePolicyOut.model_validate(policy)
        logger.info("Badge policy updated for category %s", category_id)
        return result

    async def delete(
        self,
        category_id: str,
        *,
        actor: Actor | None = None,
        metadata: RequestMetadata | None = None,
    ) -> bool:
        """Remove the policy. False when the category had none."""
        async with session_scope(self._session_maker) as db:
            policy = await repo.get_policy_by_category(db, category_id)
            if policy is None:
                return False
            before = policy_snapshot(policy)
            await db.delete(policy)
            await db.flush()
            await self._record(db, category_id, "PolicyDeleted", before, None, actor, metadata)
        logger.info("Badge policy deleted for category %s", category_id)
        return True

    async def _record(
        self,
        db: AsyncSession,
        category_id: str,
        action: str,
        before: str | None,
        after: str | None,
        actor: Actor | None,
        metadata: RequestMetadata | None,
    ) -> None:
        await self._audit.append(
            db,
            AuditEntryCreate(
                subject_id=category_id,
                entity_name="CategoryBadgePolicy",
                action=action,
                actor=actor,
                before_snapshot=before,
                after_snapshot=after,
                metadata=metadata,
                requires_snapshots=before is not None and after is not None,
            ),
        )
