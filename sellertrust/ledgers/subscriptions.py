"""Premium subscription ledger."""

import logging
from datetime import datetime, timedelta
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sellertrust.audit import AuditTrail
from sellertrust.collaborators import NotificationSink, notify_quietly
from sellertrust.config import Settings
from sellertrust.database import session_scope
from sellertrust.engine.locks import SellerLocks
from sellertrust.engine.recompute import VerificationEngine
from sellertrust.errors import AlreadyActive, SellerNotFound, SubscriptionNotFound
from sellertrust.models import PremiumSubscription
from sellertrust.schemas.audit import AuditEntryCreate
from sellertrust.schemas.common import Actor, RequestMetadata
from sellertrust.schemas.subscription import DurationPolicy, SubscriptionOut
from sellertrust.storage import repositories as repo
from sellertrust.utils.canonical import dump_snapshot
from sellertrust.utils.clock import utcnow

logger = logging.getLogger(__name__)


def subscription_snapshot(sub: PremiumSubscription) -> str:
    return dump_snapshot(
        "premium-subscription",
        {
            "subscription_id": sub.subscription_id,
            "seller_id": sub.seller_id,
            "payment_id": sub.payment_id,
            "start_date": sub.start_date,
            "end_date": sub.end_date,
            "is_active": sub.is_active,
            "auto_renew": sub.auto_renew,
            "deactivation_reason": sub.deactivation_reason,
        },
    )


def add_years(start: datetime, years: int) -> datetime:
    """Same calendar day `years` later; Feb 29 falls back to Feb 28."""
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        return start.replace(year=start.year + years, day=28)


class SubscriptionLedger:
    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        settings: Settings,
        notifier: NotificationSink,
        audit: AuditTrail,
        engine: VerificationEngine,
        locks: SellerLocks,
    ):
        self._session_maker = session_maker
        self._settings = settings
        self._notifier = notifier
        self._audit = audit
        self._engine = engine
        self._locks = locks

    def end_date_for(self, start: datetime, duration: DurationPolicy) -> datetime | None:
        if duration.open_ended:
            return None
        if duration.days is not None:
            return start + timedelta(days=duration.days)
        return add_years(start, self._settings.premium_term_years)

    async def activate(
        self,
        seller_id: str,
        payment_id: str | None,
        duration: DurationPolicy | None = None,
        *,
        actor: Actor | None = None,
        metadata: RequestMetadata | None = None,
    ) -> SubscriptionOut:
        """Open a new active subscription; AlreadyActive if the seller has one."""
        duration = duration or DurationPolicy()
        async with self._locks.hold(seller_id):
            async with session_scope(self._session_maker) as db:
                seller = await repo.get_seller(db, seller_id)
                if seller is None:
                    raise SellerNotFound(seller_id)
                existing = await repo.get_active_subscription(db, seller_id)
                if existing is not None:
                    raise AlreadyActive(seller_id, existing.subscription_id)

                now = utcnow()
                sub = PremiumSubscription(
                    subscription_id=str(uuid4()),
                    seller_id=seller_id,
                    payment_id=payment_id,
                    start_date=now,
                    end_date=self.end_date_for(now, duration),
                    is_active=True,
                    auto_renew=duration.auto_renew,
                    created_at=now,
                    updated_at=now,
                )
                db.add(sub)
                seller.premium_since = now
                seller.updated_at = now
                await db.flush()
                await self._audit.append(
                    db,
                    AuditEntryCreate(
                        subject_id=seller_id,
                        entity_name="PremiumSubscription",
                        action="PremiumActivated",
                        actor=actor,
                        reason=f"payment {payment_id}" if payment_id else None,
                        after_snapshot=subscription_snapshot(sub),
                        metadata=metadata,
                        requires_snapshots=False,
                    ),
                )
                outcome = await self._engine.apply(
                    db,
                    seller_id,
                    reason=f"premium subscription {sub.subscription_id} activated",
                    actor=actor,
                    metadata=metadata,
                )
                result = SubscriptionOut.model_validate(sub)

        logger.info(
            "Premium subscription %s activated for seller %s from payment %s",
            result.subscription_id,
            seller_id,
            payment_id,
        )
        await notify_quietly(
            self._notifier, seller_id, "premium_status", "Your premium subscription is active."
        )
        await self._engine.announce(outcome)
        return result

    async def deactivate(
        self,
        subscription_id: str,
        reason: str,
        *,
        actor: Actor | None = None,
        metadata: RequestMetadata | None = None,
    ) -> SubscriptionOut:
        """End a subscription now (refund, admin action). Repeats are no-ops."""
        return await self._deactivate(subscription_id, reason, None, actor, metadata)

    async def _deactivate(
        self,
        subscription_id: str,
        reason: str,
        ended_at: datetime | None,
        actor: Actor | None,
        metadata: RequestMetadata | None,
    ) -> SubscriptionOut:
        async with session_scope(self._session_maker) as db:
            sub = await repo.get_subscription(db, subscription_id)
            if sub is None:
                raise SubscriptionNotFound(subscription_id)
            seller_id = sub.seller_id

        async with self._locks.hold(seller_id):
            async with session_scope(self._session_maker) as db:
                sub = await repo.get_subscription(db, subscription_id)
                if not sub.is_active:
                    return SubscriptionOut.model_validate(sub)
                before = subscription_snapshot(sub)
                now = utcnow()
                sub.is_active = False
                sub.end_date = ended_at or now
                sub.deactivation_reason = reason
                sub.updated_at = now
                await db.flush()
                if await repo.get_active_subscription(db, seller_id) is None:
                    seller = await repo.get_seller(db, seller_id)
                    if seller is None:
                        raise SellerNotFound(seller_id)
                    seller.premium_since = None
                    seller.updated_at = now
                    await db.flush()
                await self._audit.append(
                    db,
                    AuditEntryCreate(
                        subject_id=seller_id,
                        entity_name="PremiumSubscription",
                        action="PremiumDeactivated",
                        actor=actor,
                        reason=reason,
                        before_snapshot=before,
                        after_snapshot=subscription_snapshot(sub),
                        metadata=metadata,
                    ),
                )
                outcome = await self._engine.apply(
                    db,
                    seller_id,
                    reason=f"premium subscription {subscription_id} deactivated: {reason}",
                    actor=actor,
                    metadata=metadata,
                )
                result = SubscriptionOut.model_validate(sub)

        logger.info("Premium subscription %s deactivated (%s)", subscription_id, reason)
        await notify_quietly(
            self._notifier, seller_id, "premium_status", "Your premium subscription has ended."
        )
        await self._engine.announce(outcome)
        return result

    async def get_active_for_seller(self, seller_id: str) -> SubscriptionOut | None:
        async with session_scope(self._session_maker) as db:
            sub = await repo.get_active_subscription(db, seller_id)
            return SubscriptionOut.model_validate(sub) if sub else None

    async def handle_payment_confirmation(
        self, seller_id: str, payment_id: str, succeeded: bool
    ) -> SubscriptionOut | None:
        """Payment provider signal. A repeat success for an active seller is a no-op."""
        if not succeeded:
            logger.warning(
                "Payment %s for seller %s failed; no subscription opened", payment_id, seller_id
            )
            return None
        try:
            return await self.activate(seller_id, payment_id)
        except AlreadyActive:
            logger.info(
                "Payment %s confirmed but seller %s is already premium", payment_id, seller_id
            )
            return await self.get_active_for_seller(seller_id)

    async def deactivate_expired(self, now: datetime | None = None) -> list[SubscriptionOut]:
        """Expiry sweep, invoked externally. Each seller is handled in its own unit of work."""
        now = now or utcnow()
        async with session_scope(self._session_maker) as db:
            expired = [
                (s.subscription_id, s.end_date)
                for s in await repo.list_expired_active_subscriptions(db, now)
            ]
        results = []
        for subscription_id, end_date in expired:
            results.append(
                await self._deactivate(subscription_id, "expired", end_date, None, None)
            )
        if results:
            logger.info("Expired %d premium subscriptions", len(results))
        return results
