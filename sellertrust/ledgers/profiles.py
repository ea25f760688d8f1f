"""Seller profile updates - the one profile write path that can move trust inputs."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sellertrust.database import session_scope
from sellertrust.engine.locks import SellerLocks
from sellertrust.engine.recompute import VerificationEngine
from sellertrust.errors import CategoryNotFound, SellerNotFound, ValidationFailed
from sellertrust.models import SellerProfile
from sellertrust.schemas.profile import (
    ProfileUpdate,
    SellerExtendedUpdate,
    SellerProfileOut,
    SellerUpdate,
)
from sellertrust.storage import repositories as repo
from sellertrust.utils.clock import utcnow

logger = logging.getLogger(__name__)


class ProfileWorkflow:
    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        engine: VerificationEngine,
        locks: SellerLocks,
    ):
        self._session_maker = session_maker
        self._engine = engine
        self._locks = locks

    async def apply_update(self, user_id: str, update: ProfileUpdate) -> SellerProfileOut:
        if update.kind == "buyer":
            raise ValidationFailed("Buyer profile updates cannot target a seller profile")

        async with self._locks.hold(user_id):
            async with session_scope(self._session_maker) as db:
                seller = await repo.get_seller(db, user_id)
                if seller is None:
                    raise SellerNotFound(user_id)
                category_changed = await self._apply_seller_fields(db, seller, update)
                if update.kind == "seller_extended":
                    self._apply_extended_fields(seller, update)
                seller.updated_at = utcnow()
                await db.flush()
                outcome = await self._engine.apply(
                    db,
                    user_id,
                    reason="primary category changed" if category_changed else "profile updated",
                )
                result = SellerProfileOut.model_validate(seller)

        await self._engine.announce(outcome)
        return result

    async def _apply_seller_fields(
        self, db: AsyncSession, seller: SellerProfile, update: SellerUpdate
    ) -> bool:
        if update.company_name is not None:
            seller.company_name = update.company_name
        if update.description is not None:
            seller.description = update.description
        if "primary_category_id" not in update.model_fields_set:
            return False
        new_category = update.primary_category_id
        if new_category is not None and await repo.get_category(db, new_category) is None:
            raise CategoryNotFound(new_category)
        if new_category == seller.primary_category_id:
            return False
        logger.info(
            "Seller %s primary category %s -> %s",
            seller.seller_id,
            seller.primary_category_id,
            new_category,
        )
        seller.primary_category_id = new_category
        return True

    @staticmethod
    def _apply_extended_fields(seller: SellerProfile, update: SellerExtendedUpdate) -> None:
        if update.country is not None:
            seller.country = update.country
        if update.tax_id is not None:
            seller.tax_id = update.tax_id
