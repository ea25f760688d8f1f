#!/usr/bin/env python3
"""
Seed script: creates a demo category with a badge policy and a seller whose
primary category it is, then runs a first recompute.
Run after migrations: python scripts/seed.py
"""

import asyncio
import os
import sys
from uuid import UUID

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from sellertrust.collaborators import NullPiiCodec
from sellertrust.config import get_settings
from sellertrust.core import TrustCore
from sellertrust.database import create_engine, create_session_maker, session_scope
from sellertrust.logging_setup import configure_logging
from sellertrust.models import ProductCategory, SellerProfile
from sellertrust.schemas.category_policy import BadgePolicyIn
from sellertrust.utils.clock import utcnow

# Fixed ids so the script can be re-run safely.
CATEGORY_ID = str(UUID(int=1))
SELLER_ID = str(UUID(int=2))


async def seed():
    settings = get_settings()
    configure_logging(settings)
    session_maker = create_session_maker(create_engine(settings))
    codec = None if settings.pii_encryption_key else NullPiiCodec()
    core = TrustCore.build(settings, session_maker=session_maker, codec=codec)

    async with session_scope(session_maker) as db:
        now = utcnow()
        existing = await db.scalar(
            select(ProductCategory).where(ProductCategory.category_id == CATEGORY_ID)
        )
        if existing:
            print("Category already exists, using existing.")
        else:
            db.add(ProductCategory(category_id=CATEGORY_ID, name="Industrial Equipment", created_at=now))
        if await db.get(SellerProfile, SELLER_ID):
            print("Seller already exists, using existing.")
        else:
            await db.flush()
            db.add(
                SellerProfile(
                    seller_id=SELLER_ID,
                    company_name="Demo Machining Co.",
                    primary_category_id=CATEGORY_ID,
                    is_verified=False,
                    has_verified_badge=False,
                    updated_at=now,
                )
            )

    if await core.policies.get(CATEGORY_ID) is None:
        await core.policies.create(
            CATEGORY_ID,
            BadgePolicyIn(allows_badge=True, min_certifications=1, required_certifications={"ISO9001"}),
        )

    outcome = await core.verification.recompute(SELLER_ID, reason="seed")
    print("Seed complete!")
    print(f"Category: {CATEGORY_ID}")
    print(f"Seller:   {SELLER_ID} (verified={outcome.after.is_verified}, badge={outcome.after.has_verified_badge})")


if __name__ == "__main__":
    asyncio.run(seed())
