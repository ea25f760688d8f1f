"""
Test configuration - a fresh SQLite database per test and in-memory fakes for
the external collaborators.

A file database (not :memory:) so that every session the code under test
opens sees the same tables.
"""

from uuid import uuid4

import pytest
from cryptography.fernet import Fernet
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine

from sellertrust import models  # noqa: F401
from sellertrust.collaborators import FernetPiiCodec
from sellertrust.config import Settings
from sellertrust.core import TrustCore
from sellertrust.database import Base, create_session_maker, session_scope
from sellertrust.models import AuditEntry, Certification, ProductCategory, SellerProfile
from sellertrust.schemas.certification import DocumentUpload
from sellertrust.utils.clock import utcnow


class InMemoryDocumentStore:
    def __init__(self):
        self.documents: dict[str, bytes] = {}
        self.metadata: dict[str, dict] = {}

    async def save(self, content: bytes, metadata: dict) -> str:
        reference = f"{metadata['seller_id']}/{uuid4()}{metadata.get('extension', '')}"
        self.documents[reference] = content
        self.metadata[reference] = metadata
        return reference

    async def load(self, reference: str) -> bytes:
        return self.documents[reference]

    async def delete(self, reference: str) -> None:
        self.documents.pop(reference, None)
        self.metadata.pop(reference, None)


class RecordingNotifier:
    def __init__(self):
        self.sent: list[tuple[str, str, str]] = []

    async def notify(self, user_id: str, kind: str, message: str) -> None:
        self.sent.append((user_id, kind, message))

    def kinds_for(self, user_id: str) -> list[str]:
        return [kind for uid, kind, _ in self.sent if uid == user_id]


@pytest.fixture
async def session_maker(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'trust.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield create_session_maker(engine)
    await engine.dispose()


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite+aiosqlite://",
        pii_encryption_key=Fernet.generate_key().decode(),
        document_root="unused",
    )


@pytest.fixture
def documents():
    return InMemoryDocumentStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def codec(settings):
    return FernetPiiCodec(settings.pii_encryption_key)


@pytest.fixture
def core(settings, session_maker, documents, notifier, codec):
    return TrustCore.build(
        settings,
        session_maker=session_maker,
        documents=documents,
        notifier=notifier,
        codec=codec,
    )


@pytest.fixture
def make_category(session_maker):
    async def _make(name: str = "Industrial Equipment") -> str:
        category_id = str(uuid4())
        async with session_scope(session_maker) as db:
            db.add(ProductCategory(category_id=category_id, name=name, created_at=utcnow()))
        return category_id

    return _make


@pytest.fixture
def make_seller(session_maker):
    async def _make(
        primary_category_id: str | None = None,
        is_verified: bool = False,
        has_verified_badge: bool = False,
    ) -> str:
        seller_id = str(uuid4())
        async with session_scope(session_maker) as db:
            db.add(
                SellerProfile(
                    seller_id=seller_id,
                    company_name="Acme Fasteners",
                    primary_category_id=primary_category_id,
                    is_verified=is_verified,
                    has_verified_badge=has_verified_badge,
                    updated_at=utcnow(),
                )
            )
        return seller_id

    return _make


@pytest.fixture
def add_certification(session_maker):
    """Insert a certification row directly, bypassing the ledger."""

    async def _add(seller_id: str, name: str, status: str = "Approved") -> str:
        certification_id = str(uuid4())
        async with session_scope(session_maker) as db:
            db.add(
                Certification(
                    certification_id=certification_id,
                    seller_id=seller_id,
                    name=name,
                    document_ref=f"{seller_id}/{certification_id}.pdf",
                    status=status,
                    submitted_at=utcnow(),
                )
            )
        return certification_id

    return _add


@pytest.fixture
def load_seller(session_maker):
    async def _load(seller_id: str) -> SellerProfile:
        async with session_scope(session_maker) as db:
            return await db.get(SellerProfile, seller_id)

    return _load


@pytest.fixture
def audit_rows(session_maker):
    """Raw (still encrypted) audit rows for a subject, oldest first."""

    async def _rows(subject_id: str, action: str | None = None) -> list[AuditEntry]:
        query = select(AuditEntry).where(AuditEntry.subject_id == subject_id)
        if action is not None:
            query = query.where(AuditEntry.action == action)
        async with session_scope(session_maker) as db:
            result = await db.execute(query.order_by(AuditEntry.entry_id))
            return list(result.scalars().all())

    return _rows


@pytest.fixture
def pdf():
    def _pdf(name: str = "iso9001.pdf", size: int = 1024) -> DocumentUpload:
        return DocumentUpload(filename=name, content=b"%PDF" + b"x" * (size - 4))

    return _pdf
