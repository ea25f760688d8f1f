"""Certification ledger - submission and one-time admin review of seller credentials."""

import logging
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sellertrust.audit import AuditTrail
from sellertrust.collaborators import DocumentStore, NotificationSink, notify_quietly
from sellertrust.config import Settings
from sellertrust.database import session_scope
from sellertrust.engine.locks import SellerLocks
from sellertrust.engine.recompute import VerificationEngine
from sellertrust.errors import (
    CertificationNotFound,
    InvalidDocument,
    InvalidStateTransition,
    SellerNotFound,
    ValidationFailed,
)
from sellertrust.models import Certification, CertificationStatus
from sellertrust.schemas.audit import AuditEntryCreate
from sellertrust.schemas.certification import CertificationOut, DocumentUpload
from sellertrust.schemas.common import Actor, RequestMetadata
from sellertrust.storage import repositories as repo
from sellertrust.utils.canonical import dump_snapshot
from sellertrust.utils.clock import utcnow

logger = logging.getLogger(__name__)

REVIEW_OUTCOMES = (CertificationStatus.APPROVED, CertificationStatus.REJECTED)


def certification_snapshot(cert: Certification) -> str:
    return dump_snapshot(
        "certification",
        {
            "certification_id": cert.certification_id,
            "seller_id": cert.seller_id,
            "name": cert.name,
            "status": cert.status,
            "reviewed_at": cert.reviewed_at,
            "admin_notes": cert.admin_notes,
        },
    )


class CertificationLedger:
    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        settings: Settings,
        documents: DocumentStore,
        notifier: NotificationSink,
        audit: AuditTrail,
        engine: VerificationEngine,
        locks: SellerLocks,
    ):
        self._session_maker = session_maker
        self._settings = settings
        self._documents = documents
        self._notifier = notifier
        self._audit = audit
        self._engine = engine
        self._locks = locks

    def validate_document(self, document: DocumentUpload) -> None:
        """Size cap and extension allow-list."""
        if not document.content:
            raise InvalidDocument("certification document is required")
        limit = self._settings.max_document_bytes
        if len(document.content) > limit:
            raise InvalidDocument(
                f"file size exceeds the maximum allowed size of {limit} bytes"
            )
        allowed = self._settings.allowed_document_extensions
        if document.extension not in allowed:
            raise InvalidDocument(
                f"file type '{document.extension or document.filename}' is not allowed. "
                f"Allowed types: {', '.join(sorted(allowed))}"
            )

    async def submit(
        self, seller_id: str, name: str, document: DocumentUpload
    ) -> CertificationOut:
        """Store the document and open a Pending certification."""
        name = (name or "").strip()
        if not name:
            raise ValidationFailed("Certification name is required")
        if len(name) > 255:
            raise ValidationFailed("Certification name is longer than 255 characters")
        self.validate_document(document)

        async with self._locks.hold(seller_id):
            document_ref = None
            try:
                async with session_scope(self._session_maker) as db:
                    if await repo.get_seller(db, seller_id) is None:
                        raise SellerNotFound(seller_id)
                    document_ref = await self._documents.save(
                        document.content,
                        {
                            "seller_id": seller_id,
                            "filename": document.filename,
                            "extension": document.extension,
                            "content_type": document.content_type,
                        },
                    )
                    cert = Certification(
                        certification_id=str(uuid4()),
                        seller_id=seller_id,
                        name=name,
                        document_ref=document_ref,
                        status=CertificationStatus.PENDING.value,
                        submitted_at=utcnow(),
                    )
                    db.add(cert)
                    await db.flush()
                    # A pending certification never changes the flags; the ledger
                    # still asks so derived state stays anchored to it.
                    outcome = await self._engine.apply(
                        db, seller_id, reason=f"certification {cert.certification_id} submitted"
                    )
                    result = CertificationOut.model_validate(cert)
            except Exception:
                if document_ref is not None:
                    await self._discard_document(document_ref)
                raise

        logger.info("Certification %s submitted by seller %s", result.certification_id, seller_id)
        await self._engine.announce(outcome)
        return result

    async def _discard_document(self, document_ref: str) -> None:
        """Drop a stored document whose certification row was never committed."""
        try:
            await self._documents.delete(document_ref)
        except Exception:
            logger.exception("Could not remove orphaned document %s", document_ref)

    async def review(
        self,
        certification_id: str,
        outcome: CertificationStatus,
        admin_notes: str | None = None,
        *,
        actor: Actor | None = None,
        metadata: RequestMetadata | None = None,
    ) -> CertificationOut:
        """Move a Pending certification to Approved or Rejected, then recompute."""
        outcome = CertificationStatus(outcome)
        if outcome not in REVIEW_OUTCOMES:
            raise ValidationFailed(f"Review outcome must be Approved or Rejected, not {outcome.value}")
        if outcome is CertificationStatus.REJECTED and not (admin_notes or "").strip():
            raise ValidationFailed("Admin notes are required for rejection")

        async with session_scope(self._session_maker) as db:
            cert = await repo.get_certification(db, certification_id)
            if cert is None:
                raise CertificationNotFound(certification_id)
            seller_id = cert.seller_id

        async with self._locks.hold(seller_id):
            async with session_scope(self._session_maker) as db:
                cert = await repo.get_certification(db, certification_id)
                if cert.status != CertificationStatus.PENDING.value:
                    raise InvalidStateTransition(certification_id, cert.status, outcome.value)
                before = certification_snapshot(cert)
                cert.status = outcome.value
                cert.admin_notes = admin_notes
                cert.reviewed_at = utcnow()
                await db.flush()
                await self._audit.append(
                    db,
                    AuditEntryCreate(
                        subject_id=seller_id,
                        entity_name="Certification",
                        action="CertificationReviewed",
                        actor=actor,
                        reason=admin_notes,
                        before_snapshot=before,
                        after_snapshot=certification_snapshot(cert),
                        metadata=metadata,
                    ),
                )
                recomputed = await self._engine.apply(
                    db,
                    seller_id,
                    reason=f"certification {certification_id} {outcome.value.lower()}",
                    actor=actor,
                    metadata=metadata,
                )
                result = CertificationOut.model_validate(cert)

        logger.info("Certification %s reviewed: %s", certification_id, outcome.value)
        await notify_quietly(
            self._notifier,
            seller_id,
            "certification_status",
            f"Your certification '{result.name}' was {outcome.value.lower()}."
            + (f" Notes: {admin_notes}" if admin_notes else ""),
        )
        await self._engine.announce(recomputed)
        return result

    async def get(self, certification_id: str) -> CertificationOut | None:
        async with session_scope(self._session_maker) as db:
            cert = await repo.get_certification(db, certification_id)
            return CertificationOut.model_validate(cert) if cert else None

    async def list_by_seller(self, seller_id: str) -> list[CertificationOut]:
        async with session_scope(self._session_maker) as db:
            certs = await repo.list_certifications_by_seller(db, seller_id)
            return [CertificationOut.model_validate(c) for c in certs]

    async def list_by_status(self, status: CertificationStatus) -> list[CertificationOut]:
        async with session_scope(self._session_maker) as db:
            certs = await repo.list_certifications_by_status(db, CertificationStatus(status))
            return [CertificationOut.model_validate(c) for c in certs]

    async def load_document(self, certification_id: str) -> bytes:
        cert = await self.get(certification_id)
        if cert is None:
            raise CertificationNotFound(certification_id)
        return await self._documents.load(cert.document_ref)