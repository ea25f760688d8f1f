"""Composition root - wires ledgers, engine and audit trail at process start."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sellertrust.audit import AuditTrail
from sellertrust.collaborators import (
    DocumentStore,
    FernetPiiCodec,
    LocalDocumentStore,
    LoggingNotificationSink,
    NotificationSink,
    PiiCodec,
)
from sellertrust.config import Settings
from sellertrust.database import create_engine, create_session_maker
from sellertrust.engine.locks import SellerLocks
from sellertrust.engine.recompute import VerificationEngine
from sellertrust.ledgers.category_policies import CategoryPolicyLedger
from sellertrust.ledgers.certifications import CertificationLedger
from sellertrust.ledgers.profiles import ProfileWorkflow
from sellertrust.ledgers.subscriptions import SubscriptionLedger


@dataclass
class TrustCore:
    settings: Settings
    audit: AuditTrail
    verification: VerificationEngine
    certifications: CertificationLedger
    policies: CategoryPolicyLedger
    subscriptions: SubscriptionLedger
    profiles: ProfileWorkflow

    @classmethod
    def build(
        cls,
        settings: Settings,
        *,
        session_maker: async_sessionmaker[AsyncSession] | None = None,
        documents: DocumentStore | None = None,
        notifier: NotificationSink | None = None,
        codec: PiiCodec | None = None,
    ) -> "TrustCore":
        """Collaborators default to the stock implementations driven by settings."""
        if session_maker is None:
            session_maker = create_session_maker(create_engine(settings))
        documents = documents or LocalDocumentStore(settings.document_root)
        notifier = notifier or LoggingNotificationSink()
        codec = codec or FernetPiiCodec(settings.pii_encryption_key)

        locks = SellerLocks()
        audit = AuditTrail(session_maker, codec, settings.audit_max_page_size)
        verification = VerificationEngine(session_maker, audit, locks, notifier)
        return cls(
            settings=settings,
            audit=audit,
            verification=verification,
            certifications=CertificationLedger(
                session_maker, settings, documents, notifier, audit, verification, locks
            ),
            policies=CategoryPolicyLedger(session_maker, audit),
            subscriptions=SubscriptionLedger(
                session_maker, settings, notifier, audit, verification, locks
            ),
            profiles=ProfileWorkflow(session_maker, verification, locks),
        )
