"""Audit trail - append-only record of administrative state changes."""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sellertrust.collaborators import PiiCodec
from sellertrust.database import session_scope
from sellertrust.errors import MissingAuditField
from sellertrust.models import AuditEntry
from sellertrust.schemas.audit import AuditEntryCreate, AuditEntryOut
from sellertrust.schemas.common import Page, clamp_paging
from sellertrust.storage import repositories as repo
from sellertrust.utils.clock import utcnow

logger = logging.getLogger(__name__)

# Fields passed through the PII codec on the way in and out.
SENSITIVE_FIELDS = ("actor_name", "actor_role", "reason")


class AuditTrail:
    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        codec: PiiCodec,
        max_page_size: int = 50,
    ):
        self._session_maker = session_maker
        self._codec = codec
        self._max_page_size = max_page_size

    async def append(self, db: AsyncSession, entry: AuditEntryCreate) -> AuditEntry:
        """Add an entry to the caller's unit of work.

        Only required-field presence is checked: subject, action, and both
        snapshots unless the entry opts out (creation and deletion records).
        """
        if not entry.subject_id:
            raise MissingAuditField("subject_id")
        if not entry.action:
            raise MissingAuditField("action")
        if entry.requires_snapshots:
            if entry.before_snapshot is None:
                raise MissingAuditField("before_snapshot")
            if entry.after_snapshot is None:
                raise MissingAuditField("after_snapshot")

        actor = entry.actor
        metadata = entry.metadata
        row = AuditEntry(
            subject_id=entry.subject_id,
            entity_name=entry.entity_name,
            actor_id=actor.actor_id if actor else None,
            actor_name=self._seal(actor.name if actor else None),
            actor_role=self._seal(actor.role if actor else None),
            action=entry.action,
            reason=self._seal(entry.reason),
            before_snapshot=entry.before_snapshot,
            after_snapshot=entry.after_snapshot,
            ip_address=metadata.ip_address if metadata else None,
            user_agent=metadata.user_agent if metadata else None,
            created_at=utcnow(),
        )
        await repo.add_audit_entry(db, row)
        logger.debug("Audit %s on %s %s", entry.action, entry.entity_name, entry.subject_id)
        return row

    async def query_by_subject(
        self, subject_id: str, page: int = 1, page_size: int = 10
    ) -> Page[AuditEntryOut]:
        page, page_size = clamp_paging(page, page_size, self._max_page_size)
        async with session_scope(self._session_maker) as db:
            rows, total = await repo.query_audit_by_subject(
                db, subject_id, (page - 1) * page_size, page_size
            )
        return Page.build([self.reveal(r) for r in rows], page, page_size, total)

    async def query_by_date_range(
        self,
        start: datetime,
        end: datetime,
        page: int = 1,
        page_size: int = 10,
        action: str | None = None,
    ) -> Page[AuditEntryOut]:
        if end <= start:
            raise ValueError("end must be after start")
        page, page_size = clamp_paging(page, page_size, self._max_page_size)
        async with session_scope(self._session_maker) as db:
            rows, total = await repo.query_audit_by_date_range(
                db, start, end, (page - 1) * page_size, page_size, action=action
            )
        return Page.build([self.reveal(r) for r in rows], page, page_size, total)

    def reveal(self, row: AuditEntry) -> AuditEntryOut:
        """Decrypt the sensitive fields of a stored row."""
        out = AuditEntryOut.model_validate(row)
        return out.model_copy(
            update={f: self._open(getattr(row, f)) for f in SENSITIVE_FIELDS}
        )

    def _seal(self, value: str | None) -> str | None:
        return self._codec.encrypt(value) if value is not None else None

    def _open(self, value: str | None) -> str | None:
        return self._codec.decrypt(value) if value is not None else None
