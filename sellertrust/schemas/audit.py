"""Audit trail schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from sellertrust.schemas.common import Actor, RequestMetadata


class AuditEntryCreate(BaseModel):
    subject_id: str
    entity_name: str
    action: str
    actor: Actor | None = None
    reason: str | None = None
    before_snapshot: str | None = None
    after_snapshot: str | None = None
    metadata: RequestMetadata | None = None
    requires_snapshots: bool = True


class AuditEntryOut(BaseModel):
    """Audit entry with sensitive fields already decrypted."""

    model_config = ConfigDict(from_attributes=True)

    entry_id: int
    subject_id: str
    entity_name: str
    actor_id: str | None = None
    actor_name: str | None = None
    actor_role: str | None = None
    action: str
    reason: str | None = None
    before_snapshot: str | None = None
    after_snapshot: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime
