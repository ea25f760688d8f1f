"""Interfaces to external collaborators and the stock implementations."""

import asyncio
import logging
from pathlib import Path
from typing import Protocol
from uuid import uuid4

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    async def save(self, content: bytes, metadata: dict) -> str:
        """Store a document and return an opaque reference."""
        ...

    async def load(self, reference: str) -> bytes:
        ...

    async def delete(self, reference: str) -> None:
        """Remove a document; unknown references are ignored."""
        ...


class NotificationSink(Protocol):
    async def notify(self, user_id: str, kind: str, message: str) -> None:
        ...


class PiiCodec(Protocol):
    def encrypt(self, value: str) -> str:
        ...

    def decrypt(self, value: str) -> str:
        ...


class LocalDocumentStore:
    """Documents on local disk: <root>/<seller_id>/<uuid><ext>."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    async def save(self, content: bytes, metadata: dict) -> str:
        seller_dir = str(metadata.get("seller_id", "unassigned"))
        extension = metadata.get("extension", "")
        reference = f"{seller_dir}/{uuid4()}{extension}"
        await asyncio.to_thread(self._write, self._resolve(reference), content)
        return reference

    async def load(self, reference: str) -> bytes:
        return await asyncio.to_thread(self._resolve(reference).read_bytes)

    async def delete(self, reference: str) -> None:
        await asyncio.to_thread(self._resolve(reference).unlink, missing_ok=True)

    def _resolve(self, reference: str) -> Path:
        path = (self.root / reference).resolve()
        if self.root.resolve() not in path.parents:
            raise ValueError(f"Reference escapes document root: {reference}")
        return path

    @staticmethod
    def _write(path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)


class LoggingNotificationSink:
    """Writes notifications to the log; stands in until a delivery channel is wired."""

    async def notify(self, user_id: str, kind: str, message: str) -> None:
        logger.info("Notification for %s [%s]: %s", user_id, kind, message)


class FernetPiiCodec:
    """Symmetric encryption of audit PII fields. Empty strings pass through."""

    def __init__(self, key: str | bytes):
        if not key:
            raise ValueError("pii_encryption_key is not configured")
        self._fernet = Fernet(key)

    def encrypt(self, value: str) -> str:
        if not value:
            return value
        return self._fernet.encrypt(value.encode()).decode()

    def decrypt(self, value: str) -> str:
        if not value:
            return value
        try:
            return self._fernet.decrypt(value.encode()).decode()
        except InvalidToken as exc:
            raise ValueError("Audit field could not be decrypted") from exc


class NullPiiCodec:
    def encrypt(self, value: str) -> str:
        return value

    def decrypt(self, value: str) -> str:
        return value


async def notify_quietly(sink: NotificationSink, user_id: str, kind: str, message: str) -> None:
    """Fire-and-forget delivery: a failing sink is logged, never raised."""
    try:
        await sink.notify(user_id, kind, message)
    except Exception:
        logger.exception("Notification %s for %s failed", kind, user_id)
