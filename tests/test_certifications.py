"""Certification ledger."""

import pytest

from sellertrust.errors import (
    CertificationNotFound,
    InvalidDocument,
    InvalidStateTransition,
    PersistenceFailure,
    SellerNotFound,
    ValidationFailed,
)
from sellertrust.models import CertificationStatus
from sellertrust.schemas.certification import DocumentUpload
from sellertrust.schemas.common import Actor, RequestMetadata
from sellertrust.utils.canonical import load_snapshot

UNKNOWN = "00000000-0000-0000-0000-00000000abcd"


async def test_submit_stores_document_and_opens_pending(core, make_seller, pdf, documents):
    seller_id = await make_seller()

    cert = await core.certifications.submit(seller_id, "  ISO9001 ", pdf())

    assert cert.name == "ISO9001"
    assert cert.status is CertificationStatus.PENDING
    assert cert.reviewed_at is None
    assert cert.document_ref.startswith(f"{seller_id}/")
    assert cert.document_ref.endswith(".pdf")
    assert documents.metadata[cert.document_ref]["filename"] == "iso9001.pdf"
    assert await core.certifications.load_document(cert.certification_id) == pdf().content


@pytest.mark.parametrize(
    "document",
    [
        DocumentUpload(filename="iso.pdf", content=b""),
        DocumentUpload(filename="iso.exe", content=b"MZ"),
        DocumentUpload(filename="iso", content=b"data"),
        DocumentUpload(filename="iso.pdf", content=b"x" * (5 * 1024 * 1024 + 1)),
    ],
    ids=["empty", "extension", "no-extension", "too-large"],
)
async def test_submit_rejects_invalid_documents(core, make_seller, documents, document):
    seller_id = await make_seller()
    with pytest.raises(InvalidDocument):
        await core.certifications.submit(seller_id, "ISO9001", document)
    assert documents.documents == {}
    assert await core.certifications.list_by_seller(seller_id) == []


async def test_extension_check_is_case_insensitive(core, make_seller):
    seller_id = await make_seller()
    cert = await core.certifications.submit(
        seller_id, "CE", DocumentUpload(filename="SCAN.JPEG", content=b"\xff\xd8")
    )
    assert cert.document_ref.endswith(".jpeg")


async def test_submit_requires_name(core, make_seller, pdf):
    seller_id = await make_seller()
    with pytest.raises(ValidationFailed):
        await core.certifications.submit(seller_id, "   ", pdf())


async def test_submit_for_unknown_seller(core, pdf, documents):
    with pytest.raises(SellerNotFound):
        await core.certifications.submit(UNKNOWN, "ISO9001", pdf())
    assert documents.documents == {}


async def test_failed_submission_discards_document(core, make_seller, pdf, documents, monkeypatch):
    seller_id = await make_seller()

    async def failing_apply(db, seller_id, **kwargs):
        raise PersistenceFailure("database went away")

    monkeypatch.setattr(core.verification, "apply", failing_apply)
    with pytest.raises(PersistenceFailure):
        await core.certifications.submit(seller_id, "ISO9001", pdf())

    assert documents.documents == {}
    assert await core.certifications.list_by_seller(seller_id) == []


async def test_review_is_one_way(core, make_seller, pdf):
    seller_id = await make_seller()
    cert = await core.certifications.submit(seller_id, "ISO9001", pdf())
    await core.certifications.review(cert.certification_id, CertificationStatus.APPROVED)

    with pytest.raises(InvalidStateTransition) as excinfo:
        await core.certifications.review(
            cert.certification_id, CertificationStatus.REJECTED, "changed my mind"
        )
    assert excinfo.value.current == "Approved"

    stored = await core.certifications.get(cert.certification_id)
    assert stored.status is CertificationStatus.APPROVED


async def test_review_records_notes_and_time(core, make_seller, pdf):
    seller_id = await make_seller()
    cert = await core.certifications.submit(seller_id, "ISO9001", pdf())

    reviewed = await core.certifications.review(
        cert.certification_id, "Rejected", "scan is unreadable"
    )

    assert reviewed.status is CertificationStatus.REJECTED
    assert reviewed.admin_notes == "scan is unreadable"
    assert reviewed.reviewed_at is not None


async def test_reject_requires_notes(core, make_seller, pdf):
    seller_id = await make_seller()
    cert = await core.certifications.submit(seller_id, "ISO9001", pdf())
    with pytest.raises(ValidationFailed):
        await core.certifications.review(cert.certification_id, CertificationStatus.REJECTED)


async def test_review_to_pending_is_rejected(core, make_seller, pdf):
    seller_id = await make_seller()
    cert = await core.certifications.submit(seller_id, "ISO9001", pdf())
    with pytest.raises(ValidationFailed):
        await core.certifications.review(cert.certification_id, CertificationStatus.PENDING)


async def test_review_unknown_certification(core):
    with pytest.raises(CertificationNotFound):
        await core.certifications.review(UNKNOWN, CertificationStatus.APPROVED)


async def test_review_audit_and_notification(core, make_seller, pdf, audit_rows, notifier):
    seller_id = await make_seller()
    cert = await core.certifications.submit(seller_id, "ISO9001", pdf())

    await core.certifications.review(
        cert.certification_id,
        CertificationStatus.APPROVED,
        actor=Actor(actor_id="admin-9", name="Lee", role="Admin"),
        metadata=RequestMetadata(ip_address="10.0.0.5", user_agent="pytest"),
    )

    (entry,) = await audit_rows(seller_id, "CertificationReviewed")
    assert entry.entity_name == "Certification"
    assert entry.ip_address == "10.0.0.5"
    assert load_snapshot(entry.before_snapshot)[2]["status"] == "Pending"
    assert load_snapshot(entry.after_snapshot)[2]["status"] == "Approved"
    assert notifier.kinds_for(seller_id) == ["certification_status", "verification_status"]


async def test_listing(core, make_seller, pdf):
    first = await make_seller()
    second = await make_seller()
    a = await core.certifications.submit(first, "ISO9001", pdf())
    await core.certifications.submit(first, "CE", pdf())
    c = await core.certifications.submit(second, "RoHS", pdf())
    await core.certifications.review(a.certification_id, CertificationStatus.APPROVED)

    assert {x.name for x in await core.certifications.list_by_seller(first)} == {"ISO9001", "CE"}
    pending = await core.certifications.list_by_status(CertificationStatus.PENDING)
    assert [x.name for x in pending] == ["CE", "RoHS"]
    assert c.certification_id in {x.certification_id for x in pending}
    approved = await core.certifications.list_by_status(CertificationStatus.APPROVED)
    assert [x.certification_id for x in approved] == [a.certification_id]


async def test_failing_notifier_does_not_fail_review(core, make_seller, pdf, notifier, monkeypatch):
    seller_id = await make_seller()
    cert = await core.certifications.submit(seller_id, "ISO9001", pdf())

    async def boom(user_id, kind, message):
        raise ConnectionError("smtp down")

    monkeypatch.setattr(notifier, "notify", boom)
    reviewed = await core.certifications.review(cert.certification_id, CertificationStatus.APPROVED)
    assert reviewed.status is CertificationStatus.APPROVED
