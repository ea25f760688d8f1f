"""Stock collaborator implementations."""

import pytest

from sellertrust.collaborators import LocalDocumentStore, NullPiiCodec, notify_quietly


async def test_local_store_round_trip(tmp_path):
    store = LocalDocumentStore(tmp_path)
    reference = await store.save(b"%PDF-1.7", {"seller_id": "seller-1", "extension": ".pdf"})

    assert reference.startswith("seller-1/")
    assert reference.endswith(".pdf")
    assert (tmp_path / reference).read_bytes() == b"%PDF-1.7"
    assert await store.load(reference) == b"%PDF-1.7"


async def test_local_store_refuses_escaping_reference(tmp_path):
    store = LocalDocumentStore(tmp_path / "docs")
    (tmp_path / "secret.txt").write_bytes(b"nope")
    with pytest.raises(ValueError):
        await store.load("../secret.txt")


async def test_local_store_refuses_escaping_seller_dir(tmp_path):
    store = LocalDocumentStore(tmp_path / "docs")
    with pytest.raises(ValueError):
        await store.save(b"%PDF", {"seller_id": "../outside", "extension": ".pdf"})
    assert not (tmp_path / "outside").exists()
    assert list(tmp_path.rglob("*.pdf")) == []


async def test_local_store_delete(tmp_path):
    store = LocalDocumentStore(tmp_path)
    reference = await store.save(b"%PDF", {"seller_id": "seller-1", "extension": ".pdf"})
    await store.delete(reference)
    assert not (tmp_path / reference).exists()
    await store.delete(reference)


async def test_notify_quietly_swallows_sink_failure(caplog):
    class BrokenSink:
        async def notify(self, user_id, kind, message):
            raise ConnectionError("smtp down")

    await notify_quietly(BrokenSink(), "seller-1", "premium_status", "hi")
    assert "premium_status" in caplog.text


def test_null_codec_is_identity():
    codec = NullPiiCodec()
    assert codec.decrypt(codec.encrypt("Dana")) == "Dana"
