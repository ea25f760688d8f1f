"""Per-seller critical sections."""

import asyncio

from sellertrust.engine.locks import SellerLocks


async def test_same_seller_is_serialized():
    locks = SellerLocks()
    order = []

    async def worker(tag):
        async with locks.hold("seller-1"):
            order.append(f"{tag}-in")
            await asyncio.sleep(0.01)
            order.append(f"{tag}-out")

    await asyncio.gather(worker("a"), worker("b"))
    assert order == ["a-in", "a-out", "b-in", "b-out"]


async def test_different_sellers_run_concurrently():
    locks = SellerLocks()
    inside = asyncio.Event()
    release = asyncio.Event()

    async def holder():
        async with locks.hold("seller-1"):
            inside.set()
            await release.wait()

    task = asyncio.create_task(holder())
    await inside.wait()
    async with locks.hold("seller-2"):
        assert len(locks) == 2
    release.set()
    await task


async def test_registry_is_emptied():
    locks = SellerLocks()
    async with locks.hold("seller-1"):
        pass
    assert len(locks) == 0


async def test_released_on_error():
    locks = SellerLocks()
    try:
        async with locks.hold("seller-1"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    async with locks.hold("seller-1"):
        pass
    assert len(locks) == 0
