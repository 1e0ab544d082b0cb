import asyncio
import pytest

from authvault.errors import LockQueueFullError
from authvault.locks import FileLock, FileLockRegistry


@pytest.mark.asyncio
async def test_lock_grants_in_arrival_order():
    lock = FileLock("/tmp/fifo.json")
    order = []
    first = await lock.acquire()

    async def worker(i):
        async with lock.hold():
            order.append(i)
            await asyncio.sleep(0)

    tasks = [asyncio.create_task(worker(i)) for i in range(5)]
    await asyncio.sleep(0)
    assert lock.pending == 5

    first.release()
    await asyncio.gather(*tasks)
    assert order == [0, 1, 2, 3, 4]
    assert not lock.locked
    assert lock.pending == 0


@pytest.mark.asyncio
async def test_release_hands_off_to_waiter():
    lock = FileLock("/tmp/handoff.json")
    held = await lock.acquire()
    waiter = asyncio.create_task(lock.acquire())
    await asyncio.sleep(0)

    held.release()
    # a newcomer must queue behind the woken waiter
    assert lock.locked
    late = asyncio.create_task(lock.acquire())
    await asyncio.sleep(0)
    assert not late.done()

    (await waiter).release()
    (await late).release()
    assert not lock.locked


@pytest.mark.asyncio
async def test_double_release_is_noop():
    lock = FileLock("/tmp/double.json")
    handle = await lock.acquire()
    handle.release()
    handle.release()
    assert handle.released
    assert not lock.locked

    again = await lock.acquire()
    assert lock.locked
    again.release()


@pytest.mark.asyncio
async def test_bounded_queue_rejects_overflow():
    lock = FileLock("/tmp/bounded.json", max_pending=1)
    held = await lock.acquire()
    queued = asyncio.create_task(lock.acquire())
    await asyncio.sleep(0)

    with pytest.raises(LockQueueFullError):
        await lock.acquire()

    held.release()
    (await queued).release()
    assert not lock.locked


@pytest.mark.asyncio
async def test_unbounded_queue_by_default():
    lock = FileLock("/tmp/unbounded.json")
    assert lock.max_pending is None
    held = await lock.acquire()
    tasks = [asyncio.create_task(lock.acquire()) for _ in range(2000)]
    await asyncio.sleep(0)
    assert lock.pending == 2000

    held.release()
    for t in tasks:
        (await t).release()
    assert not lock.locked


@pytest.mark.asyncio
async def test_cancelled_waiter_leaves_queue():
    lock = FileLock("/tmp/cancel.json")
    held = await lock.acquire()
    waiter = asyncio.create_task(lock.acquire())
    await asyncio.sleep(0)
    assert lock.pending == 1

    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter
    assert lock.pending == 0

    held.release()
    assert not lock.locked


@pytest.mark.asyncio
async def test_hold_releases_on_error():
    lock = FileLock("/tmp/err.json")
    with pytest.raises(RuntimeError):
        async with lock.hold():
            raise RuntimeError("boom")
    assert not lock.locked


def test_registry_reuses_normalized_paths(tmp_path):
    reg = FileLockRegistry()
    a = reg.lock_for(tmp_path / "sub" / ".." / "creds.json")
    b = reg.lock_for(str(tmp_path / "creds.json"))
    assert a is b
    assert len(reg) == 1
    assert tmp_path / "creds.json" in reg
    assert 42 not in reg

    c = reg.lock_for(tmp_path / "other.json")
    assert c is not a
    assert len(reg) == 2


def test_registry_passes_queue_depth(tmp_path):
    reg = FileLockRegistry(max_pending=3)
    assert reg.lock_for(tmp_path / "x.json").max_pending == 3
