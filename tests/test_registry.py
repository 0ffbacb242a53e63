"""Tests for room creation, lookup and teardown in the registry."""

import asyncio

import pytest

from xoroom.exceptions import CodeInUse, RoomNotFound


async def _create(registry, code, conn_id="ana", username="Ana"):
    async with registry.create_or_reject(code, "secret", conn_id, username, None) as room:
        return room


def test_create_seats_creator_as_x(registry):
    room = asyncio.run(_create(registry, "ABC123"))
    assert "ABC123" in registry
    assert room.players() == [{"username": "Ana", "symbol": "X"}]
    assert not room.lock.locked()


def test_create_on_occupied_code_is_rejected(registry):
    async def scenario():
        await _create(registry, "ABC123")
        with pytest.raises(CodeInUse):
            await _create(registry, "ABC123", conn_id="beto", username="Beto")

    asyncio.run(scenario())
    assert len(registry) == 1


def test_concurrent_creates_on_same_code_admit_one(registry):
    async def attempt(conn_id):
        try:
            await _create(registry, "RACE", conn_id=conn_id, username=conn_id)
            return True
        except CodeInUse:
            return False

    async def scenario():
        return await asyncio.gather(*(attempt(f"p{i}") for i in range(5)))

    assert sorted(asyncio.run(scenario())) == [False] * 4 + [True]


def test_removed_room_frees_its_code(registry):
    async def scenario():
        room = await _create(registry, "ABC123")
        async with registry.acquire("ABC123") as live:
            live.remove_participant("ana")
            assert await registry.remove_if_empty(live) is True
        assert room.closed
        assert await registry.lookup("ABC123") is None
        again = await _create(registry, "ABC123", conn_id="beto", username="Beto")
        assert again is not room

    asyncio.run(scenario())


def test_emptied_room_is_replaced_by_new_create(registry):
    async def scenario():
        old = await _create(registry, "ABC123")
        old.remove_participant("ana")
        fresh = await _create(registry, "ABC123", conn_id="beto", username="Beto")
        assert old.closed
        # the late cleanup of the old room must not evict the new one
        assert await registry.remove_if_empty(old) is False
        assert await registry.lookup("ABC123") is fresh

    asyncio.run(scenario())


def test_room_with_participants_is_not_removed(registry):
    async def scenario():
        room = await _create(registry, "ABC123")
        assert await registry.remove_if_empty(room) is False
        assert "ABC123" in registry

    asyncio.run(scenario())


def test_acquire_missing_or_closed_room(registry):
    async def scenario():
        with pytest.raises(RoomNotFound):
            async with registry.acquire("NOPE"):
                pass
        room = await _create(registry, "ABC123")
        room.closed = True
        with pytest.raises(RoomNotFound):
            async with registry.acquire("ABC123"):
                pass

    asyncio.run(scenario())
