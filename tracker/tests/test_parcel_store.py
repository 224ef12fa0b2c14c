"""
Tests for ParcelStore.

Covers the add/get/delete cycle, status-guarded address changes and deletes,
and lookups by client against an in-memory SQLite database.
"""

import pytest
from sqlalchemy.exc import NoResultFound

from tracker.app.models.parcel_enums import ParcelStatus

NOT_REGISTERED = [ParcelStatus.SENT.value, ParcelStatus.DELIVERED.value, "lost"]


# TEST 1: Add, Get, Delete
@pytest.mark.asyncio
async def test_add_get_delete(store, make_parcel):
    """A stored parcel reads back equal and is gone after delete."""
    parcel = make_parcel()

    number = await store.add(parcel)
    assert number > 0

    stored = await store.get(number)
    parcel.number = number
    assert stored == parcel

    assert await store.delete(number) is True

    with pytest.raises(NoResultFound):
        await store.get(number)


# TEST 2: Get missing parcel
@pytest.mark.asyncio
async def test_get_never_created(store):
    """Get on an unknown number raises NoResultFound."""
    with pytest.raises(NoResultFound):
        await store.get(424242)


# TEST 3: Numbers are assigned by storage
@pytest.mark.asyncio
async def test_add_assigns_distinct_numbers(store, make_parcel):
    parcel = make_parcel()
    parcel.number = 777

    first = await store.add(parcel)
    second = await store.add(parcel)

    assert first != second
    assert (await store.get(first)).number == first


# TEST 4: Set address on registered parcel
@pytest.mark.asyncio
async def test_set_address(store, make_parcel):
    """Address changes while the parcel is registered."""
    number = await store.add(make_parcel())

    new_address = "new test address"
    assert await store.set_address(number, new_address) is True

    stored = await store.get(number)
    assert stored.address == new_address


# TEST 5: Set address on a parcel that is no longer registered
@pytest.mark.asyncio
@pytest.mark.parametrize("status", NOT_REGISTERED)
async def test_set_address_after_registration_is_ignored(store, make_parcel, status):
    """Address stays the same once the parcel has left the registered status."""
    number = await store.add(make_parcel())
    await store.set_status(number, status)

    assert await store.set_address(number, "somewhere else") is False

    stored = await store.get(number)
    assert stored.address == "test"
    assert stored.status == status


# TEST 6: Set address on missing parcel
@pytest.mark.asyncio
async def test_set_address_missing_parcel(store):
    """No error and no row affected for an unknown number."""
    assert await store.set_address(424242, "nowhere") is False


# TEST 7: Set status
@pytest.mark.asyncio
async def test_set_status(store, make_parcel):
    number = await store.add(make_parcel())

    assert await store.set_status(number, ParcelStatus.SENT.value) is True

    stored = await store.get(number)
    assert stored.status == ParcelStatus.SENT.value


# TEST 8: Set status accepts opaque values
@pytest.mark.asyncio
async def test_set_status_accepts_any_string(store, make_parcel):
    number = await store.add(make_parcel())

    await store.set_status(number, "lost")

    assert (await store.get(number)).status == "lost"


# TEST 9: Set status on missing parcel
@pytest.mark.asyncio
async def test_set_status_missing_parcel(store):
    assert await store.set_status(424242, ParcelStatus.SENT.value) is False


# TEST 10: Delete a parcel that is no longer registered
@pytest.mark.asyncio
@pytest.mark.parametrize("status", NOT_REGISTERED)
async def test_delete_unregistered_parcel_is_kept(store, make_parcel, status):
    """Delete leaves a sent, delivered or otherwise moved parcel in place."""
    parcel = make_parcel()
    number = await store.add(parcel)
    await store.set_status(number, status)

    assert await store.delete(number) is False

    stored = await store.get(number)
    assert stored.number == number
    assert stored.status == status


# TEST 11: Delete missing parcel
@pytest.mark.asyncio
async def test_delete_missing_parcel(store):
    assert await store.delete(424242) is False


# TEST 12: Get by client
@pytest.mark.asyncio
async def test_get_by_client(store, make_parcel, rng):
    """All parcels of a client come back, nothing else."""
    client = rng.randint(1, 10_000_000)
    parcels = [make_parcel(client) for _ in range(3)]

    # Parcel of another client must not show up
    await store.add(make_parcel(client + 1))

    by_number = {}
    for parcel in parcels:
        parcel.number = await store.add(parcel)
        by_number[parcel.number] = parcel

    stored = await store.get_by_client(client)

    assert len(stored) == 3
    assert {p.number for p in stored} == set(by_number)
    for parcel in stored:
        assert parcel == by_number[parcel.number]


# TEST 13: Get by client with no parcels
@pytest.mark.asyncio
async def test_get_by_client_empty(store, rng):
    assert await store.get_by_client(rng.randint(1, 10_000_000)) == []
