import asyncio

import pytest

from hotel_service.bookings import BookingCoordinator
from hotel_service.dashboard import DashboardAggregator
from hotel_service.db import create_all, get_engine, get_session
from hotel_service.errors import NotFound, RoomUnavailable
from hotel_service.schemas import BookingStatus, CreateBooking, RoomSearch, RoomType, UpdateRoom
from hotel_service.inventory import RoomInventory
from hotel_service.seed import seed_demo_data
from hotel_service.sql_repositories import SqlBookingRepository, SqlRoomRepository, SqlUserRepository


@pytest.fixture
async def sql_repos():
    engine = get_engine("sqlite+aiosqlite://")
    await create_all(engine)
    sessions = get_session(engine)
    yield SqlUserRepository(sessions), SqlRoomRepository(sessions), SqlBookingRepository(sessions)
    await engine.dispose()


@pytest.fixture
async def seeded(sql_repos, clock):
    users, rooms, bookings = sql_repos
    assert await seed_demo_data(users, rooms, bookings, clock)
    return sql_repos


async def test_seed_only_once(seeded, clock):
    users, rooms, bookings = seeded
    assert not await seed_demo_data(users, rooms, bookings, clock)
    assert await users.count() == 2
    assert await rooms.count() == 40
    assert await bookings.count() == 1


async def test_rows_round_trip(seeded, clock):
    users, rooms, bookings = seeded

    admin = await users.get_by_email("admin@hotel.com")
    assert admin.id == "admin-1"
    assert admin.created_at == clock.now_utc()

    room = await rooms.get("room-37")
    assert room.room_number == "407"
    assert room.is_available is False
    assert "Kitchen" in room.amenities

    booking = await bookings.get("booking-1")
    assert booking.status == BookingStatus.confirmed
    assert booking.total_amount == 2500
    assert booking.check_in_date.tzinfo is not None


async def test_list_preserves_insertion_order(seeded, clock):
    _, rooms, _ = seeded
    listed = await rooms.list()
    assert [r.id for r in listed] == [f"room-{i}" for i in range(1, 41)]


async def test_curated_listing_over_sql(seeded, clock, publisher):
    _, rooms, _ = seeded
    inventory = RoomInventory(rooms, clock, publisher)
    picked = await inventory.list_rooms(RoomSearch())
    assert [r.room_number for r in picked] == ["101", "201", "301", "401"]


async def test_booking_lifecycle_over_sql(seeded, clock, publisher):
    _, rooms, bookings = seeded
    coordinator = BookingCoordinator(bookings, rooms, clock, publisher)
    dashboard = DashboardAggregator(bookings, rooms, coordinator, clock)

    booking = await coordinator.create_booking(
        "customer-1",
        CreateBooking(
            room_id="room-1",
            check_in_date="2026-04-15",
            check_out_date="2026-04-20",
            number_of_guests=1,
        ),
    )
    assert booking.total_amount == 600
    assert (await rooms.get("room-1")).is_available is False

    confirmed = await coordinator.confirm_booking(booking.id)
    assert (await bookings.get(booking.id)).status == BookingStatus.confirmed
    assert confirmed.status == BookingStatus.confirmed

    stats = await dashboard.compute_stats()
    assert stats.total_bookings == 2
    assert stats.total_revenue == 3100
    assert stats.available_rooms == 38

    await coordinator.delete_booking(booking.id)
    assert await bookings.get(booking.id) is None
    assert (await rooms.get("room-1")).is_available is True


async def test_delete_room_leaves_bookings(seeded):
    _, rooms, bookings = seeded
    assert await rooms.delete("room-37")
    assert not await rooms.delete("room-37")
    assert not await rooms.set_availability("room-37", True)
    assert (await bookings.get("booking-1")).room_id == "room-37"


async def test_room_edits_racing_bookings_keep_hold(seeded, clock, publisher):
    _, rooms, bookings = seeded
    coordinator = BookingCoordinator(bookings, rooms, clock, publisher)
    inventory = RoomInventory(rooms, clock, publisher)
    room_ids = [f"room-{i}" for i in range(1, 31)]

    def stay(room_id):
        return CreateBooking(
            room_id=room_id,
            check_in_date="2026-04-15",
            check_out_date="2026-04-16",
            number_of_guests=1,
        )

    for room_id in room_ids:
        await asyncio.gather(
            inventory.update_room(room_id, UpdateRoom(description="Refreshed", price=130)),
            coordinator.create_booking("customer-1", stay(room_id)),
        )

    for room_id in room_ids:
        room = await rooms.get(room_id)
        assert room.is_available is False
        assert room.description == "Refreshed"
        with pytest.raises(RoomUnavailable):
            await coordinator.create_booking("customer-2", stay(room_id))

    assert await bookings.count() == 1 + len(room_ids)


async def test_confirm_racing_delete_over_sql(seeded, clock, publisher):
    _, rooms, bookings = seeded
    coordinator = BookingCoordinator(bookings, rooms, clock, publisher)

    deleted, confirmed = await asyncio.gather(
        coordinator.delete_booking("booking-1"),
        coordinator.confirm_booking("booking-1"),
        return_exceptions=True,
    )

    assert deleted is None
    assert isinstance(confirmed, NotFound)
    assert await bookings.get("booking-1") is None
    assert publisher.types() == ["booking.deleted"]


async def test_updates_report_missing_rows(seeded):
    _, rooms, bookings = seeded
    booking = await bookings.get("booking-1")
    await bookings.delete("booking-1")

    assert await bookings.update(booking) is False
    assert await rooms.update("room-999", {"price": 10.0}) is False
    assert await rooms.update("room-1", {"type": RoomType.suite}) is True
    assert (await rooms.get("room-1")).type == RoomType.suite
