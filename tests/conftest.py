import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.pop("HOTEL_DB", None)
os.environ.pop("RABBIT_URL", None)

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from hotel_service.bookings import BookingCoordinator
from hotel_service.clock import FixedClock
from hotel_service.dashboard import DashboardAggregator
from hotel_service.identity import IdentityStore
from hotel_service.inventory import RoomInventory
from hotel_service.main import create_app
from hotel_service.repositories import (
    InMemoryBookingRepository,
    InMemoryRoomRepository,
    InMemoryUserRepository,
)
from hotel_service.schemas import CreateRoom, Principal, Role, RoomType

NOW = datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)


class RecordingPublisher:
    enabled = False

    def __init__(self):
        self.events = []

    async def connect(self):
        pass

    async def close(self):
        pass

    async def emit(self, event_type, data, occurred_at=None):
        self.events.append((event_type, data))

    def types(self):
        return [t for t, _ in self.events]


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def users():
    return InMemoryUserRepository()


@pytest.fixture
def rooms():
    return InMemoryRoomRepository()


@pytest.fixture
def bookings():
    return InMemoryBookingRepository()


@pytest.fixture
def identity(users, clock, publisher):
    return IdentityStore(users, clock, publisher)


@pytest.fixture
def inventory(rooms, clock, publisher):
    return RoomInventory(rooms, clock, publisher)


@pytest.fixture
def coordinator(bookings, rooms, clock, publisher):
    return BookingCoordinator(bookings, rooms, clock, publisher)


@pytest.fixture
def dashboard(bookings, rooms, coordinator, clock):
    return DashboardAggregator(bookings, rooms, coordinator, clock)


@pytest.fixture
def admin():
    return Principal(user_id="admin-1", email="admin@hotel.com", role=Role.admin)


@pytest.fixture
def customer():
    return Principal(user_id="customer-1", email="john@example.com", role=Role.customer)


@pytest.fixture
def make_room(inventory):
    counter = {"n": 0}

    async def _make(room_type=RoomType.double, price=120.0, max_occupancy=2, **extra):
        counter["n"] += 1
        return await inventory.create_room(
            CreateRoom(
                room_number=extra.pop("room_number", f"9{counter['n']:02d}"),
                type=room_type,
                price=price,
                max_occupancy=max_occupancy,
                **extra,
            )
        )

    return _make


@pytest.fixture
def client(clock, publisher):
    app = create_app(database_url=None, seed=True, clock=clock, publisher=publisher)
    with TestClient(app) as c:
        yield c


def _login(client, email, password):
    res = client.post("/api/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['token']}"}


@pytest.fixture
def admin_headers(client):
    return _login(client, "admin@hotel.com", "admin123")


@pytest.fixture
def customer_headers(client):
    return _login(client, "john@example.com", "password123")


@pytest.fixture
def login_as(client):
    def _as(email, password):
        return _login(client, email, password)

    return _as
