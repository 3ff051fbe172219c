"""
Demo inventory: ten rooms per type numbered ``<floor><nn>``, an admin and a
customer account, and one confirmed booking holding deluxe room 407.
"""

import logging
from datetime import datetime, timezone

from .clock import Clock
from .repositories import BookingRepository, RoomRepository, UserRepository
from .schemas import Booking, BookingStatus, Role, Room, RoomType, User
from .security import hash_password

logger = logging.getLogger(__name__)

ROOMS_PER_TYPE = 10

ROOM_TEMPLATES = [
    {
        "type": RoomType.single,
        "price": 120,
        "amenities": ["WiFi", "TV", "Air Conditioning", "Mini Bar"],
        "max_occupancy": 1,
        "description": "Comfortable single room perfect for solo travelers",
        "images": ["https://images.unsplash.com/photo-1631049307264-da0ec9d70304?w=500&h=300&fit=crop"],
        "floor": 1,
    },
    {
        "type": RoomType.double,
        "price": 180,
        "amenities": ["WiFi", "TV", "Air Conditioning", "Mini Bar", "Room Service"],
        "max_occupancy": 2,
        "description": "Spacious double room with modern amenities",
        "images": ["https://images.unsplash.com/photo-1611892440504-42a792e24d32?w=500&h=300&fit=crop"],
        "floor": 2,
    },
    {
        "type": RoomType.suite,
        "price": 350,
        "amenities": ["WiFi", "TV", "Air Conditioning", "Mini Bar", "Room Service", "Jacuzzi", "Balcony"],
        "max_occupancy": 4,
        "description": "Luxury suite with premium amenities and stunning views",
        "images": ["https://images.unsplash.com/photo-1582719478250-c89cae4dc85b?w=500&h=300&fit=crop"],
        "floor": 3,
    },
    {
        "type": RoomType.deluxe,
        "price": 500,
        "amenities": [
            "WiFi", "TV", "Air Conditioning", "Mini Bar", "Room Service", "Jacuzzi", "Balcony", "Kitchen",
        ],
        "max_occupancy": 6,
        "description": "Premium deluxe room with all luxury amenities",
        "images": ["https://images.unsplash.com/photo-1590490360182-c33d57733427?w=500&h=300&fit=crop"],
        "floor": 4,
    },
]

DEMO_USERS = [
    ("admin-1", "admin@hotel.com", "admin123", "Admin", "User", Role.admin),
    ("customer-1", "john@example.com", "password123", "John", "Doe", Role.customer),
]

HELD_ROOM_ID = "room-37"


def build_rooms(now: datetime) -> list[Room]:
    rooms = []
    counter = 1
    for template in ROOM_TEMPLATES:
        for i in range(1, ROOMS_PER_TYPE + 1):
            rooms.append(
                Room(
                    id=f"room-{counter}",
                    room_number=f"{template['floor']}{i:02d}",
                    type=template["type"],
                    price=template["price"],
                    amenities=list(template["amenities"]),
                    max_occupancy=template["max_occupancy"],
                    is_available=f"room-{counter}" != HELD_ROOM_ID,
                    description=template["description"],
                    images=list(template["images"]),
                    created_at=now,
                    updated_at=now,
                )
            )
            counter += 1
    return rooms


def build_booking(now: datetime) -> Booking:
    return Booking(
        id="booking-1",
        user_id="customer-1",
        room_id=HELD_ROOM_ID,
        check_in_date=datetime(2024, 1, 15, tzinfo=timezone.utc),
        check_out_date=datetime(2024, 1, 20, tzinfo=timezone.utc),
        number_of_guests=2,
        total_amount=2500,
        status=BookingStatus.confirmed,
        created_at=now,
        updated_at=now,
    )


async def seed_demo_data(
    users: UserRepository,
    rooms: RoomRepository,
    bookings: BookingRepository,
    clock: Clock,
) -> bool:
    """Populate empty stores. Returns False when anything is already there."""
    if await users.count() or await rooms.count() or await bookings.count():
        logger.info("stores already populated; skipping demo data")
        return False

    now = clock.now_utc()
    for user_id, email, password, first, last, role in DEMO_USERS:
        await users.add(
            User(
                id=user_id,
                email=email,
                password_hash=hash_password(password),
                first_name=first,
                last_name=last,
                role=role,
                created_at=now,
                updated_at=now,
            )
        )

    for room in build_rooms(now):
        await rooms.add(room)

    await bookings.add(build_booking(now))

    logger.info("seeded demo data: %d users, %d rooms", len(DEMO_USERS), ROOMS_PER_TYPE * len(ROOM_TEMPLATES))
    return True
