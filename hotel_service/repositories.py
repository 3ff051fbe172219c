"""
Storage seams for users, rooms and bookings.

Every repository keeps insertion order: the curated room listing picks the
first available room per type and the dashboard takes the last five bookings,
both by the order records were added. The in-memory implementations hand out
copies so callers must write changes back through ``update``. Room updates
carry only the changed fields, leaving the availability flag to the booking
coordinator unless it is named explicitly.
"""

import copy
from typing import Dict, List, Optional, Protocol

from .schemas import Booking, Room, User


class UserRepository(Protocol):
    async def get(self, user_id: str) -> Optional[User]: ...

    async def get_by_email(self, email: str) -> Optional[User]: ...

    async def add(self, user: User) -> None: ...

    async def count(self) -> int: ...


class RoomRepository(Protocol):
    async def list(self) -> List[Room]: ...

    async def get(self, room_id: str) -> Optional[Room]: ...

    async def get_by_number(self, room_number: str) -> Optional[Room]: ...

    async def add(self, room: Room) -> None: ...

    async def update(self, room_id: str, changes: dict) -> bool: ...

    async def set_availability(self, room_id: str, available: bool) -> bool: ...

    async def delete(self, room_id: str) -> bool: ...

    async def count(self) -> int: ...


class BookingRepository(Protocol):
    async def list(self) -> List[Booking]: ...

    async def list_for_user(self, user_id: str) -> List[Booking]: ...

    async def get(self, booking_id: str) -> Optional[Booking]: ...

    async def add(self, booking: Booking) -> None: ...

    async def update(self, booking: Booking) -> bool: ...

    async def delete(self, booking_id: str) -> bool: ...

    async def count(self) -> int: ...


class InMemoryUserRepository:
    def __init__(self):
        self._users: Dict[str, User] = {}

    async def get(self, user_id: str) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def get_by_email(self, email: str) -> Optional[User]:
        for user in self._users.values():
            if user.email == email:
                return user.model_copy(deep=True)
        return None

    async def add(self, user: User) -> None:
        self._users[user.id] = user.model_copy(deep=True)

    async def count(self) -> int:
        return len(self._users)


class InMemoryRoomRepository:
    def __init__(self):
        self._rooms: Dict[str, Room] = {}

    async def list(self) -> List[Room]:
        return [r.model_copy(deep=True) for r in self._rooms.values()]

    async def get(self, room_id: str) -> Optional[Room]:
        room = self._rooms.get(room_id)
        return room.model_copy(deep=True) if room else None

    async def get_by_number(self, room_number: str) -> Optional[Room]:
        for room in self._rooms.values():
            if room.room_number == room_number:
                return room.model_copy(deep=True)
        return None

    async def add(self, room: Room) -> None:
        self._rooms[room.id] = room.model_copy(deep=True)

    async def update(self, room_id: str, changes: dict) -> bool:
        room = self._rooms.get(room_id)
        if not room:
            return False
        # only the given fields; dict assignment on an existing key keeps its position
        self._rooms[room_id] = room.model_copy(update=copy.deepcopy(changes), deep=True)
        return True

    async def set_availability(self, room_id: str, available: bool) -> bool:
        room = self._rooms.get(room_id)
        if not room:
            return False
        room.is_available = available
        return True

    async def delete(self, room_id: str) -> bool:
        return self._rooms.pop(room_id, None) is not None

    async def count(self) -> int:
        return len(self._rooms)


class InMemoryBookingRepository:
    def __init__(self):
        self._bookings: Dict[str, Booking] = {}

    async def list(self) -> List[Booking]:
        return [b.model_copy(deep=True) for b in self._bookings.values()]

    async def list_for_user(self, user_id: str) -> List[Booking]:
        return [
            b.model_copy(deep=True)
            for b in self._bookings.values()
            if b.user_id == user_id
        ]

    async def get(self, booking_id: str) -> Optional[Booking]:
        booking = self._bookings.get(booking_id)
        return booking.model_copy(deep=True) if booking else None

    async def add(self, booking: Booking) -> None:
        self._bookings[booking.id] = booking.model_copy(deep=True)

    async def update(self, booking: Booking) -> bool:
        if booking.id not in self._bookings:
            return False
        self._bookings[booking.id] = booking.model_copy(deep=True)
        return True

    async def delete(self, booking_id: str) -> bool:
        return self._bookings.pop(booking_id, None) is not None

    async def count(self) -> int:
        return len(self._bookings)
