import logging
import uuid
from typing import List

from .clock import Clock
from .errors import Conflict, NotFound
from .rabbitmq import RabbitPublisher
from .repositories import RoomRepository
from .schemas import CreateRoom, Room, RoomSearch, RoomType, UpdateRoom

logger = logging.getLogger(__name__)

DEFAULT_AMENITIES = ["WiFi", "TV", "Air Conditioning"]
DEFAULT_IMAGE = "https://images.unsplash.com/photo-1631049307264-da0ec9d70304?w=500&h=300&fit=crop"


def default_description(room_type: RoomType) -> str:
    return f"Comfortable {room_type.value} room with modern amenities"


def representative_rooms(rooms: List[Room]) -> List[Room]:
    """First available room of each type, in type declaration order."""
    picked = []
    for room_type in RoomType:
        for room in rooms:
            if room.type == room_type and room.is_available:
                picked.append(room)
                break
    return picked


def filter_rooms(rooms: List[Room], search: RoomSearch) -> List[Room]:
    if search.is_empty():
        return representative_rooms(rooms)

    result = rooms
    if search.type is not None:
        result = [r for r in result if r.type.value == search.type]
    if search.min_price is not None:
        result = [r for r in result if r.price >= search.min_price]
    if search.max_price is not None:
        result = [r for r in result if r.price <= search.max_price]
    if search.guests is not None:
        result = [r for r in result if r.max_occupancy >= search.guests]
    # dates only gate on the availability flag; bookings are not consulted
    if search.check_in is not None or search.check_out is not None:
        result = [r for r in result if r.is_available]
    return result


class RoomInventory:
    def __init__(self, rooms: RoomRepository, clock: Clock, publisher: RabbitPublisher):
        self._rooms = rooms
        self._clock = clock
        self._publisher = publisher

    async def list_rooms(self, search: RoomSearch) -> List[Room]:
        return filter_rooms(await self._rooms.list(), search)

    async def get_room(self, room_id: str) -> Room:
        room = await self._rooms.get(room_id)
        if not room:
            raise NotFound("Room not found")
        return room

    async def create_room(self, data: CreateRoom) -> Room:
        if await self._rooms.get_by_number(data.room_number):
            raise Conflict(f"Room {data.room_number} already exists")

        now = self._clock.now_utc()
        room = Room(
            id=str(uuid.uuid4()),
            room_number=data.room_number,
            type=data.type,
            price=data.price,
            amenities=data.amenities if data.amenities is not None else list(DEFAULT_AMENITIES),
            max_occupancy=data.max_occupancy,
            is_available=data.is_available,
            description=data.description or default_description(data.type),
            images=data.images if data.images else [DEFAULT_IMAGE],
            created_at=now,
            updated_at=now,
        )
        await self._rooms.add(room)
        logger.info("created room %s (#%s, %s)", room.id, room.room_number, room.type.value)

        await self._publisher.emit(
            "room.created",
            {"room_id": room.id, "room_number": room.room_number, "type": room.type.value},
            occurred_at=now,
        )
        return room

    async def update_room(self, room_id: str, data: UpdateRoom) -> Room:
        room = await self.get_room(room_id)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        new_number = changes.get("room_number")
        if new_number and new_number != room.room_number:
            clash = await self._rooms.get_by_number(new_number)
            if clash and clash.id != room.id:
                raise Conflict(f"Room {new_number} already exists")

        # the availability flag belongs to the booking coordinator unless sent explicitly
        now = self._clock.now_utc()
        if not await self._rooms.update(room_id, {**changes, "updated_at": now}):
            raise NotFound("Room not found")
        room = await self.get_room(room_id)
        logger.info("updated room %s: %s", room.id, sorted(changes))

        await self._publisher.emit(
            "room.updated",
            {"room_id": room.id, "fields": sorted(changes)},
            occurred_at=now,
        )
        return room

    async def delete_room(self, room_id: str) -> None:
        # bookings that reference the room are left in place
        if not await self._rooms.delete(room_id):
            raise NotFound("Room not found")
        logger.info("deleted room %s", room_id)

        await self._publisher.emit(
            "room.deleted", {"room_id": room_id}, occurred_at=self._clock.now_utc()
        )
