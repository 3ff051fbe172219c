"""
Booking ledger and the availability coordinator.

A room carries a single availability flag rather than a calendar. Creating a
booking takes the room out of the pool and only deleting the booking puts it
back. The check-flip-append sequence in ``create_booking`` and the
remove-flip sequence in ``delete_booking`` run under one lock so two requests
can never both see the same room as free. ``confirm_booking`` takes the same
lock so it cannot confirm a booking that is being deleted. Nothing outside
this module writes the flag back during ordinary room edits.
"""

import asyncio
import logging
import math
import uuid
from datetime import datetime
from typing import List

from .clock import Clock
from .errors import InvalidDateRange, NotFound, OccupancyExceeded, RoomUnavailable
from .rabbitmq import RabbitPublisher
from .repositories import BookingRepository, RoomRepository
from .schemas import Booking, BookingStatus, BookingView, CreateBooking, Principal, Role, Room

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def count_nights(check_in: datetime, check_out: datetime) -> int:
    return math.ceil((check_out - check_in).total_seconds() / SECONDS_PER_DAY)


def validate_stay(room: Room, data: CreateBooking, today) -> None:
    if data.check_out_date <= data.check_in_date:
        raise InvalidDateRange("Check-out date must be after check-in date")
    if data.check_in_date.date() < today:
        raise InvalidDateRange("Check-in date cannot be in the past")
    if data.number_of_guests < 1:
        raise OccupancyExceeded("At least one guest is required")
    if data.number_of_guests > room.max_occupancy:
        raise OccupancyExceeded(
            f"This room can accommodate a maximum of {room.max_occupancy} guests"
        )


class BookingCoordinator:
    def __init__(
        self,
        bookings: BookingRepository,
        rooms: RoomRepository,
        clock: Clock,
        publisher: RabbitPublisher,
    ):
        self._bookings = bookings
        self._rooms = rooms
        self._clock = clock
        self._publisher = publisher
        self._lock = asyncio.Lock()

    async def create_booking(self, user_id: str, data: CreateBooking) -> Booking:
        async with self._lock:
            room = await self._rooms.get(data.room_id)
            if not room:
                raise NotFound("Room not found")
            if not room.is_available:
                raise RoomUnavailable("Room is not available")

            now = self._clock.now_utc()
            validate_stay(room, data, now.date())

            nights = count_nights(data.check_in_date, data.check_out_date)
            booking = Booking(
                id=str(uuid.uuid4()),
                user_id=user_id,
                room_id=room.id,
                check_in_date=data.check_in_date,
                check_out_date=data.check_out_date,
                number_of_guests=data.number_of_guests,
                total_amount=nights * room.price,
                status=BookingStatus.pending,
                special_requests=data.special_requests,
                created_at=now,
                updated_at=now,
            )

            await self._rooms.set_availability(room.id, False)
            try:
                await self._bookings.add(booking)
            except Exception:
                await self._rooms.set_availability(room.id, True)
                raise

        logger.info(
            "booking %s created: room %s, %d nights, total %.2f",
            booking.id, room.id, nights, booking.total_amount,
        )
        await self._publisher.emit(
            "booking.created",
            {
                "booking_id": booking.id,
                "user_id": user_id,
                "room_id": room.id,
                "check_in_date": booking.check_in_date.isoformat(),
                "check_out_date": booking.check_out_date.isoformat(),
                "total_amount": booking.total_amount,
            },
            occurred_at=now,
        )
        return booking

    async def confirm_booking(self, booking_id: str) -> Booking:
        async with self._lock:
            booking = await self._bookings.get(booking_id)
            if not booking:
                raise NotFound("Booking not found")

            now = self._clock.now_utc()
            booking.status = BookingStatus.confirmed
            booking.updated_at = now
            if not await self._bookings.update(booking):
                raise NotFound("Booking not found")

        logger.info("booking %s confirmed", booking.id)

        await self._publisher.emit(
            "booking.confirmed", {"booking_id": booking.id}, occurred_at=now
        )
        return booking

    async def delete_booking(self, booking_id: str) -> None:
        async with self._lock:
            booking = await self._bookings.get(booking_id)
            if not booking:
                raise NotFound("Booking not found")

            # a room deleted in the meantime is simply skipped
            released = await self._rooms.set_availability(booking.room_id, True)
            await self._bookings.delete(booking.id)

        logger.info(
            "booking %s deleted (was %s), room %s released=%s",
            booking.id, booking.status.value, booking.room_id, released,
        )
        await self._publisher.emit(
            "booking.deleted",
            {"booking_id": booking.id, "room_id": booking.room_id, "room_released": released},
            occurred_at=self._clock.now_utc(),
        )

    async def list_bookings(self, principal: Principal) -> List[BookingView]:
        if principal.role == Role.admin:
            bookings = await self._bookings.list()
        else:
            bookings = await self._bookings.list_for_user(principal.user_id)
        return await self.with_rooms(bookings)

    async def with_rooms(self, bookings: List[Booking]) -> List[BookingView]:
        rooms = {r.id: r for r in await self._rooms.list()}
        return [
            BookingView(**b.model_dump(), room=rooms.get(b.room_id))
            for b in bookings
        ]
