from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy import delete, func, select, update

from .models import BookingRow, RoomRow, UserRow
from .schemas import Booking, BookingStatus, Role, Room, RoomType, User


def _aware(dt: datetime) -> datetime:
    # sqlite hands timezone-aware columns back naive
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _user(row: UserRow) -> User:
    return User(
        id=row.user_id,
        email=row.email,
        password_hash=row.password,
        first_name=row.first_name,
        last_name=row.last_name,
        role=Role(row.role),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _room(row: RoomRow) -> Room:
    return Room(
        id=row.room_id,
        room_number=row.room_number,
        type=RoomType(row.type),
        price=row.price,
        amenities=list(row.amenities or []),
        max_occupancy=row.max_occupancy,
        is_available=row.is_available,
        description=row.description or "",
        images=list(row.images or []),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _booking(row: BookingRow) -> Booking:
    return Booking(
        id=row.booking_id,
        user_id=row.user_id,
        room_id=row.room_id,
        check_in_date=_aware(row.check_in_date),
        check_out_date=_aware(row.check_out_date),
        number_of_guests=row.number_of_guests,
        total_amount=row.total_amount,
        status=BookingStatus(row.status),
        special_requests=row.special_requests,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


class SqlUserRepository:
    def __init__(self, sessions):
        self._sessions = sessions

    async def get(self, user_id: str) -> Optional[User]:
        async with self._sessions() as db:
            res = await db.execute(select(UserRow).where(UserRow.user_id == user_id))
            row = res.scalar_one_or_none()
            return _user(row) if row else None

    async def get_by_email(self, email: str) -> Optional[User]:
        async with self._sessions() as db:
            res = await db.execute(select(UserRow).where(UserRow.email == email))
            row = res.scalar_one_or_none()
            return _user(row) if row else None

    async def add(self, user: User) -> None:
        async with self._sessions() as db:
            db.add(
                UserRow(
                    user_id=user.id,
                    email=user.email,
                    password=user.password_hash,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    role=user.role.value,
                    created_at=user.created_at,
                    updated_at=user.updated_at,
                )
            )
            await db.commit()

    async def count(self) -> int:
        async with self._sessions() as db:
            return await db.scalar(select(func.count()).select_from(UserRow))


class SqlRoomRepository:
    def __init__(self, sessions):
        self._sessions = sessions

    async def list(self) -> List[Room]:
        async with self._sessions() as db:
            res = await db.execute(select(RoomRow).order_by(RoomRow.id))
            return [_room(row) for row in res.scalars()]

    async def get(self, room_id: str) -> Optional[Room]:
        async with self._sessions() as db:
            res = await db.execute(select(RoomRow).where(RoomRow.room_id == room_id))
            row = res.scalar_one_or_none()
            return _room(row) if row else None

    async def get_by_number(self, room_number: str) -> Optional[Room]:
        async with self._sessions() as db:
            res = await db.execute(select(RoomRow).where(RoomRow.room_number == room_number))
            row = res.scalar_one_or_none()
            return _room(row) if row else None

    async def add(self, room: Room) -> None:
        async with self._sessions() as db:
            db.add(
                RoomRow(
                    room_id=room.id,
                    room_number=room.room_number,
                    type=room.type.value,
                    price=room.price,
                    amenities=list(room.amenities),
                    max_occupancy=room.max_occupancy,
                    is_available=room.is_available,
                    description=room.description,
                    images=list(room.images),
                    created_at=room.created_at,
                    updated_at=room.updated_at,
                )
            )
            await db.commit()

    async def update(self, room_id: str, changes: dict) -> bool:
        values = {k: v.value if isinstance(v, Enum) else v for k, v in changes.items()}
        async with self._sessions() as db:
            res = await db.execute(
                update(RoomRow).where(RoomRow.room_id == room_id).values(**values)
            )
            await db.commit()
            return res.rowcount > 0

    async def set_availability(self, room_id: str, available: bool) -> bool:
        async with self._sessions() as db:
            res = await db.execute(
                update(RoomRow).where(RoomRow.room_id == room_id).values(is_available=available)
            )
            await db.commit()
            return res.rowcount > 0

    async def delete(self, room_id: str) -> bool:
        async with self._sessions() as db:
            res = await db.execute(delete(RoomRow).where(RoomRow.room_id == room_id))
            await db.commit()
            return res.rowcount > 0

    async def count(self) -> int:
        async with self._sessions() as db:
            return await db.scalar(select(func.count()).select_from(RoomRow))


class SqlBookingRepository:
    def __init__(self, sessions):
        self._sessions = sessions

    async def list(self) -> List[Booking]:
        async with self._sessions() as db:
            res = await db.execute(select(BookingRow).order_by(BookingRow.id))
            return [_booking(row) for row in res.scalars()]

    async def list_for_user(self, user_id: str) -> List[Booking]:
        async with self._sessions() as db:
            res = await db.execute(
                select(BookingRow).where(BookingRow.user_id == user_id).order_by(BookingRow.id)
            )
            return [_booking(row) for row in res.scalars()]

    async def get(self, booking_id: str) -> Optional[Booking]:
        async with self._sessions() as db:
            res = await db.execute(select(BookingRow).where(BookingRow.booking_id == booking_id))
            row = res.scalar_one_or_none()
            return _booking(row) if row else None

    async def add(self, booking: Booking) -> None:
        async with self._sessions() as db:
            db.add(
                BookingRow(
                    booking_id=booking.id,
                    user_id=booking.user_id,
                    room_id=booking.room_id,
                    check_in_date=booking.check_in_date,
                    check_out_date=booking.check_out_date,
                    number_of_guests=booking.number_of_guests,
                    total_amount=booking.total_amount,
                    status=booking.status.value,
                    special_requests=booking.special_requests,
                    created_at=booking.created_at,
                    updated_at=booking.updated_at,
                )
            )
            await db.commit()

    async def update(self, booking: Booking) -> bool:
        async with self._sessions() as db:
            res = await db.execute(
                update(BookingRow)
                .where(BookingRow.booking_id == booking.id)
                .values(
                    status=booking.status.value,
                    special_requests=booking.special_requests,
                    updated_at=booking.updated_at,
                )
            )
            await db.commit()
            return res.rowcount > 0

    async def delete(self, booking_id: str) -> bool:
        async with self._sessions() as db:
            res = await db.execute(delete(BookingRow).where(BookingRow.booking_id == booking_id))
            await db.commit()
            return res.rowcount > 0

    async def count(self) -> int:
        async with self._sessions() as db:
            return await db.scalar(select(func.count()).select_from(BookingRow))
