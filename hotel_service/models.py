from sqlalchemy import Boolean, Column, DateTime, Float, Integer, JSON, String

from .db import Base


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    role = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class RoomRow(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True)
    room_id = Column(String, unique=True, nullable=False, index=True)
    room_number = Column(String, unique=True, nullable=False)
    type = Column(String, nullable=False, index=True)
    price = Column(Float, nullable=False)
    amenities = Column(JSON, nullable=False)
    max_occupancy = Column(Integer, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    description = Column(String, nullable=False, default="")
    images = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class BookingRow(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True)
    booking_id = Column(String, unique=True, nullable=False, index=True)

    user_id = Column(String, nullable=False, index=True)
    room_id = Column(String, nullable=False, index=True)  # no FK: rooms may be deleted under a booking

    check_in_date = Column(DateTime(timezone=True), nullable=False)
    check_out_date = Column(DateTime(timezone=True), nullable=False)
    number_of_guests = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False)

    status = Column(String, nullable=False, index=True)  # pending/confirmed/cancelled/completed
    special_requests = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
