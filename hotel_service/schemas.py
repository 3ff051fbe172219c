from datetime import date, datetime, time, timezone
from enum import Enum
from typing import List, Optional

from dateutil import parser
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    admin = "admin"
    customer = "customer"


class RoomType(str, Enum):
    single = "single"
    double = "double"
    suite = "suite"
    deluxe = "deluxe"


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


def to_utc(value) -> datetime:
    """Accepts ISO strings, dates and datetimes; naive values are taken as UTC."""
    if isinstance(value, str):
        value = parser.isoparse(value.strip())
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if not isinstance(value, datetime):
        raise ValueError("expected an ISO-8601 date or datetime")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---- Records ----

class User(CamelModel):
    id: str = Field(alias="_id")
    email: str
    password_hash: str = Field(exclude=True)
    first_name: str
    last_name: str
    role: Role = Role.customer
    created_at: datetime
    updated_at: datetime


class Room(CamelModel):
    id: str = Field(alias="_id")
    room_number: str
    type: RoomType
    price: float
    amenities: List[str] = Field(default_factory=list)
    max_occupancy: int
    is_available: bool = True
    description: str = ""
    images: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class Booking(CamelModel):
    id: str = Field(alias="_id")
    user_id: str
    room_id: str
    check_in_date: datetime
    check_out_date: datetime
    number_of_guests: int
    total_amount: float
    status: BookingStatus = BookingStatus.pending
    special_requests: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class BookingView(Booking):
    room: Optional[Room] = None


class DashboardStats(CamelModel):
    total_bookings: int
    total_revenue: float
    available_rooms: int
    total_rooms: int
    recent_bookings: List[BookingView]
    monthly_revenue: float


class Principal(BaseModel):
    user_id: str
    email: str
    role: Role


# ---- Requests ----

class Register(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None

    def model_post_init(self, __context):
        for name in ("email", "first_name", "last_name"):
            value = getattr(self, name)
            if isinstance(value, str):
                object.__setattr__(self, name, value.strip())
        if self.role is not None:
            object.__setattr__(self, "role", self.role.strip().lower() or None)


class Login(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RoomSearch(CamelModel):
    type: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    guests: Optional[int] = None
    check_in: Optional[str] = None
    check_out: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_absent(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in type(self).model_fields)


class CreateRoom(CamelModel):
    room_number: str = Field(min_length=1)
    type: RoomType
    price: float = Field(gt=0)
    max_occupancy: int = Field(ge=1)
    description: Optional[str] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    is_available: bool = True


class UpdateRoom(CamelModel):
    room_number: Optional[str] = Field(default=None, min_length=1)
    type: Optional[RoomType] = None
    price: Optional[float] = Field(default=None, gt=0)
    max_occupancy: Optional[int] = Field(default=None, ge=1)
    description: Optional[str] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    is_available: Optional[bool] = None


class CreateBooking(CamelModel):
    room_id: str = Field(min_length=1)
    check_in_date: datetime
    check_out_date: datetime
    number_of_guests: int
    special_requests: Optional[str] = None

    @field_validator("check_in_date", "check_out_date", mode="before")
    @classmethod
    def _parse_when(cls, v):
        return to_utc(v)
