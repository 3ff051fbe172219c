from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import ValidationError

from . import config
from .bookings import BookingCoordinator
from .dashboard import DashboardAggregator
from .errors import InvalidInput, success_response
from .identity import IdentityStore
from .inventory import RoomInventory
from .rbac import require_role
from .schemas import (
    CreateBooking,
    CreateRoom,
    Login,
    Principal,
    Register,
    Role,
    RoomSearch,
    UpdateRoom,
)
from .security import get_current_user

router = APIRouter()


def _dump(model):
    return model.model_dump(mode="json", by_alias=True)


def get_identity(request: Request) -> IdentityStore:
    return request.app.state.identity


def get_inventory(request: Request) -> RoomInventory:
    return request.app.state.inventory


def get_coordinator(request: Request) -> BookingCoordinator:
    return request.app.state.coordinator


def get_dashboard(request: Request) -> DashboardAggregator:
    return request.app.state.dashboard


# ================= SYSTEM =================

@router.get("/ping", tags=["System"])
async def ping():
    return {"message": config.PING_MESSAGE}


# ================= AUTH =================

@router.post("/auth/register", status_code=status.HTTP_201_CREATED, tags=["Auth"])
async def register(data: Register, identity: IdentityStore = Depends(get_identity)):
    token, user = await identity.register(data)
    return success_response(message="Registration successful", token=token, user=_dump(user))


@router.post("/auth/login", tags=["Auth"])
async def login(data: Login, identity: IdentityStore = Depends(get_identity)):
    token, user = await identity.login(data)
    return success_response(message="Login successful", token=token, user=_dump(user))


@router.get("/auth/profile", tags=["Auth"])
async def profile(
    principal: Principal = Depends(get_current_user),
    identity: IdentityStore = Depends(get_identity),
):
    user = await identity.get_profile(principal)
    return success_response(_dump(user))


# ================= ROOMS =================

@router.get("/rooms", tags=["Rooms"])
async def list_rooms(
    type: str | None = None,
    min_price: str | None = Query(None, alias="minPrice"),
    max_price: str | None = Query(None, alias="maxPrice"),
    guests: str | None = None,
    check_in: str | None = Query(None, alias="checkIn"),
    check_out: str | None = Query(None, alias="checkOut"),
    inventory: RoomInventory = Depends(get_inventory),
):
    try:
        search = RoomSearch(
            type=type,
            min_price=min_price,
            max_price=max_price,
            guests=guests,
            check_in=check_in,
            check_out=check_out,
        )
    except ValidationError as exc:
        raise InvalidInput("; ".join(
            f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()
        ))

    rooms = await inventory.list_rooms(search)
    return success_response([_dump(r) for r in rooms])


@router.get("/rooms/{room_id}", tags=["Rooms"])
async def get_room(room_id: str, inventory: RoomInventory = Depends(get_inventory)):
    return success_response(_dump(await inventory.get_room(room_id)))


@router.post("/rooms", status_code=status.HTTP_201_CREATED, tags=["Rooms"])
async def create_room(
    data: CreateRoom,
    principal: Principal = Depends(require_role(Role.admin)),
    inventory: RoomInventory = Depends(get_inventory),
):
    room = await inventory.create_room(data)
    return success_response(_dump(room), message="Room created successfully")


@router.put("/rooms/{room_id}", tags=["Rooms"])
async def update_room(
    room_id: str,
    data: UpdateRoom,
    principal: Principal = Depends(require_role(Role.admin)),
    inventory: RoomInventory = Depends(get_inventory),
):
    room = await inventory.update_room(room_id, data)
    return success_response(_dump(room), message="Room updated successfully")


@router.delete("/rooms/{room_id}", tags=["Rooms"])
async def delete_room(
    room_id: str,
    principal: Principal = Depends(require_role(Role.admin)),
    inventory: RoomInventory = Depends(get_inventory),
):
    await inventory.delete_room(room_id)
    return success_response(message="Room deleted successfully")


# ================= BOOKINGS =================

@router.post("/bookings", status_code=status.HTTP_201_CREATED, tags=["Bookings"])
async def create_booking(
    data: CreateBooking,
    principal: Principal = Depends(get_current_user),
    coordinator: BookingCoordinator = Depends(get_coordinator),
):
    booking = await coordinator.create_booking(principal.user_id, data)
    return success_response(_dump(booking), message="Booking created successfully")


@router.get("/bookings", tags=["Bookings"])
async def list_bookings(
    principal: Principal = Depends(get_current_user),
    coordinator: BookingCoordinator = Depends(get_coordinator),
):
    bookings = await coordinator.list_bookings(principal)
    return success_response([_dump(b) for b in bookings])


@router.patch("/bookings/{booking_id}/confirm", tags=["Bookings"])
async def confirm_booking(
    booking_id: str,
    principal: Principal = Depends(require_role(Role.admin)),
    coordinator: BookingCoordinator = Depends(get_coordinator),
):
    booking = await coordinator.confirm_booking(booking_id)
    return success_response(_dump(booking), message="Booking confirmed successfully")


@router.delete("/bookings/{booking_id}", tags=["Bookings"])
async def delete_booking(
    booking_id: str,
    principal: Principal = Depends(require_role(Role.admin)),
    coordinator: BookingCoordinator = Depends(get_coordinator),
):
    await coordinator.delete_booking(booking_id)
    return success_response(message="Booking deleted successfully")


# ================= DASHBOARD =================

@router.get("/dashboard/stats", tags=["Dashboard"])
async def dashboard_stats(
    principal: Principal = Depends(require_role(Role.admin)),
    dashboard: DashboardAggregator = Depends(get_dashboard),
):
    return success_response(_dump(await dashboard.compute_stats()))
