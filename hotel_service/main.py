import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .bookings import BookingCoordinator
from .clock import Clock, SystemClock
from .dashboard import DashboardAggregator
from .db import create_all, get_engine, get_session
from .errors import register_error_handlers
from .identity import IdentityStore
from .inventory import RoomInventory
from .logger import setup_logging
from .middleware import RequestLoggingMiddleware
from .rabbitmq import RabbitPublisher
from .repositories import InMemoryBookingRepository, InMemoryRoomRepository, InMemoryUserRepository
from .routes import router
from .seed import seed_demo_data
from .sql_repositories import SqlBookingRepository, SqlRoomRepository, SqlUserRepository

logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "System", "description": "Liveness endpoints."},
    {"name": "Auth", "description": "Registration, login and profile."},
    {"name": "Rooms", "description": "Room inventory; writes are admin-only."},
    {"name": "Bookings", "description": "Booking lifecycle and room availability."},
    {"name": "Dashboard", "description": "Admin rollups."},
]


def create_app(
    database_url: str | None = config.HOTEL_DB,
    seed: bool = config.SEED_DEMO_DATA,
    clock: Clock | None = None,
    publisher: RabbitPublisher | None = None,
) -> FastAPI:
    setup_logging(config.LOG_LEVEL)

    clock = clock or SystemClock()
    publisher = publisher or RabbitPublisher(config.RABBIT_URL)

    engine = None
    if database_url:
        engine = get_engine(database_url)
        sessions = get_session(engine)
        users = SqlUserRepository(sessions)
        rooms = SqlRoomRepository(sessions)
        bookings = SqlBookingRepository(sessions)
    else:
        users = InMemoryUserRepository()
        rooms = InMemoryRoomRepository()
        bookings = InMemoryBookingRepository()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if engine is not None:
            await create_all(engine)
        if seed:
            await seed_demo_data(users, rooms, bookings, clock)

        if publisher.enabled and not await publisher.connect():
            logger.warning("starting without domain events; will retry on first publish")

        try:
            yield
        finally:
            try:
                await publisher.close()
            finally:
                if engine is not None:
                    await engine.dispose()

    app = FastAPI(title="Hotel Booking Service", openapi_tags=OPENAPI_TAGS, lifespan=lifespan)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_error_handlers(app)

    coordinator = BookingCoordinator(bookings, rooms, clock, publisher)
    app.state.identity = IdentityStore(users, clock, publisher)
    app.state.inventory = RoomInventory(rooms, clock, publisher)
    app.state.coordinator = coordinator
    app.state.dashboard = DashboardAggregator(bookings, rooms, coordinator, clock)
    app.state.publisher = publisher

    app.include_router(router, prefix=config.API_PREFIX)

    @app.get("/health", tags=["System"])
    async def health():
        return {"status": "ok", "service": "hotel-service", "events_enabled": publisher.enabled}

    return app


app = create_app()
