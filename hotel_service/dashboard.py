from .bookings import BookingCoordinator
from .clock import Clock
from .repositories import BookingRepository, RoomRepository
from .schemas import DashboardStats

RECENT_BOOKINGS = 5


class DashboardAggregator:
    """Read-only rollups over the room inventory and the booking ledger."""

    def __init__(
        self,
        bookings: BookingRepository,
        rooms: RoomRepository,
        coordinator: BookingCoordinator,
        clock: Clock,
    ):
        self._bookings = bookings
        self._rooms = rooms
        self._coordinator = coordinator
        self._clock = clock

    async def compute_stats(self) -> DashboardStats:
        bookings = await self._bookings.list()
        rooms = await self._rooms.list()
        now = self._clock.now_utc()

        monthly = [
            b for b in bookings
            if b.created_at.year == now.year and b.created_at.month == now.month
        ]

        return DashboardStats(
            total_bookings=len(bookings),
            total_revenue=sum(b.total_amount for b in bookings),
            available_rooms=sum(1 for r in rooms if r.is_available),
            total_rooms=len(rooms),
            recent_bookings=await self._coordinator.with_rooms(bookings[-RECENT_BOOKINGS:]),
            monthly_revenue=sum(b.total_amount for b in monthly),
        )
