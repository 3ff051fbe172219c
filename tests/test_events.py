import json
from datetime import datetime, timezone

from hotel_service.events import build_event, to_json
from hotel_service.rabbitmq import RabbitPublisher


def test_envelope():
    when = datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)
    event = build_event("room.deleted", {"room_id": "room-3"}, occurred_at=when)

    assert set(event) == {"event_id", "event_type", "occurred_at", "data"}
    assert event["event_type"] == "room.deleted"
    assert event["occurred_at"] == "2026-03-10T09:30:00+00:00"
    assert json.loads(to_json(event)) == event


def test_event_ids_are_unique():
    assert build_event("x", {})["event_id"] != build_event("x", {})["event_id"]


async def test_publisher_without_url_is_a_no_op():
    publisher = RabbitPublisher(None)

    assert publisher.enabled is False
    assert await publisher.connect() is False
    await publisher.emit("booking.created", {"booking_id": "b-1"})
    await publisher.close()
