import logging

import aio_pika

from .events import build_event, to_json

EXCHANGE_NAME = "domain_events"

logger = logging.getLogger(__name__)


class RabbitPublisher:
    """Best-effort domain event publisher; a no-op when no broker URL is set."""

    def __init__(self, url: str | None):
        self._url = url
        self.enabled = bool(url)
        self._connection: aio_pika.abc.AbstractRobustConnection | None = None
        self._exchange: aio_pika.abc.AbstractExchange | None = None

    async def connect(self) -> bool:
        """Open the connection and declare the exchange. Returns False on failure."""
        if not self.enabled:
            return False
        if self._exchange and self._connection and not self._connection.is_closed:
            return True

        try:
            self._connection = await aio_pika.connect_robust(self._url)
            channel = await self._connection.channel()
            self._exchange = await channel.declare_exchange(
                EXCHANGE_NAME, aio_pika.ExchangeType.TOPIC, durable=True
            )
        except Exception as e:
            logger.warning("RabbitMQ connect failed: %s", e)
            await self.close()
            return False
        return True

    async def emit(self, event_type: str, data: dict, occurred_at=None) -> None:
        if not await self.connect():
            return

        event = build_event(event_type, data, occurred_at)
        message = aio_pika.Message(
            body=to_json(event).encode("utf-8"),
            content_type="application/json",
            message_id=event["event_id"],
            delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
        )
        try:
            await self._exchange.publish(message, routing_key=event_type)
        except Exception as e:
            logger.warning("RabbitMQ publish of %s failed: %s", event_type, e)

    async def close(self) -> None:
        connection, self._connection, self._exchange = self._connection, None, None
        if connection and not connection.is_closed:
            await connection.close()
