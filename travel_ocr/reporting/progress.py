"""Per-document progress events published to a pub/sub channel.

Delivery is best effort: publish failures are logged and never retried
or raised to the caller.
"""

import threading
from typing import Protocol

import redis
from redis.exceptions import RedisError

from travel_ocr.utils.logger import get_logger

from .payloads import ProgressEvent, ProgressStatus

logger = get_logger(__name__)


class ProgressPublisher(Protocol):
    """Transport for progress messages."""

    def publish(self, channel: str, message: str) -> None: ...


class RedisPublisher:
    """Publishes progress messages through Redis pub/sub.

    Args:
        url: Redis connection URL.
        client: Optional pre-built client (mainly for tests).
    """

    def __init__(self, url: str = "redis://localhost:6379", client: redis.Redis | None = None) -> None:
        self.client = client or redis.Redis.from_url(
            url,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=False,
        )

    def publish(self, channel: str, message: str) -> None:
        receivers = self.client.publish(channel, message)
        logger.debug("Published to %s (%s receivers)", channel, receivers)


class InMemoryPublisher:
    """Keeps published messages in memory, grouped by channel."""

    def __init__(self) -> None:
        self.messages: dict[str, list[str]] = {}
        self._lock = threading.Lock()

    def publish(self, channel: str, message: str) -> None:
        with self._lock:
            self.messages.setdefault(channel, []).append(message)


class ProgressBroadcaster:
    """Builds progress events and publishes them per batch.

    Args:
        publisher: Message transport.
        channel_prefix: Prefix of the per-batch channel name.
    """

    def __init__(self, publisher: ProgressPublisher, channel_prefix: str = "ocr_progress") -> None:
        self.publisher = publisher
        self.channel_prefix = channel_prefix

    def channel_for(self, batch_id: str) -> str:
        return f"{self.channel_prefix}:{batch_id}"

    def broadcast(
        self,
        batch_id: str,
        traveler_id: str,
        traveler_name: str,
        document_id: str,
        document_kind: str,
        status: ProgressStatus,
        fields: dict[str, str] | None = None,
        error: str | None = None,
    ) -> ProgressEvent:
        """Publish one progress event.

        Returns:
            The event that was (or would have been) published.
        """
        event = ProgressEvent(
            batch_id=batch_id,
            traveler_id=traveler_id,
            traveler_name=traveler_name,
            document_id=document_id,
            document_kind=document_kind,
            status=status,
            fields=fields,
            error=error,
        )
        self.publish(event)
        return event

    def publish(self, event: ProgressEvent) -> bool:
        """Publish a prepared event, swallowing transport errors.

        Returns:
            True if the publisher accepted the message.
        """
        channel = self.channel_for(event.batch_id)
        try:
            self.publisher.publish(channel, event.to_json())
        except (RedisError, OSError, ValueError, TypeError) as exc:
            logger.error("Failed to publish progress to %s: %s", channel, exc)
            return False

        logger.debug(
            "Published %s %s for %s on %s",
            event.document_kind,
            event.status,
            event.traveler_name,
            channel,
        )
        return True
