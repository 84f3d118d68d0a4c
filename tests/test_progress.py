"""Tests for progress event publishing."""

import json
from datetime import datetime
from unittest.mock import MagicMock

import redis

from travel_ocr.reporting.payloads import ProgressEvent, ProgressStatus
from travel_ocr.reporting.progress import InMemoryPublisher, ProgressBroadcaster, RedisPublisher


class TestProgressEvent:
    """Tests for the ProgressEvent schema."""

    def test_json_shape(self) -> None:
        event = ProgressEvent(
            batch_id="order-1",
            traveler_id="t1",
            traveler_name="Rahul Sharma",
            document_id="fl1",
            document_kind="flight",
            status=ProgressStatus.PROCESSING,
        )
        data = json.loads(event.to_json())

        assert data["status"] == "processing"
        assert "fields" not in data
        assert "error" not in data
        assert datetime.fromisoformat(data["timestamp"]).tzinfo is not None


class TestProgressBroadcaster:
    """Tests for ProgressBroadcaster."""

    def setup_method(self) -> None:
        self.publisher = InMemoryPublisher()
        self.broadcaster = ProgressBroadcaster(self.publisher, channel_prefix="ocr_progress")

    def test_publishes_to_batch_channel(self) -> None:
        self.broadcaster.broadcast(
            batch_id="order-1",
            traveler_id="t1",
            traveler_name="Rahul Sharma",
            document_id="fl1",
            document_kind="flight",
            status=ProgressStatus.MAPPED,
            fields={"pnr": "SISCPF"},
        )

        messages = self.publisher.messages["ocr_progress:order-1"]
        assert len(messages) == 1
        data = json.loads(messages[0])
        assert data["status"] == "mapped"
        assert data["fields"] == {"pnr": "SISCPF"}

    def test_failed_event_carries_error(self) -> None:
        event = self.broadcaster.broadcast(
            batch_id="order-1",
            traveler_id="t1",
            traveler_name="Rahul Sharma",
            document_id="h1",
            document_kind="hotel",
            status=ProgressStatus.FAILED,
            error="Text does not contain hotel booking information",
        )

        assert event.error == "Text does not contain hotel booking information"
        data = json.loads(self.publisher.messages["ocr_progress:order-1"][0])
        assert data["error"] == event.error

    def test_publish_failure_is_swallowed(self) -> None:
        publisher = MagicMock()
        publisher.publish.side_effect = redis.ConnectionError("refused")
        broadcaster = ProgressBroadcaster(publisher)

        event = ProgressEvent(
            batch_id="b",
            traveler_id="t1",
            traveler_name="x",
            document_id="d",
            document_kind="flight",
            status=ProgressStatus.PROCESSING,
        )

        assert broadcaster.publish(event) is False
        publisher.publish.assert_called_once()


class TestRedisPublisher:
    """Tests for the Redis transport."""

    def test_publishes_through_client(self) -> None:
        client = MagicMock()
        client.publish.return_value = 1
        publisher = RedisPublisher(client=client)

        publisher.publish("ocr_progress:b", '{"status": "processing"}')

        client.publish.assert_called_once_with("ocr_progress:b", '{"status": "processing"}')

    def test_builds_client_from_url(self) -> None:
        publisher = RedisPublisher("redis://cache.internal:6380/1")
        kwargs = publisher.client.connection_pool.connection_kwargs
        assert kwargs["host"] == "cache.internal"
        assert kwargs["port"] == 6380
