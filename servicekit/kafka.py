"""Kafka-style producer, consumers and a manager over a pluggable broker."""

from __future__ import annotations

import base64
import dataclasses
import json
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, Protocol

from servicekit.contracts import MessageHandler
from servicekit.logger import Logger

POLL_INTERVAL = 0.05
MIN_BYTES = 10_000
MAX_BYTES = 10_000_000


class KafkaError(Exception):
    """Raised when a message cannot be written, read or routed."""


@dataclass
class Message:
    """One record on a topic."""

    topic: str
    key: bytes
    value: bytes
    time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    partition: int = 0
    offset: int = -1


class Writer(Protocol):
    def write(self, messages: list[Message]) -> None: ...

    def close(self) -> None: ...


class Reader(Protocol):
    closed: bool

    def read(self, timeout: float) -> Message | None: ...

    def close(self) -> None: ...


class Broker(Protocol):
    def writer(self) -> Writer: ...

    def reader(self, topic: str, group_id: str) -> Reader: ...


class _MemoryWriter:
    def __init__(self, broker: "MemoryBroker") -> None:
        self._broker = broker
        self.closed = False

    def write(self, messages: list[Message]) -> None:
        if self.closed:
            raise KafkaError("writer closed")
        self._broker.append(messages)

    def close(self) -> None:
        self.closed = True


class _MemoryReader:
    def __init__(self, broker: "MemoryBroker", topic: str, group_id: str) -> None:
        self._broker = broker
        self.topic = topic
        self.group_id = group_id
        self.closed = False

    def read(self, timeout: float) -> Message | None:
        if self.closed:
            raise KafkaError("reader closed")
        return self._broker.fetch(self.topic, self.group_id, timeout)

    def close(self) -> None:
        self.closed = True


class MemoryBroker:
    """An in-process broker: one partition per topic, offsets per consumer group.

    A new group starts reading at the first offset of the topic.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._logs: dict[str, list[Message]] = {}
        self._offsets: dict[tuple[str, str], int] = {}

    def writer(self) -> _MemoryWriter:
        return _MemoryWriter(self)

    def reader(self, topic: str, group_id: str) -> _MemoryReader:
        return _MemoryReader(self, topic, group_id)

    def append(self, messages: list[Message]) -> None:
        with self._cond:
            for message in messages:
                log = self._logs.setdefault(message.topic, [])
                log.append(replace(message, partition=0, offset=len(log)))
            self._cond.notify_all()

    def fetch(self, topic: str, group_id: str, timeout: float) -> Message | None:
        """Return the group's next message, waiting up to timeout seconds."""
        position = (topic, group_id)

        def available() -> bool:
            return self._offsets.get(position, 0) < len(self._logs.get(topic, ()))

        with self._cond:
            if not self._cond.wait_for(available, timeout):
                return None
            offset = self._offsets.get(position, 0)
            self._offsets[position] = offset + 1
            return self._logs[topic][offset]

    def messages(self, topic: str) -> list[Message]:
        """Every message written to the topic, in order."""
        with self._cond:
            return list(self._logs.get(topic, ()))


def _json_default(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    raise TypeError(f"value of type {type(value).__name__} is not JSON serialisable")


def _encode(value: Any) -> bytes:
    return json.dumps(
        value, default=_json_default, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def _log(logger: Logger | None, level: str, text: str) -> None:
    if logger is not None:
        getattr(logger, level)(text)


class Producer:
    """Writes JSON-encoded values to topics synchronously."""

    def __init__(self, broker: Broker, logger: Logger | None = None) -> None:
        self._writer = broker.writer()
        self._logger = logger

    def send_message(self, topic: str, key: bytes, value: Any) -> None:
        try:
            payload = _encode(value)
        except (TypeError, ValueError) as exc:
            raise KafkaError(f"failed to marshal value: {exc}") from exc
        message = Message(topic=topic, key=bytes(key), value=payload)
        try:
            self._writer.write([message])
        except Exception as exc:
            raise KafkaError(f"failed to write message: {exc}") from exc
        _log(
            self._logger,
            "info",
            f"message sent successfully topic={topic} key={bytes(key).decode(errors='replace')}",
        )

    def close(self) -> None:
        self._writer.close()


class Consumer:
    """Reads one topic as a member of a consumer group."""

    def __init__(
        self,
        broker: Broker,
        topic: str,
        group_id: str,
        handler: MessageHandler,
        logger: Logger | None = None,
    ) -> None:
        self.topic = topic
        self.group_id = group_id
        self.min_bytes = MIN_BYTES
        self.max_bytes = MAX_BYTES
        self._reader = broker.reader(topic, group_id)
        self._handler = handler
        self._logger = logger

    def start(self, stop: threading.Event) -> None:
        """Feed messages to the handler until stop is set, then close the reader.

        Read and handler failures are logged and consumption goes on.
        """
        _log(
            self._logger,
            "info",
            f"starting kafka consumer topic={self.topic} group_id={self.group_id}",
        )
        while not stop.is_set():
            try:
                message = self._reader.read(POLL_INTERVAL)
            except Exception as exc:
                _log(self._logger, "error", f"failed to read message: {exc}")
                stop.wait(POLL_INTERVAL)
                continue
            if message is None:
                continue
            _log(
                self._logger,
                "debug",
                f"received message topic={message.topic} partition={message.partition} "
                f"offset={message.offset} key={message.key.decode(errors='replace')}",
            )
            try:
                self._handler(message.key, message.value)
            except Exception as exc:
                _log(self._logger, "error", f"failed to handle message: {exc}")
        _log(self._logger, "info", "stopping kafka consumer")
        self._reader.close()

    def consume_messages(
        self, stop: threading.Event, handler: Callable[[bytes, bytes], None]
    ) -> None:
        """Feed messages to handler until stop is set; a read failure raises."""
        while not stop.is_set():
            try:
                message = self._reader.read(POLL_INTERVAL)
            except Exception as exc:
                raise KafkaError(f"failed to read message: {exc}") from exc
            if message is None:
                continue
            try:
                handler(message.key, message.value)
            except Exception as exc:
                _log(self._logger, "error", f"failed to process message: {exc}")

    def close(self) -> None:
        self._reader.close()


class Manager:
    """One producer and at most one consumer per topic."""

    def __init__(self, broker: Broker, logger: Logger | None = None) -> None:
        self._broker = broker
        self._logger = logger
        self._producer = Producer(broker, logger)
        self._consumers: dict[str, Consumer] = {}
        self._lock = threading.Lock()

    def send_message(self, topic: str, key: bytes, value: Any) -> None:
        self._producer.send_message(topic, key, value)

    def add_consumer(self, topic: str, group_id: str, handler: MessageHandler) -> None:
        with self._lock:
            if topic in self._consumers:
                raise KafkaError(f"consumer for topic {topic} already exists")
            self._consumers[topic] = Consumer(
                self._broker, topic, group_id, handler, self._logger
            )

    def start_consumer(self, stop: threading.Event, topic: str) -> None:
        """Run the topic's consumer in this thread until stop is set."""
        with self._lock:
            consumer = self._consumers.get(topic)
        if consumer is None:
            raise KafkaError(f"consumer for topic {topic} not found")
        consumer.start(stop)

    def start_all_consumers(self, stop: threading.Event) -> list[threading.Thread]:
        """Run every consumer in a background thread; return the threads."""
        with self._lock:
            consumers = list(self._consumers.items())

        def run(topic: str, consumer: Consumer) -> None:
            try:
                consumer.start(stop)
            except Exception as exc:
                _log(self._logger, "error", f"consumer stopped with error topic={topic}: {exc}")

        threads = [
            threading.Thread(target=run, args=item, daemon=True, name=f"consumer-{item[0]}")
            for item in consumers
        ]
        for thread in threads:
            thread.start()
        return threads

    def close(self) -> None:
        with self._lock:
            for topic, consumer in self._consumers.items():
                try:
                    consumer.close()
                except Exception as exc:
                    _log(self._logger, "error", f"failed to close consumer topic={topic}: {exc}")
            self._producer.close()