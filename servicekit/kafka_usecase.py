"""Use cases that produce and consume messages and domain events."""

from __future__ import annotations

import json
import queue
import threading
import time
from datetime import datetime, timezone
from typing import Any

from servicekit.contracts import KafkaRepo
from servicekit.entity import (
    TRANSLATION_COMPLETED_EVENT,
    TRANSLATION_REQUEST_EVENT,
    USER_CREATED_EVENT,
    USER_DELETED_EVENT,
    USER_UPDATED_EVENT,
    TranslationEvent,
    UserEvent,
)
from servicekit.kafka import KafkaError
from servicekit.logger import Logger

USER_EVENTS_TOPIC = "user-events"
USER_EVENTS_GROUP = "user-events-consumer"
TRANSLATION_EVENTS_TOPIC = "translation-events"
TRANSLATION_EVENTS_GROUP = "translation-events-consumer"


def _fields(**values: Any) -> str:
    return " ".join(f"{name}={value}" for name, value in values.items())


class KafkaUseCase:
    """Sends messages and receives a single message from a topic."""

    def __init__(self, kafka_repo: KafkaRepo) -> None:
        self._repo = kafka_repo

    def produce_message(self, topic: str, key: str, value: Any) -> None:
        self._repo.send_message(topic, key.encode("utf-8"), value)

    def consume_message(
        self, topic: str, group: str, timeout: float | None = None
    ) -> tuple[str, bytes]:
        """Wait for the first message on the topic and return its key and value.

        A consumer is registered for the topic and stays registered, so a
        second call for the same topic fails. Raises TimeoutError if nothing
        arrives within timeout seconds.
        """
        stop = threading.Event()
        outcomes: queue.Queue[tuple[str, Any]] = queue.Queue()
        taken = threading.Lock()
        done = False

        def handler(key: bytes, value: bytes) -> None:
            nonlocal done
            with taken:
                if done:
                    return
                done = True
            outcomes.put(("message", (key.decode("utf-8", errors="replace"), value)))
            stop.set()

        self._repo.add_consumer(topic, group, handler)

        def run() -> None:
            try:
                self._repo.start_consumer(stop, topic)
            except Exception as exc:
                outcomes.put(("error", exc))

        threading.Thread(target=run, daemon=True, name=f"consume-{topic}").start()
        try:
            kind, payload = outcomes.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError(f"no message received on topic {topic}") from None
        finally:
            stop.set()
        if kind == "error":
            raise payload
        return payload


class KafkaEventUseCase:
    """Publishes user and translation events and handles them when consumed."""

    def __init__(self, kafka_repo: KafkaRepo, logger: Logger | None = None) -> None:
        self._repo = kafka_repo
        self._logger = logger

    def _info(self, text: str) -> None:
        if self._logger is not None:
            self._logger.info(text)

    def _warn(self, text: str) -> None:
        if self._logger is not None:
            self._logger.warn(text)

    def produce_user_event(
        self, event_type: str, user_id: int, email: str, data: Any
    ) -> UserEvent:
        """Send a user event keyed by the user id; return the event sent."""
        event = UserEvent(
            id=time.time_ns(),
            event_type=event_type,
            user_id=user_id,
            email=email,
            data=data,
            timestamp=datetime.now(timezone.utc),
        )
        try:
            self._repo.send_message(USER_EVENTS_TOPIC, str(user_id).encode(), event)
        except Exception as exc:
            raise KafkaError(f"failed to send user event: {exc}") from exc
        self._info("user event produced " + _fields(event_type=event_type, user_id=user_id))
        return event

    def produce_translation_event(
        self,
        event_type: str,
        user_id: int,
        source: str,
        target: str,
        original: str,
        translated: str,
    ) -> TranslationEvent:
        """Send a translation event keyed by user id and type; return the event sent."""
        event = TranslationEvent(
            id=time.time_ns(),
            event_type=event_type,
            user_id=user_id,
            source=source,
            target=target,
            original=original,
            translated=translated,
            timestamp=datetime.now(timezone.utc),
        )
        key = f"{user_id}-{event_type}".encode()
        try:
            self._repo.send_message(TRANSLATION_EVENTS_TOPIC, key, event)
        except Exception as exc:
            raise KafkaError(f"failed to send translation event: {exc}") from exc
        self._info(
            "translation event produced "
            + _fields(event_type=event_type, user_id=user_id, source=source, target=target)
        )
        return event

    def consume_user_events(self) -> None:
        """Register the consumer that handles the user-events topic."""

        def handler(key: bytes, value: bytes) -> None:
            try:
                event = UserEvent.from_dict(json.loads(value))
            except (ValueError, TypeError, AttributeError) as exc:
                raise KafkaError(f"failed to unmarshal user event: {exc}") from exc
            self._info(
                "user event consumed "
                + _fields(event_type=event.event_type, user_id=event.user_id, email=event.email)
            )
            actions = {
                USER_CREATED_EVENT: "processing user created event",
                USER_UPDATED_EVENT: "processing user updated event",
                USER_DELETED_EVENT: "processing user deleted event",
            }
            action = actions.get(event.event_type)
            if action is None:
                self._warn("unknown user event type " + _fields(event_type=event.event_type))
                return
            self._info(action + " " + _fields(user_id=event.user_id, email=event.email))

        self._repo.add_consumer(USER_EVENTS_TOPIC, USER_EVENTS_GROUP, handler)

    def consume_translation_events(self) -> None:
        """Register the consumer that handles the translation-events topic."""

        def handler(key: bytes, value: bytes) -> None:
            try:
                event = TranslationEvent.from_dict(json.loads(value))
            except (ValueError, TypeError, AttributeError) as exc:
                raise KafkaError(f"failed to unmarshal translation event: {exc}") from exc
            self._info(
                "translation event consumed "
                + _fields(
                    event_type=event.event_type,
                    user_id=event.user_id,
                    source=event.source,
                    target=event.target,
                )
            )
            if event.event_type == TRANSLATION_REQUEST_EVENT:
                self._info(
                    "processing translation requested event "
                    + _fields(
                        user_id=event.user_id,
                        source=event.source,
                        target=event.target,
                        original=event.original,
                    )
                )
            elif event.event_type == TRANSLATION_COMPLETED_EVENT:
                self._info(
                    "processing translation completed event "
                    + _fields(
                        user_id=event.user_id,
                        source=event.source,
                        target=event.target,
                        translated=event.translated,
                    )
                )
            else:
                self._warn(
                    "unknown translation event type " + _fields(event_type=event.event_type)
                )

        self._repo.add_consumer(TRANSLATION_EVENTS_TOPIC, TRANSLATION_EVENTS_GROUP, handler)