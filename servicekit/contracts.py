"""Interfaces the use cases expect from their repositories and services."""

from __future__ import annotations

import threading
from typing import Any, Callable, Protocol, runtime_checkable

from servicekit.entity import (
    RedisValue,
    Translation,
    VietQR,
    VietQRGenerateRequest,
    VietQRStatus,
)
from servicekit.models import TranslationModel

MessageHandler = Callable[[bytes, bytes], None]


@runtime_checkable
class TranslationRepo(Protocol):
    """Stores translations and returns their history."""

    def store(self, model: TranslationModel) -> None:
        """Persist one translation."""

    def get_history(self) -> list[Translation]:
        """Return every stored translation."""


@runtime_checkable
class TranslationWebAPI(Protocol):
    """Translates text through an external service."""

    def translate(self, translation: Translation) -> Translation:
        """Return the translation with its translated text filled in."""


@runtime_checkable
class RedisRepo(Protocol):
    """Reads and writes plain key-value pairs."""

    def set_value(self, value: RedisValue) -> None:
        """Store the pair."""

    def get_value(self, key: str) -> RedisValue:
        """Return the pair for the key; raise if it is absent."""


@runtime_checkable
class KafkaRepo(Protocol):
    """Produces messages and runs consumers per topic."""

    def send_message(self, topic: str, key: bytes, value: Any) -> None:
        """Serialise the value as JSON and write it to the topic."""

    def add_consumer(self, topic: str, group_id: str, handler: MessageHandler) -> None:
        """Register a consumer for the topic; raise if one already exists."""

    def start_consumer(self, stop: threading.Event, topic: str) -> None:
        """Run the topic's consumer until the stop event is set."""

    def start_all_consumers(self, stop: threading.Event) -> None:
        """Run every registered consumer in the background."""

    def close(self) -> None:
        """Close all consumers and the producer."""


@runtime_checkable
class NatsRepo(Protocol):
    """Publishes and subscribes to subjects."""

    def publish(self, subject: str, data: bytes) -> None:
        """Publish the data on the subject."""

    def subscribe(
        self, subject: str, handler: Callable[[bytes], None]
    ) -> Callable[[], None]:
        """Subscribe the handler and return a function that unsubscribes."""


@runtime_checkable
class QRGenerator(Protocol):
    """Builds the content of a VietQR code."""

    def generate_qr(self, request: VietQRGenerateRequest) -> str:
        """Return the QR payload for the request."""


@runtime_checkable
class VietQRStore(Protocol):
    """Persists VietQR codes and their status."""

    def store(self, qr: VietQR) -> None:
        """Persist a new code."""

    def find_by_id(self, qr_id: str) -> VietQR:
        """Return the code with the id; raise if there is none."""

    def update_status(self, qr_id: str, status: VietQRStatus) -> None:
        """Change the status of the code with the id."""