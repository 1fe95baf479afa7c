"""Application use cases: translation, key-value store, shipper location, VietQR and NATS."""

from __future__ import annotations

import contextlib
import uuid
from typing import Any, Callable

from servicekit.contracts import (
    NatsRepo,
    QRGenerator,
    RedisRepo,
    TranslationRepo,
    TranslationWebAPI,
    VietQRStore,
)
from servicekit.entity import (
    RedisValue,
    ShipperLocation,
    Translation,
    TranslationHistory,
    VietQR,
    VietQRGenerateRequest,
    VietQRStatus,
)
from servicekit.models import TranslationModel


class UseCaseError(Exception):
    """A use case could not complete because a dependency failed."""


class TranslationUseCase:
    """Translates texts through a web API and keeps a history of requests."""

    def __init__(self, repo: TranslationRepo, web_api: TranslationWebAPI) -> None:
        self._repo = repo
        self._web_api = web_api

    def history(self) -> TranslationHistory:
        try:
            items = self._repo.get_history()
        except Exception as exc:
            raise UseCaseError(
                f"TranslationUseCase - History - s.repo.GetHistory: {exc}"
            ) from exc
        return TranslationHistory(history=list(items))

    def translate(self, translation: Translation) -> Translation:
        """Translate the text and record the request in the history."""
        try:
            result = self._web_api.translate(translation)
        except Exception as exc:
            raise UseCaseError(
                f"TranslationUseCase - Translate - s.webAPI.Translate: {exc}"
            ) from exc
        try:
            self._repo.store(
                TranslationModel(
                    source=translation.source,
                    destination=translation.destination,
                    original=translation.original,
                    translation=translation.translation,
                )
            )
        except Exception as exc:
            raise UseCaseError(f"TranslationUseCase - Translate - s.repo.Store: {exc}") from exc
        return result


class RedisUseCase:
    """Stores and reads plain key-value pairs."""

    def __init__(self, repo: RedisRepo) -> None:
        self._repo = repo

    def set_value(self, value: RedisValue) -> None:
        self._repo.set_value(value)

    def get_value(self, key: str) -> RedisValue:
        return self._repo.get_value(key)


class ShipperLocationUseCase:
    """Keeps each shipper's latest location cached and its full history stored."""

    def __init__(self, redis_repo: Any, location_repo: Any) -> None:
        self._cache = redis_repo
        self._store = location_repo

    def update_location(self, loc: ShipperLocation) -> None:
        """Cache the location, then append it to the history."""
        self._cache.set_shipper_location(loc)
        self._store.store(loc)

    def get_location(self, shipper_id: str) -> ShipperLocation:
        """Return the cached location, falling back to the history and refilling the cache."""
        try:
            return self._cache.get_shipper_location(shipper_id)
        except Exception:
            pass
        loc = self._store.get_latest_by_shipper_id(shipper_id)
        with contextlib.suppress(Exception):
            self._cache.set_shipper_location(loc)
        return loc


class VietQRUseCase:
    """Generates VietQR codes and tracks their payment status."""

    def __init__(self, generator: QRGenerator, store: VietQRStore) -> None:
        self._generator = generator
        self._store = store

    def generate_qr(self, request: VietQRGenerateRequest) -> VietQR:
        content = self._generator.generate_qr(request)
        qr = VietQR(id=str(uuid.uuid4()), status=VietQRStatus.GENERATED, content=content)
        self._store.store(qr)
        return qr

    def inquiry_qr(self, qr_id: str) -> VietQR:
        return self._store.find_by_id(qr_id)

    def update_status(self, qr_id: str, status: VietQRStatus) -> None:
        self._store.update_status(qr_id, status)


class NatsUseCase:
    """Publishes to and subscribes on message subjects."""

    def __init__(self, repo: NatsRepo) -> None:
        self._repo = repo

    def publish(self, subject: str, data: bytes) -> None:
        self._repo.publish(subject, data)

    def subscribe(
        self, subject: str, handler: Callable[[bytes], None]
    ) -> Callable[[], None]:
        """Subscribe handler to subject; return a function that unsubscribes."""
        return self._repo.subscribe(subject, handler)