"""Business entities shared by the use cases, repositories and HTTP layer."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

USER_CREATED_EVENT = "user.created"
USER_UPDATED_EVENT = "user.updated"
USER_DELETED_EVENT = "user.deleted"
TRANSLATION_REQUEST_EVENT = "translation.requested"
TRANSLATION_COMPLETED_EVENT = "translation.completed"

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_FRACTION = re.compile(r"\.(\d+)")


def _format_time(value: datetime) -> str:
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def _parse_time(value: Any) -> datetime:
    if value is None or value == "":
        return ZERO_TIME
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # Timestamps may carry nanoseconds; datetime keeps six digits.
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"invalid timestamp: {value!r}") from exc


@dataclass
class UserEvent:
    """An event about a user, as carried on the user-events topic."""

    id: int = 0
    event_type: str = ""
    user_id: int = 0
    email: str = ""
    data: Any = None
    timestamp: datetime = ZERO_TIME

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "event_type": self.event_type,
            "user_id": self.user_id,
            "email": self.email,
            "data": self.data,
            "timestamp": _format_time(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserEvent":
        return cls(
            id=int(data.get("id", 0)),
            event_type=str(data.get("event_type", "")),
            user_id=int(data.get("user_id", 0)),
            email=str(data.get("email", "")),
            data=data.get("data"),
            timestamp=_parse_time(data.get("timestamp")),
        )


@dataclass
class TranslationEvent:
    """An event about a translation, as carried on the translation-events topic."""

    id: int = 0
    event_type: str = ""
    user_id: int = 0
    source: str = ""
    target: str = ""
    original: str = ""
    translated: str = ""
    timestamp: datetime = ZERO_TIME

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "event_type": self.event_type,
            "user_id": self.user_id,
            "source": self.source,
            "target": self.target,
            "original": self.original,
            "translated": self.translated,
            "timestamp": _format_time(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TranslationEvent":
        return cls(
            id=int(data.get("id", 0)),
            event_type=str(data.get("event_type", "")),
            user_id=int(data.get("user_id", 0)),
            source=str(data.get("source", "")),
            target=str(data.get("target", "")),
            original=str(data.get("original", "")),
            translated=str(data.get("translated", "")),
            timestamp=_parse_time(data.get("timestamp")),
        )


@dataclass
class RedisValue:
    """A key-value pair kept in Redis."""

    key: str
    value: str


@dataclass
class ShipperLocation:
    """A shipper's position at a moment in time."""

    shipper_id: str
    latitude: float
    longitude: float
    timestamp: datetime = ZERO_TIME

    def to_dict(self) -> dict[str, Any]:
        return {
            "shipper_id": self.shipper_id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "timestamp": _format_time(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShipperLocation":
        return cls(
            shipper_id=str(data.get("shipper_id", "")),
            latitude=float(data.get("latitude", 0.0)),
            longitude=float(data.get("longitude", 0.0)),
            timestamp=_parse_time(data.get("timestamp")),
        )


@dataclass
class Translation:
    """A text with its source and destination languages and its translation."""

    source: str = ""
    destination: str = ""
    original: str = ""
    translation: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "source": self.source,
            "destination": self.destination,
            "original": self.original,
            "translation": self.translation,
        }


@dataclass
class TranslationHistory:
    """All stored translations."""

    history: list[Translation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"history": [item.to_dict() for item in self.history]}


@dataclass
class User:
    """A registered user; the password never leaves in serialised form."""

    id: int = 0
    email: str = ""
    username: str = ""
    password: str = field(default="", repr=False)
    created_at: datetime = ZERO_TIME
    updated_at: datetime = ZERO_TIME

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "created_at": _format_time(self.created_at),
            "updated_at": _format_time(self.updated_at),
        }


@dataclass
class UserHistory:
    """A list of users."""

    users: list[User] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"users": [user.to_dict() for user in self.users]}


class VietQRStatus(str, enum.Enum):
    """Lifecycle states of a VietQR code."""

    GENERATED = "generated"
    IN_PROCESS = "in-process"
    PAID = "paid"
    FAIL = "fail"
    TIMEOUT = "timeout"


@dataclass
class VietQR:
    """A generated VietQR code and its payment status."""

    id: str
    status: VietQRStatus
    content: str

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "status": VietQRStatus(self.status).value,
            "content": self.content,
        }


@dataclass
class VietQRGenerateRequest:
    """What is needed to generate a VietQR code."""

    account_no: str = ""
    amount: str = ""
    description: str = ""
    mcc: str = ""
    receiver_name: str = ""