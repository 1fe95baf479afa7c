"""Database row models and their conversion to entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar

from servicekit.entity import ZERO_TIME, ShipperLocation


@dataclass
class ShipperLocationModel:
    """A row of the shipper_locations table."""

    table_name: ClassVar[str] = "shipper_locations"

    shipper_id: str
    latitude: float
    longitude: float
    timestamp: datetime = ZERO_TIME
    id: int = 0


@dataclass
class TranslationModel:
    """A row of the translation history table."""

    source: str = ""
    destination: str = ""
    original: str = ""
    translation: str = ""


@dataclass
class UserModel:
    """A row of the users table."""

    table_name: ClassVar[str] = "users"

    id: int = 0
    email: str = ""
    username: str = ""
    password: str = field(default="", repr=False)
    created_at: datetime = ZERO_TIME
    updated_at: datetime = ZERO_TIME


def to_shipper_location_entity(model: ShipperLocationModel) -> ShipperLocation:
    """Convert a database row into a shipper location entity."""
    return ShipperLocation(
        shipper_id=model.shipper_id,
        latitude=model.latitude,
        longitude=model.longitude,
        timestamp=model.timestamp,
    )


def to_shipper_location_model(loc: ShipperLocation) -> ShipperLocationModel:
    """Convert a shipper location entity into a database row."""
    return ShipperLocationModel(
        shipper_id=loc.shipper_id,
        latitude=loc.latitude,
        longitude=loc.longitude,
        timestamp=loc.timestamp,
    )