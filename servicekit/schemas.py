"""Request bodies accepted by the HTTP API and the response bodies it sends."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from servicekit.billing import InvoiceData, InvoiceItem
from servicekit.entity import (
    ZERO_TIME,
    RedisValue,
    ShipperLocation,
    VietQRGenerateRequest,
    VietQRStatus,
)

UPDATABLE_STATUSES = frozenset(
    {VietQRStatus.IN_PROCESS, VietQRStatus.PAID, VietQRStatus.FAIL, VietQRStatus.TIMEOUT}
)

_FRACTION = re.compile(r"\.(\d+)")


class ValidationError(ValueError):
    """A request body is malformed or misses a required field."""


def _object(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError("request body must be a JSON object")
    return data


def _string(data: dict[str, Any], name: str, required: bool = False) -> str:
    value = data.get(name)
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string")
    if required and not value:
        raise ValidationError(f"{name} is required")
    return value


def _number(data: dict[str, Any], name: str, required: bool = False) -> float:
    value = data.get(name)
    if value is None:
        value = 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number")
    if required and value == 0:
        raise ValidationError(f"{name} is required")
    return float(value)


def _string_list(data: dict[str, Any], name: str) -> list[str]:
    value = data.get(name)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValidationError(f"{name} must be a list of strings")
    return list(value)


def _timestamp(data: dict[str, Any], name: str) -> datetime:
    value = data.get(name)
    if value is None or value == "":
        return ZERO_TIME
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be an RFC 3339 timestamp")
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(f"{name} must be an RFC 3339 timestamp") from exc
    if parsed.tzinfo is None:
        raise ValidationError(f"{name} must carry a time zone offset")
    return parsed


@dataclass
class TranslateRequest:
    source: str
    destination: str
    original: str

    @classmethod
    def from_json(cls, data: Any) -> "TranslateRequest":
        body = _object(data)
        return cls(
            source=_string(body, "source", required=True),
            destination=_string(body, "destination", required=True),
            original=_string(body, "original", required=True),
        )


@dataclass
class KafkaMessageRequest:
    topic: str
    key: str
    value: Any

    @classmethod
    def from_json(cls, data: Any) -> "KafkaMessageRequest":
        body = _object(data)
        if body.get("value") is None:
            raise ValidationError("value is required")
        return cls(
            topic=_string(body, "topic", required=True),
            key=_string(body, "key"),
            value=body["value"],
        )


@dataclass
class RedisValueRequest:
    key: str
    value: str

    @classmethod
    def from_json(cls, data: Any) -> "RedisValueRequest":
        body = _object(data)
        return cls(
            key=_string(body, "key", required=True),
            value=_string(body, "value", required=True),
        )

    def to_entity(self) -> RedisValue:
        return RedisValue(key=self.key, value=self.value)


@dataclass
class ShipperLocationRequest:
    shipper_id: str
    latitude: float
    longitude: float
    timestamp: datetime = ZERO_TIME

    @classmethod
    def from_json(cls, data: Any) -> "ShipperLocationRequest":
        body = _object(data)
        return cls(
            shipper_id=_string(body, "shipper_id", required=True),
            latitude=_number(body, "latitude", required=True),
            longitude=_number(body, "longitude", required=True),
            timestamp=_timestamp(body, "timestamp"),
        )

    def to_entity(self) -> ShipperLocation:
        return ShipperLocation(
            shipper_id=self.shipper_id,
            latitude=self.latitude,
            longitude=self.longitude,
            timestamp=self.timestamp,
        )


@dataclass
class GenerateQRRequest:
    account_no: str
    amount: str
    description: str = ""
    mcc: str = ""
    receiver_name: str = ""

    @classmethod
    def from_json(cls, data: Any) -> "GenerateQRRequest":
        body = _object(data)
        return cls(
            account_no=_string(body, "accountNo", required=True),
            amount=_string(body, "amount", required=True),
            description=_string(body, "description"),
            mcc=_string(body, "mcc"),
            receiver_name=_string(body, "receiverName"),
        )

    def to_entity(self) -> VietQRGenerateRequest:
        return VietQRGenerateRequest(
            account_no=self.account_no,
            amount=self.amount,
            description=self.description,
            mcc=self.mcc,
            receiver_name=self.receiver_name,
        )


@dataclass
class UpdateVietQRStatusRequest:
    status: str

    @classmethod
    def from_json(cls, data: Any) -> "UpdateVietQRStatusRequest":
        return cls(status=_string(_object(data), "status", required=True))

    def to_status(self) -> VietQRStatus:
        """The requested status; only statuses a code can move to are accepted."""
        try:
            status = VietQRStatus(self.status)
        except ValueError:
            raise ValidationError("invalid status") from None
        if status not in UPDATABLE_STATUSES:
            raise ValidationError("invalid status")
        return status


@dataclass
class InvoiceItemRequest:
    description: str = ""
    unit_cost: str = ""
    qty: str = ""
    amount: str = ""


def _invoice_item(data: Any) -> InvoiceItemRequest:
    body = _object(data)
    return InvoiceItemRequest(
        description=_string(body, "description"),
        unit_cost=_string(body, "unit_cost"),
        qty=_string(body, "qty"),
        amount=_string(body, "amount"),
    )


@dataclass
class GenerateInvoicePDFRequest:
    number: str = ""
    date: str = ""
    billed_to: list[str] = field(default_factory=list)
    company_info: list[str] = field(default_factory=list)
    items: list[InvoiceItemRequest] = field(default_factory=list)
    subtotal: str = ""
    discount: str = ""
    tax_rate: str = ""
    tax: str = ""
    total: str = ""
    terms: str = ""
    bank_details: list[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> "GenerateInvoicePDFRequest":
        body = _object(data)
        items = body.get("items")
        if items is None:
            items = []
        if not isinstance(items, list):
            raise ValidationError("items must be a list")
        return cls(
            number=_string(body, "number"),
            date=_string(body, "date"),
            billed_to=_string_list(body, "billed_to"),
            company_info=_string_list(body, "company_info"),
            items=[_invoice_item(item) for item in items],
            subtotal=_string(body, "subtotal"),
            discount=_string(body, "discount"),
            tax_rate=_string(body, "tax_rate"),
            tax=_string(body, "tax"),
            total=_string(body, "total"),
            terms=_string(body, "terms"),
            bank_details=_string_list(body, "bank_details"),
        )

    def to_invoice_data(self) -> InvoiceData:
        return InvoiceData(
            number=self.number,
            date=self.date,
            billed_to=list(self.billed_to),
            company_info=list(self.company_info),
            items=[
                InvoiceItem(
                    description=item.description,
                    unit_cost=item.unit_cost,
                    qty=item.qty,
                    amount=item.amount,
                )
                for item in self.items
            ],
            subtotal=self.subtotal,
            discount=self.discount,
            tax_rate=self.tax_rate,
            tax=self.tax,
            total=self.total,
            terms=self.terms,
            bank_details=list(self.bank_details),
        )


def error_body(message: str) -> dict[str, str]:
    return {"error": message}


def success_body(message: str) -> dict[str, str]:
    return {"message": message}


def redis_value_body(value: RedisValue) -> dict[str, str]:
    return {"key": value.key, "value": value.value}


def invoice_body(file_path: str) -> dict[str, str]:
    return {"file_path": file_path}