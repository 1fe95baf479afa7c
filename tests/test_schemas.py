from datetime import timezone

import pytest

from servicekit.entity import ZERO_TIME, RedisValue, VietQRStatus
from servicekit.schemas import (
    GenerateInvoicePDFRequest,
    GenerateQRRequest,
    KafkaMessageRequest,
    RedisValueRequest,
    ShipperLocationRequest,
    TranslateRequest,
    UpdateVietQRStatusRequest,
    ValidationError,
    error_body,
    invoice_body,
    redis_value_body,
    success_body,
)


def test_translate_request_parses():
    req = TranslateRequest.from_json({"source": "auto", "destination": "en", "original": "godev"})
    assert (req.source, req.destination, req.original) == ("auto", "en", "godev")


@pytest.mark.parametrize("missing", ["source", "destination", "original"])
def test_translate_request_requires_fields(missing):
    body = {"source": "auto", "destination": "en", "original": "godev"}
    body[missing] = ""
    with pytest.raises(ValidationError, match=missing):
        TranslateRequest.from_json(body)


@pytest.mark.parametrize("data", [None, [], "text", 3])
def test_non_object_body_rejected(data):
    with pytest.raises(ValidationError):
        TranslateRequest.from_json(data)


def test_wrong_type_rejected():
    with pytest.raises(ValidationError):
        RedisValueRequest.from_json({"key": 1, "value": "v"})


def test_kafka_message_keeps_any_value():
    req = KafkaMessageRequest.from_json({"topic": "t", "value": {"a": [1, 2]}})
    assert req.topic == "t"
    assert req.key == ""
    assert req.value == {"a": [1, 2]}


def test_kafka_message_requires_value_and_topic():
    with pytest.raises(ValidationError, match="value"):
        KafkaMessageRequest.from_json({"topic": "t"})
    with pytest.raises(ValidationError, match="topic"):
        KafkaMessageRequest.from_json({"value": 1})


def test_redis_value_round_trip():
    req = RedisValueRequest.from_json({"key": "k", "value": "v"})
    assert req.to_entity() == RedisValue("k", "v")
    assert redis_value_body(req.to_entity()) == {"key": "k", "value": "v"}


def test_shipper_location_with_timestamp():
    req = ShipperLocationRequest.from_json(
        {"shipper_id": "s1", "latitude": 10.5, "longitude": 106, "timestamp": "2024-01-02T03:04:05Z"}
    )
    loc = req.to_entity()
    assert loc.shipper_id == "s1"
    assert loc.longitude == 106.0
    assert loc.timestamp.tzinfo == timezone.utc
    assert (loc.timestamp.year, loc.timestamp.second) == (2024, 5)


def test_shipper_location_timestamp_optional():
    req = ShipperLocationRequest.from_json({"shipper_id": "s1", "latitude": 1, "longitude": 2})
    assert req.timestamp == ZERO_TIME


@pytest.mark.parametrize(
    "body",
    [
        {"shipper_id": "s1", "latitude": 0, "longitude": 2},
        {"shipper_id": "", "latitude": 1, "longitude": 2},
        {"shipper_id": "s1", "latitude": "1", "longitude": 2},
        {"shipper_id": "s1", "latitude": 1, "longitude": 2, "timestamp": "yesterday"},
        {"shipper_id": "s1", "latitude": 1, "longitude": 2, "timestamp": "2024-01-02T03:04:05"},
    ],
)
def test_shipper_location_invalid(body):
    with pytest.raises(ValidationError):
        ShipperLocationRequest.from_json(body)


def test_generate_qr_maps_camel_case_keys():
    req = GenerateQRRequest.from_json(
        {"accountNo": "acc", "amount": "100", "mcc": "5411", "receiverName": "Shop"}
    )
    entity = req.to_entity()
    assert entity.account_no == "acc"
    assert entity.receiver_name == "Shop"
    assert entity.mcc == "5411"
    assert entity.description == ""


def test_generate_qr_requires_amount():
    with pytest.raises(ValidationError, match="amount"):
        GenerateQRRequest.from_json({"accountNo": "acc"})


@pytest.mark.parametrize("status", ["in-process", "paid", "fail", "timeout"])
def test_update_status_accepts_transitions(status):
    assert UpdateVietQRStatusRequest.from_json({"status": status}).to_status() == VietQRStatus(status)


@pytest.mark.parametrize("status", ["generated", "unknown"])
def test_update_status_rejects_others(status):
    req = UpdateVietQRStatusRequest.from_json({"status": status})
    with pytest.raises(ValidationError, match="invalid status"):
        req.to_status()


def test_invoice_request_to_invoice_data():
    req = GenerateInvoicePDFRequest.from_json(
        {
            "number": "00001",
            "items": [{"description": "Item", "unit_cost": "$1", "qty": "2", "amount": "$2"}],
            "total": "$2",
            "bank_details": ["Account Holder:"],
        }
    )
    data = req.to_invoice_data()
    assert data.number == "00001"
    assert data.total == "$2"
    assert data.items[0].unit_cost == "$1"
    assert data.items[0].qty == "2"
    assert data.bank_details == ["Account Holder:"]
    assert data.billed_to == []


def test_invoice_request_rejects_bad_lists():
    with pytest.raises(ValidationError):
        GenerateInvoicePDFRequest.from_json({"billed_to": "someone"})
    with pytest.raises(ValidationError):
        GenerateInvoicePDFRequest.from_json({"items": [1]})


def test_response_bodies():
    assert error_body("boom") == {"error": "boom"}
    assert success_body("done") == {"message": "done"}
    assert invoice_body("./invoice_1.pdf") == {"file_path": "./invoice_1.pdf"}