from datetime import datetime, timezone

import pytest

from servicekit.entity import (
    RedisValue,
    ShipperLocation,
    Translation,
    TranslationHistory,
    VietQR,
    VietQRStatus,
)
from servicekit.http_api import create_app


class RecordingLogger:
    def __init__(self):
        self.errors = []

    def error(self, message, *args):
        self.errors.append((message, args))


class FakeTranslation:
    def __init__(self, fail=False):
        self.fail = fail
        self.requests = []
        self.items = [Translation(source="auto", destination="en", original="godev", translation="godev")]

    def history(self):
        if self.fail:
            raise RuntimeError("db down")
        return TranslationHistory(history=list(self.items))

    def translate(self, translation):
        self.requests.append(translation)
        if self.fail:
            raise RuntimeError("api down")
        return Translation(
            source=translation.source,
            destination=translation.destination,
            original=translation.original,
            translation="translated",
        )


class FakeRedis:
    def __init__(self, fail=False):
        self.fail = fail
        self.values = {}

    def set_value(self, value):
        if self.fail:
            raise RuntimeError("redis down")
        self.values[value.key] = value.value

    def get_value(self, key):
        if self.fail or key not in self.values:
            raise LookupError(key)
        return RedisValue(key=key, value=self.values[key])


class FakeShipper:
    def __init__(self, fail=False):
        self.fail = fail
        self.updates = []
        self.loc = ShipperLocation(
            shipper_id="s1",
            latitude=10.5,
            longitude=106.7,
            timestamp=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        )

    def update_location(self, loc):
        if self.fail:
            raise RuntimeError("down")
        self.updates.append(loc)

    def get_location(self, shipper_id):
        if self.fail:
            raise RuntimeError("down")
        return self.loc


class FakeVietQR:
    def __init__(self, fail=False):
        self.fail = fail
        self.requests = []
        self.updates = []
        self.qr = VietQR(id="qr-1", status=VietQRStatus.GENERATED, content="content")

    def generate_qr(self, req):
        self.requests.append(req)
        if self.fail:
            raise RuntimeError("down")
        return self.qr

    def inquiry_qr(self, qr_id):
        if self.fail:
            raise RuntimeError("down")
        return self.qr

    def update_status(self, qr_id, status):
        if self.fail:
            raise RuntimeError("down")
        self.updates.append((qr_id, status))


class FakeBilling:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def generate_invoice_pdf(self, data, output_path):
        self.calls.append((data, output_path))
        if self.fail:
            raise OSError("disk full")


def make_client(**kwargs):
    return create_app(**kwargs).test_client()


def test_healthz():
    response = make_client().get("/healthz")
    assert response.status_code == 200
    assert response.data == b""


def test_history_returns_items():
    fake = FakeTranslation()
    response = make_client(translation=fake).get("/v1/translation/history")
    assert response.status_code == 200
    assert response.get_json() == TranslationHistory(history=fake.items).to_dict()


def test_history_failure_is_logged():
    logger = RecordingLogger()
    response = make_client(translation=FakeTranslation(fail=True), logger=logger).get(
        "/v1/translation/history"
    )
    assert response.status_code == 500
    assert response.get_json() == {"error": "database problems"}
    assert len(logger.errors) == 1


def test_do_translate_success():
    fake = FakeTranslation()
    body = {"source": "auto", "destination": "en", "original": "godev"}
    response = make_client(translation=fake).post("/v1/translation/do-translate", json=body)
    assert response.status_code == 200
    data = response.get_json()
    assert data["translation"] == "translated"
    assert data["original"] == "godev"
    assert fake.requests[0].destination == "en"


@pytest.mark.parametrize(
    "body", [{"source": "auto", "destination": "en"}, {"source": "", "destination": "en", "original": "x"}]
)
def test_do_translate_invalid_body(body):
    fake = FakeTranslation()
    response = make_client(translation=fake).post("/v1/translation/do-translate", json=body)
    assert response.status_code == 400
    assert response.get_json() == {"error": "invalid request body"}
    assert fake.requests == []


def test_do_translate_non_json_body():
    response = make_client(translation=FakeTranslation()).post(
        "/v1/translation/do-translate", data="not json"
    )
    assert response.status_code == 400


def test_do_translate_service_failure():
    body = {"source": "auto", "destination": "en", "original": "godev"}
    response = make_client(translation=FakeTranslation(fail=True)).post(
        "/v1/translation/do-translate", json=body
    )
    assert response.status_code == 500
    assert response.get_json() == {"error": "translation service problems"}


def test_redis_set_then_get():
    fake = FakeRedis()
    client = make_client(redis=fake)
    response = client.post("/v1/redis/set", json={"key": "k", "value": "v"})
    assert response.get_json() == {"message": "success"}
    assert fake.values == {"k": "v"}
    response = client.get("/v1/redis/get/k")
    assert response.status_code == 200
    assert response.get_json() == {"key": "k", "value": "v"}


def test_redis_set_missing_value():
    fake = FakeRedis()
    response = make_client(redis=fake).post("/v1/redis/set", json={"key": "k"})
    assert response.status_code == 400
    assert fake.values == {}


def test_redis_failures():
    client = make_client(redis=FakeRedis(fail=True))
    assert client.post("/v1/redis/set", json={"key": "k", "value": "v"}).status_code == 500
    response = client.get("/v1/redis/get/k")
    assert response.status_code == 500
    assert response.get_json() == {"error": "internal server error"}


def test_shipper_location_update():
    fake = FakeShipper()
    body = {"shipper_id": "s9", "latitude": 1.5, "longitude": 2.5}
    response = make_client(shipper_location=fake).post("/v1/redis/shipper/location", json=body)
    assert response.get_json() == {"message": "shipper location updated"}
    assert fake.updates[0].shipper_id == "s9"
    assert fake.updates[0].latitude == 1.5


def test_shipper_location_zero_latitude_rejected():
    fake = FakeShipper()
    body = {"shipper_id": "s9", "latitude": 0, "longitude": 2.5}
    response = make_client(shipper_location=fake).post("/v1/redis/shipper/location", json=body)
    assert response.status_code == 400
    assert fake.updates == []


def test_shipper_location_get_and_failure():
    fake = FakeShipper()
    response = make_client(shipper_location=fake).get("/v1/redis/shipper/location/s1")
    assert response.get_json() == fake.loc.to_dict()
    failing = make_client(shipper_location=FakeShipper(fail=True))
    assert failing.get("/v1/redis/shipper/location/s1").status_code == 500
    body = {"shipper_id": "s9", "latitude": 1.5, "longitude": 2.5}
    assert failing.post("/v1/redis/shipper/location", json=body).status_code == 500


def test_vietqr_generate():
    fake = FakeVietQR()
    body = {"accountNo": "0000000000", "amount": "1000", "receiverName": "Test"}
    response = make_client(vietqr=fake).post("/v1/vietqr/gen", json=body)
    assert response.get_json() == fake.qr.to_dict()
    assert fake.requests[0].account_no == "0000000000"
    assert fake.requests[0].receiver_name == "Test"


def test_vietqr_generate_missing_amount():
    fake = FakeVietQR()
    response = make_client(vietqr=fake).post("/v1/vietqr/gen", json={"accountNo": "0000000000"})
    assert response.status_code == 400
    assert fake.requests == []


def test_vietqr_inquiry():
    fake = FakeVietQR()
    assert make_client(vietqr=fake).get("/v1/vietqr/inquiry/qr-1").get_json() == fake.qr.to_dict()
    assert make_client(vietqr=FakeVietQR(fail=True)).get("/v1/vietqr/inquiry/x").status_code == 500


def test_vietqr_update_status():
    fake = FakeVietQR()
    response = make_client(vietqr=fake).put("/v1/vietqr/update/qr-1", json={"status": "paid"})
    assert response.get_json() == {"status": "ok"}
    assert fake.updates == [("qr-1", VietQRStatus.PAID)]


@pytest.mark.parametrize("status", ["generated", "unknown"])
def test_vietqr_update_invalid_status(status):
    fake = FakeVietQR()
    response = make_client(vietqr=fake).put("/v1/vietqr/update/qr-1", json={"status": status})
    assert response.status_code == 400
    assert response.get_json() == {"error": "invalid status"}
    assert fake.updates == []


def test_vietqr_update_missing_status():
    response = make_client(vietqr=FakeVietQR()).put("/v1/vietqr/update/qr-1", json={})
    assert response.get_json() == {"error": "invalid request body"}


def test_billing_invoice_default_dir():
    fake = FakeBilling()
    body = {"number": "00001", "items": [{"description": "item", "qty": "1"}], "total": "$0.00"}
    response = make_client(billing=fake).post("/v1/billing/invoice", json=body)
    assert response.get_json() == {"file_path": "invoice_00001.pdf"}
    data, path = fake.calls[0]
    assert path == "invoice_00001.pdf"
    assert data.items[0].description == "item"
    assert data.total == "$0.00"


def test_billing_invoice_output_dir(tmp_path):
    fake = FakeBilling()
    response = make_client(billing=fake, output_dir=str(tmp_path)).post(
        "/v1/billing/invoice", json={"number": "7"}
    )
    assert response.get_json() == {"file_path": str(tmp_path / "invoice_7.pdf")}


def test_billing_invoice_failure():
    response = make_client(billing=FakeBilling(fail=True)).post(
        "/v1/billing/invoice", json={"number": "1"}
    )
    assert response.status_code == 500
    assert response.get_json() == {"error": "failed to generate PDF"}


def test_billing_invoice_bad_items():
    fake = FakeBilling()
    response = make_client(billing=fake).post("/v1/billing/invoice", json={"items": "x"})
    assert response.status_code == 400
    assert fake.calls == []


def test_routes_absent_without_use_case():
    assert make_client().get("/v1/translation/history").status_code == 404