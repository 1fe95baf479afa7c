from datetime import datetime, timezone

from servicekit.entity import ShipperLocation
from servicekit.models import (
    ShipperLocationModel,
    TranslationModel,
    UserModel,
    to_shipper_location_entity,
    to_shipper_location_model,
)

STAMP = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_table_names():
    model = to_shipper_location_model(ShipperLocation("s-0", 0.0, 0.0, STAMP))
    assert model.table_name == "shipper_locations"
    assert UserModel(email="someone@example.com").table_name == "users"


def test_entity_to_model_and_back():
    loc = ShipperLocation("s-1", 21.0285, 105.8542, STAMP)
    assert to_shipper_location_entity(to_shipper_location_model(loc)) == loc


def test_model_to_entity_drops_row_id():
    model = ShipperLocationModel("s-2", 1.5, 2.5, STAMP, id=77)
    loc = to_shipper_location_entity(model)
    assert loc == ShipperLocation("s-2", 1.5, 2.5, STAMP)


def test_entity_to_model_has_no_row_id_yet():
    model = to_shipper_location_model(ShipperLocation("s-3", 0.0, 0.0, STAMP))
    assert model.id == 0
    assert model.shipper_id == "s-3"


def test_user_model_hides_password_in_repr():
    password = "password"
    model = UserModel(email="someone@example.com", password=password)
    assert "password=" not in repr(model)
    assert model.password == password


def test_translation_model_fields():
    model = TranslationModel("auto", "en", "xin chào", "hello")
    assert (model.source, model.destination, model.original, model.translation) == (
        "auto", "en", "xin chào", "hello",
    )