# tests/test_registry.py
import itertools

import pytest

from app.core import NotFound, InvalidInput
from app.database import ProductRegistry
from app.models import ProductPayload, RegistrySnapshot, U64_MAX


def ticker(start=1000, step=10):
    counter = itertools.count(start, step)
    return lambda: next(counter)


def widget(**overrides):
    fields = dict(status="created", name="Widget", origin="Factory A", current_location="Warehouse 1")
    fields.update(overrides)
    return ProductPayload(**fields)


def test_widget_lifecycle():
    reg = ProductRegistry(clock=ticker())
    p = reg.add_product(widget())
    assert p.id == 1
    assert p.timestamp == 1000
    assert p.last_update is None
    assert p.certification is None and p.iot_data is None

    assert reg.get_product(p.id) == p

    shipped = reg.update_product(p.id, widget(status="shipped", current_location="Port"))
    assert shipped.status == "shipped"
    assert shipped.current_location == "Port"
    assert shipped.last_update is not None and shipped.last_update >= p.timestamp

    gone = reg.delete_product(p.id)
    assert gone == shipped
    with pytest.raises(NotFound) as exc:
        reg.get_product(p.id)
    assert f"id={p.id}" in exc.value.msg


def test_ids_are_unique_and_increasing():
    reg = ProductRegistry()
    ids = [reg.add_product(widget(name=f"w{i}")).id for i in range(20)]
    assert len(set(ids)) == 20
    assert ids == sorted(ids)
    assert ids[0] == 1


def test_deleted_ids_are_never_reused():
    reg = ProductRegistry()
    first = reg.add_product(widget())
    second = reg.add_product(widget())
    reg.delete_product(second.id)
    reg.delete_product(first.id)
    third = reg.add_product(widget())
    assert third.id > second.id
    assert len(reg) == 1
    assert first.id not in reg and second.id not in reg


def test_update_replaces_every_field():
    reg = ProductRegistry(clock=ticker())
    p = reg.add_product(widget(certification="ISO 9001", iot_data="temp=4"))
    payload = ProductPayload(status="Delivered", name="Widget v2", origin="Factory B",
                             current_location="Store", certification=None, iot_data=None)
    u = reg.update_product(p.id, payload)
    assert (u.status, u.name, u.origin, u.current_location) == ("Delivered", "Widget v2", "Factory B", "Store")
    assert u.certification is None
    assert u.iot_data is None
    assert u.id == p.id
    assert u.timestamp == p.timestamp
    assert u.last_update == 1010


def test_last_update_follows_latest_update():
    reg = ProductRegistry(clock=ticker())
    p = reg.add_product(widget())
    reg.update_product(p.id, widget(status="a"))
    latest = reg.update_product(p.id, widget(status="b"))
    assert latest.last_update == 1020
    assert reg.get_product(p.id).last_update == 1020


def test_last_update_never_before_creation():
    times = iter([5000, 10])
    reg = ProductRegistry(clock=lambda: next(times))
    p = reg.add_product(widget())
    u = reg.update_product(p.id, widget())
    assert u.last_update == 5000


def test_empty_string_is_not_absent():
    reg = ProductRegistry()
    p = reg.add_product(widget(certification="", iot_data=None))
    assert p.certification == ""
    assert p.iot_data is None


def test_missing_ids_raise_not_found():
    reg = ProductRegistry()
    with pytest.raises(NotFound, match="Product with id=42 not found"):
        reg.get_product(42)
    with pytest.raises(NotFound, match="Cannot update product with id=42"):
        reg.update_product(42, widget())
    with pytest.raises(NotFound, match="Cannot delete product with id=42"):
        reg.delete_product(42)
    assert len(reg) == 0


def test_second_delete_fails():
    reg = ProductRegistry()
    p = reg.add_product(widget())
    reg.delete_product(p.id)
    with pytest.raises(NotFound):
        reg.delete_product(p.id)


def test_update_after_delete_fails():
    reg = ProductRegistry()
    p = reg.add_product(widget())
    reg.delete_product(p.id)
    with pytest.raises(NotFound):
        reg.update_product(p.id, widget())


def test_returned_product_cannot_be_mutated():
    reg = ProductRegistry()
    p = reg.add_product(widget())
    with pytest.raises(Exception):
        p.status = "tampered"
    assert reg.get_product(p.id).status == "created"


def test_strict_mode_rejects_blank_fields():
    reg = ProductRegistry(strict=True)
    with pytest.raises(InvalidInput, match="Product name cannot be empty"):
        reg.add_product(widget(name="  "))
    with pytest.raises(InvalidInput, match="Status cannot be empty"):
        reg.add_product(widget(status=""))
    # rejected adds do not burn ids
    assert reg.add_product(widget()).id == 1

    with pytest.raises(InvalidInput, match="Current location cannot be empty"):
        reg.update_product(1, widget(current_location=""))
    assert reg.get_product(1).last_update is None


def test_lenient_mode_accepts_blank_fields():
    reg = ProductRegistry()
    p = reg.add_product(widget(name=""))
    assert p.name == ""


def test_not_found_is_not_invalid_input():
    assert not issubclass(NotFound, InvalidInput)
    assert NotFound("x").to_dict() == {"error": "NotFound", "msg": "x"}


def test_reset_keeps_ids_retired():
    reg = ProductRegistry()
    issued = [reg.add_product(widget()).id for _ in range(3)]
    reg.reset()
    assert len(reg) == 0
    for pid in issued:
        with pytest.raises(NotFound):
            reg.get_product(pid)
    assert reg.add_product(widget()).id > max(issued)


def test_independent_registries():
    a = ProductRegistry()
    b = ProductRegistry()
    a.add_product(widget())
    assert len(b) == 0
    assert b.add_product(widget()).id == 1


def test_strict_mode_caps_encoded_size():
    reg = ProductRegistry(strict=True, max_product_bytes=2048)
    with pytest.raises(InvalidInput, match="limit is 2048"):
        reg.add_product(widget(iot_data="x" * 4096))
    assert len(reg) == 0

    p = reg.add_product(widget(iot_data="x" * 100))
    assert p.id == 1
    with pytest.raises(InvalidInput, match="limit is 2048"):
        reg.update_product(p.id, widget(certification="c" * 4096))
    assert reg.get_product(p.id) == p


def test_size_cap_ignored_outside_strict_mode():
    reg = ProductRegistry(max_product_bytes=2048)
    p = reg.add_product(widget(iot_data="x" * 4096))
    assert len(p.iot_data) == 4096


def test_counter_overflow_is_a_defect():
    reg = ProductRegistry()
    reg.restore(RegistrySnapshot(next_id=U64_MAX))
    with pytest.raises(RuntimeError, match="Cannot increment ID counter"):
        reg.add_product(widget())
    assert len(reg) == 0


def test_last_u64_id_can_be_issued():
    reg = ProductRegistry()
    reg.restore(RegistrySnapshot(next_id=U64_MAX - 1))
    assert reg.add_product(widget()).id == U64_MAX
