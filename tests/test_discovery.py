from blesd.discovery import (describe_characteristic, describe_descriptor, describe_peripheral,
                             describe_service, is_primary)
from blesd.formatting import format_box
from conftest import FakeCharacteristic, FakeDescriptor, FakeService, sig


def test_descriptor_block():
    assert describe_descriptor(FakeDescriptor(sig(0x2902))) == (
        "uuid: 0x2902\ntype: Client Characteristic Configuration"
    )


def test_characteristic_without_descriptors_has_no_box():
    ch = FakeCharacteristic(sig(0x2A19), ["read", "notify"])
    assert describe_characteristic(ch) == "uuid: 0x2a19\ntype: Battery Level\nproperties: read, notify"


def test_characteristic_boxes_its_descriptors():
    ch = FakeCharacteristic(sig(0x2A19), ["read"], [FakeDescriptor(sig(0x2902))])
    out = describe_characteristic(ch)
    head, _, rest = out.partition("\n╭")
    assert head == "uuid: 0x2a19\ntype: Battery Level\nproperties: read"
    assert "╭" + rest == format_box(describe_descriptor(FakeDescriptor(sig(0x2902))), "DESCRIPTOR")


def test_vendor_uuids_render_in_full_with_unknown_type():
    vendor = "6e400001-b5a3-f393-e0a9-e50e24dcca9e"
    out = describe_service(FakeService(vendor))
    assert out == f"uuid: {vendor}\ntype: unknown\nprimary: true"


def test_device_with_one_empty_service():
    svc = FakeService(sig(0x180F))
    out = describe_peripheral("AA:BB", [svc])
    inner = format_box("uuid: 0x180f\ntype: Battery service\nprimary: true", "SERVICE")
    assert out == format_box(f"identifier: AA:BB\n{inner}", "PERIPHERAL DEVICE")
    assert out.count("│ SERVICE") == 1
    assert "CHARACTERISTIC" not in out


def test_nesting_depth_grows_towards_the_device():
    svc = FakeService(sig(0x180F), [
        FakeCharacteristic(sig(0x2A19), ["read", "notify"], [FakeDescriptor(sig(0x2902))]),
    ])
    lines = describe_peripheral("dev", [svc]).split("\n")
    indent = {}
    for title in ("PERIPHERAL DEVICE", "SERVICE", "CHARACTERISTIC", "DESCRIPTOR"):
        line = next(l for l in lines if l.rstrip(" │").endswith(title) and f"│ {title}" in l)
        indent[title] = line.index(f"│ {title}")
    assert indent["PERIPHERAL DEVICE"] < indent["SERVICE"] < indent["CHARACTERISTIC"] < indent["DESCRIPTOR"]


def test_device_without_services():
    # identifier line followed by an empty service section
    assert describe_peripheral("dev", []) == format_box("identifier: dev\n", "PERIPHERAL DEVICE")


class _CBService:
    def __init__(self, primary):
        self._primary = primary

    def isPrimary(self):
        return self._primary


def test_primary_flag_from_backend_records():
    assert is_primary(FakeService(sig(0x1800), obj={"Primary": False})) is False
    assert is_primary(FakeService(sig(0x1800), obj={"Primary": True})) is True
    assert is_primary(FakeService(sig(0x1800), obj=_CBService(False))) is False
    assert is_primary(FakeService(sig(0x1800))) is True
    assert "primary: false" in describe_service(FakeService(sig(0x1800), obj={"Primary": False}))
