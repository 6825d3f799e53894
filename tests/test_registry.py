import uuid

import pytest

from blesd import registry
from blesd.registry import (UNKNOWN, company_id, find_characteristic_type, find_descriptor_type,
                            find_manufacturer, find_service_type, manufacturer_name, to_uuid)
from conftest import sig


def test_known_service_characteristic_descriptor():
    assert find_service_type(uuid.UUID(sig(0x180F))) == "Battery service"
    assert find_service_type(sig(0x1800)) == "Generic Access service"
    assert find_characteristic_type(sig(0x2A19)) == "Battery Level"
    assert find_characteristic_type(sig(0x2A00)) == "Device Name"
    assert find_descriptor_type(sig(0x2902)) == "Client Characteristic Configuration"


def test_short_aliases_resolve_to_the_same_entry():
    assert find_service_type("0x180f") == find_service_type("180F") == find_service_type(0x180F)
    assert to_uuid("0x2a19") == uuid.UUID(sig(0x2A19))


def test_missing_entries_are_unknown():
    vendor = "6e400001-b5a3-f393-e0a9-e50e24dcca9e"
    assert find_service_type(vendor) == UNKNOWN
    assert find_characteristic_type(vendor) == UNKNOWN
    assert find_descriptor_type(vendor) == UNKNOWN
    # a characteristic number is not a service
    assert find_service_type(sig(0x2A19)) == UNKNOWN
    assert manufacturer_name(0xFFFF) == UNKNOWN


def test_lookup_is_exact_match_on_128_bits():
    # same short number, different suffix
    assert find_service_type("0000180f-0000-1000-8000-00805f9b34fc") == UNKNOWN


def test_lookups_are_repeatable():
    assert [find_characteristic_type("0x2a37") for _ in range(3)] == ["Heart Rate Measurement"] * 3


def test_tables_are_read_only():
    table = registry.uuid_table("services")
    with pytest.raises(TypeError):
        table[uuid.UUID(sig(0x1234))] = "nope"  # type: ignore[index]
    assert registry.uuid_table("services") is table


def test_manufacturer_from_mapping():
    assert find_manufacturer({0x004C: b"\x02\x15"}) == "Apple, Inc."
    assert find_manufacturer({0x0059: b""}) == "Nordic Semiconductor ASA"
    assert find_manufacturer({0xFFFE: b"\x00"}) == UNKNOWN


def test_manufacturer_absent_is_none():
    assert find_manufacturer({}) is None
    assert find_manufacturer(None) is None


def test_manufacturer_from_raw_payload_is_little_endian():
    assert company_id(b"\x4c\x00\x02\x15") == 0x004C
    assert find_manufacturer(b"\x06\x00\x01") == "Microsoft"
    assert company_id(b"\x4c") is None
    assert find_manufacturer(b"\x4c") is None


def test_bad_data_file_raises(tmp_path, monkeypatch):
    (tmp_path / "services.yaml").write_text('"not-a-uuid-at-all-xyz": "x"\n', encoding="utf-8")
    monkeypatch.setattr(registry, "DATA_DIR", tmp_path)
    registry.uuid_table.cache_clear()
    try:
        with pytest.raises(registry.RegistryError):
            registry.uuid_table("services")
    finally:
        monkeypatch.undo()
        registry.uuid_table.cache_clear()
