"""Bluetooth SIG assigned-number lookups.

The tables live as YAML next to this module (``data/*.yaml``) and are read
once, on first use, into read-only mappings. Lookups are exact matches on
128-bit UUIDs (or 16-bit company identifiers); anything not listed resolves
to ``"unknown"``.
"""
from __future__ import annotations
import logging, uuid, yaml
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from .errors import RegistryError

log = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
UNKNOWN = "unknown"

# 0000xxxx-0000-1000-8000-00805f9b34fb
BASE_UUID = uuid.UUID("00000000-0000-1000-8000-00805f9b34fb")

UuidLike = Union[uuid.UUID, str, int]
ManufacturerData = Union[Mapping[int, bytes], bytes, bytearray, memoryview]

def from_short(value: int) -> uuid.UUID:
    """Expand a 16/32-bit assigned number onto the Bluetooth Base UUID."""
    if not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"short UUID out of range: {value:#x}")
    return uuid.UUID(int=(value << 96) | BASE_UUID.int)

def to_uuid(value: UuidLike) -> uuid.UUID:
    """Normalize a UUID object, canonical string, or short alias."""
    if isinstance(value, uuid.UUID):
        return value
    if isinstance(value, int):
        return from_short(value) if value <= 0xFFFFFFFF else uuid.UUID(int=value)
    s = str(value).strip().lower()
    if s.startswith("0x"):
        s = s[2:]
    if 0 < len(s) <= 8:
        return from_short(int(s, 16))
    return uuid.UUID(s)

def _read(name: str) -> Dict[Any, Any]:
    path = DATA_DIR / f"{name}.yaml"
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise RegistryError(f"cannot load {path.name}: {e}") from e
    if not isinstance(raw, dict):
        raise RegistryError(f"{path.name}: expected a mapping")
    return raw

@lru_cache(maxsize=None)
def uuid_table(name: str) -> Mapping[uuid.UUID, str]:
    """Return the named GATT table ('services', 'characteristics', 'descriptors')."""
    out: Dict[uuid.UUID, str] = {}
    for key, value in _read(name).items():
        try:
            out[to_uuid(key)] = str(value)
        except ValueError as e:
            raise RegistryError(f"{name}.yaml: bad key {key!r}") from e
    log.debug("loaded %d %s", len(out), name)
    return MappingProxyType(out)

@lru_cache(maxsize=None)
def manufacturer_table() -> Mapping[int, str]:
    out: Dict[int, str] = {}
    for key, value in _read("manufacturers").items():
        try:
            cid = key if isinstance(key, int) else int(str(key), 0)
        except ValueError as e:
            raise RegistryError(f"manufacturers.yaml: bad key {key!r}") from e
        if not 0 <= cid <= 0xFFFF:
            raise RegistryError(f"manufacturers.yaml: company id out of range {key!r}")
        out[cid] = str(value)
    log.debug("loaded %d manufacturers", len(out))
    return MappingProxyType(out)

def _find(name: str, value: UuidLike) -> str:
    return uuid_table(name).get(to_uuid(value), UNKNOWN)

def find_service_type(value: UuidLike) -> str:
    return _find("services", value)

def find_characteristic_type(value: UuidLike) -> str:
    return _find("characteristics", value)

def find_descriptor_type(value: UuidLike) -> str:
    return _find("descriptors", value)

def manufacturer_name(cid: int) -> str:
    return manufacturer_table().get(cid, UNKNOWN)

def company_id(payload: Union[bytes, bytearray, memoryview]) -> Optional[int]:
    """Company identifier from raw manufacturer specific data (little-endian)."""
    if len(payload) < 2:
        return None
    return int.from_bytes(bytes(payload[:2]), "little")

def find_manufacturer(data: Optional[ManufacturerData]) -> Optional[str]:
    """Resolve advertised manufacturer data to a company name.

    Accepts either the ``{company_id: payload}`` mapping reported by the BLE
    stack or a raw manufacturer-data payload. Returns None when nothing was
    advertised, so the caller can apply its own default.
    """
    if not data:
        return None
    if isinstance(data, (bytes, bytearray, memoryview)):
        cid = company_id(data)
        return None if cid is None else manufacturer_name(cid)
    return manufacturer_name(next(iter(data)))
