from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from .formatting import format_table
from .registry import find_manufacturer

SCAN_HEADERS = ("IDENTIFIER", "RSSI [dBm]", "NAME", "MANUFACTURER")

@dataclass
class PeripheralDescriptor:
    """One row of scan output."""
    device_id: str
    rssi: int = 0
    name: str = ""
    manufacturer: str = ""

    @classmethod
    def new(cls, device_id: str, rssi: Optional[int] = None, name: Optional[str] = None,
            manufacturer: Optional[str] = None) -> "PeripheralDescriptor":
        return cls(
            device_id=str(device_id),
            rssi=rssi if rssi is not None else 0,
            name=name or "",
            manufacturer=manufacturer or "",
        )

    def row(self) -> tuple:
        return (self.device_id, self.rssi, self.name, self.manufacturer)

def from_advertisement(device: Any, adv: Any = None) -> PeripheralDescriptor:
    """Build a descriptor from a bleak BLEDevice and its AdvertisementData.

    Without advertisement data only the identifier is known.
    """
    if adv is None:
        return PeripheralDescriptor.new(device.address)
    return PeripheralDescriptor.new(
        device.address,
        getattr(adv, "rssi", None),
        getattr(adv, "local_name", None),
        find_manufacturer(getattr(adv, "manufacturer_data", None)),
    )

def sort_descriptors(descriptors: Iterable[PeripheralDescriptor], by_rssi: bool = False) -> List[PeripheralDescriptor]:
    """Strongest signal first when by_rssi, otherwise by identifier. Stable."""
    if by_rssi:
        return sorted(descriptors, key=lambda d: d.rssi, reverse=True)
    return sorted(descriptors, key=lambda d: d.device_id)

def format_scan_table(descriptors: Iterable[PeripheralDescriptor]) -> str:
    return format_table(SCAN_HEADERS, [d.row() for d in descriptors], right_align=(1,))
