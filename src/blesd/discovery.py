"""Render a discovered GATT tree as nested boxes.

Each level is described bottom-up: an item's own lines first, then the boxed
text of its children (only when it has any). The peripheral is the outermost
box and always carries its service section, even an empty one.
"""
from __future__ import annotations
from typing import Any, Iterable

from .formatting import format_characteristic_properties, format_subitems, format_uuid
from .registry import find_characteristic_type, find_descriptor_type, find_service_type

def _with_children(own: str, children: list, title: str) -> str:
    if not children:
        return own
    return f"{own}\n{format_subitems(children, title)}"

def is_primary(service: Any) -> bool:
    """Primary flag of a bleak service; backends that only report primary services default to True."""
    obj = getattr(service, "obj", None)
    # BlueZ: D-Bus property dict
    if isinstance(obj, dict):
        return bool(obj.get("Primary", True))
    # CoreBluetooth: CBService
    flag = getattr(obj, "isPrimary", None)
    if callable(flag):
        return bool(flag())
    return True

def describe_descriptor(descriptor: Any) -> str:
    return (f"uuid: {format_uuid(descriptor.uuid)}\n"
            f"type: {find_descriptor_type(descriptor.uuid)}")

def describe_characteristic(characteristic: Any) -> str:
    own = (f"uuid: {format_uuid(characteristic.uuid)}\n"
           f"type: {find_characteristic_type(characteristic.uuid)}\n"
           f"properties: {format_characteristic_properties(characteristic.properties or [])}")
    descriptors = [describe_descriptor(d) for d in characteristic.descriptors]
    return _with_children(own, descriptors, "DESCRIPTOR")

def describe_service(service: Any) -> str:
    own = (f"uuid: {format_uuid(service.uuid)}\n"
           f"type: {find_service_type(service.uuid)}\n"
           f"primary: {str(is_primary(service)).lower()}")
    characteristics = [describe_characteristic(c) for c in service.characteristics]
    return _with_children(own, characteristics, "CHARACTERISTIC")

def describe_peripheral(device_id: str, services: Iterable[Any]) -> str:
    # the device box always ends with its SERVICE section, blank when there is none
    service_boxes = format_subitems([describe_service(s) for s in services], "SERVICE")
    return format_subitems([f"identifier: {device_id}\n{service_boxes}"], "PERIPHERAL DEVICE")
