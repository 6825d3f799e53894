"""Thin boundary around bleak: adapters, scanning, connect and service discovery.

Every failure coming out of the BLE stack is logged and re-raised as the
matching :mod:`blesd.errors` type; nothing here retries.
"""
from __future__ import annotations
import asyncio, logging, sys
from pathlib import Path
from typing import Any, List, Optional, Tuple

from bleak import BleakClient, BleakScanner

from ..errors import (AdapterNotFoundError, ConnectError, DiscoveryError, MultipleAdaptersError,
                      NoAdapterError, ScanError)

log = logging.getLogger(__name__)

SYSFS_BLUETOOTH = Path("/sys/class/bluetooth")
# Non-Linux backends (CoreBluetooth, WinRT) expose the single system radio only
DEFAULT_ADAPTER = "default"

def list_adapters() -> List[str]:
    """Names of the usable Bluetooth adapters (hciN on Linux)."""
    if not sys.platform.startswith("linux"):
        return [DEFAULT_ADAPTER]
    try:
        # hci0:12 style entries are connections, not controllers
        names = [p.name for p in SYSFS_BLUETOOTH.iterdir() if p.name.startswith("hci") and ":" not in p.name]
    except FileNotFoundError:
        names = []
    log.debug("adapters: %s", names)
    return sorted(names)

def select_adapter(adapters: List[str], wanted: Optional[str] = None) -> str:
    if not adapters:
        raise NoAdapterError()
    if wanted:
        if wanted not in adapters:
            raise AdapterNotFoundError(wanted)
        return wanted
    if len(adapters) > 1:
        raise MultipleAdaptersError()
    return adapters[0]

def _adapter_kwargs(adapter: str) -> dict:
    return {} if adapter == DEFAULT_ADAPTER else {"adapter": adapter}

async def scan(adapter: str, seconds: float) -> List[Tuple[Any, Any]]:
    """Listen for advertisements for `seconds`; returns (BLEDevice, AdvertisementData) pairs."""
    scanner = BleakScanner(**_adapter_kwargs(adapter))
    try:
        await scanner.start()
    except Exception as e:
        log.debug("scanner start failed on %s", adapter, exc_info=True)
        raise ScanError() from e
    await asyncio.sleep(seconds)
    try:
        await scanner.stop()
    except Exception as e:
        log.debug("scanner stop failed on %s", adapter, exc_info=True)
        raise ScanError() from e
    found = list(scanner.discovered_devices_and_advertisement_data.values())
    log.info("scan on %s finished, %d device(s)", adapter, len(found))
    return found

async def connect(device: Any, adapter: str = DEFAULT_ADAPTER) -> Any:
    client = BleakClient(device, **_adapter_kwargs(adapter))
    try:
        await client.connect()
    except Exception as e:
        log.debug("connect to %s failed", getattr(device, "address", device), exc_info=True)
        raise ConnectError() from e
    return client

def discover_services(client: Any) -> List[Any]:
    """Services resolved on connect; bleak raises if discovery did not complete."""
    try:
        return list(client.services)
    except Exception as e:
        log.debug("service discovery failed", exc_info=True)
        raise DiscoveryError() from e

async def disconnect(client: Any) -> None:
    try:
        await client.disconnect()
    except Exception:
        log.debug("disconnect failed", exc_info=True)
