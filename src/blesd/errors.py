from __future__ import annotations
from typing import Optional

EXIT_OK = 0
EXIT_FAILURE = -1


class BlesdError(Exception):
    """Terminal condition for a single CLI run.

    Carries the message printed to stderr, the severity label it is
    printed with and the process exit code.
    """
    label = "error"
    exit_code = EXIT_FAILURE

    def __init__(self, message: str, *, highlight: Optional[str] = None):
        super().__init__(message)
        self.message = message
        # substring of message to emphasize when printed (e.g. a device id)
        self.highlight = highlight


# --- environment ---

class NoAdapterError(BlesdError):
    exit_code = EXIT_OK

    def __init__(self):
        super().__init__("no Bluetooth adapters found")


class MultipleAdaptersError(BlesdError):
    def __init__(self):
        super().__init__("multiple Bluetooth adapters found, disconnect or disable redundant ones")


class AdapterNotFoundError(BlesdError):
    def __init__(self, adapter: str):
        super().__init__(f"no Bluetooth adapter '{adapter}' found", highlight=adapter)


# --- operational ---

class ScanError(BlesdError):
    def __init__(self):
        super().__init__("scanning peripheral devices failed (Bluetooth not enabled?)")


class ConnectError(BlesdError):
    def __init__(self):
        super().__init__("connecting device failed (device already connected by someone else?)")


class DiscoveryError(BlesdError):
    def __init__(self):
        super().__init__("discovering services failed")


# --- not found / empty results ---

class PeripheralNotFoundError(BlesdError):
    exit_code = EXIT_OK

    def __init__(self, device_id: str):
        super().__init__(f"no peripheral device with identifier '{device_id}' found", highlight=device_id)


class NothingFound(BlesdError):
    label = "done"
    exit_code = EXIT_OK

    def __init__(self):
        super().__init__("no peripheral devices found")


class RegistryError(Exception):
    """A bundled identifier table could not be parsed."""
