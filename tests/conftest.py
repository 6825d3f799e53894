import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest


# Ensure the 'src' directory (where the package lives) is importable
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
sys.path.insert(0, str(SRC_DIR))


def sig(short: int) -> str:
    """Full 128-bit string form of a SIG assigned number, as bleak reports it."""
    return f"{short:08x}-0000-1000-8000-00805f9b34fb"


# Stand-ins for the bleak records the CLI reads

@dataclass
class FakeDevice:
    address: str
    name: Optional[str] = None


@dataclass
class FakeAdv:
    rssi: Optional[int] = None
    local_name: Optional[str] = None
    manufacturer_data: Dict[int, bytes] = field(default_factory=dict)


@dataclass
class FakeDescriptor:
    uuid: str


@dataclass
class FakeCharacteristic:
    uuid: str
    properties: List[str] = field(default_factory=list)
    descriptors: List[FakeDescriptor] = field(default_factory=list)


@dataclass
class FakeService:
    uuid: str
    characteristics: List[FakeCharacteristic] = field(default_factory=list)
    obj: Any = None


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    # never pick up a developer's ~/.config/blesd/config.yaml
    monkeypatch.delenv("BLESD_CONFIG", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
