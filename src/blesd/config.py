from __future__ import annotations
import os, yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Any, Dict

DEFAULT_SCAN_TIME = 11
COLOR_MODES = ("auto", "always", "never")

@dataclass
class ScanCfg:
    # seconds the scanner listens for advertisements
    scan_time: int = DEFAULT_SCAN_TIME
    sort_by_rssi: bool = False
    # Explicit adapter (e.g. "hci1"). When unset exactly one adapter must exist.
    adapter: Optional[str] = None

@dataclass
class OutputCfg:
    # 'auto' colors only when stderr is a terminal and NO_COLOR is unset
    color: str = "auto"

@dataclass
class LoggingCfg:
    level: str = "WARNING"
    # Level for the 'bleak' logger; None leaves it at the root level.
    bleak_level: Optional[str] = None

@dataclass
class AppCfg:
    scan: ScanCfg = field(default_factory=ScanCfg)
    output: OutputCfg = field(default_factory=OutputCfg)
    logging: LoggingCfg = field(default_factory=LoggingCfg)

def _as_int(d: Dict[str, Any], key: str, default: int) -> int:
    v = d.get(key, default)
    try:
        return int(v)
    except (TypeError, ValueError):
        return default

def _as_bool(d: Dict[str, Any], key: str, default: bool) -> bool:
    v = d.get(key, default)
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "on"):
            return True
        if s in ("0", "false", "no", "off"):
            return False
    return default

def _as_str(d: Dict[str, Any], key: str, default: Optional[str]) -> Optional[str]:
    v = d.get(key, default)
    if v is None:
        return default
    return str(v)

def find_config_path() -> Optional[Path]:
    """Return the config file to use, or None when there is none."""
    env = os.getenv("BLESD_CONFIG")
    if env:
        return Path(env).expanduser()
    p = Path("~/.config/blesd/config.yaml").expanduser()
    return p if p.exists() else None

def load_config(path: Optional[str | os.PathLike] = None) -> AppCfg:
    if path is None:
        return AppCfg()
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping at top level")

    scan_raw = dict(raw.get("scan") or {})
    scan = ScanCfg(
        scan_time=_as_int(scan_raw, "scan_time", ScanCfg.scan_time),
        sort_by_rssi=_as_bool(scan_raw, "sort_by_rssi", ScanCfg.sort_by_rssi),
        adapter=_as_str(scan_raw, "adapter", ScanCfg.adapter),
    )
    if scan.scan_time < 0:
        scan.scan_time = DEFAULT_SCAN_TIME

    out_raw = dict(raw.get("output") or {})
    color = (_as_str(out_raw, "color", OutputCfg.color) or OutputCfg.color).lower()
    output = OutputCfg(color=color if color in COLOR_MODES else OutputCfg.color)

    log_raw = dict(raw.get("logging") or {})
    log = LoggingCfg(
        level=(_as_str(log_raw, "level", LoggingCfg.level) or LoggingCfg.level).upper(),
        bleak_level=_as_str(log_raw, "bleak_level", LoggingCfg.bleak_level),
    )
    return AppCfg(scan=scan, output=output, logging=log)
