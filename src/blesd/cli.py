"""blesd command line: scan for BLE peripherals and dump their GATT services."""
from __future__ import annotations
import argparse, asyncio, logging, os, sys
from importlib.metadata import PackageNotFoundError, version
from typing import List, Optional, TextIO

import yaml

from .ble import central
from .config import AppCfg, COLOR_MODES, DEFAULT_SCAN_TIME, find_config_path, load_config
from .discovery import describe_peripheral
from .errors import EXIT_FAILURE, EXIT_OK, BlesdError, NothingFound, PeripheralNotFoundError
from .formatting import colorize
from .logs import level_for, setup_logging
from .peripheral import format_scan_table, from_advertisement, sort_descriptors

log = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130

def _version() -> str:
    try:
        return version("blesd")
    except PackageNotFoundError:
        return "unknown"

def _seconds(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid scan time: {value!r}")
    if n < 0:
        raise argparse.ArgumentTypeError("scan time must not be negative")
    return n

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="blesd", description=__doc__)
    ap.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    ap.add_argument("--config", default=None, help="YAML config file (default: $BLESD_CONFIG or ~/.config/blesd/config.yaml)")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="log progress to stderr (-vv for debug)")
    ap.add_argument("--color", choices=COLOR_MODES, default=None, help="colorize error labels")
    sub = ap.add_subparsers(dest="command", metavar="COMMAND", required=True)

    sp = sub.add_parser("discover", help="Discover services provided by a peripheral device")
    sp.add_argument("device_id", help="Identifier of the peripheral device")
    sp.add_argument("-t", "--scan-time", type=_seconds, default=None,
                    help=f"Scan time in seconds (default: {DEFAULT_SCAN_TIME})")
    sp.add_argument("-a", "--adapter", default=None, help="Bluetooth adapter to use (e.g. hci1)")

    sp = sub.add_parser("scan", help="Scan for peripheral devices")
    sp.add_argument("-r", "--sort-by-rssi", action="store_true", default=None,
                    help="Sort devices by RSSI (strongest to weakest) instead of by identifier")
    sp.add_argument("-t", "--scan-time", type=_seconds, default=None,
                    help=f"Scan time in seconds (default: {DEFAULT_SCAN_TIME})")
    sp.add_argument("-a", "--adapter", default=None, help="Bluetooth adapter to use (e.g. hci1)")
    return ap


class Console:
    """Results and progress go to `out`; labelled errors go to `err`."""

    def __init__(self, out: TextIO, err: TextIO, color: bool):
        self.out = out
        self.err = err
        self.color = color

    def progress(self, message: str) -> None:
        print(message, file=self.out, flush=True)

    def result(self, text: str) -> None:
        print(f"\n{text}", file=self.out)

    def report(self, error: BlesdError) -> None:
        label = colorize(f"{error.label}: ", "green" if error.label == "done" else "red", self.color)
        message = error.message
        if error.highlight:
            message = message.replace(error.highlight, colorize(error.highlight, "yellow", self.color), 1)
        print(f"{label}{message}", file=self.err)

def use_color(mode: str, stream: TextIO) -> bool:
    if mode == "always":
        return True
    if mode == "never":
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty()) and not os.getenv("NO_COLOR")


def _adapter(args: argparse.Namespace, cfg: AppCfg) -> str:
    return central.select_adapter(central.list_adapters(), args.adapter or cfg.scan.adapter)

def _scan_time(args: argparse.Namespace, cfg: AppCfg) -> int:
    return args.scan_time if args.scan_time is not None else cfg.scan.scan_time

async def run_scan(args: argparse.Namespace, cfg: AppCfg, console: Console) -> int:
    adapter = _adapter(args, cfg)
    console.progress("Scanning ...")
    found = await central.scan(adapter, _scan_time(args, cfg))
    if not found:
        raise NothingFound()

    by_rssi = args.sort_by_rssi if args.sort_by_rssi is not None else cfg.scan.sort_by_rssi
    descriptors = sort_descriptors((from_advertisement(dev, adv) for dev, adv in found), by_rssi)
    console.result(format_scan_table(descriptors))
    return EXIT_OK

async def run_discover(args: argparse.Namespace, cfg: AppCfg, console: Console) -> int:
    adapter = _adapter(args, cfg)
    console.progress("Scanning ...")
    found = await central.scan(adapter, _scan_time(args, cfg))
    device = next((dev for dev, _adv in found if str(dev.address) == args.device_id), None)
    if device is None:
        raise PeripheralNotFoundError(args.device_id)

    console.progress("Connecting ...")
    client = await central.connect(device, adapter)
    try:
        console.progress("Discovering services ...")
        services = central.discover_services(client)
        console.result(describe_peripheral(str(device.address), services))
    finally:
        await central.disconnect(client)
    return EXIT_OK

COMMANDS = {
    "scan": run_scan,
    "discover": run_discover,
}

def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> int:
    out = out or sys.stdout
    err = err or sys.stderr
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config or find_config_path())
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"{colorize('error: ', 'red', use_color(args.color or 'auto', err))}cannot read config: {e}", file=err)
        return EXIT_FAILURE

    setup_logging(level_for(cfg.logging.level, args.verbose), cfg.logging.bleak_level)
    console = Console(out, err, use_color(args.color or cfg.output.color, err))
    log.debug("command=%s config=%s", args.command, cfg)

    try:
        return asyncio.run(COMMANDS[args.command](args, cfg, console))
    except BlesdError as e:
        console.report(e)
        return e.exit_code
    except KeyboardInterrupt:
        console.report(BlesdError("interrupted"))
        return EXIT_INTERRUPTED

if __name__ == "__main__":
    sys.exit(main())
