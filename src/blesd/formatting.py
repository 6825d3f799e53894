from __future__ import annotations
import unicodedata
from enum import IntFlag
from typing import Iterable, List, Sequence, Union

from .registry import BASE_UUID, UuidLike, to_uuid

# Lower 96 bits of the Bluetooth Base UUID, shared by every SIG-assigned
# 16/32-bit UUID.
BASE_UUID_MASK = BASE_UUID.int

def format_uuid(value: UuidLike) -> str:
    """Short '0x....' alias for base-UUID derived values, canonical form otherwise.

    A UUID is shortened when all the base suffix bits are set in its lower
    96 bits, SIG-assigned or not.
    """
    u = to_uuid(value)
    bits = u.int
    if bits & BASE_UUID_MASK == BASE_UUID_MASK:
        return f"{bits >> 96:#04x}"
    return str(u)


class CharacteristicProperty(IntFlag):
    """Characteristic properties bit field (Core spec Vol 3, Part G, 3.3.1.1)."""
    BROADCAST = 0x01
    READ = 0x02
    WRITE_WITHOUT_RESPONSE = 0x04
    WRITE = 0x08
    NOTIFY = 0x10
    INDICATE = 0x20
    AUTHENTICATED_SIGNED_WRITES = 0x40
    EXTENDED_PROPERTIES = 0x80

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "CharacteristicProperty":
        """Build flags from bleak-style names ('write-without-response', ...).

        Names without a bit here (e.g. 'reliable-write') are ignored.
        """
        flags = cls(0)
        for name in names or ():
            key = str(name).strip().lower().replace("_", "-").replace(" ", "-")
            flag = _PROPERTY_NAMES.get(key)
            if flag is not None:
                flags |= flag
        return flags


_PROPERTY_NAMES = {
    "broadcast": CharacteristicProperty.BROADCAST,
    "read": CharacteristicProperty.READ,
    "write-without-response": CharacteristicProperty.WRITE_WITHOUT_RESPONSE,
    "write": CharacteristicProperty.WRITE,
    "notify": CharacteristicProperty.NOTIFY,
    "indicate": CharacteristicProperty.INDICATE,
    "authenticated-signed-writes": CharacteristicProperty.AUTHENTICATED_SIGNED_WRITES,
    "extended-properties": CharacteristicProperty.EXTENDED_PROPERTIES,
}

# Display order is fixed, independent of bit positions.
_PROPERTY_LABELS = (
    (CharacteristicProperty.BROADCAST, "broadcast"),
    (CharacteristicProperty.READ, "read"),
    (CharacteristicProperty.WRITE_WITHOUT_RESPONSE, "write without response"),
    (CharacteristicProperty.WRITE, "write"),
    (CharacteristicProperty.NOTIFY, "notify"),
    (CharacteristicProperty.INDICATE, "indicate"),
    (CharacteristicProperty.AUTHENTICATED_SIGNED_WRITES, "authenticated signed writes"),
    (CharacteristicProperty.EXTENDED_PROPERTIES, "extended properties"),
)

def format_characteristic_properties(props: Union[int, Iterable[str]]) -> str:
    if not isinstance(props, int):
        props = CharacteristicProperty.from_names(props)
    return ", ".join(label for flag, label in _PROPERTY_LABELS if props & flag)


# --- text layout ---

def display_width(text: str) -> int:
    w = 0
    for ch in text:
        if unicodedata.combining(ch):
            continue
        w += 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1
    return w

def _pad(text: str, width: int, right: bool = False) -> str:
    fill = " " * (width - display_width(text))
    return fill + text if right else text + fill

def _rule(left: str, mid: str, right: str, widths: Sequence[int]) -> str:
    return left + mid.join("─" * (w + 2) for w in widths) + right

def format_box(text: str, title: str) -> str:
    """Frame text in a rounded box with a title row.

    ╭───────╮
    │ TITLE │
    ├───────┤
    │ text  │
    ╰───────╯
    """
    head = title.split("\n")
    body = text.split("\n")
    width = max(display_width(line) for line in head + body)
    out = [_rule("╭", "", "╮", [width])]
    out += [f"│ {_pad(line, width)} │" for line in head]
    out.append(_rule("├", "", "┤", [width]))
    out += [f"│ {_pad(line, width)} │" for line in body]
    out.append(_rule("╰", "", "╯", [width]))
    return "\n".join(out)

def format_subitems(items: Iterable[str], title: str) -> str:
    """Box every item under the same title, one box after another."""
    return "\n".join(format_box(item, title) for item in items)

def format_table(headers: Sequence[str], rows: Iterable[Sequence[object]], right_align: Iterable[int] = ()) -> str:
    """Rounded-border table; columns listed in right_align are right-aligned, header included."""
    cells: List[List[str]] = [[str(c) for c in row] for row in rows]
    right = set(right_align)
    widths = [display_width(h) for h in headers]
    for row in cells:
        if len(row) != len(headers):
            raise ValueError(f"row has {len(row)} cells, expected {len(headers)}")
        for i, c in enumerate(row):
            widths[i] = max(widths[i], display_width(c))

    def line(values: Sequence[str]) -> str:
        return "│" + "│".join(f" {_pad(v, widths[i], i in right)} " for i, v in enumerate(values)) + "│"

    out = [_rule("╭", "┬", "╮", widths), line(headers), _rule("├", "┼", "┤", widths)]
    out += [line(row) for row in cells]
    out.append(_rule("╰", "┴", "╯", widths))
    return "\n".join(out)


# --- terminal colors ---

COLORS = {
    'red': '\033[91m',
    'green': '\033[92m',
    'yellow': '\033[93m',
    'reset': '\033[0m',
}

def colorize(text: str, color: str, enabled: bool = True) -> str:
    """Add color to text for terminal display"""
    if not enabled or color not in COLORS:
        return text
    return f"{COLORS[color]}{text}{COLORS['reset']}"
