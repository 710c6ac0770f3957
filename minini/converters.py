"""
minini Converters - value conversions and INI <-> dict/JSON.

Numeric parsing follows the C library conventions INI files grew up with:
a value is read from its leading number and trailing junk is ignored
("42 apples" -> 42, "abc" -> 0). A second character of 'x'/'X' selects
hexadecimal.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from minini.document import IniFile

_UINT_MASK = 0xFFFFFFFF

_INT_RE = re.compile(r"\s*([+-]?)(\d+)")
_HEX_RE = re.compile(r"\s*([+-]?)(?:0[xX])?([0-9a-fA-F]+)")
_FLOAT_RE = re.compile(
    r"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)

_TRUE_CHARS = "YyTt1"
_FALSE_CHARS = "NnFf0"


# =============================================================================
# Numbers and booleans
# =============================================================================

def parse_int(text: str) -> int:
    """Parse a decimal or 0x-prefixed hex integer from the start of ``text``."""
    hexadecimal = len(text) >= 2 and text[1] in "xX"
    m = (_HEX_RE if hexadecimal else _INT_RE).match(text)
    if not m:
        return 0
    value = int(m.group(2), 16 if hexadecimal else 10)
    return -value if m.group(1) == "-" else value


def parse_uint(text: str) -> int:
    return parse_int(text) & _UINT_MASK


def parse_float(text: str) -> float:
    m = _FLOAT_RE.match(text)
    if not m:
        return 0.0
    return float(m.group(0))


def parse_bool(text: str, default: bool) -> bool:
    """Interpret the first character of ``text``; unknown -> ``default``."""
    first = text[:1]
    if first and first in _TRUE_CHARS:
        return True
    if first and first in _FALSE_CHARS:
        return False
    return default


def format_int(value: int) -> str:
    return str(int(value))


def format_uint(value: int) -> str:
    return str(int(value) & _UINT_MASK)


def format_float(value: float) -> str:
    return repr(float(value))


def format_bool(value: bool) -> str:
    return "true" if value else "false"


# =============================================================================
# INI <-> dict / JSON
# =============================================================================

def to_dict(ini: IniFile) -> dict[str, dict[str, str]]:
    """Collect every entry into ``{section: {key: value}}``.

    Entries before the first header go under the "" section. When a key
    repeats, the first occurrence wins (matching what lookups return).
    """
    result: dict[str, dict[str, str]] = {}

    def _collect(section: str, key: str, value: str) -> bool:
        result.setdefault(section, {}).setdefault(key, value)
        return True

    ini.browse(_collect)
    return result


def to_json(ini: IniFile, indent: int = 2) -> str:
    return json.dumps(to_dict(ini), indent=indent, ensure_ascii=False)


def from_dict(ini: IniFile, data: dict) -> int:
    """Write ``{section: {key: value}}`` into ``ini``. Returns entries written.

    Non-string values go through the typed writers (bool, int, float).
    """
    if not isinstance(data, dict):
        raise ValueError("Expected a mapping of sections at top level")
    written = 0
    for section, entries in data.items():
        if not isinstance(entries, dict):
            raise ValueError(f"Section {section!r} must map to an object")
        for key, value in entries.items():
            if isinstance(value, bool):
                ok = ini.putbool(section, key, value)
            elif isinstance(value, int):
                ok = ini.puti(section, key, value)
            elif isinstance(value, float):
                ok = ini.putf(section, key, value)
            elif value is None:
                ok = ini.delete_key(section, key)
            else:
                ok = ini.puts(section, key, str(value))
            if not ok:
                raise OSError(f"Could not write [{section}] {key}")
            written += 1
    return written


def from_json(ini: IniFile, text: str) -> int:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from None
    return from_dict(ini, data)
