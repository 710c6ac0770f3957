"""
minini Reader - line-by-line lookup in .ini files.

Speed features:
  - Streams the file one bounded line at a time, stops at the first match
  - Never holds more than one line in memory
  - One scan routine answers every query: value lookup, key/section
    existence, and "Nth section" / "Nth key" enumeration

Robustness features:
  - Lines longer than the buffer are split, never overflow
  - Malformed lines (no separator, stray text) are skipped, not fatal
  - A missing file is "not found", never an exception
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

from minini import converters
from minini.config import IniConfig
from minini.fileio import IniStream, open_read
from minini.spec import (
    DEFAULT_BUFFER_CAPACITY,
    clean_string,
    copy_with_quoting,
    is_header_line,
    names_equal,
    section_name,
    skip_leading,
    split_key,
    trim_name,
)

# Buffer sizes used by the typed accessors
INT_BUFFER_SIZE = 16
FLOAT_BUFFER_SIZE = 64
BOOL_BUFFER_SIZE = 2

BrowseCallback = Callable[[str, str, str], bool]


@dataclass
class Entry:
    """Result of a successful scan."""
    value: bytes
    line: bytes = b""      # raw text of the matched line
    mark: int | None = None  # byte offset of the start of the matched line
    sep: int | None = None   # index of the separator in ``line``


def find_entry(
    stream: IniStream,
    section: bytes | None,
    key: bytes | None,
    section_index: int = -1,
    key_index: int = -1,
    capacity: int = DEFAULT_BUFFER_CAPACITY,
    with_mark: bool = False,
) -> Entry | None:
    """Scan ``stream`` from its current position for a section and/or key.

    section        name to match, or None/b"" for the lines before any header
    key            name to match, or None to match by ``key_index``; with
                   ``key_index < 0`` as well this is a section-exists check
    section_index  >= 0 enumerates headers; the Nth name is returned
    key_index      >= 0 enumerates key lines; the Nth key name is returned
    capacity       bound on line length and on the returned value
    with_mark      record the offset of the matched line's start

    A value is returned with its trailing comment removed and its quoting
    resolved.
    """
    if section or section_index >= 0:
        idx = -1
        while True:
            line = stream.read_line(capacity)
            if line is None:
                return None
            name = section_name(line)
            if name is None:
                continue
            if section and names_equal(name, section):
                break
            idx += 1
            if idx == section_index:
                break
        if section_index >= 0:
            if idx == section_index:
                return Entry(copy_with_quoting(name, capacity), line)
            return None

    if key is None and key_index < 0:
        return Entry(b"")

    idx = -1
    while True:
        mark = stream.tell() if with_mark else None
        line = stream.read_line(capacity)
        if line is None or is_header_line(line):
            return None
        parts = split_key(line)
        if parts is None:
            continue
        name, sep = parts
        if key and names_equal(name, key):
            break
        idx += 1
        if idx == key_index:
            break

    if key_index >= 0:
        return Entry(copy_with_quoting(name, capacity), line, mark)

    value, quotes = clean_string(skip_leading(line[sep + 1:]))
    return Entry(copy_with_quoting(value, capacity, quotes), line, mark, sep)


def iter_entries(stream: IniStream, capacity: int = DEFAULT_BUFFER_CAPACITY) -> Iterator[tuple[bytes, bytes, bytes]]:
    """Yield (section, key, value) for every key line, in file order."""
    current = b""
    while True:
        line = stream.read_line(capacity)
        if line is None:
            return
        name = section_name(line)
        if name is not None:
            current = copy_with_quoting(name, capacity)
            continue
        parts = split_key(line)
        if parts is None:
            continue
        key, sep = parts
        value, quotes = clean_string(skip_leading(line[sep + 1:]))
        yield (
            current,
            copy_with_quoting(key, capacity),
            copy_with_quoting(value, capacity, quotes),
        )


class IniReader:
    """
    Read-only access to an .ini file.

    Usage:
        reader = IniReader("settings.ini")
        name = reader.gets("player", "name", default="anon")
        for section in reader.sections():
            print(section, list(reader.keys(section)))

    Every call opens the file, scans, and closes it again. Nothing is
    cached between calls.
    """

    def __init__(self, path: str | Path, config: IniConfig | None = None) -> None:
        self.path = Path(path)
        self.config = config or IniConfig()

    def _lookup(
        self,
        section: str | None,
        key: str | None,
        section_index: int = -1,
        key_index: int = -1,
        size: int | None = None,
    ) -> str | None:
        cfg = self.config
        stream = open_read(self.path, cfg.terminator_bytes)
        if stream is None:
            return None
        with stream:
            entry = find_entry(
                stream,
                trim_name(cfg.encode(section)) if section else None,
                trim_name(cfg.encode(key)) if key is not None else None,
                section_index,
                key_index,
                capacity=cfg.buffer_capacity,
            )
        if entry is None:
            return None
        value = entry.value
        if size is not None:
            value = copy_with_quoting(value, size)
        return cfg.decode(value)

    def gets(self, section: str | None, key: str, default: str = "", size: int | None = None) -> str:
        """Return the value of ``key`` in ``section``, or ``default``.

        ``size`` bounds the result like a caller-supplied buffer would:
        at most ``size - 1`` bytes are kept.
        """
        if key is None:
            return ""
        if size is not None and size <= 0:
            raise ValueError(f"size must be positive, got {size}")
        value = self._lookup(section, key, size=size)
        if value is None:
            value = default if size is None else self.config.decode(
                copy_with_quoting(self.config.encode(default), size)
            )
        return value

    def getsection(self, index: int, size: int | None = None) -> str:
        """Name of the ``index``-th section (zero based), or "" past the end."""
        if index < 0:
            return ""
        return self._lookup(None, None, section_index=index, size=size) or ""

    def getkey(self, section: str | None, index: int, size: int | None = None) -> str:
        """Name of the ``index``-th key in ``section``, or "" past the end."""
        if index < 0:
            return ""
        return self._lookup(section, None, key_index=index, size=size) or ""

    def has_section(self, section: str) -> bool:
        return self._lookup(section, None) is not None

    def has_key(self, section: str | None, key: str) -> bool:
        return self._lookup(section, key) is not None

    def sections(self) -> Iterator[str]:
        """Section names in file order."""
        index = 0
        while True:
            name = self._lookup(None, None, section_index=index)
            if name is None:
                return
            yield name
            index += 1

    def keys(self, section: str | None = None) -> Iterator[str]:
        """Key names of ``section`` in file order."""
        index = 0
        while True:
            name = self._lookup(section, None, key_index=index)
            if name is None:
                return
            yield name
            index += 1

    def browse(self, callback: BrowseCallback) -> bool:
        """Call ``callback(section, key, value)`` for every entry.

        The walk stops early when the callback returns a falsy value. Returns
        False only when the file cannot be opened.
        """
        cfg = self.config
        if not cfg.browse_enabled:
            raise RuntimeError("Browsing is disabled in this configuration")
        stream = open_read(self.path, cfg.terminator_bytes)
        if stream is None:
            return False
        with stream:
            for section, key, value in iter_entries(stream, cfg.buffer_capacity):
                if not callback(cfg.decode(section), cfg.decode(key), cfg.decode(value)):
                    break
        return True

    # --- typed accessors ---

    def geti(self, section: str | None, key: str, default: int = 0) -> int:
        text = self.gets(section, key, "", size=INT_BUFFER_SIZE)
        return converters.parse_int(text) if text else default

    def getu(self, section: str | None, key: str, default: int = 0) -> int:
        text = self.gets(section, key, "", size=INT_BUFFER_SIZE)
        return converters.parse_uint(text) if text else default

    def getf(self, section: str | None, key: str, default: float = 0.0) -> float:
        text = self.gets(section, key, "", size=FLOAT_BUFFER_SIZE)
        return converters.parse_float(text) if text else default

    def getbool(self, section: str | None, key: str, default: bool = False) -> bool:
        text = self.gets(section, key, "", size=BOOL_BUFFER_SIZE)
        return converters.parse_bool(text, default)
