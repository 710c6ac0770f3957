"""
minini file I/O - the line-oriented stream layer under the engine.

The reader and writer never touch ``open()`` directly. They go through
IniStream, which offers exactly what the scan/rewrite loops need:

  - read one bounded line (stops after the terminator byte, tolerates a
    missing terminator at EOF)
  - write raw bytes
  - tell/seek with plain integer byte offsets ("marks")

Open helpers return None instead of raising when the OS refuses the open,
so "file does not exist" is an ordinary outcome for the callers.
"""

from __future__ import annotations

import builtins
import io
import logging
import os
from pathlib import Path
from typing import BinaryIO

from minini.spec import TEMP_MARKER

logger = logging.getLogger(__name__)

# Keep builtins reference so module-level 'open_*' helpers read clearly
builtins_open = builtins.open


class IniStream:
    """Binary file handle with bounded line reads and integer marks."""

    def __init__(self, handle: BinaryIO, terminator: bytes = b"\n") -> None:
        self._handle = handle
        # Lines end after the last byte of the terminator ("\n" for "\r\n")
        self._eol = terminator[-1:]

    def read_line(self, capacity: int) -> bytes | None:
        """Read at most ``capacity - 1`` bytes, up to and including end of line.

        Returns None at end of file.
        """
        if capacity < 2:
            raise ValueError(f"capacity must be at least 2, got {capacity}")
        data = self._handle.read(capacity - 1)
        if not data:
            return None
        end = data.find(self._eol)
        if end >= 0 and end + 1 < len(data):
            # Read past end of line: step back so the next read starts there
            self._handle.seek(end + 1 - len(data), io.SEEK_CUR)
            data = data[:end + 1]
        return data

    def read(self, size: int) -> bytes:
        return self._handle.read(size)

    def write(self, data: bytes) -> int:
        return self._handle.write(data)

    def tell(self) -> int:
        return self._handle.tell()

    def seek(self, mark: int) -> None:
        self._handle.seek(mark)

    def sync(self) -> None:
        """Flush buffered writes and fsync to disk."""
        self._handle.flush()
        os.fsync(self._handle.fileno())

    def close(self) -> None:
        self._handle.close()

    @property
    def closed(self) -> bool:
        return self._handle.closed

    def __enter__(self) -> IniStream:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def _open(path: str | Path, mode: str, terminator: bytes) -> IniStream | None:
    try:
        handle = builtins_open(path, mode)
    except OSError as e:
        logger.debug("Cannot open %s (%s): %s", path, mode, e)
        return None
    return IniStream(handle, terminator)


def open_read(path: str | Path, terminator: bytes = b"\n") -> IniStream | None:
    return _open(path, "rb", terminator)


def open_write(path: str | Path, terminator: bytes = b"\n") -> IniStream | None:
    """Open for writing, truncating any existing file."""
    return _open(path, "wb", terminator)


def open_rewrite(path: str | Path, terminator: bytes = b"\n") -> IniStream | None:
    """Open an existing file for read/write without truncating it."""
    return _open(path, "r+b", terminator)


def remove_file(path: str | Path) -> bool:
    try:
        os.unlink(path)
    except FileNotFoundError:
        return True
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)
        return False
    return True


def rename_file(source: str | Path, dest: str | Path) -> None:
    """Atomically move ``source`` over ``dest``.

    os.replace overwrites an existing target in a single step, so there is
    no moment at which ``dest`` is missing.
    """
    os.replace(source, dest)


def temp_name(path: str | Path) -> str:
    """Temp file used during a rewrite: same name, last character -> '~'."""
    name = os.fspath(path)
    if not name:
        raise ValueError("Path cannot be empty")
    if name.endswith(TEMP_MARKER):
        # would collide with the file itself
        return name + TEMP_MARKER
    return name[:-1] + TEMP_MARKER
