"""
minini IniFile - one object for reading and writing a single .ini file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from minini.config import IniConfig
from minini.reader import BrowseCallback, IniReader
from minini.writer import IniWriter


class IniFile:
    """
    Reader and writer for one .ini file, sharing one configuration.

    Usage:
        ini = IniFile("settings.ini")
        ini.puts("window", "width", "640")
        width = ini.geti("window", "width", 320)
        ini.delete_section("window")

        ro = IniFile("settings.ini", IniConfig(read_only=True))
        ro.puts("a", "b", "c")   # raises ReadOnlyError

    Nothing is held open between calls; every method is a complete
    open/scan/close (or open/copy/rename) cycle.
    """

    def __init__(self, path: str | Path, config: IniConfig | None = None) -> None:
        self.path = Path(path)
        self.config = config or IniConfig()
        self._reader = IniReader(self.path, self.config)
        self._writer = IniWriter(self.path, self.config)

    # --- lookup ---

    def gets(self, section: str | None, key: str, default: str = "", size: int | None = None) -> str:
        return self._reader.gets(section, key, default, size)

    def geti(self, section: str | None, key: str, default: int = 0) -> int:
        return self._reader.geti(section, key, default)

    def getu(self, section: str | None, key: str, default: int = 0) -> int:
        return self._reader.getu(section, key, default)

    def getf(self, section: str | None, key: str, default: float = 0.0) -> float:
        return self._reader.getf(section, key, default)

    def getbool(self, section: str | None, key: str, default: bool = False) -> bool:
        return self._reader.getbool(section, key, default)

    def getsection(self, index: int, size: int | None = None) -> str:
        return self._reader.getsection(index, size)

    def getkey(self, section: str | None, index: int, size: int | None = None) -> str:
        return self._reader.getkey(section, index, size)

    def has_section(self, section: str) -> bool:
        return self._reader.has_section(section)

    def has_key(self, section: str | None, key: str) -> bool:
        return self._reader.has_key(section, key)

    def sections(self) -> Iterator[str]:
        return self._reader.sections()

    def keys(self, section: str | None = None) -> Iterator[str]:
        return self._reader.keys(section)

    def browse(self, callback: BrowseCallback) -> bool:
        return self._reader.browse(callback)

    # --- update ---

    def puts(self, section: str | None, key: str | None, value: str | None) -> bool:
        return self._writer.puts(section, key, value)

    def puti(self, section: str | None, key: str, value: int) -> bool:
        return self._writer.puti(section, key, value)

    def putu(self, section: str | None, key: str, value: int) -> bool:
        return self._writer.putu(section, key, value)

    def putf(self, section: str | None, key: str, value: float) -> bool:
        return self._writer.putf(section, key, value)

    def putbool(self, section: str | None, key: str, value: bool) -> bool:
        return self._writer.putbool(section, key, value)

    def delete_key(self, section: str | None, key: str) -> bool:
        return self._writer.delete_key(section, key)

    def delete_section(self, section: str | None) -> bool:
        return self._writer.delete_section(section)

    def to_dict(self) -> dict[str, dict[str, str]]:
        from minini.converters import to_dict
        return to_dict(self)

    def __repr__(self) -> str:
        return f"IniFile(path={str(self.path)!r}, read_only={self.config.read_only})"
