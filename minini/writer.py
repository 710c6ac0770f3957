"""
minini Writer - in-place updates of .ini files.

Update strategy, cheapest first:
  1. File missing     -> write a fresh file with the header and key
  2. Value unchanged  -> nothing to do
  3. Same line length -> overwrite just that line's bytes in place
  4. Otherwise        -> copy the file to a temp file line by line, splice
                         the change in, then rename the temp file over the
                         original

The copy in (4) never buffers more than one working buffer of file
content. Lines that pass through unchanged are not kept in memory: the
writer only counts their bytes and remembers where they started (the
"mark"); on flush it seeks back and copies that byte range verbatim.

The original file is only replaced by the final atomic rename, so a crash
mid-rewrite leaves it untouched.
"""

from __future__ import annotations

import logging
from pathlib import Path

from minini import converters
from minini.config import IniConfig, ReadOnlyError
from minini.fileio import (
    IniStream,
    open_read,
    open_rewrite,
    open_write,
    remove_file,
    rename_file,
    temp_name,
)
from minini.reader import find_entry
from minini.spec import (
    KEY_SEPARATOR,
    SECTION_CLOSE,
    SECTION_OPEN,
    check_enquote,
    copy_with_quoting,
    is_header_line,
    names_equal,
    section_name,
    split_key,
    trim_name,
)

logger = logging.getLogger(__name__)


class _CopyCache:
    """Pending pass-through bytes between ``mark`` and the source cursor.

    Only the byte count is tracked; the bytes themselves are re-read from
    the source on flush. ``size`` always stays below ``capacity``.
    """

    def __init__(self, source: IniStream, dest: IniStream, capacity: int, terminator: bytes) -> None:
        self.source = source
        self.dest = dest
        self.capacity = capacity
        self.terminator = terminator
        self.mark = source.tell()
        self.size = 0
        # Nothing written yet counts as terminated: no separator needed
        self.terminated = True

    def append(self, line: bytes) -> None:
        """Account for ``line``, flushing first if it would not fit."""
        if self.size + len(line) >= self.capacity:
            self.flush()
            # flush() rewound the source to the start of this line
            line = self.source.read_line(self.capacity) or b""
        self.size += len(line)

    def flush(self) -> bool:
        """Copy the pending bytes to the destination and advance the mark.

        Returns whether everything written so far ends with a line
        terminator.
        """
        self.source.seek(self.mark)
        if self.size:
            data = self.source.read(self.size)
            if data:
                self.dest.write(data)
                self.terminated = data.endswith(self.terminator)
        self.mark = self.source.tell()
        self.size = 0
        return self.terminated

    def skip_to_current(self) -> None:
        """Drop everything between the mark and the source cursor."""
        self.mark = self.source.tell()


class IniWriter:
    """
    Mutating access to an .ini file.

    Usage:
        writer = IniWriter("settings.ini")
        writer.puts("player", "name", "Ada")     # set
        writer.puts("player", "name", None)      # delete key
        writer.puts("player", None, None)        # delete section

    Every method returns True on success and False if the file could not
    be written. Not-found deletes are successful no-ops.
    """

    def __init__(self, path: str | Path, config: IniConfig | None = None) -> None:
        self.path = Path(path)
        self.config = config or IniConfig()

    # --- serialization ---

    def _section_line(self, section: bytes) -> bytes:
        term = self.config.terminator_bytes
        room = self.config.buffer_capacity - len(term) - 2  # '[' and ']'
        return SECTION_OPEN + copy_with_quoting(section, room) + SECTION_CLOSE + term

    def _key_line(self, key: bytes, value: bytes, prefix: bytes | None = None) -> bytes:
        """Serialize a key line.

        ``prefix`` is the leading text of an existing line up to and
        including the separator and the blanks after it; when given it is
        kept as is and only the value is replaced.
        """
        capacity = self.config.buffer_capacity
        term = self.config.terminator_bytes
        if prefix is None:
            prefix = copy_with_quoting(key, capacity - len(term) - len(KEY_SEPARATOR)) + KEY_SEPARATOR
        room = capacity - len(prefix) - len(term)
        if room < 1:
            room = 1
        return prefix + copy_with_quoting(value, room, check_enquote(value)) + term

    def _is_complete(self, line: bytes) -> bool:
        """False for the first fragment of a line longer than the buffer."""
        eol = self.config.terminator_bytes[-1:]
        return line.endswith(eol) or len(line) < self.config.buffer_capacity - 1

    @staticmethod
    def _line_prefix(line: bytes, sep: int) -> bytes:
        end = sep + 1
        while line[end:end + 1] in (b" ", b"\t"):
            end += 1
        return line[:end]

    # --- entry points ---

    def puts(self, section: str | None, key: str | None, value: str | None) -> bool:
        """Set, or with ``value=None`` delete, ``key`` in ``section``.

        ``section`` None or "" addresses the entries before the first
        header. ``key=None`` deletes the whole section.
        """
        if self.config.read_only:
            raise ReadOnlyError(f"Cannot write {self.path}: configuration is read-only")
        cfg = self.config
        sec = trim_name(cfg.encode(section)) if section else b""
        k = trim_name(cfg.encode(key)) if key is not None else None
        v = cfg.encode(value) if value is not None and k is not None else None
        try:
            return self._puts(sec, k, v)
        except OSError as e:
            logger.warning("Could not update %s: %s", self.path, e)
            return False

    def _puts(self, section: bytes, key: bytes | None, value: bytes | None) -> bool:
        cfg = self.config
        capacity = cfg.buffer_capacity
        term = cfg.terminator_bytes

        rfd = open_read(self.path, term)
        if rfd is None:
            if key is None or value is None:
                return True
            wfd = open_write(self.path, term)
            if wfd is None:
                logger.warning("Could not create %s", self.path)
                return False
            with wfd:
                if section:
                    wfd.write(self._section_line(section))
                wfd.write(self._key_line(key, value))
            logger.debug("Created %s", self.path)
            return True

        with rfd:
            if key is not None and value is not None:
                entry = find_entry(rfd, section, key, capacity=capacity, with_mark=True)
                if entry is not None:
                    if entry.value == value:
                        logger.debug("Unchanged [%r] %r in %s", section, key, self.path)
                        return True
                    tail = rfd.tell()
                    line = self._key_line(key, value, self._line_prefix(entry.line, entry.sep))
                    if (
                        entry.mark is not None
                        and self._is_complete(entry.line)
                        and len(line) == tail - entry.mark
                    ):
                        rfd.close()
                        return self._overwrite(entry.mark, line)
            elif key is not None:
                if find_entry(rfd, section, key, capacity=capacity) is None:
                    return True
            elif section:
                if find_entry(rfd, section, None, capacity=capacity) is None:
                    return True

        return self._rewrite(section, key, value)

    def _overwrite(self, mark: int, line: bytes) -> bool:
        wfd = open_rewrite(self.path, self.config.terminator_bytes)
        if wfd is None:
            logger.warning("Could not open %s for rewriting", self.path)
            return False
        with wfd:
            wfd.seek(mark)
            wfd.write(line)
            wfd.sync()
        logger.debug("Rewrote %d bytes in place at offset %d of %s", len(line), mark, self.path)
        return True

    def _rewrite(self, section: bytes, key: bytes | None, value: bytes | None) -> bool:
        cfg = self.config
        term = cfg.terminator_bytes
        tmp = temp_name(self.path)

        wfd = open_write(tmp, term)
        if wfd is None:
            logger.warning("Could not create temp file %s", tmp)
            return False
        try:
            # Reopen: the file may have been replaced while we were blocked
            rfd = open_read(self.path, term)
            if rfd is None:
                if key is None or value is None:
                    wfd.close()
                    remove_file(tmp)
                    return True
                if section:
                    wfd.write(self._section_line(section))
                wfd.write(self._key_line(key, value))
            else:
                try:
                    self._copy_through(rfd, wfd, section, key, value)
                finally:
                    rfd.close()
            wfd.sync()
            wfd.close()
            rename_file(tmp, self.path)
        except Exception:
            if not wfd.closed:
                wfd.close()
            remove_file(tmp)
            raise
        logger.debug("Rewrote %s via %s", self.path, tmp)
        return True

    def _copy_through(
        self,
        rfd: IniStream,
        wfd: IniStream,
        section: bytes,
        key: bytes | None,
        value: bytes | None,
    ) -> None:
        capacity = self.config.buffer_capacity
        term = self.config.terminator_bytes
        setting = key is not None and value is not None
        cache = _CopyCache(rfd, wfd, capacity, term)

        # Copy up to and including the target section's header
        if section:
            while True:
                line = rfd.read_line(capacity)
                if line is None:
                    # section not present: append it
                    terminated = cache.flush()
                    if setting:
                        if not terminated:
                            wfd.write(term)
                        wfd.write(self._section_line(section))
                        wfd.write(self._key_line(key, value))
                    return
                name = section_name(line)
                match = name is not None and names_equal(name, section)
                # a section being deleted loses its header
                if not match or key is not None:
                    cache.append(line)
                if match:
                    break
        cache.flush()
        if section and key is None:
            # flush() rewound to the unaccumulated header; step over it
            rfd.read_line(capacity)
            cache.skip_to_current()

        # Find the key within the section
        while True:
            line = rfd.read_line(capacity)
            if line is None:
                terminated = cache.flush()
                if setting:
                    if not terminated:
                        wfd.write(term)
                    wfd.write(self._key_line(key, value))
                return
            parts = split_key(line)
            match = parts is not None and bool(key) and names_equal(parts[0], key)
            if match or is_header_line(line):
                break
            if key is None:
                cache.skip_to_current()
            else:
                cache.append(line)

        next_section = not match
        cache.flush()
        if setting:
            prefix = self._line_prefix(line, parts[1]) if match else None
            wfd.write(self._key_line(key, value, prefix))
        # flush() rewound the source to the boundary line; read it again
        rfd.read_line(capacity)
        if next_section:
            cache.append(line)
        else:
            # a matched line longer than the buffer goes as a whole
            while not self._is_complete(line):
                line = rfd.read_line(capacity)
                if line is None:
                    break
            cache.skip_to_current()

        # Copy the rest of the file
        while True:
            line = rfd.read_line(capacity)
            if line is None:
                break
            cache.append(line)
        cache.flush()

    def delete_key(self, section: str | None, key: str) -> bool:
        return self.puts(section, key, None)

    def delete_section(self, section: str | None) -> bool:
        return self.puts(section, None, None)

    # --- typed writers ---

    def puti(self, section: str | None, key: str, value: int) -> bool:
        return self.puts(section, key, converters.format_int(value))

    def putu(self, section: str | None, key: str, value: int) -> bool:
        return self.puts(section, key, converters.format_uint(value))

    def putf(self, section: str | None, key: str, value: float) -> bool:
        return self.puts(section, key, converters.format_float(value))

    def putbool(self, section: str | None, key: str, value: bool) -> bool:
        return self.puts(section, key, converters.format_bool(value))
