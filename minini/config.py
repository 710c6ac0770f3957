"""
Engine configuration for minini.

A single immutable IniConfig value is handed to the reader and writer at
construction: working buffer size, line terminator, read-only mode, browse
support and text encoding.
"""

from __future__ import annotations

import codecs
import dataclasses

from minini.spec import (
    DEFAULT_BUFFER_CAPACITY,
    DEFAULT_ENCODING,
    DEFAULT_LINE_TERMINATOR,
    MIN_BUFFER_CAPACITY,
)


class ReadOnlyError(RuntimeError):
    """Raised when a mutating call is made through a read-only config."""


@dataclasses.dataclass(frozen=True)
class IniConfig:
    """Immutable engine configuration."""

    buffer_capacity: int = DEFAULT_BUFFER_CAPACITY
    line_terminator: str = DEFAULT_LINE_TERMINATOR
    read_only: bool = False
    browse_enabled: bool = True
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self) -> None:
        if not isinstance(self.buffer_capacity, int) or isinstance(self.buffer_capacity, bool):
            raise ValueError(
                f"buffer_capacity must be an integer, got {type(self.buffer_capacity).__name__}"
            )
        if self.buffer_capacity < MIN_BUFFER_CAPACITY:
            raise ValueError(
                f"buffer_capacity too small: {self.buffer_capacity} "
                f"(min {MIN_BUFFER_CAPACITY})"
            )
        if not self.line_terminator:
            raise ValueError("line_terminator cannot be empty")
        if len(self.line_terminator) >= self.buffer_capacity // 2:
            raise ValueError(f"line_terminator too long: {self.line_terminator!r}")
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ValueError(f"Unknown encoding: {self.encoding!r}") from None

    def with_overrides(self, **kwargs) -> "IniConfig":
        """Return a new IniConfig with specified fields overridden.

        Only applies overrides for non-None values, so CLI flags
        that weren't specified don't clobber the defaults.
        """
        updates = {k: v for k, v in kwargs.items() if v is not None}
        return dataclasses.replace(self, **updates) if updates else self

    @property
    def terminator_bytes(self) -> bytes:
        return self.line_terminator.encode(self.encoding)

    def encode(self, text: str) -> bytes:
        return text.encode(self.encoding, "surrogateescape")

    def decode(self, data: bytes) -> str:
        return data.decode(self.encoding, "surrogateescape")
