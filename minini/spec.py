"""
minini Format Specification
===========================

Layout:
    key = value                  <- Entries before any section header
    [section]                    <- Section header (name trimmed)
    key = value                  <- Key line, canonical form ` = `
    key: value                   <- ':' is accepted as separator on read
    ; comment                    <- ';' or '#' starts a comment
    key = "a;b"  ; comment       <- Quoted values keep ';' and '#'

Design Decisions:
    - One entry per line, one line per entry. No continuation lines.
    - Section and key names compare ASCII case-insensitively, exact length
    - The first '=' on a line wins; ':' is used only when there is no '='
    - The closing ']' of a header is the LAST ']' on the line
    - Whitespace is every byte in 0x01..0x20
    - A NUL byte ends the parseable part of a line

Quoting:
    - Writer quotes a value that contains '"', ';' or '#', or that starts or
      ends with a blank: `"a;b"`, `"x "`
    - Inside quotes, '"' is written as '\\"'
    - Reader accepts both '\\"' and '""' as an escaped quote
    - Text after an unquoted ';' or '#' is a comment and is dropped

All routines in this module work on bytes and never touch a file.
"""

from __future__ import annotations

import enum

# Defaults
DEFAULT_BUFFER_CAPACITY = 512
DEFAULT_LINE_TERMINATOR = "\n"
DEFAULT_ENCODING = "utf-8"
MIN_BUFFER_CAPACITY = 16

# Line shape markers
SECTION_OPEN = b"["
SECTION_CLOSE = b"]"
SEPARATORS = (b"=", b":")
COMMENT_CHARS = b";#"
QUOTE = b'"'
ESCAPE = b"\\"

# Canonical separator emitted by the writer
KEY_SEPARATOR = b" = "

# Bytes 0x01..0x20 count as whitespace; NUL terminates
WHITESPACE = bytes(range(1, 33))

# Temp file marker: last character of the file name is replaced by this
TEMP_MARKER = "~"


class QuoteMode(enum.Enum):
    NONE = 0
    ENQUOTE = 1
    DEQUOTE = 2


def cut_at_nul(s: bytes) -> bytes:
    """Return the part of ``s`` before the first NUL byte."""
    nul = s.find(b"\0")
    return s if nul < 0 else s[:nul]


def skip_leading(s: bytes) -> bytes:
    return s.lstrip(WHITESPACE)


def skip_trailing(s: bytes, end: int | None = None, base: int = 0) -> int:
    """Move ``end`` backward over whitespace, never crossing ``base``."""
    if end is None:
        end = len(s)
    while end > base and s[end - 1] in WHITESPACE:
        end -= 1
    return end


def strip_trailing(s: bytes) -> bytes:
    return s[:skip_trailing(s)]


def trim_name(name: bytes) -> bytes:
    """Strip blanks on both sides, the way names are read back from a line."""
    name = skip_leading(name)
    return name[:skip_trailing(name)]


def names_equal(a: bytes, b: bytes) -> bool:
    """ASCII case-insensitive comparison; lengths must match exactly."""
    return len(a) == len(b) and a.upper() == b.upper()


def copy_with_quoting(src: bytes, maxlen: int, mode: QuoteMode = QuoteMode.NONE) -> bytes:
    """Bounded copy of ``src`` with optional quoting.

    ``maxlen`` is a buffer size: the result never exceeds ``maxlen - 1``
    bytes. ``src`` is read up to its first NUL.
    """
    if maxlen <= 0:
        raise ValueError(f"maxlen must be positive, got {maxlen}")
    src = cut_at_nul(src)
    if mode is QuoteMode.ENQUOTE and maxlen < 3:
        # no room for two quotes and a terminator
        mode = QuoteMode.NONE

    if mode is QuoteMode.NONE:
        return src[:maxlen - 1]

    out = bytearray()
    if mode is QuoteMode.ENQUOTE:
        out += QUOTE
        for ch in src:
            if len(out) >= maxlen - 2:
                break
            if ch == QUOTE[0]:
                if len(out) >= maxlen - 3:
                    break  # escape pair would not fit
                out += ESCAPE
            out.append(ch)
        out += QUOTE
        return bytes(out)

    # DEQUOTE
    s = 0
    while s < len(src) and len(out) < maxlen - 1:
        if src[s] in b'"\\' and src[s + 1:s + 2] == QUOTE:
            s += 1
        out.append(src[s])
        s += 1
    return bytes(out)


def clean_string(s: bytes) -> tuple[bytes, QuoteMode]:
    """Drop a trailing comment and surrounding quotes from a raw value.

    ``s`` is the text after the separator with leading whitespace already
    skipped. Returns the cleaned value and the quote mode needed to copy it.
    """
    s = cut_at_nul(s)
    in_string = False
    ep = 0
    while ep < len(s):
        ch = s[ep:ep + 1]
        if ch in COMMENT_CHARS and not in_string:
            break
        nxt = s[ep + 1:ep + 2]
        if ch == QUOTE:
            if nxt == QUOTE:
                ep += 1  # "" is an escaped quote
            else:
                in_string = not in_string
        elif ch == ESCAPE and nxt == QUOTE:
            ep += 1
        ep += 1
    s = strip_trailing(s[:ep])
    if len(s) >= 2 and s.startswith(QUOTE) and s.endswith(QUOTE):
        return s[1:-1], QuoteMode.DEQUOTE
    return s, QuoteMode.NONE


def check_enquote(value: bytes) -> QuoteMode:
    """Decide whether ``value`` must be written in quotes."""
    if any(c in value for c in b'";#'):
        return QuoteMode.ENQUOTE
    if value[:1] in (b" ", b"\t") or value[-1:] in (b" ", b"\t"):
        return QuoteMode.ENQUOTE
    return QuoteMode.NONE


def section_name(line: bytes) -> bytes | None:
    """Return the trimmed name if ``line`` is a section header, else None."""
    sp = skip_leading(cut_at_nul(line))
    ep = sp.rfind(SECTION_CLOSE)
    if not sp.startswith(SECTION_OPEN) or ep < 0:
        return None
    return trim_name(sp[1:ep])


def split_key(line: bytes) -> tuple[bytes, int] | None:
    """Split a key line into its trimmed key name and separator position.

    The separator position is an index into ``line`` itself. Comment lines,
    headers and lines without a separator return None.
    """
    line = cut_at_nul(line)
    sp = skip_leading(line)
    if not sp or sp[:1] in COMMENT_CHARS:
        return None
    ep = sp.find(SEPARATORS[0])
    if ep < 0:
        ep = sp.find(SEPARATORS[1])
    if ep < 0:
        return None
    offset = len(line) - len(sp)
    return sp[:skip_trailing(sp, ep)], offset + ep


def is_header_line(line: bytes) -> bool:
    """True if the first non-blank byte is '['. Ends a section's key scan."""
    return skip_leading(cut_at_nul(line)).startswith(SECTION_OPEN)
