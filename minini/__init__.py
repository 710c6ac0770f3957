"""
minini - minimal INI file reader/writer.
Bounded-buffer lookups, crash-safe in-place updates.

Small footprint > Crash safety > Speed > Features
"""

__version__ = "0.1.0"

from minini.config import IniConfig, ReadOnlyError
from minini.reader import IniReader
from minini.writer import IniWriter
from minini.document import IniFile
