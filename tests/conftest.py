"""Shared test fixtures for minini."""

import pytest

from minini.config import IniConfig
from minini.document import IniFile


@pytest.fixture
def ini_path(tmp_path):
    """Path to a not-yet-existing settings.ini in a temp directory."""
    return tmp_path / "settings.ini"


@pytest.fixture
def make_ini(ini_path):
    """Write raw bytes to the test file and return an IniFile for it.

    Call it with the file content and, optionally, an IniConfig.
    """
    def _make(content: bytes, config: IniConfig | None = None) -> IniFile:
        ini_path.write_bytes(content)
        return IniFile(ini_path, config)
    return _make
