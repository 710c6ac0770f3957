"""
End-to-End Tests - Full workflows through the public API and the CLI.
"""

import json
import subprocess
import sys
from pathlib import Path

import pytest

from minini import IniConfig, IniFile, __version__
from minini import converters


PROJECT_ROOT = str(Path(__file__).parent.parent)


def run_cli(*args):
    return subprocess.run(
        [sys.executable, "-m", "minini.cli", *map(str, args)],
        capture_output=True,
        text=True,
        cwd=PROJECT_ROOT,
    )


class TestFullWorkflow:
    """Complete user workflows, end to end."""

    def test_update_cycle(self, make_ini, ini_path):
        """Grow a value, shrink it back, then drop the key."""
        ini = make_ini(b"[a]\nx=1\n[b]\ny=2\n")

        assert ini.puts("a", "x", "99")
        assert ini_path.read_bytes() == b"[a]\nx=99\n[b]\ny=2\n"

        assert ini.puts("a", "x", "9999999")
        assert ini_path.read_bytes() == b"[a]\nx=9999999\n[b]\ny=2\n"

        assert ini.puts("a", "x", "99")
        assert ini.delete_key("b", "y")
        assert ini_path.read_bytes() == b"[a]\nx=99\n[b]\n"
        assert ini.has_section("b")

    def test_build_from_nothing(self, ini_path):
        """Build a file key by key, then read everything back."""
        ini = IniFile(ini_path)
        assert ini.puts("window", "width", "640")
        assert ini.puts("window", "height", "480")
        assert ini.puts("player", "name", "Ada")
        assert ini.puts(None, "version", "2")
        assert ini.putbool("window", "fullscreen", False)

        assert ini_path.read_bytes() == (
            b"version = 2\n"
            b"[window]\n"
            b"width = 640\n"
            b"height = 480\n"
            b"fullscreen = false\n"
            b"[player]\n"
            b"name = Ada\n"
        )
        assert list(ini.sections()) == ["window", "player"]
        assert ini.geti("window", "width") == 640
        assert ini.getbool("window", "fullscreen", True) is False
        assert ini.to_dict() == {
            "": {"version": "2"},
            "window": {"width": "640", "height": "480", "fullscreen": "false"},
            "player": {"name": "Ada"},
        }

    def test_hand_written_file_survives_edits(self, make_ini, ini_path):
        """Comments, blank lines and odd spacing outside the edit are kept."""
        original = (
            b"; Application settings\n"
            b"\n"
            b"[display]\n"
            b"  depth   =  32   ; bits\n"
            b"mode=window\n"
            b"\n"
            b"# audio below\n"
            b"[audio]\n"
            b"volume : 7\n"
        )
        ini = make_ini(original)
        assert ini.puts("display", "mode", "fullscreen")
        assert ini_path.read_bytes() == original.replace(b"mode=window", b"mode=fullscreen")
        assert ini.gets("display", "depth") == "32"
        assert ini.geti("audio", "volume") == 7

    def test_delete_whole_section_then_recreate(self, make_ini, ini_path):
        ini = make_ini(b"[a]\nx=1\n[b]\ny=2\n")
        assert ini.delete_section("a")
        assert ini_path.read_bytes() == b"[b]\ny=2\n"
        assert ini.puts("a", "x", "1")
        assert ini_path.read_bytes() == b"[b]\ny=2\n[a]\nx = 1\n"

    def test_json_round_trip(self, ini_path):
        ini = IniFile(ini_path)
        data = {
            "": {"version": 3},
            "net": {"host": "example.org", "port": 8080, "secure": True, "ratio": 0.5},
        }
        assert converters.from_dict(ini, data) == 5
        assert json.loads(converters.to_json(ini)) == {
            "": {"version": "3"},
            "net": {"host": "example.org", "port": "8080", "secure": "true", "ratio": "0.5"},
        }

    def test_from_dict_none_deletes(self, make_ini, ini_path):
        ini = make_ini(b"[a]\nx=1\ny=2\n")
        converters.from_dict(ini, {"a": {"x": None}})
        assert ini_path.read_bytes() == b"[a]\ny=2\n"

    def test_from_dict_rejects_bad_shape(self, ini_path):
        ini = IniFile(ini_path)
        with pytest.raises(ValueError):
            converters.from_dict(ini, {"a": "not a mapping"})
        with pytest.raises(ValueError):
            converters.from_json(ini, "{not json")

    def test_repeated_writes_are_stable(self, ini_path):
        """Writing the same values twice leaves the bytes unchanged."""
        ini = IniFile(ini_path)
        for _ in range(2):
            ini.puts("a", "k", "v")
            ini.puts("a", "q", "needs;quotes")
            ini.puts("b", "k", " padded ")
        first = ini_path.read_bytes()
        ini.puts("a", "k", "v")
        ini.puts("a", "q", "needs;quotes")
        ini.puts("b", "k", " padded ")
        assert ini_path.read_bytes() == first
        assert ini.gets("b", "k") == " padded "


class TestCLI:
    """Test the CLI commands via subprocess."""

    def test_cli_help(self):
        result = run_cli("--help")
        assert result.returncode == 0
        assert "minini" in result.stdout

    def test_cli_version(self):
        result = run_cli("--version")
        assert result.returncode == 0
        assert __version__ in result.stdout

    def test_cli_no_command_prints_usage(self):
        result = run_cli()
        assert result.returncode == 0
        assert "Usage:" in result.stdout

    def test_cli_set_and_get(self, ini_path):
        result = run_cli("set", ini_path, "width", "640", "-s", "window")
        assert result.returncode == 0, result.stderr
        assert ini_path.read_bytes() == b"[window]\nwidth = 640\n"

        result = run_cli("get", ini_path, "width", "-s", "window")
        assert result.returncode == 0
        assert result.stdout.strip() == "640"

    def test_cli_get_missing(self, make_ini, ini_path):
        make_ini(b"[a]\nx=1\n")
        result = run_cli("get", ini_path, "nope", "-s", "a")
        assert result.returncode == 1
        assert "not found" in result.stderr

        result = run_cli("get", ini_path, "nope", "-s", "a", "-d", "fallback")
        assert result.returncode == 0
        assert result.stdout.strip() == "fallback"

    def test_cli_sections_and_keys(self, make_ini, ini_path):
        make_ini(b"[a]\nx=1\ny=2\n[b]\nz=3\n")
        result = run_cli("sections", ini_path)
        assert result.stdout.split() == ["a", "b"]
        result = run_cli("keys", ini_path, "-s", "a")
        assert result.stdout.split() == ["x", "y"]

    def test_cli_delete(self, make_ini, ini_path):
        make_ini(b"[a]\nx=1\ny=2\n[b]\nz=3\n")
        result = run_cli("delete", ini_path, "x", "-s", "a")
        assert result.returncode == 0
        assert ini_path.read_bytes() == b"[a]\ny=2\n[b]\nz=3\n"

        result = run_cli("delete", ini_path, "-s", "b")
        assert result.returncode == 0
        assert ini_path.read_bytes() == b"[a]\ny=2\n"

    def test_cli_delete_needs_target(self, make_ini, ini_path):
        make_ini(b"[a]\nx=1\n")
        result = run_cli("delete", ini_path)
        assert result.returncode == 1
        assert ini_path.read_bytes() == b"[a]\nx=1\n"

    def test_cli_read_only(self, make_ini, ini_path):
        make_ini(b"[a]\nx=1\n")
        result = run_cli("set", ini_path, "x", "2", "-s", "a", "--read-only")
        assert result.returncode == 1
        assert "read-only" in result.stderr
        assert ini_path.read_bytes() == b"[a]\nx=1\n"

    def test_cli_crlf(self, ini_path):
        result = run_cli("set", ini_path, "k", "v", "-s", "a", "--crlf")
        assert result.returncode == 0
        assert ini_path.read_bytes() == b"[a]\r\nk = v\r\n"

    def test_cli_bad_buffer_size(self, ini_path):
        result = run_cli("get", ini_path, "k", "--buffer-size", "4")
        assert result.returncode == 1
        assert "buffer_capacity" in result.stderr

    def test_cli_dump(self, make_ini, ini_path):
        make_ini(b"top=1\n[a]\nx = hello\n")
        result = run_cli("dump", ini_path)
        assert result.returncode == 0
        assert result.stdout.splitlines() == ["top = 1", "[a] x = hello"]

    def test_cli_dump_json(self, make_ini, ini_path):
        make_ini(b"[a]\nx=1\n[b]\ny=two\n")
        result = run_cli("dump", ini_path, "--json")
        assert result.returncode == 0
        assert json.loads(result.stdout) == {"a": {"x": "1"}, "b": {"y": "two"}}

    def test_cli_dump_missing_file(self, ini_path):
        result = run_cli("dump", ini_path)
        assert result.returncode == 1
        assert "not found" in result.stderr

    def test_cli_load(self, ini_path, tmp_path):
        source = tmp_path / "values.json"
        source.write_text(json.dumps({"net": {"port": 80, "host": "localhost"}}))
        result = run_cli("load", ini_path, source)
        assert result.returncode == 0, result.stderr
        assert "Wrote 2 entries" in result.stdout
        ini = IniFile(ini_path, IniConfig())
        assert ini.geti("net", "port") == 80
        assert ini.gets("net", "host") == "localhost"

    def test_cli_load_invalid_json(self, ini_path, tmp_path):
        source = tmp_path / "bad.json"
        source.write_text("[1, 2")
        result = run_cli("load", ini_path, source)
        assert result.returncode == 1
        assert "Invalid JSON" in result.stderr
