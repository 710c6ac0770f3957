"""
Stress Tests - Tiny buffers, over-long lines, odd bytes and many entries.
"""

import pytest

from minini import IniConfig, IniFile


TINY = IniConfig(buffer_capacity=16)


def numbered_sections(count):
    return b"".join(
        b"[s%d]\nkey=value%d\n" % (i, i) for i in range(count)
    )


# =============================================================================
# Small working buffers
# =============================================================================

class TestTinyBuffer:

    def test_rewrite_with_many_flushes(self, make_ini, ini_path):
        original = numbered_sections(20)
        ini = make_ini(original, TINY)
        assert ini.puts("s12", "key", "chg")
        assert ini_path.read_bytes() == original.replace(
            b"[s12]\nkey=value12\n", b"[s12]\nkey=chg\n"
        )

    def test_insert_with_many_flushes(self, make_ini, ini_path):
        original = numbered_sections(20)
        ini = make_ini(original, TINY)
        assert ini.puts("s7", "new", "1")
        assert ini_path.read_bytes() == original.replace(
            b"[s7]\nkey=value7\n", b"[s7]\nkey=value7\nnew = 1\n"
        )

    def test_delete_section_with_many_flushes(self, make_ini, ini_path):
        original = numbered_sections(20)
        ini = make_ini(original, TINY)
        assert ini.delete_section("s3")
        assert ini_path.read_bytes() == original.replace(b"[s3]\nkey=value3\n", b"")

    def test_lookup_with_tiny_buffer(self, make_ini):
        ini = make_ini(numbered_sections(20), TINY)
        assert ini.gets("s19", "key") == "value19"
        assert len(list(ini.sections())) == 20

    def test_values_are_bounded_by_buffer(self, make_ini):
        ini = make_ini(b"[a]\nk=abcdefghij\n", TINY)
        assert ini.gets("a", "k") == "abcdefghij"
        ini = make_ini(b"[a]\nk=" + b"v" * 40 + b"\n", TINY)
        value = ini.gets("a", "k")
        assert len(value) <= 15
        assert set(value) == {"v"}


# =============================================================================
# Lines longer than the buffer
# =============================================================================

class TestLongLines:

    LONG = b"[a]\nlong=" + b"x" * 100 + b"\nk=1\n[b]\nz=2\n"

    def test_long_line_copied_verbatim(self, make_ini, ini_path):
        ini = make_ini(self.LONG, TINY)
        assert ini.puts("b", "z", "22")
        assert ini_path.read_bytes() == self.LONG.replace(b"z=2\n", b"z=22\n")

    def test_key_after_long_line(self, make_ini):
        ini = make_ini(self.LONG, TINY)
        assert ini.gets("a", "k") == "1"

    def test_long_matched_line_replaced_whole(self, make_ini, ini_path):
        ini = make_ini(b"[a]\nkey=" + b"v" * 30 + b"\n[b]\nz=1\n", TINY)
        assert ini.puts("a", "key", "new")
        assert ini_path.read_bytes() == b"[a]\nkey=new\n[b]\nz=1\n"

    def test_long_matched_line_deleted_whole(self, make_ini, ini_path):
        ini = make_ini(b"[a]\nkey=" + b"v" * 30 + b"\nk=1\n", TINY)
        assert ini.delete_key("a", "key")
        assert ini_path.read_bytes() == b"[a]\nk=1\n"

    def test_long_line_with_default_buffer(self, make_ini, ini_path):
        content = b"[a]\nnote=" + b"y" * 2000 + b"\nk=1\n"
        ini = make_ini(content)
        assert ini.puts("a", "k", "22")
        assert ini_path.read_bytes() == content.replace(b"k=1\n", b"k=22\n")


# =============================================================================
# Unusual bytes
# =============================================================================

class TestOddBytes:

    def test_nul_bytes_survive_rewrite(self, make_ini, ini_path):
        ini = make_ini(b"[a]\nbin=ab\0cd\nk=1\n")
        assert ini.puts("a", "k", "22")
        assert ini_path.read_bytes() == b"[a]\nbin=ab\0cd\nk=22\n"

    def test_value_ends_at_nul(self, make_ini):
        ini = make_ini(b"[a]\nbin=ab\0cd\n")
        assert ini.gets("a", "bin") == "ab"

    def test_non_utf8_bytes_preserved(self, make_ini, ini_path):
        ini = make_ini(b"[caf\xe9]\nk=\xff\xfe\n")
        assert ini.gets("caf\udce9", "k") == "\udcff\udcfe"
        assert ini.puts("caf\udce9", "n", "1")
        assert ini_path.read_bytes() == b"[caf\xe9]\nk=\xff\xfe\nn = 1\n"

    def test_unicode_names(self, ini_path):
        ini = IniFile(ini_path)
        assert ini.puts("résumé", "clé", "värde")
        assert ini.gets("résumé", "clé") == "värde"


# =============================================================================
# Volume
# =============================================================================

class TestVolume:

    def test_many_sequential_writes(self, ini_path):
        ini = IniFile(ini_path)
        for i in range(50):
            assert ini.puts(f"sec{i % 5}", f"key{i}", f"val{i}")
        for i in range(50):
            assert ini.gets(f"sec{i % 5}", f"key{i}") == f"val{i}"
        assert list(ini.sections()) == [f"sec{i}" for i in range(5)]
        assert list(ini.keys("sec0")) == [f"key{i}" for i in range(0, 50, 5)]

    @pytest.mark.parametrize("value", [
        "plain",
        "with space",
        " leading",
        "trailing ",
        'quote"inside',
        '"wrapped"',
        "semi;colon",
        "hash#tag",
        "back\\slash",
        'back\\"quote',
        "a=b",
        "x:y",
        "[notsection]",
        "",
    ])
    def test_value_round_trip(self, ini_path, value):
        ini = IniFile(ini_path)
        assert ini.puts("t", "k", "seed")
        assert ini.puts("t", "k", value)
        assert ini.gets("t", "k", "missing") == value
        assert ini.has_key("t", "k")

    def test_overwrite_cycle_keeps_file_size_stable(self, make_ini, ini_path):
        ini = make_ini(b"[a]\nx=1\n[b]\ny=2\n")
        for n in range(30):
            assert ini.puts("a", "x", str(n))
        assert ini_path.read_bytes() == b"[a]\nx=29\n[b]\ny=2\n"
