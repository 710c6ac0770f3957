"""Generate an example .ini file and exercise every kind of update on it."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from minini.document import IniFile

out_path = Path(__file__).parent / "example.ini"
out_path.write_text(
    "; Example settings\n"
    "version = 1\n"
    "\n"
    "[window]\n"
    "width=320\n"
    "height=240\n"
    "\n"
    "[player]\n"
    "name = anon ; set on first launch\n"
    "[scratch]\n"
    "tmp=1\n",
    encoding="utf-8",
)

ini = IniFile(out_path)
ini.puts("window", "width", "640")          # same length: in place
ini.puts("window", "height", "1080")        # longer: full rewrite
ini.putbool("window", "fullscreen", False)  # new key at end of section
ini.puts("player", "motto", "carpe; diem")  # quoted on disk
ini.puts("audio", "volume", "7")            # new section at end of file
ini.delete_section("scratch")

print(f"Wrote {out_path}")
print()
print(out_path.read_text(encoding="utf-8"))
print("Sections:", ", ".join(ini.sections()))
print("Window width:", ini.geti("window", "width"))
print("Motto:", ini.gets("player", "motto"))
