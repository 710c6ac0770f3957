"""
minini CLI - Command-line interface for .ini files.

Commands:
  minini get      - Print the value of a key
  minini set      - Set a key (creates the file/section as needed)
  minini delete   - Delete a key, or a whole section
  minini sections - List section names
  minini keys     - List the keys of a section
  minini dump     - Print every entry (or JSON with --json)
  minini load     - Write entries from a JSON file
  minini view     - Browse a file in a TUI
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def _open(args: argparse.Namespace):
    from minini.config import IniConfig
    from minini.document import IniFile

    try:
        config = IniConfig().with_overrides(
            buffer_capacity=args.buffer_size,
            line_terminator="\r\n" if args.crlf else None,
            read_only=True if args.read_only else None,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    return IniFile(args.path, config)


def _write_failed(ini) -> None:
    print(f"Error: could not write {ini.path}", file=sys.stderr)
    sys.exit(1)


def cmd_get(args: argparse.Namespace) -> None:
    """Print the value of a key."""
    ini = _open(args)
    if not ini.has_key(args.section, args.key):
        if args.default is not None:
            print(args.default)
            return
        where = f"[{args.section}]" if args.section else "(no section)"
        print(f"Key '{args.key}' not found in {where}.", file=sys.stderr)
        sys.exit(1)
    print(ini.gets(args.section, args.key))


def cmd_set(args: argparse.Namespace) -> None:
    """Set a key."""
    from minini.config import ReadOnlyError

    ini = _open(args)
    try:
        ok = ini.puts(args.section, args.key, args.value)
    except ReadOnlyError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if not ok:
        _write_failed(ini)


def cmd_delete(args: argparse.Namespace) -> None:
    """Delete a key, or the whole section when no key is given."""
    from minini.config import ReadOnlyError

    ini = _open(args)
    if args.key is None and not args.section:
        print("Error: give a KEY, or --section to delete a section", file=sys.stderr)
        sys.exit(1)
    try:
        if args.key is None:
            ok = ini.delete_section(args.section)
        else:
            ok = ini.delete_key(args.section, args.key)
    except ReadOnlyError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if not ok:
        _write_failed(ini)


def cmd_sections(args: argparse.Namespace) -> None:
    """List section names."""
    ini = _open(args)
    for name in ini.sections():
        print(name)


def cmd_keys(args: argparse.Namespace) -> None:
    """List the keys of a section."""
    ini = _open(args)
    for name in ini.keys(args.section):
        print(name)


def cmd_dump(args: argparse.Namespace) -> None:
    """Print every entry of the file."""
    from minini.converters import to_json

    ini = _open(args)
    if not ini.path.is_file():
        print(f"Error: File not found: {args.path}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(to_json(ini))
        return

    def _print(section: str, key: str, value: str) -> bool:
        prefix = f"[{section}] " if section else ""
        print(f"{prefix}{key} = {value}")
        return True

    ini.browse(_print)


def cmd_load(args: argparse.Namespace) -> None:
    """Write the entries of a JSON file ({section: {key: value}})."""
    from minini.config import ReadOnlyError
    from minini.converters import from_json

    source = Path(args.json_file)
    if not source.is_file():
        print(f"Error: File not found: {args.json_file}", file=sys.stderr)
        sys.exit(1)
    ini = _open(args)
    try:
        count = from_json(ini, source.read_text(encoding="utf-8"))
    except (ValueError, ReadOnlyError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Wrote {count} entries to {ini.path}")


def cmd_view(args: argparse.Namespace) -> None:
    """Browse a file in the TUI viewer."""
    try:
        from minini.tui.viewer import run_viewer
    except ImportError:
        print(
            "TUI viewer requires the 'textual' package.\n"
            "Install it with: pip install textual",
            file=sys.stderr,
        )
        sys.exit(1)
    ini = _open(args)
    run_viewer(ini)


def build_parser() -> argparse.ArgumentParser:
    from minini import __version__

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--buffer-size", type=int, help="Working buffer capacity in bytes (default 512)")
    common.add_argument("--crlf", action="store_true", help="Write CRLF line terminators")
    common.add_argument("--read-only", action="store_true", help="Refuse to modify the file")
    common.add_argument("-v", "--verbose", action="store_true", help="Log engine decisions to stderr")

    parser = argparse.ArgumentParser(
        prog="minini",
        description="minini - minimal INI file reader/writer.",
    )
    parser.add_argument("--version", action="version", version=f"minini {__version__}")
    sub = parser.add_subparsers(dest="command")

    # get
    p_get = sub.add_parser("get", parents=[common], help="Print the value of a key")
    p_get.add_argument("path", help="Path to .ini file")
    p_get.add_argument("key", help="Key name")
    p_get.add_argument("-s", "--section", help="Section name (omit for keys before any section)")
    p_get.add_argument("-d", "--default", help="Printed when the key is missing")

    # set
    p_set = sub.add_parser("set", parents=[common], help="Set a key")
    p_set.add_argument("path", help="Path to .ini file")
    p_set.add_argument("key", help="Key name")
    p_set.add_argument("value", help="New value")
    p_set.add_argument("-s", "--section", help="Section name")

    # delete
    p_delete = sub.add_parser("delete", parents=[common], help="Delete a key or a section")
    p_delete.add_argument("path", help="Path to .ini file")
    p_delete.add_argument("key", nargs="?", default=None, help="Key name (omit to delete the section)")
    p_delete.add_argument("-s", "--section", help="Section name")

    # sections
    p_sections = sub.add_parser("sections", parents=[common], help="List section names")
    p_sections.add_argument("path", help="Path to .ini file")

    # keys
    p_keys = sub.add_parser("keys", parents=[common], help="List the keys of a section")
    p_keys.add_argument("path", help="Path to .ini file")
    p_keys.add_argument("-s", "--section", help="Section name")

    # dump
    p_dump = sub.add_parser("dump", parents=[common], help="Print every entry")
    p_dump.add_argument("path", help="Path to .ini file")
    p_dump.add_argument("--json", action="store_true", help="Print as JSON")

    # load
    p_load = sub.add_parser("load", parents=[common], help="Write entries from a JSON file")
    p_load.add_argument("path", help="Path to .ini file")
    p_load.add_argument("json_file", help="JSON file: {section: {key: value}}")

    # view
    p_view = sub.add_parser("view", parents=[common], help="Browse a file in a TUI")
    p_view.add_argument("path", help="Path to .ini file")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        print("minini - minimal INI file reader/writer\n")
        print("Usage:")
        print("  minini get settings.ini width -s window")
        print("  minini set settings.ini width 640 -s window")
        print("  minini delete settings.ini width -s window")
        print("  minini delete settings.ini -s window")
        print("  minini sections settings.ini")
        print("  minini keys settings.ini -s window")
        print("  minini dump settings.ini --json")
        print("  minini load settings.ini values.json")
        print("  minini view settings.ini")
        print()
        print("Run 'minini <command> --help' for details on any command.")
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    commands = {
        "get": cmd_get,
        "set": cmd_set,
        "delete": cmd_delete,
        "sections": cmd_sections,
        "keys": cmd_keys,
        "dump": cmd_dump,
        "load": cmd_load,
        "view": cmd_view,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()
