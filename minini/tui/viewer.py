"""minini TUI Viewer - Textual app with a 3-panel layout."""

from __future__ import annotations

import sys

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Header, Input

from minini.document import IniFile
from minini.tui.widgets import EntryTable, FilePanel, SectionList


def load_entries(ini: IniFile) -> tuple[list[str], dict[str, list[tuple[str, str]]]]:
    """Collect section names (file order) and their entries in one pass.

    Entries before the first header are listed under the "" section.
    Sections without keys are still listed.
    """
    entries: dict[str, list[tuple[str, str]]] = {}

    def _collect(section: str, key: str, value: str) -> bool:
        entries.setdefault(section, []).append((key, value))
        return True

    ini.browse(_collect)
    names = [""] if "" in entries else []
    names.extend(ini.sections())
    return names, entries


class IniViewerApp(App):
    """TUI viewer for .ini files. Sections on the left, entries on the right."""

    TITLE = "minini Viewer"
    CSS = """
    Screen {
        layout: vertical;
    }
    #main-area {
        height: 1fr;
    }
    #search-bar {
        dock: bottom;
        display: none;
        height: 3;
        padding: 0 1;
    }
    #search-bar.visible {
        display: block;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("slash", "toggle_search", "Search", show=True),
        Binding("escape", "close_search", "Close search", show=False),
        Binding("r", "reload", "Reload", show=True),
        Binding("j", "next_section", "Next", show=True),
        Binding("k", "prev_section", "Prev", show=True),
    ]

    def __init__(self, ini: IniFile, **kwargs) -> None:
        super().__init__(**kwargs)
        self._ini = ini
        self._section_names: list[str] = []
        self._entries: dict[str, list[tuple[str, str]]] = {}

    def compose(self) -> ComposeResult:
        self._section_names, self._entries = load_entries(self._ini)
        self.title = f"minini Viewer - {self._ini.path.name}"

        cfg = self._ini.config
        facts = {
            "path": str(self._ini.path),
            "size": f"{self._ini.path.stat().st_size} bytes",
            "sections": str(len(self._section_names)),
            "entries": str(sum(len(v) for v in self._entries.values())),
            "buffer": f"{cfg.buffer_capacity} bytes",
            "terminator": repr(cfg.line_terminator),
        }

        yield Header()
        with Horizontal(id="main-area"):
            yield FilePanel(facts=facts, read_only=cfg.read_only, id="file-info")
            yield SectionList(section_names=self._section_names, id="sections")
            yield EntryTable(id="entries")
        yield Input(placeholder="Filter sections and keys... (Escape to close)", id="search-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Auto-select first section on mount."""
        if self._section_names:
            self._show_section(self._section_names[0])
            self.query_one("#sections", SectionList).focus()

    def _show_section(self, name: str) -> None:
        table = self.query_one("#entries", EntryTable)
        table.show_entries(self._entries.get(name, []))

    def on_section_list_section_selected(
        self, event: SectionList.SectionSelected
    ) -> None:
        self._show_section(event.section_name)

    def action_next_section(self) -> None:
        self.query_one("#sections", SectionList).action_cursor_down()

    def action_prev_section(self) -> None:
        self.query_one("#sections", SectionList).action_cursor_up()

    def action_reload(self) -> None:
        """Re-read the file from disk."""
        self._section_names, self._entries = load_entries(self._ini)
        self._update_section_list(self._section_names)

    def action_toggle_search(self) -> None:
        search = self.query_one("#search-bar", Input)
        search.toggle_class("visible")
        if search.has_class("visible"):
            search.focus()
        else:
            self.action_close_search()

    def action_close_search(self) -> None:
        search = self.query_one("#search-bar", Input)
        search.remove_class("visible")
        search.value = ""
        self._update_section_list(self._section_names)
        self.query_one("#sections", SectionList).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        """Keep sections whose name or keys contain the query."""
        if event.input.id != "search-bar":
            return
        query = event.value.lower().strip()
        if not query:
            self._update_section_list(self._section_names)
            return
        matches = [
            name for name in self._section_names
            if query in name.lower()
            or any(query in key.lower() for key, _ in self._entries.get(name, []))
        ]
        self._update_section_list(matches)

    def _update_section_list(self, names: list[str]) -> None:
        old = self.query_one("#sections", SectionList)
        new_list = SectionList(section_names=names, id="sections")
        old.remove()
        self.query_one("#main-area", Horizontal).mount(new_list, before="#entries")
        if names:
            self._show_section(names[0])
        else:
            self.query_one("#entries", EntryTable).show_entries([])


def run_viewer(ini: IniFile) -> None:
    """Launch the TUI viewer."""
    if not ini.path.is_file():
        print(f"Error: File not found: {ini.path}", file=sys.stderr)
        sys.exit(1)
    app = IniViewerApp(ini)
    app.run()
