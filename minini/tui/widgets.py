"""minini TUI Widgets - Panels for the INI viewer."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.message import Message
from textual.widgets import DataTable, Label, ListItem, ListView, Static

# Label shown for the entries before the first header
TOP_LEVEL_LABEL = "(top level)"


class FilePanel(Static):
    """Sidebar panel showing file facts and the engine configuration."""

    DEFAULT_CSS = """
    FilePanel {
        width: 32;
        border: solid $accent;
        padding: 1;
        overflow-y: auto;
    }
    FilePanel .file-title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }
    FilePanel .file-key {
        color: $text-muted;
    }
    FilePanel .read-only {
        color: $warning;
        text-style: bold;
    }
    """

    def __init__(self, facts: dict[str, str], read_only: bool, **kwargs) -> None:
        super().__init__(**kwargs)
        self._facts = facts
        self._read_only = read_only

    def compose(self) -> ComposeResult:
        yield Label("INI file", classes="file-title")
        if self._read_only:
            yield Label("READ-ONLY", classes="read-only")
            yield Label("")  # spacer
        for key, val in self._facts.items():
            display = val if len(val) <= 24 else "..." + val[-21:]
            yield Label(f"{key}:", classes="file-key")
            yield Label(f"  {display}")


class SectionList(ListView):
    """List of sections in the file. Supports keyboard navigation."""

    DEFAULT_CSS = """
    SectionList {
        width: 28;
        border: solid $accent;
    }
    SectionList > ListItem {
        padding: 0 1;
    }
    SectionList > ListItem.--highlight {
        background: $accent;
    }
    """

    class SectionSelected(Message):
        """Fired when a section is selected."""

        def __init__(self, section_name: str, section_index: int) -> None:
            self.section_name = section_name
            self.section_index = section_index
            super().__init__()

    def __init__(self, section_names: list[str], **kwargs) -> None:
        self._section_names = section_names
        super().__init__(**kwargs)

    def compose(self) -> ComposeResult:
        for name in self._section_names:
            yield ListItem(Label(name or TOP_LEVEL_LABEL))

    def _post_selected(self) -> None:
        idx = self.index or 0
        if 0 <= idx < len(self._section_names):
            self.post_message(
                self.SectionSelected(self._section_names[idx], idx)
            )

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        self._post_selected()

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        self._post_selected()


class EntryTable(DataTable):
    """Key/value table for the selected section."""

    DEFAULT_CSS = """
    EntryTable {
        border: solid $accent;
        height: 1fr;
    }
    """

    def on_mount(self) -> None:
        self.cursor_type = "row"
        self.add_columns("Key", "Value")

    def show_entries(self, entries: list[tuple[str, str]]) -> None:
        self.clear()
        for key, value in entries:
            if value:
                cell = Text(value)
            else:
                cell = Text("(empty)", style="dim italic")
            self.add_row(Text(key, style="bold"), cell)
