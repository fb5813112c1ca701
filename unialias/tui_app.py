# tui_app.py - UniAlias TUI
# -------------------------------------------------------
# Terminal UI around the alias index:
#  - live completions as you type
#  - TAB / arrows cycle through them, ENTER outputs the selected character
#  - ESC clears the input, CTRL+R reloads the datasets
#  - selected characters collect in the output pane, ready to copy
# -------------------------------------------------------

from __future__ import annotations
import time
from typing import List, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.reactive import reactive
from textual.widgets import Footer, Header, Input, Static

from unialias.core.alias_index import AliasIndex
from unialias.core.dataset import resolve_dataset_dir
from unialias.core.errors import DatasetError
from unialias.core.keystrokes import BufferSink
from unialias.core.protocols import MatchData
from unialias.utils.config_manager import Config
from unialias.utils.logger_utils import Log


class MatchPanel(Static):
    """
    Right-side completion list.
    The part of each alias matched by the input is bold; the selected row is highlighted.
    """

    def update_matches(self, matches: List[MatchData], selected: int) -> None:
        if not matches:
            self.update(Text("No matches", style="dim"))
            return
        out = Text()
        for i, m in enumerate(matches):
            row_style = "reverse" if i == selected else ""
            out.append(f"{i + 1} ", style="cyan")
            out.append(m["matchstr"][: m["matchlen"]], style=f"bold {row_style}".strip())
            out.append(m["matchstr"][m["matchlen"]:], style=row_style)
            out.append(f"  {m['value']}\n", style="bold green")
        self.update(out)


class OutputPane(Static):
    """Characters output so far."""

    def show(self, text: str) -> None:
        self.update(Text(text) if text else Text("Selected characters appear here", style="dim"))


# Main Application -----------------------------------------------------------------
class TUIAliasApp(App):
    """
    UI events -> AliasIndex queries -> reactive state -> widget updates.
    Output goes to a BufferSink shown in the output pane.
    """

    TITLE = "UniAlias"
    CSS = """
    #left { width: 1fr; }
    #right { width: 1fr; border-left: solid $accent; padding: 0 1; }
    #output { height: auto; padding: 1; }
    #status { height: 1; dock: bottom; }
    """

    BINDINGS = [
        Binding("tab", "next_match", "Next", priority=True),
        Binding("down", "next_match", "Next", show=False, priority=True),
        Binding("up", "prev_match", "Previous", show=False, priority=True),
        Binding("escape", "clear", "Clear", priority=True),
        Binding("ctrl+r", "reload", "Reload datasets", priority=True),
    ]

    matches = reactive(list, init=False)  # current completions
    selected = reactive(-1, init=False)  # index into matches, -1 = none

    def __init__(self, index: Optional[AliasIndex] = None, cfg: Optional[Config] = None):
        super().__init__()
        self.cfg = cfg or Config()
        self.sink = BufferSink()
        self.index = index or AliasIndex()
        self.index.sink = self.sink
        self.latency = 0.0

    # UI --------------------------------------------------------------------
    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            with Container(id="left"):
                yield Input(placeholder="Type an alias…", id="alias_input")
                yield OutputPane(id="output")
            with Container(id="right"):
                yield MatchPanel(id="matches")
        yield Static(id="status")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one(OutputPane).show("")
        self.query_one(MatchPanel).update_matches([], -1)
        self.query_one(Input).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        """Re-run the match on every keystroke."""
        text = event.value
        if not text:
            self.matches = []
            self.selected = -1
            return
        start = time.perf_counter()
        found = self.index.find_matches(text, self.cfg.get("max_matches"))
        self.latency = time.perf_counter() - start
        self.matches = found
        self.selected = 0 if found else -1

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.accept_selected()

    # reactive watchers ---------------------------------------------------------
    def watch_matches(self, matches: List[MatchData]) -> None:
        self.query_one(MatchPanel).update_matches(matches, self.selected)

    def watch_selected(self, selected: int) -> None:
        self.query_one(MatchPanel).update_matches(self.matches, selected)

    # actions ----------------------------------------------------------------------
    def action_next_match(self) -> None:
        if self.matches:
            self.selected = (self.selected + 1) % len(self.matches)

    def action_prev_match(self) -> None:
        if self.matches:
            self.selected = (self.selected - 1) % len(self.matches)

    def action_clear(self) -> None:
        self.query_one(Input).value = ""
        self.matches = []
        self.selected = -1

    def action_reload(self) -> None:
        folder = resolve_dataset_dir(self.cfg.get("dataset_dir"))
        try:
            report = self.index.reload(folder)
        except DatasetError as e:
            Log.error(f"[TUI] error reloading dataset: {e}")
            self._status(Text(f"Dataset not loaded: {e}", style="red"))
            return
        self._status(Text(f"Loaded {report.added} aliases", style="green"))

    def accept_selected(self) -> None:
        """Output the selected completion's character and clear the input."""
        if not 0 <= self.selected < len(self.matches):
            return
        alias = self.matches[self.selected]["matchstr"]
        self.action_clear()
        if self.index.select_alias(alias):
            self._status(Text(f"{alias} ({self.latency * 1000:.2f} ms)", style="dim"))
        else:
            self._status(Text(f"Could not output {alias}", style="red"))
        self.query_one(OutputPane).show(self.sink.text)

    def _status(self, text: Text) -> None:
        self.query_one("#status", Static).update(text)
