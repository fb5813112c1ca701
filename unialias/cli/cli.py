"""
cli.py - command line front-end for alias expansion
Features:
- Type an alias fragment, see the matching completions with the matched part highlighted
- Pick a completion by number to output its character
- Reload datasets, dump the trie, browse dataset help
- Uses Rich for tables and formatting
"""

import shlex
import time
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from unialias.core.alias_index import AliasIndex
from unialias.core.dataset import list_datasets, resolve_dataset_dir
from unialias.core.errors import DatasetError, InvalidAlias, NotFound
from unialias.core.keystrokes import ConsoleSink
from unialias.core.protocols import MatchData
from unialias.utils.config_manager import Config
from unialias.utils.logger_utils import Log
from unialias.utils.metrics_tracker import Metrics

HELP = """\
Type part of an alias to see completions, then pick one by number.
Commands:
  /lookup <alias>      exact lookup
  /reload              reload datasets from disk
  /tree                show the whole alias trie
  /datasets            list datasets with their help
  /config [key val]    show or change settings
  /stats               timing averages
  /help  /quit"""


class CLI:
    """Interactive prompt loop around an AliasIndex."""

    def __init__(self, index: Optional[AliasIndex] = None, cfg: Optional[Config] = None,
                 console: Optional[Console] = None):
        self.console = console or Console()
        self.cfg = cfg or Config()
        self.index = index or AliasIndex()
        if self.index.sink is None:
            self.index.sink = ConsoleSink(self.console)
        self.metrics = Metrics(self.cfg.metrics_path)
        self.running = True

    @property
    def dataset_dir(self) -> str:
        return resolve_dataset_dir(self.cfg.get("dataset_dir"))

    def run(self):
        """
        Main loop:
        - prompts for input
        - slash commands are dispatched to _handle_command
        - anything else is treated as an alias fragment
        """
        self.console.rule("[bold magenta]UniAlias[/bold magenta]")
        self.console.print("[cyan]Type an alias, pick a completion by number. /help for commands.[/cyan]\n")

        while self.running:
            try:
                fragment = Prompt.ask("[green]alias[/green]", default="", console=self.console)
                if not fragment:
                    continue
                if fragment.startswith("/"):
                    self._handle_command(fragment)
                    continue
                self._process_input(fragment)
            except (EOFError, KeyboardInterrupt):
                self._exit()
                break

    # COMMAND HANDLING ----------------------------------------------------------
    def _handle_command(self, line: str):
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self._error(f"Bad command: {e}")
            return
        if not parts:
            return
        cmd, args = parts[0].lower(), parts[1:]

        if cmd in ("/q", "/quit", "/exit"):
            self._exit()
        elif cmd == "/help":
            self.console.print(HELP, markup=False)
        elif cmd == "/reload":
            self.reload()
        elif cmd == "/tree":
            self.console.print(self.index.render(), markup=False, highlight=False)
        elif cmd == "/datasets":
            self._show_datasets()
        elif cmd == "/lookup" and len(args) == 1:
            self._lookup(args[0])
        elif cmd == "/config":
            self._config(args)
        elif cmd == "/stats":
            self._show_stats()
        else:
            self._error(f"Unknown command: {line}")

    # CORE INPUT PROCESSING -------------------------------------------------------
    def _process_input(self, fragment: str):
        """Show completions for `fragment`, then let the user pick one."""
        t0 = time.perf_counter()
        matches = self.index.find_matches(fragment, self.cfg.get("max_matches"))
        self.metrics.record("match_time", time.perf_counter() - t0)

        if not matches:
            self.console.print("[dim](no matches)[/dim]")
            return

        self.console.print(self._matches_table(matches))
        chosen = Prompt.ask("Pick # / Enter to skip", default="", console=self.console)
        if not chosen:
            return
        if not chosen.isdigit() or not 1 <= int(chosen) <= len(matches):
            self._error(f"No such completion: {chosen}")
            return

        alias = matches[int(chosen) - 1]["matchstr"]
        if self.index.select_alias(alias):
            Log.info(f"[CLI] selected {alias}")
        else:
            self._error(f"Could not output {alias}")

    # DISPLAY -------------------------------------------------------------------------
    def _matches_table(self, matches: List[MatchData]) -> Table:
        """Completions with the part the input matched in bold."""
        table = Table(title="Completions", box=box.SIMPLE, show_edge=False)
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Alias")
        table.add_column("Char", justify="center", style="bold green")

        for i, m in enumerate(matches, 1):
            alias = Text()
            alias.append(m["matchstr"][: m["matchlen"]], style="bold")
            alias.append(m["matchstr"][m["matchlen"]:], style="dim")
            table.add_row(str(i), alias, Text(m["value"]))
        return table

    def _lookup(self, alias: str):
        try:
            ch = self.index.lookup(alias)
        except (NotFound, InvalidAlias) as e:
            self._error(e)
            return
        self.console.print(Text.assemble((alias, "bold"), " -> ", (ch, "bold green")))

    def _show_datasets(self):
        try:
            infos = list_datasets(self.dataset_dir)
        except DatasetError as e:
            self._error(e)
            return
        if not infos:
            self.console.print("[dim]No datasets loaded[/dim]")
            return
        for info in infos:
            body = Markdown(info.help_text) if info.help_text else Text("(no help)", style="dim")
            self.console.print(Panel(body, title=info.name, border_style="cyan"))

    def _config(self, args: List[str]):
        if not args:
            self.console.print(Panel(Text(self.cfg.show()), title="Settings", border_style="cyan"))
            return
        if len(args) != 2:
            self.console.print("usage: /config [key val]")
            return
        try:
            self.cfg.set(args[0], args[1])
        except (KeyError, ValueError) as e:
            self._error(e)
            return
        self.console.print(f"{args[0]} = {self.cfg.get(args[0])}")

    def _show_stats(self):
        table = Table(title="Timings", box=box.MINIMAL)
        table.add_column("Metric")
        table.add_column("Count", justify="right")
        table.add_column("Avg (ms)", justify="right")
        for key, count, avg in self.metrics.rows():
            table.add_row(key, str(count), f"{avg * 1000:.3f}")
        self.console.print(table)

    # STATE -----------------------------------------------------------------------
    def reload(self) -> bool:
        t0 = time.perf_counter()
        try:
            report = self.index.reload(self.dataset_dir)
        except DatasetError as e:
            Log.error(f"[CLI] error loading dataset: {e}")
            self._error(f"Dataset not loaded: {e}")
            return False
        self.metrics.record("reload_time", time.perf_counter() - t0)
        msg = f"Loaded {report.added} aliases from {len(report.files)} files"
        if report.skipped:
            msg += f" ({len(report.skipped)} duplicates skipped)"
        self.console.print(f"[green]{msg}[/green]")
        return True

    def _error(self, msg):
        self.console.print(Text(str(msg), style="red"))

    def _exit(self):
        self.running = False
        if self.metrics.m:
            Log.debug(self.metrics.show())
        self.console.print("bye.")
