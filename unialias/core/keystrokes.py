# keystrokes.py - sinks that receive the character of a selected alias

from __future__ import annotations
from typing import List, Optional

from rich.console import Console
from rich.text import Text


class BufferSink:
    """Collects everything typed; the TUI output pane and tests read it back."""

    def __init__(self) -> None:
        self.parts: List[str] = []

    def type_text(self, text: str) -> None:
        self.parts.append(text)

    @property
    def text(self) -> str:
        return "".join(self.parts)

    def clear(self) -> None:
        self.parts.clear()


class ConsoleSink:
    """Prints the character so it can be copied from the terminal."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def type_text(self, text: str) -> None:
        self.console.print(Text(text, style="bold green"))
