# unialias/core/protocols.py
"""
Typed structures and small interfaces shared by the index and the front-ends.
Front-ends depend on these rather than on concrete sink classes.
"""

from __future__ import annotations

from typing import Protocol
from typing_extensions import TypedDict


class MatchData(TypedDict):
    """
    One completion row:
      matchstr: the full alias
      matchlen: how many leading characters of it the user's input matched
      value: the character the alias expands to
    """
    matchstr: str
    matchlen: int
    value: str


class KeystrokeSink(Protocol):
    """Where a selected character goes (typed into the focused app, a buffer, a console...)."""

    def type_text(self, text: str) -> None:
        ...
