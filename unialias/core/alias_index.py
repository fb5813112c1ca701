# alias_index.py
# Shared handle around the current Trie, used by the front-ends on every keystroke.
# Many readers may query at once; a reload builds a new Trie with no lock held
# and only takes the write lock for the swap itself.

from __future__ import annotations
import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional

from unialias.core.dataset import LoadReport, load_dataset_dir
from unialias.core.errors import InvalidAlias, NotFound
from unialias.core.protocols import KeystrokeSink, MatchData
from unialias.core.trie import ROOT, Trie
from unialias.utils.logger_utils import Log


class ReadWriteLock:
    """
    Readers share the lock; a writer is exclusive.
    Waiting writers block new readers so a reload is not starved by typing.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class AliasIndex:
    """
    Query front-end over a swappable Trie:
     - find_matches(): completions for the text typed so far
     - lookup()/select_alias(): exact alias on selection
     - reload(): rebuild from a dataset directory and swap atomically
    """

    def __init__(self, trie: Optional[Trie] = None, sink: Optional[KeystrokeSink] = None) -> None:
        self._trie = trie if trie is not None else Trie()
        self._lock = ReadWriteLock()
        self.sink = sink

    # queries ---------------------------------------------------------------
    def find_matches(self, text: str, cnt: int = 5) -> List[MatchData]:
        """
        Top `cnt` completions for `text`, in trie order.
        Empty when cnt is 0, text is empty or non-ASCII, or nothing matches at all.
        """
        if cnt <= 0 or not text or not text.isascii():
            return []
        with self._lock.read_locked():
            trie = self._trie
            midx, mlen = trie.find_max_match(text)
            if midx == ROOT:
                return []
            return [
                MatchData(matchstr=alias, matchlen=mlen, value=ch)
                for alias, ch in trie.enumerate_from(midx, cnt)
            ]

    def lookup(self, alias: str) -> str:
        with self._lock.read_locked():
            return self._trie.find_value(alias)

    def select_alias(self, alias: str) -> bool:
        """
        Look the alias up and hand its character to the sink.
        The front-end passes the alias, never the character itself.
        """
        try:
            ch = self.lookup(alias)
        except (NotFound, InvalidAlias) as e:
            Log.error(f"[AliasIndex] error finding alias: {e}")
            return False
        if self.sink is None:
            Log.warning("[AliasIndex] no keystroke sink attached")
            return False
        try:
            self.sink.type_text(ch)
        except OSError as e:
            Log.error(f"[AliasIndex] failed to input character {ch!r}: {e}")
            return False
        return True

    def render(self) -> str:
        with self._lock.read_locked():
            return self._trie.render()

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._trie)

    # replacement -------------------------------------------------------------
    def swap(self, trie: Trie) -> Trie:
        """Install `trie` as the current one and return the previous one."""
        with self._lock.write_locked():
            old, self._trie = self._trie, trie
        return old

    def reload(self, folder: str) -> LoadReport:
        """
        Rebuild from `folder`. The new trie is built off to the side, so on a
        DatasetError the current trie stays in place.
        """
        trie, report = load_dataset_dir(folder)
        self.swap(trie)
        Log.info(f"[AliasIndex] dataset loaded: {report.added} aliases from {len(report.files)} files")
        return report

    @property
    def trie(self) -> Trie:
        return self._trie
