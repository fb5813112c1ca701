# dataset.py - loading alias datasets into a Trie
# A dataset is a csv-like text file, one "alias,character" record per line.
# Lines starting with '#' are comments. The alias is trimmed and must be
# non-empty ASCII; the character is the first one after the comma (trimmed).
# A malformed line aborts the file. A duplicate alias is only a warning.

from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from unialias.core.errors import DatasetError, DuplicateAlias
from unialias.core.trie import Trie
from unialias.utils.logger_utils import Log

DATASET_EXT = ".csv"
HELP_EXT = ".md"
BUNDLED_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data", "dataset")


@dataclass
class LoadReport:
    """What a load did: aliases added and duplicate aliases skipped."""
    added: int = 0
    skipped: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)

    def merge(self, other: "LoadReport") -> None:
        self.added += other.added
        self.skipped.extend(other.skipped)
        self.files.extend(other.files)


@dataclass
class DatasetInfo:
    name: str
    path: str
    help_text: str = ""


def parse_record(line: str) -> Optional[Tuple[str, str]]:
    """
    Parse one line. Returns None for comments and blank lines,
    (alias, character) otherwise. Raises ValueError with the reason.
    """
    if line.startswith("#") or not line.strip():
        return None
    idx = line.find(",")
    if idx < 0:
        raise ValueError("Comma separation not found")

    alias = line[:idx].strip()
    if not alias:
        raise ValueError("Alias string is empty")
    if not alias.isascii():
        raise ValueError("Alias string is not ASCII")

    rest = line[idx + 1:].strip()
    if not rest:
        raise ValueError("No character found after the comma")
    return alias, rest[0]


def parse_dataset(lines: Iterable[str], trie: Trie, source: str = "<memory>") -> LoadReport:
    """Insert every record of `lines` into `trie`."""
    report = LoadReport()
    for lineno, raw in enumerate(lines, 1):
        line = raw.rstrip("\r\n")
        try:
            record = parse_record(line)
        except ValueError as e:
            raise DatasetError(f"Invalid line format. {e}: {line!r}", source, lineno) from e
        if record is None:
            continue

        alias, ch = record
        try:
            trie.append_leaf(alias, ch)
        except DuplicateAlias as e:
            Log.warning(f"[Dataset] {source}:{lineno}: {e}, skipped")
            report.skipped.append(alias)
            continue
        report.added += 1
    return report


def load_dataset_file(path: str, trie: Trie) -> LoadReport:
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            report = parse_dataset(f, trie, source=path)
    except OSError as e:
        raise DatasetError(f"Failed to open file: {e}", path) from e
    except UnicodeDecodeError as e:
        raise DatasetError(f"File is not valid UTF-8: {e}", path) from e
    report.files.append(path)
    return report


def _dataset_files(folder: str) -> List[str]:
    if not os.path.isdir(folder):
        raise DatasetError("Dataset directory not found", folder)
    out = []
    for fname in sorted(os.listdir(folder)):
        fpath = os.path.join(folder, fname)
        if os.path.isfile(fpath) and fname.endswith(DATASET_EXT):
            out.append(fpath)
        else:
            Log.debug(f"[Dataset] skipping non-csv entry: {fpath}")
    return out


def load_dataset_dir(folder: str) -> Tuple[Trie, LoadReport]:
    """
    Build a brand new Trie from every csv file in `folder`.
    Nothing shared is touched, so a failure leaves the caller's trie as it was.
    """
    trie = Trie()
    report = LoadReport()
    Log.info(f"[Dataset] loading datasets from {folder}")
    with Log.time_block("dataset load"):
        for fpath in _dataset_files(folder):
            part = load_dataset_file(fpath, trie)
            Log.info(f"[Dataset] loaded {os.path.basename(fpath)}: {part.added} aliases, {len(part.skipped)} skipped")
            report.merge(part)
    return trie, report


def list_datasets(folder: str) -> List[DatasetInfo]:
    """Datasets in `folder` with the markdown help found next to each one."""
    out = []
    for fpath in _dataset_files(folder):
        name = os.path.basename(fpath)[: -len(DATASET_EXT)]
        help_path = os.path.join(folder, name + HELP_EXT)
        help_text = ""
        if os.path.isfile(help_path):
            with open(help_path, "r", encoding="utf-8-sig") as f:
                help_text = f.read()
        out.append(DatasetInfo(name=name, path=fpath, help_text=help_text))
    return out


def resolve_dataset_dir(configured: str = "") -> str:
    return configured or BUNDLED_DIR
