# tests/test_dataset.py
# dataset parsing and directory loading

import os

import pytest

from unialias.core.dataset import (
    BUNDLED_DIR,
    list_datasets,
    load_dataset_dir,
    parse_dataset,
    parse_record,
)
from unialias.core.errors import DatasetError
from unialias.core.trie import Trie


def write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


@pytest.mark.parametrize("line,expected", [
    ("alpha,α", ("alpha", "α")),
    ("  alpha  ,  α  ", ("alpha", "α")),
    ("comma,,", ("comma", ",")),
    ("heart,❤️", ("heart", "❤")),
    ("# comment,x", None),
    ("   ", None),
    ("", None),
])
def test_parse_record(line, expected):
    assert parse_record(line) == expected


@pytest.mark.parametrize("line", ["no separator", " ,x", "alias,", "alias,   ", "naïve,x"])
def test_parse_record_rejects(line):
    with pytest.raises(ValueError):
        parse_record(line)


def test_parse_dataset_counts_and_skips_duplicates():
    t = Trie()
    report = parse_dataset(["# header", "alpha,α", "beta,β", "alpha,A"], t)
    assert report.added == 2
    assert report.skipped == ["alpha"]
    assert t.find_value("alpha") == "α"


def test_malformed_line_reports_location(tmp_path):
    f = write(tmp_path / "bad.csv", "alpha,α\nbroken line\n")
    with pytest.raises(DatasetError) as exc:
        load_dataset_dir(str(tmp_path))
    assert exc.value.lineno == 2
    assert "bad.csv:2" in str(exc.value)
    assert exc.value.path == str(f)


def test_load_dataset_dir_reads_csv_only(tmp_path):
    write(tmp_path / "b.csv", "beta,β\n")
    write(tmp_path / "a.csv", "alpha,α\nbeta,B\n")
    write(tmp_path / "notes.txt", "ignored,x\n")
    trie, report = load_dataset_dir(str(tmp_path))
    # files in name order, so a.csv wins the duplicate
    assert trie.find_value("beta") == "B"
    assert report.added == 2
    assert report.skipped == ["beta"]
    assert [os.path.basename(p) for p in report.files] == ["a.csv", "b.csv"]
    trie.validate()


def test_missing_directory(tmp_path):
    with pytest.raises(DatasetError):
        load_dataset_dir(str(tmp_path / "nope"))


def test_list_datasets_with_help(tmp_path):
    write(tmp_path / "greek.csv", "alpha,α\n")
    write(tmp_path / "greek.md", "# Greek\n")
    write(tmp_path / "misc.csv", "x,×\n")
    infos = list_datasets(str(tmp_path))
    assert [(i.name, i.help_text) for i in infos] == [("greek", "# Greek\n"), ("misc", "")]


def test_bundled_datasets_load_cleanly():
    trie, report = load_dataset_dir(BUNDLED_DIR)
    assert report.skipped == []
    assert trie.find_value("alpha") == "α"
    assert trie.find_value("forall") == "∀"
    assert trie.find_value("comma") == ","
    trie.validate()


def test_byte_order_mark_ignored(tmp_path):
    f = tmp_path / "bom.csv"
    f.write_bytes("# exported with a BOM\nalpha,α\n".encode("utf-8-sig"))
    g = tmp_path / "bom2.csv"
    g.write_bytes("beta,β\n".encode("utf-8-sig"))
    trie, report = load_dataset_dir(str(tmp_path))
    assert report.added == 2
    assert trie.find_value("alpha") == "α"
    assert trie.find_value("beta") == "β"
