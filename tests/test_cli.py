# tests/test_cli.py - CLI driven through an in-memory console
import io

import pytest
from rich.console import Console
from rich.prompt import Prompt

from unialias.cli.cli import CLI
from unialias.core.alias_index import AliasIndex
from unialias.core.errors import InternalConsistency
from unialias.core.keystrokes import BufferSink
from unialias.core.trie import NodeKind, Trie
from unialias.utils.config_manager import Config


@pytest.fixture
def cli(tmp_path):
    t = Trie()
    for alias, ch in [("alpha", "α"), ("alpaca", "🦙"), ("beta", "β")]:
        t.append_leaf(alias, ch)
    cfg = Config(str(tmp_path / "settings.json"))
    console = Console(file=io.StringIO(), width=100, color_system=None)
    return CLI(index=AliasIndex(t, sink=BufferSink()), cfg=cfg, console=console)


def output(cli):
    return cli.console.file.getvalue()


def answers(monkeypatch, *replies):
    it = iter(replies)

    def fake_ask(*a, **kw):
        try:
            return next(it)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr(Prompt, "ask", fake_ask)


def test_pick_completion_outputs_character(cli, monkeypatch):
    answers(monkeypatch, "2")
    cli._process_input("alp")
    assert "alpaca" in output(cli)
    assert cli.index.sink.text == "🦙"


def test_skip_and_bad_pick(cli, monkeypatch):
    answers(monkeypatch, "", "9")
    cli._process_input("alp")
    cli._process_input("alp")
    assert cli.index.sink.text == ""
    assert "No such completion: 9" in output(cli)


def test_no_matches(cli):
    cli._process_input("zzz")
    assert "(no matches)" in output(cli)


def test_run_loop_until_eof(cli, monkeypatch):
    answers(monkeypatch, "beta", "1", "/lookup alpha")
    cli.run()
    assert cli.index.sink.text == "β"
    assert "alpha -> α" in output(cli)
    assert cli.running is False
    assert "bye." in output(cli)


def test_quit_command(cli):
    cli._handle_command("/quit")
    assert cli.running is False


def test_lookup_not_found(cli):
    cli._handle_command("/lookup alp")
    assert "No leaf with exact match" in output(cli)


def test_lookup_internal_error_not_reported_as_missing(cli):
    trie = cli.index.trie
    trie.append_leaf("alphamale", "♂")
    node = next(trie.node(i) for i in range(trie.node_count)
                if trie.node(i).is_leaf and trie.node(i).value == b"alpha")
    node.kind, node.children, node.data = NodeKind.INTERNAL, [], None
    with pytest.raises(InternalConsistency):
        cli._handle_command("/lookup alpha")
    assert "No leaf" not in output(cli)


def test_tree_and_unknown(cli):
    cli._handle_command("/tree")
    cli._handle_command("/frobnicate")
    out = output(cli)
    assert "alpaca(🦙)" in out
    assert "Unknown command: /frobnicate" in out


def test_config_command(cli):
    cli._handle_command("/config max_matches 1")
    assert cli.cfg.get("max_matches") == 1
    cli._handle_command("/config nope 1")
    assert "No such option" in output(cli)


def test_reload_from_configured_dir(cli, tmp_path):
    ds = tmp_path / "ds"
    ds.mkdir()
    (ds / "x.csv").write_text("times,×\ntimes,x\n", encoding="utf-8")
    (ds / "x.md").write_text("# Times\n", encoding="utf-8")
    cli.cfg.set("dataset_dir", str(ds))
    assert cli.reload() is True
    assert cli.index.lookup("times") == "×"
    assert "1 duplicates skipped" in output(cli)

    cli._handle_command("/datasets")
    assert "Times" in output(cli)

    cli._handle_command("/stats")
    assert "reload_time" in output(cli)


def test_reload_failure_reported(cli, tmp_path):
    cli.cfg.set("dataset_dir", str(tmp_path / "missing"))
    assert cli.reload() is False
    assert "Dataset not loaded" in output(cli)
    assert cli.index.lookup("alpha") == "α"


def test_timings_persist_when_configured(tmp_path):
    cfg = Config(str(tmp_path / "settings.json"))
    cfg.set("metrics_file", "metrics.json")

    def make_cli():
        console = Console(file=io.StringIO(), width=100, color_system=None)
        return CLI(index=AliasIndex(Trie(), sink=BufferSink()), cfg=cfg, console=console)

    make_cli()._process_input("zz")
    assert (tmp_path / "metrics.json").exists()
    assert make_cli().metrics.n["match_time"] == 1
