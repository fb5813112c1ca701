# main.py - entry point: configure logging, load datasets, start a front-end

import argparse
import os
import sys

from unialias.core.alias_index import AliasIndex
from unialias.core.dataset import resolve_dataset_dir
from unialias.core.errors import DatasetError, InvalidAlias, NotFound
from unialias.utils.config_manager import Config
from unialias.utils.logger_utils import Log


def build_parser():
    p = argparse.ArgumentParser(prog="unialias", description="Expand short aliases into Unicode characters.")
    p.add_argument("--home", help="settings directory (default: $UNIALIAS_HOME or ~/.unialias)")
    p.add_argument("--dataset-dir", help="directory of *.csv datasets (default: configured or bundled)")
    p.add_argument("--tui", action="store_true", help="start the full-screen terminal UI")
    p.add_argument("--tree", action="store_true", help="print the alias trie and exit")
    p.add_argument("--lookup", metavar="ALIAS", help="print the character for ALIAS and exit")
    p.add_argument("-v", "--verbose", action="store_true", help="log info messages to stderr")
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)

    cfg_path = os.path.join(args.home, "settings.json") if args.home else None
    cfg = Config(cfg_path)
    Log.configure(
        path=cfg.log_path,
        console_level="INFO" if args.verbose else "WARNING",
        use_color=cfg.get("color"),
    )

    folder = args.dataset_dir or resolve_dataset_dir(cfg.get("dataset_dir"))
    if args.dataset_dir:
        cfg.data["dataset_dir"] = args.dataset_dir

    index = AliasIndex()
    try:
        index.reload(folder)
    except DatasetError as e:
        Log.error(f"error loading dataset: {e}")
        if args.tree or args.lookup:
            return 1

    if args.tree:
        sys.stdout.write(index.render())
        return 0

    if args.lookup:
        try:
            print(index.lookup(args.lookup))
        except (NotFound, InvalidAlias) as e:
            Log.error(str(e))
            return 1
        return 0

    if args.tui:
        from unialias.tui_app import TUIAliasApp

        TUIAliasApp(index=index, cfg=cfg).run()
    else:
        from unialias.cli.cli import CLI

        CLI(index=index, cfg=cfg).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
