from unialias.cli.cli import CLI
