"""Entry point for ``python -m tracker_cli``."""

from tracker_cli.cli import main

main()
