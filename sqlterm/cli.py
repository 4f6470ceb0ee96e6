#!/usr/bin/env python3
"""sqlterm - A terminal UI for running SQL with DuckDB."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import get_config_path, load_config

DESCRIPTION = """\
CLI and terminal UI for interactive SQL, using DuckDB as the query
execution engine.

Without arguments sqlterm opens the terminal UI. With --file it runs every
statement of the given files in order, prints the results and exits.
"""

EPILOG = """\
Environment variables:
  SQLTERM_LOG_LEVEL   {DEBUG | INFO | WARNING | ERROR}, default INFO
  SQLTERM_LOG_FILE    log file path, default ~/.sqlterm/logs/sqlterm.log
  SQLTERM_CONFIG_DIR  configuration directory, default ~/.sqlterm
"""


def parse_valid_file(value: str) -> Path:
    """argparse type for --file: the path must be an existing file."""
    path = Path(value)
    if not path.exists():
        raise argparse.ArgumentTypeError(f"File does not exist: '{value}'")
    if not path.is_file():
        raise argparse.ArgumentTypeError(f"Exists but is not a file: '{value}'")
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqlterm",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-f",
        "--file",
        nargs="*",
        action="extend",
        default=[],
        type=parse_valid_file,
        metavar="FILE",
        help="Execute commands from file(s), then exit",
    )
    parser.add_argument("-c", "--config", help="Path to the configuration file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    args = build_parser().parse_args(argv)
    config = load_config(get_config_path(args.config))

    from .core.logging_setup import configure

    if args.file:
        configure(batch=True)
        # Import commands lazily to keep the TUI out of batch runs
        from .commands import cmd_execute_files

        return cmd_execute_files(args.file, config)

    configure()
    from .app import SqlTermApp

    app = SqlTermApp(config=config)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
