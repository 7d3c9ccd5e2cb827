"""Command-line interface: `intern-daily gen` and `intern-daily config`."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from intern_daily import __version__
from intern_daily.config import load_config, resolve_path

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(verbose: bool = False, quiet: bool = False, repo_root: Path | None = None) -> None:
    """
    Attach stderr (and optionally file) handlers to the `intern_daily` logger.

    -v forces DEBUG and -q forces ERROR; otherwise `logging.level` from config
    applies. Handlers are attached once per process.
    """
    settings = load_config(repo_root).get("logging") or {}
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.getLevelName(str(settings.get("level") or "INFO").upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger = logging.getLogger("intern_daily")
    logger.setLevel(level)
    if logger.handlers:
        return
    formatter = logging.Formatter(LOG_FORMAT)
    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(formatter)
    logger.addHandler(stream)
    target = settings.get("file")
    if not target:
        return
    try:
        file_handler = logging.FileHandler(Path(target).expanduser(), encoding="utf-8")
    except OSError:
        logger.warning("Cannot open log file %s; logging to stderr only", target)
        return
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)


def _non_negative_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value}")
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0: {value}")
    return n


def _verbosity_flags(parser: argparse.ArgumentParser, help_visible: bool) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-v", "--verbose", action="store_true",
        help="Debug logging." if help_visible else argparse.SUPPRESS,
    )
    group.add_argument(
        "-q", "--quiet", action="store_true",
        help="Errors only." if help_visible else argparse.SUPPRESS,
    )


def _add_gen(subparsers, parents: list[argparse.ArgumentParser]) -> None:
    p = subparsers.add_parser("gen", help="Write the daily Markdown report.", parents=parents)
    p.add_argument("--repo", type=Path, default=Path("."), help="Git work tree (default: .).")
    p.add_argument("--date", metavar="YYYY-MM-DD", help="Report day in --tz (default: today).")
    p.add_argument("--since", metavar="ISO", help="Window start; takes precedence over --date.")
    p.add_argument("--until", metavar="ISO", help="Window end (default: end of today).")
    p.add_argument("--tz", metavar="IANA_TZ", help="Time zone (default: config timezone, Australia/Sydney).")
    p.add_argument("--output", "-o", type=Path, help="Report file (default: <repo>/.internlog/daily-<date>.md).")
    p.add_argument("--stdout", action="store_true", help="Print the report instead of writing a file.")
    p.add_argument("--open", action="store_true", help="Open the written report with the default application.")
    p.add_argument("--max-commits", type=_non_negative_int, help="Cap on commits read (0 = unlimited).")
    p.add_argument(
        "--include-unstaged",
        action="store_true",
        help="Also report how many working-tree files have uncommitted changes.",
    )
    p.add_argument("--no-ai", action="store_true", help="Skip the Ollama summary; rule-based report only.")
    p.add_argument("--model", "-m", help="Ollama model (default: config default_model).")
    p.set_defaults(run="gen")


def _add_config(subparsers, parents: list[argparse.ArgumentParser]) -> None:
    p = subparsers.add_parser("config", help="Show or change settings.", parents=parents)
    p.add_argument("path", type=Path, nargs="?", default=Path("."), help="Path inside the repository (default: .).")
    p.add_argument("--show", action="store_true", help="Print the merged settings as JSON.")
    p.add_argument("--set", dest="set_key", metavar="KEY=VALUE", help="Set a dotted key, e.g. ai.enabled=false.")
    p.add_argument("--add", dest="add_key", nargs=2, metavar=("KEY", "VALUE"), help="Append VALUE to the list at KEY.")
    p.add_argument("--remove", dest="remove_key", nargs=2, metavar=("KEY", "VALUE"), help="Drop VALUE from the list at KEY.")
    p.add_argument("--global", dest="global_", action="store_true", help="Edit ~/.intern-daily/config.json even inside a repository.")
    p.set_defaults(run="config")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intern-daily",
        description="Summarize a day of git commits as a Markdown report.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _verbosity_flags(parser, help_visible=True)

    # Accept -v/-q after the subcommand as well.
    shared = argparse.ArgumentParser(add_help=False)
    _verbosity_flags(shared, help_visible=False)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)
    _add_gen(subparsers, [shared])
    _add_config(subparsers, [shared])
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    for attr in ("repo", "path"):
        if isinstance(getattr(args, attr, None), Path):
            setattr(args, attr, resolve_path(getattr(args, attr)))

    setup_logging(
        verbose=getattr(args, "verbose", False),
        quiet=getattr(args, "quiet", False),
        repo_root=getattr(args, "repo", None),
    )

    command = getattr(args, "run", None)
    if command == "gen":
        from intern_daily.commands.gen import run
    elif command == "config":
        from intern_daily.commands.config_cmd import run
    else:
        parser.print_help()
        sys.exit(0)
    run(args)
