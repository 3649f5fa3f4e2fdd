"""Command-line entry point for the embedded link tools."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, Sequence

from .config import (
    DEFAULT_BACKUP_DIR,
    DEFAULT_LOG_PATH,
    DEFAULT_WEB_PATH,
    ConfigurationError,
    EmbedConfig,
    EnvironmentSettings,
    load_environment,
    resolve_cookie_path,
)
from .fetcher import ResourceFetcher
from .pipeline import run_rewriter
from .report import build_report, render_report_html, render_report_text
from .store import TARGETS, RecordStore, target_for_key
from .utils import split_exceptions

logger = logging.getLogger("moodle_embedded.cli")

COMMANDS = ("rewrite", "report")

REWRITE_DESCRIPTION = "Find embedded files from remote site, store them locally and update links."

REWRITE_EXAMPLE = (
    "Example:\n"
    "$ moodle-embedded --table=page --field=content "
    "--match=blackboard.example.edu --except=jsp,execute"
)


def target_catalog() -> str:
    lines = ["Tables with HTML fields to check:"]
    for target in TARGETS:
        lines.append(f"    {target.table}, {target.field} = {target.label}")
    return "\n".join(lines)


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if argv and argv[0] in commands:
        return argv
    return ("rewrite", *argv)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy database URL (default: $DATABASE_URL)",
    )
    parser.add_argument(
        "--prefix",
        default=None,
        help="Moodle table prefix (default: $MOODLE_TABLE_PREFIX or mdl_)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_rewrite_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-t", "--table", help="Table containing embedded URLs for links/images.")
    parser.add_argument("-f", "--field", help="Field in table above containing HTML text.")
    parser.add_argument("-m", "--match", help="String to match in URLs (eg domain).")
    parser.add_argument(
        "-e",
        "--except",
        dest="exceptions",
        default="",
        help="List of string exceptions within matched URLs.",
    )
    parser.add_argument(
        "-b",
        "--backupdir",
        default=DEFAULT_BACKUP_DIR,
        type=Path,
        help="(optional) Local dir to download files into.",
    )
    parser.add_argument(
        "-w",
        "--webpath",
        default=DEFAULT_WEB_PATH,
        help="(optional) Equivalent dir in web view.",
    )
    parser.add_argument(
        "-c",
        "--cookie",
        default=None,
        help="(optional) Path to cookie. If not provided, uses $MOODLE_DATAROOT/curl_cookie.txt.",
    )
    parser.add_argument(
        "-l",
        "--log",
        default=DEFAULT_LOG_PATH,
        type=Path,
        help="(optional) CSV log file to append to.",
    )
    _add_common_arguments(parser)


def _add_report_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-t",
        "--table",
        required=True,
        choices=[target.key for target in TARGETS],
        help="Content area to report on, as table-field",
    )
    parser.add_argument("-m", "--match", default="", help="String to match in URLs (eg domain).")
    parser.add_argument(
        "-e",
        "--exclude",
        default="",
        help="Comma separated strings that exclude a matched URL.",
    )
    parser.add_argument(
        "--wwwroot",
        default=None,
        help="Site root used for activity links (default: $MOODLE_WWWROOT)",
    )
    parser.add_argument(
        "--html",
        default=None,
        type=Path,
        help="Write the report as HTML to this file instead of printing text",
    )
    _add_common_arguments(parser)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="moodle-embedded",
        description="Find, download and rewrite links to remote files embedded in Moodle content.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    rewrite_parser = subparsers.add_parser(
        "rewrite",
        help="Download embedded files and rewrite links to the local copies",
        description=REWRITE_DESCRIPTION,
        epilog=f"{REWRITE_EXAMPLE}\n\n{target_catalog()}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_rewrite_arguments(rewrite_parser)
    rewrite_parser.set_defaults(command_parser=rewrite_parser)

    report_parser = subparsers.add_parser(
        "report",
        help="List matching embedded links without changing anything",
        epilog=target_catalog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_report_arguments(report_parser)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, COMMANDS))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _open_store(args: argparse.Namespace, env: EnvironmentSettings) -> RecordStore:
    return RecordStore.from_url(
        args.database_url or env.database_url,
        prefix=args.prefix if args.prefix is not None else env.table_prefix,
    )


def _run_rewrite(args: argparse.Namespace, env: EnvironmentSettings) -> int:
    store = _open_store(args, env)
    store.validate_target(args.table, args.field)
    cookie_path = resolve_cookie_path(args.cookie, env.dataroot)

    config = EmbedConfig(
        table=args.table,
        field=args.field,
        match=args.match,
        exceptions=split_exceptions(args.exceptions),
        backup_dir=args.backupdir,
        web_path=args.webpath,
        cookie_path=cookie_path,
        log_path=args.log,
    )
    fetcher = ResourceFetcher.with_cookies(config.backup_dir, cookie_path)

    overall_start = time.perf_counter()
    results = run_rewriter(config, store, fetcher)
    total_elapsed = time.perf_counter() - overall_start

    replaced = sum(len(result.replacements) for result in results)
    logger.info(
        "Finished in %.2fs (%d record(s) processed, %d link(s) replaced)",
        total_elapsed,
        len(results),
        replaced,
    )
    return 0


def _run_report(args: argparse.Namespace, env: EnvironmentSettings) -> int:
    target = target_for_key(args.table)
    store = _open_store(args, env)
    store.validate_target(target.table, target.field)
    wwwroot = (args.wwwroot if args.wwwroot is not None else env.wwwroot).rstrip("/")

    sections = build_report(
        store,
        target.table,
        target.field,
        args.match,
        split_exceptions(args.exclude),
        wwwroot=wwwroot,
    )
    if args.html:
        args.html.write_text(
            render_report_html(sections, args.table, args.match, args.exclude),
            encoding="utf-8",
        )
        logger.info("Saved report to %s", args.html)
    else:
        sys.stdout.write(render_report_text(sections))
        sys.stdout.flush()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "rewrite" and not (args.table and args.field and args.match):
        args.command_parser.print_help()
        return 0

    env = load_environment()
    try:
        if args.command == "rewrite":
            return _run_rewrite(args, env)
        return _run_report(args, env)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
