"""
Command line interface.

Usage:
    python -m phishguard scan http://paypa1.com/login
    python -m phishguard history --limit 10
    python -m phishguard stats --window 10 --json
"""

import argparse
import json
import logging
import sys

from . import config
from .app.scanner import scan_url
from .errors import InputRejected
from .store import build_store

logger = logging.getLogger("cli")


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog="phishguard",
        description="Heuristic URL trust scoring",
    )
    parser.add_argument("--backend", choices=["json", "sqlite", "memory"],
                        default=config.STORE_BACKEND,
                        help=f"History backend (default: {config.STORE_BACKEND})")
    parser.add_argument("--history-file", default=config.HISTORY_FILE,
                        help=f"JSON history file (default: {config.HISTORY_FILE})")
    parser.add_argument("--database-url", default=config.DATABASE_URL,
                        help=f"Database URL for the sqlite backend (default: {config.DATABASE_URL})")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    scan_p = sub.add_parser("scan", help="Score one or more URLs")
    scan_p.add_argument("urls", nargs="+", metavar="URL")
    scan_p.add_argument("--json", action="store_true", help="Print results as JSON")

    hist_p = sub.add_parser("history", help="Show recent scans")
    hist_p.add_argument("--limit", type=int, default=config.HISTORY_CAPACITY)
    hist_p.add_argument("--json", action="store_true", help="Print records as JSON")

    stats_p = sub.add_parser("stats", help="Show aggregate counts")
    stats_p.add_argument("--window", type=int, default=config.RECENT_WINDOW)
    stats_p.add_argument("--json", action="store_true", help="Print stats as JSON")

    return parser.parse_args(argv)


def print_result(result) -> None:
    print("=" * 80)
    print("URL:", result.url)
    print("Score:", result.score, "Verdict:", result.category.value)
    for f in result.factors:
        if f.weight:
            print(f"- [-{f.weight}] {f.description}")
        else:
            print(f"- {f.description}")


def cmd_scan(args, store) -> int:
    status = 0
    results = []
    for url in args.urls:
        try:
            result = scan_url(url, store=store)
        except InputRejected as e:
            print(f"ERROR: rejected {url!r}: {e}", file=sys.stderr)
            status = 2
            continue
        results.append(result)
        if not args.json:
            print_result(result)
    if args.json:
        print(json.dumps([r.to_dict() for r in results], indent=2))
    return status


def cmd_history(args, store) -> int:
    records = store.recent_window(args.limit)
    if args.json:
        print(json.dumps([r.to_dict() for r in records], indent=2))
        return 0
    for r in records:
        print(f"{r.timestamp:%Y-%m-%d %H:%M:%S}  {r.score:>3}  {r.category.value:<10}  {r.url}")
    return 0


def cmd_stats(args, store) -> int:
    stats = store.stats(args.window)
    if args.json:
        print(json.dumps(stats.to_dict(), indent=2))
        return 0
    print(f"Total scans : {stats.total_scans}")
    print(f"Safe        : {stats.total_safe}")
    print(f"Suspicious  : {stats.total_suspicious}")
    print(f"Phishing    : {stats.total_phishing}")
    print(f"Invalid     : {stats.total_invalid}")
    print(f"Last {stats.window} scans:")
    for category, count in stats.recent_breakdown.items():
        print(f"    {category.value:<10} {count}")
    return 0


COMMANDS = {
    "scan": cmd_scan,
    "history": cmd_history,
    "stats": cmd_stats,
}


def main(argv=None) -> int:
    args = parse_arguments(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else config.LOG_LEVEL)

    store = build_store(args.backend, path=args.history_file, database_url=args.database_url)
    logger.debug("Using %s history backend (%d records)", args.backend, len(store))
    return COMMANDS[args.command](args, store)


if __name__ == "__main__":
    sys.exit(main())
