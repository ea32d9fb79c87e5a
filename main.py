#!/usr/bin/env python3
"""
DOM History Tool
Main entry point: diff two saved snapshots, or track a live page over time.

Usage:
    dom-history compare <old> <new> [--json] [--title T] [--ignore-attr NAME ...]
    dom-history track <url> [--delay-ms N] [--headful] [--json]
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dom_history.config import DOMHistoryConfig
from dom_history.dom_node import DOMElementNode
from dom_history.exceptions import DOMHistoryError
from dom_history.html_parser import HTMLSnapshotParser
from dom_history.tree_comparator import DOMDiffResult, DOMTreeComparator
from reporting.report_builder import ReportBuilder
from utils.file_utils import read_file_content, snapshot_format

logger = logging.getLogger(__name__)


def load_snapshot(path: Path) -> DOMElementNode:
    """Load a snapshot tree from an HTML file or a serialized JSON snapshot."""
    if snapshot_format(path) == 'json':
        return DOMElementNode.from_dict(json.loads(read_file_content(path)))
    return HTMLSnapshotParser().parse_file(path)


def _print_result(result: DOMDiffResult, args, title: str) -> None:
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(ReportBuilder(title=title).render_text(result))


def cmd_compare(args, config: DOMHistoryConfig) -> int:
    old_tree = load_snapshot(Path(args.old))
    new_tree = load_snapshot(Path(args.new))
    ignored = tuple(config.ignored_attributes) + tuple(args.ignore_attr or ())
    result = DOMTreeComparator(ignored_attributes=ignored).compare_trees(old_tree, new_tree)
    _print_result(result, args, args.title or config.report_title)
    return 0


def cmd_track(args, config: DOMHistoryConfig) -> int:
    # Imported lazily so `compare` works without a Playwright install
    from playwright.async_api import Error as PlaywrightError
    from capture.page_snapshot import track_page_changes

    if args.headful:
        config.headless = False
    try:
        result = asyncio.run(track_page_changes(args.url, args.delay_ms, config))
    except PlaywrightError as e:
        logger.error(f"Browser error while tracking {args.url}: {e}")
        return 1
    _print_result(result, args, args.title or config.report_title)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dom-history',
        description='Detect structural changes between two DOM snapshots'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    compare = subparsers.add_parser('compare', help='Diff two saved snapshots (.html or .json)')
    compare.add_argument('old', help='Snapshot taken first')
    compare.add_argument('new', help='Snapshot taken later')
    compare.add_argument('--ignore-attr', action='append', metavar='NAME',
                         help='Attribute name or prefix* to leave out of change detection')

    track = subparsers.add_parser('track', help='Snapshot a live page twice and diff')
    track.add_argument('url', help='Page to open')
    track.add_argument('--delay-ms', type=int, default=None, help='Wait between snapshots')
    track.add_argument('--headful', action='store_true', help='Show the browser window')

    for sub in (compare, track):
        sub.add_argument('--json', action='store_true', help='Print the result as JSON')
        sub.add_argument('--title', default=None, help='Report title')
    return parser


def main(argv=None) -> int:
    """Main execution function."""
    args = build_parser().parse_args(argv)
    config = DOMHistoryConfig()
    logging.basicConfig(level=logging.DEBUG if args.verbose else config.log_level)

    commands = {'compare': cmd_compare, 'track': cmd_track}
    try:
        return commands[args.command](args, config)
    except (OSError, ValueError, DOMHistoryError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
