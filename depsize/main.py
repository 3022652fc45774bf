"""
Command line entrypoint.

Usage:
  depsize [source globs...] [--config PATH] [--ignore NAME]... [--only NAME]... [--verbose]

Examples:
  depsize
  depsize 'src/**/*.js' '!**/__tests__/**'
  depsize --config ./webpack.config.js
  depsize -i dep-a -i dep-b
  depsize -i 'dep-with-glob-*'
  depsize --only dep-a
  depsize --only _all
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional, Sequence

from depsize.exceptions import DepsizeError
from depsize.logging_config import setup_logging
from depsize.schemas.units import RunOptions
from depsize.services.pipeline import measure_dependencies
from depsize.services.workspace import find_manifest
from depsize.utils.formatting import render_table

logger = logging.getLogger("depsize.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="depsize",
        description="Measure the minified and gzipped size each dependency adds.",
    )
    parser.add_argument(
        "source_globs",
        nargs="*",
        help="Source file globs; prefix with ! to exclude (default: **/src/** sources)",
    )
    parser.add_argument("-c", "--config", help="Custom bundler config file")
    parser.add_argument(
        "-i",
        "--ignore",
        action="append",
        default=[],
        help="Ignore a package (can be a glob); repeatable",
    )
    parser.add_argument(
        "-o",
        "--only",
        action="append",
        default=[],
        help="Only bundle certain packages (use _all for the aggregate); repeatable",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        "--debug",
        action="store_true",
        help="Stream bundler and installer output and log unmatched imports",
    )
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def run(args: argparse.Namespace, cwd: Optional[str] = None) -> int:
    manifest_path = find_manifest(cwd or os.getcwd())
    if manifest_path is None:
        print("Could not find a package.json from the current directory", file=sys.stderr)
        return 1

    options = RunOptions(
        source_globs=args.source_globs,
        config_path=os.path.abspath(args.config) if args.config else None,
        ignore=args.ignore,
        only=args.only,
        verbose=args.verbose,
    )

    try:
        report = asyncio.run(measure_dependencies(manifest_path, options))
    except DepsizeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:
        logger.debug("Unexpected failure", exc_info=True)
        print(f"Error: {exc!r}", file=sys.stderr)
        return 1

    print(render_table(report.results))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
