"""CLI エントリポイント: php-winget-manifest <version> [ts|nts]."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from .core.config import load_config
from .core.exceptions import ManifestGeneratorError
from .core.models import ReleaseQuery
from .generator import generate
from .reporter import export_env, print_new_version, write_sentinel

UNSET_EXIT_CODE = 255

EPILOG = """\
Examples:
 - php-winget-manifest 8.3
 - php-winget-manifest 8.3 nts
 - php-winget-manifest 7.4 ts
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="php-winget-manifest",
        description="Builds Winget-compatible manifest files to install PHP binaries.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "version",
        nargs="?",
        help="The PHP version (N.N) for which to build the manifest",
    )
    parser.add_argument(
        "thread_safety",
        nargs="?",
        metavar="ts|nts",
        help="Thread safe or non thread safe build (default: ts)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file overriding the bundled config.yml",
    )
    parser.add_argument(
        "--work-dir",
        type=Path,
        default=Path("."),
        help="Base directory for output paths (default: current directory)",
    )
    parser.add_argument("--no-env", action="store_true", help="Do not export the new-version variable")
    parser.add_argument("--no-sentinel", action="store_true", help="Do not write the sentinel file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def run(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.version:
        parser.print_help()
        return 0

    _configure_logging(args.verbose)

    try:
        query = ReleaseQuery.from_args(args.version, args.thread_safety)
        config = load_config(args.config)
        result = generate(query, config, args.work_dir)

        print_new_version(result)
        if not args.no_env:
            export_env(result, config.output.env_var, config.output.no_new_version_value)
        if not args.no_sentinel:
            write_sentinel(result, args.work_dir / config.output.sentinel_file)
    except ManifestGeneratorError as e:
        logger.error(str(e))
        return e.exit_code or UNSET_EXIT_CODE

    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
