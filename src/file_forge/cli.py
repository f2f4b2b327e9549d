"""
file_forge: scan a project directory and export it for an LLM.

Overview
--------
`ffg` walks a local directory (or a single file), filters its entries and
writes a markdown report holding a summary, the directory tree and, with
`--verbose`, the content of every kept file.

Filters are applied in a fixed order: built-in artifact deny-list,
`.gitignore` files, `--exclude` globs, `--include` globs, and finally the
`--find` (any term) / `--require` (all terms) searches on names and
contents. Files above `--max-size` stay in the tree but are never read.

Usage
-----
Run `ffg --help` for full options. Common examples:
    - Tree of the current directory:
        ffg
    - TypeScript sources with contents, saved to a file:
        ffg ./project --include "**/*.ts" --verbose --output report.md
    - Files mentioning any of two terms, ignoring .gitignore:
        ffg ./project --find console,debug --no-ignore
    - Remember the current filters as defaults:
        ffg --exclude "**/*.md" --save-config
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from file_forge import __version__
from file_forge.config import APP_COMMAND
from file_forge.exceptions import FileForgeError
from file_forge.logging import logger, setup_logging
from file_forge.models import ScanStats
from file_forge.output_construction import build_markdown
from file_forge.patterns import split_top_level
from file_forge.scanner import scan
from file_forge.settings import Settings, env_setting
from file_forge.source import resolve_source
from file_forge.user_config import UserConfig, load_user_config, save_user_config

if TYPE_CHECKING:
    from collections.abc import Sequence

NO_RESULTS_MESSAGE = "No files found or directory is empty after scanning."


def split_patterns(values: Sequence[str] | None) -> list[str]:
    """Flatten repeated and comma-separated flag values.

    Commas inside brace lists (`*.{ts,js}`) do not split.

    Args:
        values (Sequence[str] | None): the raw values collected by argparse

    Returns:
        list[str]: the individual, stripped, non-empty patterns
    """
    out: list[str] = []
    for value in values or []:
        out.extend(p.strip() for p in split_top_level(value) if p.strip())
    return out


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=APP_COMMAND,
        description="Scan a directory with layered filters and export it as a markdown report for LLMs.",
    )
    p.add_argument("source", nargs="?", default="", help="Directory, file or file:// URL (default: cwd).")
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")

    p.add_argument(
        "-i",
        "--include",
        action="append",
        default=None,
        help="Include glob (repeatable, comma-separated allowed).",
    )
    p.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=None,
        help="Exclude glob (repeatable, comma-separated allowed).",
    )
    p.add_argument(
        "-f",
        "--find",
        action="append",
        default=[],
        help="Keep files whose name or content contains ANY of these terms.",
    )
    p.add_argument(
        "-r",
        "--require",
        action="append",
        default=[],
        help="Keep files whose content contains ALL of these terms.",
    )
    p.add_argument(
        "-s",
        "--max-size",
        type=int,
        default=None,
        help="Files above this many bytes are listed but not read (default 10MB).",
    )
    p.add_argument(
        "--ignore",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Respect .gitignore files (default: yes).",
    )
    p.add_argument(
        "--skip-artifacts",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Skip dependency files, build artifacts and generated assets (default: yes).",
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Include file contents in the report.",
    )

    p.add_argument(
        "-k",
        "--bulk",
        action="store_true",
        help="Append AI processing instructions to the report.",
    )

    p.add_argument("--name", type=str, default="", help="Custom name used in the report header.")
    p.add_argument("-o", "--output", type=str, default="", help="Output file (default: stdout).")
    p.add_argument("--config", type=str, default="", help="Configuration file (YAML).")
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Save the current filter flags as defaults.",
    )
    p.add_argument("--debug", action="store_true", help="Enable debug logging.")
    p.add_argument("--log-file", type=str, default="", help="Log file path.")
    return p


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    """Parse the command line and merge persisted defaults under it.

    Args:
        argv (Sequence[str] | None, optional): the arguments, sys.argv[1:] when None

    Raises:
        ConfigFileError: if the configuration file is malformed

    Returns:
        Settings: the settings of this invocation
    """
    args = build_parser().parse_args(argv)
    config_path = args.config or env_setting("CONFIG")
    defaults = load_user_config(Path(config_path) if config_path else None)

    include = split_patterns(args.include) if args.include is not None else list(defaults.include)
    exclude = split_patterns(args.exclude) if args.exclude is not None else list(defaults.exclude)
    return Settings(
        source=args.source,
        output=Path(args.output) if args.output else None,
        name=args.name,
        log_file=args.log_file or env_setting("LOG_FILE"),
        debug=args.debug,
        config=Path(config_path) if config_path else None,
        save_config=args.save_config,
        include=include,
        exclude=exclude,
        find=split_patterns(args.find),
        require=split_patterns(args.require),
        max_size=defaults.max_size if args.max_size is None else args.max_size,
        ignore=defaults.ignore if args.ignore is None else args.ignore,
        skip_artifacts=defaults.skip_artifacts if args.skip_artifacts is None else args.skip_artifacts,
        verbose=defaults.verbose if args.verbose is None else args.verbose,
        bulk=args.bulk,
    )


def persist_settings(settings: Settings) -> Path:
    """Save the filter-related settings as defaults for later runs."""
    config = UserConfig(
        include=settings.include,
        exclude=settings.exclude,
        max_size=settings.max_size,
        ignore=settings.ignore,
        skip_artifacts=settings.skip_artifacts,
        verbose=settings.verbose,
    )
    return save_user_config(config, settings.config)


def main(argv: Sequence[str] | None = None) -> int:
    try:
        settings = parse_args(argv)
        if settings.log_file or settings.debug:
            setup_logging(settings.log_file or None, debug=settings.debug, force=True)
        if settings.save_config:
            persist_settings(settings)

        root_path = resolve_source(settings.source)
        stats = ScanStats()
        root = scan(root_path, settings.to_scan_options(), stats)
    except FileForgeError as e:
        logger.error("Fatal error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if root is None:
        print(f"Error: {NO_RESULTS_MESSAGE}", file=sys.stderr)
        return 1

    content = build_markdown(settings.source or str(root_path), root, stats, settings=settings)
    if settings.output:
        settings.output.write_text(content, encoding="utf-8")
        print(f"Wrote {settings.output} files={stats.total_files}")
    else:
        sys.stdout.write(content)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
