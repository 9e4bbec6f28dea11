#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MD Translator CLI

Translate a markdown file or every markdown file under a directory,
keeping code blocks, headers and reference links intact.

Usage:
    md-translate docs/                      # translate files <= 28KB
    md-translate docs/ -g                   # include large files
    md-translate docs/intro.md --strict     # fail instead of saving rejects
    md-translate docs/ --info               # show what would be translated
    md-translate docs/ --lint               # lint sources only

Exit code: 0 when every file was translated or skipped, 1 otherwise.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List

from config.constants import DEFAULT_EXTENSION
from config.logging_config import get_logger
from config.settings import Settings, settings
from md_translator import (
    ConfigurationError,
    DocumentProcessor,
    MarkdownLinter,
    MDTranslatorError,
)
from translation_clients import create_client

logger = get_logger(__name__)


def print_header():
    """Print header"""
    print("""
+======================================================================+
|                                                                      |
|             MD Translator - Markdown Translation                     |
|                                                                      |
+======================================================================+
""")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Translate markdown documents while preserving code, headers and links"
    )
    parser.add_argument("path", help="Markdown file or directory")
    parser.add_argument("-e", "--extension", default=DEFAULT_EXTENSION,
                        help="File extension to look for in directories (default: .md)")
    parser.add_argument("-g", "--large", action="store_true",
                        help="Also translate files larger than MAX_KB_SIZE")
    parser.add_argument("--max-bytes", type=int, default=None,
                        help="UTF-8 byte budget per chunk")
    parser.add_argument("--chunks", type=int, default=None,
                        help="Concurrent chunk translations per file")
    parser.add_argument("--files", type=int, default=None,
                        help="Files translated at the same time")
    parser.add_argument("--strict", action="store_true",
                        help="Treat a rejected translation as an error instead of saving it aside")
    parser.add_argument("--no-progress", action="store_true",
                        help="Hide the progress bar")
    parser.add_argument("--info", action="store_true",
                        help="List files and their state without translating")
    parser.add_argument("--lint", action="store_true",
                        help="Lint the source files without translating")
    return parser


def settings_from_args(args, base: Settings) -> Settings:
    """Command line values override the environment"""
    overrides = {"show_progress": not args.no_progress}
    if args.max_bytes is not None:
        overrides["max_chunk_bytes"] = args.max_bytes
    if args.chunks is not None:
        overrides["max_concurrent_chunks"] = args.chunks
    if args.files is not None:
        overrides["max_concurrent_files"] = args.files
    return base.model_copy(update=overrides)


def cmd_info(files: List[Path], config: Settings) -> int:
    """Show translation state of each file"""
    translated = large = 0
    print(f"\n[i] {len(files)} file(s)\n")
    for path in files:
        size_kb = path.stat().st_size / 1024
        content = path.read_text(encoding="utf-8")
        if config.translated_signature in content:
            state = "translated"
            translated += 1
        elif size_kb > config.max_kb_size:
            state = "large (-g)"
            large += 1
        else:
            state = "pending"
        print(f"  [{state:>12}] {size_kb:7.1f}KB  {path}")

    print(f"\n  Translated: {translated} | Large: {large} | Pending: {len(files) - translated - large}")
    return 0


def cmd_lint(files: List[Path]) -> int:
    """Lint source files"""
    linter = MarkdownLinter()
    invalid = 0
    for path in files:
        result = linter.lint(path.read_text(encoding="utf-8"), str(path))
        print(f"  {result.summary()}  {path}")
        for issue in result.issues:
            print(f"      [X] {issue}")
        for warning in result.warnings:
            print(f"      [!] {warning}")
        if not result.is_valid:
            invalid += 1
    return 1 if invalid else 0


async def cmd_translate(files: List[Path], config: Settings, args) -> int:
    """Translate files"""
    processor = DocumentProcessor(
        settings=config,
        strict=args.strict,
        process_large_files=args.large,
    )

    async with create_client(config) as client:
        if args.strict and len(files) == 1:
            outcome = await processor.translate_file(files[0], client.translate)
            print(f"\n[{outcome.status.value}] {outcome.path}")
            return 0 if outcome.ok else 1

        report = await processor.translate_files(files, client.translate)

    print("\n" + "=" * 70)
    print(report.summary())
    print("=" * 70)
    return 0 if report.all_ok else 1


def main(argv=None) -> int:
    print_header()

    parser = build_parser()
    args = parser.parse_args(argv)

    path = Path(args.path)
    if not path.exists():
        print(f"  [X] Path not found: {path}")
        return 1

    try:
        config = settings_from_args(args, settings)
        config.validate_limits()
    except ConfigurationError as e:
        print(f"  [X] {e}")
        return 1

    files = DocumentProcessor.collect_files(path, args.extension)
    if not files:
        print(f"  [X] No {args.extension} files found in {path}")
        return 1

    if args.info:
        return cmd_info(files, config)
    if args.lint:
        return cmd_lint(files)

    config.print_config()

    try:
        return asyncio.run(cmd_translate(files, config, args))
    except ValueError as e:
        # Missing API key or invalid limit
        print(f"  [X] {e}")
        return 1
    except MDTranslatorError as e:
        logger.error(f"Translation stopped: {e}")
        print(f"  [X] {e}")
        return 1
    except KeyboardInterrupt:
        print("\n  [!] Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
