#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
DocumentProcessor - Translate markdown files on disk.

Wraps TranslationPipeline with the file handling around it:
- skips files that already carry the translated signature
- skips files above max_kb_size unless large files are allowed
- lints the source before translating
- writes accepted translations with the signature stamped in
- never overwrites the source with a rejected translation; the rejected
  text goes to <stem>_structure_invalid.md or <stem>_link_invalid.md

Batches run several files at once under their own semaphore, and one file's
failure never stops the others.

Usage:
    from md_translator.document_processor import DocumentProcessor

    processor = DocumentProcessor(settings=settings)
    files = DocumentProcessor.collect_files("docs/", ".md")
    report = await processor.translate_files(files, client.translate)
    print(report.summary())
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from config.constants import (
    DEFAULT_EXTENSION,
    INVALID_LINK_SUFFIX,
    INVALID_STRUCTURE_SUFFIX,
)
from config.logging_config import get_logger
from config.settings import Settings, settings as default_settings

from .dispatcher import TranslateOne
from .exceptions import ConfigurationError, DocumentRejectedError, MDTranslatorError, RestorationError
from .markdown_lint import MarkdownLinter, MarkdownLintResult
from .pipeline import PipelineResult, TranslationPipeline
from .placeholder_codec import PlaceholderCodec

logger = get_logger(__name__)

PathLike = Union[str, Path]


class DocumentStatus(Enum):
    """Outcome of one file"""
    TRANSLATED = "translated"
    REJECTED = "rejected"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class DocumentOutcome:
    """What happened to one file"""
    path: Path
    status: DocumentStatus
    reason: str = ""
    output_path: Optional[Path] = None
    result: Optional[PipelineResult] = None
    lint: Optional[MarkdownLintResult] = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status in (DocumentStatus.TRANSLATED, DocumentStatus.SKIPPED)


@dataclass
class BatchReport:
    """Outcomes of a batch, in input order"""
    outcomes: List[DocumentOutcome] = field(default_factory=list)
    elapsed: float = 0.0

    def _count(self, status: DocumentStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)

    @property
    def translated(self) -> int:
        return self._count(DocumentStatus.TRANSLATED)

    @property
    def rejected(self) -> int:
        return self._count(DocumentStatus.REJECTED)

    @property
    def skipped(self) -> int:
        return self._count(DocumentStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(DocumentStatus.FAILED)

    @property
    def all_ok(self) -> bool:
        return all(o.ok for o in self.outcomes)

    def summary(self) -> str:
        lines = [
            f"Files: {len(self.outcomes)} | translated: {self.translated} | "
            f"skipped: {self.skipped} | rejected: {self.rejected} | failed: {self.failed} | "
            f"time: {self.elapsed:.1f}s"
        ]
        for outcome in self.outcomes:
            if not outcome.ok:
                lines.append(f"  [{outcome.status.value}] {outcome.path}: {outcome.reason}")
        return "\n".join(lines)


def stamp_signature(content: str, signature: str) -> str:
    """
    Mark content as translated.

    With YAML front matter the signature becomes its first key; otherwise a
    leading HTML comment carries it.
    """
    if content.startswith("---\n") or content.startswith("---\r\n"):
        first_line, _, rest = content.partition("\n")
        return f"{first_line}\n{signature}\n{rest}"
    return f"<!-- {signature} -->\n{content}"


def rejected_output_path(path: Path, suffix: str) -> Path:
    """docs/intro.md -> docs/intro_structure_invalid.md"""
    return path.with_name(f"{path.stem}{suffix}{path.suffix}")


class DocumentProcessor:
    """Runs the translation pipeline over files"""

    def __init__(
        self,
        pipeline: Optional[TranslationPipeline] = None,
        settings: Optional[Settings] = None,
        strict: bool = False,
        process_large_files: bool = False,
        linter: Optional[MarkdownLinter] = None
    ):
        """
        Args:
            pipeline: Pipeline to run; built from settings when omitted.
            settings: Limits and behaviour flags (global settings by default).
            strict: Raise RestorationError / DocumentRejectedError from
                translate_file instead of saving the rejected text.
            process_large_files: Translate files above max_kb_size too.
            linter: Source linter.

        Raises:
            ConfigurationError: A limit in settings is not positive.
        """
        self.settings = settings or default_settings
        self.settings.validate_limits()

        self.pipeline = pipeline or TranslationPipeline(
            codec=PlaceholderCodec(extract_inline=self.settings.extract_inline_code),
            show_progress=self.settings.show_progress,
        )
        self.strict = strict
        self.process_large_files = process_large_files
        self.linter = linter or MarkdownLinter()

    @staticmethod
    def collect_files(directory: PathLike, extension: str = DEFAULT_EXTENSION) -> List[Path]:
        """
        All files under directory with the given extension, sorted.

        Files produced for rejected translations are left out.
        """
        if not extension.startswith("."):
            extension = f".{extension}"

        root = Path(directory)
        if root.is_file():
            return [root]

        return sorted(
            path for path in root.rglob(f"*{extension}")
            if path.is_file()
            and not path.stem.endswith((INVALID_STRUCTURE_SUFFIX, INVALID_LINK_SUFFIX))
        )

    def is_translated(self, content: str) -> bool:
        return self.settings.translated_signature in content

    async def translate_file(
        self,
        path: PathLike,
        translate_one: TranslateOne,
        output_path: Optional[PathLike] = None
    ) -> DocumentOutcome:
        """
        Translate one file and write the result.

        Args:
            path: Source markdown file.
            translate_one: Chunk translation callable.
            output_path: Where to write an accepted translation. Defaults to
                the source path (translation in place).

        Returns:
            DocumentOutcome describing what was done.

        Raises:
            RestorationError: strict mode, anchors were lost.
            DocumentRejectedError: strict mode, validation failed.
        """
        path = Path(path)
        start_time = time.perf_counter()

        size_kb = path.stat().st_size / 1024
        if not self.process_large_files and size_kb > self.settings.max_kb_size:
            logger.info(
                f"Skipping {path.name} ({size_kb:.1f}KB > {self.settings.max_kb_size}KB). "
                f"Use -g to translate large files."
            )
            return DocumentOutcome(path, DocumentStatus.SKIPPED, reason=f"larger than {self.settings.max_kb_size}KB")

        content = path.read_text(encoding="utf-8")
        if self.is_translated(content):
            logger.info(f"Skipping {path.name}: already translated")
            return DocumentOutcome(path, DocumentStatus.SKIPPED, reason="already translated")

        lint = self.linter.lint(content, str(path))
        if lint.has_problems:
            lint.log_details()

        logger.info(f"Translating {path.name} ({size_kb:.1f}KB)")
        result = await self.pipeline.run(
            content,
            translate_one,
            max_bytes=self.settings.max_chunk_bytes,
            concurrency_limit=self.settings.max_concurrent_chunks,
        )
        elapsed = time.perf_counter() - start_time

        if result.accepted:
            target = Path(output_path) if output_path else path
            target.write_text(
                stamp_signature(result.final_text, self.settings.translated_signature),
                encoding="utf-8"
            )
            logger.info(f"Translated {path.name} in {elapsed:.2f}s -> {target}")
            return DocumentOutcome(
                path, DocumentStatus.TRANSLATED,
                output_path=target, result=result, lint=lint, elapsed=elapsed
            )

        return self._reject(path, result, lint, elapsed)

    def _reject(
        self,
        path: Path,
        result: PipelineResult,
        lint: MarkdownLintResult,
        elapsed: float
    ) -> DocumentOutcome:
        if not result.restoration_success:
            reason = (
                f"anchor restoration failed (missing: {', '.join(result.missing_anchors) or '-'}; "
                f"unexpected: {', '.join(result.unexpected_anchors) or '-'})"
            )
            if self.strict:
                raise RestorationError(
                    f"{path}: {reason}",
                    missing_anchors=result.missing_anchors,
                    unexpected_anchors=result.unexpected_anchors,
                )
            suffix = INVALID_STRUCTURE_SUFFIX
        else:
            reason = "; ".join(result.verdict.issues)
            if self.strict:
                raise DocumentRejectedError(
                    f"{path}: {reason}",
                    verdict=result.verdict,
                    statistics=result.statistics,
                    path=str(path),
                )
            suffix = INVALID_STRUCTURE_SUFFIX if result.verdict.structural_issues else INVALID_LINK_SUFFIX

        output_path = None
        if self.settings.save_rejected:
            output_path = rejected_output_path(path, suffix)
            output_path.write_text(result.final_text, encoding="utf-8")

        logger.error(
            f"Rejected translation of {path.name}: {reason}"
            + (f" (saved to {output_path.name})" if output_path else "")
        )
        return DocumentOutcome(
            path, DocumentStatus.REJECTED, reason=reason,
            output_path=output_path, result=result, lint=lint, elapsed=elapsed
        )

    async def translate_files(
        self,
        paths: List[PathLike],
        translate_one: TranslateOne
    ) -> BatchReport:
        """
        Translate many files, at most max_concurrent_files at a time.

        Errors are recorded per file. Only ConfigurationError stops the batch.
        """
        start_time = time.perf_counter()
        semaphore = asyncio.Semaphore(self.settings.max_concurrent_files)
        total = len(paths)
        logger.info(f"Starting translation of {total} files ({self.settings.max_concurrent_files} at a time)")

        async def process(index: int, path: PathLike) -> DocumentOutcome:
            async with semaphore:
                try:
                    outcome = await self.translate_file(path, translate_one)
                except ConfigurationError:
                    raise
                except MDTranslatorError as e:
                    outcome = DocumentOutcome(Path(path), DocumentStatus.REJECTED, reason=str(e))
                except Exception as e:
                    logger.error(f"Error translating {path}: {type(e).__name__}: {e}")
                    outcome = DocumentOutcome(Path(path), DocumentStatus.FAILED, reason=f"{type(e).__name__}: {e}")
            logger.info(f"[{index + 1}/{total}] {Path(path).name}: {outcome.status.value}")
            return outcome

        outcomes = await asyncio.gather(*(process(i, p) for i, p in enumerate(paths)))

        report = BatchReport(outcomes=list(outcomes), elapsed=time.perf_counter() - start_time)
        logger.info(report.summary())
        return report
