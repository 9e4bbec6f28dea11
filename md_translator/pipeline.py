#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
TranslationPipeline - Translate one markdown document end to end.

Stages:
1. extract   - code blocks become anchors (PlaceholderCodec)
2. split     - clean text becomes byte-budgeted chunks (MarkdownSplitter)
3. dispatch  - chunks are translated concurrently (BoundedDispatcher)
4. join      - translated chunks are joined with a blank line
5. restore   - anchors become the original code again
6. validate  - header structure and reference links are compared

A run never raises for bad translations. Chunk failures fall back to the
source text, and lost anchors or broken links are reported on the result so
the caller can decide whether to keep the output.

Usage:
    from md_translator.pipeline import TranslationPipeline

    pipeline = TranslationPipeline()
    result = await pipeline.run(document, client.translate,
                                max_bytes=20 * 1024, concurrency_limit=10)
    if result.accepted:
        save(result.final_text)
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config.constants import (
    CHUNK_JOIN_SEPARATOR,
    DEFAULT_MAX_CHUNK_BYTES,
    DEFAULT_MAX_CONCURRENT_CHUNKS,
)
from config.logging_config import get_logger

from .chunk import Chunk, utf8_size, utf16_size
from .dispatcher import BoundedDispatcher, ProgressCallback, TranslateOne
from .exceptions import ConfigurationError
from .placeholder_codec import ExtractedBlock, PlaceholderCodec
from .splitter import MarkdownSplitter
from .statistics import PipelineStatistics
from .validator import DocumentValidator, ValidationVerdict

logger = get_logger(__name__)


@dataclass
class PipelineResult:
    """Output of one pipeline run"""
    final_text: str
    statistics: PipelineStatistics
    verdict: ValidationVerdict
    chunks: List[Chunk] = field(default_factory=list)
    blocks: List[ExtractedBlock] = field(default_factory=list)
    translated_chunks: List[str] = field(default_factory=list)
    failed_chunk_indices: List[int] = field(default_factory=list)
    missing_anchors: List[str] = field(default_factory=list)
    unexpected_anchors: List[str] = field(default_factory=list)

    @property
    def restoration_success(self) -> bool:
        return self.statistics.restoration_success

    @property
    def accepted(self) -> bool:
        """Safe to persist: restoration succeeded and validation passed."""
        return self.restoration_success and self.verdict.accepted

    def to_dict(self) -> Dict:
        return {
            'accepted': self.accepted,
            'statistics': self.statistics.to_dict(),
            'verdict': self.verdict.to_dict(),
            'failed_chunk_indices': list(self.failed_chunk_indices),
            'missing_anchors': list(self.missing_anchors),
            'unexpected_anchors': list(self.unexpected_anchors),
        }

    def log_summary(self):
        """Log run statistics and verdict"""
        stats = self.statistics
        logger.info("=" * 50)
        logger.info("TRANSLATION SUMMARY")
        logger.info("=" * 50)
        logger.info(f"Original: {stats.original_bytes} bytes ({stats.original_code_units} code units)")
        logger.info(
            f"Code blocks: {stats.blocks_extracted} "
            f"(fenced: {stats.fenced_blocks}, inline: {stats.inline_blocks})"
        )
        logger.info(f"Clean text: {stats.clean_bytes} bytes")
        logger.info(
            f"Chunks: {stats.total_chunks} "
            f"(avg {stats.average_chunk_bytes}, min {stats.min_chunk_bytes}, max {stats.max_chunk_bytes} bytes)"
        )
        if stats.failed_chunks:
            logger.warning(f"Failed chunks (kept original): {stats.failed_chunks}")
        logger.info(f"Translated: {stats.translated_bytes} bytes, final: {stats.final_bytes} bytes")
        logger.info(f"Time: {stats.elapsed_ms}ms ({stats.bytes_per_second:.0f} bytes/s)")

        if stats.restoration_success:
            logger.info("Restoration: OK")
        else:
            logger.error(
                f"Restoration: FAILED (missing: {self.missing_anchors}, "
                f"unexpected: {self.unexpected_anchors})"
            )

        if self.verdict.accepted:
            logger.info("Validation: accepted")
        else:
            for issue in self.verdict.issues:
                logger.error(f"Validation issue: {issue}")
        for warning in self.verdict.warnings:
            logger.warning(f"Validation warning: {warning}")
        logger.info("=" * 50)


class TranslationPipeline:
    """
    Runs extract, split, dispatch, restore and validate for one document.

    Components can be swapped for tests or tuning; the defaults match the
    production setup. The pipeline holds no per-run state, so one instance
    can run several documents concurrently.
    """

    def __init__(
        self,
        codec: Optional[PlaceholderCodec] = None,
        splitter: Optional[MarkdownSplitter] = None,
        validator: Optional[DocumentValidator] = None,
        show_progress: bool = False
    ):
        self.codec = codec or PlaceholderCodec()
        self.splitter = splitter or MarkdownSplitter()
        self.validator = validator or DocumentValidator()
        self.show_progress = show_progress

    async def run(
        self,
        document: str,
        translate_one: TranslateOne,
        max_bytes: int = DEFAULT_MAX_CHUNK_BYTES,
        concurrency_limit: int = DEFAULT_MAX_CONCURRENT_CHUNKS,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PipelineResult:
        """
        Translate a document.

        Args:
            document: Raw markdown.
            translate_one: Callable text -> translated text (async or plain).
            max_bytes: UTF-8 budget per chunk.
            concurrency_limit: Maximum translate_one calls in flight.
            on_progress: on_progress(completed, total) per finished chunk.

        Returns:
            PipelineResult. final_text is returned even when restoration
            failed; check result.accepted before persisting it.

        Raises:
            ConfigurationError: max_bytes or concurrency_limit is not positive.
        """
        if max_bytes <= 0:
            raise ConfigurationError(f"max_bytes must be greater than 0, got: {max_bytes}")
        dispatcher = BoundedDispatcher(concurrency_limit, show_progress=self.show_progress)

        start_time = time.perf_counter()

        extraction = self.codec.extract(document)
        blocks = extraction.blocks

        chunks = self.splitter.split(extraction.clean_text, max_bytes)
        logger.info(
            f"Extracted {len(blocks)} code blocks, split into {len(chunks)} chunks "
            f"(max {max_bytes} bytes, {concurrency_limit} concurrent)"
        )

        translated_chunks = await dispatcher.translate_all(chunks, translate_one, on_progress)
        failed_indices = sorted(dispatcher.stats.failed_indices)

        joined_text = CHUNK_JOIN_SEPARATOR.join(translated_chunks)
        final_text = self.codec.restore(joined_text, blocks)

        report = self.codec.restoration_report(joined_text, blocks, final_text)
        if not report['restoration_success']:
            logger.warning(
                f"Anchor restoration failed: {report['missing_anchors_count']} missing, "
                f"{report['unexpected_anchors_count']} unexpected"
            )

        verdict = self.validator.validate(document, final_text)

        elapsed = time.perf_counter() - start_time
        chunk_stats = self.splitter.statistics(chunks)
        original_bytes = utf8_size(document)

        statistics = PipelineStatistics(
            original_bytes=original_bytes,
            original_code_units=utf16_size(document),
            blocks_extracted=len(blocks),
            fenced_blocks=extraction.fenced_count,
            inline_blocks=extraction.inline_count,
            clean_bytes=utf8_size(extraction.clean_text),
            total_chunks=chunk_stats['total_chunks'],
            average_chunk_bytes=chunk_stats['average_bytes'],
            max_chunk_bytes=chunk_stats['max_bytes'],
            min_chunk_bytes=chunk_stats['min_bytes'],
            translated_bytes=sum(utf8_size(text) for text in translated_chunks),
            final_bytes=utf8_size(final_text),
            failed_chunks=len(failed_indices),
            elapsed_ms=int(elapsed * 1000),
            bytes_per_second=original_bytes / elapsed if elapsed > 0 else 0.0,
            missing_anchors=report['missing_anchors_count'],
            unexpected_anchors=report['unexpected_anchors_count'],
            restoration_success=report['restoration_success'],
        )

        return PipelineResult(
            final_text=final_text,
            statistics=statistics,
            verdict=verdict,
            chunks=chunks,
            blocks=blocks,
            translated_chunks=translated_chunks,
            failed_chunk_indices=failed_indices,
            missing_anchors=report['missing_anchors'],
            unexpected_anchors=report['unexpected_anchors'],
        )
