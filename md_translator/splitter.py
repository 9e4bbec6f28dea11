#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
MarkdownSplitter - Byte-budgeted splitting of clean markdown.

This module splits markdown whose code blocks were already replaced by
anchors (see placeholder_codec) into chunks that fit the translation
service's request size. Splitting walks an ordered list of strategies:

1. HeaderStrategy    - cut before every ## / ### / #### header
2. ParagraphStrategy - pack blank-line separated paragraphs
3. LineStrategy      - pack lines (always applicable)

A chunk that is still too large after strategy N is split again starting at
strategy N+1. After the last strategy an oversized chunk is kept as is: a
single line with no break in it cannot be split without cutting text.

Budgets are UTF-8 byte counts, so accented Latin, CJK and emoji are sized by
their encoded length rather than by character count.

Usage:
    from md_translator.splitter import MarkdownSplitter

    splitter = MarkdownSplitter()
    chunks = splitter.split(clean_text, max_bytes=20 * 1024)

Classes:
    SplittingStrategy: Interface of one splitting rule.
    HeaderStrategy, ParagraphStrategy, LineStrategy: The built-in rules.
    MarkdownSplitter: Runs the strategies with fallback.
"""

import re
from typing import Dict, List, Optional, Sequence

from config.constants import DEFAULT_MAX_CHUNK_BYTES
from config.logging_config import get_logger

from .chunk import Chunk, utf8_size
from .exceptions import ConfigurationError

logger = get_logger(__name__)


class SplittingStrategy:
    """
    One rule for dividing text into chunks.

    try_split returns None when the rule does not apply to the text, or the
    list of chunks it produced. Produced chunks may still exceed the budget;
    MarkdownSplitter decides what to do with those.
    """

    name = "base"

    def try_split(self, text: str, max_bytes: int) -> Optional[List[Chunk]]:
        raise NotImplementedError


class HeaderStrategy(SplittingStrategy):
    """Split immediately before each level 2-4 header line."""

    name = "header"

    HEADER_PATTERN = re.compile(r'^#{2,4} ', re.MULTILINE)
    SPLIT_PATTERN = re.compile(r'(?=^#{2,4} )', re.MULTILINE)

    def try_split(self, text: str, max_bytes: int) -> Optional[List[Chunk]]:
        if not self.HEADER_PATTERN.search(text):
            return None

        sections = [s for s in self.SPLIT_PATTERN.split(text) if s]
        return [Chunk(section) for section in sections]


class ParagraphStrategy(SplittingStrategy):
    """
    Greedily pack paragraphs separated by a blank line.

    The "\\n\\n" between two paragraphs of the same chunk is kept and counted
    in the budget. The separator at a chunk boundary is dropped; the pipeline
    joins translated chunks with the same separator.
    """

    name = "paragraph"
    SEPARATOR = "\n\n"

    def try_split(self, text: str, max_bytes: int) -> Optional[List[Chunk]]:
        if self.SEPARATOR not in text:
            return None

        separator_size = utf8_size(self.SEPARATOR)
        paragraphs = text.split(self.SEPARATOR)
        result: List[Chunk] = []
        current: List[str] = []
        current_size = 0

        for paragraph in paragraphs:
            paragraph_size = utf8_size(paragraph)
            added_size = paragraph_size + (separator_size if current else 0)

            if current and current_size + added_size > max_bytes:
                result.append(Chunk(self.SEPARATOR.join(current)))
                current = [paragraph]
                current_size = paragraph_size
            else:
                current.append(paragraph)
                current_size += added_size

        if current:
            result.append(Chunk(self.SEPARATOR.join(current)))

        return result or None


class LineStrategy(SplittingStrategy):
    """
    Greedily pack lines. Always applicable.

    Text without any line break comes back unchanged as a single chunk,
    even when it is over budget.
    """

    name = "line"

    def try_split(self, text: str, max_bytes: int) -> Optional[List[Chunk]]:
        lines = text.split("\n")
        if len(lines) == 1:
            return [Chunk(text)]

        result: List[Chunk] = []
        current: List[str] = []
        current_size = 0

        for line in lines:
            line_size = utf8_size(line)
            added_size = line_size + (1 if current else 0)  # '\n' between lines

            if current and current_size + added_size > max_bytes:
                result.append(Chunk("\n".join(current)))
                current = [line]
                current_size = line_size
            else:
                current.append(line)
                current_size += added_size

        if current:
            result.append(Chunk("\n".join(current)))

        return result


class MarkdownSplitter:
    """
    Splits clean markdown into byte-budgeted chunks.

    Attributes:
        strategies: Ordered strategies, tried first to last.
        default_max_bytes: Budget used when split() gets none.

    Example:
        >>> splitter = MarkdownSplitter()
        >>> chunks = splitter.split("## A\\ntext\\n## B\\ntext\\n", max_bytes=10)
        >>> [c.content for c in chunks]
        ['## A\\ntext\\n', '## B\\ntext\\n']
    """

    def __init__(
        self,
        strategies: Optional[Sequence[SplittingStrategy]] = None,
        default_max_bytes: int = DEFAULT_MAX_CHUNK_BYTES
    ):
        self.strategies: List[SplittingStrategy] = list(
            strategies if strategies is not None
            else (HeaderStrategy(), ParagraphStrategy(), LineStrategy())
        )
        if not self.strategies:
            raise ConfigurationError("MarkdownSplitter needs at least one strategy")
        self.default_max_bytes = default_max_bytes

    def split(self, text: str, max_bytes: Optional[int] = None) -> List[Chunk]:
        """
        Split text into ordered chunks covering all of it.

        Args:
            text: Clean markdown (code blocks already replaced by anchors).
            max_bytes: UTF-8 budget per chunk.

        Returns:
            Chunks in document order. Empty text gives an empty list.

        Raises:
            ConfigurationError: max_bytes is not positive.
        """
        if max_bytes is None:
            max_bytes = self.default_max_bytes
        if max_bytes <= 0:
            raise ConfigurationError(f"max_bytes must be greater than 0, got: {max_bytes}")

        if not text:
            return []

        if utf8_size(text) <= max_bytes:
            return [Chunk(text)]

        chunks = self._split_recursively(text, max_bytes, 0)
        logger.debug(f"Split {utf8_size(text)} bytes into {len(chunks)} chunks (max {max_bytes})")
        return chunks

    def _split_recursively(self, text: str, max_bytes: int, strategy_index: int) -> List[Chunk]:
        if utf8_size(text) <= max_bytes:
            return [Chunk(text)]

        last_index = len(self.strategies) - 1

        for i in range(strategy_index, len(self.strategies)):
            candidate = self.strategies[i].try_split(text, max_bytes)
            if candidate is None:
                continue

            result: List[Chunk] = []
            for chunk in candidate:
                if chunk.fits(max_bytes):
                    result.append(chunk)
                elif i >= last_index:
                    logger.debug(
                        f"Keeping oversized chunk ({chunk.byte_size} > {max_bytes} bytes): "
                        f"no strategy left to split it"
                    )
                    result.append(chunk)
                else:
                    result.extend(self._split_recursively(chunk.content, max_bytes, i + 1))
            return result

        # Only reachable with a custom strategy list whose last rule declined
        return [Chunk(text)]

    @staticmethod
    def statistics(chunks: List[Chunk]) -> Dict[str, int]:
        """
        Size summary of a chunk list.

        Returns:
            Dict with total_chunks, total_bytes, total_code_units,
            average_bytes, max_bytes and min_bytes (all 0 for no chunks).
        """
        if not chunks:
            return {
                'total_chunks': 0,
                'total_bytes': 0,
                'total_code_units': 0,
                'average_bytes': 0,
                'max_bytes': 0,
                'min_bytes': 0,
            }

        byte_sizes = [chunk.byte_size for chunk in chunks]
        total_bytes = sum(byte_sizes)

        return {
            'total_chunks': len(chunks),
            'total_bytes': total_bytes,
            'total_code_units': sum(chunk.secondary_size for chunk in chunks),
            'average_bytes': total_bytes // len(chunks),
            'max_bytes': max(byte_sizes),
            'min_bytes': min(byte_sizes),
        }
