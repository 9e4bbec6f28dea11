#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Chunk - Immutable slice of document text sent to the translation service.

A chunk carries two size metrics:
- byte_size: UTF-8 encoded length, the only unit used for budget checks
- secondary_size: UTF-16 code units, kept for reporting because some
  translation services express their limits in that unit

Both sizes are derived from the content when the chunk is built, so they
can never disagree with it.

Usage:
    from md_translator.chunk import Chunk

    chunk = Chunk("Olá, mundo")
    chunk.byte_size       # 11
    chunk.secondary_size  # 10
"""

from dataclasses import dataclass, field


def utf8_size(text: str) -> int:
    """UTF-8 encoded length of text in bytes."""
    return len(text.encode("utf-8"))


def utf16_size(text: str) -> int:
    """Length of text in UTF-16 code units (surrogate pairs count as 2)."""
    return len(text.encode("utf-16-le")) // 2


@dataclass(frozen=True)
class Chunk:
    """
    A contiguous piece of document text within a byte budget.

    Attributes:
        content: The chunk text.
        byte_size: UTF-8 length of content (computed).
        secondary_size: UTF-16 length of content (computed, reporting only).

    Example:
        >>> Chunk("🚀").byte_size
        4
        >>> Chunk("🚀").secondary_size
        2
    """
    content: str
    byte_size: int = field(init=False)
    secondary_size: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "byte_size", utf8_size(self.content))
        object.__setattr__(self, "secondary_size", utf16_size(self.content))

    def fits(self, max_bytes: int) -> bool:
        """True if the chunk is within the byte budget."""
        return self.byte_size <= max_bytes

    def __repr__(self) -> str:
        return (
            f"Chunk(bytes={self.byte_size}, units={self.secondary_size}, "
            f"chars={len(self.content)})"
        )
