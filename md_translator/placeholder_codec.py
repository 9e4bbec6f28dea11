"""
Placeholder Codec Module

Replaces code blocks with stable anchors before translation and puts the
original code back afterwards, so the translation service never sees (or
rewrites) code.

Workflow:
1. extract(): swap fenced code blocks (and optionally inline code) for anchors
2. send the clean text to the translation service
3. restore(): replace every anchor with its original code block
4. validate_anchors() / find_unexpected_anchors() / check_restoration():
   detect anchors the service dropped or mangled
"""

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

import regex

from config.constants import ANCHOR_PREFIX, ANCHOR_SUFFIX


class BlockKind(Enum):
    """Kinds of extracted regions"""
    FENCED = "fenced"  # ```...``` or ~~~...~~~
    INLINE = "inline"  # `...`


@dataclass(frozen=True)
class ExtractedBlock:
    """A code region replaced by an anchor"""
    original_text: str  # Exact source text, fences included
    anchor: str
    kind: BlockKind = BlockKind.FENCED
    language: str = ""  # Fenced blocks only

    def __repr__(self) -> str:
        preview = self.original_text[:50] + "..." if len(self.original_text) > 50 else self.original_text
        lang = f"[{self.language}]" if self.language else ""
        return f"ExtractedBlock({self.anchor}, {self.kind.value}{lang}, '{preview}')"


@dataclass
class ExtractionResult:
    """Clean text plus the ordered table of extracted blocks"""
    clean_text: str
    blocks: List[ExtractedBlock] = field(default_factory=list)

    @property
    def fenced_count(self) -> int:
        return sum(1 for b in self.blocks if b.kind is BlockKind.FENCED)

    @property
    def inline_count(self) -> int:
        return sum(1 for b in self.blocks if b.kind is BlockKind.INLINE)


class PlaceholderCodec:
    """
    Extracts code regions into anchors and restores them after translation.

    Anchor format: ⟪CODE_<n>⟫ where n counts up from 0 within one extract()
    call. The brackets are outside the markdown syntax set, so anchors never
    look like links, emphasis or code to the translation service.

    The codec keeps no state between calls; one instance can serve many
    documents, including concurrently.
    """

    # Fenced blocks: opening fence run (3+ backticks or tildes), optional info
    # string, body, and a closing line holding the same run at the same
    # indentation and nothing else
    FENCED_PATTERN = regex.compile(
        r'^(?P<indent> *)(?P<fence>`{3,}(?!`)|~{3,}(?!~))(?P<lang>[\w+-]*)[^\n]*\n'
        r'(?P<code>.*?)(?<=\n)(?P=indent)(?P=fence)[ \t]*$',
        regex.DOTALL | regex.MULTILINE
    )

    # Inline code: `code`
    INLINE_PATTERN = regex.compile(r'`([^`\n]+?)`')

    ANCHOR_PATTERN = regex.compile(
        regex.escape(ANCHOR_PREFIX) + r'\d+' + regex.escape(ANCHOR_SUFFIX)
    )

    def __init__(self, extract_inline: bool = False):
        """
        Args:
            extract_inline: Also replace inline `code` spans with anchors.
        """
        self.extract_inline = extract_inline

    @staticmethod
    def make_anchor(index: int) -> str:
        return f"{ANCHOR_PREFIX}{index}{ANCHOR_SUFFIX}"

    def extract(self, document: str) -> ExtractionResult:
        """
        Replace code regions with anchors.

        Fenced blocks are extracted first; inline spans (when enabled) are
        looked up in what remains. Text outside the matches, including the
        newlines and indentation around a block, is left untouched.

        Args:
            document: Raw markdown.

        Returns:
            ExtractionResult with the clean text and blocks in anchor order.
        """
        if not document:
            return ExtractionResult(clean_text="", blocks=[])

        counter = itertools.count()
        blocks: List[ExtractedBlock] = []

        def replace_fenced(match) -> str:
            anchor = self.make_anchor(next(counter))
            blocks.append(ExtractedBlock(
                original_text=match.group(0),
                anchor=anchor,
                kind=BlockKind.FENCED,
                language=match.group("lang") or "",
            ))
            return anchor

        def replace_inline(match) -> str:
            anchor = self.make_anchor(next(counter))
            blocks.append(ExtractedBlock(
                original_text=match.group(0),
                anchor=anchor,
                kind=BlockKind.INLINE,
            ))
            return anchor

        clean_text = self.FENCED_PATTERN.sub(replace_fenced, document)
        if self.extract_inline:
            clean_text = self.INLINE_PATTERN.sub(replace_inline, clean_text)

        return ExtractionResult(clean_text=clean_text, blocks=blocks)

    def restore(self, translated_text: str, blocks: List[ExtractedBlock]) -> str:
        """
        Put original code back in place of every anchor occurrence.

        Anchors are resolved in a single pass over the translated text, so
        anchor-shaped text inside restored code is never substituted again.
        Replacement text is inserted literally. Unknown anchors are left as is.
        """
        if not translated_text or not blocks:
            return translated_text

        table = {block.anchor: block.original_text for block in blocks}
        return self.ANCHOR_PATTERN.sub(
            lambda match: table.get(match.group(0), match.group(0)),
            translated_text
        )

    def validate_anchors(self, translated_text: str, blocks: List[ExtractedBlock]) -> List[str]:
        """Anchors that should be in the translated text but are not."""
        return [block.anchor for block in blocks if block.anchor not in translated_text]

    def find_unexpected_anchors(self, translated_text: str, blocks: List[ExtractedBlock]) -> List[str]:
        """
        Anchor-shaped tokens that match no extracted block.

        These show up when the translation service rewrites a placeholder
        (e.g. renumbers it) instead of passing it through.
        """
        expected = {block.anchor for block in blocks}
        unexpected: List[str] = []
        for match in self.ANCHOR_PATTERN.finditer(translated_text):
            anchor = match.group(0)
            if anchor not in expected and anchor not in unexpected:
                unexpected.append(anchor)
        return unexpected

    def check_restoration(self, final_text: str, blocks: List[ExtractedBlock]) -> bool:
        """
        True iff every original block is present verbatim and no
        anchor-shaped token is left over.

        Anchor-shaped text that is part of a restored code block (docs
        about anchors, for instance) does not count as left over.
        """
        if any(block.original_text not in final_text for block in blocks):
            return False

        remaining = final_text
        for original in sorted({b.original_text for b in blocks}, key=len, reverse=True):
            remaining = remaining.replace(original, "")

        return self.ANCHOR_PATTERN.search(remaining) is None

    def restoration_report(
        self,
        translated_text: str,
        blocks: List[ExtractedBlock],
        final_text: Optional[str] = None
    ) -> Dict:
        """
        Summary of anchor integrity for logging and statistics.

        Args:
            translated_text: Joined translator output, before restore().
            blocks: Blocks from extract().
            final_text: Restored text; computed when not given.
        """
        if final_text is None:
            final_text = self.restore(translated_text, blocks)

        missing = self.validate_anchors(translated_text, blocks)
        unexpected = self.find_unexpected_anchors(translated_text, blocks)

        return {
            'total_expected_anchors': len(blocks),
            'missing_anchors': missing,
            'missing_anchors_count': len(missing),
            'unexpected_anchors': unexpected,
            'unexpected_anchors_count': len(unexpected),
            'restoration_success': self.check_restoration(final_text, blocks),
        }
