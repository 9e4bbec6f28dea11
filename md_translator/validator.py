#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Post-translation validation of markdown structure and reference links.

Three validators:
- MarkdownLinkValidator: reference-style links [text][ref] still resolve
- MarkdownStructureValidator: ATX header counts per level are unchanged
- DocumentValidator: runs both and returns a ValidationVerdict

Code samples are stripped before links are collected, so a `[a][b]` inside
a fenced block or an inline code span never counts as a link.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Set

from config.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ReferenceLinkInfo:
    """Reference links of one document"""
    references: Set[str] = field(default_factory=set)  # refs used as [text][ref]
    definitions: Dict[str, str] = field(default_factory=dict)  # [ref]: url

    @property
    def undefined_references(self) -> Set[str]:
        return {ref for ref in self.references if ref not in self.definitions}


@dataclass
class LinkCheckResult:
    """Outcome of comparing the links of an original and a translated document"""
    issues: List[str]
    warnings: List[str]
    original_info: ReferenceLinkInfo
    translated_info: ReferenceLinkInfo

    @property
    def is_valid(self) -> bool:
        return not self.issues

    def __str__(self) -> str:
        lines = ["LinkCheckResult:", f"  Valid: {self.is_valid}"]
        if self.issues:
            lines.append(f"  Issues: {'; '.join(self.issues)}")
        if self.warnings:
            lines.append(f"  Warnings: {'; '.join(self.warnings)}")
        return "\n".join(lines)


@dataclass
class ValidationVerdict:
    """Acceptance decision for one translated document"""
    structural_issues: List[str] = field(default_factory=list)
    link_issues: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return not self.structural_issues and not self.link_issues

    @property
    def issues(self) -> List[str]:
        return self.structural_issues + self.link_issues

    def to_dict(self) -> Dict:
        return {
            'accepted': self.accepted,
            'structural_issues': list(self.structural_issues),
            'link_issues': list(self.link_issues),
            'warnings': list(self.warnings),
        }


def _sorted_join(refs) -> str:
    return ", ".join(sorted(refs))


class MarkdownLinkValidator:
    """Checks that reference-style links survive translation"""

    REFERENCE_LINK_PATTERN = re.compile(r'\[([^\[\]]+)\]\[([^\[\]]*)\]')
    LINK_DEFINITION_PATTERN = re.compile(r'^\s*\[([^\]]+)\]:\s*(.+)$', re.MULTILINE)

    HTML_COMMENT_PATTERN = re.compile(r'<!--.*?-->', re.DOTALL)
    PRE_BLOCK_PATTERN = re.compile(r'<pre.*?</pre>', re.DOTALL)
    FENCED_CODE_PATTERN = re.compile(r'(```|~~~).*?\1', re.DOTALL)
    INLINE_CODE_PATTERN = re.compile(r'`[^`]+`')

    def _strip_code_and_comments(self, content: str) -> str:
        cleaned = self.HTML_COMMENT_PATTERN.sub('', content)
        cleaned = self.PRE_BLOCK_PATTERN.sub('', cleaned)
        return self.FENCED_CODE_PATTERN.sub('', cleaned)

    def extract_info(self, markdown: str) -> ReferenceLinkInfo:
        """
        Collect reference usages and definitions.

        Refs are lowercased and trimmed. A shortcut usage [text][] refers to
        its own text. Definitions keep their first URL.
        """
        without_blocks = self._strip_code_and_comments(markdown)
        # Definitions may name inline code ([`Foo`]: url), so only usages are
        # looked up with inline code removed
        without_code = self.INLINE_CODE_PATTERN.sub('', without_blocks)

        info = ReferenceLinkInfo()

        for match in self.REFERENCE_LINK_PATTERN.finditer(without_code):
            reference = match.group(2).lower().strip()
            if not reference:
                reference = match.group(1).lower().strip()
            info.references.add(reference)

        for match in self.LINK_DEFINITION_PATTERN.finditer(without_blocks):
            reference = match.group(1).lower().strip()
            url = match.group(2).strip()
            if url and reference not in info.definitions:
                info.definitions[reference] = url

        return info

    def check_links(self, original: str, translated: str) -> LinkCheckResult:
        """
        Compare the reference links of both documents.

        Issues (block acceptance):
        - a translated usage has no definition although the original both
          used and defined that ref
        - a definition of the original is gone from the translation

        Warnings: lost or changed reference counts, unused definitions, and
        undefined refs the translation did not newly break.
        """
        original_info = self.extract_info(original)
        translated_info = self.extract_info(translated)

        issues: List[str] = []
        warnings: List[str] = []

        undefined = translated_info.undefined_references
        broken = {
            ref for ref in undefined
            if ref in original_info.references and ref in original_info.definitions
        }
        if broken:
            issues.append(f"Broken references (no definition found): {_sorted_join(broken)}")

        missing_definitions = set(original_info.definitions) - set(translated_info.definitions)
        if missing_definitions:
            issues.append(f"Missing link definitions: {_sorted_join(missing_definitions)}")

        already_broken = undefined & original_info.undefined_references
        if already_broken:
            warnings.append(
                f"References without definition in the original too: {_sorted_join(already_broken)}"
            )

        introduced = undefined - broken - already_broken
        if introduced:
            warnings.append(f"Undefined references introduced by translation: {_sorted_join(introduced)}")

        original_count = len(original_info.references)
        translated_count = len(translated_info.references)
        if original_count and not translated_count:
            warnings.append("All reference links were lost in translation")
        elif original_count != translated_count:
            warnings.append(f"Reference count changed: {original_count} -> {translated_count}")

        unused = set(translated_info.definitions) - translated_info.references
        if unused:
            warnings.append(f"Unused link definitions: {_sorted_join(unused)}")

        return LinkCheckResult(
            issues=issues,
            warnings=warnings,
            original_info=original_info,
            translated_info=translated_info,
        )


class MarkdownStructureValidator:
    """Compares header structure without building a markdown AST"""

    HEADER_PATTERN = re.compile(r'^ {0,3}(#{1,6})(?:[ \t]|$)')
    FENCE_PATTERN = re.compile(r'^ *(`{3,}|~{3,})(.*)$')

    def header_counts(self, text: str) -> Dict[int, int]:
        """Number of ATX headers per level (1-6), fenced code excluded."""
        counts: Counter = Counter()
        open_fence = None

        for line in text.split("\n"):
            fence = self.FENCE_PATTERN.match(line)
            if fence:
                if open_fence is None:
                    open_fence = fence.group(1)
                elif fence.group(1) == open_fence and not fence.group(2).strip():
                    # Only a bare fence of the same run closes the block
                    open_fence = None
                continue
            if open_fence is not None:
                continue

            header = self.HEADER_PATTERN.match(line)
            if header:
                counts[len(header.group(1))] += 1

        return dict(counts)

    def check_structure(self, original: str, translated: str) -> bool:
        """True iff both documents have the same header count at every level."""
        return self.header_counts(original) == self.header_counts(translated)

    def describe_mismatch(self, original: str, translated: str) -> List[str]:
        """One line per header level whose count differs."""
        original_counts = self.header_counts(original)
        translated_counts = self.header_counts(translated)

        mismatches = []
        for level in sorted(set(original_counts) | set(translated_counts)):
            before = original_counts.get(level, 0)
            after = translated_counts.get(level, 0)
            if before != after:
                mismatches.append(f"h{level}: {before} -> {after}")
        return mismatches


class DocumentValidator:
    """Runs structure and link validation for one translated document"""

    def __init__(self, link_validator=None, structure_validator=None):
        self.link_validator = link_validator or MarkdownLinkValidator()
        self.structure_validator = structure_validator or MarkdownStructureValidator()

    def validate(self, original: str, translated: str) -> ValidationVerdict:
        verdict = ValidationVerdict()

        if not self.structure_validator.check_structure(original, translated):
            mismatches = self.structure_validator.describe_mismatch(original, translated)
            verdict.structural_issues.append(
                f"Header structure changed: {', '.join(mismatches)}"
            )

        link_result = self.link_validator.check_links(original, translated)
        verdict.link_issues.extend(link_result.issues)
        verdict.warnings.extend(link_result.warnings)

        if not verdict.accepted:
            logger.warning(f"Validation rejected document: {'; '.join(verdict.issues)}")
        for warning in verdict.warnings:
            logger.debug(f"Validation warning: {warning}")

        return verdict
