"""
Pre-translation checks of a markdown source file.

Problems found here are not fixed; they are reported so a broken source is
not mistaken for a translation failure later on. Fenced code is skipped, so
`#include` or `a[i][j]` inside a code sample is never flagged.
"""

import re
from dataclasses import dataclass, field
from typing import List

from config.constants import LINT_MAX_LINE_LENGTH
from config.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class MarkdownLintResult:
    """Lint findings of one file"""
    is_valid: bool
    file_path: str
    issues: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    content_length: int = 0

    @property
    def has_problems(self) -> bool:
        return bool(self.issues or self.warnings)

    def summary(self) -> str:
        if not self.has_problems:
            return "✅ Valid markdown file"

        parts = []
        if self.issues:
            parts.append(f"{len(self.issues)} critical issue{'s' if len(self.issues) > 1 else ''}")
        if self.warnings:
            parts.append(f"{len(self.warnings)} warning{'s' if len(self.warnings) > 1 else ''}")
        return f"⚠️ {', '.join(parts)}"

    def log_details(self):
        logger.info(f"Markdown lint for: {self.file_path} ({self.content_length / 1024:.1f} KB) - {self.summary()}")
        for issue in self.issues:
            logger.warning(f"  Issue: {issue}")
        for warning in self.warnings:
            logger.info(f"  Warning: {warning}")


class MarkdownLinter:
    """Checks links and headers of a markdown document"""

    INLINE_LINK_PATTERN = re.compile(r'\[([^\]]*)\]\(([^)]*)\)')
    REFERENCE_LINK_PATTERN = re.compile(r'\[([^\]]+)\]\[([^\]]*)\]')
    REFERENCE_DEF_PATTERN = re.compile(r'^\s*\[([^\]]+)\]:\s*(.+)', re.MULTILINE)
    INLINE_CODE_PATTERN = re.compile(r'`[^`\n]+`')
    FENCE_PATTERN = re.compile(r'^ *(```|~~~)')

    HEADER_NO_SPACE_PATTERN = re.compile(r'^#{1,6}[^#\s]')
    HEADER_TOO_DEEP_PATTERN = re.compile(r'^#{7,}')

    def __init__(self, max_line_length: int = LINT_MAX_LINE_LENGTH):
        self.max_line_length = max_line_length

    def lint(self, content: str, file_path: str = "") -> MarkdownLintResult:
        issues: List[str] = []
        warnings: List[str] = []

        if not content.strip():
            issues.append("File is empty or contains only whitespace")
        else:
            prose_lines = self._prose_lines(content)
            self._check_line_lengths(content, warnings)
            self._check_links(prose_lines, issues, warnings)
            self._check_headers(prose_lines, issues, warnings)

        return MarkdownLintResult(
            is_valid=not issues,
            file_path=file_path,
            issues=issues,
            warnings=warnings,
            content_length=len(content),
        )

    def _prose_lines(self, content: str) -> List[tuple]:
        """(line number, text) of lines outside fenced code, inline code removed"""
        result = []
        open_fence = None
        for number, line in enumerate(content.split("\n"), start=1):
            fence = self.FENCE_PATTERN.match(line)
            if fence:
                if open_fence is None:
                    open_fence = fence.group(1)
                elif fence.group(1) == open_fence:
                    open_fence = None
                continue
            if open_fence is None:
                result.append((number, self.INLINE_CODE_PATTERN.sub('', line)))
        return result

    def _check_line_lengths(self, content: str, warnings: List[str]):
        for number, line in enumerate(content.split("\n"), start=1):
            if len(line) > self.max_line_length:
                warnings.append(
                    f"Line {number} is extremely long ({len(line)} chars) - might cause processing issues"
                )

    def _check_links(self, prose_lines, issues: List[str], warnings: List[str]):
        text = "\n".join(line for _, line in prose_lines)

        for match in self.INLINE_LINK_PATTERN.finditer(text):
            if not match.group(1):
                warnings.append(f"Empty link text found: {match.group(0)}")
            if not match.group(2):
                warnings.append(f"Empty link URL found: {match.group(0)}")

        defined_refs = {
            match.group(1).strip().lower()
            for match in self.REFERENCE_DEF_PATTERN.finditer(text)
        }
        for match in self.REFERENCE_LINK_PATTERN.finditer(text):
            ref_id = match.group(2).strip().lower() or match.group(1).strip().lower()
            if ref_id not in defined_refs:
                issues.append(
                    f"Undefined reference link: {match.group(0)} - missing definition for \"{ref_id}\""
                )

        open_brackets = text.count('[')
        close_brackets = text.count(']')
        if open_brackets != close_brackets:
            issues.append(f"Mismatched link brackets: {open_brackets} opening, {close_brackets} closing")

        if len(re.findall(r'\]\(', text)) != len(re.findall(r'\]\([^)]*\)', text)):
            issues.append("Mismatched link parentheses after brackets")

    def _check_headers(self, prose_lines, issues: List[str], warnings: List[str]):
        for number, line in prose_lines:
            if self.HEADER_TOO_DEEP_PATTERN.match(line):
                issues.append(f"Line {number}: Invalid header level (more than 6 #): \"{line}\"")
            elif self.HEADER_NO_SPACE_PATTERN.match(line):
                warnings.append(f"Line {number}: Header missing space after # symbols: \"{line}\"")
