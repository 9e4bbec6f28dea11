"""
MD Translator - Structure-preserving translation of markdown documents

Pipeline:
    extract code -> split by bytes -> translate concurrently -> join
    -> restore code -> validate headers and reference links

Usage:
    from md_translator import TranslationPipeline

    pipeline = TranslationPipeline()
    result = await pipeline.run(document, translate_one,
                                max_bytes=20 * 1024, concurrency_limit=10)
    if result.accepted:
        print(result.final_text)
"""

from .chunk import Chunk, utf8_size, utf16_size
from .exceptions import (
    MDTranslatorError,
    ConfigurationError,
    RestorationError,
    DocumentRejectedError,
)
from .placeholder_codec import (
    PlaceholderCodec,
    BlockKind,
    ExtractedBlock,
    ExtractionResult,
)
from .splitter import (
    MarkdownSplitter,
    SplittingStrategy,
    HeaderStrategy,
    ParagraphStrategy,
    LineStrategy,
)
from .dispatcher import BoundedDispatcher, ChunkTask, TaskStatus, DispatchStats
from .validator import (
    MarkdownLinkValidator,
    MarkdownStructureValidator,
    DocumentValidator,
    ValidationVerdict,
    LinkCheckResult,
    ReferenceLinkInfo,
)
from .statistics import PipelineStatistics
from .pipeline import TranslationPipeline, PipelineResult
from .markdown_lint import MarkdownLinter, MarkdownLintResult
from .document_processor import (
    DocumentProcessor,
    DocumentOutcome,
    DocumentStatus,
    BatchReport,
    stamp_signature,
)

__all__ = [
    # Values
    "Chunk",
    "utf8_size",
    "utf16_size",

    # Errors
    "MDTranslatorError",
    "ConfigurationError",
    "RestorationError",
    "DocumentRejectedError",

    # Placeholders
    "PlaceholderCodec",
    "BlockKind",
    "ExtractedBlock",
    "ExtractionResult",

    # Splitting
    "MarkdownSplitter",
    "SplittingStrategy",
    "HeaderStrategy",
    "ParagraphStrategy",
    "LineStrategy",

    # Dispatch
    "BoundedDispatcher",
    "ChunkTask",
    "TaskStatus",
    "DispatchStats",

    # Validation
    "MarkdownLinkValidator",
    "MarkdownStructureValidator",
    "DocumentValidator",
    "ValidationVerdict",
    "LinkCheckResult",
    "ReferenceLinkInfo",

    # Pipeline
    "PipelineStatistics",
    "TranslationPipeline",
    "PipelineResult",

    # Files
    "MarkdownLinter",
    "MarkdownLintResult",
    "DocumentProcessor",
    "DocumentOutcome",
    "DocumentStatus",
    "BatchReport",
    "stamp_signature",
]

__version__ = "1.0.0"
