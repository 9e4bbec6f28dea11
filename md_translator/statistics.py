"""
PipelineStatistics - Snapshot of one pipeline run.

Built once at the end of TranslationPipeline.run() from values the pipeline
already holds; nothing here re-reads document content.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict


@dataclass(frozen=True)
class PipelineStatistics:
    """Counts and timings of a translation run"""
    # Original document
    original_bytes: int = 0
    original_code_units: int = 0

    # Extraction
    blocks_extracted: int = 0
    fenced_blocks: int = 0
    inline_blocks: int = 0
    clean_bytes: int = 0

    # Splitting
    total_chunks: int = 0
    average_chunk_bytes: int = 0
    max_chunk_bytes: int = 0
    min_chunk_bytes: int = 0

    # Translation
    translated_bytes: int = 0
    final_bytes: int = 0
    failed_chunks: int = 0

    # Performance
    elapsed_ms: int = 0
    bytes_per_second: float = 0.0

    # Integrity
    missing_anchors: int = 0
    unexpected_anchors: int = 0
    restoration_success: bool = True

    @property
    def elapsed_seconds(self) -> float:
        return self.elapsed_ms / 1000

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineStatistics":
        """Build from a to_dict() report; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def __str__(self) -> str:
        return (
            f"PipelineStatistics(original={self.original_bytes}B, "
            f"blocks={self.blocks_extracted}, chunks={self.total_chunks}, "
            f"failed={self.failed_chunks}, time={self.elapsed_ms}ms, "
            f"restoration={'ok' if self.restoration_success else 'FAILED'})"
        )
