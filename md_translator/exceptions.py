"""
Error taxonomy for the translation pipeline.

Chunk-level translation failures never surface as exceptions (the dispatcher
falls back to the source text). Only configuration problems raise from the
core; restoration and validation failures are reported on the result and
turned into exceptions by callers that opt into strict handling.
"""

from typing import Optional


class MDTranslatorError(Exception):
    """Base class for all md_translator errors"""


class ConfigurationError(MDTranslatorError, ValueError):
    """Invalid limit or setting, raised before any work is dispatched"""


class RestorationError(MDTranslatorError):
    """Placeholders were lost or corrupted by the translation service"""

    def __init__(self, message: str, missing_anchors=None, unexpected_anchors=None):
        super().__init__(message)
        self.missing_anchors = list(missing_anchors or [])
        self.unexpected_anchors = list(unexpected_anchors or [])


class DocumentRejectedError(MDTranslatorError):
    """Translated document failed structural or link validation"""

    def __init__(self, message: str, verdict=None, statistics=None, path: Optional[str] = None):
        super().__init__(message)
        self.verdict = verdict
        self.statistics = statistics
        self.path = path
