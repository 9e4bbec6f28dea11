"""
Pytest configuration and shared fixtures for MD Translator tests.
"""
import sys
import pytest
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import Settings
from md_translator.placeholder_codec import PlaceholderCodec
from md_translator.splitter import MarkdownSplitter
from md_translator.pipeline import TranslationPipeline


# ============================================================================
# Fixtures: Configuration & Settings
# ============================================================================

@pytest.fixture
def test_settings():
    """Settings with a fake API key and small limits."""
    return Settings(
        api_key="test_key",
        api_base_url="https://translate.test/v1",
        model="test-model",
        max_chunk_bytes=200,
        max_concurrent_chunks=4,
        max_concurrent_files=2,
        max_kb_size=28,
        retry_delay=0,
        show_progress=False,
    )


# ============================================================================
# Fixtures: Sample Data
# ============================================================================

@pytest.fixture
def sample_documents():
    """Markdown documents used across tests."""
    return {
        "plain": "# Title\n\nJust prose, no code at all.\n\nSecond paragraph.\n",
        "with_code": "# T\n\nUse `f()` here.\n\n```dart\nvoid f(){}\n```\n",
        "with_links": (
            "# Links\n\n"
            "See [the guide][guide] and [Flutter][].\n\n"
            "[guide]: https://example.com/guide\n"
            "[flutter]: https://flutter.dev\n"
        ),
        "mixed": (
            "# Guide\n\n"
            "Intro text.\n\n"
            "## Install\n\n"
            "Run this:\n\n"
            "```bash\npip install md-translator\n```\n\n"
            "## Use\n\n"
            "Call [the API][api].\n\n"
            "~~~python\nprint('hi')\n~~~\n\n"
            "[api]: https://example.com/api\n"
        ),
    }


@pytest.fixture
def header_sections_document():
    """100 header-delimited sections of ~60 bytes each."""
    return "".join(
        f"## Section {i}\n\nBody text for section number {i}.\n\n"
        for i in range(100)
    )


# ============================================================================
# Fixtures: Translators
# ============================================================================

@pytest.fixture
def identity_translator():
    """Async translator returning its input unchanged."""
    async def translate(text: str) -> str:
        return text
    return translate


@pytest.fixture
def upper_translator():
    """Async translator that uppercases prose but leaves anchors alone."""
    async def translate(text: str) -> str:
        return text.upper()
    return translate


# ============================================================================
# Fixtures: Core Components
# ============================================================================

@pytest.fixture
def codec():
    return PlaceholderCodec()


@pytest.fixture
def splitter():
    return MarkdownSplitter()


@pytest.fixture
def pipeline():
    return TranslationPipeline()
