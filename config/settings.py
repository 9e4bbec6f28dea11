#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_MAX_CHUNK_BYTES,
    DEFAULT_MAX_CONCURRENT_CHUNKS,
    DEFAULT_MAX_CONCURRENT_FILES,
    MAX_KB_SIZE,
    TRANSLATED_SIGNATURE,
    TRANSLATION_TEMPERATURE,
    TRANSLATION_TIMEOUT_SECONDS,
    TRANSLATION_MAX_RETRIES,
    TRANSLATION_RETRY_DELAY,
)


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Allow extra fields from .env that aren't defined in model
    )

    # ========== Translation Service ==========
    api_key: str = ""
    api_base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    temperature: float = TRANSLATION_TEMPERATURE
    request_timeout: float = TRANSLATION_TIMEOUT_SECONDS
    max_retries: int = TRANSLATION_MAX_RETRIES
    retry_delay: int = TRANSLATION_RETRY_DELAY

    # ========== Languages ==========
    source_lang: str = "en"
    target_lang: str = "pt-BR"

    # ========== Pipeline Limits ==========
    max_chunk_bytes: int = DEFAULT_MAX_CHUNK_BYTES
    max_concurrent_chunks: int = DEFAULT_MAX_CONCURRENT_CHUNKS
    max_concurrent_files: int = DEFAULT_MAX_CONCURRENT_FILES
    max_kb_size: int = MAX_KB_SIZE
    extract_inline_code: bool = False  # Inline `code` stays in the text by default

    # ========== Behaviour ==========
    show_progress: bool = False
    translated_signature: str = TRANSLATED_SIGNATURE
    save_rejected: bool = True  # Write *_structure_invalid.md / *_link_invalid.md

    def validate_limits(self) -> None:
        """Fail fast on limits the pipeline cannot work with"""
        from md_translator.exceptions import ConfigurationError

        for name in ("max_chunk_bytes", "max_concurrent_chunks", "max_concurrent_files"):
            value = getattr(self, name)
            if value <= 0:
                raise ConfigurationError(f"{name} must be greater than 0, got: {value}")

    def get_api_key(self) -> str:
        """Get API key for the translation service"""
        if not self.api_key:
            raise ValueError("API_KEY not set in .env")
        return self.api_key

    def print_config(self):
        """Print configuration summary"""
        print("\n" + "=" * 70)
        print("CONFIGURATION")
        print("=" * 70)
        print(f"Model:           {self.model}")
        print(f"Languages:       {self.source_lang} -> {self.target_lang}")
        print(f"Max chunk bytes: {self.max_chunk_bytes}")
        print(f"Chunk workers:   {self.max_concurrent_chunks}")
        print(f"File workers:    {self.max_concurrent_files}")
        print(f"Inline code:     {'extracted' if self.extract_inline_code else 'kept'}")
        print("=" * 70 + "\n")


# Global settings instance
settings = Settings()
