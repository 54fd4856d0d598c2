#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from typing import Optional, List
from pydantic_settings import BaseSettings

from .constants import (
    BATCH_CHUNK_SIZE,
    BATCH_DELAY_BETWEEN_CHUNKS_MS,
    BATCH_MAX_RETRIES,
    BATCH_RETRY_DELAY_MS,
    BATCH_MAX_CONCURRENT_PROCESSING,
    BATCH_GENERATE_FRONT_MATTER,
    BATCH_GENERATE_WIKILINKS,
    STATS_SAVE_DEBOUNCE_MS,
    STATS_HISTORY_LIMIT,
    STATS_FILE,
    DEFAULT_PROVIDER,
    DEFAULT_MODEL,
)


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    # ========== API Keys ==========
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # ========== Provider & Model ==========
    provider: str = DEFAULT_PROVIDER  # claude | openai
    model: str = DEFAULT_MODEL  # empty: provider default

    # ========== Batch Processing ==========
    chunk_size: int = BATCH_CHUNK_SIZE
    delay_between_chunks_ms: int = BATCH_DELAY_BETWEEN_CHUNKS_MS
    max_retries: int = BATCH_MAX_RETRIES
    retry_delay_ms: int = BATCH_RETRY_DELAY_MS
    max_concurrent_processing: int = BATCH_MAX_CONCURRENT_PROCESSING
    generate_front_matter: bool = BATCH_GENERATE_FRONT_MATTER
    generate_wikilinks: bool = BATCH_GENERATE_WIKILINKS

    # ========== Front Matter ==========
    custom_tags: List[str] = []
    custom_properties: List[str] = []  # "name: description" entries

    # ========== Persistence ==========
    stats_file: Path = BASE_DIR / STATS_FILE
    stats_save_debounce_ms: int = STATS_SAVE_DEBOUNCE_MS
    stats_history_limit: int = STATS_HISTORY_LIMIT

    # ========== Directories ==========
    vault_dir: Optional[Path] = None

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields from .env that aren't defined in model

    def get_api_key(self) -> str:
        """Get API key based on provider"""
        if self.provider == "openai":
            if not self.openai_api_key:
                raise ValueError("OPENAI_API_KEY not set in .env")
            return self.openai_api_key
        elif self.provider == "claude":
            if not self.anthropic_api_key:
                raise ValueError("ANTHROPIC_API_KEY not set in .env")
            return self.anthropic_api_key
        else:
            raise ValueError(f"Unsupported provider: {self.provider}")

    def to_processing_options(self):
        """Build validated ProcessingOptions from the batch settings."""
        from graphweaver.batch.models import ProcessingOptions

        options = ProcessingOptions(
            chunk_size=self.chunk_size,
            delay_between_chunks_ms=self.delay_between_chunks_ms,
            max_retries=self.max_retries,
            retry_delay_ms=self.retry_delay_ms,
            generate_front_matter=self.generate_front_matter,
            generate_wikilinks=self.generate_wikilinks,
            max_concurrent_processing=self.max_concurrent_processing,
        )
        options.validate()
        return options


# Global settings instance
settings = Settings()
