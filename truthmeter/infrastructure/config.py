"""Application configuration loaded from environment variables."""

import logging
import os
from typing import Any, Dict

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class AppConfig(BaseModel):
    """Configuration for the TruthMeter service.

    Every field can be set from the environment variable of the same name
    in upper case, e.g. ``SERPER_API_KEY`` or ``CACHE_TTL_DAYS``.
    """

    openai_api_key: str = Field(default="", description="OpenAI API key")
    openai_model: str = Field(default="gpt-4o-mini", description="Chat model for all analysis calls")
    openai_timeout: float = Field(default=30.0, gt=0, description="OpenAI request timeout in seconds")

    search_provider: str = Field(default="serper", description="Search provider: serper or tavily")
    serper_api_key: str = Field(default="", description="Serper API key")
    tavily_api_key: str = Field(default="", description="Tavily API key")
    search_timeout: float = Field(default=20.0, gt=0, description="Search request timeout in seconds")

    database_path: str = Field(default="./truthmeter.db", description="SQLite database file")
    cache_ttl_days: int = Field(default=7, ge=1, description="Days a cached analysis stays valid")
    cache_sweep_interval_seconds: int = Field(
        default=3600, ge=0, description="Seconds between expiry sweeps, 0 disables periodic sweeps"
    )

    target_sources: int = Field(default=100, ge=1, description="Sources to retrieve per claim")
    max_sources_per_category: int = Field(default=10, ge=1, description="Displayed sources per stance")
    enable_translations: bool = Field(default=True, description="Translate summaries")
    display_language: str = Field(default="en", description="Summary language shown by the CLI")

    log_level: str = Field(default="INFO", description="Root log level")

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        values: Dict[str, Any] = {
            name: os.environ[name.upper()]
            for name in cls.model_fields
            if os.environ.get(name.upper(), "").strip()
        }
        config = cls.model_validate(values)

        if not config.openai_api_key:
            logger.warning("⚠️ OPENAI_API_KEY not found in environment variables")
        if not config.search_api_key:
            logger.warning(f"⚠️ No API key configured for search provider '{config.search_provider}'")
        return config

    @property
    def search_api_key(self) -> str:
        """API key for the configured search provider."""
        return {
            "serper": self.serper_api_key,
            "tavily": self.tavily_api_key,
        }.get(self.search_provider.lower(), "")
