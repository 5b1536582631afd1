"""Dependency injection configuration for hexagonal architecture."""

import asyncio
import logging
from datetime import timedelta
from functools import lru_cache
from typing import Dict, Optional

from dotenv import load_dotenv

from ..domain.services.claim_analyzer import ClaimAnalyzer
from ..domain.services.fact_check_orchestrator import FactCheckOrchestrator
from ..domain.services.source_retriever import SourceRetriever
from .ai.openai_adapter import OpenAIAdapter, OpenAIConfig
from .config import AppConfig
from .search.factory import SearchProviderFactory
from .storage.sqlite_store import SQLiteAnalysisStore

logger = logging.getLogger(__name__)

AI_PROVIDER = "openai"


class ServiceContainer:
    """Service container for dependency injection.

    The store is created eagerly. The search and AI providers need API keys
    and network clients, so they and the orchestrator are created on the
    first analysis request.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        """Initialize service container."""
        logger.info("🔧 Setting up service container...")
        self._config = config or AppConfig()
        self._store = SQLiteAnalysisStore(
            self._config.database_path,
            ttl=timedelta(days=self._config.cache_ttl_days),
        )
        self._search_factory = SearchProviderFactory()
        self._llm_provider: Optional[OpenAIAdapter] = None
        self._orchestrator: Optional[FactCheckOrchestrator] = None
        self._lock = asyncio.Lock()
        logger.info("✅ Service container setup completed")

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def store(self) -> SQLiteAnalysisStore:
        return self._store

    def startup(self) -> None:
        """Prepare the store and drop entries that expired while offline."""
        self._store.init_schema()
        self._store.delete_expired()

    async def _setup_providers(self):
        logger.info(f"🔎 Setting up search provider '{self._config.search_provider}'...")
        search_provider = await self._search_factory.create_provider(
            self._config.search_provider.lower(),
            api_key=self._config.search_api_key,
            timeout=self._config.search_timeout,
        )
        logger.info("✅ Search provider ready")

        logger.info("🤖 Setting up AI provider...")
        if self._llm_provider is None:
            llm_provider = OpenAIAdapter(
                OpenAIConfig(
                    api_key=self._config.openai_api_key,
                    model=self._config.openai_model,
                    timeout=self._config.openai_timeout,
                )
            )
            await llm_provider.initialize()
            self._llm_provider = llm_provider
        logger.info("✅ AI provider ready")
        return search_provider, self._llm_provider

    async def get_orchestrator(self) -> FactCheckOrchestrator:
        """Get the fact-check orchestrator, creating providers on first use.

        Raises:
            ValueError: If the configured search provider is unknown
            RuntimeError: If a provider could not be initialized
            ConnectionError: If the OpenAI key is missing
        """
        async with self._lock:
            if self._orchestrator is None:
                logger.info("🔧 Creating FactCheckOrchestrator with providers...")
                search_provider, llm_provider = await self._setup_providers()
                self._orchestrator = FactCheckOrchestrator(
                    retriever=SourceRetriever(search_provider),
                    analyzer=ClaimAnalyzer(
                        llm_provider,
                        enable_translations=self._config.enable_translations,
                    ),
                    store=self._store,
                    target_sources=self._config.target_sources,
                    max_sources_per_category=self._config.max_sources_per_category,
                )
        return self._orchestrator

    def provider_status(self) -> Dict[str, str]:
        """Names of the configured providers and whether they are ready."""
        search_name = self._config.search_provider.lower()
        search_ready = bool(self._search_factory.get_provider(search_name))
        ai_ready = self._llm_provider is not None and self._llm_provider.is_available
        return {
            "search_provider": f"{search_name} ({'ready' if search_ready else 'idle'})",
            "ai_provider": f"{AI_PROVIDER} ({'ready' if ai_ready else 'idle'})",
        }

    async def shutdown(self) -> None:
        """Close provider clients."""
        await self._search_factory.shutdown_all()
        if self._llm_provider is not None:
            await self._llm_provider.shutdown()
            self._llm_provider = None
        self._orchestrator = None
        logger.info("👋 Service container shut down")


@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance."""
    load_dotenv()
    return ServiceContainer(AppConfig.from_env())
