"""Factory for creating and managing search providers."""

from typing import Dict, Optional, Type

from pydantic import BaseModel

from ...domain.ports.search_provider import SearchProvider
from .serper_adapter import SerperConfig, SerperSearchAdapter
from .tavily_adapter import TavilyConfig, TavilySearchAdapter


class SearchProviderFactory:
    """Factory for creating and managing search providers.

    This factory maintains a registry of available search providers
    and handles their lifecycle (initialization, shutdown).
    """

    def __init__(self):
        """Initialize the factory."""
        self._provider_registry: Dict[str, Type[SearchProvider]] = {}
        self._config_types: Dict[str, Type[BaseModel]] = {}
        self._active_providers: Dict[str, SearchProvider] = {}

        # Register default providers
        self.register_provider("serper", SerperSearchAdapter, SerperConfig)
        self.register_provider("tavily", TavilySearchAdapter, TavilyConfig)

    def register_provider(
        self,
        name: str,
        provider_class: Type[SearchProvider],
        config_class: Optional[Type[BaseModel]] = None,
    ) -> None:
        """Register a new search provider class.

        Args:
            name: Unique identifier for the provider
            provider_class: The provider class to register
            config_class: Pydantic config model the class expects, if any
        """
        if name in self._provider_registry:
            raise ValueError(f"Provider {name} already registered")
        self._provider_registry[name] = provider_class
        if config_class is not None:
            self._config_types[name] = config_class

    async def create_provider(self, name: str, **config) -> SearchProvider:
        """Create and initialize a search provider instance.

        An already active instance is returned as is.

        Args:
            name: Name of the provider to create
            **config: Provider-specific configuration

        Returns:
            Initialized provider instance

        Raises:
            ValueError: If provider not found
            RuntimeError: If initialization fails
        """
        if name not in self._provider_registry:
            raise ValueError(f"Provider {name} not registered")
        if name in self._active_providers:
            return self._active_providers[name]

        provider_class = self._provider_registry[name]
        config_class = self._config_types.get(name)
        if config_class is not None:
            provider = provider_class(config=config_class(**config))
        else:
            provider = provider_class(**config)

        try:
            await provider.initialize()
        except Exception as e:
            raise RuntimeError(f"Failed to initialize provider {name}: {e}") from e
        self._active_providers[name] = provider
        return provider

    def get_provider(self, name: str) -> Optional[SearchProvider]:
        """Get an active provider instance by name."""
        return self._active_providers.get(name)

    async def shutdown_provider(self, name: str) -> None:
        """Shutdown a specific provider."""
        provider = self._active_providers.pop(name, None)
        if provider:
            await provider.shutdown()

    async def shutdown_all(self) -> None:
        """Shutdown all active providers."""
        for name in list(self._active_providers.keys()):
            await self.shutdown_provider(name)

    @property
    def available_providers(self) -> Dict[str, bool]:
        """Get dictionary of registered providers and their availability."""
        return {
            name: bool(self.get_provider(name))
            for name in self._provider_registry
        }
