"""Protocol for language model providers."""

from typing import Protocol


class LLMProvider(Protocol):
    """Protocol defining the interface for language model providers."""

    async def initialize(self) -> None:
        """Initialize the provider."""
        ...

    async def shutdown(self) -> None:
        """Clean up resources."""
        ...

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int = 1000,
    ) -> str:
        """Run one chat completion in JSON mode and return the raw text.

        The text is expected, but not guaranteed, to be a JSON object.
        Raises ``LLMProviderError`` when the call fails or returns nothing.
        """
        ...

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        ...
