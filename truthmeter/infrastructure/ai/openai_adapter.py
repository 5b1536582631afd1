"""OpenAI implementation of the LLM provider interface."""

import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, Field

from ...domain.errors import LLMProviderError

logger = logging.getLogger(__name__)


class OpenAIConfig(BaseModel):
    """Configuration for the OpenAI adapter."""

    api_key: str = Field(..., description="OpenAI API key")
    model: str = Field(default="gpt-4o-mini", description="Chat model to use")
    temperature: float = Field(default=0.3, description="Temperature for responses")
    timeout: float = Field(default=30.0, description="API timeout in seconds")
    max_retries: int = Field(default=0, description="Client-level retries per call")


class OpenAIAdapter:
    """OpenAI implementation of the LLM provider interface."""

    def __init__(
        self,
        config: Optional[OpenAIConfig] = None,
        provider_name: str = "OpenAI",
    ):
        """Initialize the adapter."""
        self._config = config or OpenAIConfig(api_key="")
        self._name = provider_name
        self._client: Optional[AsyncOpenAI] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the API client."""
        if not self._config.api_key:
            raise ConnectionError("Failed to initialize OpenAI provider: OPENAI_API_KEY is required")

        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._config.api_key,
                timeout=self._config.timeout,
                max_retries=self._config.max_retries,
            )
        self._initialized = True

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int = 1000,
    ) -> str:
        """Run one JSON-mode chat completion and return its text."""
        if not self._client:
            raise RuntimeError("Provider not initialized")

        try:
            response = await self._client.chat.completions.create(
                model=self._config.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self._config.temperature,
                max_tokens=max_tokens,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise LLMProviderError(f"OpenAI request failed: {type(e).__name__}: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMProviderError("No response from OpenAI")
        return content

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.close()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the name of the AI provider."""
        return self._name

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None
