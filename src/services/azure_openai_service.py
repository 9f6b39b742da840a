"""
Simple AzureOpenAI service

Example:
  from services.azure_openai_service import AzureOpenAIService

  # Async client for the agents SDK (gpt-4.1-mini)
  client = AzureOpenAIService.get_async_client()

  # Vision deployment for image extraction
  client = AzureOpenAIService.get_async_client(model="gpt-4o")
"""

from openai import (
    APIConnectionError,
    APIError,
    AsyncAzureOpenAI,
    AuthenticationError,
    PermissionDeniedError,
    RateLimitError,
)

from common.config import config
from common.logging import get_logger

logger = get_logger(__name__)


class AzureOpenAIService:
    MODELS_API_VERSIONS: dict[str, str] = {
        "gpt-4o-mini": "2024-12-01-preview",
        "gpt-4o": "2024-12-01-preview",  # vision capable
        "gpt-4.1-mini": "2025-01-01-preview",
    }

    DEFAULT_MODEL = "gpt-4.1-mini"

    _async_clients: dict[str, AsyncAzureOpenAI] = {}

    @classmethod
    def get_async_client(cls, model: str = DEFAULT_MODEL) -> AsyncAzureOpenAI:
        """Get async Azure OpenAI client for specified model (cached)"""
        logger.info(f"Getting async client for model: {model}")

        if model not in cls._async_clients:
            cls._async_clients[model] = AsyncAzureOpenAI(**cls._client_kwargs(model))

        return cls._async_clients[model]

    @classmethod
    def _client_kwargs(cls, model: str) -> dict:
        api_key = config.azure_openai_api_key.get_secret_value()
        if not api_key:
            raise ValueError("AZURE_OPENAI_API_KEY environment variable is required")

        if not config.azure_openai_endpoint:
            raise ValueError("AZURE_OPENAI_ENDPOINT environment variable is required")

        if model not in cls.MODELS_API_VERSIONS:
            available = ", ".join(cls.MODELS_API_VERSIONS.keys())
            raise ValueError(f"Unknown model '{model}'. Available models: {available}")

        return {
            "api_key": api_key,
            "api_version": cls.MODELS_API_VERSIONS[model],
            "azure_endpoint": config.azure_openai_endpoint,
        }

    @classmethod
    def clear_cache(cls) -> None:
        cls._async_clients.clear()


def format_openai_error(e: Exception) -> str:
    """Extract a clean error message from OpenAI SDK exceptions."""
    if isinstance(e, PermissionDeniedError):
        return f"Azure OpenAI access denied: {e.message}"
    elif isinstance(e, AuthenticationError):
        return f"Azure OpenAI authentication failed: {e.message}"
    elif isinstance(e, RateLimitError):
        return f"Azure OpenAI rate limit exceeded: {e.message}"
    elif isinstance(e, APIConnectionError):
        return f"Cannot connect to Azure OpenAI: {e.message}"
    elif isinstance(e, APIError):
        return f"Azure OpenAI API error ({getattr(e, 'status_code', 'n/a')}): {e.message}"

    return f"{type(e).__name__}: {e}"
