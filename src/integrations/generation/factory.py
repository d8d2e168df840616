"""
Factory for media generation clients.
"""

from __future__ import annotations

from functools import lru_cache

import httpx

from integrations.generation.config import GenerationConfig
from integrations.generation.config import get_generation_config as _load_generation_config
from integrations.generation.models import GenerationError
from integrations.generation.openai_client import OpenAIMediaClient
from integrations.shared.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_generation_config() -> GenerationConfig:
    """Return the process-wide GenerationConfig, loaded on first use."""
    return _load_generation_config()


def create_media_client(
    config: GenerationConfig | None = None,
    http_client: httpx.Client | None = None,
) -> OpenAIMediaClient:
    """Create an OpenAI media client.

    Raises:
        GenerationError: If no API key is configured.
    """
    cfg = config or get_generation_config()

    if not cfg.api_key:
        raise GenerationError(
            "API key required for OpenAI. "
            "Set OPENAI_API_KEY environment variable or pass a GenerationConfig.",
            error_code="MISSING_API_KEY",
        )

    logger.info(
        "Creating media generation client",
        extra={
            "image_model": cfg.image_model,
            "speech_model": cfg.speech_model,
            "base_url": cfg.base_url,
        },
    )
    return OpenAIMediaClient(cfg, http_client=http_client)
