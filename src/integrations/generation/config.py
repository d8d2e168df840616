"""
Media generation provider configuration.

Loaded from OPENAI_* environment variables (or .env) and frozen.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GenerationConfig(BaseSettings):
    """OpenAI media generation settings."""

    model_config = SettingsConfigDict(
        env_prefix="OPENAI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    api_key: str = Field(default="", repr=False)
    base_url: str = Field(default="https://api.openai.com/v1")

    image_model: str = Field(default="gpt-image-1")
    default_image_size: str = Field(default="1024x1024")
    # gpt-image-* always answers with b64_json and rejects this field;
    # set it ("b64_json" or "url") for dall-e models.
    image_response_format: str | None = Field(default=None)

    speech_model: str = Field(default="gpt-4o-mini-tts")
    default_voice: str = Field(default="alloy")
    default_audio_format: str = Field(default="mp3")

    http_timeout_seconds: float = Field(default=120.0, gt=0, le=600)

    # Generated media stays in memory up to this size, then spills to disk.
    spool_max_bytes: int = Field(default=8 * 1024 * 1024, ge=0)


def get_generation_config() -> GenerationConfig:
    return GenerationConfig()
