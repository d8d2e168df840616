"""
OpenAI media generation client.

Images come back either inline (b64_json) or as a download URL depending on
model and response_format; both are accepted. Speech comes back as raw audio
bytes. Results are spooled into a temporary file that is released on every
error path.
"""

from __future__ import annotations

import base64
import binascii
import logging
import tempfile
from typing import Any

import anyio
import httpx

from integrations.generation.config import GenerationConfig, get_generation_config
from integrations.generation.models import (
    AttachmentRef,
    AttachmentSink,
    GenerationError,
    GenerationRejection,
    GenerationSoftError,
    GenerationTransportError,
    MediaHandle,
    MediaKind,
)
from integrations.shared.http import HTTPProviderClient
from integrations.shared.logging import get_logger, log_with_context

logger = get_logger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/png"


class OpenAIMediaClient(HTTPProviderClient):
    """Generates images and speech audio through the OpenAI HTTP API."""

    provider_name = "OpenAI"
    transport_error = GenerationTransportError
    rejection_error = GenerationRejection
    invalid_response_error = GenerationError

    def __init__(
        self,
        config: GenerationConfig | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._config = config or get_generation_config()
        super().__init__(
            http_client=http_client,
            timeout_seconds=self._config.http_timeout_seconds,
        )
        self._base_url = self._config.base_url.rstrip("/")

    @property
    def config(self) -> GenerationConfig:
        return self._config

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }

    def _rejection_message(self, error_data: dict[str, Any], response: httpx.Response) -> str:
        error = error_data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return f"OpenAI error {response.status_code}: {error['message']}"
        return f"OpenAI error {response.status_code}: {response.text}"

    # -- images ---------------------------------------------------------------

    def generate_image(
        self,
        prompt: str,
        size: str | None = None,
        sink: AttachmentSink | None = None,
    ) -> MediaHandle | AttachmentRef:
        """Generate an image for ``prompt``.

        Returns an open MediaHandle the caller must close, or, when ``sink``
        is given, the AttachmentRef the sink produced.
        """
        payload: dict[str, Any] = {
            "model": self._config.image_model,
            "prompt": prompt,
            "size": size or self._config.default_image_size,
        }
        if self._config.image_response_format:
            payload["response_format"] = self._config.image_response_format

        logger.info(
            "Requesting OpenAI image",
            extra={"model": payload["model"], "size": payload["size"], "prompt_length": len(prompt)},
        )

        response = self._request(
            "POST",
            f"{self._base_url}/images/generations",
            operation="generate_image",
            json=payload,
            headers=self._headers(),
        )
        content, mime_type = self._decode_image_response(response)

        return self._finish(
            content,
            kind=MediaKind.IMAGE,
            mime_type=mime_type,
            filename="openai.png",
            sink=sink,
        )

    def _decode_image_response(self, response: httpx.Response) -> tuple[bytes, str]:
        data = self._json_object(response, "generate_image")

        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            logger.error("OpenAI image generation returned an error", extra={"error": error})
            raise GenerationSoftError(
                message=f"Image generation failed: {message}",
                error_code=(error.get("code") if isinstance(error, dict) else None) or "PROVIDER_ERROR",
                provider_response=data,
            )

        items = data.get("data")
        first: dict[str, Any] = {}
        if isinstance(items, list) and items and isinstance(items[0], dict):
            first = items[0]

        b64 = first.get("b64_json")
        if isinstance(b64, str) and b64:
            try:
                return base64.b64decode(b64, validate=True), DEFAULT_IMAGE_MIME_TYPE
            except (binascii.Error, ValueError) as e:
                raise GenerationError(
                    message="OpenAI image payload is not valid base64",
                    error_code="INVALID_RESPONSE",
                ) from e

        url = first.get("url")
        if isinstance(url, str) and url:
            return self._download_image(url)

        raise GenerationError(
            message="OpenAI image response has neither b64_json nor url",
            error_code="EMPTY_RESPONSE",
            provider_response=data,
        )

    def _download_image(self, url: str) -> tuple[bytes, str]:
        logger.info("Downloading generated image")
        response = self._request("GET", url, operation="download_image")

        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        if not content_type.startswith("image/"):
            content_type = DEFAULT_IMAGE_MIME_TYPE
        return response.content, content_type

    # -- audio ----------------------------------------------------------------

    def generate_audio(
        self,
        text: str,
        voice: str | None = None,
        format: str | None = None,
        sink: AttachmentSink | None = None,
    ) -> MediaHandle | AttachmentRef:
        """Synthesize speech for ``text``; same return contract as generate_image."""
        voice = voice or self._config.default_voice
        audio_format = format or self._config.default_audio_format

        payload = {
            "model": self._config.speech_model,
            "voice": voice,
            "input": text,
            "response_format": audio_format,
        }

        logger.info(
            "Requesting OpenAI speech",
            extra={"model": payload["model"], "voice": voice, "format": audio_format, "text_length": len(text)},
        )

        response = self._request(
            "POST",
            f"{self._base_url}/audio/speech",
            operation="generate_audio",
            json=payload,
            headers=self._headers(),
        )

        return self._finish(
            response.content,
            kind=MediaKind.AUDIO,
            mime_type=f"audio/{audio_format}",
            filename=f"openai.{audio_format}",
            sink=sink,
        )

    # -- async wrappers -------------------------------------------------------

    async def generate_image_async(
        self,
        prompt: str,
        size: str | None = None,
        sink: AttachmentSink | None = None,
    ) -> MediaHandle | AttachmentRef:
        return await anyio.to_thread.run_sync(self.generate_image, prompt, size, sink)

    async def generate_audio_async(
        self,
        text: str,
        voice: str | None = None,
        format: str | None = None,
        sink: AttachmentSink | None = None,
    ) -> MediaHandle | AttachmentRef:
        return await anyio.to_thread.run_sync(self.generate_audio, text, voice, format, sink)

    # -- helpers --------------------------------------------------------------

    def _finish(
        self,
        content: bytes,
        *,
        kind: MediaKind,
        mime_type: str,
        filename: str,
        sink: AttachmentSink | None,
    ) -> MediaHandle | AttachmentRef:
        handle = self._spool(content, kind=kind, mime_type=mime_type, filename=filename)
        if sink is None:
            return handle

        ref = handle.attach(sink)
        log_with_context(
            logger,
            logging.INFO,
            "Attached generated media",
            kind=kind.value,
            key=ref.key,
            byte_size=ref.byte_size,
        )
        return ref

    def _spool(
        self,
        content: bytes,
        *,
        kind: MediaKind,
        mime_type: str,
        filename: str,
    ) -> MediaHandle:
        file = tempfile.SpooledTemporaryFile(
            max_size=self._config.spool_max_bytes,
            mode="w+b",
            prefix="openai",
        )
        try:
            file.write(content)
            file.seek(0)
        except BaseException:
            file.close()
            raise
        return MediaHandle(
            file,
            kind=kind,
            mime_type=mime_type,
            filename=filename,
            content_length=len(content),
        )

