"""
Data models for media generation.

MediaHandle wraps the temporary file holding generated bytes. AttachmentSink
is the capability callers pass in to take ownership of those bytes.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import IO, Protocol

from integrations.shared.errors import (
    ProviderError,
    ProviderRejection,
    ProviderSoftError,
    TransportError,
)


class MediaKind(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"


@dataclass(frozen=True)
class AttachmentRef:
    """Reference to media stored by an AttachmentSink."""

    key: str
    filename: str
    content_type: str
    byte_size: int


class AttachmentSink(Protocol):
    """Takes ownership of generated media."""

    def write(self, stream: IO[bytes], *, mime_type: str, filename: str) -> AttachmentRef:
        ...


class MediaHandle:
    """Generated media backed by a temporary file.

    The caller owns the handle and must close it; use it as a context
    manager. Closing releases the temporary file.
    """

    def __init__(
        self,
        file: IO[bytes],
        *,
        kind: MediaKind,
        mime_type: str,
        filename: str,
        content_length: int,
    ) -> None:
        self._file = file
        self.kind = kind
        self.mime_type = mime_type
        self.filename = filename
        self.content_length = content_length

    @property
    def file(self) -> IO[bytes]:
        return self._file

    @property
    def closed(self) -> bool:
        return self._file.closed

    def read(self) -> bytes:
        self._file.seek(0)
        data = self._file.read()
        self._file.seek(0)
        return data

    def save(self, path: str | Path) -> Path:
        """Copy the media to ``path`` and return it."""
        target = Path(path)
        self._file.seek(0)
        with target.open("wb") as out:
            shutil.copyfileobj(self._file, out)
        self._file.seek(0)
        return target

    def attach(self, sink: AttachmentSink) -> AttachmentRef:
        """Hand the media to ``sink`` and release the temporary file."""
        try:
            self._file.seek(0)
            return sink.write(self._file, mime_type=self.mime_type, filename=self.filename)
        finally:
            self.close()

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> MediaHandle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"MediaHandle(kind={self.kind.value!r}, mime_type={self.mime_type!r}, "
            f"content_length={self.content_length})"
        )


class GenerationError(ProviderError):
    """Base exception for media generation errors."""


class GenerationTransportError(GenerationError, TransportError):
    """Network failure talking to the generation provider."""


class GenerationRejection(GenerationError, ProviderRejection):
    """Non-success HTTP status from the generation provider."""


class GenerationSoftError(GenerationError, ProviderSoftError):
    """Success status with an embedded provider error object."""
