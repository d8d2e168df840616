"""
AttachmentSink implementations.
"""

from __future__ import annotations

import shutil
import threading
from pathlib import Path
from typing import IO
from uuid import uuid4

from integrations.generation.models import AttachmentRef
from integrations.shared.logging import get_logger

logger = get_logger(__name__)


class InMemoryAttachmentSink:
    """Keeps attachments as bytes, keyed by a generated id."""

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}
        self._refs: dict[str, AttachmentRef] = {}
        self._lock = threading.Lock()

    def write(self, stream: IO[bytes], *, mime_type: str, filename: str) -> AttachmentRef:
        data = stream.read()
        ref = AttachmentRef(
            key=uuid4().hex,
            filename=filename,
            content_type=mime_type,
            byte_size=len(data),
        )
        with self._lock:
            self._blobs[ref.key] = data
            self._refs[ref.key] = ref
        return ref

    def get(self, key: str) -> bytes | None:
        return self._blobs.get(key)

    @property
    def attachments(self) -> list[AttachmentRef]:
        return list(self._refs.values())


class DirectoryAttachmentSink:
    """Writes each attachment to its own file under ``root``."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, ref: AttachmentRef) -> Path:
        return self._root / ref.key

    def write(self, stream: IO[bytes], *, mime_type: str, filename: str) -> AttachmentRef:
        suffix = Path(filename).suffix
        key = f"{uuid4().hex}{suffix}"
        target = self._root / key

        with target.open("wb") as out:
            shutil.copyfileobj(stream, out)

        ref = AttachmentRef(
            key=key,
            filename=filename,
            content_type=mime_type,
            byte_size=target.stat().st_size,
        )
        logger.info(
            "Stored attachment",
            extra={"key": key, "content_type": mime_type, "byte_size": ref.byte_size},
        )
        return ref
